"""Global constants for the hailraisers application."""

# Collection names
BOXES_COLLECTION = "boxes"
HAILRAISERS_COLLECTION = "hailraisers"

# Box fields
BOX_NAME_MIN_LENGTH = 3
BOX_NAME_MAX_LENGTH = 50
BOX_NAME_PATTERN = r"^[\w '&.,()!/-]+$"
DEFAULT_COUNTRY_CODE = "US"

# Search
SEARCH_RESULT_LIMIT = 10
MIN_SEARCH_LENGTH = 3
SEARCH_QUERY_MAX_LENGTH = 100
PLACE_QUERY_PATTERN = r"^[a-zA-Z0-9' ]+$"

# Places API
PLACES_TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
PLACES_DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PLACES_SEARCH_TYPE = "gym"
PLACES_DETAIL_FIELDS = "formatted_phone_number,website,address_component"
PLACES_CACHE_TTL = 3600
PLACES_CACHE_SIZE = 256
PLACES_TIMEOUT = 10.0

# Hailraiser submission channels
CHANNEL_TABLET = "Tablet"
CHANNEL_WEBFORM = "Webform"

# Onboarding timings, in seconds
DEBOUNCE_SECONDS = 0.3
EXIT_DELAY_SECONDS = 5.0
RETRY_BASE_SECONDS = 1.0
MAX_SEARCH_RETRIES = 2
ERROR_RESET_SECONDS = 5.0
