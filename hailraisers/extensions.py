"""Flask extensions for the application."""
from flask_wtf.csrf import CSRFProtect

from .box.places import PlacesClient

csrf = CSRFProtect()
places = PlacesClient()
