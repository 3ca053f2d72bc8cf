"""Forms for the box blueprint."""

from flask_wtf import FlaskForm
from wtforms import Form, HiddenField, StringField
from wtforms.validators import DataRequired, Email, Length, Optional, Regexp, URL

from hailraisers.constants import PLACE_QUERY_PATTERN, SEARCH_QUERY_MAX_LENGTH


class BoxSearchForm(FlaskForm):
    """Query string form for the directory keyword search."""

    class Meta:
        csrf = False

    q = StringField(
        "Search",
        validators=[
            DataRequired(message="Search query cannot be empty."),
            Length(max=SEARCH_QUERY_MAX_LENGTH),
        ],
    )


class PlaceSearchForm(FlaskForm):
    """Query string form for the Google Places lookup."""

    class Meta:
        csrf = False

    q = StringField(
        "Search",
        validators=[
            DataRequired(message="Please enter a location to search."),
            Length(max=SEARCH_QUERY_MAX_LENGTH),
            Regexp(
                PLACE_QUERY_PATTERN,
                message="Search query can only contain alphanumeric characters, "
                "apostrophes, and spaces.",
            ),
        ],
    )


class EssentialsForm(Form):
    """Box Location sub-step: the box name and where it is."""

    name = StringField("Box Name *", render_kw={"placeholder": "Enter box name to search..."})
    address = StringField("Address", render_kw={"placeholder": "Full address"})
    country_code = HiddenField("Country")


class ContactInfoForm(Form):
    """Box Contact sub-step."""

    phone = StringField("Phone", render_kw={"type": "tel"})
    website = StringField("Website", validators=[Optional(), URL()], render_kw={"type": "url"})


class OwnerContactForm(Form):
    """Owner Contact sub-step."""

    contact_name = StringField("Contact Name")
    contact_email = StringField(
        "Contact Email (Optional)",
        validators=[Optional(), Email()],
        render_kw={"type": "email"},
    )
