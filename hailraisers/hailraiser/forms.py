"""Forms for the hailraiser blueprint."""

from wtforms import Form, StringField
from wtforms.validators import DataRequired, Email


class MemberForm(Form):
    """Contact details a hailraiser enters before joining or creating a box."""

    first_name = StringField(
        "First Name *", validators=[DataRequired(message="First name is required.")]
    )
    last_name = StringField(
        "Last Name *", validators=[DataRequired(message="Last name is required.")]
    )
    country = StringField(
        "Country *", validators=[DataRequired(message="Country is required.")]
    )
    email = StringField(
        "Your Email *",
        validators=[
            DataRequired(message="Email is required."),
            Email(message="Please enter a valid email address."),
        ],
        render_kw={"type": "email"},
    )
