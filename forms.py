from flask_wtf import FlaskForm
from wtforms import (
    Field,
    StringField,
    PasswordField,
    BooleanField,
    TextAreaField,
    SelectField,
    IntegerField,
)
from wtforms.validators import (
    DataRequired,
    Email,
    Length,
    EqualTo,
    Optional,
    Regexp,
    URL,
    ValidationError,
)
from models import Vehicle
from utils import parse_iso_datetime


class ApiForm(FlaskForm):
    """Base for JSON forms.

    Flask-WTF fills the form from the JSON body. CSRF is checked once per
    request by the app for cookie sessions, so the per-form token is off.
    """

    class Meta:
        csrf = False

    def error_payload(self):
        return {name: list(errors) for name, errors in self.errors.items()}


class IsoDateTimeField(Field):
    """ISO 8601 timestamp, stored as a naive UTC datetime."""

    def _value(self):
        return self.data.isoformat() if self.data else ""

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] in (None, ""):
            self.data = None
            return
        try:
            self.data = parse_iso_datetime(valuelist[0])
        except (TypeError, ValueError):
            self.data = None
            raise ValueError(self.gettext("Not a valid ISO 8601 datetime."))


class IdField(IntegerField):
    """Integer id from a JSON body; ``null`` counts as not provided."""

    def process_formdata(self, valuelist):
        if not valuelist or valuelist[0] is None:
            self.data = None
            return
        value = valuelist[0]
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            self.data = None
            raise ValueError(self.gettext("Not a valid integer value."))
        super().process_formdata(valuelist)


class _JsonTextMixin:
    # JSON numbers, lists and objects are refused before validators call len()
    def process_formdata(self, valuelist):
        if valuelist and valuelist[0] is not None and not isinstance(valuelist[0], str):
            self.data = None
            raise ValueError(self.gettext("Not a valid string."))
        super().process_formdata(valuelist)


class JsonStringField(_JsonTextMixin, StringField):
    pass


class JsonTextAreaField(_JsonTextMixin, TextAreaField):
    pass


class JsonPasswordField(_JsonTextMixin, PasswordField):
    pass


def submitted(field):
    """True when the client actually sent a value for ``field``."""
    return bool(field.raw_data)


class LoginForm(ApiForm):
    email = JsonStringField("Email", validators=[DataRequired(), Email()])
    password = JsonPasswordField("Password", validators=[DataRequired()])


class SignupForm(ApiForm):
    name = JsonStringField(
        "Name",
        validators=[
            DataRequired(),
            Length(min=2, max=100, message="Name must be between 2 and 100 characters"),
        ],
    )
    email = JsonStringField("Email", validators=[DataRequired(), Email(), Length(max=120)])
    password = JsonPasswordField(
        "Password",
        validators=[
            DataRequired(),
            Length(min=8, message="Password must be at least 8 characters"),
            Regexp(r".*[a-zA-Z]", message="Password must contain at least one letter"),
            Regexp(r".*[0-9]", message="Password must contain at least one number"),
        ],
    )
    confirm_password = JsonPasswordField(
        "Confirm password",
        validators=[
            DataRequired(),
            EqualTo("password", message="Passwords do not match"),
        ],
    )


class BookingForm(ApiForm):
    vehicle_id = IdField("Vehicle", validators=[DataRequired()])
    start_time = IsoDateTimeField("Start", validators=[DataRequired()])
    end_time = IsoDateTimeField("End", validators=[DataRequired()])
    title = JsonStringField("Title", validators=[Optional(), Length(max=200, message="Title too long")])
    description = JsonTextAreaField(
        "Description", validators=[Optional(), Length(max=1000, message="Description too long")]
    )
    user_id = IdField("Book for", validators=[Optional()])


class BookingUpdateForm(ApiForm):
    """Same fields as :class:`BookingForm`, all optional; absent ones keep their value."""

    vehicle_id = IdField("Vehicle", validators=[Optional()])
    start_time = IsoDateTimeField("Start", validators=[Optional()])
    end_time = IsoDateTimeField("End", validators=[Optional()])
    title = JsonStringField("Title", validators=[Optional(), Length(max=200, message="Title too long")])
    description = JsonTextAreaField(
        "Description", validators=[Optional(), Length(max=1000, message="Description too long")]
    )


class BookingFilterForm(ApiForm):
    vehicle_id = IdField(validators=[Optional()])
    user_id = IdField(validators=[Optional()])
    start = IsoDateTimeField(validators=[Optional()])
    end = IsoDateTimeField(validators=[Optional()])
    start_date = IsoDateTimeField(validators=[Optional()])
    end_date = IsoDateTimeField(validators=[Optional()])


class AvailabilityForm(ApiForm):
    start = IsoDateTimeField(validators=[DataRequired()])
    end = IsoDateTimeField(validators=[DataRequired()])


class VehicleForm(ApiForm):
    name = JsonStringField("Name", validators=[DataRequired(), Length(max=120)])
    category = SelectField(
        "Category",
        choices=[(c, c) for c in Vehicle.CATEGORIES],
        validators=[DataRequired()],
    )
    license_plate = JsonStringField("License plate", validators=[DataRequired(), Length(max=20)])
    color = JsonStringField("Color", validators=[Optional(), Length(max=20)])
    image_url = JsonStringField("Image", validators=[Optional(), URL(), Length(max=500)])
    is_active = BooleanField("Active", default=True)


class VehicleUpdateForm(VehicleForm):
    name = JsonStringField("Name", validators=[Optional(), Length(max=120)])
    category = SelectField(
        "Category",
        choices=[(c, c) for c in Vehicle.CATEGORIES],
        validators=[Optional()],
        validate_choice=False,
    )
    license_plate = JsonStringField("License plate", validators=[Optional(), Length(max=20)])

    def validate_category(self, field):
        if submitted(field) and field.data not in Vehicle.CATEGORIES:
            raise ValidationError("Not a valid choice.")
