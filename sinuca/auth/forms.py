"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import HiddenField, PasswordField, SubmitField
from wtforms.validators import DataRequired


class LoginForm(FlaskForm):
    """Admin passphrase form."""

    password = PasswordField(
        "Password",
        validators=[DataRequired()],
        render_kw={"autocomplete": "current-password"},
    )
    next = HiddenField()
    submit = SubmitField("Enter")
