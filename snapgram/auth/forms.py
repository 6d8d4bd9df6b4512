"""Forms for the auth blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired, Email, Length, Regexp


class RegisterForm(FlaskForm):
    """Registration form."""

    name = StringField("Name", validators=[DataRequired(), Length(min=2, max=50)])
    username = StringField(
        "Username",
        validators=[
            DataRequired(),
            Length(min=2, max=25),
            Regexp(
                r"^[A-Za-z0-9_.]*$",
                message="Username must have only letters, numbers, dots or underscores",
            ),
        ],
    )
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired(), Length(min=8)])


class SessionLoginForm(FlaskForm):
    """ID token issued by the client SDK after sign-in."""

    id_token = StringField("ID Token", validators=[DataRequired()])
