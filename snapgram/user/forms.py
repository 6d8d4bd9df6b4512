"""Forms for the user blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from flask_wtf.file import FileAllowed, FileField  # type: ignore
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from snapgram.constants import ALLOWED_IMAGE_EXTENSIONS


class UpdateProfileForm(FlaskForm):
    """Form for updating a user profile."""

    name = StringField("Name", validators=[DataRequired(), Length(min=2, max=50)])
    bio = TextAreaField("Bio", validators=[Optional(), Length(max=2200)])
    file = FileField(
        "Profile Picture",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS, "Images only!")],
    )
