"""Forms for the post blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from flask_wtf.file import FileAllowed, FileField, FileRequired  # type: ignore
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from snapgram.constants import ALLOWED_IMAGE_EXTENSIONS


class PostForm(FlaskForm):
    """Fields shared by creating and editing a post."""

    caption = TextAreaField("Caption", validators=[DataRequired(), Length(max=2200)])
    location = StringField("Location", validators=[Optional(), Length(max=1000)])
    tags = StringField(
        "Tags",
        validators=[Optional()],
        description="Comma separated, e.g. art, expression, learn",
    )
    file = FileField(
        "Image",
        validators=[FileAllowed(ALLOWED_IMAGE_EXTENSIONS, "Images only!")],
    )


class CreatePostForm(PostForm):
    """Form for creating a post. An image is required."""

    file = FileField(
        "Image",
        validators=[
            FileRequired(),
            FileAllowed(ALLOWED_IMAGE_EXTENSIONS, "Images only!"),
        ],
    )
