"""Forms for the comment blueprint."""

from flask_wtf import FlaskForm  # type: ignore
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length


class CommentForm(FlaskForm):
    """Form for writing a comment on a post."""

    comment_text = TextAreaField(
        "Comment", validators=[DataRequired(), Length(max=2200)]
    )
    post_id = StringField("Post", validators=[DataRequired()])


class EditCommentForm(FlaskForm):
    """Form for changing the text of an existing comment."""

    comment_text = TextAreaField(
        "Comment", validators=[DataRequired(), Length(max=2200)]
    )
