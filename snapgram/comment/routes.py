from flask import g, jsonify, request

from snapgram.auth.decorators import login_required
from snapgram.errors import PermissionDeniedError
from snapgram.utils import form_errors, get_db

from . import bp
from .forms import CommentForm, EditCommentForm
from .services import (
    create_comment,
    delete_comment,
    edit_comment,
    get_comment,
    get_comments,
)


def _check_author(db, comment_id):
    comment = get_comment(db, comment_id)
    if comment["userId"] != g.user["id"]:
        raise PermissionDeniedError("You can only change your own comments.")
    return comment


@bp.route("/")
@login_required
def comments():
    """List comments, optionally only those on one post."""
    post_id = request.args.get("post_id")
    return jsonify({"documents": get_comments(get_db(), post_id=post_id)})


@bp.route("/create", methods=["POST"])
@login_required
def create():
    form = CommentForm()
    if not form.validate_on_submit():
        return form_errors(form)

    comment = create_comment(
        get_db(), g.user["id"], form.comment_text.data, form.post_id.data
    )
    return jsonify({"status": "success", "comment": comment}), 201


@bp.route("/<string:comment_id>/edit", methods=["POST"])
@login_required
def edit(comment_id):
    db = get_db()
    _check_author(db, comment_id)

    form = EditCommentForm()
    if not form.validate_on_submit():
        return form_errors(form)

    comment = edit_comment(db, comment_id, form.comment_text.data)
    return jsonify({"status": "success", "comment": comment})


@bp.route("/<string:comment_id>/delete", methods=["POST"])
@login_required
def delete(comment_id):
    db = get_db()
    _check_author(db, comment_id)
    delete_comment(db, comment_id)
    return jsonify({"status": "success"})
