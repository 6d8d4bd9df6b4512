from flask import g, jsonify, request

from snapgram.auth.decorators import login_required
from snapgram.errors import PermissionDeniedError
from snapgram.utils import form_errors, get_db

from . import bp
from .forms import CreatePostForm, PostForm
from .services import (
    create_post,
    delete_post,
    delete_saved_post,
    get_infinite_posts,
    get_post_by_id,
    get_recent_posts,
    get_saved_post,
    get_saved_posts,
    get_user_posts,
    like_post,
    save_post,
    search_posts,
    unlike_post,
    update_post,
)


def _get_own_post(db, post_id):
    post = get_post_by_id(db, post_id)
    if post.get("creator") != g.user["id"]:
        raise PermissionDeniedError("You can only change your own posts.")
    return post


@bp.route("/create", methods=["POST"])
@login_required
def create():
    form = CreatePostForm()
    if not form.validate_on_submit():
        return form_errors(form)

    post = create_post(
        get_db(),
        g.user["id"],
        caption=form.caption.data,
        file_storage=form.file.data,
        location=form.location.data,
        tags=form.tags.data,
    )
    return jsonify({"status": "success", "post": post}), 201


@bp.route("/recent")
@login_required
def recent():
    return jsonify({"documents": get_recent_posts(get_db())})


@bp.route("/feed")
@login_required
def feed():
    """Return one page of the feed; pass ``cursor`` for the next page."""
    return jsonify(get_infinite_posts(get_db(), cursor=request.args.get("cursor")))


@bp.route("/search")
@login_required
def search():
    return jsonify({"documents": search_posts(get_db(), request.args.get("q", ""))})


@bp.route("/saved")
@login_required
def saved():
    return jsonify({"documents": get_saved_posts(get_db(), g.user["id"])})


@bp.route("/user/<string:user_id>")
@login_required
def user_posts(user_id):
    return jsonify({"documents": get_user_posts(get_db(), user_id)})


@bp.route("/<string:post_id>")
@login_required
def view(post_id):
    return jsonify({"post": get_post_by_id(get_db(), post_id)})


@bp.route("/<string:post_id>/edit", methods=["POST"])
@login_required
def edit(post_id):
    db = get_db()
    _get_own_post(db, post_id)

    form = PostForm()
    if not form.validate_on_submit():
        return form_errors(form)

    post = update_post(
        db,
        post_id,
        caption=form.caption.data,
        location=form.location.data,
        tags=form.tags.data,
        file_storage=form.file.data or None,
    )
    return jsonify({"status": "success", "post": post})


@bp.route("/<string:post_id>/delete", methods=["POST"])
@login_required
def delete(post_id):
    db = get_db()
    post = _get_own_post(db, post_id)
    delete_post(db, post_id, post.get("imageId"))
    return jsonify({"status": "success"})


@bp.route("/<string:post_id>/like", methods=["POST"])
@login_required
def like(post_id):
    return jsonify({"status": "success", "post": like_post(get_db(), post_id, g.user["id"])})


@bp.route("/<string:post_id>/unlike", methods=["POST"])
@login_required
def unlike(post_id):
    return jsonify(
        {"status": "success", "post": unlike_post(get_db(), post_id, g.user["id"])}
    )


@bp.route("/<string:post_id>/save", methods=["POST"])
@login_required
def save(post_id):
    record = save_post(get_db(), g.user["id"], post_id)
    return jsonify({"status": "success", "saved": record}), 201


@bp.route("/saved/<string:record_id>/delete", methods=["POST"])
@login_required
def delete_saved(record_id):
    db = get_db()
    record = get_saved_post(db, record_id)
    if record.get("user") != g.user["id"]:
        raise PermissionDeniedError("You can only remove your own saved posts.")
    delete_saved_post(db, record_id)
    return jsonify({"status": "success"})
