from flask import g, jsonify, request

from snapgram.auth.decorators import login_required
from snapgram.errors import PermissionDeniedError
from snapgram.utils import form_errors, get_db

from . import bp
from .forms import UpdateProfileForm
from .services import UserService


@bp.route("/")
@login_required
def users():
    """List user profiles, newest first."""
    limit = request.args.get("limit", type=int)
    return jsonify({"documents": UserService.get_users(get_db(), limit=limit)})


@bp.route("/<string:user_id>")
@login_required
def profile(user_id):
    """Return a profile with its follower and following counts."""
    db = get_db()
    user = UserService.get_user_by_id(db, user_id)
    return jsonify(
        {
            "user": user,
            "followers_count": UserService.get_followers_count(db, user_id),
            "following_count": UserService.get_following_count(db, user_id),
            "is_following": UserService.is_following(db, g.user["id"], user_id),
        }
    )


@bp.route("/<string:user_id>/edit", methods=["POST"])
@login_required
def edit_profile(user_id):
    """Update the signed-in user's own profile."""
    if user_id != g.user["id"]:
        raise PermissionDeniedError("You can only edit your own profile.")

    form = UpdateProfileForm()
    if not form.validate_on_submit():
        return form_errors(form)

    user = UserService.update_user(
        get_db(),
        user_id,
        name=form.name.data,
        bio=form.bio.data,
        file_storage=form.file.data or None,
    )
    return jsonify({"status": "success", "user": user})


@bp.route("/<string:user_id>/follow", methods=["POST"])
@login_required
def follow(user_id):
    user = UserService.follow_user(get_db(), g.user["id"], user_id)
    return jsonify({"status": "success", "user": user})


@bp.route("/<string:user_id>/unfollow", methods=["POST"])
@login_required
def unfollow(user_id):
    user = UserService.unfollow_user(get_db(), g.user["id"], user_id)
    return jsonify({"status": "success", "user": user})


@bp.route("/<string:user_id>/is_following")
@login_required
def is_following(user_id):
    return jsonify(
        {"is_following": UserService.is_following(get_db(), g.user["id"], user_id)}
    )


@bp.route("/<string:user_id>/followers")
@login_required
def followers(user_id):
    return jsonify({"documents": UserService.get_followers(get_db(), user_id)})


@bp.route("/<string:user_id>/following")
@login_required
def following(user_id):
    return jsonify({"documents": UserService.get_following(get_db(), user_id)})
