from flask import g, jsonify

from snapgram.utils import form_errors, get_db

from . import bp
from .decorators import login_required
from .forms import RegisterForm, SessionLoginForm
from .services import create_user_account, get_current_account, sign_in, sign_out


@bp.route("/register", methods=["POST"])
def register():
    """Create an account and its profile."""
    form = RegisterForm()
    if not form.validate_on_submit():
        return form_errors(form)

    profile = create_user_account(
        get_db(),
        email=form.email.data,
        password=form.password.data,
        name=form.name.data,
        username=form.username.data,
    )
    return jsonify({"status": "success", "user": profile}), 201


@bp.route("/session_login", methods=["POST"])
def session_login():
    """
    Called by the client after a successful Firebase sign-in.
    Verifies the ID token and creates a server-side session.
    """
    form = SessionLoginForm()
    if not form.validate_on_submit():
        return form_errors(form)

    profile = sign_in(get_db(), form.id_token.data)
    return jsonify({"status": "success", "user": profile})


@bp.route("/logout", methods=["POST"])
def logout():
    sign_out()
    return jsonify({"status": "success"})


@bp.route("/me")
@login_required
def me():
    """Return the signed-in user's profile and account email."""
    account = get_current_account()
    return jsonify(
        {
            "user": g.user,
            "account": {"uid": account.uid, "email": account.email} if account else None,
        }
    )
