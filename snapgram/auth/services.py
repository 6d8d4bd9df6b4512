"""Service for accounts and sessions backed by Firebase Authentication."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import auth
from flask import current_app, session

from snapgram.constants import SESSION_ACCOUNT_ID, SESSION_USER_ID
from snapgram.errors import DuplicateResourceError, NotFoundError, UnauthorizedError
from snapgram.user.services.core import (
    get_user_by_account_id,
    is_username_taken,
    save_user_to_db,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def create_user_account(
    db: Client, email: str, password: str, name: str, username: str
) -> dict[str, Any]:
    """Create an auth account and its profile document.

    If the profile cannot be written, the auth account is deleted again so
    no account exists without a profile.
    """
    if is_username_taken(db, username):
        raise DuplicateResourceError(
            "Username already exists. Please choose a different one."
        )

    try:
        user_record = auth.create_user(email=email, password=password, display_name=name)
    except auth.EmailAlreadyExistsError as e:
        raise DuplicateResourceError("Email address is already registered.") from e

    try:
        profile = save_user_to_db(
            db,
            account_id=user_record.uid,
            name=name,
            email=email,
            username=username,
        )
    except Exception as e:
        current_app.logger.error(f"Error saving profile for {user_record.uid}: {e}")
        try:
            auth.delete_user(user_record.uid)
        except Exception as cleanup_error:
            current_app.logger.error(
                f"Error deleting orphaned account {user_record.uid}: {cleanup_error}"
            )
        raise

    current_app.logger.info(f"Registered account {user_record.uid} as {profile['id']}")
    return profile


def sign_in(db: Client, id_token: str | None) -> dict[str, Any]:
    """Verify a client ID token and start a server-side session."""
    if not id_token:
        raise UnauthorizedError("Missing ID token.")
    try:
        decoded_token = auth.verify_id_token(id_token)
    except (auth.InvalidIdTokenError, auth.RevokedIdTokenError, ValueError) as e:
        current_app.logger.warning(f"Rejected ID token: {e}")
        raise UnauthorizedError("Invalid token.") from e

    account_id = decoded_token["uid"]
    profile = get_user_by_account_id(db, account_id)
    if profile is None:
        raise NotFoundError("User not found.")

    session.clear()
    session[SESSION_ACCOUNT_ID] = account_id
    session[SESSION_USER_ID] = profile["id"]
    current_app.logger.info(f"Account {account_id} signed in")
    return profile


def get_current_account() -> auth.UserRecord | None:
    """Return the auth record of the signed-in account, if any."""
    account_id = session.get(SESSION_ACCOUNT_ID)
    if account_id is None:
        return None
    try:
        return auth.get_user(account_id)
    except auth.UserNotFoundError:
        current_app.logger.warning(f"Account {account_id} in session no longer exists")
        return None


def sign_out() -> None:
    """End the current session."""
    session.clear()
