"""Follower/following relationships between user profiles.

Each profile carries two ID lists: ``followingId`` (who the user follows)
and ``followerId`` (who follows the user). Following someone touches both
profiles, so the two updates go into a single batch and are committed
together. Array transforms are used rather than rewriting the lists, so
concurrent follows of the same profile do not overwrite each other.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from firebase_admin import firestore
from flask import current_app

from snapgram.constants import USERS_COLLECTION
from snapgram.errors import ValidationError

from .core import get_user_by_id

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from snapgram.core import UserProfile


def follow_user(db: Client, current_user_id: str, target_user_id: str) -> UserProfile:
    """Make the current user follow the target user.

    Returns the current user's profile. Following someone already followed
    is a no-op.
    """
    if current_user_id == target_user_id:
        raise ValidationError("You cannot follow yourself.")

    current_user = get_user_by_id(db, current_user_id)
    if target_user_id in (current_user.get("followingId") or []):
        return current_user

    # Raises NotFoundError before anything is written.
    get_user_by_id(db, target_user_id)

    users_ref = db.collection(USERS_COLLECTION)
    batch = db.batch()
    batch.update(
        users_ref.document(current_user_id),
        {"followingId": firestore.ArrayUnion([target_user_id])},
    )
    batch.update(
        users_ref.document(target_user_id),
        {"followerId": firestore.ArrayUnion([current_user_id])},
    )
    try:
        batch.commit()
    except Exception as e:
        current_app.logger.error(
            f"Error following user {target_user_id} as {current_user_id}: {e}"
        )
        raise

    current_app.logger.info(f"User {current_user_id} followed {target_user_id}")
    return get_user_by_id(db, current_user_id)


def unfollow_user(
    db: Client, current_user_id: str, target_user_id: str
) -> UserProfile:
    """Make the current user stop following the target user.

    Returns the current user's profile. Unfollowing someone not followed is
    a no-op.
    """
    current_user = get_user_by_id(db, current_user_id)
    if target_user_id not in (current_user.get("followingId") or []):
        return current_user

    users_ref = db.collection(USERS_COLLECTION)
    batch = db.batch()
    batch.update(
        users_ref.document(current_user_id),
        {"followingId": firestore.ArrayRemove([target_user_id])},
    )
    target_doc = cast("DocumentSnapshot", users_ref.document(target_user_id).get())
    if target_doc.exists:
        batch.update(
            users_ref.document(target_user_id),
            {"followerId": firestore.ArrayRemove([current_user_id])},
        )
    else:
        current_app.logger.warning(
            f"Unfollowing deleted user {target_user_id}; only updating {current_user_id}"
        )
    try:
        batch.commit()
    except Exception as e:
        current_app.logger.error(
            f"Error unfollowing user {target_user_id} as {current_user_id}: {e}"
        )
        raise

    current_app.logger.info(f"User {current_user_id} unfollowed {target_user_id}")
    return get_user_by_id(db, current_user_id)


def is_following(db: Client, current_user_id: str | None, target_user_id: str) -> bool:
    """Check whether the current user follows the target user."""
    if not current_user_id:
        return False
    try:
        current_user = get_user_by_id(db, current_user_id)
    except Exception as e:
        current_app.logger.warning(f"Error checking follow status: {e}")
        return False
    return target_user_id in (current_user.get("followingId") or [])


def get_followers_count(db: Client, user_id: str) -> int:
    """Return the number of followers a user has, or 0 if unknown."""
    try:
        user = get_user_by_id(db, user_id)
    except Exception as e:
        current_app.logger.warning(f"Error fetching followers count for {user_id}: {e}")
        return 0
    return len(user.get("followerId") or [])


def get_following_count(db: Client, user_id: str) -> int:
    """Return the number of users a user follows, or 0 if unknown."""
    try:
        user = get_user_by_id(db, user_id)
    except Exception as e:
        current_app.logger.warning(f"Error fetching following count for {user_id}: {e}")
        return 0
    return len(user.get("followingId") or [])


def _fetch_profiles(db: Client, user_ids: list[str]) -> list[UserProfile]:
    if not user_ids:
        return []
    refs = [db.collection(USERS_COLLECTION).document(uid) for uid in user_ids]
    docs = cast(list["DocumentSnapshot"], db.get_all(refs))
    return [
        cast("UserProfile", {"id": doc.id, **(doc.to_dict() or {})})
        for doc in docs
        if doc.exists
    ]


def get_followers(db: Client, user_id: str) -> list[UserProfile]:
    """Fetch the profiles following a user."""
    user = get_user_by_id(db, user_id)
    return _fetch_profiles(db, list(user.get("followerId") or []))


def get_following(db: Client, user_id: str) -> list[UserProfile]:
    """Fetch the profiles a user follows."""
    user = get_user_by_id(db, user_id)
    return _fetch_profiles(db, list(user.get("followingId") or []))
