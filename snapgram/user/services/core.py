from __future__ import annotations

from contextlib import nullcontext
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from snapgram.constants import DEFAULT_PROFILE_IMAGE, USERS_COLLECTION
from snapgram.errors import NotFoundError
from snapgram.media.services import discard_file, get_file_preview, staged_upload
from snapgram.utils import snapshot_to_dict

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from werkzeug.datastructures import FileStorage

    from snapgram.core import UserProfile


def get_user_by_id(db: Client, user_id: str) -> UserProfile:
    """Fetch a user profile by its document ID."""
    user_doc = cast("DocumentSnapshot", db.collection(USERS_COLLECTION).document(user_id).get())
    user = snapshot_to_dict(user_doc)
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    return cast("UserProfile", user)


def get_user_by_account_id(db: Client, account_id: str) -> UserProfile | None:
    """Look up the profile that belongs to an auth account."""
    docs = (
        db.collection(USERS_COLLECTION)
        .where(filter=firestore.FieldFilter("accountId", "==", account_id))
        .limit(1)
        .stream()
    )
    for doc in docs:
        return cast("UserProfile", snapshot_to_dict(doc))
    return None


def get_users(db: Client, limit: int | None = None) -> list[UserProfile]:
    """Fetch user profiles, newest first."""
    query = db.collection(USERS_COLLECTION).order_by(
        "createdAt", direction=firestore.Query.DESCENDING
    )
    if limit:
        query = query.limit(limit)

    users = []
    for doc in query.stream():
        data = snapshot_to_dict(doc)
        if data is not None:
            users.append(cast("UserProfile", data))
    return users


def is_username_taken(db: Client, username: str) -> bool:
    """Check if a username is already used by a profile."""
    existing = (
        db.collection(USERS_COLLECTION)
        .where(filter=firestore.FieldFilter("username", "==", username))
        .limit(1)
        .stream()
    )
    return len(list(existing)) > 0


def save_user_to_db(
    db: Client,
    account_id: str,
    name: str,
    email: str,
    username: str | None = None,
    image_url: str = DEFAULT_PROFILE_IMAGE,
) -> UserProfile:
    """Create the profile document for a newly registered account."""
    user_ref = db.collection(USERS_COLLECTION).document()
    user_ref.set(
        {
            "accountId": account_id,
            "name": name,
            "email": email,
            "username": username,
            "imageUrl": image_url,
            "imageId": None,
            "bio": "",
            "followingId": [],
            "followerId": [],
            "createdAt": firestore.SERVER_TIMESTAMP,
        }
    )
    return get_user_by_id(db, user_ref.id)


def update_user(
    db: Client,
    user_id: str,
    name: str,
    bio: str | None,
    file_storage: FileStorage | None = None,
) -> UserProfile:
    """Update a profile, optionally replacing its image.

    A new image is uploaded before the document is written. If the write
    fails the new upload is deleted; if it succeeds the previous image is.
    """
    user = get_user_by_id(db, user_id)
    old_image_id = user.get("imageId")
    update_data: dict[str, Any] = {"name": name, "bio": bio or ""}

    upload = staged_upload(file_storage) if file_storage else nullcontext()
    with upload as new_image_id:
        if new_image_id:
            update_data["imageUrl"] = get_file_preview(new_image_id)
            update_data["imageId"] = new_image_id
        db.collection(USERS_COLLECTION).document(user_id).update(update_data)

    if new_image_id and old_image_id:
        discard_file(old_image_id)

    return get_user_by_id(db, user_id)
