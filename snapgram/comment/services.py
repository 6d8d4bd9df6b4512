"""Service layer for comments on posts."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app
from google.api_core.exceptions import Conflict

from snapgram.constants import (
    COMMENTS_COLLECTION,
    DEFAULT_PROFILE_IMAGE,
    UNKNOWN_USER_NAME,
    USERS_COLLECTION,
)
from snapgram.errors import DuplicateResourceError, NotFoundError
from snapgram.user.services.core import get_user_by_id

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from snapgram.core import Comment

REQUIRED_FIELDS = ("userId", "postId", "createdAt")


def generate_comment_id() -> str:
    """Return a random 128-bit comment ID."""
    return uuid.uuid4().hex


def _is_complete(data: dict[str, Any]) -> bool:
    return all(data.get(field) for field in REQUIRED_FIELDS) and (
        data.get("commentText") is not None
    )


def _attach_authors(
    db: Client,
    records: list[tuple[str, dict[str, Any]]],
    drop_orphans: bool = True,
) -> list[Comment]:
    """Add author name and image to each comment.

    Authors are read in one batch. Comments whose author profile no longer
    exists are dropped unless ``drop_orphans`` is False, in which case they
    get the placeholder name and image.
    """
    author_ids = sorted({data["userId"] for _, data in records})
    if not author_ids:
        return []
    refs = [db.collection(USERS_COLLECTION).document(uid) for uid in author_ids]
    author_docs = cast(list["DocumentSnapshot"], db.get_all(refs))
    authors = {doc.id: doc.to_dict() or {} for doc in author_docs if doc.exists}

    comments: list[Comment] = []
    for comment_id, data in records:
        author = authors.get(data["userId"])
        if author is None:
            if drop_orphans:
                current_app.logger.debug(
                    f"Skipping comment {comment_id}: author {data['userId']} not found"
                )
                continue
            author = {}
        comments.append(
            {
                "commentId": comment_id,
                "userId": data["userId"],
                "userName": author.get("name") or UNKNOWN_USER_NAME,
                "userImage": author.get("imageUrl") or DEFAULT_PROFILE_IMAGE,
                "postId": data["postId"],
                "commentText": data["commentText"],
                "createdAt": data["createdAt"],
            }
        )
    return comments


def create_comment(
    db: Client, current_user_id: str, comment_text: str, post_id: str
) -> dict[str, Any]:
    """Create a comment on a post by the current user."""
    # Fails with NotFoundError if the caller has no profile.
    get_user_by_id(db, current_user_id)

    comment_id = generate_comment_id()
    comment_data = {
        "commentId": comment_id,
        "userId": current_user_id,
        "commentText": comment_text,
        "createdAt": datetime.now(timezone.utc).isoformat(),
        "postId": post_id,
    }
    try:
        db.collection(COMMENTS_COLLECTION).document(comment_id).create(comment_data)
    except Conflict as e:
        raise DuplicateResourceError(f"Comment {comment_id} already exists.") from e
    return comment_data


def get_comments(db: Client, post_id: str | None = None) -> list[Comment]:
    """Fetch comments with their authors' display details.

    Without ``post_id`` every comment is returned. Incomplete records are
    skipped rather than failing the whole listing.
    """
    query: Any = db.collection(COMMENTS_COLLECTION)
    if post_id:
        query = query.where(filter=firestore.FieldFilter("postId", "==", post_id))

    records = []
    for doc in query.stream():
        data = doc.to_dict() or {}
        if not _is_complete(data):
            current_app.logger.debug(f"Skipping incomplete comment {doc.id}")
            continue
        records.append((doc.id, data))

    comments = _attach_authors(db, records)
    comments.sort(key=lambda comment: comment["createdAt"])
    return comments


def get_comment(db: Client, comment_id: str) -> Comment:
    """Fetch a single comment with its author's display details.

    A comment whose author profile is gone is still returned, with the
    placeholder name and image, so it can be edited or deleted.
    """
    doc = cast(
        "DocumentSnapshot", db.collection(COMMENTS_COLLECTION).document(comment_id).get()
    )
    data = doc.to_dict() if doc.exists else None
    if not data or not _is_complete(data):
        raise NotFoundError("Comment not found.")
    return _attach_authors(db, [(doc.id, data)], drop_orphans=False)[0]


def edit_comment(db: Client, comment_id: str, comment_text: str) -> Comment:
    """Replace the text of a comment, leaving its other fields untouched."""
    comment = get_comment(db, comment_id)
    db.collection(COMMENTS_COLLECTION).document(comment_id).update(
        {"commentText": comment_text}
    )
    comment["commentText"] = comment_text
    return comment


def delete_comment(db: Client, comment_id: str) -> None:
    """Delete a comment."""
    db.collection(COMMENTS_COLLECTION).document(comment_id).delete()
