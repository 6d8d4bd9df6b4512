"""Service layer for posts, likes and saved posts."""

from __future__ import annotations

from contextlib import nullcontext
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from snapgram.constants import (
    FEED_PAGE_SIZE,
    POSTS_COLLECTION,
    RECENT_POSTS_LIMIT,
    SAVES_COLLECTION,
)
from snapgram.errors import NotFoundError, ValidationError
from snapgram.media.services import (
    delete_file,
    discard_file,
    get_file_preview,
    staged_upload,
)
from snapgram.utils import snapshot_to_dict

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from werkzeug.datastructures import FileStorage

    from snapgram.core import Post, SavedPost


def parse_tags(tags: str | None) -> list[str]:
    """Split a comma-separated tag string, dropping all spaces."""
    if not tags:
        return []
    return tags.replace(" ", "").split(",")


def _collect(query: Any) -> list[Any]:
    results = []
    for doc in query.stream():
        data = snapshot_to_dict(doc)
        if data is not None:
            results.append(data)
    return results


def get_post_by_id(db: Client, post_id: str) -> Post:
    """Fetch a post by its ID."""
    post_doc = cast("DocumentSnapshot", db.collection(POSTS_COLLECTION).document(post_id).get())
    post = snapshot_to_dict(post_doc)
    if post is None:
        raise NotFoundError(f"Post {post_id} not found.")
    return cast("Post", post)


def create_post(
    db: Client,
    user_id: str,
    caption: str,
    file_storage: FileStorage,
    location: str | None = None,
    tags: str | None = None,
) -> Post:
    """Upload the post image and create the post document.

    If anything after the upload fails, the uploaded image is deleted
    before the error is raised.
    """
    with staged_upload(file_storage) as image_id:
        image_url = get_file_preview(image_id)
        post_ref = db.collection(POSTS_COLLECTION).document()
        post_ref.set(
            {
                "creator": user_id,
                "caption": caption,
                "imageUrl": image_url,
                "imageId": image_id,
                "location": location or "",
                "tags": parse_tags(tags),
                "likes": [],
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
        )
    return get_post_by_id(db, post_ref.id)


def update_post(
    db: Client,
    post_id: str,
    caption: str,
    location: str | None = None,
    tags: str | None = None,
    file_storage: FileStorage | None = None,
) -> Post:
    """Update a post, optionally replacing its image."""
    post = get_post_by_id(db, post_id)
    old_image_id = post.get("imageId")
    update_data: dict[str, Any] = {
        "caption": caption,
        "location": location or "",
        "tags": parse_tags(tags),
        "updatedAt": firestore.SERVER_TIMESTAMP,
    }

    upload = staged_upload(file_storage) if file_storage else nullcontext()
    with upload as new_image_id:
        if new_image_id:
            update_data["imageUrl"] = get_file_preview(new_image_id)
            update_data["imageId"] = new_image_id
        db.collection(POSTS_COLLECTION).document(post_id).update(update_data)

    if new_image_id and old_image_id:
        discard_file(old_image_id)

    return get_post_by_id(db, post_id)


def delete_post(db: Client, post_id: str | None, image_id: str | None) -> None:
    """Delete a post and its stored image."""
    if not post_id or not image_id:
        raise ValidationError("Both a post ID and an image ID are required.")
    db.collection(POSTS_COLLECTION).document(post_id).delete()
    delete_file(image_id)


def get_recent_posts(db: Client, limit: int = RECENT_POSTS_LIMIT) -> list[Post]:
    """Fetch the newest posts."""
    query = (
        db.collection(POSTS_COLLECTION)
        .order_by("createdAt", direction=firestore.Query.DESCENDING)
        .limit(limit)
    )
    return _collect(query)


def get_infinite_posts(
    db: Client, cursor: str | None = None, limit: int = FEED_PAGE_SIZE
) -> dict[str, Any]:
    """Fetch one page of the feed, most recently updated first.

    ``cursor`` is the ID of the last post of the previous page.
    """
    posts_ref = db.collection(POSTS_COLLECTION)
    query = posts_ref.order_by("updatedAt", direction=firestore.Query.DESCENDING).limit(
        limit
    )
    if cursor:
        cursor_doc = cast("DocumentSnapshot", posts_ref.document(cursor).get())
        if not cursor_doc.exists:
            raise NotFoundError(f"Post {cursor} not found.")
        query = query.start_after(cursor_doc)

    posts = _collect(query)
    next_cursor = posts[-1]["id"] if len(posts) == limit else None
    return {"documents": posts, "next_cursor": next_cursor}


def search_posts(db: Client, search_term: str) -> list[Post]:
    """Find posts whose caption starts with the search term."""
    query: Any = db.collection(POSTS_COLLECTION)
    if search_term:
        query = query.where(
            filter=firestore.FieldFilter("caption", ">=", search_term)
        ).where(filter=firestore.FieldFilter("caption", "<=", search_term + "\uf8ff"))
    return _collect(query.limit(RECENT_POSTS_LIMIT))


def get_user_posts(db: Client, user_id: str) -> list[Post]:
    """Fetch a user's posts, newest first."""
    query = (
        db.collection(POSTS_COLLECTION)
        .where(filter=firestore.FieldFilter("creator", "==", user_id))
        .order_by("createdAt", direction=firestore.Query.DESCENDING)
    )
    return _collect(query)


def like_post(db: Client, post_id: str, user_id: str) -> Post:
    """Add a user to a post's likes."""
    get_post_by_id(db, post_id)
    db.collection(POSTS_COLLECTION).document(post_id).update(
        {"likes": firestore.ArrayUnion([user_id])}
    )
    return get_post_by_id(db, post_id)


def unlike_post(db: Client, post_id: str, user_id: str) -> Post:
    """Remove a user from a post's likes."""
    get_post_by_id(db, post_id)
    db.collection(POSTS_COLLECTION).document(post_id).update(
        {"likes": firestore.ArrayRemove([user_id])}
    )
    return get_post_by_id(db, post_id)


def save_post(db: Client, user_id: str, post_id: str) -> SavedPost:
    """Record that a user saved a post."""
    save_ref = db.collection(SAVES_COLLECTION).document()
    save_data = {
        "user": user_id,
        "post": post_id,
        "createdAt": firestore.SERVER_TIMESTAMP,
    }
    save_ref.set(save_data)
    return {"id": save_ref.id, "user": user_id, "post": post_id}


def get_saved_post(db: Client, saved_record_id: str) -> SavedPost:
    save_doc = cast(
        "DocumentSnapshot", db.collection(SAVES_COLLECTION).document(saved_record_id).get()
    )
    record = snapshot_to_dict(save_doc)
    if record is None:
        raise NotFoundError(f"Saved post {saved_record_id} not found.")
    return cast("SavedPost", record)


def delete_saved_post(db: Client, saved_record_id: str) -> None:
    """Delete a saved-post record. The post itself is kept."""
    db.collection(SAVES_COLLECTION).document(saved_record_id).delete()


def get_saved_posts(db: Client, user_id: str) -> list[SavedPost]:
    """Fetch the saved-post records of a user."""
    query = db.collection(SAVES_COLLECTION).where(
        filter=firestore.FieldFilter("user", "==", user_id)
    )
    return _collect(query)
