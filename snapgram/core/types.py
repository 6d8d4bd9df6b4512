"""Core data types for the snapgram application."""

from typing import Any, List, Optional, TypedDict  # noqa: UP035


class _FirestoreDocumentBase(TypedDict):
    id: str


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    createdAt: Any
    updatedAt: Any


class UserProfile(FirestoreDocument, total=False):
    """A user's profile document."""

    accountId: str
    name: str
    username: str
    email: str
    imageUrl: str
    imageId: Optional[str]
    bio: str
    followingId: List[str]  # noqa: UP006
    followerId: List[str]  # noqa: UP006


class Post(FirestoreDocument, total=False):
    """A post document."""

    creator: str
    caption: str
    imageUrl: str
    imageId: str
    location: str
    tags: List[str]  # noqa: UP006
    likes: List[str]  # noqa: UP006


class SavedPost(FirestoreDocument, total=False):
    """Join record between a user and a post they saved."""

    user: str
    post: str


class Comment(TypedDict):
    """A comment enriched with its author's display details."""

    commentId: str
    userId: str
    userName: str
    userImage: str
    postId: str
    commentText: str
    createdAt: str
