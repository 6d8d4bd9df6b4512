"""Core module for the snapgram application."""

from .types import Comment, FirestoreDocument, Post, SavedPost, UserProfile

__all__ = ["Comment", "FirestoreDocument", "Post", "SavedPost", "UserProfile"]
