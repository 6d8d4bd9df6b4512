"""Utility functions for the application."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import firestore, storage
from flask import current_app, jsonify

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from flask import Response
    from flask_wtf import FlaskForm
    from google.cloud.storage import Bucket


def get_db() -> Client:
    """Return the Firestore client for the configured database."""
    return firestore.client(database_id=current_app.config.get("FIRESTORE_DATABASE_ID"))


def get_bucket() -> Bucket:
    """Return the configured Cloud Storage bucket."""
    return storage.bucket(current_app.config.get("FIREBASE_STORAGE_BUCKET"))


def snapshot_to_dict(doc: DocumentSnapshot) -> dict[str, Any] | None:
    """Convert a document snapshot into a dict carrying its ID."""
    if not doc.exists:
        return None
    data = doc.to_dict()
    if data is None:
        return None
    return {"id": doc.id, **data}


def form_errors(form: FlaskForm) -> tuple[Response, int]:
    """Build the JSON response for a form that failed validation."""
    current_app.logger.warning(f"Rejected {type(form).__name__}: {form.errors}")
    return (
        jsonify(
            {"status": "error", "message": "Validation failed.", "errors": form.errors}
        ),
        400,
    )
