"""Service for storing uploaded images in Cloud Storage."""

from __future__ import annotations

import os
import tempfile
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from flask import current_app
from werkzeug.utils import secure_filename

from snapgram.constants import (
    PREVIEW_GRAVITY,
    PREVIEW_HEIGHT,
    PREVIEW_QUALITY,
    PREVIEW_WIDTH,
    UPLOADS_PREFIX,
)
from snapgram.errors import NotFoundError
from snapgram.utils import get_bucket

if TYPE_CHECKING:
    from werkzeug.datastructures import FileStorage


def _blob_path(file_id: str) -> str:
    return f"{UPLOADS_PREFIX}/{file_id}"


def upload_file(file_storage: FileStorage) -> str:
    """Upload a file to the bucket and return its file ID."""
    file_id = uuid.uuid4().hex
    filename = secure_filename(file_storage.filename or "upload.jpg")
    blob = get_bucket().blob(_blob_path(file_id))
    blob.metadata = {"originalFilename": filename}

    with tempfile.NamedTemporaryFile(suffix=os.path.splitext(filename)[1]) as tmp:
        file_storage.save(tmp.name)
        blob.upload_from_filename(tmp.name, content_type=file_storage.mimetype)

    blob.make_public()
    return file_id


def get_file_preview(file_id: str) -> str:
    """Return the preview URL of an uploaded image.

    The preview is the blob's public URL with the fixed resize parameters
    appended: 2000x2000, anchored at the top, full quality.
    """
    blob = get_bucket().blob(_blob_path(file_id))
    if not blob.exists():
        raise NotFoundError(f"File {file_id} not found.")
    params = urlencode(
        {
            "width": PREVIEW_WIDTH,
            "height": PREVIEW_HEIGHT,
            "gravity": PREVIEW_GRAVITY,
            "quality": PREVIEW_QUALITY,
        }
    )
    return f"{blob.public_url}?{params}"


def delete_file(file_id: str) -> None:
    """Delete an uploaded file."""
    get_bucket().blob(_blob_path(file_id)).delete()


def discard_file(file_id: str) -> None:
    """Delete a file that is no longer referenced, logging any failure."""
    try:
        delete_file(file_id)
    except Exception as e:
        current_app.logger.error(f"Error deleting file {file_id}: {e}")


@contextmanager
def staged_upload(file_storage: FileStorage) -> Iterator[str]:
    """Upload a file and delete it again if the enclosed block fails.

    Usage:
    with staged_upload(file) as file_id:
        ...write the document that references file_id...
    """
    file_id = upload_file(file_storage)
    try:
        yield file_id
    except Exception:
        current_app.logger.warning(f"Removing orphaned upload {file_id}")
        discard_file(file_id)
        raise
