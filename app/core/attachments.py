"""
Receipts and payment proofs.

Attachments are opaque blobs addressed by path. They are validated by
declared content type and size, then written to the configured Django storage
before the record that references them is saved.
"""
import logging
import os
from dataclasses import dataclass

from django.conf import settings
from django.core.files.base import ContentFile, File
from django.core.files.storage import default_storage
from django.utils.crypto import get_random_string

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttachmentMetadata:
    name: str
    content_type: str
    size: int

    @classmethod
    def from_upload(cls, upload):
        return cls(
            name=os.path.basename(getattr(upload, "name", "") or ""),
            content_type=(getattr(upload, "content_type", "") or "").lower(),
            size=upload.size,
        )


def validate(metadata: AttachmentMetadata):
    """Raise ``ValidationError`` unless the attachment may be accepted."""
    allowed = settings.ATTACHMENT_ALLOWED_CONTENT_TYPES
    if metadata.content_type not in allowed:
        raise ValidationError(
            {
                "attachment": "File type not allowed. Accepted types: "
                "jpeg, jpg, png, pdf."
            }
        )
    max_size = settings.ATTACHMENT_MAX_SIZE
    if metadata.size > max_size:
        raise ValidationError(
            {
                "attachment": f"File is too large. Maximum size is "
                f"{max_size // (1024 * 1024)} MB."
            }
        )


class AttachmentStore:
    """Thin put/get wrapper over Django's storage API."""

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def put(self, content, metadata: AttachmentMetadata, folder="attachments"):
        if isinstance(content, bytes):
            content = ContentFile(content)
        elif not isinstance(content, File):
            content = File(content)
        filename = f"{get_random_string(12)}-{metadata.name or 'attachment'}"
        # storage failures propagate so the owning record is never created
        path = self.storage.save(os.path.join(folder, filename), content)
        logger.info("Stored attachment %s (%s, %s bytes)", path, metadata.content_type, metadata.size)
        return path

    def get(self, path):
        with self.storage.open(path, "rb") as handle:
            return handle.read()

    def delete(self, path):
        if path and self.storage.exists(path):
            self.storage.delete(path)


def store_upload(upload, folder, store=None):
    """Validate an uploaded file and persist it. Returns the stored path or None."""
    if upload is None:
        return None
    metadata = AttachmentMetadata.from_upload(upload)
    validate(metadata)
    return (store or AttachmentStore()).put(upload, metadata, folder=folder)
