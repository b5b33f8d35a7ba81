import logging
import os
import re
import time
from pathlib import Path
from uuid import UUID

from quizcraft.core.config import settings
from quizcraft.services.errors import StorageError

logger = logging.getLogger(__name__)

IMAGE_KINDS = ("covers", "questions", "results")


def sanitize_filename(filename: str) -> str:
    name = os.path.basename(filename or "").strip()
    name = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip(".-")
    return name or "image"


def build_image_path(user_id: UUID, kind: str, filename: str, timestamp_ms: int = None) -> str:
    """``<user>/<kind>/<millis>-<filename>``: one namespace per user, unique per upload."""
    if kind not in IMAGE_KINDS:
        raise ValueError(f"Unknown image kind: {kind}")
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{user_id}/{kind}/{timestamp_ms}-{sanitize_filename(filename)}"


class LocalBlobStore:
    """Blob storage on the local filesystem, served back through a static mount."""

    def __init__(self, root: str, public_url: str):
        self.root = Path(root)
        self.public_url = public_url.rstrip("/")

    def upload(self, data: bytes, destination: str) -> str:
        target = (self.root / destination).resolve()
        if not target.is_relative_to(self.root.resolve()):
            raise StorageError(f"Refusing to write outside the upload root: {destination}")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            logger.error("Failed to store %s", destination, exc_info=True)
            raise StorageError("Could not store the uploaded file") from exc

        logger.info("Stored %d bytes at %s", len(data), destination)
        return self.public_url_for(destination)

    def public_url_for(self, destination: str) -> str:
        return f"{self.public_url}/{destination}"


def get_blob_store() -> LocalBlobStore:
    return LocalBlobStore(settings.STORAGE_DIR, settings.STORAGE_PUBLIC_URL)
