"""Document storage used for contract uploads.

The booking engine only needs ``upload(folder, name, file) -> {"key", "url"}``.
The default implementation writes through Django's storage API, so the
backend (local filesystem, in-memory for tests, S3 via ``STORAGES``) is a
settings concern.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from django.conf import settings  # type: ignore
from django.core.files.storage import Storage, default_storage  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

logger = logging.getLogger(__name__)


class DocumentStore(Protocol):
    def upload(self, folder: str, name: str, file) -> dict[str, str]:
        ...


class DocumentUploadError(Exception):
    """Raised when a document cannot be stored."""


class DjangoStorageDocumentStore:
    """Stores documents under ``<prefix>/<folder>/<name><ext>``."""

    def __init__(self, storage: Storage | None = None):
        self.storage = storage or default_storage
        self.prefix = getattr(settings, "DOCUMENT_STORAGE_PREFIX", "rentify").strip("/")
        self.max_size = getattr(settings, "CONTRACT_UPLOAD_MAX_SIZE", 5 * 1024 * 1024)

    def _key(self, folder: str, name: str, file) -> str:
        extension = os.path.splitext(getattr(file, "name", "") or "")[1].lower()
        parts = [p for p in (self.prefix, folder.strip("/")) if p]
        parts.append(f"{name}{extension}")
        return "/".join(parts)

    def upload(self, folder: str, name: str, file) -> dict[str, str]:
        size = getattr(file, "size", None)
        if size is not None and size > self.max_size:
            raise DocumentUploadError(
                f"File is too large. Maximum {self.max_size / 1024 / 1024:.1f} MB"
            )

        try:
            key = self.storage.save(self._key(folder, name, file), file)
            url = self.storage.url(key)
        except Exception as exc:
            raise DocumentUploadError(f"Storage backend rejected {name}: {exc}") from exc

        logger.info(f"Stored document {key}")
        return {"key": key, "url": url}


def get_document_store() -> DocumentStore:
    store_path = getattr(
        settings,
        "CONTRACT_DOCUMENT_STORE",
        "shared.infrastructure.storage.DjangoStorageDocumentStore",
    )
    return import_string(store_path)()
