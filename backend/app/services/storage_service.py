# backend/app/services/storage_service.py
"""
Object storage service.

Uploads media/material bytes to the S3-compatible bucket and maps object
keys to public URLs. Deletion is best effort: failures are logged and
reported as False, never raised.
"""

import re
from typing import Optional

import requests
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from ..core.ulid_helper import generate_ulid
from .base import BaseService
from .storage_client import StorageClient

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("-", (filename or "file").strip()).strip("-.")
    return cleaned or "file"


class StorageService(BaseService):
    """Upload and delete objects addressed by public URL."""

    def __init__(self, db: Optional[Session] = None, client: Optional[StorageClient] = None):
        super().__init__(db)
        self._client = client

    @property
    def client(self) -> StorageClient:
        if self._client is None:
            if not settings.storage_configured:
                raise ServiceException("Object storage is not configured")
            self._client = StorageClient()
        return self._client

    def public_url(self, object_key: str) -> str:
        base = settings.storage_public_base_url.rstrip("/")
        if base:
            return f"{base}/{object_key}"
        return self.client.object_url(object_key)

    def key_from_url(self, url: str) -> Optional[str]:
        """Recover the object key from a URL produced by ``public_url``."""
        base = settings.storage_public_base_url.rstrip("/")
        if base and url.startswith(base + "/"):
            return url[len(base) + 1 :]
        prefix = self.client.object_url("")
        if url.startswith(prefix):
            return url[len(prefix) :]
        return None

    @BaseService.measure_operation("upload_bytes")
    def upload_bytes(self, data: bytes, folder: str, filename: str, content_type: str) -> str:
        """
        Store bytes under ``folder/`` and return the public URL.

        Raises:
            ServiceException: Storage not configured or the upload was rejected
        """
        object_key = f"{folder.strip('/')}/{generate_ulid()}-{safe_filename(filename)}"
        try:
            ok, status_code = self.client.put_bytes(object_key, data, content_type)
        except requests.RequestException as e:
            self.logger.error(f"Upload of {object_key} failed: {str(e)}")
            raise ServiceException("File upload failed", details={"key": object_key})
        if not ok:
            self.logger.error(f"Upload of {object_key} rejected with status {status_code}")
            raise ServiceException(
                "File upload failed", details={"key": object_key, "status": status_code}
            )
        self.log_operation("object_uploaded", key=object_key, size=len(data))
        return self.public_url(object_key)

    def delete_by_url(self, url: Optional[str]) -> bool:
        """Best-effort delete; never raises."""
        if not url:
            return False
        try:
            object_key = self.key_from_url(url)
            if object_key is None:
                self.logger.warning(f"Not a managed object URL, skipping delete: {url}")
                return False
            deleted = self.client.delete_object(object_key)
        except (ServiceException, requests.RequestException, RuntimeError) as e:
            self.logger.warning(f"Failed to delete object for {url}: {str(e)}")
            return False
        if not deleted:
            self.logger.warning(f"Object store refused delete for {url}")
        return deleted
