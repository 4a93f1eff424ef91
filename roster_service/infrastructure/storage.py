import os
import time
import uuid

import httpx
from fastapi import Request
import structlog

from ..config import Settings
from ..domain.errors import UpstreamError
from .metrics import storage_uploads_total

logger = structlog.get_logger(__name__)


def generate_object_key(filename: str) -> str:
    """Time-based object name that keeps the original file extension."""
    ext = os.path.splitext(filename or "")[1]
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"


class SupabaseImageStorage:
    """Uploads images to a Supabase Storage bucket over its REST API."""

    def __init__(self, base_url: str, service_key: str, bucket: str,
                 timeout: float = 10.0, transport: httpx.BaseTransport | None = None):
        self.base = base_url.rstrip("/")
        self.bucket = bucket
        self.headers = {
            "Authorization": f"Bearer {service_key}",
            "apikey": service_key,
        }
        self.client = httpx.Client(timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabaseImageStorage | None":
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            return None
        return cls(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            settings.STORAGE_BUCKET,
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )

    def public_url(self, key: str) -> str:
        return f"{self.base}/storage/v1/object/public/{self.bucket}/{key}"

    def upload(self, filename: str, content: bytes, content_type: str | None) -> str:
        """Store the payload under a fresh key and return its public URL."""
        key = generate_object_key(filename)
        url = f"{self.base}/storage/v1/object/{self.bucket}/{key}"
        headers = {**self.headers, "Content-Type": content_type or "application/octet-stream"}
        try:
            r = self.client.post(url, content=content, headers=headers)
            r.raise_for_status()
        except httpx.HTTPError as e:
            storage_uploads_total.labels(result="error").inc()
            logger.error("image_upload_failed", bucket=self.bucket, key=key, error=str(e))
            raise UpstreamError(f"Image upload failed: {e}") from e

        storage_uploads_total.labels(result="ok").inc()
        logger.info("image_uploaded", bucket=self.bucket, key=key, size=len(content))
        return self.public_url(key)

    def close(self) -> None:
        self.client.close()


def get_storage(request: Request) -> SupabaseImageStorage | None:
    return request.app.state.storage
