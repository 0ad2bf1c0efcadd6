"""Blob storage backends with Protocol pattern for dependency injection.

Provides SupabaseBlobStore (private Supabase Storage bucket) and LocalBlobStore
(filesystem, for development and tests). Both return an absolute URL for the
stored object and let backend errors propagate to the caller.
"""

import logging
import os
from pathlib import Path
from typing import Any, Protocol

from ..config import Settings

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Blob store interface: bytes in, durable URL out."""

    def put(self, name: str, data: bytes, content_type: str) -> str: ...


class LocalBlobStore:
    """Stores blobs as owner-readable files under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    def put(self, name: str, data: bytes, content_type: str) -> str:
        self._root.mkdir(parents=True, exist_ok=True)
        path = self._root / Path(name).name
        # O_EXCL: never overwrite an existing artifact.
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        logger.debug("Stored %d bytes (%s) at %s", len(data), content_type, path)
        return path.as_uri()


class SupabaseBlobStore:
    """Supabase Storage backend. The bucket is private; URLs require an authenticated fetch."""

    def __init__(self, client: Any, bucket: str, base_url: str) -> None:
        self._client = client
        self._bucket = bucket
        self._base_url = base_url.rstrip("/")
        self._bucket_ready = False

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        existing = {b.name for b in self._client.storage.list_buckets()}
        if self._bucket not in existing:
            logger.info("Creating private storage bucket '%s'", self._bucket)
            self._client.storage.create_bucket(self._bucket, options={"public": False})
        self._bucket_ready = True

    def put(self, name: str, data: bytes, content_type: str) -> str:
        self._ensure_bucket()
        self._client.storage.from_(self._bucket).upload(
            name,
            data,
            file_options={"content-type": content_type, "upsert": "false"},
        )
        return f"{self._base_url}/storage/v1/object/authenticated/{self._bucket}/{name}"


def create_blob_store(cfg: Settings) -> BlobStore:
    """Factory: Supabase when configured, local filesystem otherwise."""
    if not cfg.supabase_configured:
        logger.warning("Supabase not configured, storing resumes under %s", cfg.resume_local_dir)
        return LocalBlobStore(cfg.resume_local_dir)

    from supabase import ClientOptions, create_client

    client = create_client(
        cfg.supabase_url,
        cfg.supabase_service_key,
        options=ClientOptions(storage_client_timeout=cfg.storage_timeout_seconds),
    )
    logger.info("Resume storage: Supabase bucket '%s'", cfg.resume_bucket)
    return SupabaseBlobStore(client, cfg.resume_bucket, cfg.supabase_url)
