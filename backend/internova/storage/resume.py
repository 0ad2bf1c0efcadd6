"""Resume upload: validate a PDF, then hand it to the blob store."""

import logging
import os
from datetime import UTC, datetime
from typing import BinaryIO, Callable

from ..errors import StorageUnavailableError, ValidationError
from .blob import BlobStore

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"
DEFAULT_MAX_BYTES = 5 * 1024 * 1024


class ResumeUploader:
    def __init__(
        self,
        store: BlobStore,
        max_bytes: int = DEFAULT_MAX_BYTES,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._max_bytes = max_bytes
        self._clock = clock or (lambda: datetime.now(UTC))

    def validate(self, stream: BinaryIO | None, file_name: str, content_type: str, size: int) -> None:
        """Run every check that must pass before the storage backend is touched."""
        if stream is None or not size or size <= 0:
            raise ValidationError("Resume file is required.")

        if size > self._max_bytes:
            raise ValidationError(
                f"Resume file must not exceed {self._max_bytes / 1024 / 1024:.0f} MB. "
                f"Received {size / 1024 / 1024:.2f} MB."
            )

        extension = os.path.splitext(file_name or "")[1].lower()
        is_pdf = (content_type or "").strip().lower() == PDF_CONTENT_TYPE and extension == PDF_EXTENSION
        if not is_pdf:
            raise ValidationError("Only PDF files are accepted. Please upload a .pdf file.")

    def blob_name(self, owner_id: int) -> str:
        timestamp = self._clock().strftime("%Y%m%d%H%M%S%f")
        return f"{owner_id}_{timestamp}_resume.pdf"

    def upload(
        self,
        stream: BinaryIO | None,
        file_name: str,
        content_type: str,
        size: int,
        owner_id: int,
    ) -> str:
        """Validate and store a resume PDF, returning the artifact URL.

        Raises ValidationError for bad input and StorageUnavailableError when
        the backend fails.
        """
        self.validate(stream, file_name, content_type, size)
        data = stream.read(self._max_bytes + 1)
        if not data:
            raise ValidationError("Resume file is required.")
        if len(data) > self._max_bytes:
            raise ValidationError(
                f"Resume file must not exceed {self._max_bytes / 1024 / 1024:.0f} MB."
            )

        name = self.blob_name(owner_id)
        logger.info("Uploading resume blob '%s' for user %s", name, owner_id)
        try:
            url = self._store.put(name, data, PDF_CONTENT_TYPE)
        except Exception as exc:
            logger.exception("Resume upload to storage failed for user %s", owner_id)
            raise StorageUnavailableError() from exc
        logger.info("Resume blob '%s' uploaded (%d bytes)", name, len(data))
        return url
