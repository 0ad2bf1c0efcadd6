"""Student profile service: resume upload followed by an atomic profile upsert."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import BinaryIO, Callable

from ..errors import PersistenceError, ValidationError
from ..storage.resume import ResumeUploader
from .models import StudentProfile
from .store import ProfileStore

logger = logging.getLogger(__name__)

# Mirror the student_profiles column widths.
MAX_UNIVERSITY_ID_LENGTH = 100
MAX_DEPARTMENT_LENGTH = 200

GPA_MIN = Decimal("0.00")
GPA_MAX = Decimal("4.00")
_CENTS = Decimal("0.01")


@dataclass
class ResumeFile:
    """An uploaded file plus the metadata the client declared for it."""

    stream: BinaryIO | None
    file_name: str
    content_type: str
    size: int


def parse_gpa(value) -> Decimal:
    try:
        gpa = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("GPA must be a number between 0.00 and 4.00.") from None
    if not gpa.is_finite() or gpa < GPA_MIN or gpa > GPA_MAX:
        raise ValidationError("GPA must be between 0.00 and 4.00.")
    return gpa.quantize(_CENTS, rounding=ROUND_HALF_UP)


class ProfileService:
    def __init__(
        self,
        uploader: ResumeUploader,
        profiles: ProfileStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._uploader = uploader
        self._profiles = profiles
        self._clock = clock or (lambda: datetime.now(UTC))

    def get_profile(self, owner_id: int) -> StudentProfile | None:
        return self._profiles.get_by_user_id(owner_id)

    def upsert(
        self,
        owner_id: int,
        university_id: str,
        department: str | None,
        gpa,
        skills: str | None,
        resume: ResumeFile | None,
    ) -> StudentProfile:
        """Upload the resume, then create or fully overwrite the owner's profile.

        If the database write fails after the upload succeeded, the uploaded
        artifact is left in storage and its URL is logged for reconciliation.
        """
        university = (university_id or "").strip()
        if not university:
            raise ValidationError("UniversityId is required.")
        if len(university) > MAX_UNIVERSITY_ID_LENGTH:
            raise ValidationError(f"UniversityId must be at most {MAX_UNIVERSITY_ID_LENGTH} characters.")
        department = (department or "").strip()
        if len(department) > MAX_DEPARTMENT_LENGTH:
            raise ValidationError(f"Department must be at most {MAX_DEPARTMENT_LENGTH} characters.")
        parsed_gpa = parse_gpa(gpa)
        if resume is None or resume.stream is None or not resume.size:
            raise ValidationError("A resume file is required.")

        resume_url = self._uploader.upload(
            resume.stream,
            resume.file_name,
            resume.content_type,
            resume.size,
            owner_id,
        )

        try:
            saved = self._profiles.upsert(
                user_id=owner_id,
                university_id=university,
                department=department,
                gpa=parsed_gpa,
                skills=(skills or "").strip(),
                resume_url=resume_url,
                now=self._clock(),
            )
        except Exception as exc:
            logger.error(
                "Profile upsert failed for user %s; orphaned resume artifact: %s",
                owner_id,
                resume_url,
                exc_info=True,
            )
            raise PersistenceError() from exc

        logger.info("Profile upserted for user %s, profile %s", owner_id, saved.id)
        return saved
