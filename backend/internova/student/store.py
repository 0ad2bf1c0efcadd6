"""Student profile persistence: one row per user, written with a single upsert."""

import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ..errors import FatalConfigError
from .models import StudentProfile

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

# Columns replaced on conflict. created_at is absent: it keeps the first insert's value.
_OVERWRITTEN = ("university_id", "department", "gpa", "skills", "resume_url", "updated_at")


def check_upsert_support(engine: Engine) -> None:
    """Fail at startup when the database has no INSERT ... ON CONFLICT ... RETURNING."""
    if engine.dialect.name not in _INSERT_BY_DIALECT:
        raise FatalConfigError(
            f"Profile upsert requires PostgreSQL or SQLite, not {engine.dialect.name}"
        )


class ProfileStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get_by_user_id(self, user_id: int) -> StudentProfile | None:
        return self._db.query(StudentProfile).filter(StudentProfile.user_id == user_id).first()

    def upsert(
        self,
        user_id: int,
        university_id: str,
        department: str,
        gpa: Decimal,
        skills: str,
        resume_url: str,
        now: datetime,
    ) -> StudentProfile:
        """INSERT ... ON CONFLICT (user_id) DO UPDATE ... RETURNING, then commit.

        Returns the persisted row; on the update path id and created_at are the
        existing record's. Database errors propagate after a rollback.
        """
        insert = _INSERT_BY_DIALECT[self._db.get_bind().dialect.name]
        stmt = insert(StudentProfile).values(
            user_id=user_id,
            university_id=university_id,
            department=department,
            gpa=gpa,
            skills=skills,
            resume_url=resume_url,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[StudentProfile.user_id],
            set_={col: stmt.excluded[col] for col in _OVERWRITTEN},
        ).returning(StudentProfile)

        try:
            profile = self._db.scalars(stmt, execution_options={"populate_existing": True}).one()
            profile_id = profile.id
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        logger.info("Upserted student profile %d for user %d", profile_id, user_id)
        return profile
