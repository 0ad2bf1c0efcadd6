"""Account model and roles."""

import enum
from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from ..database.base import Base


class Role(enum.StrEnum):
    STUDENT = "Student"
    COMPANY = "Company"
    ADMIN = "Admin"


# Admin accounts are provisioned out-of-band, never self-registered.
REGISTRABLE_ROLES = frozenset({Role.STUDENT, Role.COMPANY})

_ROLES_BY_NAME = {role.value.lower(): role for role in Role}


def parse_role(value: str) -> Role | None:
    """Case-insensitive lookup of a role name. Returns None for unknown names."""
    return _ROLES_BY_NAME.get((value or "").strip().lower())


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(200), nullable=False)
    # Stored trimmed and lower-cased; uniqueness is enforced here, not by callers.
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        CheckConstraint("role IN ('Student', 'Company', 'Admin')", name="ck_users_role"),
    )
