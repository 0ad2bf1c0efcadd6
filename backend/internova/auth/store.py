"""Account persistence. The unique index on users.email is the authority on duplicates."""

import logging
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import ConflictError, TransientInfraError
from .models import Role, User

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get_by_email(self, email: str) -> User | None:
        """Look up an account by its already-normalized email."""
        try:
            return self._db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as exc:
            logger.exception("Account lookup failed")
            raise TransientInfraError() from exc

    def create(self, full_name: str, email: str, password_hash: str, role: Role) -> User:
        """Insert a new account and commit.

        Raises ConflictError when the email is taken, including when a concurrent
        request won the race after our pre-check.
        """
        user = User(
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role.value,
            created_at=datetime.now(UTC),
        )
        self._db.add(user)
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            logger.info("Duplicate registration rejected by unique index: %s", email)
            raise ConflictError() from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.exception("Account insert failed for %s", email)
            raise TransientInfraError() from exc
        self._db.refresh(user)
        return user
