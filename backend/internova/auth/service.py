"""Authentication service: registration, login, admin provisioning."""

import logging
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from ..config import Settings
from ..errors import AuthenticationError, ConflictError, ValidationError
from .hashing import MAX_PASSWORD_BYTES, CredentialHasher
from .models import REGISTRABLE_ROLES, Role, User, parse_role
from .store import UserStore
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)

MAX_FULL_NAME_LENGTH = 200
MAX_EMAIL_LENGTH = 320
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class LoginResult:
    token: str
    user_id: int
    email: str
    role: str


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _registration_role(value: str) -> Role:
    role = parse_role(value)
    if role is None or role not in REGISTRABLE_ROLES:
        raise ValidationError("Role must be 'Student' or 'Company'. Admin accounts cannot be self-registered.")
    return role


def _check_email(email: str) -> None:
    if not email or len(email) > MAX_EMAIL_LENGTH:
        raise ValidationError(f"Email is required and must be at most {MAX_EMAIL_LENGTH} characters.")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Email address is not valid.") from exc


def _check_password(password: str) -> None:
    if password is None or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")


class AuthService:
    def __init__(self, users: UserStore, hasher: CredentialHasher, tokens: TokenIssuer) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    def register(self, full_name: str, email: str, password: str, role: str) -> int:
        """Create a Student or Company account and return its id."""
        name = (full_name or "").strip()
        if not name or len(name) > MAX_FULL_NAME_LENGTH:
            raise ValidationError(f"Full name is required and must be at most {MAX_FULL_NAME_LENGTH} characters.")
        normalized = normalize_email(email)
        _check_email(normalized)
        _check_password(password)
        parsed_role = _registration_role(role)

        if self._users.get_by_email(normalized) is not None:
            raise ConflictError()

        user = self._users.create(name, normalized, self._hasher.hash(password), parsed_role)
        logger.info("Registered %s account %d", user.role, user.id)
        return user.id

    def login(self, email: str, password: str) -> LoginResult:
        """Verify credentials and issue a token.

        Unknown email and wrong password raise the same AuthenticationError.
        """
        normalized = normalize_email(email)
        user = self._users.get_by_email(normalized) if normalized else None
        if user is None or not self._hasher.verify(user.password_hash, password or ""):
            logger.info("Failed login attempt")
            raise AuthenticationError()

        token = self._tokens.issue(user.id, user.email, user.role)
        logger.info("Login: account %d (%s)", user.id, user.role)
        return LoginResult(token=token, user_id=user.id, email=user.email, role=user.role)


def ensure_admin_account(db: Session, cfg: Settings, hasher: CredentialHasher) -> User | None:
    """Create the admin account from env vars if it doesn't exist yet."""
    if not cfg.admin_email or not cfg.admin_password:
        return None

    users = UserStore(db)
    email = normalize_email(cfg.admin_email)
    existing = users.get_by_email(email)
    if existing:
        return existing

    try:
        admin = users.create(cfg.admin_full_name.strip() or "Administrator", email, hasher.hash(cfg.admin_password), Role.ADMIN)
    except ConflictError:
        # Another worker provisioned it between our lookup and insert.
        return users.get_by_email(email)
    logger.info("Provisioned admin account %d", admin.id)
    return admin
