"""Signed bearer tokens (JWT, HS256).

The issuer is built once at startup from Settings and refuses to exist
without a signing key.
"""

import logging
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from jwt.exceptions import InvalidTokenError

from ..errors import AuthenticationError, FatalConfigError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_LIFETIME = timedelta(hours=8)

_REQUIRED_CLAIMS = ["sub", "email", "role", "jti", "iat", "exp", "iss", "aud"]
_INVALID_TOKEN = "Invalid or expired token."


class TokenIssuer:
    def __init__(
        self,
        key: str,
        issuer: str,
        audience: str,
        lifetime: timedelta = TOKEN_LIFETIME,
    ) -> None:
        if not key or not key.strip():
            raise FatalConfigError("JWT signing key is not configured")
        self._key = key
        self._issuer = issuer
        self._audience = audience
        self._lifetime = lifetime

    def issue(self, account_id: int, email: str, role: str, issued_at: datetime | None = None) -> str:
        """Create a signed token for an account, valid for the configured lifetime."""
        now = issued_at or datetime.now(UTC)
        claims = {
            "sub": str(account_id),
            "email": email,
            "role": str(role),
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + self._lifetime,
            "iss": self._issuer,
            "aud": self._audience,
        }
        return jwt.encode(claims, self._key, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        """Decode and validate a token, returning its claims.

        Raises AuthenticationError with the same message whatever the cause.
        """
        try:
            return jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                audience=self._audience,
                issuer=self._issuer,
                options={"require": _REQUIRED_CLAIMS},
            )
        except InvalidTokenError as exc:
            logger.debug("Token rejected: %s", exc.__class__.__name__)
            raise AuthenticationError(_INVALID_TOKEN) from exc
