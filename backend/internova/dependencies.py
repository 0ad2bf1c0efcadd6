"""Shared FastAPI dependencies.

Components built at startup live on app.state; services are assembled per
request around the request's DB session.
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .auth.hashing import CredentialHasher
from .auth.models import Role
from .auth.service import AuthService
from .auth.store import UserStore
from .auth.tokens import TokenIssuer
from .database import get_db
from .errors import AuthenticationError, AuthorizationError
from .storage.resume import ResumeUploader
from .student.service import ProfileService
from .student.store import ProfileStore

_bearer_scheme = HTTPBearer(auto_error=False)


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.tokens


def get_hasher(request: Request) -> CredentialHasher:
    return request.app.state.hasher


def get_resume_uploader(request: Request) -> ResumeUploader:
    return request.app.state.resume_uploader


def get_auth_service(
    db: Session = Depends(get_db),
    hasher: CredentialHasher = Depends(get_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(UserStore(db), hasher, tokens)


def get_profile_service(
    db: Session = Depends(get_db),
    uploader: ResumeUploader = Depends(get_resume_uploader),
) -> ProfileService:
    return ProfileService(uploader, ProfileStore(db))


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> dict:
    """Verify the Bearer token and return its claims. Handled as 401 in main.py."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required.")
    return tokens.verify(credentials.credentials)


def get_current_student_id(claims: dict = Depends(get_current_claims)) -> int:
    """Account id of an authenticated Student, or 401/403."""
    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthenticationError("User identity could not be determined from token.") from None
    if claims.get("role") != Role.STUDENT:
        raise AuthorizationError()
    return user_id
