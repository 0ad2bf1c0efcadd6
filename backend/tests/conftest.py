"""Shared test fixtures."""

import io

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from internova.auth.hashing import BcryptHasher
from internova.auth.models import Role, User
from internova.auth.service import AuthService
from internova.auth.store import UserStore
from internova.auth.tokens import TokenIssuer
from internova.database.base import Base
from internova.storage.blob import LocalBlobStore
from internova.storage.resume import ResumeUploader
from internova.student.models import StudentProfile
from internova.student.service import ProfileService, ResumeFile
from internova.student.store import ProfileStore

# Models must be imported so Base.metadata.create_all() sees all tables.
_ALL_MODELS = [User, StudentProfile]

TEST_JWT_KEY = "test-signing-key-0123456789abcdef0123456789abcdef"
TEST_ISSUER = "Internova"
TEST_AUDIENCE = "InternovaUsers"


def make_pdf(size: int = 1024) -> bytes:
    """Minimal PDF-looking payload of the requested size."""
    header = b"%PDF-1.4\n"
    return header + b"0" * max(size - len(header), 0)


def make_resume(data: bytes | None = None, file_name: str = "cv.pdf", content_type: str = "application/pdf") -> ResumeFile:
    data = make_pdf() if data is None else data
    return ResumeFile(stream=io.BytesIO(data), file_name=file_name, content_type=content_type, size=len(data))


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing.

    Note: SQLite lacks some PostgreSQL behaviour, but supports the
    ON CONFLICT ... RETURNING upsert used by the profile store.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def hasher():
    # Minimum work factor keeps the suite fast.
    return BcryptHasher(rounds=4)


@pytest.fixture
def token_issuer():
    return TokenIssuer(TEST_JWT_KEY, TEST_ISSUER, TEST_AUDIENCE)


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def uploader(blob_store):
    return ResumeUploader(blob_store)


@pytest.fixture
def auth_service(db_session, hasher, token_issuer):
    return AuthService(UserStore(db_session), hasher, token_issuer)


@pytest.fixture
def profile_service(db_session, uploader):
    return ProfileService(uploader, ProfileStore(db_session))


@pytest.fixture
def student_user(db_session, hasher):
    """Create a registered student account."""
    return UserStore(db_session).create("Jane Doe", "jane@example.com", hasher.hash("secret1"), Role.STUDENT)
