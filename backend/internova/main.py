"""FastAPI application factory with middleware, routers, and lifespan."""

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .auth.hashing import BcryptHasher
from .auth.routes import router as auth_router
from .auth.service import ensure_admin_account
from .auth.tokens import TokenIssuer
from .config import settings, setup_logging, validate_settings
from .database import SessionLocal, engine
from .errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternovaError,
    NotFoundError,
    TransientInfraError,
    ValidationError,
)
from .storage.blob import create_blob_store
from .storage.resume import ResumeUploader
from .student.routes import router as student_router
from .student.store import check_upsert_support

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (TransientInfraError, 500),
]


def _run_migrations() -> None:
    """Run Alembic migrations (upgrade head) on startup."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config()
    alembic_cfg.set_main_option("script_location", str(Path(__file__).parent.parent / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, "head")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle. Raises FatalConfigError before serving on bad config."""
    setup_logging()
    validate_settings(settings)
    check_upsert_support(engine)

    app.state.tokens = TokenIssuer(
        settings.jwt_key,
        settings.jwt_issuer,
        settings.jwt_audience,
        lifetime=timedelta(hours=settings.jwt_expire_hours),
    )
    app.state.hasher = BcryptHasher(rounds=settings.bcrypt_rounds)
    app.state.resume_uploader = ResumeUploader(
        create_blob_store(settings),
        max_bytes=settings.max_resume_bytes,
    )

    _run_migrations()

    db = SessionLocal()
    try:
        ensure_admin_account(db, settings, app.state.hasher)
    finally:
        db.close()

    logger.info("Internova API ready")
    yield


def _status_for(exc: InternovaError) -> int:
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return 500


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Internova API",
        lifespan=lifespan,
    )

    # --- Exception handlers ---
    @app.exception_handler(InternovaError)
    async def internova_error_handler(request: Request, exc: InternovaError):
        status_code = _status_for(exc)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        if status_code >= 500:
            # Detail was logged where it happened; the client only gets the generic message.
            logger.error("%s on %s %s", exc.__class__.__name__, request.method, request.url.path)
            message = exc.__class__.message
        else:
            message = exc.message
        return JSONResponse({"error": message}, status_code=status_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "request"
        return JSONResponse({"error": f"Invalid {field}: {first.get('msg', 'invalid value')}"}, status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse({"error": "Internal server error. Please try again later."}, status_code=500)

    # --- Middleware stack (LIFO: last added = outermost) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response

    # --- Routers ---
    app.include_router(auth_router)
    app.include_router(student_router)

    return app


app = create_app()
