import logging
import logging.handlers
from pathlib import Path

from pydantic_settings import BaseSettings

from .errors import FatalConfigError

_MIN_JWT_KEY_BYTES = 32


class Settings(BaseSettings):
    database_url: str = "postgresql+psycopg2://internova:internova@db:5432/internova"
    db_pool_timeout: int = 10
    db_statement_timeout_ms: int = 15_000

    # Bearer tokens
    jwt_key: str = ""
    jwt_issuer: str = "Internova"
    jwt_audience: str = "InternovaUsers"
    jwt_expire_hours: int = 8

    bcrypt_rounds: int = 12

    # Resume storage
    max_resume_bytes: int = 5 * 1024 * 1024
    resume_bucket: str = "resumes"
    resume_local_dir: str = "data/resumes"
    supabase_url: str = ""
    supabase_service_key: str = ""
    storage_timeout_seconds: int = 20

    # Out-of-band admin provisioning
    admin_email: str = ""
    admin_password: str = ""
    admin_full_name: str = "Administrator"

    cors_origins: str = "http://localhost:5173,http://localhost:5174"

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10 MB
    log_backup_count: int = 5

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)


settings = Settings()


def _is_placeholder(value: str) -> bool:
    lowered = value.lower()
    return "{set via" in lowered or "change-me" in lowered or "changeme" in lowered


def validate_settings(cfg: Settings) -> None:
    """Refuse to start without a usable signing key and datastore.

    Raises FatalConfigError listing every problem found.
    """
    problems = []
    key = cfg.jwt_key.strip()
    if not key or _is_placeholder(key):
        problems.append("JWT_KEY is not configured")
    elif len(key.encode()) < _MIN_JWT_KEY_BYTES:
        problems.append(f"JWT_KEY must be at least {_MIN_JWT_KEY_BYTES} bytes")
    if not cfg.database_url.strip():
        problems.append("DATABASE_URL is not configured")
    if problems:
        raise FatalConfigError("; ".join(problems))


_DETAIL_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
_QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore", "hpack")


def _rotating_handler(path: Path, level: int, cfg: Settings) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=cfg.log_max_bytes,
        backupCount=cfg.log_backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAIL_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(cfg: Settings = settings) -> None:
    """Route all loggers to stdout plus rotating app.log (everything) and error.log (ERROR+)."""
    log_dir = Path(cfg.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S"))
    root.addHandler(console)
    root.addHandler(_rotating_handler(log_dir / "app.log", logging.DEBUG, cfg))
    root.addHandler(_rotating_handler(log_dir / "error.log", logging.ERROR, cfg))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured: level=%s, dir=%s, rotate at %d bytes x %d",
        cfg.log_level, log_dir, cfg.log_max_bytes, cfg.log_backup_count,
    )
