import os
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from contextlib import contextmanager
from carrental.config import settings

database_url = settings.database_url

# Conservative pool defaults; overridable per deployment.
POOL_DEFAULTS = {
    "pool_size": 5,
    "max_overflow": 5,
    "pool_timeout": 10,
    "pool_recycle": 3600,
}

POOL_LIMITS = {
    "pool_size": (1, 32),
    "max_overflow": (0, 32),
    "pool_timeout": (2, 60),
    "pool_recycle": (300, 7200),
}


def _get_env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default

    try:
        return int(str(raw_value).strip())
    except (TypeError, ValueError):
        return default


def _bounded_env_int(name: str, default: int, minimum: int, maximum: int) -> int:
    value = _get_env_int(name, default)
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def is_sqlite_url(url) -> bool:
    return str(url).strip().lower().startswith("sqlite")


def build_engine(url: str):
    """Create an engine for the given URL with backend-appropriate pool settings."""
    # SQLite does not accept QueuePool sizing arguments.
    if is_sqlite_url(url):
        return create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=_bounded_env_int("DB_POOL_SIZE", POOL_DEFAULTS["pool_size"], *POOL_LIMITS["pool_size"]),
        max_overflow=_bounded_env_int("DB_MAX_OVERFLOW", POOL_DEFAULTS["max_overflow"], *POOL_LIMITS["max_overflow"]),
        pool_recycle=_bounded_env_int("DB_POOL_RECYCLE", POOL_DEFAULTS["pool_recycle"], *POOL_LIMITS["pool_recycle"]),
        pool_timeout=_bounded_env_int("DB_POOL_TIMEOUT", POOL_DEFAULTS["pool_timeout"], *POOL_LIMITS["pool_timeout"]),
    )


engine = build_engine(database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def get_db():
    """Context manager for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_session():
    """Get a database session directly (caller responsible for closing)"""
    return SessionLocal()


def init_db() -> None:
    """Create all tables registered on Base.metadata."""
    from carrental import models  # noqa: F401  # ensure models are registered

    Base.metadata.create_all(bind=engine)
