"""SQL engine and session factory behind the key-value persistence collaborator."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

DATABASE_URL_ENV = "DATABASE_URL"
DEFAULT_DATABASE_PATH = Path(__file__).resolve().parent.parent / "panel_ledger.db"

CONNECT_TIMEOUT_ENV = "DATABASE_CONNECT_TIMEOUT"
DEFAULT_CONNECT_TIMEOUT = 10

# (engine option, environment variable, default)
POOL_SETTINGS = (
    ("pool_size", "DATABASE_POOL_SIZE", 5),
    ("max_overflow", "DATABASE_MAX_OVERFLOW", 10),
    ("pool_timeout", "DATABASE_POOL_TIMEOUT", 30),
    ("pool_recycle", "DATABASE_POOL_RECYCLE", 1800),
)


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return value


def resolve_database_url(raw_url: str | None = None) -> str:
    """Return the URL to connect to, creating the folder of a SQLite file."""

    url = make_url(raw_url or f"sqlite:///{DEFAULT_DATABASE_PATH.as_posix()}")
    if url.drivername.startswith("sqlite") and url.database not in (None, "", ":memory:"):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return url.render_as_string(hide_password=False)


def engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    options: Dict[str, Any] = {
        "pool_pre_ping": True,
        "connect_args": {
            "connect_timeout": _read_int_env(CONNECT_TIMEOUT_ENV, DEFAULT_CONNECT_TIMEOUT)
        },
    }
    for option, env_name, default in POOL_SETTINGS:
        options[option] = _read_int_env(env_name, default)
    return options


def create_ledger_engine(raw_url: str | None = None) -> Engine:
    url = resolve_database_url(raw_url)
    return create_engine(url, **engine_options(url))


SQLALCHEMY_DATABASE_URL = resolve_database_url(os.getenv(DATABASE_URL_ENV))

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_options(SQLALCHEMY_DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def session_scope(factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """Commit on success, roll back on any error, always close."""
    session = (factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
