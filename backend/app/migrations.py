"""Apply Alembic migrations for the key-value table before the store loads."""

from __future__ import annotations

import errno
import logging
import os
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect
from sqlalchemy.engine.reflection import Inspector

from .database import DATABASE_URL_ENV, SQLALCHEMY_DATABASE_URL, create_ledger_engine

if os.name == "posix":  # pragma: no cover - platform specific
    import fcntl
else:  # pragma: no cover - platform specific
    import msvcrt

LOGGER = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent
KV_TABLE_NAME = "kv_entries"
VERSION_TABLE_NAME = "alembic_version"

LOCK_FILENAME = ".alembic-migration.lock"
LOCK_RETRY_DELAY = 0.25
LOCK_TIMEOUT_ENV = "ALEMBIC_MIGRATION_LOCK_TIMEOUT"
DEFAULT_LOCK_TIMEOUT = 30.0

# Windows reports ERROR_SHARING_VIOLATION (32) or ERROR_LOCK_VIOLATION (33)
# while another process holds the lock.
_BUSY_ERRNOS = {errno.EACCES, errno.EAGAIN, errno.EBUSY}
_BUSY_WINERRORS = {32, 33}

RevisionSentinel = tuple[str, Callable[[Inspector], bool]]

# Newest first: the first matching check names the revision an unversioned
# database already corresponds to.
REVISION_SENTINELS: Sequence[RevisionSentinel] = (
    ("20250301_0001", lambda inspector: inspector.has_table(KV_TABLE_NAME)),
)


def _read_lock_timeout() -> float:
    raw = os.getenv(LOCK_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_LOCK_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning(
            "Invalid %s=%s; falling back to %.1f seconds", LOCK_TIMEOUT_ENV, raw, DEFAULT_LOCK_TIMEOUT
        )
        return DEFAULT_LOCK_TIMEOUT
    if value <= 0:
        LOGGER.warning(
            "%s must be positive; using %.1f seconds", LOCK_TIMEOUT_ENV, DEFAULT_LOCK_TIMEOUT
        )
        return DEFAULT_LOCK_TIMEOUT
    return value


class MigrationLock:
    """Exclusive lock file so concurrent workers never migrate at the same time."""

    def __init__(self, path: Path, timeout: float) -> None:
        self.path = path
        self.timeout = timeout
        self._handle = None

    @staticmethod
    def _is_busy(error: OSError) -> bool:
        if isinstance(error, BlockingIOError):
            return True
        return (
            getattr(error, "errno", None) in _BUSY_ERRNOS
            or getattr(error, "winerror", None) in _BUSY_WINERRORS
        )

    def _try_lock(self) -> None:
        if os.name == "posix":  # pragma: no cover - platform specific
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        else:  # pragma: no cover - platform specific
            msvcrt.locking(self._handle.fileno(), msvcrt.LK_NBLCK, 1)

    def _unlock(self) -> None:
        if os.name == "posix":  # pragma: no cover - platform specific
            fcntl.flock(self._handle.fileno(), fcntl.LOCK_UN)
        else:  # pragma: no cover - platform specific
            msvcrt.locking(self._handle.fileno(), msvcrt.LK_UNLCK, 1)

    def __enter__(self) -> "MigrationLock":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("a+")
        deadline = time.monotonic() + self.timeout
        LOGGER.debug("Acquiring Alembic migration lock at %s", self.path)
        while True:
            try:
                self._try_lock()
                return self
            except OSError as error:
                if not self._is_busy(error):
                    self._handle.close()
                    raise
                if time.monotonic() >= deadline:
                    self._handle.close()
                    raise TimeoutError("Timed out waiting for Alembic migration lock") from error
                time.sleep(LOCK_RETRY_DELAY)

    def __exit__(self, *exc_info) -> None:
        try:
            self._unlock()
        except OSError:  # pragma: no cover - platform specific
            LOGGER.debug("Could not release migration lock at %s", self.path)
        finally:
            self._handle.close()
            self._handle = None
            LOGGER.debug("Released Alembic migration lock at %s", self.path)


def _detect_revision(inspector: Inspector) -> Optional[str]:
    for revision, matches in REVISION_SENTINELS:
        if matches(inspector):
            return revision
    return None


def _build_config(database_url: str) -> Config:
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    # ConfigParser interpolates "%", which may appear in encoded passwords.
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


def _upgrade(config: Config, inspector: Inspector) -> None:
    if inspector.has_table(VERSION_TABLE_NAME):
        LOGGER.debug("Alembic version table present; applying pending revisions")
        command.upgrade(config, "head")
        return

    unversioned = [
        name for name in inspector.get_table_names() if name != VERSION_TABLE_NAME
    ]
    revision = _detect_revision(inspector) if unversioned else None
    if revision is None:
        LOGGER.info("No Alembic metadata found; running full upgrade")
        command.upgrade(config, "head")
        return

    LOGGER.info("Existing tables match revision %s; stamping before upgrade", revision)
    command.stamp(config, revision)
    if revision != ScriptDirectory.from_config(config).get_current_head():
        command.upgrade(config, "head")


def run_database_migrations(database_url: str | None = None) -> None:
    """Bring the schema to the latest revision so the key-value table exists."""

    project_root = BACKEND_DIR.parent
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

    url = database_url or os.getenv(DATABASE_URL_ENV) or SQLALCHEMY_DATABASE_URL
    config = _build_config(url)
    LOGGER.info("Running database migrations at %s", config.get_main_option("sqlalchemy.url"))

    with MigrationLock(BACKEND_DIR / LOCK_FILENAME, _read_lock_timeout()):
        engine = create_ledger_engine(url)
        try:
            _upgrade(config, inspect(engine))
        finally:
            engine.dispose()
