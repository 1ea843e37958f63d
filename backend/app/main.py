"""Expose the Panel Ledger FastAPI app and enforce local development CORS defaults."""

import logging
import os
import re
from contextlib import asynccontextmanager
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .migrations import run_database_migrations
from .routers import (
    calendar_router,
    clients_router,
    panels_router,
    payments_router,
    projects_router,
    subscriptions_router,
    weekly_cuts_router,
)
from .services.legacy_migration import migrate_legacy_data
from .store import EntityStore, SqlKeyValueStore

LOGGER = logging.getLogger(__name__)

LEGACY_MIGRATION_ENV = "ENABLE_LEGACY_MIGRATION"

LOCAL_DEVELOPMENT_ORIGINS = {
    "http://localhost:5174",
    "http://localhost:5173",
}
LOCALHOST_ORIGIN_REGEX = r"https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$"

DEFAULT_ALLOWED_ORIGINS = {
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    *LOCAL_DEVELOPMENT_ORIGINS,
    "http://127.0.0.1:5174",
    "http://localhost:4173",
    "http://127.0.0.1:4173",
}


def _clean_origins(raw_origins: Iterable[str]) -> list[str]:
    """Strip whitespace and trailing slashes, dropping blanks and duplicates."""

    cleaned = {origin.strip().rstrip("/") for origin in raw_origins}
    return sorted(origin for origin in cleaned if origin)


def _split_raw_origins(raw_value: str) -> list[str]:
    """Split a raw origin string using commas or whitespace as separators."""

    return [origin for origin in re.split(r"[\s,]+", raw_value) if origin]


def _resolve_allowed_origins() -> list[str]:
    raw_value = os.getenv("BACKEND_ALLOWED_ORIGINS")
    configured = _split_raw_origins(raw_value) if raw_value else DEFAULT_ALLOWED_ORIGINS
    # The Vite dev servers stay allowed whatever the environment says.
    return _clean_origins([*configured, *LOCAL_DEVELOPMENT_ORIGINS])



def _read_bool_env(name: str, default: bool = True) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def build_store() -> EntityStore:
    """Prepare the schema, upgrade legacy data and load every collection."""

    LOGGER.info("Ensuring database schema is up to date before serving requests")
    run_database_migrations()

    kv = SqlKeyValueStore()
    if _read_bool_env(LEGACY_MIGRATION_ENV, True):
        migrate_legacy_data(kv)
    else:
        LOGGER.info("Legacy data migration disabled via %s", LEGACY_MIGRATION_ENV)

    store = EntityStore.load(kv)
    LOGGER.info(
        "Loaded %d panels, %d clients and %d subscriptions",
        len(store.panels),
        len(store.clients),
        len(store.subscriptions),
    )
    return store


@asynccontextmanager
async def lifespan(application: FastAPI):
    application.state.store = build_store()
    yield


app = FastAPI(title="Panel Ledger API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_resolve_allowed_origins(),
    allow_origin_regex=LOCALHOST_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(panels_router, prefix="/panels", tags=["panels"])
app.include_router(clients_router, prefix="/clients", tags=["clients"])
app.include_router(subscriptions_router, prefix="/subscriptions", tags=["subscriptions"])
app.include_router(payments_router, prefix="/payments", tags=["payments"])
app.include_router(projects_router, prefix="/projects", tags=["projects"])
app.include_router(weekly_cuts_router, prefix="/weekly-cuts", tags=["weekly-cuts"])
app.include_router(calendar_router, prefix="/calendar", tags=["calendar"])


@app.get("/", tags=["health"])
def read_root() -> dict[str, str]:
    """Return a simple health check response."""
    return {"status": "ok"}
