"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from sitecards.config import Settings, get_settings
from sitecards.db import CardStore, InMemoryCardStore, SqlCardStore


def build_card_store(settings: Settings) -> CardStore:
    """
    Pick the backend once: SQL when DATABASE_URL is set, in-memory otherwise.
    """
    if settings.use_database:
        return SqlCardStore(
            settings.database_url,
            sslmode=settings.database_sslmode or None,
        )
    return InMemoryCardStore()


def bootstrap_card_store(settings: Optional[Settings] = None) -> CardStore:
    """Build the configured store and make sure its schema exists."""
    store = build_card_store(settings or get_settings())
    store.init_schema()
    return store


def get_card_store(request: Request) -> CardStore:
    return request.app.state.card_store
