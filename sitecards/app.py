"""
FastAPI application factory for the cards service.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from sitecards.config import Settings, get_settings
from sitecards.db import CardStore
from sitecards.dependencies import bootstrap_card_store
from sitecards.routes import router

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[CardStore] = None, settings: Optional[Settings] = None
) -> FastAPI:
    settings = settings or get_settings()
    if store is None:
        store = bootstrap_card_store(settings)

    app = FastAPI(title="Site Cards API", version="0.1.0")
    app.state.card_store = store
    app.include_router(router, prefix=settings.api_prefix)

    # Mounted last so the API routes win over files of the same name.
    if settings.static_dir:
        if os.path.isdir(settings.static_dir):
            app.mount(
                "/",
                StaticFiles(directory=settings.static_dir, html=True),
                name="static",
            )
        else:
            logger.warning("STATIC_DIR %s is not a directory; skipping", settings.static_dir)
    return app
