"""
Entry point: select the card store, prepare its schema and serve the API.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from sitecards.app import create_app
from sitecards.config import LOG_LEVELS, get_settings
from sitecards.db import StorageError
from sitecards.dependencies import bootstrap_card_store

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Site cards HTTP service")
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Listen address (defaults to LISTEN_HOST)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Listen port (defaults to PORT, then 3000)",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=None,
        help="Log level (defaults to LOG_LEVEL)",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    log_level = args.log_level or settings.log_level
    logging.basicConfig(
        level=log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    try:
        store = bootstrap_card_store(settings)
    except StorageError:
        logger.exception("DB init failed")
        return 1

    app = create_app(store=store, settings=settings)
    host = args.host or settings.listen_host
    port = args.port or settings.port
    logger.info("Server running on http://%s:%d", host, port)
    logger.info("Storage: %s", store.backend_name)
    uvicorn.run(app, host=host, port=port, log_level=log_level)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
