"""Module executed when running ``python -m moviemitra``."""

from __future__ import annotations

import logging
import sys

import uvicorn

from app.config import settings
from app.errors import ConfigError

logger = logging.getLogger("moviemitra")


def main() -> int:
    """Validate configuration, then serve the app with uvicorn."""

    try:
        settings.require_catalog_token()
    except ConfigError as exc:
        logging.basicConfig(level=logging.INFO)
        logger.error("%s", exc)
        return 1

    uvicorn.run(
        "app.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.environment == "development",
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    sys.exit(main())
