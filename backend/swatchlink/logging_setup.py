"""Logging bootstrap for hosts embedding the engine."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from swatchlink.config import Settings, settings


def configure_logging(config: Settings | None = None) -> None:
    """Configure root logging from settings (``SWATCHLINK_LOG_LEVEL``)."""
    load_dotenv()
    config = config or settings
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
