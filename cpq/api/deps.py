"""Dependency injection for FastAPI endpoints."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cpq.engine import QuoteEngine
from cpq.factory import create_default_engine, create_engine_from_file

logger = logging.getLogger(__name__)

RATE_TABLE_PATH_ENV = "CPQ_RATE_TABLE_PATH"


def create_engine_from_env() -> QuoteEngine:
    """Create a QuoteEngine configured from the environment.

    Reads CPQ_RATE_TABLE_PATH; when set, the JSON rate table at that path
    replaces the seeded defaults. Raises RateTableError if the file cannot
    be loaded.
    """
    path = os.environ.get(RATE_TABLE_PATH_ENV, "")
    if not path:
        return create_default_engine()

    logger.info("Loading rate table from %s", path)
    return create_engine_from_file(Path(path))
