"""Factory functions for creating pre-configured QuoteEngine instances."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cpq.data.repository import RateTableRepository
from cpq.data.seed import DEFAULT_RATE_TABLE
from cpq.engine import QuoteEngine

if TYPE_CHECKING:
    from pathlib import Path


def create_default_engine() -> QuoteEngine:
    """Create a QuoteEngine wired up with the seeded FY26 rate table.

    This is the recommended way to create a QuoteEngine for typical usage.

    Returns:
        A QuoteEngine ready to price quotes.

    Example::

        from cpq import create_default_engine

        engine = create_default_engine()
        result = engine.compute_quote(quote_input)
    """
    return QuoteEngine(RateTableRepository(DEFAULT_RATE_TABLE))


def create_engine_from_file(path: Path) -> QuoteEngine:
    """Create a QuoteEngine from a JSON rate table on disk.

    Raises:
        RateTableError: If the file cannot be read or is not a valid table.
    """
    repository = RateTableRepository(DEFAULT_RATE_TABLE)
    repository.load_file(path)
    return QuoteEngine(repository)
