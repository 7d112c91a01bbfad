"""Rate table repository with copy-on-write hot reload."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from cpq.data.rates import RateTable
from cpq.exceptions import RateTableError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class RateTableRepository:
    """Holds the active rate table snapshot.

    Readers call :meth:`current` once per computation and keep the returned
    table for the whole call. Reloads build a new, fully validated
    ``RateTable`` and swap the reference; the previous snapshot is never
    modified, so in-flight quotes keep a consistent view.
    """

    def __init__(self, table: RateTable) -> None:
        self._table = table
        self._lock = threading.Lock()

    def current(self) -> RateTable:
        """Return the active snapshot."""
        return self._table

    def swap(self, table: RateTable) -> RateTable:
        """Replace the active snapshot, returning the previous one."""
        with self._lock:
            previous = self._table
            self._table = table
        logger.info(
            "Rate table swapped: %s -> %s", previous.version, table.version
        )
        return previous

    def update(self, **changes: Any) -> RateTable:
        """Derive a new snapshot from the active one and make it active.

        Raises:
            RateTableError: If the changes produce an invalid rate table.
                The active snapshot is left unchanged.
        """
        try:
            table = self.current().with_updates(**changes)
        except ValidationError as exc:
            msg = f"Invalid rate table update: {exc.error_count()} validation error(s)"
            raise RateTableError(msg) from exc
        self.swap(table)
        return table

    def load_json(self, payload: str | bytes) -> RateTable:
        """Validate a JSON rate table and make it the active snapshot.

        Raises:
            RateTableError: If the payload is not a valid rate table. The
                active snapshot is left unchanged.
        """
        try:
            table = RateTable.model_validate_json(payload)
        except ValidationError as exc:
            msg = f"Invalid rate table: {exc.error_count()} validation error(s)"
            raise RateTableError(msg) from exc
        self.swap(table)
        return table

    def load_file(self, path: Path) -> RateTable:
        """Read a JSON rate table from disk and make it the active snapshot."""
        try:
            payload = path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Could not read rate table file '{path}': {exc}"
            raise RateTableError(msg) from exc
        return self.load_json(payload)
