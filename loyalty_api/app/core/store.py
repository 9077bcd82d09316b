"""
In-memory table registry.

A ``Store`` owns one ordered list of records per known table.  The
lists are live: every ``QueryBuilder`` opened on the store reads and
mutates them directly, and a change is visible to the next operation
immediately.  Nothing is persisted; the store lives as long as the
application (or test) that built it.

The engine itself never suspends, so individual operations cannot
interleave.  Services that read and then write (a balance check
followed by a decrement, a uniqueness check followed by an insert)
hold ``store.lock`` around the sequence.
"""

import asyncio
import copy
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .query import QueryBuilder
from .tables import Record, Table

logger = logging.getLogger(__name__)


class Store:
    """Registry of the loyalty backend's tables."""

    def __init__(self, seed: Optional[Mapping[Union[Table, str], Iterable[Record]]] = None) -> None:
        self._tables: Dict[Table, List[Record]] = {table: [] for table in Table}
        self.lock = asyncio.Lock()
        if seed:
            self.load(seed)

    def __call__(self, table: Union[Table, str]) -> QueryBuilder:
        return self.open(table)

    def open(self, table: Union[Table, str]) -> QueryBuilder:
        """Start a query against ``table``.

        Raises ``UnknownTableError`` for names outside the catalogue.
        """
        return QueryBuilder(self, Table.parse(table))

    def rows(self, table: Union[Table, str]) -> List[Record]:
        """Return the live record list of ``table``."""
        return self._tables[Table.parse(table)]

    def load(self, seed: Mapping[Union[Table, str], Iterable[Record]]) -> None:
        """Append deep copies of ``seed`` rows to their tables."""
        for table, rows in seed.items():
            self.rows(table).extend(copy.deepcopy(list(rows)))

    def clear(self) -> None:
        for rows in self._tables.values():
            rows.clear()

    async def raw(self, sql: str) -> dict:
        """Connectivity check.  Accepts any statement and returns no rows."""
        logger.info("Memory database connected successfully")
        logger.debug("Ignoring raw statement: %s", sql)
        return {"rows": []}
