"""
Column-existence probe for tables that may lag behind the application's
expected shape (optional columns added by migrations that may not have run).
"""

import logging
import threading
from typing import Dict, FrozenSet, Iterable, Set

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class SchemaProbe:
    """Reports which columns of a table exist in the live database.

    Results are memoized per table for the lifetime of the probe, which is
    created once per engine at start-up. Schema changes made while the
    process runs are not picked up until restart.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._cache: Dict[str, FrozenSet[str]] = {}
        self._lock = threading.Lock()

    def columns(self, table: str) -> FrozenSet[str]:
        """Lower-cased names of every column in ``table``.

        A catalog error (including a missing table) yields an empty set and is
        not memoized, so the next call probes again.
        """
        with self._lock:
            cached = self._cache.get(table)
        if cached is not None:
            return cached

        try:
            found = frozenset(
                col["name"].lower() for col in inspect(self.engine).get_columns(table)
            )
        except SQLAlchemyError as e:
            logger.warning("Schema probe failed for table %s: %s", table, e)
            return frozenset()

        logger.info("Available columns in %s table: %s", table, sorted(found))
        with self._lock:
            self._cache[table] = found
        return found

    def existing(self, table: str, candidates: Iterable[str]) -> Set[str]:
        """Subset of ``candidates`` present in ``table``."""
        available = self.columns(table)
        return {name for name in candidates if name.lower() in available}

    def has(self, table: str, column: str) -> bool:
        return column.lower() in self.columns(table)
