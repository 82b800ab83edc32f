"""
Store Registry — builds record and goal stores from configuration.

Backends are resolved lazily so the SQL stack is only imported when used.
"""

from __future__ import annotations

import importlib
import logging

from earningsdash.config import StorageConfig
from earningsdash.stores.base import GoalStore, RecordStore

logger = logging.getLogger("earningsdash.stores.registry")

# Built-in backend mapping: backend -> (record store path, goal store path)
_BUILTIN_STORES: dict[str, tuple[str, str]] = {
    "memory": (
        "earningsdash.stores.memory.MemoryRecordStore",
        "earningsdash.stores.memory.MemoryGoalStore",
    ),
    "sql": (
        "earningsdash.stores.sql.SQLRecordStore",
        "earningsdash.stores.sql.SQLGoalStore",
    ),
}


def _load_class(path: str) -> type:
    module_path, class_name = path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def create_stores(config: StorageConfig) -> tuple[RecordStore, GoalStore]:
    """Instantiate the record and goal store for a storage config."""
    record_path, goal_path = _BUILTIN_STORES[config.backend]
    record_cls = _load_class(record_path)
    goal_cls = _load_class(goal_path)

    if config.backend == "sql":
        from earningsdash.stores.sql import make_engine

        engine = make_engine(config.url)
        records = record_cls(engine=engine, create_tables=config.create_tables)
        goals = goal_cls(engine=engine, create_tables=False)
        logger.info("Using SQL stores at %s", engine.url.render_as_string(hide_password=True))
    else:
        records = record_cls()
        goals = goal_cls()
        logger.info("Using in-memory stores")

    return records, goals
