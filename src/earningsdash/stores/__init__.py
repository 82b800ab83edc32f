"""Stores package — record and goal persistence backends."""
from earningsdash.stores.base import GoalStore, RecordStore
from earningsdash.stores.csv_loader import CSVRecordLoader
from earningsdash.stores.memory import MemoryGoalStore, MemoryRecordStore
from earningsdash.stores.registry import create_stores

__all__ = [
    "CSVRecordLoader",
    "GoalStore",
    "MemoryGoalStore",
    "MemoryRecordStore",
    "RecordStore",
    "create_stores",
]
