"""
Memory stores — in-process record and goal storage.

Used by tests, the CLI's ``--csv`` mode, and anything that embeds the
dashboard without a database.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime

from earningsdash.models.goals import Goal, GoalType
from earningsdash.models.records import CompletedServiceRecord, RecordFilter
from earningsdash.stores.base import GoalStore, RecordStore

logger = logging.getLogger("earningsdash.stores.memory")


class MemoryRecordStore(RecordStore):
    """Hold completed-service records in a list.

    Usage::

        store = MemoryRecordStore(records)
        store.add(CompletedServiceRecord(...))
    """

    name = "memory"
    description = "In-process record store"

    def __init__(self, records: Iterable[CompletedServiceRecord] | None = None) -> None:
        self._records: list[CompletedServiceRecord] = list(records or [])
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def add(self, record: CompletedServiceRecord) -> None:
        with self._lock:
            self._records.append(record)

    def extend(self, records: Iterable[CompletedServiceRecord]) -> None:
        with self._lock:
            self._records.extend(records)

    def fetch(self, criteria: RecordFilter) -> list[CompletedServiceRecord]:
        with self._lock:
            snapshot = list(self._records)
        matched = [r for r in snapshot if criteria.matches(r)]
        matched.sort(key=lambda r: r.completed_date)
        return matched

    def categories(self, provider_id: str) -> list[str]:
        with self._lock:
            return sorted({r.category for r in self._records if r.provider_id == provider_id})


class MemoryGoalStore(GoalStore):
    """Goals keyed by id, guarded by one lock.

    Readers take the same lock as ``replace_active`` so nobody can observe
    the moment between deactivating the old goal and inserting the new one.
    """

    name = "memory"

    def __init__(self) -> None:
        self._goals: dict[str, Goal] = {}
        self._lock = threading.Lock()

    def replace_active(self, goal: Goal) -> Goal:
        with self._lock:
            now = datetime.now()
            for goal_id, existing in list(self._goals.items()):
                if (
                    existing.is_active
                    and existing.provider_id == goal.provider_id
                    and existing.goal_type == goal.goal_type
                ):
                    self._goals[goal_id] = existing.model_copy(update={"is_active": False, "updated_at": now})
                    logger.debug("Deactivated goal %s", goal_id)
            stored = goal.model_copy(update={"is_active": True})
            self._goals[stored.goal_id] = stored
            return stored

    def get(self, goal_id: str) -> Goal | None:
        with self._lock:
            return self._goals.get(goal_id)

    def list_active(self, provider_id: str, goal_type: GoalType | None = None) -> list[Goal]:
        with self._lock:
            goals = [
                g for g in self._goals.values()
                if g.is_active and g.provider_id == provider_id
                and (goal_type is None or g.goal_type == goal_type)
            ]
        return sorted(goals, key=lambda g: (g.goal_type.value, g.created_at))

    def deactivate(self, goal_id: str) -> bool:
        with self._lock:
            goal = self._goals.get(goal_id)
            if goal is None:
                return False
            self._goals[goal_id] = goal.model_copy(update={"is_active": False, "updated_at": datetime.now()})
            return True
