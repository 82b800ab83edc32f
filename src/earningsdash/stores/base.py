"""
Base stores — abstract interfaces for record and goal persistence.

Stores are the bridge between the earnings core and whatever database holds
completed-service records and provider goals. The core never talks to a
database directly; it hands a store a ``RecordFilter`` or a ``Goal``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from earningsdash.models.goals import Goal, GoalType
    from earningsdash.models.records import CompletedServiceRecord, RecordFilter


class RecordStore(ABC):
    """Read-only view of completed-service records.

    To create a new store, subclass this and implement:
    - `name`: Unique store identifier.
    - `fetch()`: Return records matching a filter.
    - `categories()`: Distinct categories a provider has worked in.

    Example::

        class WarehouseRecordStore(RecordStore):
            name = "warehouse"

            def fetch(self, criteria: RecordFilter) -> list[CompletedServiceRecord]:
                ...

            def categories(self, provider_id: str) -> list[str]:
                ...
    """

    name: str = "base"
    description: str = "Base record store"

    @abstractmethod
    def fetch(self, criteria: RecordFilter) -> list[CompletedServiceRecord]:
        """Return records matching ``criteria``, ordered by completion date."""
        ...

    @abstractmethod
    def categories(self, provider_id: str) -> list[str]:
        """Return the distinct categories in a provider's history, sorted."""
        ...

    def health_check(self) -> dict[str, Any]:
        """Check store health and connectivity."""
        try:
            self.categories("__health_check__")
            return {"store": self.name, "healthy": True, "error": None}
        except Exception as e:
            return {"store": self.name, "healthy": False, "error": str(e)}


class GoalStore(ABC):
    """Keyed storage for provider goals.

    ``replace_active`` is the only transition that touches the active flag of
    more than one goal and must run as a single atomic unit.
    """

    name: str = "base"

    @abstractmethod
    def replace_active(self, goal: Goal) -> Goal:
        """Deactivate the active goal of the same provider/type and insert ``goal``."""
        ...

    @abstractmethod
    def get(self, goal_id: str) -> Goal | None:
        ...

    @abstractmethod
    def list_active(self, provider_id: str, goal_type: GoalType | None = None) -> list[Goal]:
        """Active goals ordered by goal type, then creation time."""
        ...

    @abstractmethod
    def deactivate(self, goal_id: str) -> bool:
        """Clear the active flag. Returns False when the goal does not exist."""
        ...
