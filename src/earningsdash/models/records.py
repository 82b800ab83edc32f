"""
Completed-service records and the filter used to query them.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CompletedServiceRecord(BaseModel):
    """A single completed (and paid) service for a provider.

    Created by whatever marks a service complete; the earnings core only reads it.
    """

    model_config = ConfigDict(frozen=True)

    provider_id: str
    amount: Decimal = Field(ge=0, decimal_places=2)
    category: str
    completed_date: date
    record_id: str | None = None


class RecordFilter(BaseModel):
    """Filter criteria passed to a record store.

    An empty ``categories`` set means every category matches.
    """

    model_config = ConfigDict(frozen=True)

    provider_id: str
    start_date: date
    end_date: date
    categories: frozenset[str] = Field(default_factory=frozenset)

    def matches(self, record: CompletedServiceRecord) -> bool:
        if record.provider_id != self.provider_id:
            return False
        if record.completed_date < self.start_date or record.completed_date > self.end_date:
            return False
        if self.categories and record.category not in self.categories:
            return False
        return True
