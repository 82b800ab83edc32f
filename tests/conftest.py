"""Shared fixtures for the earnings tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.models.records import CompletedServiceRecord
from earningsdash.stores.memory import MemoryGoalStore, MemoryRecordStore

TODAY = date(2025, 3, 20)


def make_record(
    amount: str | int,
    day: date,
    category: str = "Plumbing",
    provider_id: str = "p1",
) -> CompletedServiceRecord:
    return CompletedServiceRecord(
        provider_id=provider_id,
        amount=Decimal(str(amount)),
        category=category,
        completed_date=day,
    )


@pytest.fixture
def records() -> list[CompletedServiceRecord]:
    """February and March 2025 activity for provider p1, plus noise from p2."""
    return [
        make_record("100.00", date(2025, 2, 5), "Plumbing"),
        make_record("50.00", date(2025, 2, 20), "Electrical"),
        make_record("80.00", date(2025, 3, 13), "Plumbing"),
        make_record("40.00", date(2025, 3, 19), "Plumbing"),
        make_record("120.00", date(2025, 3, 20), "Plumbing"),
        make_record("60.00", date(2025, 3, 20), "Electrical"),
        make_record("20.00", date(2025, 3, 20), "Cleaning, Deep"),
        make_record("999.00", date(2025, 3, 20), "Plumbing", provider_id="p2"),
    ]


@pytest.fixture
def record_store(records: list[CompletedServiceRecord]) -> MemoryRecordStore:
    return MemoryRecordStore(records)


@pytest.fixture
def goal_store() -> MemoryGoalStore:
    return MemoryGoalStore()


@pytest.fixture
def aggregator(record_store: MemoryRecordStore) -> EarningsAggregator:
    return EarningsAggregator(record_store, clock=lambda: TODAY)
