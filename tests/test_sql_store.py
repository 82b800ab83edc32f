"""Tests for the SQLAlchemy-backed stores."""

import threading
from datetime import date, datetime
from decimal import Decimal

import pytest
from conftest import TODAY, make_record
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.analyzers.goals import GoalTracker
from earningsdash.errors import ValidationError
from earningsdash.models.goals import Goal, GoalType
from earningsdash.models.records import CompletedServiceRecord, RecordFilter
from earningsdash.stores.sql import (
    SQLGoalStore,
    SQLRecordStore,
    earnings_goals,
    from_cents,
    make_engine,
    to_cents,
)


@pytest.fixture
def engine():
    return make_engine("sqlite://")


@pytest.fixture
def sql_records(engine, records: list[CompletedServiceRecord]) -> SQLRecordStore:
    store = SQLRecordStore(engine=engine)
    store.add_records(records)
    return store


@pytest.fixture
def sql_goals(engine) -> SQLGoalStore:
    return SQLGoalStore(engine=engine)


class TestCents:
    def test_round_trip(self) -> None:
        assert to_cents(Decimal("12.34")) == 1234
        assert from_cents(1234) == Decimal("12.34")

    def test_half_cent_rounds_up(self) -> None:
        assert to_cents(Decimal("0.005")) == 1


class TestSQLRecordStore:
    def test_requires_url_or_engine(self) -> None:
        with pytest.raises(ValueError):
            SQLRecordStore()

    def test_fetch_by_provider_and_range(self, sql_records: SQLRecordStore) -> None:
        rows = sql_records.fetch(
            RecordFilter(provider_id="p1", start_date=date(2025, 3, 13), end_date=date(2025, 3, 20))
        )
        assert [r.completed_date for r in rows] == [
            date(2025, 3, 13),
            date(2025, 3, 19),
            date(2025, 3, 20),
            date(2025, 3, 20),
            date(2025, 3, 20),
        ]
        assert sum(r.amount for r in rows) == Decimal("320.00")

    def test_fetch_by_category(self, sql_records: SQLRecordStore) -> None:
        rows = sql_records.fetch(
            RecordFilter(
                provider_id="p1",
                start_date=date(2025, 1, 1),
                end_date=TODAY,
                categories=frozenset({"Electrical"}),
            )
        )
        assert [r.amount for r in rows] == [Decimal("50.00"), Decimal("60.00")]

    def test_categories(self, sql_records: SQLRecordStore) -> None:
        assert sql_records.categories("p1") == ["Cleaning, Deep", "Electrical", "Plumbing"]
        assert sql_records.categories("p2") == ["Plumbing"]

    def test_health_check(self, sql_records: SQLRecordStore) -> None:
        assert sql_records.health_check()["healthy"] is True

    def test_aggregator_matches_memory_store(self, sql_records: SQLRecordStore) -> None:
        aggregator = EarningsAggregator(sql_records, clock=lambda: TODAY)
        month = aggregator.get_monthly_earnings("p1", 2025, 3)
        assert month.total_earnings == Decimal("320.00")
        assert month.average_daily_earnings == Decimal("16.00")

    def test_add_nothing(self, engine) -> None:
        assert SQLRecordStore(engine=engine).add_records([]) == 0


class TestSQLGoalStore:
    def _goal(self, goal_id: str, target: str = "100", goal_type: GoalType = GoalType.DAILY) -> Goal:
        return Goal(goal_id=goal_id, provider_id="p1", goal_type=goal_type, target_amount=Decimal(target))

    def test_replace_active(self, sql_goals: SQLGoalStore) -> None:
        sql_goals.replace_active(self._goal("g1"))
        stored = sql_goals.replace_active(self._goal("g2", "250.50"))

        assert stored.target_amount == Decimal("250.50")
        assert [g.goal_id for g in sql_goals.list_active("p1")] == ["g2"]
        assert sql_goals.get("g1").is_active is False

    def test_types_kept_separate(self, sql_goals: SQLGoalStore) -> None:
        sql_goals.replace_active(self._goal("g1"))
        sql_goals.replace_active(self._goal("g2", goal_type=GoalType.MONTHLY))

        assert [g.goal_id for g in sql_goals.list_active("p1")] == ["g1", "g2"]
        assert [g.goal_id for g in sql_goals.list_active("p1", GoalType.MONTHLY)] == ["g2"]

    def test_index_rejects_second_active_goal(self, sql_goals: SQLGoalStore) -> None:
        sql_goals.replace_active(self._goal("g1"))
        now = datetime.now()
        with pytest.raises(IntegrityError):
            with sql_goals.engine.begin() as conn:
                conn.execute(
                    insert(earnings_goals).values(
                        goal_id="rogue",
                        provider_id="p1",
                        goal_type="daily",
                        target_cents=100,
                        is_active=True,
                        created_at=now,
                        updated_at=now,
                    )
                )

    def test_deactivate(self, sql_goals: SQLGoalStore) -> None:
        sql_goals.replace_active(self._goal("g1"))
        assert sql_goals.deactivate("g1") is True
        assert sql_goals.list_active("p1") == []
        assert sql_goals.deactivate("missing") is False

    def test_tracker_on_sql(self, sql_records: SQLRecordStore, sql_goals: SQLGoalStore) -> None:
        tracker = GoalTracker(sql_goals, EarningsAggregator(sql_records, clock=lambda: TODAY))
        goal = tracker.set_goal("p1", "daily", 250)
        progress = tracker.get_goal_progress("p1", goal.goal_id)
        assert progress.progress_percentage == Decimal("80.00")


def test_record_without_id_gets_one(engine) -> None:
    store = SQLRecordStore(engine=engine)
    store.add_records([make_record("10", date(2025, 1, 2))])
    rows = store.fetch(RecordFilter(provider_id="p1", start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)))
    assert len(rows) == 1
    assert rows[0].record_id


class TestSQLGoalIntegrity:
    def test_sub_cent_target_leaves_previous_goal_active(
        self, sql_records: SQLRecordStore, sql_goals: SQLGoalStore
    ) -> None:
        tracker = GoalTracker(sql_goals, EarningsAggregator(sql_records, clock=lambda: TODAY))
        kept = tracker.set_goal("p1", "daily", 100)

        with pytest.raises(ValidationError):
            tracker.set_goal("p1", "daily", "0.004")

        active = tracker.get_active_goals("p1")
        assert [g.goal_id for g in active] == [kept.goal_id]

    def test_unreadable_row_rolls_back_swap(self, sql_goals: SQLGoalStore) -> None:
        kept = sql_goals.replace_active(
            Goal(goal_id="g1", provider_id="p1", goal_type=GoalType.DAILY, target_amount=Decimal("100"))
        )
        # Bypasses validation; the stored row would round to 0 cents.
        bad = Goal.model_construct(
            goal_id="g2", provider_id="p1", goal_type=GoalType.DAILY, target_amount=Decimal("0.004")
        )

        with pytest.raises(ValueError):
            sql_goals.replace_active(bad)

        assert sql_goals.get("g2") is None
        assert [g.goal_id for g in sql_goals.list_active("p1")] == [kept.goal_id]

    def test_concurrent_set_leaves_one_active(self, sql_records: SQLRecordStore, sql_goals: SQLGoalStore) -> None:
        tracker = GoalTracker(sql_goals, EarningsAggregator(sql_records, clock=lambda: TODAY))
        errors: list[Exception] = []

        def worker(amount: int) -> None:
            try:
                for _ in range(20):
                    tracker.set_goal("p1", "daily", amount)
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(tracker.get_active_goals("p1")) == 1


class TestAmountPrecision:
    def test_sub_cent_record_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            make_record("10.005", date(2025, 1, 2))

    def test_backends_agree(self, sql_records: SQLRecordStore, record_store) -> None:
        sql = EarningsAggregator(sql_records, clock=lambda: TODAY)
        memory = EarningsAggregator(record_store, clock=lambda: TODAY)

        assert sql.get_monthly_earnings("p1", 2025, 3) == memory.get_monthly_earnings("p1", 2025, 3)
        assert sql.get_total("p1", date(2025, 2, 1), TODAY) == memory.get_total("p1", date(2025, 2, 1), TODAY)
