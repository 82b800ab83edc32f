"""
SQL stores — completed-service records and goals in any SQL database.

Works with PostgreSQL, MySQL, SQLite, SQL Server, etc. via SQLAlchemy.
Amounts are persisted as integer cents; records and goals carry at most two
decimal places, so the conversion is exact.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    insert,
    select,
    true,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from earningsdash.models.goals import Goal, GoalType
from earningsdash.models.records import CompletedServiceRecord, RecordFilter
from earningsdash.stores.base import GoalStore, RecordStore

logger = logging.getLogger("earningsdash.stores.sql")

metadata = MetaData()

completed_services = Table(
    "completed_services",
    metadata,
    Column("record_id", String(64), primary_key=True),
    Column("provider_id", String(64), nullable=False, index=True),
    Column("category", String(128), nullable=False),
    Column("amount_cents", Integer, nullable=False),
    Column("completed_date", Date, nullable=False, index=True),
)

earnings_goals = Table(
    "earnings_goals",
    metadata,
    Column("goal_id", String(64), primary_key=True),
    Column("provider_id", String(64), nullable=False, index=True),
    Column("goal_type", String(16), nullable=False),
    Column("target_cents", Integer, nullable=False),
    Column("start_date", Date, nullable=True),
    Column("end_date", Date, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

# At most one active goal per provider and type.
Index(
    "uq_earnings_goals_active",
    earnings_goals.c.provider_id,
    earnings_goals.c.goal_type,
    unique=True,
    sqlite_where=earnings_goals.c.is_active == true(),
    postgresql_where=earnings_goals.c.is_active == true(),
)


def to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def make_engine(url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(url)


class SQLRecordStore(RecordStore):
    """Query completed-service records from a SQL database.

    Usage::

        store = SQLRecordStore("postgresql://...")
        records = store.fetch(RecordFilter(provider_id="42", start_date=..., end_date=...))
    """

    name = "sql"
    description = "Completed-service records in a SQL database"

    def __init__(self, url: str | None = None, engine: Engine | None = None, create_tables: bool = True) -> None:
        if engine is None and not url:
            raise ValueError("SQLRecordStore needs a database URL or an engine")
        self.engine = engine or make_engine(url or "")
        if create_tables:
            metadata.create_all(self.engine)

    def add_records(self, records: Iterable[CompletedServiceRecord]) -> int:
        """Insert records; ones without a ``record_id`` get a generated one."""
        rows = [
            {
                "record_id": r.record_id or uuid4().hex,
                "provider_id": r.provider_id,
                "category": r.category,
                "amount_cents": to_cents(r.amount),
                "completed_date": r.completed_date,
            }
            for r in records
        ]
        if not rows:
            return 0
        with self.engine.begin() as conn:
            conn.execute(insert(completed_services), rows)
        logger.info("Inserted %d completed-service records", len(rows))
        return len(rows)

    def fetch(self, criteria: RecordFilter) -> list[CompletedServiceRecord]:
        t = completed_services
        query = (
            select(t)
            .where(t.c.provider_id == criteria.provider_id)
            .where(t.c.completed_date >= criteria.start_date)
            .where(t.c.completed_date <= criteria.end_date)
        )
        if criteria.categories:
            query = query.where(t.c.category.in_(sorted(criteria.categories)))
        query = query.order_by(t.c.completed_date, t.c.category, t.c.record_id)

        with self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()

        return [
            CompletedServiceRecord(
                record_id=row["record_id"],
                provider_id=row["provider_id"],
                category=row["category"],
                amount=from_cents(row["amount_cents"]),
                completed_date=row["completed_date"],
            )
            for row in rows
        ]

    def categories(self, provider_id: str) -> list[str]:
        t = completed_services
        query = (
            select(t.c.category)
            .where(t.c.provider_id == provider_id)
            .distinct()
            .order_by(t.c.category)
        )
        with self.engine.connect() as conn:
            return [row[0] for row in conn.execute(query)]


class SQLGoalStore(GoalStore):
    """Provider goals in a SQL table.

    ``replace_active`` runs its UPDATE and INSERT in one transaction, and a
    partial unique index rejects a second active goal of the same type.
    Writes are serialized per store so concurrent callers on a shared
    connection (in-memory SQLite) never interleave inside a transaction.
    """

    name = "sql"

    def __init__(self, url: str | None = None, engine: Engine | None = None, create_tables: bool = True) -> None:
        if engine is None and not url:
            raise ValueError("SQLGoalStore needs a database URL or an engine")
        self.engine = engine or make_engine(url or "")
        self._lock = threading.Lock()
        if create_tables:
            metadata.create_all(self.engine)

    @staticmethod
    def _to_goal(row: Any) -> Goal:
        return Goal(
            goal_id=row["goal_id"],
            provider_id=row["provider_id"],
            goal_type=GoalType(row["goal_type"]),
            target_amount=from_cents(row["target_cents"]),
            start_date=row["start_date"],
            end_date=row["end_date"],
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def replace_active(self, goal: Goal) -> Goal:
        t = earnings_goals
        now = datetime.now()
        with self._lock, self.engine.begin() as conn:
            result = conn.execute(
                update(t)
                .where(t.c.provider_id == goal.provider_id)
                .where(t.c.goal_type == goal.goal_type.value)
                .where(t.c.is_active == true())
                .values(is_active=False, updated_at=now)
            )
            conn.execute(
                insert(t).values(
                    goal_id=goal.goal_id,
                    provider_id=goal.provider_id,
                    goal_type=goal.goal_type.value,
                    target_cents=to_cents(goal.target_amount),
                    start_date=goal.start_date,
                    end_date=goal.end_date,
                    is_active=True,
                    created_at=goal.created_at,
                    updated_at=goal.updated_at,
                )
            )
            # Read back before commit; a row that does not validate rolls the whole swap back.
            row = conn.execute(select(t).where(t.c.goal_id == goal.goal_id)).mappings().one()
            stored = self._to_goal(row)
        if result.rowcount:
            logger.debug("Replaced %d active %s goal(s) for provider %s", result.rowcount, goal.goal_type.value, goal.provider_id)
        return stored

    def get(self, goal_id: str) -> Goal | None:
        t = earnings_goals
        with self._lock, self.engine.connect() as conn:
            row = conn.execute(select(t).where(t.c.goal_id == goal_id)).mappings().first()
        return self._to_goal(row) if row else None

    def list_active(self, provider_id: str, goal_type: GoalType | None = None) -> list[Goal]:
        t = earnings_goals
        query = select(t).where(t.c.provider_id == provider_id).where(t.c.is_active == true())
        if goal_type is not None:
            query = query.where(t.c.goal_type == goal_type.value)
        query = query.order_by(t.c.goal_type, t.c.created_at)
        with self._lock, self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [self._to_goal(row) for row in rows]

    def deactivate(self, goal_id: str) -> bool:
        t = earnings_goals
        with self._lock, self.engine.begin() as conn:
            result = conn.execute(
                update(t).where(t.c.goal_id == goal_id).values(is_active=False, updated_at=datetime.now())
            )
        return result.rowcount > 0
