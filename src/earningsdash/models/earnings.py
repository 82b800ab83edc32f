"""
Earnings aggregates — daily/monthly summaries, category breakdowns, comparisons.

All of these are computed on demand from completed-service records and are
never persisted.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

ZERO = Decimal("0")
CENT = Decimal("0.01")


class Trend(str, Enum):
    """Direction of change between a current and a baseline amount."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class BaselineKind(str, Enum):
    """Prior period a current bucket is compared against."""

    PREVIOUS_DAY = "previousDay"
    SAME_DAY_LAST_WEEK = "sameDayLastWeek"
    PREVIOUS_MONTH = "previousMonth"
    SAME_MONTH_LAST_YEAR = "sameMonthLastYear"

    @property
    def is_monthly(self) -> bool:
        return self in (BaselineKind.PREVIOUS_MONTH, BaselineKind.SAME_MONTH_LAST_YEAR)


DAILY_BASELINES = (BaselineKind.PREVIOUS_DAY, BaselineKind.SAME_DAY_LAST_WEEK)
MONTHLY_BASELINES = (BaselineKind.PREVIOUS_MONTH, BaselineKind.SAME_MONTH_LAST_YEAR)


class ComparisonResult(BaseModel):
    """Percentage change of a bucket against one baseline bucket."""

    baseline_amount: Decimal
    current_amount: Decimal
    amount_change: Decimal
    percentage_change: Decimal
    trend: Trend


class CategoryBreakdownEntry(BaseModel):
    """Per-category subtotal and its share of the bucket total."""

    category: str
    earnings: Decimal
    service_count: int
    percentage: Decimal = ZERO


class DailyEarnings(BaseModel):
    date: datetime.date
    total_earnings: Decimal = ZERO
    service_count: int = 0
    category_breakdown: list[CategoryBreakdownEntry] = Field(default_factory=list)
    comparison: dict[BaselineKind, ComparisonResult] | None = None

    @property
    def has_activity(self) -> bool:
        return self.service_count > 0


class MonthlyEarnings(BaseModel):
    """Monthly summary with one ``DailyEarnings`` per calendar day."""

    year: int
    month: int
    total_earnings: Decimal = ZERO
    service_count: int = 0
    average_daily_earnings: Decimal = ZERO
    highest_day: DailyEarnings | None = None
    lowest_day: DailyEarnings | None = None
    daily_breakdown: list[DailyEarnings] = Field(default_factory=list)
    category_breakdown: list[CategoryBreakdownEntry] = Field(default_factory=list)
    comparison: dict[BaselineKind, ComparisonResult] | None = None

    @property
    def period(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def active_days(self) -> int:
        return sum(1 for d in self.daily_breakdown if d.has_activity)
