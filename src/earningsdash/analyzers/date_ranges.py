"""
Date Range Resolver — turns day/month identifiers into concrete buckets.

Buckets are inclusive ``[start, end]`` calendar-date intervals. Baselines for
trend comparisons are resolved here so every component agrees on what
"previous month" or "same day last week" means.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from earningsdash.errors import FutureDateError, ValidationError
from earningsdash.models.earnings import BaselineKind

MIN_YEAR = 1900
MAX_YEAR = 2100

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class DateBucket:
    """An inclusive calendar-date interval."""

    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class MonthBucket(DateBucket):
    """A whole calendar month."""

    year: int = 0
    month: int = 0

    @property
    def days_in_month(self) -> int:
        return self.days


def parse_date(value: date | str, field_name: str = "date") -> date:
    """Coerce a ``date``, ``datetime`` or ``YYYY-MM-DD`` string to a ``date``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and _DATE_RE.match(value.strip()):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"{field_name} must be in YYYY-MM-DD format", value=str(value))


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day in ``[start, end]``, ascending."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


class DateRangeResolver:
    """Resolve day, month and baseline buckets."""

    @staticmethod
    def resolve_daily_bucket(day: date | str) -> DateBucket:
        d = parse_date(day)
        return DateBucket(start=d, end=d)

    @staticmethod
    def resolve_month_bucket(year: int, month: int) -> MonthBucket:
        if isinstance(year, bool) or not isinstance(year, int) or not MIN_YEAR <= year <= MAX_YEAR:
            raise ValidationError("Invalid year", year=year)
        if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12", month=month)

        last_day = calendar.monthrange(year, month)[1]
        return MonthBucket(
            start=date(year, month, 1),
            end=date(year, month, last_day),
            year=year,
            month=month,
        )

    @classmethod
    def resolve_baseline(cls, kind: BaselineKind | str, anchor: date | str) -> DateBucket:
        """Resolve the bucket a current bucket anchored at ``anchor`` is compared to.

        Day kinds return a single-day bucket, month kinds a whole-month bucket.
        """
        try:
            kind = BaselineKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown comparison kind: {kind}") from None
        d = parse_date(anchor)

        if kind == BaselineKind.PREVIOUS_DAY:
            return cls.resolve_daily_bucket(d - timedelta(days=1))
        if kind == BaselineKind.SAME_DAY_LAST_WEEK:
            return cls.resolve_daily_bucket(d - timedelta(days=7))
        if kind == BaselineKind.PREVIOUS_MONTH:
            if d.month == 1:
                return cls.resolve_month_bucket(d.year - 1, 12)
            return cls.resolve_month_bucket(d.year, d.month - 1)
        return cls.resolve_month_bucket(d.year - 1, d.month)

    @staticmethod
    def ensure_not_future(day: date, today: date) -> None:
        """Reject dates after ``today``; ``today`` itself is allowed."""
        if day > today:
            raise FutureDateError(
                "Cannot retrieve earnings for future dates",
                date=day.isoformat(),
                today=today.isoformat(),
            )

    @staticmethod
    def ensure_ordered(start: date, end: date) -> None:
        if start > end:
            raise ValidationError(
                "Start date must be before or equal to end date",
                start_date=start.isoformat(),
                end_date=end.isoformat(),
            )

    @staticmethod
    def ensure_within_limit(start: date, end: date, max_days: int) -> None:
        span = (end - start).days + 1
        if span > max_days:
            raise ValidationError(
                f"Date range spans {span} days; the maximum is {max_days}",
                start_date=start.isoformat(),
                end_date=end.isoformat(),
            )

    @classmethod
    def current_period(cls, period: str, today: date) -> DateBucket:
        """Bucket for today's day (``daily``) or today's month (``monthly``)."""
        if period == "daily":
            return cls.resolve_daily_bucket(today)
        return cls.resolve_month_bucket(today.year, today.month)
