"""
Earnings Aggregator — sums completed-service records into day and month buckets.

Produces:
1. **Daily earnings** — total, service count, per-category breakdown.
2. **Daily ranges** — one entry per calendar day, zero days included.
3. **Monthly summaries** — totals, daily average, best/worst day, breakdowns.

This is the only component that reads the record store. Everything it
returns is a pure function of the store contents and its arguments.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable, Iterable
from datetime import date
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from earningsdash.analyzers.date_ranges import DateRangeResolver, iter_days, parse_date
from earningsdash.models.earnings import CENT, ZERO, CategoryBreakdownEntry, DailyEarnings, MonthlyEarnings
from earningsdash.models.records import CompletedServiceRecord, RecordFilter
from earningsdash.stores.base import RecordStore

logger = logging.getLogger("earningsdash.analyzers.aggregator")

HUNDRED = Decimal("100")


def normalize_categories(categories: Iterable[str] | None) -> frozenset[str]:
    """Empty or ``None`` means "all categories"."""
    if not categories:
        return frozenset()
    if isinstance(categories, str):
        categories = [categories]
    return frozenset(c.strip() for c in categories if c and c.strip())


def build_category_breakdown(records: Iterable[CompletedServiceRecord]) -> list[CategoryBreakdownEntry]:
    """Group records by category and attach each group's share of the total.

    Percentages are rounded to cents with the largest-remainder method so a
    non-zero bucket always sums to exactly 100.00.
    """
    earnings: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for r in records:
        earnings[r.category] += r.amount
        counts[r.category] += 1

    if not earnings:
        return []

    total = sum(earnings.values(), ZERO)
    categories = sorted(earnings, key=lambda c: (-earnings[c], c))

    if total <= 0:
        return [
            CategoryBreakdownEntry(category=c, earnings=earnings[c], service_count=counts[c], percentage=ZERO)
            for c in categories
        ]

    raw = {c: earnings[c] * HUNDRED / total for c in categories}
    floored = {c: raw[c].quantize(CENT, rounding=ROUND_DOWN) for c in categories}
    shortfall = int((HUNDRED - sum(floored.values(), ZERO)) / CENT)

    by_remainder = sorted(categories, key=lambda c: (-(raw[c] - floored[c]), -earnings[c], c))
    for c in by_remainder[:shortfall]:
        floored[c] += CENT

    return [
        CategoryBreakdownEntry(category=c, earnings=earnings[c], service_count=counts[c], percentage=floored[c])
        for c in categories
    ]


def build_daily(day: date, records: list[CompletedServiceRecord]) -> DailyEarnings:
    """Aggregate the records of a single day."""
    return DailyEarnings(
        date=day,
        total_earnings=sum((r.amount for r in records), ZERO),
        service_count=len(records),
        category_breakdown=build_category_breakdown(records),
    )


class EarningsAggregator:
    """Aggregate completed-service records over day and month buckets.

    Example usage:
        aggregator = EarningsAggregator(store)
        day = aggregator.get_daily_earnings("42", date(2025, 3, 14))
        month = aggregator.get_monthly_earnings("42", 2025, 3, categories=["plumbing"])
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        max_range_days: int = 366,
        average_divisor: str = "elapsed",
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.max_range_days = max_range_days
        self.average_divisor = average_divisor
        self.clock = clock

    def _fetch(
        self, provider_id: str, start: date, end: date, categories: frozenset[str]
    ) -> list[CompletedServiceRecord]:
        criteria = RecordFilter(provider_id=provider_id, start_date=start, end_date=end, categories=categories)
        return self.store.fetch(criteria)

    def get_total(
        self,
        provider_id: str,
        start: date,
        end: date,
        categories: Iterable[str] | None = None,
    ) -> Decimal:
        """Total earnings over ``[start, end]`` without per-day grouping."""
        records = self._fetch(provider_id, start, end, normalize_categories(categories))
        return sum((r.amount for r in records), ZERO)

    def get_daily_earnings(
        self,
        provider_id: str,
        day: date | str,
        categories: Iterable[str] | None = None,
    ) -> DailyEarnings:
        bucket = DateRangeResolver.resolve_daily_bucket(day)
        DateRangeResolver.ensure_not_future(bucket.start, self.clock())

        logger.debug("Getting daily earnings for provider %s on %s", provider_id, bucket.start)
        records = self._fetch(provider_id, bucket.start, bucket.end, normalize_categories(categories))
        return build_daily(bucket.start, records)

    def get_daily_earnings_range(
        self,
        provider_id: str,
        start_date: date | str,
        end_date: date | str,
        categories: Iterable[str] | None = None,
    ) -> list[DailyEarnings]:
        """One ``DailyEarnings`` per day in ``[start_date, end_date]``, ascending."""
        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        DateRangeResolver.ensure_ordered(start, end)
        DateRangeResolver.ensure_within_limit(start, end, self.max_range_days)

        logger.debug("Getting daily earnings range for provider %s: %s to %s", provider_id, start, end)
        records = self._fetch(provider_id, start, end, normalize_categories(categories))
        return self._bucket_by_day(start, end, records)

    def get_monthly_earnings(
        self,
        provider_id: str,
        year: int,
        month: int,
        categories: Iterable[str] | None = None,
    ) -> MonthlyEarnings:
        bucket = DateRangeResolver.resolve_month_bucket(year, month)
        today = self.clock()
        DateRangeResolver.ensure_not_future(bucket.start, today)

        logger.debug("Getting monthly earnings for provider %s: %d-%02d", provider_id, year, month)
        records = self._fetch(provider_id, bucket.start, bucket.end, normalize_categories(categories))
        daily = self._bucket_by_day(bucket.start, bucket.end, records)

        total = sum((r.amount for r in records), ZERO)
        divisor = self.average_divisor_for(year, month, today)
        average = (total / divisor).quantize(CENT, rounding=ROUND_HALF_UP)

        active = [d for d in daily if d.has_activity]
        # max()/min() keep the first hit, so ties resolve to the earliest day
        highest = max(active, key=lambda d: d.total_earnings) if active else None
        lowest = min(active, key=lambda d: d.total_earnings) if active else None

        return MonthlyEarnings(
            year=year,
            month=month,
            total_earnings=total,
            service_count=len(records),
            average_daily_earnings=average,
            highest_day=highest,
            lowest_day=lowest,
            daily_breakdown=daily,
            category_breakdown=build_category_breakdown(records),
        )

    def average_divisor_for(self, year: int, month: int, today: date) -> int:
        """Days to divide a month's total by.

        The in-progress month divides by elapsed days (today inclusive) under the
        ``elapsed`` policy; every other month divides by its full length.
        """
        bucket = DateRangeResolver.resolve_month_bucket(year, month)
        if self.average_divisor == "elapsed" and (year, month) == (today.year, today.month):
            return today.day
        return bucket.days_in_month

    def get_provider_categories(self, provider_id: str) -> list[str]:
        return self.store.categories(provider_id)

    @staticmethod
    def _bucket_by_day(
        start: date, end: date, records: list[CompletedServiceRecord]
    ) -> list[DailyEarnings]:
        by_day: dict[date, list[CompletedServiceRecord]] = defaultdict(list)
        for r in records:
            by_day[r.completed_date].append(r)
        return [build_daily(day, by_day.get(day, [])) for day in iter_days(start, end)]
