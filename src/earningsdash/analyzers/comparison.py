"""
Comparison Engine — percentage change and trend against prior periods.

Daily views compare against the previous day and the same weekday last week;
monthly views against the previous month and the same month last year.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.analyzers.date_ranges import DateRangeResolver
from earningsdash.models.earnings import (
    CENT,
    DAILY_BASELINES,
    MONTHLY_BASELINES,
    BaselineKind,
    ComparisonResult,
    Trend,
)

logger = logging.getLogger("earningsdash.analyzers.comparison")


def compute_percentage_change(current: Decimal | float, baseline: Decimal | float) -> tuple[Decimal, Trend]:
    """Percentage change from ``baseline`` to ``current``, rounded to 2 decimals.

    A zero baseline has no meaningful ratio. Growth from zero is reported as
    exactly +100% (up) and zero-to-zero as 0% (flat); neither is a true ratio.
    """
    current = Decimal(str(current))
    baseline = Decimal(str(baseline))

    if baseline == 0:
        if current > 0:
            return Decimal("100.00"), Trend.UP
        return Decimal("0.00"), Trend.FLAT

    change = ((current - baseline) / baseline * 100).quantize(CENT, rounding=ROUND_HALF_UP)
    if change > 0:
        return change, Trend.UP
    if change < 0:
        return change, Trend.DOWN
    return change, Trend.FLAT


class ComparisonEngine:
    """Compare a current aggregate with its baseline buckets."""

    def __init__(self, aggregator: EarningsAggregator) -> None:
        self.aggregator = aggregator

    @staticmethod
    def build_result(current: Decimal, baseline: Decimal) -> ComparisonResult:
        pct, trend = compute_percentage_change(current, baseline)
        return ComparisonResult(
            baseline_amount=baseline,
            current_amount=current,
            amount_change=current - baseline,
            percentage_change=pct,
            trend=trend,
        )

    def compute_comparison(
        self,
        provider_id: str,
        current_amount: Decimal,
        anchor: date,
        kind: BaselineKind | str,
        categories: Iterable[str] | None = None,
    ) -> ComparisonResult:
        """Resolve the ``kind`` baseline of the bucket at ``anchor`` and compare."""
        bucket = DateRangeResolver.resolve_baseline(kind, anchor)
        baseline = self.aggregator.get_total(provider_id, bucket.start, bucket.end, categories)
        logger.debug("Baseline %s for %s: %s to %s = %s", kind, anchor, bucket.start, bucket.end, baseline)
        return self.build_result(current_amount, baseline)

    def _compare_all(
        self,
        kinds: Iterable[BaselineKind],
        provider_id: str,
        current_amount: Decimal,
        anchor: date,
        categories: Iterable[str] | None,
    ) -> dict[BaselineKind, ComparisonResult]:
        categories = list(categories or [])
        return {
            kind: self.compute_comparison(provider_id, current_amount, anchor, kind, categories)
            for kind in kinds
        }

    def daily_comparisons(
        self,
        provider_id: str,
        current_amount: Decimal,
        day: date,
        categories: Iterable[str] | None = None,
    ) -> dict[BaselineKind, ComparisonResult]:
        return self._compare_all(DAILY_BASELINES, provider_id, current_amount, day, categories)

    def monthly_comparisons(
        self,
        provider_id: str,
        current_amount: Decimal,
        year: int,
        month: int,
        categories: Iterable[str] | None = None,
    ) -> dict[BaselineKind, ComparisonResult]:
        anchor = date(year, month, 1)
        return self._compare_all(MONTHLY_BASELINES, provider_id, current_amount, anchor, categories)

