"""
Earnings Dashboard — main entry point for the request layer.

The EarningsDashboard wires configuration, stores and analyzers together and
exposes the provider-facing operations. Callers pass an already-authorized
``provider_id``; it is never re-validated here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.analyzers.comparison import ComparisonEngine
from earningsdash.analyzers.goals import GoalTracker
from earningsdash.analyzers.heatmap import HEATMAP_SCALE, HeatmapBucket, HeatmapCell, HeatmapIntensityMapper
from earningsdash.config import EarningsDashConfig
from earningsdash.exporters.csv_export import CSVExportGenerator
from earningsdash.exporters.markdown import render_month_markdown
from earningsdash.models.earnings import DailyEarnings, MonthlyEarnings
from earningsdash.models.export import ExportOutcome
from earningsdash.models.goals import Goal, GoalProgress, GoalType
from earningsdash.stores.base import GoalStore, RecordStore
from earningsdash.stores.registry import create_stores

logger = logging.getLogger("earningsdash")


@dataclass
class EarningsDashboard:
    """Top-level facade over the earnings analytics core.

    Usage::

        from earningsdash import EarningsDashboard

        dashboard = EarningsDashboard.from_config("earningsdash.yaml")
        today = dashboard.get_daily_earnings("42", "2025-03-14")
        export = dashboard.generate_export("42", "2025-01-01", "2025-03-31")

    The dashboard coordinates:
    - **Stores**: completed-service records and provider goals.
    - **Analyzers**: aggregation, comparisons, goals and heatmaps.
    - **Exporters**: CSV exports and Markdown summaries.
    """

    config: EarningsDashConfig
    record_store: RecordStore
    goal_store: GoalStore
    clock: Callable[[], date] = date.today
    aggregator: EarningsAggregator = field(init=False, repr=False)
    comparisons: ComparisonEngine = field(init=False, repr=False)
    goals: GoalTracker = field(init=False, repr=False)
    heatmap: HeatmapIntensityMapper = field(init=False, repr=False)
    exporter: CSVExportGenerator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        analytics = self.config.analytics
        self.aggregator = EarningsAggregator(
            self.record_store,
            max_range_days=analytics.max_range_days,
            average_divisor=analytics.average_divisor,
            clock=self.clock,
        )
        self.comparisons = ComparisonEngine(self.aggregator)
        self.goals = GoalTracker(
            self.goal_store,
            self.aggregator,
            on_track_threshold=analytics.on_track_threshold,
        )
        self.heatmap = HeatmapIntensityMapper(self._heatmap_scale())
        self.exporter = CSVExportGenerator(self.aggregator)

    @classmethod
    def from_config(
        cls,
        config_path: str | None = None,
        clock: Callable[[], date] = date.today,
        **overrides: Any,
    ) -> EarningsDashboard:
        """Create a dashboard from a config file or keyword arguments."""
        config = EarningsDashConfig.load(config_path, **overrides)
        record_store, goal_store = create_stores(config.storage)
        instance = cls(config=config, record_store=record_store, goal_store=goal_store, clock=clock)
        logger.info("Earnings dashboard initialized with %s stores", config.storage.backend)
        return instance

    def _heatmap_scale(self) -> tuple[HeatmapBucket, ...]:
        custom = self.config.heatmap.scale
        if not custom:
            return HEATMAP_SCALE
        return tuple(HeatmapBucket(b.threshold, b.color, b.label) for b in custom)

    # -- earnings ---------------------------------------------------------

    def get_daily_earnings(
        self,
        provider_id: str,
        day: date | str,
        categories: Iterable[str] | None = None,
    ) -> DailyEarnings:
        """Daily earnings with previous-day and same-day-last-week comparisons."""
        categories = list(categories or [])
        daily = self.aggregator.get_daily_earnings(provider_id, day, categories)
        daily.comparison = self.comparisons.daily_comparisons(
            provider_id, daily.total_earnings, daily.date, categories
        )
        return daily

    def get_daily_earnings_range(
        self,
        provider_id: str,
        start_date: date | str,
        end_date: date | str,
        categories: Iterable[str] | None = None,
    ) -> list[DailyEarnings]:
        return self.aggregator.get_daily_earnings_range(provider_id, start_date, end_date, categories)

    def get_monthly_earnings(
        self,
        provider_id: str,
        year: int,
        month: int,
        categories: Iterable[str] | None = None,
    ) -> MonthlyEarnings:
        """Monthly summary with previous-month and same-month-last-year comparisons."""
        categories = list(categories or [])
        monthly = self.aggregator.get_monthly_earnings(provider_id, year, month, categories)
        monthly.comparison = self.comparisons.monthly_comparisons(
            provider_id, monthly.total_earnings, year, month, categories
        )
        return monthly

    def get_provider_categories(self, provider_id: str) -> list[str]:
        return self.aggregator.get_provider_categories(provider_id)

    def get_month_heatmap(
        self,
        provider_id: str,
        year: int,
        month: int,
        categories: Iterable[str] | None = None,
    ) -> list[HeatmapCell]:
        """Calendar heatmap cells for every day of a month."""
        monthly = self.aggregator.get_monthly_earnings(provider_id, year, month, categories)
        return self.heatmap.build(monthly.daily_breakdown)

    # -- goals --------------------------------------------------------------

    def set_goal(
        self,
        provider_id: str,
        goal_type: GoalType | str,
        target_amount: Any,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> Goal:
        return self.goals.set_goal(provider_id, goal_type, target_amount, start_date, end_date)

    def get_active_goals(self, provider_id: str) -> list[Goal]:
        return self.goals.get_active_goals(provider_id)

    def get_goal_progress(self, provider_id: str, goal_id: str) -> GoalProgress:
        return self.goals.get_goal_progress(provider_id, goal_id)

    def delete_goal(self, provider_id: str, goal_id: str) -> bool:
        return self.goals.delete_goal(provider_id, goal_id)

    # -- exports ------------------------------------------------------------

    def generate_export(
        self,
        provider_id: str,
        start_date: date | str,
        end_date: date | str,
        categories: Iterable[str] | None = None,
    ) -> ExportOutcome:
        return self.exporter.generate_export(provider_id, start_date, end_date, categories)

    def render_month_summary(self, provider_id: str, year: int, month: int) -> str:
        """Markdown summary of a month, including active goal progress."""
        monthly = self.get_monthly_earnings(provider_id, year, month)
        progress = [
            self.goals.get_goal_progress(provider_id, g.goal_id)
            for g in self.goals.get_active_goals(provider_id)
        ]
        return render_month_markdown(provider_id, monthly, progress, currency=self.config.currency)
