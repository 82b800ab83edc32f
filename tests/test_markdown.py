"""Tests for the Markdown summary exporter."""

from datetime import date
from decimal import Decimal

from earningsdash.exporters.markdown import render_month_markdown
from earningsdash.models.earnings import (
    BaselineKind,
    CategoryBreakdownEntry,
    ComparisonResult,
    DailyEarnings,
    MonthlyEarnings,
    Trend,
)
from earningsdash.models.goals import GoalProgress, GoalStatus, GoalType


def _summary() -> MonthlyEarnings:
    best = DailyEarnings(date=date(2025, 3, 20), total_earnings=Decimal("200"), service_count=3)
    return MonthlyEarnings(
        year=2025,
        month=3,
        total_earnings=Decimal("1320.00"),
        service_count=5,
        average_daily_earnings=Decimal("66.00"),
        highest_day=best,
        lowest_day=best,
        daily_breakdown=[best],
        category_breakdown=[
            CategoryBreakdownEntry(category="Plumbing", earnings=Decimal("1320"), service_count=5, percentage=Decimal("100")),
        ],
        comparison={
            BaselineKind.PREVIOUS_MONTH: ComparisonResult(
                baseline_amount=Decimal("1000"),
                current_amount=Decimal("1320"),
                amount_change=Decimal("320"),
                percentage_change=Decimal("32.00"),
                trend=Trend.UP,
            )
        },
    )


class TestMonthMarkdown:
    def test_sections(self) -> None:
        md = render_month_markdown("p1", _summary())

        assert md.startswith("# 💰 Earnings Summary")
        assert "March 2025" in md
        assert "| **Total Earnings** | $1,320.00 |" in md
        assert "| **Active Days** | 1 of 1 |" in md
        assert "Previous month" in md
        assert "+32.00%" in md
        assert "| Plumbing | $1,320.00 | 5 | 100.00% |" in md
        assert "No completed services" not in md

    def test_goals_section(self) -> None:
        progress = GoalProgress(
            goal_id="g1",
            goal_type=GoalType.MONTHLY,
            target_amount=Decimal("2000"),
            current_amount=Decimal("1320"),
            progress_percentage=Decimal("66.00"),
            status=GoalStatus.BEHIND,
            window_start=date(2025, 3, 1),
            window_end=date(2025, 3, 31),
            remaining_amount=Decimal("680"),
        )
        md = render_month_markdown("p1", _summary(), [progress], currency="EUR")
        assert "## 🎯 Goals" in md
        assert "**Monthly**" in md
        assert "€1,320.00 of €2,000.00" in md
        assert "$" not in md
        assert "behind" in md
        assert "Currency: EUR" in md

    def test_empty_month(self) -> None:
        md = render_month_markdown("p1", MonthlyEarnings(year=2025, month=1))
        assert "No completed services in this period" in md
        assert "## 🧾 By Category" not in md

    def test_unknown_currency_uses_code(self) -> None:
        md = render_month_markdown("p1", _summary(), currency="chf")
        assert "| **Total Earnings** | CHF 1,320.00 |" in md
