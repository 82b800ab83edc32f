"""
Markdown earnings summary exporter.

Renders a month of earnings (totals, trend comparisons, category breakdown,
best and worst days, goal progress) as Markdown for sharing or archiving.
"""

from __future__ import annotations

import calendar

from earningsdash.models.earnings import BaselineKind, MonthlyEarnings, Trend
from earningsdash.models.goals import GoalProgress, GoalStatus

_BASELINE_LABELS = {
    BaselineKind.PREVIOUS_DAY: "Previous day",
    BaselineKind.SAME_DAY_LAST_WEEK: "Same day last week",
    BaselineKind.PREVIOUS_MONTH: "Previous month",
    BaselineKind.SAME_MONTH_LAST_YEAR: "Same month last year",
}

_TREND_ARROWS = {Trend.UP: "↑", Trend.DOWN: "↓", Trend.FLAT: "→"}

_CURRENCY_SYMBOLS = {"USD": "$", "CAD": "CA$", "AUD": "A$", "EUR": "€", "GBP": "£", "JPY": "¥", "INR": "₹"}

_STATUS_EMOJI = {
    GoalStatus.ACHIEVED: "🟢",
    GoalStatus.ON_TRACK: "🟡",
    GoalStatus.BEHIND: "🔴",
}


def currency_symbol(currency: str) -> str:
    """Display prefix for an ISO currency code; unknown codes are shown as-is."""
    code = currency.upper()
    return _CURRENCY_SYMBOLS.get(code, f"{code} ")


def render_month_markdown(
    provider_id: str,
    summary: MonthlyEarnings,
    goals: list[GoalProgress] | None = None,
    currency: str = "USD",
) -> str:
    """Render a MonthlyEarnings summary as Markdown."""
    lines: list[str] = []
    symbol = currency_symbol(currency)
    month_name = calendar.month_name[summary.month]

    # Header
    lines.append(f"# 💰 Earnings Summary — {month_name} {summary.year}")
    lines.append("")
    lines.append(f"*Provider: {provider_id} · Currency: {currency}*")
    lines.append("")

    lines.append("## 📊 Overview")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Total Earnings** | {symbol}{summary.total_earnings:,.2f} |")
    lines.append(f"| **Services Completed** | {summary.service_count} |")
    lines.append(f"| **Average per Day** | {symbol}{summary.average_daily_earnings:,.2f} |")
    lines.append(f"| **Active Days** | {summary.active_days} of {len(summary.daily_breakdown)} |")
    if summary.highest_day:
        lines.append(f"| **Best Day** | {summary.highest_day.date} ({symbol}{summary.highest_day.total_earnings:,.2f}) |")
    if summary.lowest_day:
        lines.append(f"| **Slowest Day** | {summary.lowest_day.date} ({symbol}{summary.lowest_day.total_earnings:,.2f}) |")
    lines.append("")

    if summary.comparison:
        lines.append("## 📈 Trends")
        lines.append("")
        lines.append("| Compared to | Baseline | Change |")
        lines.append("|-------------|----------|--------|")
        for kind, result in summary.comparison.items():
            arrow = _TREND_ARROWS[result.trend]
            lines.append(
                f"| {_BASELINE_LABELS[kind]} | {symbol}{result.baseline_amount:,.2f} | "
                f"{arrow} {result.percentage_change:+.2f}% |"
            )
        lines.append("")

    if summary.category_breakdown:
        lines.append("## 🧾 By Category")
        lines.append("")
        lines.append("| Category | Earnings | Services | Share |")
        lines.append("|----------|----------|----------|-------|")
        for entry in summary.category_breakdown:
            lines.append(
                f"| {entry.category} | {symbol}{entry.earnings:,.2f} | {entry.service_count} | {entry.percentage:.2f}% |"
            )
        lines.append("")

    if goals:
        lines.append("## 🎯 Goals")
        lines.append("")
        for progress in goals:
            emoji = _STATUS_EMOJI[progress.status]
            lines.append(
                f"- {emoji} **{progress.goal_type.value.title()}** — {symbol}{progress.current_amount:,.2f} of "
                f"{symbol}{progress.target_amount:,.2f} ({progress.progress_percentage:.2f}%, {progress.status.value})"
            )
        lines.append("")

    if summary.total_earnings == 0:
        lines.append("*No completed services in this period.*")
        lines.append("")

    return "\n".join(lines)
