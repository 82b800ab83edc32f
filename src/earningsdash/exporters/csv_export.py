"""
CSV earnings exporter.

Produces a tax-friendly CSV of daily per-category earnings for a provider,
consumed by spreadsheet and accounting tools. The layout is fixed:

    Date,Category,Earnings,ServiceCount
    2025-03-01,Plumbing,120.00,2

Ranges without any matching record yield an ``ExportEmptyResult`` instead of
an empty file.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.analyzers.date_ranges import DateRangeResolver, parse_date
from earningsdash.models.earnings import CENT, ZERO, DailyEarnings
from earningsdash.models.export import DateRange, ExportEmptyResult, ExportOutcome, ExportResult

logger = logging.getLogger("earningsdash.exporters.csv")

CSV_HEADER = ("Date", "Category", "Earnings", "ServiceCount")


def format_amount(amount: Decimal) -> str:
    """Plain decimal with exactly two fraction digits, no separators or symbols."""
    return f"{Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP):f}"


def export_file_name(provider_id: str, start: date, end: date) -> str:
    return f"earnings_{provider_id}_{start.isoformat()}_{end.isoformat()}.csv"


def export_rows(days: Iterable[DailyEarnings]) -> list[tuple[str, str, str, str]]:
    """One row per (day, category) with activity, by date then category."""
    rows = []
    for day in days:
        for entry in sorted(day.category_breakdown, key=lambda e: e.category):
            if entry.service_count == 0 and entry.earnings == 0:
                continue
            rows.append((day.date.isoformat(), entry.category, format_amount(entry.earnings), str(entry.service_count)))
    return rows


def render_csv(rows: Iterable[Iterable[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(rows)
    return buffer.getvalue()


class CSVExportGenerator:
    """Generate earnings CSV exports from the aggregator.

    Usage::

        generator = CSVExportGenerator(aggregator)
        result = generator.generate_export("42", "2025-01-01", "2025-03-31")
        if result.success:
            Path(result.file_name).write_text(result.content)
    """

    def __init__(self, aggregator: EarningsAggregator) -> None:
        self.aggregator = aggregator

    def generate_export(
        self,
        provider_id: str,
        start_date: date | str,
        end_date: date | str,
        categories: Iterable[str] | None = None,
    ) -> ExportOutcome:
        start = parse_date(start_date, "start_date")
        end = parse_date(end_date, "end_date")
        DateRangeResolver.ensure_ordered(start, end)
        DateRangeResolver.ensure_not_future(end, self.aggregator.clock())
        DateRangeResolver.ensure_within_limit(start, end, self.aggregator.max_range_days)

        logger.debug("Generating CSV export for provider %s: %s to %s", provider_id, start, end)
        days = self.aggregator.get_daily_earnings_range(provider_id, start, end, categories)
        date_range = DateRange(start=start, end=end)

        record_count = sum(d.service_count for d in days)
        if record_count == 0:
            logger.info("No earnings to export for provider %s between %s and %s", provider_id, start, end)
            return ExportEmptyResult(date_range=date_range)

        rows = export_rows(days)
        total = sum((d.total_earnings for d in days), ZERO)
        result = ExportResult(
            file_name=export_file_name(provider_id, start, end),
            content=render_csv(rows),
            record_count=record_count,
            total_amount=total.quantize(CENT, rounding=ROUND_HALF_UP),
            date_range=date_range,
        )
        logger.info("CSV export generated for provider %s: %d rows", provider_id, len(rows))
        return result


def write_export(result: ExportResult, directory: str | Path) -> Path:
    """Write a successful export into ``directory`` and return the file path."""
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / result.file_name
    # newline="" keeps the "\n" terminators csv produced
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(result.content)
    return path
