"""Tests for the CSV earnings exporter."""

from datetime import date
from decimal import Decimal

import pytest

from earningsdash.analyzers.aggregator import EarningsAggregator
from earningsdash.errors import FutureDateError, ValidationError
from earningsdash.exporters.csv_export import (
    CSVExportGenerator,
    export_file_name,
    format_amount,
    write_export,
)
from earningsdash.models.export import ExportEmptyResult, ExportResult


@pytest.fixture
def generator(aggregator: EarningsAggregator) -> CSVExportGenerator:
    return CSVExportGenerator(aggregator)


class TestFormatting:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [("0", "0.00"), ("5", "5.00"), ("1234.5", "1234.50"), ("2.345", "2.35"), ("1E+3", "1000.00")],
    )
    def test_format_amount(self, amount: str, expected: str) -> None:
        assert format_amount(Decimal(amount)) == expected

    def test_file_name(self) -> None:
        assert export_file_name("p1", date(2025, 1, 1), date(2025, 3, 31)) == "earnings_p1_2025-01-01_2025-03-31.csv"


class TestGenerateExport:
    def test_content(self, generator: CSVExportGenerator) -> None:
        result = generator.generate_export("p1", "2025-03-13", "2025-03-20")

        assert isinstance(result, ExportResult)
        assert result.success is True
        assert result.file_name == "earnings_p1_2025-03-13_2025-03-20.csv"
        assert result.content.splitlines() == [
            "Date,Category,Earnings,ServiceCount",
            "2025-03-13,Plumbing,80.00,1",
            "2025-03-19,Plumbing,40.00,1",
            '2025-03-20,"Cleaning, Deep",20.00,1',
            "2025-03-20,Electrical,60.00,1",
            "2025-03-20,Plumbing,120.00,1",
        ]
        assert result.record_count == 5
        assert result.total_amount == Decimal("320.00")
        assert result.date_range.start == date(2025, 3, 13)
        assert result.date_range.end == date(2025, 3, 20)

    def test_no_carriage_returns(self, generator: CSVExportGenerator) -> None:
        result = generator.generate_export("p1", "2025-03-20", "2025-03-20")
        assert "\r" not in result.content
        assert result.content.endswith("\n")

    def test_category_filter(self, generator: CSVExportGenerator) -> None:
        result = generator.generate_export("p1", "2025-02-01", "2025-03-20", ["Electrical"])
        assert result.content.splitlines()[1:] == [
            "2025-02-20,Electrical,50.00,1",
            "2025-03-20,Electrical,60.00,1",
        ]
        assert result.total_amount == Decimal("110.00")

    def test_empty_range(self, generator: CSVExportGenerator) -> None:
        result = generator.generate_export("p1", "2025-01-01", "2025-01-31")

        assert isinstance(result, ExportEmptyResult)
        assert result.success is False
        assert result.message == "No data available for export in the selected period"
        assert result.date_range.start == date(2025, 1, 1)

    def test_future_end_rejected(self, generator: CSVExportGenerator) -> None:
        with pytest.raises(FutureDateError):
            generator.generate_export("p1", "2025-03-01", "2025-03-21")

    def test_inverted_range_rejected(self, generator: CSVExportGenerator) -> None:
        with pytest.raises(ValidationError):
            generator.generate_export("p1", "2025-03-20", "2025-03-01")

    def test_range_limit(self, generator: CSVExportGenerator) -> None:
        with pytest.raises(ValidationError):
            generator.generate_export("p1", "2023-01-01", "2025-03-20")

    def test_malformed_date(self, generator: CSVExportGenerator) -> None:
        with pytest.raises(ValidationError):
            generator.generate_export("p1", "March 1", "2025-03-20")


class TestWriteExport:
    def test_writes_file(self, generator: CSVExportGenerator, tmp_path) -> None:
        result = generator.generate_export("p1", "2025-03-13", "2025-03-20")
        path = write_export(result, tmp_path / "exports")

        assert path.name == result.file_name
        assert path.read_bytes().decode("utf-8") == result.content
