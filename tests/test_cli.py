"""Tests for the command-line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from earningsdash.cli import app

SERVICES_CSV = """provider_id,completed_date,amount,category
p1,2025-02-05,100.00,Plumbing
p1,2025-02-20,50.00,Electrical
p1,2025-03-13,80.00,Plumbing
p1,2025-03-19,40.00,Plumbing
p1,2025-03-20,120.00,Plumbing
p1,2025-03-20,60.00,Electrical
p1,2025-03-20,20.00,"Cleaning, Deep"
p2,2025-03-20,999.00,Plumbing
"""

runner = CliRunner()


@pytest.fixture
def csv_file(tmp_path: Path) -> str:
    file = tmp_path / "services.csv"
    file.write_text(SERVICES_CSV)
    return str(file)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("EARNINGSDASH_DATABASE_URL", raising=False)
    monkeypatch.chdir(tmp_path)


def _invoke(csv_file: str, *args: str):  # noqa: ANN202
    return runner.invoke(app, ["--csv", csv_file, "--today", "2025-03-20", *args])


class TestCLI:
    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "daily" in result.stdout
        assert "export" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "earningsdash" in result.stdout

    def test_daily(self, csv_file: str) -> None:
        result = _invoke(csv_file, "daily", "p1")
        assert result.exit_code == 0
        assert "$200.00" in result.stdout
        assert "previousDay" in result.stdout

    def test_daily_bad_date(self, csv_file: str) -> None:
        result = _invoke(csv_file, "daily", "p1", "--date", "03/20/2025")
        assert result.exit_code == 1
        assert "VALIDATION_ERROR" in result.stdout

    def test_daily_future_date(self, csv_file: str) -> None:
        result = _invoke(csv_file, "daily", "p1", "--date", "2025-03-21")
        assert result.exit_code == 1
        assert "FUTURE_DATE" in result.stdout

    def test_monthly(self, csv_file: str) -> None:
        result = _invoke(csv_file, "monthly", "p1", "--year", "2025", "--month", "3")
        assert result.exit_code == 0
        assert "$320.00" in result.stdout
        assert "$16.00" in result.stdout

    def test_categories(self, csv_file: str) -> None:
        result = _invoke(csv_file, "categories", "p1")
        assert result.exit_code == 0
        assert "Cleaning, Deep" in result.stdout

    def test_heatmap(self, csv_file: str) -> None:
        result = _invoke(csv_file, "heatmap", "p1")
        assert result.exit_code == 0
        assert "March 2025" in result.stdout

    def test_export(self, csv_file: str, tmp_path: Path) -> None:
        out_dir = tmp_path / "out"
        result = _invoke(csv_file, "export", "p1", "--start", "2025-03-13", "--end", "2025-03-20", "-o", str(out_dir))
        assert result.exit_code == 0
        assert "Exported 5 services" in result.stdout

        content = (out_dir / "earnings_p1_2025-03-13_2025-03-20.csv").read_text()
        assert content.startswith("Date,Category,Earnings,ServiceCount\n")

    def test_export_empty(self, csv_file: str, tmp_path: Path) -> None:
        result = _invoke(csv_file, "export", "p1", "--start", "2025-01-01", "--end", "2025-01-31")
        assert result.exit_code == 0
        assert "No data available" in result.stdout
        assert not (tmp_path / "earnings_exports").exists()

    def test_summary(self, csv_file: str, tmp_path: Path) -> None:
        output = tmp_path / "march.md"
        result = _invoke(csv_file, "summary", "p1", "-o", str(output))
        assert result.exit_code == 0
        assert "March 2025" in output.read_text(encoding="utf-8")

    def test_goals_set_and_list(self, csv_file: str) -> None:
        result = _invoke(csv_file, "goals", "set", "p1", "--type", "daily", "--target", "250")
        assert result.exit_code == 0
        assert "daily goal" in result.stdout
        assert "in memory" in result.stdout

    def test_goals_bad_type(self, csv_file: str) -> None:
        result = _invoke(csv_file, "goals", "set", "p1", "--type", "weekly", "--target", "250")
        assert result.exit_code == 1

    def test_goals_missing(self, csv_file: str) -> None:
        result = _invoke(csv_file, "goals", "progress", "p1", "nope")
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.stdout

    def test_import_records_needs_sql(self, csv_file: str) -> None:
        result = runner.invoke(app, ["import-records", csv_file])
        assert result.exit_code == 1

    def test_import_records_into_sql(self, csv_file: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        db = tmp_path / "earnings.db"
        monkeypatch.setenv("EARNINGSDASH_DATABASE_URL", f"sqlite:///{db}")

        result = runner.invoke(app, ["import-records", csv_file])
        assert result.exit_code == 0
        assert "Imported 8 records" in result.stdout

        result = runner.invoke(app, ["--today", "2025-03-20", "daily", "p1"])
        assert "$200.00" in result.stdout
