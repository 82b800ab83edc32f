"""
CSV loader — read completed-service records from a CSV file.

The simplest way to get records into a store. Supports any CSV with a
completion date, an amount and a category column.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import pandas as pd

from earningsdash.models.records import CompletedServiceRecord

logger = logging.getLogger("earningsdash.stores.csv")

# Common column name mappings
_COLUMN_ALIASES: dict[str, list[str]] = {
    "provider_id": ["provider_id", "providerid", "provider", "provider_user_id"],
    "date": ["completed_date", "completeddate", "date", "payment_date", "paymentdate", "completed_at"],
    "amount": ["amount", "earnings", "total", "payment_amount", "price"],
    "category": ["category", "service_category", "service_type", "type"],
    "record_id": ["record_id", "request_id", "requestid", "id"],
}


class CSVRecordLoader:
    """Parse completed-service records out of a CSV file.

    Usage::

        loader = CSVRecordLoader("services.csv", default_provider_id="42")
        records = loader.load()

    Amounts are read as text so they convert to ``Decimal`` without float noise.
    """

    def __init__(
        self,
        file_path: str | Path,
        default_provider_id: str | None = None,
        encoding: str = "utf-8",
        delimiter: str = ",",
    ) -> None:
        self.file_path = Path(file_path)
        self.default_provider_id = default_provider_id
        self.encoding = encoding
        self.delimiter = delimiter
        self.skipped = 0

    def load(self) -> list[CompletedServiceRecord]:
        if not self.file_path.exists():
            raise FileNotFoundError(f"CSV file not found: {self.file_path}")

        df = pd.read_csv(self.file_path, encoding=self.encoding, delimiter=self.delimiter, dtype=str)
        df.columns = df.columns.str.strip().str.lower()

        col_map = self._detect_columns(df)
        records = self._parse_records(df, col_map)
        logger.info("Parsed %d records from %s (%d skipped)", len(records), self.file_path.name, self.skipped)
        return records

    def _detect_columns(self, df: pd.DataFrame) -> dict[str, str]:
        """Auto-detect column mappings from the DataFrame."""
        col_map: dict[str, str] = {}
        df_cols = set(df.columns)

        for field, aliases in _COLUMN_ALIASES.items():
            for alias in aliases:
                if alias in df_cols:
                    col_map[field] = alias
                    break

        return col_map

    def _parse_records(self, df: pd.DataFrame, col_map: dict[str, str]) -> list[CompletedServiceRecord]:
        records: list[CompletedServiceRecord] = []
        self.skipped = 0

        date_col = col_map.get("date")
        amount_col = col_map.get("amount")
        cat_col = col_map.get("category")
        provider_col = col_map.get("provider_id")
        id_col = col_map.get("record_id")

        if not date_col or not amount_col or not cat_col:
            logger.warning("CSV missing required columns (date, amount, category)")
            return records
        if not provider_col and not self.default_provider_id:
            logger.warning("CSV has no provider column and no default provider id was given")
            return records

        for _, row in df.iterrows():
            try:
                records.append(self._parse_row(row, date_col, amount_col, cat_col, provider_col, id_col))
            except (ValueError, TypeError, InvalidOperation) as e:
                self.skipped += 1
                logger.debug("Skipping row: %s", e)

        return records

    def _parse_row(
        self,
        row: Any,
        date_col: str,
        amount_col: str,
        cat_col: str,
        provider_col: str | None,
        id_col: str | None,
    ) -> CompletedServiceRecord:
        raw_date = row[date_col]
        if not isinstance(raw_date, str) or not raw_date.strip():
            raise ValueError("missing completion date")
        completed = pd.to_datetime(raw_date.strip()).date()

        raw_amount = str(row[amount_col]).strip().replace("$", "").replace(",", "")
        amount = Decimal(raw_amount)

        category = row[cat_col]
        if not isinstance(category, str) or not category.strip():
            raise ValueError("missing category")

        provider_id = self.default_provider_id
        if provider_col and isinstance(row[provider_col], str) and row[provider_col].strip():
            provider_id = row[provider_col].strip()

        record_id = None
        if id_col and isinstance(row[id_col], str) and row[id_col].strip():
            record_id = row[id_col].strip()

        return CompletedServiceRecord(
            provider_id=provider_id,
            amount=amount,
            category=category.strip(),
            completed_date=completed,
            record_id=record_id,
        )
