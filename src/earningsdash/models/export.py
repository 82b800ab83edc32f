"""
Export outcomes — a generated CSV file, or a structured "no data" result.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Union

from pydantic import BaseModel, Field


class DateRange(BaseModel):
    start: date
    end: date


class ExportResult(BaseModel):
    """A successfully generated CSV export."""

    success: Literal[True] = True
    file_name: str
    content: str
    record_count: int
    total_amount: Decimal
    date_range: DateRange
    generated_at: datetime = Field(default_factory=datetime.now)


class ExportEmptyResult(BaseModel):
    """Valid request whose range holds no matching records. Returned, never raised."""

    success: Literal[False] = False
    message: str = "No data available for export in the selected period"
    date_range: DateRange
    generated_at: datetime = Field(default_factory=datetime.now)


ExportOutcome = Union[ExportResult, ExportEmptyResult]
