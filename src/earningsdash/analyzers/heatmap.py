"""
Heatmap Intensity Mapper — calendar heatmap values for daily earnings.

Each day's earnings are normalized against the best day in view and mapped to
one of five display buckets, lightest (no earnings) to darkest (best day).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import datetime
from decimal import Decimal

from pydantic import BaseModel

from earningsdash.models.earnings import DailyEarnings


@dataclass(frozen=True)
class HeatmapBucket:
    """A display bucket covering intensities up to ``threshold``."""

    threshold: float
    color: str
    label: str = ""


HEATMAP_SCALE: tuple[HeatmapBucket, ...] = (
    HeatmapBucket(0.0, "#ebedf0", "none"),
    HeatmapBucket(0.2, "#9be9a8", "low"),
    HeatmapBucket(0.4, "#40c463", "medium"),
    HeatmapBucket(0.7, "#30a14e", "high"),
    HeatmapBucket(1.0, "#216e39", "peak"),
)


class HeatmapCell(BaseModel):
    """One day of a calendar heatmap."""

    date: datetime.date
    earnings: Decimal
    service_count: int
    intensity: float
    color: str


def get_heatmap_intensity(earnings: Decimal | float, max_earnings: Decimal | float) -> float:
    """Normalize ``earnings`` against ``max_earnings`` into ``[0, 1]``."""
    max_value = float(max_earnings)
    if max_value <= 0:
        return 0.0
    return min(max(float(earnings) / max_value, 0.0), 1.0)


def get_heatmap_bucket(intensity: float, scale: Sequence[HeatmapBucket] = HEATMAP_SCALE) -> HeatmapBucket:
    """First bucket whose threshold is at or above ``intensity``.

    ``scale`` must be ordered by ascending threshold and end at 1.0.
    """
    for bucket in scale:
        if intensity <= bucket.threshold:
            return bucket
    return scale[-1]


def get_heatmap_color(intensity: float, scale: Sequence[HeatmapBucket] = HEATMAP_SCALE) -> str:
    return get_heatmap_bucket(intensity, scale).color


def build_heatmap(
    days: Sequence[DailyEarnings],
    scale: Sequence[HeatmapBucket] = HEATMAP_SCALE,
) -> list[HeatmapCell]:
    """Heatmap cells for a run of days, normalized against the best day."""
    max_earnings = max((d.total_earnings for d in days), default=Decimal("0"))
    cells = []
    for day in days:
        intensity = get_heatmap_intensity(day.total_earnings, max_earnings)
        cells.append(
            HeatmapCell(
                date=day.date,
                earnings=day.total_earnings,
                service_count=day.service_count,
                intensity=intensity,
                color=get_heatmap_color(intensity, scale),
            )
        )
    return cells


class HeatmapIntensityMapper:
    """Heatmap functions bound to one display scale."""

    def __init__(self, scale: Sequence[HeatmapBucket] = HEATMAP_SCALE) -> None:
        if not scale:
            raise ValueError("Heatmap scale needs at least one bucket")
        self.scale = tuple(sorted(scale, key=lambda b: b.threshold))

    get_heatmap_intensity = staticmethod(get_heatmap_intensity)

    def get_heatmap_color(self, intensity: float) -> str:
        return get_heatmap_color(intensity, self.scale)

    def build(self, days: Sequence[DailyEarnings]) -> list[HeatmapCell]:
        return build_heatmap(days, self.scale)
