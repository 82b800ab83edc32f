"""
Earnings analyzers — pure computation over completed-service records.

Date bucketing, aggregation, trend comparison, goal progress and heatmap
intensity. Only the aggregator reads the record store.
"""

from earningsdash.analyzers.aggregator import EarningsAggregator, build_category_breakdown
from earningsdash.analyzers.comparison import ComparisonEngine, compute_percentage_change
from earningsdash.analyzers.date_ranges import DateBucket, DateRangeResolver, MonthBucket, parse_date
from earningsdash.analyzers.goals import GoalTracker, progress_status
from earningsdash.analyzers.heatmap import (
    HEATMAP_SCALE,
    HeatmapBucket,
    HeatmapCell,
    HeatmapIntensityMapper,
    build_heatmap,
    get_heatmap_color,
    get_heatmap_intensity,
)

__all__ = [
    "ComparisonEngine",
    "DateBucket",
    "DateRangeResolver",
    "EarningsAggregator",
    "GoalTracker",
    "HEATMAP_SCALE",
    "HeatmapBucket",
    "HeatmapCell",
    "HeatmapIntensityMapper",
    "MonthBucket",
    "build_category_breakdown",
    "build_heatmap",
    "compute_percentage_change",
    "get_heatmap_color",
    "get_heatmap_intensity",
    "parse_date",
    "progress_status",
]
