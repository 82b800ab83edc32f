"""
earningsdash — Earnings analytics for marketplace service providers.

Daily and monthly earnings, trends, goals, heatmaps and CSV exports
computed from completed-service records.
"""

__version__ = "0.3.0"
__all__ = ["EarningsDashboard"]

from earningsdash.dashboard import EarningsDashboard  # noqa: E402
