"""
Earnings dashboard configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Where completed-service records and goals live."""

    backend: Literal["memory", "sql"] = Field(default="memory", description="Store backend: memory or sql")
    url: str = Field(default="sqlite:///earnings.db", description="SQLAlchemy database URL (sql backend)")
    create_tables: bool = Field(default=True, description="Create missing tables on startup")


class AnalyticsConfig(BaseModel):
    """Aggregation policy knobs."""

    max_range_days: int = Field(default=366, ge=1, description="Longest range a range query or export may span")
    average_divisor: Literal["elapsed", "full"] = Field(
        default="elapsed",
        description="Divisor for the in-progress month's daily average",
    )
    on_track_threshold: float = Field(default=75.0, gt=0, lt=100)


class HeatmapBucketConfig(BaseModel):
    threshold: float = Field(ge=0.0, le=1.0)
    color: str
    label: str = ""


class HeatmapConfig(BaseModel):
    """Optional override of the heatmap display scale."""

    scale: list[HeatmapBucketConfig] = Field(default_factory=list)


class EarningsDashConfig(BaseModel):
    """Root configuration for the earnings dashboard."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    heatmap: HeatmapConfig = Field(default_factory=HeatmapConfig)

    # Output settings
    export_dir: str = Field(default="./earnings_exports")
    currency: str = Field(default="USD")

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> EarningsDashConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_url = os.environ.get("EARNINGSDASH_DATABASE_URL")
        env_max_range = os.environ.get("EARNINGSDASH_MAX_RANGE_DAYS")
        env_export_dir = os.environ.get("EARNINGSDASH_EXPORT_DIR")

        if env_url:
            storage = data.get("storage", {})
            storage["backend"] = "sql"
            storage["url"] = env_url
            data["storage"] = storage

        if env_max_range:
            analytics = data.get("analytics", {})
            analytics["max_range_days"] = int(env_max_range)
            data["analytics"] = analytics

        if env_export_dir:
            data["export_dir"] = env_export_dir

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
