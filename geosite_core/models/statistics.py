"""
DIMENSION STATISTICS
Per-dimension min/max over fused locations, used for min-max normalization

Two policies exist for absent measurements:

* ``exclude`` (default): absent values take no part in the reduction. A
  dimension absent from every location collapses to the degenerate (0, 0).
* ``zero_fill``: absent values count as 0. Any location missing a
  dimension pulls that dimension's min (or max, for negative data such as
  gravity anomalies) towards 0.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional
import logging

import pandas as pd

from geosite_core.utils.core import FusedLocation, DIMENSION_LABELS
from geosite_core.config.settings import (
    DIMENSIONS, STATS_MISSING_VALUE_POLICY, STATS_MISSING_VALUE_POLICIES
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DimensionRange:
    min: float = 0.0
    max: float = 0.0

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_degenerate(self) -> bool:
        """Zero-width range; normalized values are defined as 0"""
        return self.max == self.min

    def normalize(self, value: float) -> float:
        if self.is_degenerate:
            return 0.0
        return (value - self.min) / self.span

    def to_dict(self) -> Dict:
        return {'min': self.min, 'max': self.max}


@dataclass(frozen=True)
class DimensionStats:
    temperature: DimensionRange = field(default_factory=DimensionRange)
    heat_flow: DimensionRange = field(default_factory=DimensionRange)
    gravity: DimensionRange = field(default_factory=DimensionRange)

    def __getitem__(self, dimension: str) -> DimensionRange:
        if dimension not in DIMENSIONS:
            raise KeyError(f"Unknown dimension: {dimension}")
        return getattr(self, dimension)

    def to_dict(self) -> Dict:
        return {DIMENSION_LABELS[d]: self[d].to_dict() for d in DIMENSIONS}


def _frame(locations: Iterable[FusedLocation]) -> pd.DataFrame:
    rows = [{d: loc.value(d) for d in DIMENSIONS} for loc in locations]
    return pd.DataFrame(rows, columns=list(DIMENSIONS), dtype=float)


def compute_stats(locations: Iterable[FusedLocation],
                  missing_policy: Optional[str] = None) -> DimensionStats:
    """
    Min and max of temperature, heat flow and gravity over `locations`

    Args:
        locations: Fused locations, usually the partial (k >= 2) working set
        missing_policy: 'exclude' or 'zero_fill'; defaults to STATS_MISSING_VALUE_POLICY

    Raises:
        ValueError: If missing_policy is not a known policy
    """
    policy = missing_policy or STATS_MISSING_VALUE_POLICY
    if policy not in STATS_MISSING_VALUE_POLICIES:
        raise ValueError(
            f"Unknown missing value policy '{policy}' (must be one of {STATS_MISSING_VALUE_POLICIES})"
        )

    frame = _frame(locations)
    if policy == 'zero_fill':
        frame = frame.fillna(0.0)

    ranges = {}
    for dimension in DIMENSIONS:
        values = frame[dimension].dropna()
        if values.empty:
            ranges[dimension] = DimensionRange(0.0, 0.0)
        else:
            ranges[dimension] = DimensionRange(float(values.min()), float(values.max()))

    stats = DimensionStats(**ranges)
    logger.debug(f"Dimension statistics ({policy}, {len(frame)} locations): {stats.to_dict()}")
    return stats
