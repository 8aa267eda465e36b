"""
SUITABILITY SCORING ENGINE
Weighted min-max composite score for fused locations

For each dimension present on a location the value is normalized against
the dimension's range, and the weighted average is taken over the present
dimensions only:

    score = sum(w_d * n_d) / sum(w_d)      d in present dimensions

Weights express relative importance among the available signals, so a
location missing gravity is not penalized for it. Scores are recomputed on
demand; nothing here caches or mutates state.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging

import numpy as np

from geosite_core.utils.core import FusedLocation
from geosite_core.models.statistics import DimensionStats
from geosite_core.config.settings import (
    DIMENSIONS, DEFAULT_CRITERIA_WEIGHTS, DEFAULT_MATCH_THRESHOLD,
    WEIGHT_BOUNDS, THRESHOLD_BOUNDS
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CriteriaWeights:
    """Relative importance of each dimension, each in [0, 1]; need not sum to 1"""
    temperature: float = DEFAULT_CRITERIA_WEIGHTS['temperature']
    heat_flow: float = DEFAULT_CRITERIA_WEIGHTS['heat_flow']
    gravity: float = DEFAULT_CRITERIA_WEIGHTS['gravity']

    def __post_init__(self):
        low, high = WEIGHT_BOUNDS
        for dimension in DIMENSIONS:
            weight = getattr(self, dimension)
            if weight is None or not (low <= weight <= high):
                raise ValueError(
                    f"Invalid {dimension} weight: {weight} (must be {low}-{high})"
                )

    def __getitem__(self, dimension: str) -> float:
        if dimension not in DIMENSIONS:
            raise KeyError(f"Unknown dimension: {dimension}")
        return getattr(self, dimension)

    @classmethod
    def from_dict(cls, weights: Dict[str, float]) -> 'CriteriaWeights':
        aliases = {'heatFlow': 'heat_flow'}
        return cls(**{aliases.get(k, k): float(v) for k, v in weights.items()})

    def to_dict(self) -> Dict:
        return {'temperature': self.temperature, 'heatFlow': self.heat_flow,
                'gravity': self.gravity}


@dataclass(frozen=True)
class ScoredLocation:
    location: FusedLocation
    score: float
    passes: bool

    def to_dict(self) -> Dict:
        return {**self.location.to_dict(), 'score': self.score, 'passes': self.passes}


def validate_threshold(threshold: float) -> float:
    low, high = THRESHOLD_BOUNDS
    if threshold is None or not (low <= threshold <= high):
        raise ValueError(f"Invalid match threshold: {threshold} (must be {low}-{high})")
    return float(threshold)


def normalized_value(value: float, dimension: str, stats: DimensionStats) -> float:
    """Min-max normalized value in [0, 1]; 0 for a zero-width range"""
    return float(np.clip(stats[dimension].normalize(value), 0.0, 1.0))


def score_location(location: FusedLocation,
                   weights: CriteriaWeights,
                   stats: DimensionStats) -> float:
    """Composite suitability score in [0, 1], renormalized over present dimensions"""
    weighted_sum = 0.0
    total_weight = 0.0
    for dimension in DIMENSIONS:
        value = location.value(dimension)
        if value is None:
            continue
        weight = weights[dimension]
        weighted_sum += normalized_value(value, dimension, stats) * weight
        total_weight += weight

    if total_weight == 0:
        return 0.0
    return weighted_sum / total_weight


def passes_threshold(score: float, threshold: float) -> bool:
    return score >= threshold


def evaluate_location(location: FusedLocation,
                      weights: CriteriaWeights,
                      stats: DimensionStats,
                      threshold: float = DEFAULT_MATCH_THRESHOLD) -> Tuple[float, bool]:
    """(score, passes) for one location"""
    threshold = validate_threshold(threshold)
    score = score_location(location, weights, stats)
    return score, passes_threshold(score, threshold)


def score_locations(locations: Iterable[FusedLocation],
                    weights: CriteriaWeights,
                    stats: DimensionStats,
                    threshold: float = DEFAULT_MATCH_THRESHOLD) -> List[ScoredLocation]:
    threshold = validate_threshold(threshold)
    scored = []
    for location in locations:
        score = score_location(location, weights, stats)
        scored.append(ScoredLocation(location, score, passes_threshold(score, threshold)))
    return scored


def filter_locations(locations: Iterable[FusedLocation],
                     weights: CriteriaWeights,
                     stats: DimensionStats,
                     threshold: float = DEFAULT_MATCH_THRESHOLD) -> List[ScoredLocation]:
    """Locations scoring at or above the threshold, in input order"""
    return [s for s in score_locations(locations, weights, stats, threshold) if s.passes]


def rank_locations(locations: Iterable[FusedLocation],
                   weights: CriteriaWeights,
                   stats: DimensionStats,
                   threshold: float = DEFAULT_MATCH_THRESHOLD,
                   limit: Optional[int] = None) -> List[ScoredLocation]:
    """Passing locations by descending score; ties keep input order"""
    ranked = sorted(filter_locations(locations, weights, stats, threshold),
                    key=lambda s: s.score, reverse=True)
    return ranked if limit is None else ranked[:limit]
