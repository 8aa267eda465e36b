"""
Models module initialization - survey parsers, statistics and scoring
"""

from .bht_wells import parse_bht_csv, WellDataModel, WellDataset
from .heat_flow import parse_heat_flow_csv
from .gravity import parse_gravity_text, GravityDataModel, GravityDataset
from .statistics import DimensionRange, DimensionStats, compute_stats
from .scoring import (
    CriteriaWeights, ScoredLocation, score_location, evaluate_location,
    score_locations, filter_locations, rank_locations
)
from .well_ranking import WellRankingAdapter, WellMarker, ScoredWell

__all__ = [
    'parse_bht_csv',
    'WellDataModel',
    'WellDataset',
    'parse_heat_flow_csv',
    'parse_gravity_text',
    'GravityDataModel',
    'GravityDataset',
    'DimensionRange',
    'DimensionStats',
    'compute_stats',
    'CriteriaWeights',
    'ScoredLocation',
    'score_location',
    'evaluate_location',
    'score_locations',
    'filter_locations',
    'rank_locations',
    'WellRankingAdapter',
    'WellMarker',
    'ScoredWell'
]
