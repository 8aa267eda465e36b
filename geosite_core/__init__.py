"""
Package initialization file for geosite core
"""

__version__ = "1.0.0"
__description__ = "geosite - Geothermal well site suitability from fused survey data"

from geosite_core.data_integration import LocationFusionEngine, FusionResult
from geosite_core.pipeline import OptimalLocationFinder

from geosite_core.models import (
    parse_bht_csv, parse_heat_flow_csv, parse_gravity_text,
    WellDataModel, GravityDataModel,
    DimensionStats, compute_stats,
    CriteriaWeights, ScoredLocation, score_location, evaluate_location,
    WellRankingAdapter
)

from geosite_core.utils.core import (
    FusedLocation, RawWellRecord, RawHeatFlowRecord, RawGravityStationRecord,
    ReportExporter
)
from geosite_core.exceptions import (
    GeositeError, SourceUnavailable, SourceFormatError, EmptyResult
)

__all__ = [
    'LocationFusionEngine',
    'FusionResult',
    'OptimalLocationFinder',
    'parse_bht_csv',
    'parse_heat_flow_csv',
    'parse_gravity_text',
    'WellDataModel',
    'GravityDataModel',
    'DimensionStats',
    'compute_stats',
    'CriteriaWeights',
    'ScoredLocation',
    'score_location',
    'evaluate_location',
    'WellRankingAdapter',
    'FusedLocation',
    'RawWellRecord',
    'RawHeatFlowRecord',
    'RawGravityStationRecord',
    'ReportExporter',
    'GeositeError',
    'SourceUnavailable',
    'SourceFormatError',
    'EmptyResult'
]
