"""
GEOSITE MAIN ORCHESTRATOR
Optimal geothermal location finder: loads the three survey sources,
fuses them and scores candidate locations against adjustable criteria
"""

import logging
from typing import Dict, List, Optional

from geosite_core.data_sources import SurveyDataSource, SourceLocator, read_sources
from geosite_core.data_integration import LocationFusionEngine, FusionResult
from geosite_core.models.bht_wells import parse_bht_csv, WellDataModel, WellDataset
from geosite_core.models.heat_flow import parse_heat_flow_csv
from geosite_core.models.gravity import parse_gravity_text
from geosite_core.models.scoring import (
    CriteriaWeights, ScoredLocation, score_locations, filter_locations,
    rank_locations, validate_threshold
)
from geosite_core.models.well_ranking import WellRankingAdapter
from geosite_core.utils.diagnostics import DiagnosticSink, resolve_sink
from geosite_core.exceptions import EmptyResult
from geosite_core.config.settings import (
    BHT_SOURCE, HEAT_FLOW_SOURCE, GRAVITY_SOURCE, DEFAULT_MATCH_THRESHOLD,
    PARTIAL_COMPLETENESS
)

logger = logging.getLogger(__name__)


def default_sources() -> Dict[str, SourceLocator]:
    return {'bht': BHT_SOURCE, 'heat_flow': HEAT_FLOW_SOURCE, 'gravity': GRAVITY_SOURCE}


class OptimalLocationFinder:
    """
    Main orchestrator for geothermal site ranking

    Loading is fail-fast: if any of the three sources cannot be read or
    parsed, load() raises and nothing is fused. Once loaded, scoring is
    recomputed on every call, so weights and threshold can change freely.
    """

    def __init__(self,
                 sources: Optional[Dict[str, SourceLocator]] = None,
                 weights: Optional[CriteriaWeights] = None,
                 threshold: float = DEFAULT_MATCH_THRESHOLD,
                 completeness: int = PARTIAL_COMPLETENESS,
                 missing_policy: Optional[str] = None,
                 data_source: Optional[SurveyDataSource] = None,
                 diagnostics: Optional[DiagnosticSink] = None):
        self.logger = logging.getLogger(__name__)
        self.sources = {**default_sources(), **(sources or {})}
        self.weights = weights or CriteriaWeights()
        self.threshold = validate_threshold(threshold)
        self.completeness = completeness
        self.missing_policy = missing_policy
        self.data_source = data_source or SurveyDataSource()
        self.diagnostics = resolve_sink(diagnostics)
        self.fusion_engine = LocationFusionEngine(diagnostics=self.diagnostics)

        self.result: Optional[FusionResult] = None
        self.wells: Optional[WellDataset] = None
        self.well_ranking: Optional[WellRankingAdapter] = None

    def load(self) -> FusionResult:
        """
        Read, parse and fuse all three sources

        Raises:
            SourceUnavailable: A source could not be read
            SourceFormatError: A source could not be parsed
            EmptyResult: No location has enough measurements to be scored
        """
        self.logger.info("Loading survey sources...")
        texts = read_sources(
            {name: self.sources[name] for name in ('bht', 'heat_flow', 'gravity')},
            source=self.data_source,
        )

        wells = parse_bht_csv(texts['bht'], self.diagnostics)
        heat_flow = parse_heat_flow_csv(texts['heat_flow'], self.diagnostics)
        gravity = parse_gravity_text(texts['gravity'], self.diagnostics)
        for name, records in (('bht', wells), ('heat_flow', heat_flow), ('gravity', gravity)):
            self.diagnostics.emit('source_loaded', source=name, records=len(records))

        result = self.fusion_engine.fuse(
            wells, heat_flow, gravity,
            completeness=self.completeness,
            missing_policy=self.missing_policy,
        )
        if result.is_empty:
            raise EmptyResult(details={
                'total_locations': len(result.all_locations),
                'completeness': self.completeness,
            })

        self.result = result
        return result

    def load_wells(self, locator: Optional[SourceLocator] = None) -> WellDataset:
        """Well-only load for the well map; degrades to an empty dataset on failure"""
        model = WellDataModel(source=self.data_source, diagnostics=self.diagnostics)
        self.wells = model.load(locator or self.sources['bht'])
        self.well_ranking = WellRankingAdapter(self.wells.geo_wells, population=self.wells.records)
        return self.wells

    def set_weights(self, weights: CriteriaWeights) -> None:
        self.weights = weights

    def set_threshold(self, threshold: float) -> None:
        self.threshold = validate_threshold(threshold)

    def _require_result(self) -> FusionResult:
        if self.result is None:
            raise RuntimeError("No fused data: call load() first")
        return self.result

    def scored_locations(self) -> List[ScoredLocation]:
        result = self._require_result()
        return score_locations(result.locations, self.weights, result.stats, self.threshold)

    def filtered_locations(self) -> List[ScoredLocation]:
        result = self._require_result()
        return filter_locations(result.locations, self.weights, result.stats, self.threshold)

    def ranked_locations(self, limit: Optional[int] = None) -> List[ScoredLocation]:
        result = self._require_result()
        return rank_locations(result.locations, self.weights, result.stats,
                              self.threshold, limit=limit)
