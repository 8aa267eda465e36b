"""
WELL RANKING ADAPTER
Temperature-only ranking for raw BHT wells that were not fused with
heat-flow or gravity data. Wells are normalized against the temperature
range of the whole well population passed in, not the fused-location range.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from geosite_core.utils.core import RawWellRecord
from geosite_core.models.statistics import DimensionRange
from geosite_core.models.scoring import validate_threshold, passes_threshold
from geosite_core.config.settings import (
    DEFAULT_MATCH_THRESHOLD, MAP_WELL_LIMIT, RANKED_WELL_LIMIT
)

logger = logging.getLogger(__name__)


def _iso_date(value: Optional[datetime]) -> Optional[str]:
    return value.date().isoformat() if value is not None else None


@dataclass(frozen=True)
class WellMarker:
    """A well as shown on the map and in the ranked list"""
    id: int
    name: str
    latitude: float
    longitude: float
    temperature: float
    depth_km: Optional[float]
    state: str = ''
    drilling_start: str = ''
    drilling_complete: str = ''
    field_name: str = ''
    formation: str = ''
    company_name: str = ''
    drilling_start_date: Optional[datetime] = None
    drilling_complete_date: Optional[datetime] = None

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.latitude, self.longitude

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'coordinates': list(self.coordinates),
            'temperature': self.temperature,
            'depth': self.depth_km,
            'state': self.state,
            'drillingStart': self.drilling_start,
            'drillingComplete': self.drilling_complete,
            'fieldName': self.field_name,
            'formation': self.formation,
            'companyName': self.company_name,
            'drillingStartDate': _iso_date(self.drilling_start_date),
            'drillingCompleteDate': _iso_date(self.drilling_complete_date),
        }


@dataclass(frozen=True)
class ScoredWell:
    well: WellMarker
    score: float
    passes: bool

    def to_dict(self) -> Dict:
        return {**self.well.to_dict(), 'score': self.score, 'passes': self.passes}


def temperature_range(wells: Sequence[RawWellRecord]) -> DimensionRange:
    temperatures = [w.corrected_temperature for w in wells if w.corrected_temperature is not None]
    if not temperatures:
        return DimensionRange(0.0, 0.0)
    return DimensionRange(min(temperatures), max(temperatures))


class WellRankingAdapter:
    """
    Ranks raw wells by corrected temperature

    Args:
        wells: Well records to list and rank, typically the geothermal
               candidates of the well-only loader
        population: Well records whose temperature range normalizes the
                    scores, typically every parsed well; defaults to `wells`
    """

    def __init__(self, wells: Sequence[RawWellRecord],
                 population: Optional[Sequence[RawWellRecord]] = None):
        self.wells = [w for w in wells
                      if w.has_coordinates and w.corrected_temperature is not None]
        self.temperature_range = temperature_range(self.wells if population is None else population)
        if len(self.wells) < len(wells):
            logger.debug(f"Ignored {len(wells) - len(self.wells)} wells without coordinates or temperature")

    def score(self, well) -> float:
        """Temperature normalized to [0, 1] against the population range; 0 without a temperature"""
        temperature = getattr(well, 'temperature', None)
        if temperature is None:
            temperature = getattr(well, 'corrected_temperature', None)
        if temperature is None:
            return 0.0
        value = self.temperature_range.normalize(temperature)
        return min(max(value, 0.0), 1.0)

    def evaluate(self, well, threshold: float = DEFAULT_MATCH_THRESHOLD) -> Tuple[float, bool]:
        threshold = validate_threshold(threshold)
        score = self.score(well)
        return score, passes_threshold(score, threshold)

    def map_wells(self, limit: int = MAP_WELL_LIMIT) -> List[WellMarker]:
        """Hottest wells first, capped at `limit`, numbered from 1"""
        hottest = sorted(self.wells, key=lambda w: w.corrected_temperature, reverse=True)[:limit]
        return [self._marker(index, well) for index, well in enumerate(hottest)]

    def ranked_wells(self,
                     threshold: float = DEFAULT_MATCH_THRESHOLD,
                     limit: int = RANKED_WELL_LIMIT,
                     map_limit: int = MAP_WELL_LIMIT) -> List[ScoredWell]:
        """Map wells scoring at or above the threshold, best first, capped at `limit`"""
        threshold = validate_threshold(threshold)
        scored = []
        for marker in self.map_wells(map_limit):
            score = self.score(marker)
            if passes_threshold(score, threshold):
                scored.append(ScoredWell(marker, score, True))
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:limit]

    @staticmethod
    def _marker(index: int, well: RawWellRecord) -> WellMarker:
        return WellMarker(
            id=index + 1,
            name=well.operation_name or f"Well {well.state}-{index + 1}",
            latitude=well.latitude,
            longitude=well.longitude,
            temperature=well.corrected_temperature,
            depth_km=well.depth_km,
            state=well.state,
            drilling_start=well.drilling_start,
            drilling_complete=well.drilling_complete,
            field_name=well.field_name,
            formation=well.formation,
            company_name=well.company_name,
            drilling_start_date=well.drilling_start_date,
            drilling_complete_date=well.drilling_complete_date,
        )
