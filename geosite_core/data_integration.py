"""
DATA INTEGRATION LAYER
Fuses BHT well, heat-flow and gravity records into one set of locations

Records join on a LocationKey: coordinates quantized to
COORDINATE_KEY_PRECISION decimals. There is no proximity matching; two
records share a location only when their keys are identical. Each source
contributes exactly one dimension, so merge order only fixes the insertion
order of the output.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple
import logging

from geosite_core.utils.core import (
    RawWellRecord, RawHeatFlowRecord, RawGravityStationRecord, FusedLocation,
    select_by_completeness, get_timestamp
)
from geosite_core.utils.geo_processor import GeoProcessor, LocationKey, RegionCoordinateTable
from geosite_core.utils.diagnostics import DiagnosticSink, resolve_sink
from geosite_core.models.statistics import DimensionStats, compute_stats
from geosite_core.config.settings import (
    COORDINATE_KEY_PRECISION, DIMENSIONS, PARTIAL_COMPLETENESS, FULL_COMPLETENESS
)

logger = logging.getLogger(__name__)

# (latitude, longitude, value) for one record, or None to skip it
Measurement = Optional[Tuple[float, float, float]]
Extractor = Callable[[Any], Measurement]
LocationMap = Dict[LocationKey, Dict[str, float]]


def extract_well_temperature(record: RawWellRecord) -> Measurement:
    if not GeoProcessor.is_valid_coordinate(record.latitude, record.longitude):
        return None
    if record.corrected_temperature is None:
        return None
    return record.latitude, record.longitude, record.corrected_temperature


def extract_bouguer_anomaly(record: RawGravityStationRecord) -> Measurement:
    if not GeoProcessor.is_valid_coordinate(record.latitude, record.longitude):
        return None
    if record.bouguer_anomaly is None:
        return None
    return record.latitude, record.longitude, record.bouguer_anomaly


def heat_flow_extractor(region_table: RegionCoordinateTable) -> Extractor:
    """Extractor placing each heat-flow record at its region's representative point"""

    def extract(record: RawHeatFlowRecord) -> Measurement:
        coordinates = region_table.resolve(record.region_code)
        if coordinates is None or record.heat_flow is None:
            return None
        latitude, longitude = coordinates
        return latitude, longitude, record.heat_flow

    return extract


@dataclass
class MergeCounts:
    valid: int = 0
    skipped: int = 0

    def to_dict(self) -> Dict:
        return {'valid': self.valid, 'skipped': self.skipped}


def merge_records(location_map: LocationMap,
                  records: Iterable[Any],
                  extractor: Extractor,
                  dimension: str,
                  precision: int = COORDINATE_KEY_PRECISION) -> MergeCounts:
    """
    Merge one source's records into `location_map` in place

    A new key gets a fresh entry holding only `dimension`; an existing key has
    `dimension` set on it (last writer wins). Records the extractor rejects
    are skipped.
    """
    if dimension not in DIMENSIONS:
        raise ValueError(f"Unknown dimension: {dimension}")

    counts = MergeCounts()
    for record in records:
        measurement = extractor(record)
        if measurement is None:
            counts.skipped += 1
            continue
        latitude, longitude, value = measurement
        key = LocationKey.from_coordinates(latitude, longitude, precision)
        location_map.setdefault(key, {})[dimension] = value
        counts.valid += 1
    return counts


def finalize_locations(location_map: LocationMap) -> List[FusedLocation]:
    """Freeze the merged map into FusedLocations, in key insertion order"""
    return [
        FusedLocation(latitude=key.latitude, longitude=key.longitude, **values)
        for key, values in location_map.items()
    ]


@dataclass
class FusionResult:
    """Output of fusion + statistics"""
    all_locations: List[FusedLocation]
    locations: List[FusedLocation]
    complete: List[FusedLocation]
    stats: DimensionStats
    source_counts: Dict[str, MergeCounts] = field(default_factory=dict)
    generated_at: str = field(default_factory=get_timestamp)

    @property
    def is_empty(self) -> bool:
        return not self.locations

    def to_dict(self) -> Dict:
        return {
            'locations': [loc.to_dict() for loc in self.locations],
            'stats': self.stats.to_dict(),
        }


class LocationFusionEngine:
    """
    Builds fused locations from the three survey sources

    Merge order is BHT, then heat flow, then gravity. After merging, the
    working set is every location with at least `completeness` dimensions
    present; the complete set (all dimensions) is reported alongside it.
    """

    def __init__(self,
                 precision: int = COORDINATE_KEY_PRECISION,
                 region_table: Optional[RegionCoordinateTable] = None,
                 diagnostics: Optional[DiagnosticSink] = None):
        self.logger = logging.getLogger(__name__)
        self.precision = precision
        self.region_table = region_table or RegionCoordinateTable()
        self.diagnostics = resolve_sink(diagnostics)
        self.reset()

    def reset(self) -> None:
        self._location_map: LocationMap = {}
        self._source_counts: Dict[str, MergeCounts] = {}

    def merge(self, records: Iterable[Any], extractor: Extractor,
              dimension: str, source: str) -> MergeCounts:
        counts = merge_records(self._location_map, records, extractor, dimension, self.precision)
        self._source_counts[source] = counts
        self.diagnostics.emit('source_merged', source=source, dimension=dimension,
                              valid=counts.valid, skipped=counts.skipped,
                              locations=len(self._location_map))
        return counts

    def merge_wells(self, records: Iterable[RawWellRecord]) -> MergeCounts:
        return self.merge(records, extract_well_temperature, 'temperature', 'bht')

    def merge_heat_flow(self, records: Iterable[RawHeatFlowRecord]) -> MergeCounts:
        return self.merge(records, heat_flow_extractor(self.region_table), 'heat_flow', 'heat_flow')

    def merge_gravity(self, records: Iterable[RawGravityStationRecord]) -> MergeCounts:
        return self.merge(records, extract_bouguer_anomaly, 'gravity', 'gravity')

    def finalize(self) -> List[FusedLocation]:
        return finalize_locations(self._location_map)

    def fuse(self,
             wells: Iterable[RawWellRecord],
             heat_flow: Iterable[RawHeatFlowRecord],
             gravity: Iterable[RawGravityStationRecord],
             completeness: int = PARTIAL_COMPLETENESS,
             missing_policy: Optional[str] = None) -> FusionResult:
        """
        Merge all three sources from scratch and compute statistics

        Args:
            wells, heat_flow, gravity: Parsed records of each source
            completeness: Minimum present dimensions for the working set
            missing_policy: Statistics policy, see models.statistics
        """
        self.reset()
        self.merge_wells(wells)
        self.merge_heat_flow(heat_flow)
        self.merge_gravity(gravity)

        all_locations = self.finalize()
        working = select_by_completeness(all_locations, completeness)
        complete = select_by_completeness(all_locations, FULL_COMPLETENESS)
        stats = compute_stats(working, missing_policy)

        self.diagnostics.emit('locations_fused', total=len(all_locations),
                              partial=len(working), complete=len(complete),
                              discarded=len(all_locations) - len(working))
        self.logger.info(
            f"Fused {len(all_locations)} locations: {len(working)} with >= {completeness} "
            f"measurements, {len(complete)} complete"
        )

        return FusionResult(
            all_locations=all_locations,
            locations=working,
            complete=complete,
            stats=stats,
            source_counts=dict(self._source_counts),
        )
