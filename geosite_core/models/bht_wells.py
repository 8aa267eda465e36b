"""
BOTTOM-HOLE-TEMPERATURE WELL MODEL
Parses SMU BHT well CSVs and builds the well-only projections:
temperature-vs-depth points, geothermal candidate wells and summary statistics
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

import numpy as np

from geosite_core.utils.core import RawWellRecord, DataValidator, read_csv_table
from geosite_core.utils.diagnostics import DiagnosticSink, resolve_sink
from geosite_core.data_sources import SurveyDataSource, SourceLocator
from geosite_core.exceptions import GeositeError
from geosite_core.config.settings import (
    BHT_COLUMNS, BHT_METADATA_COLUMNS, BHT_SOURCE,
    GEO_MIN_TEMPERATURE_C, GEO_MAX_DEPTH_M, REFERENCE_TEMPERATURE_C,
    METERS_PER_KM
)

logger = logging.getLogger(__name__)

SOURCE_NAME = 'bht'


def parse_bht_csv(text: str, diagnostics: Optional[DiagnosticSink] = None) -> List[RawWellRecord]:
    """
    Parse BHT well CSV text into RawWellRecords

    Every row becomes a record. Unparseable numbers are kept as None so the
    row still contributes its other fields; rows without coordinates are
    filtered out later, at fusion time.
    """
    sink = resolve_sink(diagnostics)
    frame = read_csv_table(text, SOURCE_NAME, BHT_COLUMNS.values(), diagnostics=sink)

    records = []
    for row in frame.to_dict('records'):
        records.append(RawWellRecord(
            latitude=DataValidator.to_float(row[BHT_COLUMNS['latitude']]),
            longitude=DataValidator.to_float(row[BHT_COLUMNS['longitude']]),
            corrected_temperature=DataValidator.to_float(row[BHT_COLUMNS['temperature']]),
            depth=DataValidator.to_float(row[BHT_COLUMNS['depth']]),
            **{col: DataValidator.to_text(row.get(col)) for col in BHT_METADATA_COLUMNS},
        ))

    sink.emit(
        'source_parsed',
        source=SOURCE_NAME,
        rows=len(records),
        missing_coordinates=sum(1 for r in records if not r.has_coordinates),
        missing_temperature=sum(1 for r in records if r.corrected_temperature is None),
    )
    return records


@dataclass
class WellStatistics:
    """Summary of wells at the reference temperature"""
    wells_at_reference_count: int = 0
    mean_depth_at_reference_m: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'wellsAt143CCount': self.wells_at_reference_count,
            'meanDepthAt143C': self.mean_depth_at_reference_m,
        }


@dataclass
class WellDataset:
    """Well-only projections consumed by charts and the well map"""
    records: List[RawWellRecord] = field(default_factory=list)
    temperature_data: List[Dict] = field(default_factory=list)
    geo_wells: List[RawWellRecord] = field(default_factory=list)
    statistics: WellStatistics = field(default_factory=WellStatistics)

    @property
    def geo_data(self) -> List[Dict]:
        return [well.to_geo_point() for well in self.geo_wells]

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_dict(self) -> Dict:
        return {
            'temperatureData': list(self.temperature_data),
            'geoData': self.geo_data,
            'statistics': self.statistics.to_dict(),
        }


class WellDataModel:
    """
    Well-only analysis from BHT records

    - temperature_data: (depth km, temperature) for wells with both values
    - geo_wells: wells with coordinates, hotter than GEO_MIN_TEMPERATURE_C
      and no deeper than GEO_MAX_DEPTH_M
    - statistics: count and mean depth of wells at REFERENCE_TEMPERATURE_C
    """

    def __init__(self,
                 source: Optional[SurveyDataSource] = None,
                 diagnostics: Optional[DiagnosticSink] = None,
                 min_temperature_c: float = GEO_MIN_TEMPERATURE_C,
                 max_depth_m: float = GEO_MAX_DEPTH_M,
                 reference_temperature_c: float = REFERENCE_TEMPERATURE_C):
        self.logger = logging.getLogger(__name__)
        self.source = source or SurveyDataSource()
        self.diagnostics = resolve_sink(diagnostics)
        self.min_temperature_c = min_temperature_c
        self.max_depth_m = max_depth_m
        self.reference_temperature_c = reference_temperature_c

    def load(self, locator: SourceLocator = BHT_SOURCE) -> WellDataset:
        """
        Read and analyze a BHT source

        Never raises for a missing or malformed source: the failure is logged
        and an empty dataset with zeroed statistics is returned.
        """
        try:
            text = self.source.read(locator)
            records = parse_bht_csv(text, self.diagnostics)
        except GeositeError as e:
            self.logger.error(f"Error loading BHT data from {locator}: {e.message}")
            return WellDataset()
        return self.analyze(records)

    def analyze(self, records: List[RawWellRecord]) -> WellDataset:
        dataset = WellDataset(
            records=list(records),
            temperature_data=self._temperature_profile(records),
            geo_wells=[r for r in records if self._is_geothermal_candidate(r)],
            statistics=self._reference_statistics(records),
        )
        self.logger.info(
            f"BHT wells: {len(records)} rows, {len(dataset.temperature_data)} depth profile points, "
            f"{len(dataset.geo_wells)} candidate wells"
        )
        return dataset

    def _temperature_profile(self, records: List[RawWellRecord]) -> List[Dict]:
        # Zero depth or temperature counts as not measured
        return [
            {'depth': r.depth / METERS_PER_KM, 'temperature': r.corrected_temperature}
            for r in records
            if r.depth and r.corrected_temperature
        ]

    def _is_geothermal_candidate(self, record: RawWellRecord) -> bool:
        if not record.has_coordinates:
            return False
        if record.corrected_temperature is None or record.depth is None:
            return False
        return (record.corrected_temperature > self.min_temperature_c
                and record.depth <= self.max_depth_m)

    def _reference_statistics(self, records: List[RawWellRecord]) -> WellStatistics:
        at_reference = [r for r in records
                        if r.corrected_temperature == self.reference_temperature_c]
        depths = [r.depth for r in at_reference if r.depth is not None]
        mean_depth = float(np.mean(depths)) if depths else 0.0
        return WellStatistics(
            wells_at_reference_count=len(at_reference),
            mean_depth_at_reference_m=mean_depth,
        )
