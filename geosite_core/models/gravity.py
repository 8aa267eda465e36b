"""
GRAVITY STATION MODEL
Parses whitespace-delimited gravity station files and summarises
positive Bouguer anomalies
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging
import re

from geosite_core.utils.core import RawGravityStationRecord, DataValidator
from geosite_core.utils.diagnostics import DiagnosticSink, resolve_sink
from geosite_core.data_sources import SurveyDataSource, SourceLocator
from geosite_core.exceptions import GeositeError
from geosite_core.config.settings import (
    GRAVITY_FIELDS, GRAVITY_REQUIRED_FIELDS, GRAVITY_SOURCE,
    POSITIVE_ANOMALY_MIN_MGAL, PERCENTAGE_DECIMALS
)

logger = logging.getLogger(__name__)

SOURCE_NAME = 'gravity'
_WHITESPACE = re.compile(r'\s+')


def parse_gravity_line(line: str) -> RawGravityStationRecord:
    """
    Split one station line into the 8 positional fields

    Missing trailing fields are absent; anything past the eighth field is ignored.
    """
    values = _WHITESPACE.split(line.strip())
    numbers = [DataValidator.to_float(v) for v in values[:len(GRAVITY_FIELDS)]]
    numbers += [None] * (len(GRAVITY_FIELDS) - len(numbers))
    return RawGravityStationRecord(**dict(zip(GRAVITY_FIELDS, numbers)))


def parse_gravity_text(text: str,
                       diagnostics: Optional[DiagnosticSink] = None) -> List[RawGravityStationRecord]:
    """
    Parse a gravity station file into RawGravityStationRecords

    Blank lines are ignored. A line whose longitude, latitude or Bouguer
    anomaly is not a number is dropped and reported; it never fails the parse.
    """
    sink = resolve_sink(diagnostics)
    records = []
    dropped = 0

    for line_number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        record = parse_gravity_line(line)
        missing = [name for name in GRAVITY_REQUIRED_FIELDS if getattr(record, name) is None]
        if missing:
            dropped += 1
            sink.emit('row_dropped', source=SOURCE_NAME, reason='invalid_required_field',
                      line=line_number, fields=missing)
            continue
        records.append(record)

    sink.emit('source_parsed', source=SOURCE_NAME, rows=len(records), dropped=dropped)
    return records


@dataclass
class GravityStatistics:
    total_stations: int = 0
    positive_anomaly_count: int = 0
    positive_anomaly_percentage: float = 0.0

    def to_dict(self) -> Dict:
        return {
            'totalStations': self.total_stations,
            'positiveAnomalyCount': self.positive_anomaly_count,
            'positiveAnomalyPercentage': self.positive_anomaly_percentage,
        }


@dataclass
class GravityDataset:
    all_data: List[RawGravityStationRecord] = field(default_factory=list)
    positive_anomalies: List[RawGravityStationRecord] = field(default_factory=list)
    statistics: GravityStatistics = field(default_factory=GravityStatistics)

    def to_dict(self) -> Dict:
        return {
            'allData': [r.to_dict() for r in self.all_data],
            'positiveAnomalies': [r.to_dict() for r in self.positive_anomalies],
            'statistics': self.statistics.to_dict(),
        }


class GravityDataModel:
    """Gravity-only analysis: all stations plus the positive Bouguer anomalies"""

    def __init__(self,
                 source: Optional[SurveyDataSource] = None,
                 diagnostics: Optional[DiagnosticSink] = None):
        self.logger = logging.getLogger(__name__)
        self.source = source or SurveyDataSource()
        self.diagnostics = resolve_sink(diagnostics)

    def load(self, locator: SourceLocator = GRAVITY_SOURCE) -> GravityDataset:
        """Read and analyze a gravity source; degrades to an empty dataset on failure"""
        try:
            text = self.source.read(locator)
        except GeositeError as e:
            self.logger.error(f"Error loading gravity data from {locator}: {e.message}")
            return GravityDataset()
        return self.analyze(parse_gravity_text(text, self.diagnostics))

    def analyze(self, stations: List[RawGravityStationRecord]) -> GravityDataset:
        positive = [s for s in stations if s.bouguer_anomaly > POSITIVE_ANOMALY_MIN_MGAL]
        percentage = (
            round(len(positive) / len(stations) * 100, PERCENTAGE_DECIMALS) if stations else 0.0
        )
        if positive:
            anomalies = [s.bouguer_anomaly for s in positive]
            self.logger.info(
                f"Positive anomalies: {len(positive)} of {len(stations)} stations "
                f"(range {min(anomalies):.2f} to {max(anomalies):.2f} mGal)"
            )
        return GravityDataset(
            all_data=list(stations),
            positive_anomalies=positive,
            statistics=GravityStatistics(
                total_stations=len(stations),
                positive_anomaly_count=len(positive),
                positive_anomaly_percentage=percentage,
            ),
        )
