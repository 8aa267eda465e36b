"""
Core utility functions and record types for the geosite platform
"""

import json
from io import StringIO
import math
import pandas as pd
from pathlib import Path
from typing import Dict, List, Optional, Any, Iterable
from dataclasses import dataclass
from datetime import datetime
from dateutil import parser as date_parser
import logging

from geosite_core.config.settings import DIMENSIONS, METERS_PER_KM
from geosite_core.exceptions import SourceFormatError

logger = logging.getLogger(__name__)

# Output-contract names for each measurement dimension
DIMENSION_LABELS = {
    'temperature': 'temperature',
    'heat_flow': 'heatFlow',
    'gravity': 'gravity',
}


class DataValidator:
    """Permissive coercion of raw survey cells"""

    @staticmethod
    def to_float(value: Any) -> Optional[float]:
        """
        Convert anything float() accepts to a finite float

        Empty, non-numeric, NaN and infinite values are returned as None
        instead of raising.
        """
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number):
            return None
        return number

    @staticmethod
    def to_text(value: Any) -> str:
        """Stripped string, or '' for missing cells"""
        if value is None:
            return ''
        if isinstance(value, float) and math.isnan(value):
            return ''
        return str(value).strip()

    @staticmethod
    def to_date(value: str) -> Optional[datetime]:
        """Lenient date parsing for drilling dates; None when unparseable"""
        if not value:
            return None
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            return None


@dataclass(frozen=True)
class RawWellRecord:
    """One drilled-well bottom-hole-temperature measurement"""
    latitude: Optional[float]
    longitude: Optional[float]
    corrected_temperature: Optional[float]  # degC
    depth: Optional[float]  # meters
    state: str = ''
    operation_name: str = ''
    field_name: str = ''
    formation: str = ''
    drilling_start: str = ''
    drilling_complete: str = ''
    company_name: str = ''

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def depth_km(self) -> Optional[float]:
        return None if self.depth is None else self.depth / METERS_PER_KM

    @property
    def drilling_start_date(self) -> Optional[datetime]:
        return DataValidator.to_date(self.drilling_start)

    @property
    def drilling_complete_date(self) -> Optional[datetime]:
        return DataValidator.to_date(self.drilling_complete)

    def to_geo_point(self) -> Dict:
        """Map/table projection of a well; depth in km"""
        return {
            'longitude': self.longitude,
            'latitude': self.latitude,
            'temperature': self.corrected_temperature,
            'depth': self.depth_km,
            'state': self.state,
            'operation_name': self.operation_name,
            'drilling_start': self.drilling_start,
            'drilling_complete': self.drilling_complete,
            'field_name': self.field_name,
            'formation': self.formation,
            'company_name': self.company_name,
        }


@dataclass(frozen=True)
class RawHeatFlowRecord:
    """One heat-flow survey entry; the ID encodes a region code, not a position"""
    identifier: str
    heat_flow: Optional[float]  # mW/m2
    separator: str = '-'

    @property
    def region_code(self) -> str:
        return self.identifier.split(self.separator)[0].strip()


@dataclass(frozen=True)
class RawGravityStationRecord:
    """One gravity survey station (anomalies in mGal)"""
    longitude: Optional[float]
    latitude: Optional[float]
    station_elevation: Optional[float] = None
    observed_gravity: Optional[float] = None
    inner_terrain_correction: Optional[float] = None
    outer_terrain_correction: Optional[float] = None
    free_air_anomaly: Optional[float] = None
    bouguer_anomaly: Optional[float] = None

    def to_dict(self) -> Dict:
        return {
            'longitude': self.longitude,
            'latitude': self.latitude,
            'stationElevation': self.station_elevation,
            'observedGravity': self.observed_gravity,
            'innerTerrainCorrection': self.inner_terrain_correction,
            'outerTerrainCorrection': self.outer_terrain_correction,
            'freeAirGravityAnomaly': self.free_air_anomaly,
            'bouguerGravityAnomaly': self.bouguer_anomaly,
        }


@dataclass(frozen=True)
class FusedLocation:
    """One geographic point with whichever survey measurements reached its key"""
    latitude: float
    longitude: float
    temperature: Optional[float] = None
    heat_flow: Optional[float] = None
    gravity: Optional[float] = None

    def value(self, dimension: str) -> Optional[float]:
        if dimension not in DIMENSIONS:
            raise KeyError(f"Unknown dimension: {dimension}")
        return getattr(self, dimension)

    def has(self, dimension: str) -> bool:
        return self.value(dimension) is not None

    def count_present(self) -> int:
        return sum(1 for d in DIMENSIONS if getattr(self, d) is not None)

    def to_dict(self) -> Dict:
        out = {'latitude': self.latitude, 'longitude': self.longitude}
        for dimension in DIMENSIONS:
            value = getattr(self, dimension)
            if value is not None:
                out[DIMENSION_LABELS[dimension]] = value
        return out


def read_csv_table(text: str, source: str, required_columns: Iterable[str],
                   diagnostics=None) -> pd.DataFrame:
    """
    Parse header-first CSV text with every cell kept as text

    Header names are stripped of surrounding whitespace. Blank lines are
    skipped; lines with more fields than the header are dropped and reported.

    Raises:
        SourceFormatError: If the text is not CSV or a required column is missing
    """

    def _drop_bad_line(fields: List[str]) -> None:
        if diagnostics is not None:
            diagnostics.emit('row_dropped', source=source, reason='too_many_fields',
                             field_count=len(fields))
        return None

    try:
        frame = pd.read_csv(
            StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine='python',
            on_bad_lines=_drop_bad_line,
        )
    except pd.errors.EmptyDataError as e:
        raise SourceFormatError(source, f"{source} source is empty: {e}")
    except pd.errors.ParserError as e:
        raise SourceFormatError(source, f"{source} source is not valid CSV: {e}")

    frame.columns = [str(c).strip() for c in frame.columns]
    missing = [c for c in required_columns if c not in frame.columns]
    if missing:
        raise SourceFormatError(
            source, f"{source} source is missing required columns: {missing}",
            missing_columns=missing,
        )
    return frame


def select_by_completeness(locations: Iterable[FusedLocation], k: int) -> List[FusedLocation]:
    """Locations with at least `k` of the measurement dimensions present"""
    if not 1 <= k <= len(DIMENSIONS):
        raise ValueError(f"Completeness k={k} outside 1..{len(DIMENSIONS)}")
    return [loc for loc in locations if loc.count_present() >= k]


class ReportExporter:
    """Export ranked results for the presentation layer"""

    @staticmethod
    def _rows(items: Iterable[Any]) -> List[Dict]:
        return [item.to_dict() if hasattr(item, 'to_dict') else dict(item) for item in items]

    @staticmethod
    def to_json(payload: Any, output_path: Path) -> None:
        """Export any result object (or plain data) to JSON"""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        data = payload.to_dict() if hasattr(payload, 'to_dict') else payload

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, default=str)

        logger.info(f"JSON report exported to {output_path}")

    @staticmethod
    def to_csv(items: Iterable[Any], output_path: Path) -> None:
        """Export scored locations or wells to CSV, one row per item"""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        pd.DataFrame(ReportExporter._rows(items)).to_csv(output_path, index=False)
        logger.info(f"CSV report exported to {output_path}")

    @staticmethod
    def to_geojson(items: Iterable[Any], output_path: Path) -> None:
        """Export point features; every row must carry latitude and longitude"""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        features = []
        for row in ReportExporter._rows(items):
            properties = {k: v for k, v in row.items() if k not in ('latitude', 'longitude')}
            features.append({
                "type": "Feature",
                "geometry": {
                    "type": "Point",
                    "coordinates": [row['longitude'], row['latitude']],
                },
                "properties": properties,
            })

        geojson = {
            "type": "FeatureCollection",
            "features": features
        }

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(geojson, f, indent=2, default=str)

        logger.info(f"GeoJSON exported to {output_path}")


def get_timestamp() -> str:
    """Get current timestamp in ISO format"""
    return datetime.now().isoformat()
