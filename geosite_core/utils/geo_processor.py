"""
Geographic Processing Utilities
Coordinate validation, fixed-point location keys and the heat-flow
region lookup used to join survey records by location
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Tuple
import logging
import math

from geosite_core.config.settings import (
    COORDINATE_KEY_PRECISION, HEAT_FLOW_REGION_COORDINATES
)

logger = logging.getLogger(__name__)


def quantize_degrees(value: float, precision: int = COORDINATE_KEY_PRECISION) -> int:
    """
    Round degrees to `precision` decimals and return them as a fixed-point integer

    Rounding is half away from zero on the exact binary value of the float,
    so 31.96865 and -31.96865 land on symmetric keys.

    Raises:
        ValueError: If value is not a finite number
    """
    if value is None or not math.isfinite(value):
        raise ValueError(f"Cannot quantize non-finite coordinate: {value}")
    step = Decimal(1).scaleb(-precision)
    rounded = Decimal(value).quantize(step, rounding=ROUND_HALF_UP)
    return int(rounded.scaleb(precision))


@dataclass(frozen=True, order=True)
class LocationKey:
    """Quantized (latitude, longitude) pair; records join iff their keys are equal"""
    lat_fixed: int
    lon_fixed: int
    precision: int = COORDINATE_KEY_PRECISION

    @classmethod
    def from_coordinates(cls, latitude: float, longitude: float,
                         precision: int = COORDINATE_KEY_PRECISION) -> 'LocationKey':
        return cls(
            lat_fixed=quantize_degrees(latitude, precision),
            lon_fixed=quantize_degrees(longitude, precision),
            precision=precision,
        )

    @property
    def latitude(self) -> float:
        return self.lat_fixed / 10 ** self.precision

    @property
    def longitude(self) -> float:
        return self.lon_fixed / 10 ** self.precision

    def __str__(self) -> str:
        return f"{self.latitude:.{self.precision}f},{self.longitude:.{self.precision}f}"


class GeoProcessor:
    """Coordinate checks shared by parsers and the fusion engine"""

    @staticmethod
    def is_valid_coordinate(latitude: Optional[float], longitude: Optional[float]) -> bool:
        """True when both values are finite and inside the global lat/lon ranges"""
        if latitude is None or longitude is None:
            return False
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            return False
        return -90 <= latitude <= 90 and -180 <= longitude <= 180

    @staticmethod
    def validate_coordinates(latitude: float, longitude: float) -> None:
        """
        Raises:
            ValueError: If coordinates are missing or outside valid ranges
        """
        if not GeoProcessor.is_valid_coordinate(latitude, longitude):
            raise ValueError(
                f"Invalid coordinates: ({latitude}, {longitude}) "
                f"(latitude must be -90 to 90, longitude -180 to 180)"
            )


class RegionCoordinateTable:
    """
    Representative coordinates for heat-flow region codes

    Heat-flow records carry a region prefix instead of a station position.
    Each region resolves to a single fixed point, so this is an explicit
    approximation and not a per-station location.
    """

    def __init__(self, regions: Optional[Dict[str, Tuple[float, float]]] = None):
        table = HEAT_FLOW_REGION_COORDINATES if regions is None else regions
        self.regions = {code.strip(): coords for code, coords in table.items()}
        for code, (lat, lon) in self.regions.items():
            GeoProcessor.validate_coordinates(lat, lon)

    def resolve(self, region_code: Optional[str]) -> Optional[Tuple[float, float]]:
        """(latitude, longitude) for a region code, or None when the code is unknown"""
        if not region_code:
            return None
        return self.regions.get(region_code.strip())

    def __contains__(self, region_code: str) -> bool:
        return self.resolve(region_code) is not None

    def __len__(self) -> int:
        return len(self.regions)
