"""
Configuration settings for the geosite geothermal suitability platform
Survey-data fusion and site ranking for new geothermal wells

This module contains ONLY configuration constants.
Source locations can be overridden with environment variables:
- GEOSITE_BHT_SOURCE: SMU bottom-hole-temperature well CSV
- GEOSITE_HEAT_FLOW_SOURCE: SMU heat-flow survey CSV
- GEOSITE_GRAVITY_SOURCE: gravity station text file
"""

from pathlib import Path
import os

# Project Root
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = Path(os.getenv('GEOSITE_DATA_DIR', PROJECT_ROOT / 'data'))

# ======================== SOURCE LOCATIONS ========================
# Each source is a local path or an http(s) URL
BHT_SOURCE = os.getenv('GEOSITE_BHT_SOURCE', str(DATA_DIR / 'SMU' / 'BHT_Data.csv'))
HEAT_FLOW_SOURCE = os.getenv('GEOSITE_HEAT_FLOW_SOURCE',
                             str(DATA_DIR / 'temperature' / 'SMU_HeatFlow.csv'))
GRAVITY_SOURCE = os.getenv('GEOSITE_GRAVITY_SOURCE',
                           str(DATA_DIR / 'gravity' / 'filter_column.txt'))

HTTP_TIMEOUT_SECONDS = (
    float(os.getenv('GEOSITE_HTTP_CONNECT_TIMEOUT', '10')),
    float(os.getenv('GEOSITE_HTTP_READ_TIMEOUT', '60')),
)  # (connect_timeout, read_timeout)
SOURCE_ENCODING = 'utf-8'
SOURCE_FETCH_WORKERS = 3                    # One worker per survey source

# ======================== SOURCE FORMATS ========================

# BHT well CSV (header row required)
BHT_COLUMNS = {
    'latitude': 'latitude',
    'longitude': 'longitude',
    'temperature': 'bhtcorrected_temp',     # Corrected bottom-hole temperature, degC
    'depth': 'depth',                       # Meters
}
BHT_METADATA_COLUMNS = [
    'state', 'operation_name', 'drilling_start', 'drilling_complete',
    'field_name', 'formation', 'company_name',
]

# Heat-flow CSV (header row required)
HEAT_FLOW_ID_COLUMN = 'ID'                  # Format: REGIONCODE-serial
HEAT_FLOW_VALUE_COLUMN = 'CO HF (mW/m2)'    # Corrected heat flow, mW/m2
HEAT_FLOW_ID_SEPARATOR = '-'

# Gravity station text file (no header, whitespace separated)
GRAVITY_FIELDS = [
    'longitude',
    'latitude',
    'station_elevation',
    'observed_gravity',
    'inner_terrain_correction',
    'outer_terrain_correction',
    'free_air_anomaly',
    'bouguer_anomaly',                      # mGal
]
GRAVITY_REQUIRED_FIELDS = ('longitude', 'latitude', 'bouguer_anomaly')

# ======================== LOCATION FUSION ========================

# Coordinates are quantized to 4 decimal places (~11 m) before joining
COORDINATE_KEY_PRECISION = 4

# HEAT-FLOW REGION COORDINATES
# The heat-flow table carries no station coordinates. Every record is placed at
# one representative point for the region code in its ID. This is a coarse
# approximation: all stations of a region collapse onto a single location and
# the last record merged wins that location's heat-flow value.
HEAT_FLOW_REGION_COORDINATES = {
    'TX': (31.9686, -99.9018),              # Texas
    'LA': (31.2448, -92.1450),              # Louisiana
    'AK': (64.8561, -147.8028),             # Alaska (Fairbanks)
}

# Measurement dimensions, in merge order
DIMENSIONS = ('temperature', 'heat_flow', 'gravity')

# Completeness: number of present dimensions required
PARTIAL_COMPLETENESS = 2                    # Working set for statistics and scoring
FULL_COMPLETENESS = 3                       # All three surveys present

# ======================== STATISTICS ========================

# How absent measurements enter the per-dimension min/max reduction:
# 'exclude'   - absent values are ignored
# 'zero_fill' - absent values count as 0, pulling ranges towards 0
STATS_MISSING_VALUE_POLICY = os.getenv('GEOSITE_STATS_POLICY', 'exclude')
STATS_MISSING_VALUE_POLICIES = ('exclude', 'zero_fill')

# ======================== SCORING ========================

DEFAULT_CRITERIA_WEIGHTS = {
    'temperature': 0.5,
    'heat_flow': 0.3,
    'gravity': 0.2,
}
WEIGHT_BOUNDS = (0.0, 1.0)
DEFAULT_MATCH_THRESHOLD = 0.8
THRESHOLD_BOUNDS = (0.0, 1.0)

# ======================== WELL-ONLY ANALYSIS ========================

GEO_MIN_TEMPERATURE_C = 60.0                # Wells must be hotter than this
GEO_MAX_DEPTH_M = 6000.0                    # ...and no deeper than 6 km
REFERENCE_TEMPERATURE_C = 143.0             # Wells at exactly this temperature are summarised
METERS_PER_KM = 1000.0

MAP_WELL_LIMIT = 1000                       # Hottest wells shown on the map
RANKED_WELL_LIMIT = 50                      # Top wells after threshold filtering

# ======================== GRAVITY-ONLY ANALYSIS ========================

POSITIVE_ANOMALY_MIN_MGAL = 0.0             # Bouguer anomaly strictly above this
PERCENTAGE_DECIMALS = 2
