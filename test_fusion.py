"""
Location fusion tests: coordinate keys, merging and completeness
"""

import pytest

from geosite_core.data_integration import (
    LocationFusionEngine, merge_records, finalize_locations,
    extract_well_temperature, extract_bouguer_anomaly, heat_flow_extractor
)
from geosite_core.models.bht_wells import parse_bht_csv
from geosite_core.models.heat_flow import parse_heat_flow_csv
from geosite_core.models.gravity import parse_gravity_text
from geosite_core.utils.core import (
    RawWellRecord, RawHeatFlowRecord, RawGravityStationRecord, FusedLocation,
    select_by_completeness
)
from geosite_core.utils.geo_processor import (
    LocationKey, GeoProcessor, RegionCoordinateTable, quantize_degrees
)


def well(lat, lon, temperature, depth=2000.0):
    return RawWellRecord(latitude=lat, longitude=lon, corrected_temperature=temperature, depth=depth)


def station(lon, lat, bouguer):
    return RawGravityStationRecord(longitude=lon, latitude=lat, bouguer_anomaly=bouguer)


class TestLocationKey:

    def test_nearby_coordinates_share_a_key(self):
        assert (LocationKey.from_coordinates(31.0, -99.0)
                == LocationKey.from_coordinates(31.00004, -99.00004))

    def test_distinct_fourth_decimal_gives_distinct_keys(self):
        assert (LocationKey.from_coordinates(31.0, -99.0)
                != LocationKey.from_coordinates(31.0001, -99.0))

    def test_key_round_trips_to_quantized_degrees(self):
        key = LocationKey.from_coordinates(31.9686, -99.9018)

        assert key.latitude == 31.9686
        assert key.longitude == -99.9018
        assert str(key) == "31.9686,-99.9018"

    def test_non_finite_coordinates_are_rejected(self):
        with pytest.raises(ValueError):
            quantize_degrees(float('nan'), 4)

    @pytest.mark.parametrize("lat, lon, valid", [
        (31.0, -99.0, True),
        (90.0, 180.0, True),
        (91.0, 0.0, False),
        (0.0, -180.5, False),
        (None, 10.0, False),
        (float('inf'), 10.0, False),
    ])
    def test_coordinate_validity(self, lat, lon, valid):
        assert GeoProcessor.is_valid_coordinate(lat, lon) is valid


class TestRegionTable:

    def test_known_regions_resolve(self):
        table = RegionCoordinateTable()

        assert table.resolve('TX') == (31.9686, -99.9018)
        assert table.resolve('LA') == (31.2448, -92.1450)
        assert table.resolve('AK') == (64.8561, -147.8028)

    def test_unknown_region_is_none(self):
        table = RegionCoordinateTable()

        assert table.resolve('ZZ') is None
        assert 'ZZ' not in table

    def test_custom_table(self):
        table = RegionCoordinateTable({'NV': (39.3, -116.6)})

        assert len(table) == 1
        assert table.resolve('NV') == (39.3, -116.6)
        assert table.resolve('TX') is None


class TestExtractors:

    def test_well_without_temperature_or_coordinates_is_skipped(self):
        assert extract_well_temperature(well(31.0, -99.0, None)) is None
        assert extract_well_temperature(well(None, -99.0, 120.0)) is None
        assert extract_well_temperature(well(95.0, -99.0, 120.0)) is None
        assert extract_well_temperature(well(31.0, -99.0, 0.0)) == (31.0, -99.0, 0.0)

    def test_gravity_station_uses_bouguer_anomaly(self):
        assert extract_bouguer_anomaly(station(-99.0, 31.0, -4.5)) == (31.0, -99.0, -4.5)
        assert extract_bouguer_anomaly(station(-99.0, 31.0, None)) is None

    def test_heat_flow_is_placed_at_region_point(self):
        extract = heat_flow_extractor(RegionCoordinateTable())

        assert extract(RawHeatFlowRecord('TX-001', 55.5)) == (31.9686, -99.9018, 55.5)
        assert extract(RawHeatFlowRecord('ZZ-001', 70.0)) is None
        assert extract(RawHeatFlowRecord('LA-004', None)) is None


class TestMerge:

    def test_last_writer_wins_within_a_dimension(self):
        location_map = {}
        counts = merge_records(location_map, [well(31.0, -99.0, 100.0), well(31.0, -99.0, 150.0)],
                               extract_well_temperature, 'temperature')

        assert counts.valid == 2
        assert finalize_locations(location_map) == [FusedLocation(31.0, -99.0, temperature=150.0)]

    def test_unknown_dimension_is_rejected(self):
        with pytest.raises(ValueError):
            merge_records({}, [], extract_well_temperature, 'porosity')

    def test_merge_order_does_not_change_the_location_set(self):
        wells = [well(31.0, -99.0, 150.0), well(32.0, -98.0, 120.0)]
        stations = [station(-99.0, 31.0, 5.0), station(-97.0, 33.0, 1.0)]

        forward, backward = {}, {}
        merge_records(forward, wells, extract_well_temperature, 'temperature')
        merge_records(forward, stations, extract_bouguer_anomaly, 'gravity')
        merge_records(backward, stations, extract_bouguer_anomaly, 'gravity')
        merge_records(backward, wells, extract_well_temperature, 'temperature')

        assert set(finalize_locations(forward)) == set(finalize_locations(backward))


class TestSelectByCompleteness:

    def test_threshold_counts_present_dimensions(self):
        locations = [
            FusedLocation(1.0, 1.0, temperature=100.0),
            FusedLocation(2.0, 2.0, temperature=100.0, gravity=0.0),
            FusedLocation(3.0, 3.0, temperature=100.0, heat_flow=50.0, gravity=1.0),
        ]

        assert len(select_by_completeness(locations, 1)) == 3
        assert len(select_by_completeness(locations, 2)) == 2
        assert len(select_by_completeness(locations, 3)) == 1

    @pytest.mark.parametrize("k", [0, 4])
    def test_k_outside_dimension_count_is_rejected(self, k):
        with pytest.raises(ValueError):
            select_by_completeness([], k)


class TestLocationFusionEngine:

    def test_wells_and_gravity_fuse_on_shared_keys(self, bht_csv_text, gravity_text, sink):
        engine = LocationFusionEngine(diagnostics=sink)
        result = engine.fuse(parse_bht_csv(bht_csv_text), [], parse_gravity_text(gravity_text))

        assert result.locations == [
            FusedLocation(31.0, -99.0, temperature=150.0, gravity=5.0),
            FusedLocation(32.0, -98.0, temperature=120.0, gravity=-2.0),
        ]
        assert result.complete == []
        assert result.stats.temperature.to_dict() == {'min': 120.0, 'max': 150.0}
        assert result.stats.gravity.to_dict() == {'min': -2.0, 'max': 5.0}
        assert result.stats.heat_flow.is_degenerate

    def test_heat_flow_joins_only_at_region_point(self, heat_flow_csv_text, sink):
        heat_flow = parse_heat_flow_csv(heat_flow_csv_text)
        wells = [well(31.9686, -99.9018, 140.0), well(31.0, -99.0, 90.0)]

        result = LocationFusionEngine(diagnostics=sink).fuse(wells, heat_flow, [])

        assert result.locations == [
            FusedLocation(31.9686, -99.9018, temperature=140.0, heat_flow=55.5)
        ]
        assert result.source_counts['heat_flow'].to_dict() == {'valid': 1, 'skipped': 2}
        assert sink.count('source_merged', source='heat_flow') == 1

    def test_isolated_heat_flow_record_stays_below_completeness(self):
        result = LocationFusionEngine().fuse([], [RawHeatFlowRecord('TX-001', 55.5)], [])

        assert result.all_locations == [FusedLocation(31.9686, -99.9018, heat_flow=55.5)]
        assert result.is_empty

    def test_fusion_is_repeatable(self, bht_csv_text, heat_flow_csv_text, gravity_text):
        wells = parse_bht_csv(bht_csv_text)
        heat_flow = parse_heat_flow_csv(heat_flow_csv_text)
        gravity = parse_gravity_text(gravity_text)
        engine = LocationFusionEngine()

        first = engine.fuse(wells, heat_flow, gravity)
        second = engine.fuse(wells, heat_flow, gravity)

        assert first.all_locations == second.all_locations
        assert first.to_dict() == second.to_dict()

    def test_fused_event_reports_discarded_locations(self, sink):
        wells = [well(10.0, 10.0, 100.0), well(20.0, 20.0, 110.0)]
        gravity = [station(10.0, 10.0, 2.0)]

        LocationFusionEngine(diagnostics=sink).fuse(wells, [], gravity)

        fused = sink.of_type('locations_fused')[0]
        assert fused.fields == {'total': 2, 'partial': 1, 'complete': 0, 'discarded': 1}

    def test_output_uses_camel_case_and_omits_absent_dimensions(self):
        wells = [well(31.9686, -99.9018, 140.0)]
        result = LocationFusionEngine().fuse(wells, [RawHeatFlowRecord('TX-9', 60.0)], [])

        payload = result.to_dict()
        assert payload['locations'] == [
            {'latitude': 31.9686, 'longitude': -99.9018, 'temperature': 140.0, 'heatFlow': 60.0}
        ]
        assert set(payload['stats']) == {'temperature', 'heatFlow', 'gravity'}
