"""
Parser tests: BHT wells, heat flow and gravity stations
"""

import pytest

from geosite_core.models.bht_wells import parse_bht_csv
from geosite_core.models.heat_flow import parse_heat_flow_csv
from geosite_core.models.gravity import parse_gravity_text, parse_gravity_line
from geosite_core.utils.core import DataValidator
from geosite_core.exceptions import SourceFormatError


class TestDataValidator:

    @pytest.mark.parametrize("raw, expected", [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("-3e2", -300.0),
        (42, 42.0),
    ])
    def test_numeric_values_convert(self, raw, expected):
        assert DataValidator.to_float(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", None, "NaN", "inf", float('nan')])
    def test_non_numeric_values_are_absent(self, raw):
        assert DataValidator.to_float(raw) is None

    def test_to_text_handles_missing(self):
        assert DataValidator.to_text(None) == ''
        assert DataValidator.to_text(float('nan')) == ''
        assert DataValidator.to_text('  Acme ') == 'Acme'


class TestBhtParser:

    def test_parses_every_row_with_trimmed_headers(self, bht_csv_text):
        records = parse_bht_csv(bht_csv_text)

        assert len(records) == 3
        first = records[0]
        assert first.latitude == 31.0
        assert first.longitude == -99.0
        assert first.corrected_temperature == 100.0
        assert first.depth == 2500.0
        assert first.operation_name == 'Alpha 1'
        assert first.company_name == 'Acme'
        assert first.depth_km == 2.5

    def test_invalid_numbers_become_absent_not_dropped(self, sink):
        text = (
            "latitude,longitude,bhtcorrected_temp,depth\n"
            "31.5,-97.2,hot,1200\n"
            ",,88,900\n"
        )
        records = parse_bht_csv(text, sink)

        assert len(records) == 2
        assert records[0].corrected_temperature is None
        assert records[0].depth == 1200.0
        assert not records[1].has_coordinates
        assert records[1].corrected_temperature == 88.0
        assert records[1].state == ''
        parsed = sink.of_type('source_parsed', source='bht')[0]
        assert parsed.fields['missing_coordinates'] == 1
        assert parsed.fields['missing_temperature'] == 1

    def test_drilling_dates_parse_leniently(self, bht_csv_text):
        records = parse_bht_csv(bht_csv_text)

        assert records[0].drilling_start_date.year == 1985
        assert records[2].drilling_start_date is None

    def test_missing_key_column_is_a_format_error(self):
        with pytest.raises(SourceFormatError) as excinfo:
            parse_bht_csv("latitude,longitude,depth\n31,-99,1000\n")
        assert excinfo.value.missing_columns == ['bhtcorrected_temp']

    def test_empty_text_is_a_format_error(self):
        with pytest.raises(SourceFormatError):
            parse_bht_csv("")


class TestHeatFlowParser:

    def test_skips_rows_without_id_or_value(self, heat_flow_csv_text, sink):
        records = parse_heat_flow_csv(heat_flow_csv_text, sink)

        assert [r.identifier for r in records] == ['TX-001', 'ZZ-001', 'AK-003']
        assert sink.count('row_dropped', source='heat_flow', reason='empty_id') == 1
        assert sink.count('row_dropped', source='heat_flow', reason='missing_heat_flow') == 1

    def test_region_code_and_value(self, heat_flow_csv_text):
        records = parse_heat_flow_csv(heat_flow_csv_text)

        assert records[0].region_code == 'TX'
        assert records[0].heat_flow == 55.5
        assert records[2].region_code == 'AK'
        assert records[2].heat_flow is None


class TestGravityParser:

    def test_parses_whitespace_columns(self, gravity_text):
        records = parse_gravity_text(gravity_text)

        assert len(records) == 2
        station = records[1]
        assert station.longitude == -98.0
        assert station.latitude == 32.0
        assert station.station_elevation == 98.4
        assert station.free_air_anomaly == 3.1
        assert station.bouguer_anomaly == -2.0

    def test_drops_lines_with_invalid_required_fields(self, sink):
        text = "\n".join([
            "-99.0 abc 150 979312 0.1 0.8 12.4 5.0",
            "-99.0 31.0 150 979312 0.1 0.8 12.4",
            "-99.0 31.0 150 979312 0.1 0.8 12.4 NaN",
            "-97.5 30.5 xx 979312 0.1 0.8 12.4 1.5 extra",
        ])
        records = parse_gravity_text(text, sink)

        assert len(records) == 1
        assert records[0].bouguer_anomaly == 1.5
        assert records[0].station_elevation is None
        dropped = sink.of_type('row_dropped', source='gravity')
        assert [e.fields['line'] for e in dropped] == [1, 2, 3]
        assert dropped[0].fields['fields'] == ['latitude']

    def test_short_line_leaves_trailing_fields_absent(self):
        station = parse_gravity_line("-99.0 31.0 150")

        assert station.station_elevation == 150.0
        assert station.observed_gravity is None
        assert station.bouguer_anomaly is None

    def test_blank_text_yields_no_records(self):
        assert parse_gravity_text("\n   \n") == []
