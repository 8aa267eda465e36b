"""
Shared survey fixtures for the geosite tests
"""

import pytest

from geosite_core.utils.diagnostics import CollectingDiagnosticSink

BHT_HEADER = (
    "latitude, longitude ,bhtcorrected_temp,depth,state,operation_name,"
    "drilling_start,drilling_complete,field_name,formation,company_name"
)


@pytest.fixture
def bht_csv_text():
    # Two rows share a coordinate; the later one must win
    return "\n".join([
        BHT_HEADER,
        "31.0,-99.0,100,2500,TX,Alpha 1,1985-03-01,1985-06-01,Field A,Wolfcamp,Acme",
        "31.0,-99.0,150,3200,TX,,1990-01-15,1990-04-20,Field A,Wolfcamp,Acme",
        "32.0,-98.0,120,4100,TX,Bravo 2,,,Field B,Austin Chalk,Beta",
        "",
    ])


@pytest.fixture
def heat_flow_csv_text():
    return "\n".join([
        "ID , CO HF (mW/m2) ",
        "TX-001,55.5",
        "ZZ-001,70",
        ",40",
        "LA-002,",
        "AK-003,abc",
        "",
    ])


@pytest.fixture
def gravity_text():
    return "\n".join([
        "-99.0 31.0 150.2 979312.1 0.10 0.85 12.4 5.0",
        "",
        "  -98.0\t32.0   98.4 979401.7 0.05 0.60 3.1 -2.0  ",
        "",
    ])


@pytest.fixture
def sink():
    return CollectingDiagnosticSink()


@pytest.fixture
def source_files(tmp_path, bht_csv_text, heat_flow_csv_text, gravity_text):
    paths = {
        'bht': tmp_path / 'bht.csv',
        'heat_flow': tmp_path / 'heat_flow.csv',
        'gravity': tmp_path / 'gravity.txt',
    }
    paths['bht'].write_text(bht_csv_text, encoding='utf-8')
    paths['heat_flow'].write_text(heat_flow_csv_text, encoding='utf-8')
    paths['gravity'].write_text(gravity_text, encoding='utf-8')
    return {name: str(path) for name, path in paths.items()}
