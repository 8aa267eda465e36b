"""
HEAT-FLOW SURVEY MODEL
Parses SMU heat-flow CSVs. Records carry a region-coded ID rather than
station coordinates; positions are assigned at fusion time.
"""

from typing import List, Optional
import logging

from geosite_core.utils.core import RawHeatFlowRecord, DataValidator, read_csv_table
from geosite_core.utils.diagnostics import DiagnosticSink, resolve_sink
from geosite_core.config.settings import (
    HEAT_FLOW_ID_COLUMN, HEAT_FLOW_VALUE_COLUMN, HEAT_FLOW_ID_SEPARATOR
)

logger = logging.getLogger(__name__)

SOURCE_NAME = 'heat_flow'


def parse_heat_flow_csv(text: str,
                        diagnostics: Optional[DiagnosticSink] = None) -> List[RawHeatFlowRecord]:
    """
    Parse heat-flow CSV text into RawHeatFlowRecords

    Rows with an empty ID or an empty heat-flow cell are skipped. A heat-flow
    cell that is present but not numeric yields a record with heat_flow None.
    """
    sink = resolve_sink(diagnostics)
    frame = read_csv_table(
        text, SOURCE_NAME, [HEAT_FLOW_ID_COLUMN, HEAT_FLOW_VALUE_COLUMN], diagnostics=sink
    )

    records = []
    for row in frame.to_dict('records'):
        identifier = DataValidator.to_text(row[HEAT_FLOW_ID_COLUMN])
        raw_value = DataValidator.to_text(row[HEAT_FLOW_VALUE_COLUMN])
        if not identifier:
            sink.emit('row_dropped', source=SOURCE_NAME, reason='empty_id')
            continue
        if not raw_value:
            sink.emit('row_dropped', source=SOURCE_NAME, reason='missing_heat_flow',
                      identifier=identifier)
            continue
        records.append(RawHeatFlowRecord(
            identifier=identifier,
            heat_flow=DataValidator.to_float(raw_value),
            separator=HEAT_FLOW_ID_SEPARATOR,
        ))

    sink.emit(
        'source_parsed',
        source=SOURCE_NAME,
        rows=len(records),
        invalid_heat_flow=sum(1 for r in records if r.heat_flow is None),
    )
    return records
