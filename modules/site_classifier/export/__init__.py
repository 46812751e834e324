"""Spreadsheet and GeoJSON export of classified sites."""

from .result_exporter import (
    RESULTS_SHEET,
    EMERGENCY_COLUMNS,
    LABEL_COLUMNS,
    export_columns,
    result_to_record,
    build_export_frame,
    export_results,
    results_to_geodataframe,
    export_geojson,
)

__all__ = [
    'RESULTS_SHEET',
    'EMERGENCY_COLUMNS',
    'LABEL_COLUMNS',
    'export_columns',
    'result_to_record',
    'build_export_frame',
    'export_results',
    'results_to_geodataframe',
    'export_geojson',
]
