"""Export of classified sites.

Each exported row is the original input row followed by the resolved labels
and the six emergency contact columns. Spreadsheets go out as .xlsx (sheet
"Results") or .csv; the same records can be written as a point GeoJSON for
map layers.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

import geopandas as gpd
import pandas as pd
from shapely.geometry import Point

from src.exceptions import GeoTagProcessingError
from ..models import CONTACT_COLUMNS, ClassificationResult

logger = logging.getLogger(__name__)

RESULTS_SHEET = "Results"

LABEL_COLUMNS = {
    "Auto_Zone": "zone",
    "Auto_Commune": "commune",
    "Auto_Province": "province",
    "Auto_Region": "region",
}
EMERGENCY_COLUMNS = [f"Emergency_{column}" for column in CONTACT_COLUMNS]


def export_columns() -> List[str]:
    """Columns appended to every exported row, in output order."""
    return list(LABEL_COLUMNS) + EMERGENCY_COLUMNS


def result_to_record(result: ClassificationResult) -> Dict[str, Any]:
    """Flatten a classification result into one export row."""
    record = dict(result.point.original)
    for column, attribute in LABEL_COLUMNS.items():
        record[column] = getattr(result, attribute)
    for column, value in result.contacts.as_columns().items():
        record[f"Emergency_{column}"] = value
    return record


def build_export_frame(results: Sequence[ClassificationResult]) -> pd.DataFrame:
    """Build the export table.

    Original columns keep their first-seen order and come first; the
    Auto_* and Emergency_* columns follow.
    """
    records = [result_to_record(result) for result in results]

    original_columns: List[str] = []
    for result in results:
        for column in result.point.original:
            if column not in original_columns and column not in export_columns():
                original_columns.append(column)

    return pd.DataFrame.from_records(records, columns=original_columns + export_columns())


def export_results(results: Sequence[ClassificationResult], path: Union[str, Path]) -> Path:
    """Write classified sites to a spreadsheet.

    Args:
        results: Classification results in output order
        path: Target file; the suffix selects .xlsx or .csv

    Returns:
        Path of the written file

    Raises:
        GeoTagProcessingError: If the format is unsupported or the write fails
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in (".xlsx", ".csv"):
        raise GeoTagProcessingError(
            f"Unsupported export format '{suffix}'", {"path": str(path)}
        )

    frame = build_export_frame(results)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix == ".xlsx":
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                frame.to_excel(writer, sheet_name=RESULTS_SHEET, index=False)
        else:
            frame.to_csv(path, index=False)
    except OSError as e:
        raise GeoTagProcessingError(f"Failed to write results to {path}: {e}", {"path": str(path)})

    logger.info(f"Exported {len(frame)} classified sites to {path}")
    return path


def results_to_geodataframe(results: Sequence[ClassificationResult]) -> gpd.GeoDataFrame:
    """Build a WGS84 point layer of the classified sites."""
    frame = build_export_frame(results)
    frame.insert(0, "site_id", [str(result.point.site_id) for result in results])
    geometry = [Point(result.point.longitude, result.point.latitude) for result in results]
    return gpd.GeoDataFrame(frame, geometry=geometry, crs="EPSG:4326")


def export_geojson(results: Sequence[ClassificationResult], path: Union[str, Path]) -> Path:
    """Write classified sites as a GeoJSON point FeatureCollection."""
    path = Path(path)
    points = results_to_geodataframe(results)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(points.to_json(drop_id=True), encoding="utf-8")
    except OSError as e:
        raise GeoTagProcessingError(f"Failed to write GeoJSON to {path}: {e}", {"path": str(path)})

    logger.info(f"Exported {len(points)} site points to {path}")
    return path
