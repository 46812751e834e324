"""Site batch parsing.

Column detection is by substring: the first header containing "lat" is the
latitude column, the first containing "long" or "lng" the longitude column and
the first containing "site", "name" or "code" the identifier column. Rows
whose coordinates do not parse to finite numbers are dropped; the only trace
they leave is the gap between ``submitted_count`` and the number of points.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from src.exceptions import GeoTagValidationError
from src.geodata import read_rows
from ..models import SitePoint

logger = logging.getLogger(__name__)

LATITUDE_MARKERS = ("lat",)
LONGITUDE_MARKERS = ("long", "lng")
IDENTIFIER_MARKERS = ("site", "name", "code")

# Leading decimal number, read the way spreadsheet exports usually write it
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class ColumnMapping:
    """Headers detected for the coordinate and identifier columns."""
    latitude: Optional[str]
    longitude: Optional[str]
    identifier: Optional[str]

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass
class PointBatch:
    """Valid points of one submitted batch."""
    points: List[SitePoint] = field(default_factory=list)
    submitted_count: int = 0
    columns: Optional[ColumnMapping] = None

    @property
    def valid_count(self) -> int:
        return len(self.points)

    @property
    def dropped_count(self) -> int:
        return self.submitted_count - self.valid_count


def _first_header(headers: Sequence[str], markers: Sequence[str]) -> Optional[str]:
    for header in headers:
        lowered = str(header).lower()
        if any(marker in lowered for marker in markers):
            return header
    return None


def detect_columns(headers: Sequence[str],
                   latitude_markers: Sequence[str] = LATITUDE_MARKERS,
                   longitude_markers: Sequence[str] = LONGITUDE_MARKERS,
                   identifier_markers: Sequence[str] = IDENTIFIER_MARKERS) -> ColumnMapping:
    """Detect latitude, longitude and identifier columns, header order as given."""
    return ColumnMapping(
        latitude=_first_header(headers, latitude_markers),
        longitude=_first_header(headers, longitude_markers),
        identifier=_first_header(headers, identifier_markers),
    )


def parse_coordinate(value: Any) -> Optional[float]:
    """Parse a coordinate cell, returning None unless it is a finite number."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value).strip())
        if not match:
            return None
        number = float(match.group(0))

    return number if math.isfinite(number) else None


def parse_identifier(value: Any) -> Optional[str]:
    """Return the identifier cell as text, or None when it is blank or NaN."""
    if value is None:
        return None
    # NaN and NaT are the only values not equal to themselves
    if value != value:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)

    text = str(value).strip()
    return text or None


def parse_points(rows: Sequence[Dict[str, Any]],
                 markers: Optional[Dict[str, Sequence[str]]] = None) -> PointBatch:
    """Turn input rows into SitePoints, dropping rows without usable coordinates.

    Args:
        rows: Row dictionaries keyed by column header
        markers: Optional override of the header markers
            (keys ``latitude_markers``, ``longitude_markers``, ``identifier_markers``)

    Returns:
        PointBatch with the valid points and the submitted row count
    """
    markers = markers or {}
    batch = PointBatch(submitted_count=len(rows))
    if not rows:
        return batch

    headers: List[str] = []
    for row in rows:
        headers.extend(key for key in row if key not in headers)

    columns = detect_columns(
        headers,
        markers.get("latitude_markers", LATITUDE_MARKERS),
        markers.get("longitude_markers", LONGITUDE_MARKERS),
        markers.get("identifier_markers", IDENTIFIER_MARKERS),
    )
    batch.columns = columns

    if not columns.has_coordinates:
        logger.warning(f"No latitude/longitude columns found among headers {headers}")
        return batch

    for index, row in enumerate(rows):
        latitude = parse_coordinate(row.get(columns.latitude))
        longitude = parse_coordinate(row.get(columns.longitude))
        if latitude is None or longitude is None:
            continue

        site_id = parse_identifier(row.get(columns.identifier) if columns.identifier else None)
        if site_id is None:
            site_id = index + 1

        batch.points.append(SitePoint(
            site_id=site_id,
            latitude=latitude,
            longitude=longitude,
            original=dict(row),
        ))

    logger.info(f"Parsed {batch.valid_count} valid sites out of {batch.submitted_count} rows")
    return batch


def load_point_batch(path: Union[str, Path],
                     markers: Optional[Dict[str, Sequence[str]]] = None) -> PointBatch:
    """Read a site spreadsheet and parse it into a PointBatch.

    Raises:
        GeoTagValidationError: If the file cannot be read or holds no rows
    """
    try:
        rows = read_rows(path)
    except Exception as e:
        raise GeoTagValidationError(f"Error reading site file: {e}", {"path": str(path)})

    if not rows:
        raise GeoTagValidationError("Site file is empty", {"path": str(path)})

    return parse_points(rows, markers)
