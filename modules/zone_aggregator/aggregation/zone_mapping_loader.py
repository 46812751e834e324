"""Zone mapping loading.

The zone mapping spreadsheet has one row per (zone, province) pair. The zone
column is ``DR`` (or ``Zone``/``zone``), the province column ``Province``.
Rows missing either value are skipped. Reassignment rules come from the
module configuration.
"""

import logging
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from src.exceptions import GeoTagLoadError
from src.geodata import pick_value, read_rows
from ..models import ReassignmentRule, ZoneMapping

logger = logging.getLogger(__name__)

DEFAULT_ZONE_COLUMNS = ["DR", "Zone", "zone"]
DEFAULT_PROVINCE_COLUMNS = ["Province"]


def build_zone_mapping(rows: Iterable[Dict[str, Any]],
                       rules: Optional[Sequence[Union[ReassignmentRule, Dict[str, Any]]]] = None,
                       zone_columns: Optional[Sequence[str]] = None,
                       province_columns: Optional[Sequence[str]] = None) -> ZoneMapping:
    """Group spreadsheet rows into an ordered ZoneMapping.

    Zones keep the order of their first row; provinces keep row order within
    their zone.

    Raises:
        ZoneMappingError: If the reassignment rules conflict
    """
    zone_columns = list(zone_columns or DEFAULT_ZONE_COLUMNS)
    province_columns = list(province_columns or DEFAULT_PROVINCE_COLUMNS)

    zones: Dict[str, List[str]] = OrderedDict()
    skipped = 0
    for row in rows:
        zone = pick_value(row, zone_columns)
        province = pick_value(row, province_columns)
        if zone is None or province is None:
            skipped += 1
            continue
        zones.setdefault(str(zone).strip(), []).append(str(province).strip())

    if skipped:
        logger.debug(f"Skipped {skipped} zone mapping rows without zone or province")

    parsed_rules = [
        rule if isinstance(rule, ReassignmentRule) else ReassignmentRule(**rule)
        for rule in rules or []
    ]

    mapping = ZoneMapping(zones=zones, rules=parsed_rules)
    logger.info(f"Zone mapping: {len(zones)} zones, "
                f"{sum(len(p) for p in zones.values())} provinces, {len(parsed_rules)} reassignment rules")
    return mapping


def load_zone_mapping(path: Union[str, Path],
                      rules: Optional[Sequence[Union[ReassignmentRule, Dict[str, Any]]]] = None,
                      zone_columns: Optional[Sequence[str]] = None,
                      province_columns: Optional[Sequence[str]] = None) -> ZoneMapping:
    """Read the zone mapping spreadsheet.

    Raises:
        GeoTagLoadError: If the spreadsheet cannot be read
        ZoneMappingError: If the reassignment rules conflict
    """
    try:
        rows = read_rows(path)
    except Exception as e:
        raise GeoTagLoadError(f"Cannot read zone mapping {path}: {e}", {"table": "zone_mapping"})

    return build_zone_mapping(rows, rules, zone_columns, province_columns)
