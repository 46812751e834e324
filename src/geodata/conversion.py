"""Conversion of the source boundary tables into WGS84 GeoJSON layers.

The administrative boundaries are delivered as MapInfo .TAB tables in a
projected system. The classifier and the zone build read GeoJSON in EPSG:4326,
so each table is reprojected and written once before those steps run.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

import geopandas as gpd

from ..exceptions import GeoTagLoadError

logger = logging.getLogger(__name__)

TARGET_CRS = "EPSG:4326"

SOURCE_FILES = {
    "regions": "DA_REGIONS_12R.TAB",
    "provinces": "DA_PROVINCES_12R.TAB",
    "communes": "DA_COMMUNES_12R.TAB",
}


def convert_layer(source: Union[str, Path], target: Union[str, Path],
                  source_crs: Optional[str] = None) -> Path:
    """Reproject one vector file to EPSG:4326 and write it as GeoJSON.

    Args:
        source: Any vector file GDAL can read (.TAB, .shp, .gpkg, .geojson)
        target: GeoJSON file to write
        source_crs: CRS to assume when the source declares none

    Returns:
        The written path

    Raises:
        GeoTagLoadError: If the source is missing, unreadable or has no known CRS
    """
    source, target = Path(source), Path(target)
    if not source.exists():
        raise GeoTagLoadError(f"Boundary source not found: {source}", {"target": str(target)})

    try:
        frame = gpd.read_file(source)
    except Exception as e:
        raise GeoTagLoadError(f"Cannot read boundary source {source}: {e}", {"target": str(target)})

    if frame.crs is None:
        if source_crs is None:
            raise GeoTagLoadError(
                f"Boundary source {source} declares no coordinate system",
                {"hint": "pass source_crs"}
            )
        frame = frame.set_crs(source_crs)

    frame = frame.to_crs(TARGET_CRS)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(frame.to_json(drop_id=True), encoding="utf-8")
    except OSError as e:
        raise GeoTagLoadError(f"Cannot write converted layer to {target}: {e}", {"source": str(source)})

    logger.info(f"Converted {len(frame)} features from {source.name} to {target}")
    return target


def convert_boundary_sources(source_dir: Union[str, Path], targets: Mapping[str, Path],
                             source_crs: Optional[str] = None,
                             source_files: Mapping[str, str] = SOURCE_FILES) -> Dict[str, Path]:
    """Convert the region, province and commune tables of ``source_dir``.

    Every layer is attempted even when an earlier one fails.

    Raises:
        GeoTagLoadError: If any layer failed; the context lists each failure
    """
    converted: Dict[str, Path] = {}
    failures: Dict[str, str] = {}

    for layer, file_name in source_files.items():
        try:
            converted[layer] = convert_layer(Path(source_dir) / file_name, targets[layer], source_crs)
        except GeoTagLoadError as e:
            logger.error(f"Failed to convert {layer}: {e}")
            failures[layer] = str(e)

    if failures:
        raise GeoTagLoadError(
            f"Failed to convert {len(failures)} of {len(source_files)} boundary sources",
            {"failures": failures, "converted": sorted(converted)}
        )
    return converted
