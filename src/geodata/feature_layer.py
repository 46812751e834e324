"""Boundary feature layers parsed from GeoJSON.

A FeatureLayer is the in-memory form of one GeoJSON FeatureCollection (all
regions, all provinces, ...). Names and administrative codes are resolved
through the layer's LayerSchema when the layer is built, and every feature
carries the bounding box of its geometry.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import geopandas as gpd
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from ..exceptions import GeoTagLoadError
from ..utils import normalize
from .layer_schema import LayerSchema

logger = logging.getLogger(__name__)

BBox = Tuple[float, float, float, float]

POLYGON_TYPES = ("Polygon", "MultiPolygon")


@dataclass(frozen=True, eq=False)
class BoundaryFeature:
    """A single administrative polygon.

    Attributes:
        name: Name resolved through the layer schema aliases
        code: Administrative code used for parent/child joins (may be None)
        geometry: Polygon or MultiPolygon in WGS84 lon/lat
        properties: Original GeoJSON properties
        bbox: (min_lon, min_lat, max_lon, max_lat) of ``geometry``
    """
    name: str
    code: Optional[str]
    geometry: BaseGeometry
    properties: Dict[str, Any] = field(default_factory=dict)
    bbox: BBox = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "bbox", tuple(self.geometry.bounds))

    @property
    def normalized_name(self) -> str:
        return normalize(self.name)

    def bbox_contains(self, lon: float, lat: float) -> bool:
        """Check whether a lon/lat pair falls inside the bounding box."""
        min_lon, min_lat, max_lon, max_lat = self.bbox
        return min_lon <= lon <= max_lon and min_lat <= lat <= max_lat

    def to_geojson(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": mapping(self.geometry),
        }


class FeatureLayer:
    """Ordered, read-only collection of boundary features of one level."""

    def __init__(self, schema: LayerSchema, features: List[BoundaryFeature]):
        self.schema = schema
        self._features = tuple(features)

    @property
    def level(self) -> str:
        return self.schema.level

    @property
    def features(self) -> Tuple[BoundaryFeature, ...]:
        return self._features

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[BoundaryFeature]:
        return iter(self._features)

    def find_by_name(self, name: Any) -> List[BoundaryFeature]:
        """Return every feature whose normalized name matches, in layer order."""
        key = normalize(name)
        return [feature for feature in self._features if feature.normalized_name == key]

    def find_first_by_name(self, name: Any) -> Optional[BoundaryFeature]:
        matches = self.find_by_name(name)
        return matches[0] if matches else None

    def find_by_code(self, code: Optional[str]) -> List[BoundaryFeature]:
        """Return every feature carrying the given administrative code."""
        if code is None:
            return []
        return [feature for feature in self._features if feature.code == code]

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """Build a GeoDataFrame with name, code and geometry columns."""
        return gpd.GeoDataFrame(
            {
                "name": [feature.name for feature in self._features],
                "code": [feature.code for feature in self._features],
            },
            geometry=[feature.geometry for feature in self._features],
            crs="EPSG:4326",
        )


def build_feature_layer(collection: Dict[str, Any], schema: LayerSchema) -> FeatureLayer:
    """Build a FeatureLayer from a parsed GeoJSON FeatureCollection.

    Features without a polygonal geometry are skipped with a warning; the
    relative order of the remaining features is preserved.

    Args:
        collection: GeoJSON FeatureCollection dictionary
        schema: Property schema of the layer

    Returns:
        FeatureLayer holding the polygon features

    Raises:
        GeoTagLoadError: If the document is not a FeatureCollection
    """
    if not isinstance(collection, dict) or collection.get("type") != "FeatureCollection":
        raise GeoTagLoadError(
            f"Layer '{schema.level}' is not a GeoJSON FeatureCollection"
        )

    features = []
    skipped = 0
    for raw in collection.get("features") or []:
        geometry_data = (raw or {}).get("geometry")
        if not geometry_data or geometry_data.get("type") not in POLYGON_TYPES:
            skipped += 1
            continue

        properties = raw.get("properties") or {}
        features.append(BoundaryFeature(
            name=schema.resolve_name(properties),
            code=schema.resolve_code(properties),
            geometry=shape(geometry_data),
            properties=dict(properties),
        ))

    if skipped:
        logger.warning(f"Skipped {skipped} non-polygon features in layer '{schema.level}'")

    logger.debug(f"Built layer '{schema.level}' with {len(features)} features")
    return FeatureLayer(schema, features)


def load_feature_layer(path: Union[str, Path], schema: LayerSchema) -> FeatureLayer:
    """Load a GeoJSON file into a FeatureLayer.

    Raises:
        GeoTagLoadError: If the file is missing, unparseable or not a FeatureCollection
    """
    path = Path(path)
    if not path.exists():
        raise GeoTagLoadError(
            f"Boundary layer file not found: {path}", {"layer": schema.level}
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            collection = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise GeoTagLoadError(
            f"Cannot read boundary layer {path}: {e}", {"layer": schema.level}
        )

    layer = build_feature_layer(collection, schema)
    logger.info(f"Loaded {len(layer)} {schema.level} features from {path}")
    return layer
