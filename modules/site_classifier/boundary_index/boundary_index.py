"""Point location over one administrative boundary layer.

BoundaryIndex answers "which feature of this layer contains the point" with a
bounding-box pre-filter and an exact point-in-polygon test. Overlapping
features are resolved by layer order: the first containing feature wins.
"""

import logging
import math
from typing import List, Optional

from shapely import STRtree
from shapely.geometry import Point
from shapely.prepared import prep

from src.geodata import BoundaryFeature, FeatureLayer
from ..models import NOT_AVAILABLE

logger = logging.getLogger(__name__)


class BoundaryIndex:
    """First-match point location for a FeatureLayer.

    Features are scanned in layer order. A feature whose bounding box does
    not contain the point is skipped without an exact test; otherwise the
    point is tested against the polygon (holes respected, boundary counts as
    inside). ``containment_checks`` counts the exact tests performed.

    With ``use_spatial_index`` an STRtree narrows the candidates first. The
    candidates are re-sorted into layer order, so the answer is the same as
    the linear scan.
    """

    def __init__(self, layer: FeatureLayer, use_spatial_index: bool = False):
        """Build the index.

        Args:
            layer: Boundary layer to index
            use_spatial_index: Narrow candidates with an STRtree before the bbox scan
        """
        self.layer = layer
        self._features: List[BoundaryFeature] = list(layer.features)
        self._prepared = [prep(feature.geometry) for feature in self._features]
        self._tree: Optional[STRtree] = None
        self.containment_checks = 0

        if use_spatial_index and self._features:
            self._tree = STRtree([feature.geometry for feature in self._features])

        logger.debug(f"Indexed {len(self._features)} features of layer '{layer.level}' "
                     f"(spatial index: {self._tree is not None})")

    @property
    def level(self) -> str:
        return self.layer.level

    def __len__(self) -> int:
        return len(self._features)

    def locate(self, lon: float, lat: float) -> str:
        """Return the name of the first feature containing the point, or "N/A"."""
        feature = self.locate_feature(lon, lat)
        return feature.name if feature is not None else NOT_AVAILABLE

    def locate_feature(self, lon: float, lat: float) -> Optional[BoundaryFeature]:
        """Return the first feature containing the point, or None.

        Non-finite coordinates never match.
        """
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return None

        point = Point(lon, lat)
        for position in self._candidate_positions(point):
            feature = self._features[position]
            if not feature.bbox_contains(lon, lat):
                continue

            self.containment_checks += 1
            if self._prepared[position].covers(point):
                return feature

        return None

    def _candidate_positions(self, point: Point):
        if self._tree is None:
            return range(len(self._features))
        return sorted(int(position) for position in self._tree.query(point))
