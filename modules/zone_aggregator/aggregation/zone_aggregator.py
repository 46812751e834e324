"""Zone aggregation.

Builds the DR zone polygons offline from the province and commune layers:

1. every province listed for a zone is merged into it;
2. a province that is the source of reassignment rules contributes its
   communes instead, minus the ones the rules move away;
3. a zone that is the target of a rule also receives the moved communes.

The merge is a left fold of pairwise unions. A union step that fails is
logged, recorded in the result and the offending feature is dropped; the run
carries on with the union built so far.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import geopandas as gpd

from src.geodata import BoundaryFeature, FeatureLayer
from ..exceptions import ZoneAggregationException
from ..models import (
    ZONE_FEATURE_TYPE,
    UnionFailure,
    ZoneAggregationResult,
    ZoneMapping,
    ZonePolygon,
)

logger = logging.getLogger(__name__)


class ZoneAggregator:
    """Unions provinces and communes into zone polygons."""

    def __init__(self, provinces: FeatureLayer, communes: FeatureLayer):
        """Initialize the aggregator.

        Args:
            provinces: Province boundary layer
            communes: Commune boundary layer, joined to provinces by code
        """
        self.provinces = provinces
        self.communes = communes

    def aggregate(self, mapping: ZoneMapping) -> ZoneAggregationResult:
        """Build every zone of the mapping.

        Zones are built in mapping order followed by rule target zones that
        the mapping does not list. Zones with nothing to merge are omitted.
        """
        result = ZoneAggregationResult()
        zone_names = mapping.zone_names()
        logger.info(f"Aggregating {len(zone_names)} zones")

        for zone in zone_names:
            features = self.collect_features(zone, mapping, result)
            if not features:
                logger.warning(f"Zone '{zone}' has no features to merge")
                result.empty_zones.append(zone)
                continue

            polygon = self._fold_union(zone, features, result)
            if polygon is not None:
                result.zones.append(polygon)

        logger.info(f"Built {len(result.zones)} zones "
                    f"({len(result.union_failures)} union failures, "
                    f"{len(result.missing_provinces)} unmatched provinces)")
        return result

    def collect_features(self, zone: str, mapping: ZoneMapping,
                         result: Optional[ZoneAggregationResult] = None) -> List[BoundaryFeature]:
        """Return the features merged into a zone, in merge order."""
        merge_list: List[BoundaryFeature] = []

        for province in mapping.provinces_of(zone):
            rules = mapping.rules_from(province)
            if rules:
                excluded = frozenset().union(*(rule.normalized_communes for rule in rules))
                merge_list.extend(
                    commune for commune in self._communes_of(province, result)
                    if commune.normalized_name not in excluded
                )
                continue

            matches = self.provinces.find_by_name(province)
            if not matches:
                logger.warning(f"Province '{province}' of zone '{zone}' not found in province layer")
                if result is not None and province not in result.missing_provinces:
                    result.missing_provinces.append(province)
            merge_list.extend(matches)

        for rule in mapping.rules_into(zone):
            moved = rule.normalized_communes
            merge_list.extend(
                commune for commune in self._communes_of(rule.source_province, result)
                if commune.normalized_name in moved
            )

        return merge_list

    def _communes_of(self, province: str,
                     result: Optional[ZoneAggregationResult]) -> List[BoundaryFeature]:
        feature = self.provinces.find_first_by_name(province)
        if feature is None:
            logger.warning(f"Reassignment source province '{province}' not found in province layer")
            if result is not None and province not in result.missing_provinces:
                result.missing_provinces.append(province)
            return []

        communes = self.communes.find_by_code(feature.code)
        if not communes:
            logger.warning(f"No communes carry code {feature.code!r} of province '{feature.name}'")
        return communes

    def _fold_union(self, zone: str, features: List[BoundaryFeature],
                    result: ZoneAggregationResult) -> Optional[ZonePolygon]:
        merged = features[0].geometry
        merged_count = 1

        for feature in features[1:]:
            try:
                merged = merged.union(feature.geometry)
                merged_count += 1
            except Exception as e:
                logger.warning(f"Union failed for '{feature.name}' in zone '{zone}', feature dropped: {e}")
                result.union_failures.append(
                    UnionFailure(zone=zone, feature_name=feature.name, error=str(e))
                )

        if merged.is_empty:
            logger.warning(f"Zone '{zone}' produced an empty geometry")
            result.empty_zones.append(zone)
            return None

        logger.debug(f"Zone '{zone}': merged {merged_count}/{len(features)} features")
        return ZonePolygon(name=zone, geometry=merged, source_count=merged_count)


def zones_to_geodataframe(result: ZoneAggregationResult) -> gpd.GeoDataFrame:
    """Build a WGS84 GeoDataFrame with ``name`` and ``type`` columns."""
    return gpd.GeoDataFrame(
        {
            "name": [zone.name for zone in result.zones],
            "type": [ZONE_FEATURE_TYPE] * len(result.zones),
        },
        geometry=[zone.geometry for zone in result.zones],
        crs="EPSG:4326",
    )


def write_zones(result: ZoneAggregationResult, path: Union[str, Path]) -> Path:
    """Write the zones as a GeoJSON FeatureCollection.

    Raises:
        ZoneAggregationException: If the file cannot be written
    """
    path = Path(path)

    if result.zones:
        document = zones_to_geodataframe(result).to_json(drop_id=True)
    else:
        document = json.dumps(result.to_feature_collection())

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
    except OSError as e:
        raise ZoneAggregationException(
            f"Cannot write zones to {path}: {e}", {"zones": len(result.zones)}
        )

    logger.info(f"Wrote {len(result.zones)} zones to {path}")
    return path
