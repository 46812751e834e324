"""Zone Aggregation Result Models"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field
from shapely.geometry import mapping
from shapely.geometry.base import BaseGeometry

ZONE_FEATURE_TYPE = "zone"


class UnionFailure(BaseModel):
    """A feature dropped from a zone because its union step failed."""
    
    zone: str = Field(..., description="Zone being built")
    feature_name: str = Field(..., description="Name of the dropped feature")
    error: str = Field(..., description="Geometry engine error message")


class ZonePolygon(BaseModel):
    """One aggregated zone."""
    
    name: str
    geometry: BaseGeometry
    source_count: int = Field(ge=1, description="Features merged into the zone")
    
    model_config = {"arbitrary_types_allowed": True, "frozen": True}
    
    def to_feature(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "properties": {"name": self.name, "type": ZONE_FEATURE_TYPE},
            "geometry": mapping(self.geometry),
        }


class ZoneAggregationResult(BaseModel):
    """Outcome of one aggregation run."""
    
    zones: List[ZonePolygon] = Field(default_factory=list)
    union_failures: List[UnionFailure] = Field(default_factory=list)
    missing_provinces: List[str] = Field(default_factory=list, description="Mapped provinces without a boundary feature")
    empty_zones: List[str] = Field(default_factory=list, description="Zones with nothing to merge")
    
    def zone_names(self) -> List[str]:
        return [zone.name for zone in self.zones]
    
    def get_zone(self, name: str) -> ZonePolygon:
        for zone in self.zones:
            if zone.name == name:
                return zone
        raise KeyError(name)
    
    def to_feature_collection(self) -> Dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "features": [zone.to_feature() for zone in self.zones],
        }
    
    def get_summary(self) -> Dict[str, Any]:
        return {
            "zones_built": len(self.zones),
            "union_failures": len(self.union_failures),
            "missing_provinces": list(self.missing_provinces),
            "empty_zones": list(self.empty_zones),
        }
