"""Property schema of a boundary layer.

GeoJSON exports of the administrative boundaries do not agree on property
names ("Nom_Region" in one release, "Nom_region" or "NAME" in another). A
LayerSchema lists, per logical field, the accepted property keys in priority
order, so the fallback chain is declared once per dataset instead of at every
access site.
"""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator


UNKNOWN_NAME = "Unknown"


class LayerSchema(BaseModel):
    """Ordered property aliases for one administrative level."""

    level: str = Field(..., description="Administrative level (regions, provinces, communes, zones)")
    name_aliases: List[str] = Field(..., min_length=1, description="Property keys holding the feature name, in priority order")
    code_aliases: List[str] = Field(default_factory=list, description="Property keys holding the administrative code")
    fallback_name: str = Field(UNKNOWN_NAME, description="Name used when no alias resolves")

    model_config = {"frozen": True}

    @field_validator('name_aliases', 'code_aliases')
    @classmethod
    def strip_aliases(cls, v: List[str]) -> List[str]:
        """Drop blank alias entries."""
        return [alias for alias in (a.strip() for a in v) if alias]

    def resolve_name(self, properties: Mapping[str, Any]) -> str:
        """Return the first non-empty name alias, or the fallback name."""
        value = _first_present(properties, self.name_aliases)
        return str(value).strip() if value is not None else self.fallback_name

    def resolve_code(self, properties: Mapping[str, Any]) -> Optional[str]:
        """Return the administrative code as a string, or None when absent."""
        value = _first_present(properties, self.code_aliases)
        return str(value).strip() if value is not None else None


def _first_present(properties: Mapping[str, Any], aliases: List[str]) -> Optional[Any]:
    for alias in aliases:
        value = properties.get(alias)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None
