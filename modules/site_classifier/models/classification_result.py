"""Classification Result Data Models

Models for the labels and emergency-contact data attached to a classified
site, and for the aggregate counters of a classification run.
"""

from typing import Dict, Any, List

from pydantic import BaseModel, Field, field_validator

from .site_point import SitePoint

NOT_AVAILABLE = "N/A"

CONTACT_COLUMNS = ["141", "5757", "15", "19", "112", "177"]


class EmergencyContacts(BaseModel):
    """Emergency numbers attached to a commune.
    
    The six fields are named after the emergency-table columns ("141",
    "5757", "15", "19", "112", "177"); each defaults to an empty string.
    """
    
    contact_141: str = Field("", alias="141")
    contact_5757: str = Field("", alias="5757")
    contact_15: str = Field("", alias="15")
    contact_19: str = Field("", alias="19")
    contact_112: str = Field("", alias="112")
    contact_177: str = Field("", alias="177")
    
    model_config = {"frozen": True, "populate_by_name": True}
    
    @field_validator('*', mode='before')
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Store contact values as trimmed text, None as empty."""
        if v is None:
            return ""
        return str(v).strip()
    
    def as_columns(self) -> Dict[str, str]:
        """Return the contacts keyed by their table column name."""
        return self.model_dump(by_alias=True)
    
    def is_empty(self) -> bool:
        """Check whether every contact field is empty."""
        return not any(self.as_columns().values())


EMPTY_CONTACTS = EmergencyContacts()


class ClassificationResult(BaseModel):
    """A site with its resolved administrative labels and emergency contacts."""
    
    point: SitePoint
    region: str = Field(NOT_AVAILABLE, description="Region name or N/A")
    province: str = Field(NOT_AVAILABLE, description="Province name or N/A")
    commune: str = Field(NOT_AVAILABLE, description="Commune name or N/A")
    zone: str = Field(NOT_AVAILABLE, description="DR zone name or N/A")
    contacts: EmergencyContacts = Field(default_factory=EmergencyContacts)
    
    model_config = {"frozen": True}
    
    @property
    def is_matched(self) -> bool:
        """A site counts as matched when commune or province resolved."""
        return self.commune != NOT_AVAILABLE or self.province != NOT_AVAILABLE
    
    @property
    def missing_safety_data(self) -> bool:
        """True when all six emergency contact fields are empty."""
        return self.contacts.is_empty()
    
    def get_assignment_status(self) -> str:
        """Get human-readable assignment status."""
        if self.commune != NOT_AVAILABLE:
            return "commune_assigned"
        if self.province != NOT_AVAILABLE:
            return "province_only"
        if self.region != NOT_AVAILABLE:
            return "region_only"
        return "no_assignment"


class ClassificationSummary(BaseModel):
    """Aggregate counters for one classification batch."""
    
    submitted_count: int = Field(ge=0, description="Rows present in the input file")
    valid_count: int = Field(ge=0, description="Rows with usable coordinates")
    classified_count: int = Field(0, ge=0, description="Sites classified")
    matched_count: int = Field(0, ge=0, description="Sites with commune or province resolved")
    missing_safety_count: int = Field(0, ge=0, description="Sites without any emergency contact")
    layer_counts: Dict[str, int] = Field(default_factory=dict, description="Resolved label count per layer")
    
    @property
    def dropped_count(self) -> int:
        return self.submitted_count - self.valid_count
    
    @classmethod
    def from_results(cls, submitted_count: int, valid_count: int,
                     results: List[ClassificationResult]) -> "ClassificationSummary":
        layer_counts = {
            layer: sum(1 for r in results if getattr(r, layer) != NOT_AVAILABLE)
            for layer in ("region", "zone", "province", "commune")
        }
        return cls(
            submitted_count=submitted_count,
            valid_count=valid_count,
            classified_count=len(results),
            matched_count=sum(1 for r in results if r.is_matched),
            missing_safety_count=sum(1 for r in results if r.missing_safety_data),
            layer_counts=layer_counts,
        )
    
    def get_summary_text(self) -> str:
        """Generate human-readable summary."""
        return (f"Classified {self.classified_count}/{self.submitted_count} rows "
                f"({self.dropped_count} dropped), {self.matched_count} matched, "
                f"{self.missing_safety_count} without emergency contacts")
