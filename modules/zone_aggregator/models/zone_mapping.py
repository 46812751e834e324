"""Zone Mapping Data Models

A ZoneMapping lists, for every DR zone, the provinces it is made of. Some
communes do not follow their province: ReassignmentRules move them out of the
source province's zone into a target zone.
"""

from collections import OrderedDict
from typing import Dict, FrozenSet, List, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from src.utils import normalize
from ..exceptions import ZoneMappingError


class ReassignmentRule(BaseModel):
    """Moves named communes of one province into another zone."""
    
    source_province: str = Field(..., min_length=1, description="Province the communes belong to")
    target_zone: str = Field(..., min_length=1, description="Zone the communes are moved to")
    communes: List[str] = Field(..., min_length=1, description="Commune names to move")
    
    model_config = {"frozen": True}
    
    @field_validator('source_province', 'target_zone')
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Name must not be blank')
        return v
    
    @property
    def normalized_source(self) -> str:
        return normalize(self.source_province)
    
    @property
    def normalized_communes(self) -> FrozenSet[str]:
        return frozenset(normalize(commune) for commune in self.communes)


class ZoneMapping(BaseModel):
    """Ordered zone to province mapping plus ordered reassignment rules.
    
    Two rules moving the same commune of the same province to different
    zones are rejected.
    """
    
    zones: Dict[str, List[str]] = Field(default_factory=OrderedDict, description="Zone name to province names")
    rules: List[ReassignmentRule] = Field(default_factory=list, description="Commune reassignments")
    
    model_config = {"frozen": True}
    
    @model_validator(mode='after')
    def check_rule_conflicts(self) -> 'ZoneMapping':
        """Reject rules sending one commune to two different zones."""
        destinations: Dict[Tuple[str, str], str] = {}
        conflicts = []
        for rule in self.rules:
            for commune in sorted(rule.normalized_communes):
                key = (rule.normalized_source, commune)
                previous = destinations.setdefault(key, rule.target_zone)
                if previous != rule.target_zone:
                    conflicts.append(
                        f"commune '{commune}' of '{rule.source_province}' "
                        f"assigned to both '{previous}' and '{rule.target_zone}'"
                    )
        if conflicts:
            raise ZoneMappingError(f"Conflicting reassignment rules: {'; '.join(conflicts)}", conflicts)
        return self
    
    def zone_names(self) -> List[str]:
        """Zones in build order: mapping order, then rule targets not in the mapping."""
        names = list(self.zones)
        for rule in self.rules:
            if rule.target_zone not in names:
                names.append(rule.target_zone)
        return names
    
    def provinces_of(self, zone: str) -> List[str]:
        return list(self.zones.get(zone, []))
    
    def rules_from(self, province: str) -> List[ReassignmentRule]:
        """Rules whose source province matches the given name after normalization."""
        key = normalize(province)
        return [rule for rule in self.rules if rule.normalized_source == key]
    
    def rules_into(self, zone: str) -> List[ReassignmentRule]:
        return [rule for rule in self.rules if rule.target_zone == zone]
