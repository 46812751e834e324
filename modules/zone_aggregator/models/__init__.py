"""Zone Aggregator Data Models"""

from .zone_mapping import ReassignmentRule, ZoneMapping
from .aggregation_result import (
    ZONE_FEATURE_TYPE,
    UnionFailure,
    ZonePolygon,
    ZoneAggregationResult,
)

__all__ = [
    'ReassignmentRule',
    'ZoneMapping',
    'ZONE_FEATURE_TYPE',
    'UnionFailure',
    'ZonePolygon',
    'ZoneAggregationResult',
]
