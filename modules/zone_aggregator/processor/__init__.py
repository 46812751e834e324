"""Zone Aggregation Processing Logic

This package contains the ZoneAggregationProcessor class that implements the
ModuleProcessor interface for the zone aggregator module.
"""

from .zone_aggregation_processor import ZoneAggregationProcessor

__all__ = ['ZoneAggregationProcessor']
