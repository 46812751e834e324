"""Zone aggregation: mapping loading and polygon union."""

from .zone_mapping_loader import build_zone_mapping, load_zone_mapping
from .zone_aggregator import ZoneAggregator, zones_to_geodataframe, write_zones

__all__ = [
    'build_zone_mapping',
    'load_zone_mapping',
    'ZoneAggregator',
    'zones_to_geodataframe',
    'write_zones',
]
