"""Zone Aggregator Module

This module builds the DR zone layer offline by merging province polygons,
and the communes of split provinces, according to the province-to-zone
mapping spreadsheet.
"""

from .processor import ZoneAggregationProcessor

__all__ = ['ZoneAggregationProcessor']
