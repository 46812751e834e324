"""Zone Aggregation Specific Exceptions

Extends framework exception hierarchy with zone aggregation error types.
"""

from typing import List, Optional

from src.exceptions import GeoTagProcessingError, GeoTagValidationError


class ZoneMappingError(GeoTagValidationError):
    """Exception for invalid zone mappings or conflicting reassignment rules."""
    
    def __init__(self, message: str, conflicts: Optional[List[str]] = None):
        super().__init__(message, {"conflicts": conflicts} if conflicts else None)
        self.conflicts = conflicts or []


class ZoneAggregationException(GeoTagProcessingError):
    """Exception for zone aggregation failures that stop the whole run."""
    pass
