"""SitePoint Data Model

This module defines the Pydantic data model for a cell site submitted for
classification. It ensures coordinates are finite WGS84 numbers before any
spatial processing takes place.
"""

import math
from typing import Any, Dict, Union

from pydantic import BaseModel, Field, field_validator


class SitePoint(BaseModel):
    """A cell site to be classified.
    
    Attributes:
        site_id: Value of the identifier column, or the 1-based row number
        latitude: WGS84 latitude
        longitude: WGS84 longitude
        original: The untouched input row, carried through to the export
    """
    
    site_id: Union[str, int] = Field(..., description="Site identifier or 1-based row number")
    latitude: float = Field(..., description="WGS84 latitude")
    longitude: float = Field(..., description="WGS84 longitude")
    original: Dict[str, Any] = Field(default_factory=dict, description="Original input row")
    
    model_config = {"frozen": True}
    
    @field_validator('latitude', 'longitude')
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinite coordinates."""
        if not math.isfinite(v):
            raise ValueError('Coordinate must be a finite number')
        return v
