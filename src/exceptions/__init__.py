"""
Custom exceptions for the cell-site geotagger.

This module provides domain-specific exception classes for error handling
and debugging throughout the system.
"""

from .custom_exceptions import (
    GeoTagBaseException,
    GeoTagConfigurationError,
    GeoTagValidationError,
    GeoTagLoadError,
    GeoTagProcessingError,
)

__all__ = [
    "GeoTagBaseException",
    "GeoTagConfigurationError",
    "GeoTagValidationError",
    "GeoTagLoadError",
    "GeoTagProcessingError",
]
