"""
Custom exception classes for the cell-site geotagger.

This module defines domain-specific exceptions to provide clear error handling
and debugging information throughout the system.
"""

from typing import Optional, Dict, Any


class GeoTagBaseException(Exception):
    """Base exception class for all geotagger exceptions."""
    
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
    
    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message


class GeoTagConfigurationError(GeoTagBaseException):
    """
    Exception raised when configuration loading or validation fails.
    
    This exception is raised when:
    - Configuration files are missing or invalid
    - Environment configuration is malformed
    - Required configuration values are missing
    """
    pass


class GeoTagValidationError(GeoTagBaseException):
    """
    Exception raised when data validation fails.
    
    This exception is raised when:
    - An input batch is empty or unreadable
    - Field mapping validation fails
    - Reference tables have the wrong shape
    """
    pass


class GeoTagLoadError(GeoTagBaseException):
    """
    Exception raised when a required reference dataset cannot be loaded.
    
    Load failures are fatal: no partially loaded reference context is ever
    handed to the classifier.
    """
    pass


class GeoTagProcessingError(GeoTagBaseException):
    """
    Exception raised when spatial processing fails.
    
    This exception is raised when:
    - Zone aggregation cannot produce its output
    - Classification runs are started in an invalid state
    - Result export fails
    """
    pass
