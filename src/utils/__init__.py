"""
Utility modules for the cell-site geotagger.

This module provides utility functions and setup for logging, place-name
normalization and performance monitoring used throughout the system.
"""

from .logging_setup import setup_logging, configure_logging, log_performance
from .text_normalization import normalize
from .performance_monitor import PerformanceMonitor, PerformanceMetrics

__all__ = [
    "setup_logging",
    "configure_logging",
    "log_performance",
    "normalize",
    "PerformanceMonitor",
    "PerformanceMetrics",
]
