"""
Cell-Site Geotagger Core Package

This package contains the core infrastructure for the cell-site geotagger,
providing shared configuration, logging, exceptions, geodata access and the
module processor interface used by the processing modules.
"""

from .interfaces import ModuleProcessor, ProcessingResult, ModuleStatus

__version__ = "1.0.0"
__all__ = ['ModuleProcessor', 'ProcessingResult', 'ModuleStatus']
