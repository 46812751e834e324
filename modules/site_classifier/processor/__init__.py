"""Site Classification Processing Logic

This package contains the SiteClassificationProcessor class that implements the
ModuleProcessor interface for the site classifier module.
"""

from .site_classification_processor import SiteClassificationProcessor

__all__ = ['SiteClassificationProcessor']
