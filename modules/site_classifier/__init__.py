"""Site Classifier Module

This module geotags cell sites: each site is located in the region, DR zone,
province and commune layers and enriched with the emergency contacts of its
commune.
"""

from .processor import SiteClassificationProcessor

__all__ = ['SiteClassificationProcessor']
