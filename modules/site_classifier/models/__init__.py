"""Site Classifier Data Models

Pydantic data models for submitted cell sites, their classification results
and batch summaries.
"""

from .site_point import SitePoint
from .classification_result import (
    NOT_AVAILABLE,
    CONTACT_COLUMNS,
    EmergencyContacts,
    EMPTY_CONTACTS,
    ClassificationResult,
    ClassificationSummary,
)

__all__ = [
    'SitePoint',
    'NOT_AVAILABLE',
    'CONTACT_COLUMNS',
    'EmergencyContacts',
    'EMPTY_CONTACTS',
    'ClassificationResult',
    'ClassificationSummary',
]
