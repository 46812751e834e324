"""Reference data loading for site classification."""

from .emergency_table import EmergencyTable
from .reference_context import ReferenceContext, ReferenceLoader

__all__ = ['EmergencyTable', 'ReferenceContext', 'ReferenceLoader']
