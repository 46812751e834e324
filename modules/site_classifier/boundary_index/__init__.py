"""Boundary layer indexing and point location."""

from .boundary_index import BoundaryIndex, NOT_AVAILABLE

__all__ = ['BoundaryIndex', 'NOT_AVAILABLE']
