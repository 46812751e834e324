"""Geodata access layer: boundary feature layers and tabular reference data."""

from .layer_schema import LayerSchema, UNKNOWN_NAME
from .feature_layer import (
    BoundaryFeature,
    FeatureLayer,
    build_feature_layer,
    load_feature_layer,
)
from .tabular import read_rows, frame_to_rows, pick_value
from .conversion import SOURCE_FILES, convert_layer, convert_boundary_sources

__all__ = [
    "LayerSchema",
    "UNKNOWN_NAME",
    "BoundaryFeature",
    "FeatureLayer",
    "build_feature_layer",
    "load_feature_layer",
    "read_rows",
    "frame_to_rows",
    "pick_value",
    "SOURCE_FILES",
    "convert_layer",
    "convert_boundary_sources",
]
