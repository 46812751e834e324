"""Site classification: input parsing, point classification and chunked runs."""

from .input_parser import (
    ColumnMapping,
    PointBatch,
    detect_columns,
    parse_coordinate,
    parse_identifier,
    parse_points,
    load_point_batch,
)
from .point_classifier import PointClassifier
from .chunked_runner import ChunkedRunner, ChunkedRun, DEFAULT_CHUNK_SIZE

__all__ = [
    'ColumnMapping',
    'PointBatch',
    'detect_columns',
    'parse_coordinate',
    'parse_identifier',
    'parse_points',
    'load_point_batch',
    'PointClassifier',
    'ChunkedRunner',
    'ChunkedRun',
    'DEFAULT_CHUNK_SIZE',
]
