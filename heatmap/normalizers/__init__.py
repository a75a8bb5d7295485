"""
Data normalization utilities.

These modules convert loosely-shaped source entries into NormalizedRecord
objects.
"""

from .coordinates import (
    HOME_COORDINATE_KEYS,
    INSTITUTION_COORDINATE_KEYS,
    extract_coordinates,
    parse_coordinates,
)
from .records import normalize, normalize_document, normalize_entry

__all__ = [
    'normalize',
    'normalize_document',
    'normalize_entry',
    'parse_coordinates',
    'extract_coordinates',
    'HOME_COORDINATE_KEYS',
    'INSTITUTION_COORDINATE_KEYS',
]
