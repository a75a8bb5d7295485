"""Geographic utility functions for the heatmap pipeline."""

import math
from typing import Any


def is_valid_coordinates(lat: float, lon: float) -> bool:
    """Check if latitude and longitude are in range.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees

    Returns:
        True if coordinates are valid, False otherwise
    """
    return -90 <= lat <= 90 and -180 <= lon <= 180


def to_float(value: Any) -> float:
    """Parse a raw coordinate component as a float.

    Numbers and numeric strings are converted; anything else (None, booleans,
    containers, unparseable text) becomes NaN so the range check rejects it.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.nan
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


def validate_lat_lng(lat: float, lon: float) -> tuple[float, float] | None:
    """Return the (lat, lon) pair if both components are usable, else None.

    Args:
        lat: Latitude value, already parsed
        lon: Longitude value, already parsed

    Returns:
        Tuple of (lat, lon) or None if either is NaN or out of range
    """
    if math.isnan(lat) or math.isnan(lon):
        return None

    if not is_valid_coordinates(lat, lon):
        return None

    return lat, lon
