"""Utility modules for the heatmap pipeline."""

from heatmap.utils.geo import is_valid_coordinates, to_float, validate_lat_lng
from heatmap.utils.http import HTTPError, RateLimitError, fetch_with_retry
from heatmap.utils.logging import setup_logging

__all__ = [
    # HTTP utilities
    "fetch_with_retry",
    "HTTPError",
    "RateLimitError",
    # Logging
    "setup_logging",
    # Geographic utilities
    "is_valid_coordinates",
    "to_float",
    "validate_lat_lng",
]
