"""
Coordinate extraction and validation.

Source documents come from more than one generator, so the same location can
live under several keys and be encoded as a list, an object or a "lat,lng"
string. Each alias table below is tried in order; the first key that yields a
parseable, in-range pair wins.
"""

from collections.abc import Mapping
from typing import Any, Optional

from loguru import logger

from heatmap.models import Location
from heatmap.utils.geo import to_float, validate_lat_lng

# Home coordinates have a generic "coordinates" fallback that institution
# coordinates do not. Keep the two tables as they are.
HOME_COORDINATE_KEYS = (
    "coordinates_domicile",
    "coordinatesDomicile",
    "coordinates",
    "coordonneesDomicile",
    "coordDomicile",
    "latLngDomicile",
)

INSTITUTION_COORDINATE_KEYS = (
    "coordinates_etablissement",
    "coordinatesEtablissement",
    "coordonneesEtablissement",
    "coordEtablissement",
    "latLngEtablissement",
)

# Keys looked up inside an object-shaped coordinate, in priority order
LATITUDE_KEYS = ("lat", "latitude", "y")
LONGITUDE_KEYS = ("lng", "longitude", "lon", "x")


def _first_present(obj: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = obj.get(key)
        if value is not None:
            return value
    return None


def parse_coordinates(value: Any) -> Optional[Location]:
    """
    Decode one raw coordinate value into a validated (lat, lng) pair.

    Accepts:
    - a list/tuple with at least two elements: [lat, lng, ...]
    - a mapping with lat/latitude/y and lng/longitude/lon/x
    - a string containing a comma: "lat, lng"

    Args:
        value: Raw value from a source entry

    Returns:
        (lat, lng) tuple, or None if the value cannot be decoded or is out of range
    """
    if not value:
        return None

    if isinstance(value, (list, tuple)):
        if len(value) >= 2:
            return validate_lat_lng(to_float(value[0]), to_float(value[1]))
        return None

    if isinstance(value, Mapping):
        lat = _first_present(value, LATITUDE_KEYS)
        lng = _first_present(value, LONGITUDE_KEYS)
        if lat is None or lng is None:
            return None
        return validate_lat_lng(to_float(lat), to_float(lng))

    if isinstance(value, str) and "," in value:
        parts = value.split(",")
        return validate_lat_lng(to_float(parts[0]), to_float(parts[1]))

    return None


def extract_coordinates(entry: Mapping, keys: tuple[str, ...]) -> Optional[Location]:
    """
    Find the first valid location among candidate keys of a raw entry.

    Args:
        entry: Raw source entry
        keys: Candidate keys in priority order

    Returns:
        (lat, lng) tuple or None when no key holds a valid location
    """
    for key in keys:
        value = entry.get(key)
        if not value:
            continue
        coords = parse_coordinates(value)
        if coords:
            logger.debug(f"Coordinates found under '{key}': {coords}")
            return coords
    return None


def extract_home_location(entry: Mapping) -> Optional[Location]:
    return extract_coordinates(entry, HOME_COORDINATE_KEYS)


def extract_institution_location(entry: Mapping) -> Optional[Location]:
    return extract_coordinates(entry, INSTITUTION_COORDINATE_KEYS)
