import logging
import math
from config import COORD_KEY_PRECISION, E7_SCALE, EARTH_RADIUS_KM
from geopy.distance import great_circle
from utils.fields import resolve_field

logger = logging.getLogger(__name__)

DEGREE_SIGN = '°'
GEO_SCHEME = 'geo:'


def is_number(value) -> bool:
    """True for int/float values, excluding bools"""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def e7_to_deg(value) -> float | None:
    """Convert a fixed-point E7 coordinate to decimal degrees"""
    if not is_number(value):
        return None
    try:
        return value / E7_SCALE
    except OverflowError:
        logger.debug("E7 value out of float range")
        return None


def is_finite_coordinate(lat, lng) -> bool:
    return is_number(lat) and is_number(lng) and math.isfinite(lat) and math.isfinite(lng)


def parse_geo_string(value) -> dict | None:
    """
    Parse a free-form coordinate string into {'lat', 'lng'}

    Accepts "geo:12.34,-56.78", "12.34°, -56.78°" or a location object carrying
    the string under one of its lat_lng aliases. Returns None when fewer than two
    numeric tokens are present.
    """
    if not value:
        return None

    text = value
    if isinstance(value, dict):
        text = resolve_field(value, 'lat_lng')
    if not isinstance(text, str):
        return None

    text = text.strip()
    if text[: len(GEO_SCHEME)].lower() == GEO_SCHEME:
        text = text[len(GEO_SCHEME) :]
    text = text.replace(DEGREE_SIGN, '')

    parts = text.split(',')
    if len(parts) < 2:
        return None

    try:
        lat = float(parts[0].strip())
        lng = float(parts[1].strip())
    except ValueError:
        return None

    if not is_finite_coordinate(lat, lng):
        return None

    return {'lat': lat, 'lng': lng}


def round_coordinate(value: float, digits: int = COORD_KEY_PRECISION) -> float:
    """Round half-up to the given number of decimals"""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _format_number(value: float) -> str:
    if value == 0:
        return '0'
    text = repr(value)
    if text.endswith('.0'):
        text = text[:-2]
    return text


def coord_key(lat: float, lng: float, digits: int = COORD_KEY_PRECISION) -> str:
    """Build the "lat,lng" key used by locality caches"""
    return f"{_format_number(round_coordinate(lat, digits))},{_format_number(round_coordinate(lng, digits))}"


def distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres on a sphere of EARTH_RADIUS_KM"""
    try:
        return great_circle((lat1, lng1), (lat2, lng2), radius=EARTH_RADIUS_KM).km
    except ValueError as e:
        logger.debug(f"Error calculating distance: {e}")
        return float('inf')
