from decouple import config
from pathlib import Path

# Directory paths
OUTPUT_DIR = Path(config('OUTPUT_DIR', default='results'))

# File names
RESULTS_FILE = 'results.json'
PLACES_CSV_FILE = 'places.csv'
CITIES_CSV_FILE = 'cities.csv'
COUNTRIES_CSV_FILE = 'countries.csv'

# Request protocol
LOAD_REQUEST_TYPE = 'load'
DEFAULT_PREVIEW_LIMIT = config('PREVIEW_LIMIT', default=500, cast=int)
FETCH_TIMEOUT_SECONDS = config('FETCH_TIMEOUT_SECONDS', default=60.0, cast=float)

# Geographic constants
EARTH_RADIUS_KM = config('EARTH_RADIUS_KM', default=6371.0, cast=float)
COORD_KEY_PRECISION = config('COORD_KEY_PRECISION', default=4, cast=int)
E7_SCALE = 1e7

# Stay clustering thresholds
STAY_MAX_DISTANCE_KM = config('STAY_MAX_DISTANCE_KM', default=0.2, cast=float)      # 200 m around the running centroid
STAY_MAX_GAP_MINUTES = config('STAY_MAX_GAP_MINUTES', default=30.0, cast=float)
STAY_MIN_DWELL_MINUTES = config('STAY_MIN_DWELL_MINUTES', default=10.0, cast=float)

# Error messages
NO_INPUT_MESSAGE = "No JSON files provided."
UNKNOWN_FORMAT_MESSAGE = "Couldn't detect format. Expected Takeout or on-device export."

# Field aliases across export versions (first non-empty value wins)
FIELD_ALIASES = {
    'place_id': ['placeId', 'placeID'],
    'semantic_type': ['semanticType'],
    'lat_lng': ['latLng'],
}

DEFAULT_SEMANTIC_TYPE = 'Unknown'
