import logging
from utils.geo import coord_key

logger = logging.getLogger(__name__)


class VisitAggregator:
    """Roll visits up into place, city and country summaries"""

    def __init__(self, geo_cache: dict | None = None):
        # Read-only "lat,lng" -> {'city', 'country'} lookup supplied with the request
        self.geo_cache = geo_cache or {}

    def lookup_locality(self, key: str) -> tuple[str | None, str | None]:
        """Return (city, country) for a coordinate key, None for unknown parts"""
        locality = self.geo_cache.get(key)
        if not isinstance(locality, dict):
            return None, None
        return locality.get('city') or None, locality.get('country') or None

    def resolve_place_name(self, visit: dict, key: str) -> str:
        """Pick a display name: name, first address line, placeId, then coordinate key"""
        if visit.get('name'):
            return visit['name']
        address = visit.get('address')
        if isinstance(address, str) and address:
            first_line = address.split('\n')[0]
            if first_line:
                return first_line
        return visit.get('placeId') or key

    @staticmethod
    def city_key(city: str, country: str | None) -> str:
        return f"{city}, {country}" if country else city

    @staticmethod
    def add_to_row(rows: dict, key: str, seconds: float):
        row = rows.setdefault(key, {'name': key, 'visits': 0, 'seconds': 0})
        row['visits'] += 1
        row['seconds'] += seconds

    @staticmethod
    def rank(rows: dict) -> list[dict]:
        """Sort rows by total seconds, then visit count, both descending"""
        return sorted(rows.values(), key=lambda row: (row['seconds'], row['visits']), reverse=True)

    def aggregate(self, visits: list[dict]) -> dict:
        """
        Build ranked summaries from a visit list

        Returns:
            dict: {'countries': [...], 'cities': [...], 'places': [...]}
        """
        places = {}
        cities = {}
        countries = {}
        unresolved = 0

        for visit in visits:
            key = coord_key(visit['lat'], visit['lng'])
            city, country = self.lookup_locality(key)
            seconds = visit.get('seconds') or 0

            place_key = visit.get('placeId') or key
            if place_key not in places:
                places[place_key] = {
                    'key': place_key,
                    'name': self.resolve_place_name(visit, key),
                    'lat': visit['lat'],
                    'lng': visit['lng'],
                    'visits': 0,
                    'seconds': 0,
                    'city': city,
                    'country': country,
                }
            place = places[place_key]
            place['visits'] += 1
            place['seconds'] += seconds
            # First known locality wins
            place['city'] = place['city'] or city
            place['country'] = place['country'] or country

            if city:
                self.add_to_row(cities, self.city_key(city, country), seconds)
            if country:
                self.add_to_row(countries, country, seconds)
            if not city and not country:
                unresolved += 1

        logger.info(
            f"Aggregated {len(visits)} visits into {len(places)} places, {len(cities)} cities, {len(countries)} countries"
        )
        if unresolved:
            logger.debug(f"{unresolved} visits had no locality in the geo cache")

        return {
            'countries': self.rank(countries),
            'cities': self.rank(cities),
            'places': self.rank(places),
        }
