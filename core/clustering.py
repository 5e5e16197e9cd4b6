import logging
from config import STAY_MAX_DISTANCE_KM, STAY_MAX_GAP_MINUTES, STAY_MIN_DWELL_MINUTES
from dataclasses import dataclass, replace
from utils.geo import distance_km
from utils.timestamps import duration_seconds, gap_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StayAccumulator:
    """Running state of one dwell episode"""

    start: str
    end: str
    n: int
    sum_lat: float
    sum_lng: float
    place_id: str | None = None

    @classmethod
    def seed(cls, point: dict) -> 'StayAccumulator':
        """Open an episode at a single point"""
        return cls(
            start=point['ts'],
            end=point['ts'],
            n=1,
            sum_lat=point['lat'],
            sum_lng=point['lng'],
            place_id=point.get('placeId'),
        )

    @property
    def centroid(self) -> tuple[float, float]:
        return self.sum_lat / self.n, self.sum_lng / self.n

    def absorb(self, point: dict) -> 'StayAccumulator':
        """Return the episode extended by one more point"""
        return replace(
            self,
            end=point['ts'],
            n=self.n + 1,
            sum_lat=self.sum_lat + point['lat'],
            sum_lng=self.sum_lng + point['lng'],
            place_id=self.place_id or point.get('placeId'),
        )


class StayClusterer:
    """Collapse a chronological GPS point stream into stay visits"""

    def __init__(
        self,
        max_distance_km: float = STAY_MAX_DISTANCE_KM,
        max_gap_minutes: float = STAY_MAX_GAP_MINUTES,
        min_dwell_minutes: float = STAY_MIN_DWELL_MINUTES,
    ):
        self.max_distance_km = max_distance_km
        self.max_gap_seconds = max_gap_minutes * 60
        self.min_dwell_seconds = min_dwell_minutes * 60

    def belongs_to(self, episode: StayAccumulator, point: dict) -> bool:
        """Check whether a point is close enough in space and time to extend the episode"""
        center_lat, center_lng = episode.centroid
        if distance_km(center_lat, center_lng, point['lat'], point['lng']) > self.max_distance_km:
            return False

        gap = gap_seconds(episode.end, point['ts'])
        return gap is not None and gap <= self.max_gap_seconds

    def finalize(self, episode: StayAccumulator) -> dict | None:
        """Convert a closed episode to a stay visit, or None if it is too short"""
        seconds = duration_seconds(episode.start, episode.end)
        if seconds < self.min_dwell_seconds:
            return None

        lat, lng = episode.centroid
        return {
            'kind': 'stay',
            'lat': lat,
            'lng': lng,
            'placeId': episode.place_id or None,
            'name': None,
            'address': None,
            'start': episode.start,
            'end': episode.end,
            'seconds': seconds,
        }

    def cluster(self, points: list[dict]) -> list[dict]:
        """
        Group points into dwell episodes and return the ones that last long enough

        Args:
            points: raw points with 'lat', 'lng', 'ts' and optional 'placeId'.
                Sorted by 'ts' here; ISO-8601 strings order chronologically.

        Returns:
            list: stay visits, in chronological order
        """
        stays = []
        episode = None
        episodes = 0

        for point in sorted(points, key=lambda p: p['ts']):
            if episode is not None and self.belongs_to(episode, point):
                episode = episode.absorb(point)
                continue

            if episode is not None:
                stay = self.finalize(episode)
                if stay:
                    stays.append(stay)
            episode = StayAccumulator.seed(point)
            episodes += 1

        if episode is not None:
            stay = self.finalize(episode)
            if stay:
                stays.append(stay)

        logger.info(f"Clustered {len(points)} points into {episodes} episodes, {len(stays)} stays kept")
        return stays
