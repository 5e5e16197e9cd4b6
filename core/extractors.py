import logging
from config import DEFAULT_SEMANTIC_TYPE
from core.clustering import StayClusterer
from core.detector import DataType
from utils.fields import resolve_field
from utils.geo import e7_to_deg, is_finite_coordinate, is_number, parse_geo_string
from utils.timestamps import duration_seconds, iso_from_epoch_ms

logger = logging.getLogger(__name__)


def make_visit(lat, lng, place_id=None, name=None, address=None, start=None, end=None, kind='placeVisit') -> dict:
    """Build a uniform visit record"""
    return {
        'kind': kind,
        'lat': lat,
        'lng': lng,
        'placeId': place_id or None,
        'name': name or None,
        'address': address or None,
        'start': start or None,
        'end': end or None,
        'seconds': duration_seconds(start, end),
    }


class DeviceExportExtractor:
    """Extract place visits from on-device timeline exports (array or semanticSegments form)"""

    clusters_points = False

    def iter_segments(self, document):
        if isinstance(document, list):
            segments = document
        elif isinstance(document, dict):
            segments = document.get('semanticSegments') or []
        else:
            segments = []
        for segment in segments:
            if isinstance(segment, dict):
                yield segment

    def extract_visit(self, segment: dict) -> dict | None:
        """Convert one segment to a visit; None for non-visit segments or missing geo"""
        visit = segment.get('visit')
        top_candidate = visit.get('topCandidate') if isinstance(visit, dict) else None
        if not isinstance(top_candidate, dict) or not top_candidate:
            return None

        location = parse_geo_string(top_candidate.get('placeLocation'))
        if not location:
            return None

        return make_visit(
            location['lat'],
            location['lng'],
            place_id=resolve_field(top_candidate, 'place_id'),
            name=resolve_field(top_candidate, 'semantic_type', DEFAULT_SEMANTIC_TYPE),
            start=segment.get('startTime'),
            end=segment.get('endTime'),
        )

    def extract_document(self, document) -> list[dict]:
        visits = []
        skipped = 0

        for segment in self.iter_segments(document):
            visit = self.extract_visit(segment)
            if visit is None:
                skipped += 1
                continue
            visits.append(visit)

        logger.debug(f"Device export document: {len(visits)} visits, {skipped} segments skipped")
        return visits

    def extract(self, documents: list) -> list[dict]:
        """Extract visits from every document, each in its own array or object form"""
        visits = []
        for document in documents:
            visits.extend(self.extract_document(document))

        logger.info(f"Extracted {len(visits)} visits from {len(documents)} device export documents")
        return visits


class SemanticTakeoutExtractor:
    """Extract place visits from Takeout semantic location history (timelineObjects)"""

    clusters_points = False

    def resolve_timestamp(self, duration: dict, prefix: str) -> str | None:
        """Read an ISO timestamp, falling back to the legacy epoch-ms field"""
        timestamp = duration.get(f"{prefix}Timestamp")
        if timestamp:
            return timestamp
        return iso_from_epoch_ms(duration.get(f"{prefix}TimestampMs"))

    def extract_visit(self, timeline_object: dict) -> dict | None:
        place_visit = timeline_object.get('placeVisit')
        if not isinstance(place_visit, dict) or not place_visit:
            return None

        location = place_visit.get('location')
        if not isinstance(location, dict):
            location = {}
        duration = place_visit.get('duration')
        if not isinstance(duration, dict):
            duration = {}

        lat_e7 = location.get('latitudeE7') if is_number(location.get('latitudeE7')) else place_visit.get('centerLatE7')
        lng_e7 = location.get('longitudeE7') if is_number(location.get('longitudeE7')) else place_visit.get('centerLngE7')
        lat = e7_to_deg(lat_e7)
        lng = e7_to_deg(lng_e7)
        if not is_finite_coordinate(lat, lng):
            return None

        return make_visit(
            lat,
            lng,
            place_id=resolve_field(location, 'place_id'),
            name=location.get('name'),
            address=location.get('address'),
            start=self.resolve_timestamp(duration, 'start'),
            end=self.resolve_timestamp(duration, 'end'),
        )

    def extract(self, documents: list) -> list[dict]:
        visits = []
        skipped = 0

        for document in documents:
            if not isinstance(document, dict):
                continue
            for timeline_object in document.get('timelineObjects') or []:
                visit = self.extract_visit(timeline_object) if isinstance(timeline_object, dict) else None
                if visit is None:
                    skipped += 1
                    continue
                visits.append(visit)

        logger.info(f"Extracted {len(visits)} place visits from timelineObjects, {skipped} objects skipped")
        return visits


class RecordsTakeoutExtractor:
    """Extract raw points from Takeout Records.json and cluster them into stays"""

    clusters_points = True

    def __init__(self, clusterer: StayClusterer | None = None):
        self.clusterer = clusterer or StayClusterer()

    def extract_point(self, record: dict) -> dict | None:
        lat = e7_to_deg(record.get('latitudeE7'))
        lng = e7_to_deg(record.get('longitudeE7'))
        timestamp = record.get('timestamp') or iso_from_epoch_ms(record.get('timestampMs'))
        if not is_finite_coordinate(lat, lng) or not isinstance(timestamp, str) or not timestamp:
            return None
        return {'lat': lat, 'lng': lng, 'ts': timestamp, 'placeId': resolve_field(record, 'place_id')}

    def extract(self, documents: list) -> list[dict]:
        """Return the raw points of every document; stays come from cluster()"""
        points = []
        skipped = 0

        for document in documents:
            if not isinstance(document, dict):
                continue
            for record in document.get('locations') or []:
                point = self.extract_point(record) if isinstance(record, dict) else None
                if point is None:
                    skipped += 1
                    continue
                points.append(point)

        logger.info(f"Extracted {len(points)} location records, {skipped} records skipped")
        return points

    def cluster(self, points: list[dict]) -> list[dict]:
        return self.clusterer.cluster(points)


EXTRACTORS = {
    DataType.DEVICE_EXPORT_ARRAY: DeviceExportExtractor,
    DataType.DEVICE_EXPORT_OBJECT: DeviceExportExtractor,
    DataType.SEMANTIC_TAKEOUT: SemanticTakeoutExtractor,
    DataType.RECORDS_TAKEOUT: RecordsTakeoutExtractor,
}
