"""Test data fixtures for visit atlas tests"""

import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

BASE_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


def iso_at(seconds: float, base: datetime = BASE_TIME) -> str:
    """ISO-8601 UTC timestamp a number of seconds after the base time"""
    return (base + timedelta(seconds=seconds)).strftime('%Y-%m-%dT%H:%M:%SZ')


class TestDataFixtures:
    """Centralized test data fixtures"""

    @staticmethod
    def get_test_device_segments():
        """Generate on-device Timeline segments (one activity, two visits)"""
        return [
            {
                "startTime": "2024-01-15T08:00:00.000+01:00",
                "endTime": "2024-01-15T08:30:00.000+01:00",
                "activity": {
                    "start": {"latLng": "48.8566°, 2.3522°"},
                    "end": {"latLng": "48.8606°, 2.3376°"},
                    "topCandidate": {"type": "WALKING"},
                },
            },
            {
                "startTime": "2024-01-15T09:00:00.000+01:00",
                "endTime": "2024-01-15T11:00:00.000+01:00",
                "visit": {
                    "topCandidate": {
                        "placeId": "ChIJLouvre",
                        "semanticType": "TYPE_SEARCHED_ADDRESS",
                        "placeLocation": {"latLng": "48.8606°, 2.3376°"},
                    }
                },
            },
            {
                "startTime": "2024-01-15T12:00:00.000+01:00",
                "endTime": "2024-01-15T12:30:00.000+01:00",
                "visit": {
                    "topCandidate": {
                        "placeID": "ChIJCafe",
                        "placeLocation": "geo:48.8530,2.3499",
                    }
                },
            },
        ]

    @classmethod
    def get_test_device_object(cls):
        """Generate an on-device Timeline export in object form"""
        return {"semanticSegments": cls.get_test_device_segments(), "rawSignals": [], "userLocationProfile": {}}

    @staticmethod
    def get_test_semantic_takeout():
        """Generate Takeout semantic location history"""
        return {
            "timelineObjects": [
                {
                    "placeVisit": {
                        "location": {
                            "latitudeE7": 407484405,
                            "longitudeE7": -739856644,
                            "placeId": "ChIJEmpire",
                            "name": "Empire State Building",
                            "address": "20 W 34th St\nNew York, NY 10001, USA",
                        },
                        "duration": {
                            "startTimestamp": "2024-01-15T14:00:00Z",
                            "endTimestamp": "2024-01-15T15:30:00Z",
                        },
                    }
                },
                {
                    "activitySegment": {
                        "startLocation": {"latitudeE7": 407484405, "longitudeE7": -739856644},
                        "duration": {
                            "startTimestamp": "2024-01-15T15:30:00Z",
                            "endTimestamp": "2024-01-15T16:00:00Z",
                        },
                    }
                },
                {
                    "placeVisit": {
                        "location": {"placeId": "ChIJPark", "address": "Central Park\nNew York, NY, USA"},
                        "centerLatE7": 407828647,
                        "centerLngE7": -739653551,
                        "duration": {
                            "startTimestamp": "2024-01-15T16:00:00Z",
                            "endTimestamp": "2024-01-15T17:00:00Z",
                        },
                    }
                },
            ]
        }

    @staticmethod
    def get_test_records(count: int = 3, step_seconds: float = 300, lat_e7: int = 377749000, lng_e7: int = -1224194000):
        """Generate Records.json raw points at one spot, step_seconds apart"""
        return {
            "locations": [
                {
                    "latitudeE7": lat_e7 + i * 10,
                    "longitudeE7": lng_e7 - i * 10,
                    "accuracy": 15,
                    "timestamp": iso_at(i * step_seconds),
                }
                for i in range(count)
            ]
        }

    @staticmethod
    def get_test_geo_cache():
        """Generate a locality cache keyed by rounded coordinates"""
        return {
            "48.8606,2.3376": {"city": "Paris", "country": "France"},
            "48.853,2.3499": {"city": "Paris", "country": "France"},
            "40.7484,-73.9857": {"city": "New York", "country": "United States"},
            "40.7829,-73.9654": {"city": "New York", "country": "United States"},
        }

    @classmethod
    def create_test_data_files(cls, test_dir: Path):
        """Create one file per export format in the given directory"""
        test_dir.mkdir(exist_ok=True)

        files = {
            'timeline_array.json': cls.get_test_device_segments(),
            'timeline_object.json': cls.get_test_device_object(),
            'semantic.json': cls.get_test_semantic_takeout(),
            'records.json': cls.get_test_records(count=4),
        }
        for filename, data in files.items():
            with open(test_dir / filename, 'w') as f:
                json.dump(data, f, indent=2)

        return {filename: test_dir / filename for filename in files}
