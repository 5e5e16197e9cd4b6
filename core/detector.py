import logging
from enum import Enum

logger = logging.getLogger(__name__)


class DataType(str, Enum):
    """Known location-history export shapes"""

    DEVICE_EXPORT_ARRAY = 'device_export_array'
    DEVICE_EXPORT_OBJECT = 'device_export_object'
    SEMANTIC_TAKEOUT = 'semantic_takeout'
    RECORDS_TAKEOUT = 'records_takeout'
    UNKNOWN = 'unknown'


# Object shapes are recognised by the array-valued field they carry, checked in order
OBJECT_SHAPE_FIELDS = [
    ('semanticSegments', DataType.DEVICE_EXPORT_OBJECT),
    ('timelineObjects', DataType.SEMANTIC_TAKEOUT),
    ('locations', DataType.RECORDS_TAKEOUT),
]


def detect_data_type(document) -> DataType:
    """Classify a parsed JSON document into one of the known export shapes"""
    if isinstance(document, list):
        return DataType.DEVICE_EXPORT_ARRAY

    if isinstance(document, dict):
        for field, data_type in OBJECT_SHAPE_FIELDS:
            if isinstance(document.get(field), list):
                return data_type

    logger.debug(f"Unrecognised document shape: {type(document).__name__}")
    return DataType.UNKNOWN
