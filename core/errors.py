class LocationHistoryError(Exception):
    """Base class for failures that end a load request"""


class AcquisitionFailure(LocationHistoryError):
    """A source could not be fetched or read"""


class NoInputFailure(LocationHistoryError):
    """The source resolved to zero documents"""


class UnknownFormatFailure(LocationHistoryError):
    """The first document matches none of the known export shapes"""


class MalformedJsonFailure(LocationHistoryError):
    """A document is not valid JSON"""
