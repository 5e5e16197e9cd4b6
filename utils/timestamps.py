import logging
from datetime import UTC, datetime, timedelta
from dateutil.parser import parse as parse_date

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


def parse_iso(timestamp_str) -> datetime | None:
    """Parse a timestamp string to an aware datetime, None if unparseable"""
    if not timestamp_str or not isinstance(timestamp_str, str):
        return None
    try:
        dt = parse_date(timestamp_str)
    except (ValueError, OverflowError) as e:
        logger.debug(f"Failed to parse timestamp '{timestamp_str}': {e}")
        return None

    # Naive timestamps are taken as UTC so they compare with aware ones
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def iso_from_epoch_ms(value) -> str | None:
    """Convert epoch milliseconds (number or numeric string) to an ISO-8601 UTC string"""
    if value in (None, '') or isinstance(value, bool):
        return None
    try:
        dt = EPOCH + timedelta(milliseconds=float(value))
    except (TypeError, ValueError, OverflowError):
        return None
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def duration_seconds(start, end) -> float:
    """Seconds between two timestamps; 0 when either is unparseable or end is not after start"""
    start_dt = parse_iso(start)
    end_dt = parse_iso(end)
    if start_dt is None or end_dt is None or end_dt <= start_dt:
        return 0
    return (end_dt - start_dt).total_seconds()


def gap_seconds(earlier, later) -> float | None:
    """Signed seconds from earlier to later, None when either is unparseable"""
    earlier_dt = parse_iso(earlier)
    later_dt = parse_iso(later)
    if earlier_dt is None or later_dt is None:
        return None
    return (later_dt - earlier_dt).total_seconds()
