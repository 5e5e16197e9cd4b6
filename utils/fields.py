from config import FIELD_ALIASES


def resolve_field(record: dict, attribute: str, default=None):
    """Return the first non-empty value among the aliases of a logical attribute"""
    if not isinstance(record, dict):
        return default

    for name in FIELD_ALIASES[attribute]:
        value = record.get(name)
        if value not in (None, ''):
            return value

    return default
