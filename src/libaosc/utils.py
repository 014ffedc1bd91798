import datetime
import logging
import re

from dateutil.parser import parse as parse_date

logger = logging.getLogger(__name__)

UINT64_MAX = 2**64 - 1

_UINT_RE = re.compile(r"\+?[0-9]+")


def try_parse_date(date_str: str | None) -> datetime.datetime | None:
    """Try to parse a date string into a timestamp.

    Args:
        date_str: The date string to parse (e.g., from HTTP Last-Modified header)

    Returns:
        The parsed timestamp, or None if parsing failed or date_str is None
    """

    try:
        return parse_date(date_str) if date_str else None
    except Exception as e:
        logger.debug(f"Failed to parse date '{date_str}': {e}")
        return None


def try_parse_uint(value: str | None) -> int | None:
    """Try to parse a control field value as an unsigned 64-bit integer.

    Only ASCII decimal digits (with an optional leading ``+``) are accepted.

    Returns:
        The parsed number, or None if value is None, not a number, or out of range
    """
    if value is None:
        return None
    value = value.strip()
    if not _UINT_RE.fullmatch(value):
        return None
    number = int(value)
    if number > UINT64_MAX:
        return None
    return number
