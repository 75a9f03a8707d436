"""Helpers for turning rate-limit response headers into readable text."""

import logging
import math
from datetime import datetime, timezone

from dateutil import parser

log = logging.getLogger(__name__)

RESET_TIME_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def format_reset_time(reset_value):
    """Render an ``X-RateLimit-Reset`` Unix timestamp as a UTC date string.

    Args:
        reset_value (str): Header value, e.g. ``"1700000000"``.

    Returns:
        str or None: e.g. ``"2023-11-14 22:13:20 UTC"``, None if the value is unusable.
    """
    if reset_value is None:
        return None
    try:
        reset_unix = int(float(reset_value))
        return datetime.fromtimestamp(reset_unix, tz=timezone.utc).strftime(RESET_TIME_FORMAT)
    except (TypeError, ValueError, OverflowError, OSError):
        log.debug("Ignoring unusable rate limit reset value %r", reset_value)
        return None


def retry_after_seconds(retry_after, now=None):
    """Convert a ``Retry-After`` header value into a number of seconds.

    The header is either a delay in seconds or an HTTP-date.

    Args:
        retry_after (str): Header value.
        now (datetime): Reference time for HTTP-date values, defaults to current UTC time.

    Returns:
        int or None: Seconds to wait, None if the header is missing or unusable.
    """
    if not retry_after:
        return None
    retry_after = retry_after.strip()
    if retry_after.isdigit():
        return int(retry_after)
    # fractional delays are seconds too, never dates
    try:
        delay = float(retry_after)
    except ValueError:
        pass
    else:
        if not math.isfinite(delay):
            log.debug("Ignoring unusable Retry-After value %r", retry_after)
            return None
        return max(0, math.ceil(delay))
    try:
        retry_at = parser.parse(retry_after)
    except (ValueError, OverflowError):
        log.debug("Ignoring unusable Retry-After value %r", retry_after)
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    return max(0, math.ceil((retry_at - now).total_seconds()))
