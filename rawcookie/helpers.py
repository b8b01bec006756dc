"""Various helper functions"""

import datetime
import ipaddress
import logging
import os
import re
import sys
from typing import Optional, Union

from .log import package_logger

__all__ = ("format_http_date", "is_ip_address", "parse_http_date", "unquote")

DEBUG: bool = not sys.flags.ignore_environment and bool(
    os.environ.get("RAWCOOKIE_DEBUG")
)

if DEBUG:
    package_logger.setLevel(logging.DEBUG)
    package_logger.addHandler(logging.StreamHandler())


DATE_TOKENS_RE = re.compile(
    r"[\x09\x20-\x2F\x3B-\x40\x5B-\x60\x7B-\x7E]*"
    r"(?P<token>[\x00-\x08\x0A-\x1F\d:a-zA-Z\x7F-\xFF]+)"
)
DATE_HMS_TIME_RE = re.compile(r"(\d{1,2}):(\d{1,2}):(\d{1,2})")
DATE_DAY_OF_MONTH_RE = re.compile(r"(\d{1,2})")
DATE_MONTH_RE = re.compile(
    "(jan)|(feb)|(mar)|(apr)|(may)|(jun)|(jul)|(aug)|(sep)|(oct)|(nov)|(dec)",
    re.I,
)
DATE_YEAR_RE = re.compile(r"(\d{2,4})")

# Weekday and month names for HTTP date/time formatting;
# always English!
_WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_NAMES = (
    "",  # Dummy so we can use 1-based month numbers
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def parse_http_date(date_str: Optional[str]) -> Optional[datetime.datetime]:
    """Implements date string parsing adhering to RFC 6265."""
    if not date_str:
        return None

    found_time = False
    found_day_of_month = False
    found_month = False
    found_year = False

    hour = minute = second = 0
    day_of_month = 0
    month = 0
    year = 0

    for token_match in DATE_TOKENS_RE.finditer(date_str):
        token = token_match.group("token")

        if not found_time:
            time_match = DATE_HMS_TIME_RE.match(token)
            if time_match:
                found_time = True
                hour, minute, second = (int(s) for s in time_match.groups())
                continue

        if not found_day_of_month:
            day_of_month_match = DATE_DAY_OF_MONTH_RE.match(token)
            if day_of_month_match:
                found_day_of_month = True
                day_of_month = int(day_of_month_match.group())
                continue

        if not found_month:
            month_match = DATE_MONTH_RE.match(token)
            if month_match:
                found_month = True
                assert month_match.lastindex is not None
                month = month_match.lastindex
                continue

        if not found_year:
            year_match = DATE_YEAR_RE.match(token)
            if year_match:
                found_year = True
                year = int(year_match.group())

    if 70 <= year <= 99:
        year += 1900
    elif 0 <= year <= 69:
        year += 2000

    if False in (found_day_of_month, found_month, found_year, found_time):
        return None

    if not 1 <= day_of_month <= 31:
        return None

    if year < 1601 or hour > 23 or minute > 59 or second > 59:
        return None

    try:
        return datetime.datetime(
            year,
            month,
            day_of_month,
            hour,
            minute,
            second,
            tzinfo=datetime.timezone.utc,
        )
    except ValueError:
        # Feb 30 and friends
        return None


def format_http_date(dt: datetime.datetime) -> str:
    """Format a datetime as an IMF-fixdate, e.g. ``Wed, 09 Jun 2021 10:18:14 GMT``.

    Naive datetimes are taken to be in UTC.
    """
    if dt.tzinfo is not None:
        dt = dt.astimezone(datetime.timezone.utc)
    return "%s, %02d %3s %4d %02d:%02d:%02d GMT" % (
        _WEEKDAY_NAMES[dt.weekday()],
        dt.day,
        _MONTH_NAMES[dt.month],
        dt.year,
        dt.hour,
        dt.minute,
        dt.second,
    )


def unquote(text: str) -> str:
    """Strip one pair of surrounding double quotes and undo backslash escapes."""
    # If there are no quotes, return as-is
    if len(text) < 2 or text[0] != '"' or text[-1] != '"':
        return text
    text = text[1:-1]
    return text.replace('\\"', '"').replace("\\\\", "\\")


def is_ip_address(host: Union[str, bytes, None]) -> bool:
    """Check if host looks like an IPv4 or IPv6 address."""
    if not host:
        return False
    if isinstance(host, (bytes, bytearray, memoryview)):
        host = bytes(host).decode("ascii", "replace")
    if not isinstance(host, str):
        raise TypeError(f"{host} [{type(host)}] is not a str or bytes")
    try:
        ipaddress.ip_address(host.strip("[]"))
    except ValueError:
        return False
    return True
