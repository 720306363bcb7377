import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

from dateutil import parser as date_parser
from dateutil import tz

_TITLE_DELIMITERS_RE = re.compile(r"[:|-]")

# RFC 822 zone names that feeds still use in pubDate.
_RFC822_TZINFOS = {
    "UT": tz.UTC,
    "GMT": tz.UTC,
    "Z": tz.UTC,
    "EST": tz.tzoffset("EST", -5 * 3600),
    "EDT": tz.tzoffset("EDT", -4 * 3600),
    "CST": tz.tzoffset("CST", -6 * 3600),
    "CDT": tz.tzoffset("CDT", -5 * 3600),
    "MST": tz.tzoffset("MST", -7 * 3600),
    "MDT": tz.tzoffset("MDT", -6 * 3600),
    "PST": tz.tzoffset("PST", -8 * 3600),
    "PDT": tz.tzoffset("PDT", -7 * 3600),
}


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def hostname(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def bare_hostname(url: str) -> str:
    host = hostname(url)
    if host.startswith("www."):
        host = host[4:]
    return host


def shorten_title(value: str) -> str:
    """Keep the site name from titles like ``"Site: tagline"``."""
    return _TITLE_DELIMITERS_RE.split(value, maxsplit=1)[0].strip()


def parse_timestamp(value: str) -> Optional[datetime]:
    try:
        return ensure_utc(date_parser.parse(value, tzinfos=_RFC822_TZINFOS))
    except (ValueError, OverflowError):
        return None
