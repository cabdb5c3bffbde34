"""Helpers for working with timezone-aware datetimes.

Timestamps are handled as aware datetimes in the domain layer and persisted as
naive UTC values. UTC has no repeated wall-clock hour, so ordering by the stored
column and the "older than N minutes" cutoff stay correct across DST changes on
every database backend. The application timezone is only used for display.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from campusshare.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "America/New_York"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the timezone configured through ``APP_TIMEZONE``.

    Unknown names fall back to ``America/New_York``; ``UTC+05:30`` style
    offsets are accepted as fixed offsets.
    """

    tz_name = (get_settings().app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def now_utc_naive_datetime() -> datetime:
    """Return the current UTC time without ``tzinfo``, as stored in the database."""

    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Express ``value`` in the app timezone, treating naive values as local."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without ``tzinfo``."""

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.astimezone(timezone.utc).replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    """Return a stored naive UTC ``value`` expressed in the app timezone."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_app_timezone())


def minutes_since(value: datetime, now: datetime) -> int:
    """Return the whole number of minutes elapsed between ``value`` and ``now``."""

    elapsed = ensure_app_timezone(now) - ensure_app_timezone(value)  # type: ignore[operator]
    return max(0, round(elapsed.total_seconds() / 60))


def _resolve_timezone(tz_name: str) -> tzinfo:
    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            offset = timedelta(
                hours=int(match.group("hours")),
                minutes=int(match.group("minutes") or 0),
            )
            return timezone(sign * offset)
        if tz_name.upper() in ("UTC", "GMT"):
            return timezone.utc
    try:
        return ZoneInfo(_DEFAULT_TIMEZONE)
    except ZoneInfoNotFoundError:  # pragma: no cover - no tz database installed
        return timezone.utc
