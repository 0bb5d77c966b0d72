"""
Due-date normalization.

Every due date is stored, compared and sent over the wire in one canonical
form: ISO-8601 UTC with millisecond precision and a `Z` suffix, e.g.
``2024-12-01T00:00:00.000Z``. The format is fixed width, so string order
is chronological order.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Optional

_STRICT_RE = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2}):([0-9]{2})(?:\.([0-9]+))?Z?",
    re.ASCII,
)


def to_canonical(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    # always four year digits, 0999 included
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{dt.microsecond // 1000:03d}Z"
    )


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_due_date(value: Any) -> Optional[str]:
    """
    Return the canonical form of `value`, or None when it is not a strict
    ISO-8601 date-time naming a real instant.

    No lenient fallback: "2024-12-01" or "Dec 1 2024" are rejected outright.
    A missing `Z` still means UTC. Fractions beyond milliseconds are dropped.
    """
    if not isinstance(value, str):
        return None
    m = _STRICT_RE.fullmatch(value)
    if not m:
        return None

    year, month, day, hour, minute, second = (int(g) for g in m.groups()[:6])
    fraction = m.group(7) or ""
    micro = int((fraction + "000000")[:6])
    try:
        dt = datetime(year, month, day, hour, minute, second, micro, tzinfo=timezone.utc)
    except ValueError:
        # Feb 30, hour 24, minute 60...
        return None
    return to_canonical(dt)


def parse_instant(value: str) -> Optional[datetime]:
    """
    Lenient parse used for query bounds: date-only or full ISO-8601, with or
    without an offset. Date-only and naive values are taken as UTC.
    """
    raw = value.strip()
    if not raw:
        return None
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
