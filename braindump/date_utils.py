"""Shared timestamp parsing and formatting helpers."""
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

# RFC 3339 date-time with a mandatory offset (what the CLI accepts).
_RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(?:\.\d+)?(?:[Zz]|[+-]\d{2}:\d{2})$"
)


# Python < 3.11 fromisoformat only takes 3 or 6 fractional digits.
_FRACTION_RE = re.compile(r"\.(\d+)")


def _pad_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def _as_utc(value: datetime) -> datetime | None:
    """Normalize to UTC; None when the offset pushes it out of the datetime range."""
    dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        return None


def _parse_datetime_token(token: str) -> datetime | None:
    cleaned = token.strip()
    if not cleaned:
        return None
    iso = _FRACTION_RE.sub(_pad_fraction, cleaned.replace("Z", "+00:00").replace("z", "+00:00"), count=1)
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M:%S.%f"):
        try:
            return datetime.strptime(cleaned, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Convert a loosely typed source timestamp into an aware UTC datetime.

    Accepts ISO 8601 / RFC 3339 strings, SQLite ``YYYY-MM-DD HH:MM:SS`` text and
    epoch seconds. Naive values are taken as UTC. Anything else is ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        parsed = _parse_datetime_token(value)
        if parsed is None:
            return None
        return _as_utc(parsed)
    return None


def parse_cli_timestamp(value: str) -> datetime:
    """Parse a strict RFC 3339 timestamp, raising ``ValueError`` otherwise."""
    token = (value or "").strip()
    if not _RFC3339_RE.match(token):
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    parsed = _parse_datetime_token(token)
    normalized = _as_utc(parsed) if parsed is not None else None
    if normalized is None:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    return normalized


def format_summary_time(value: datetime | None) -> str:
    if value is None:
        return "unknown"
    return value.strftime("%Y-%m-%d %H:%M:%S")
