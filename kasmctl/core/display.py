"""
Display helpers — pure formatting for table cells.

No I/O.  Shared by the resource models (table rows) and the renderers.
"""

from __future__ import annotations

from datetime import datetime, timezone

# Kasm reports timestamps as naive UTC "YYYY-MM-DD HH:MM:SS" strings.
KASM_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_GB = 1_073_741_824
_MB = 1_048_576


def short_id(value: str) -> str:
    """First 8 characters of a UUID-like id (like Docker / git short ids)."""
    return value[:8]


def format_value(value: object) -> str:
    """Render a scalar field for a table cell.

    ``None`` → ``""``, booleans lower-case, whole floats without a fraction.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_bytes(value: int | None) -> str:
    """Render a byte count as ``NGB`` / ``NMB`` when it divides evenly."""
    if value is None:
        return ""
    if value < 0:
        return str(value)
    if value >= _GB and value % _GB == 0:
        return f"{value // _GB}GB"
    if value >= _MB and value % _MB == 0:
        return f"{value // _MB}MB"
    return str(value)


def parse_kasm_datetime(value: str) -> datetime | None:
    """Parse a Kasm UTC timestamp, or None if it is malformed."""
    if len(value) != 19:
        return None
    try:
        parsed = datetime.strptime(value, KASM_DATETIME_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def format_kasm_datetime(moment: datetime) -> str:
    """Format an aware datetime the way Kasm does (UTC, no zone suffix)."""
    return moment.astimezone(timezone.utc).strftime(KASM_DATETIME_FORMAT)


def format_duration_ago(secs: int) -> str:
    if secs < 60:
        return f"{secs}s ago"
    if secs < 3600:
        return f"{secs // 60}m ago"
    if secs < 86400:
        return f"{secs // 3600}h ago"
    return f"{secs // 86400}d ago"


def relative_age(value: str, now: datetime | None = None) -> str:
    """Human-friendly age of a Kasm timestamp, e.g. ``"2h ago"``.

    Falls back to the original string when it cannot be parsed.
    Timestamps in the future count as ``"0s ago"``.
    """
    moment = parse_kasm_datetime(value)
    if moment is None:
        return value
    now = now or datetime.now(timezone.utc)
    diff = int((now - moment).total_seconds())
    return format_duration_ago(max(diff, 0))
