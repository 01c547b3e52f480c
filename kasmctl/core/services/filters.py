"""
Client-side filters for session and image listings.

The Kasm API has no server-side filtering, so ``get sessions`` and the
bulk lifecycle commands fetch everything and narrow it here.
Timestamps are compared as ``YYYY-MM-DD HH:MM:SS`` strings; that format
sorts lexicographically in time order.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timedelta, timezone

from kasmctl.core.display import KASM_DATETIME_FORMAT
from kasmctl.core.models.image import Image
from kasmctl.core.models.session import Session

_U64_MAX = 2**64 - 1
_UNIT_SECONDS = {"d": 86400, "h": 3600, "m": 60}
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FilterError(ValueError):
    """A filter value could not be parsed."""


def parse_duration(text: str) -> int:
    """Parse a duration such as ``30m``, ``2h``, ``1d`` or ``1h30m`` into seconds.

    Raises:
        FilterError: Empty input, a zero total, digits without a unit,
            unknown units, or a total that does not fit in 64 bits.
    """
    value = text.strip()
    if not value:
        raise FilterError("empty duration")

    total = 0
    digits = ""
    for ch in value:
        if ch.isascii() and ch.isdigit():
            digits += ch
            continue
        unit = _UNIT_SECONDS.get(ch)
        if unit is None or not digits:
            raise FilterError(f"invalid duration '{text}' (use d/h/m, e.g. 2h or 1h30m)")
        total += int(digits) * unit
        digits = ""
        if total > _U64_MAX:
            raise FilterError(f"duration '{text}' is too large")

    if digits:
        raise FilterError(f"trailing digits without unit in '{text}' (use d/h/m)")
    if total == 0:
        raise FilterError(f"duration '{text}' must be greater than zero")
    return total


def format_utc_minus(seconds: int, now: datetime | None = None) -> str:
    """Format ``now - seconds`` (UTC) as a Kasm timestamp.

    Clamps at the Unix epoch for durations longer than the time since 1970.
    """
    now = now or datetime.now(timezone.utc)
    try:
        moment = now - timedelta(seconds=seconds)
    except OverflowError:
        moment = _EPOCH
    if moment < _EPOCH:
        moment = _EPOCH
    return moment.astimezone(timezone.utc).strftime(KASM_DATETIME_FORMAT)


@dataclass
class SessionFilters:
    """Criteria for narrowing a session listing.  Unset fields match everything."""

    status: str | None = None
    image: str | None = None
    user: str | None = None
    host: str | None = None
    created_before: str | None = None
    created_after: str | None = None
    idle_since: str | None = None
    idle_for: str | None = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def validate(self) -> None:
        """Reject malformed values before any API call is made."""
        if self.idle_for is not None:
            parse_duration(self.idle_for)

    def apply(self, sessions: list[Session], now: datetime | None = None) -> list[Session]:
        """Return the sessions matching every set criterion, in input order."""
        idle_cutoff = None
        if self.idle_for is not None:
            idle_cutoff = format_utc_minus(parse_duration(self.idle_for), now)
        return [s for s in sessions if self._matches(s, idle_cutoff)]

    def _matches(self, session: Session, idle_cutoff: str | None) -> bool:
        if self.status is not None:
            status = session.operational_status
            if status is None or status.lower() != self.status.lower():
                return False
        if self.image is not None and session.image_id != self.image:
            return False
        if self.user is not None and session.user_id != self.user:
            return False
        if self.host is not None and session.hostname != self.host:
            return False

        created = session.created_date
        if self.created_before is not None:
            if created is None or not created < self.created_before:
                return False
        if self.created_after is not None:
            if created is None or not created > self.created_after:
                return False

        keepalive = session.keepalive_date
        if self.idle_since is not None:
            if keepalive is None or not keepalive < self.idle_since:
                return False
        if idle_cutoff is not None:
            if keepalive is None or not keepalive < idle_cutoff:
                return False
        return True


@dataclass
class ImageFilters:
    """Criteria for narrowing an image listing."""

    enabled: bool = False
    disabled: bool = False
    name: str | None = None
    image_type: str | None = None

    def is_empty(self) -> bool:
        return not self.enabled and not self.disabled and self.name is None and self.image_type is None

    def validate(self) -> None:
        if self.enabled and self.disabled:
            raise FilterError("--enabled and --disabled are mutually exclusive")

    def apply(self, images: list[Image]) -> list[Image]:
        return [img for img in images if self._matches(img)]

    def _matches(self, image: Image) -> bool:
        # Images whose enabled flag is unknown never match either filter.
        if self.enabled and image.enabled is not True:
            return False
        if self.disabled and image.enabled is not False:
            return False
        if self.name is not None:
            friendly = image.friendly_name
            if friendly is None or self.name.lower() not in friendly.lower():
                return False
        if self.image_type is not None:
            src = image.image_src
            if src is None or src.lower() != self.image_type.lower():
                return False
        return True
