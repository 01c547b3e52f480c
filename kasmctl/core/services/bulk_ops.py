"""
Bulk session lifecycle — stop / pause / resume many sessions in one go.

Sessions are processed one at a time, in listing order.  A failure on
one session is recorded and the loop moves on; the caller decides what
the aggregate result means for the exit code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from kasmctl.core.models.session import Session
from kasmctl.core.services.kasm_client import ApiError, KasmClient

logger = logging.getLogger(__name__)

# Statuses (lower-case) that make an action a no-op for a session.
SKIP_STATUSES: dict[str, frozenset[str]] = {
    "stop": frozenset({"stopped"}),
    "pause": frozenset({"stopped", "paused"}),
    "resume": frozenset({"running"}),
}

# action → (client method name, past tense)
ACTIONS: dict[str, tuple[str, str]] = {
    "stop": ("stop_kasm", "Stopped"),
    "pause": ("pause_kasm", "Paused"),
    "resume": ("resume_kasm", "Resumed"),
}


@dataclass
class BulkResult:
    """Tally of a bulk lifecycle run."""

    action: str
    succeeded: list[str] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)
    failed: list[tuple[str, str]] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

    def summary(self) -> str:
        past = ACTIONS[self.action][1]
        line = f"{past} {len(self.succeeded)}/{self.attempted} sessions."
        if self.skipped:
            line += f" ({len(self.skipped)} skipped)"
        return line

    def failure_message(self) -> str:
        return f"{len(self.failed)} session(s) failed to {self.action}"

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "succeeded": self.succeeded,
            "skipped": [{"kasm_id": k, "status": s} for k, s in self.skipped],
            "failed": [{"kasm_id": k, "error": e} for k, e in self.failed],
        }


def should_skip(action: str, status: str | None) -> bool:
    """True if ``status`` already satisfies ``action``."""
    if status is None:
        return False
    return status.lower() in SKIP_STATUSES[action]


def run_bulk(
    client: KasmClient,
    action: str,
    sessions: list[Session],
    on_progress: Callable[[str], None] | None = None,
) -> BulkResult:
    """Apply ``action`` (stop, pause or resume) to each session.

    ``on_progress`` receives one line per session:
    ``"  <id> ok"``, ``"  <id> skipped (<status>)"`` or
    ``"  <id> FAILED: <error>"``.
    """
    if action not in ACTIONS:
        raise ValueError(f"Unknown bulk action: {action}")

    call = getattr(client, ACTIONS[action][0])
    result = BulkResult(action=action)

    def report(line: str) -> None:
        if on_progress is not None:
            on_progress(line)

    for session in sessions:
        kasm_id = session.kasm_id
        status = session.operational_status
        if should_skip(action, status):
            result.skipped.append((kasm_id, status or ""))
            report(f"  {kasm_id} skipped ({status})")
            continue
        try:
            call(kasm_id)
        except ApiError as e:
            logger.debug("%s %s failed: %s", action, kasm_id, e)
            result.failed.append((kasm_id, str(e)))
            report(f"  {kasm_id} FAILED: {e}")
            continue
        result.succeeded.append(kasm_id)
        report(f"  {kasm_id} ok")

    logger.info(
        "Bulk %s: %d ok, %d skipped, %d failed",
        action, len(result.succeeded), len(result.skipped), len(result.failed),
    )
    return result
