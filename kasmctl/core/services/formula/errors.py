"""
Formula errors — every failure of the install / verify flow is fatal.

Nothing here is retried; the caller decides what to do next.
"""

from __future__ import annotations


class FormulaError(Exception):
    """Base class for formula install and smoke-test failures."""


class UnsupportedPlatformError(FormulaError):
    """No variant is published for the requested os/arch."""


class FetchError(FormulaError):
    """The archive could not be downloaded."""


class ChecksumMismatchError(FormulaError):
    """The archive does not match the published checksum."""

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(f"Checksum mismatch for {path}: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class MissingArtifactError(FormulaError):
    """The archive does not contain the expected binary."""


class SmokeTestError(FormulaError):
    """The installed binary failed to run or produced unexpected output."""
