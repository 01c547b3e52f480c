"""
Platform detection — map the running host to a formula variant key.

Release assets use Go-style names (``darwin`` / ``linux``,
``amd64`` / ``arm64``); ``platform`` reports raw uname values.
"""

from __future__ import annotations

import platform

# Architecture name normalization (uname -m → Go-style).
_IARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "armv7l": "armhf",
    "i686": "i386",
    "i386": "i386",
}

_OS_MAP: dict[str, str] = {
    "darwin": "darwin",
    "macos": "darwin",
    "linux": "linux",
    "windows": "windows",
}


def normalize_arch(machine: str) -> str:
    machine = machine.strip().lower()
    return _IARCH_MAP.get(machine, machine)


def normalize_os(system: str) -> str:
    system = system.strip().lower()
    return _OS_MAP.get(system, system)


def host_platform() -> tuple[str, str]:
    """Return ``(os, arch)`` for the running interpreter, e.g. ``("linux", "amd64")``."""
    return normalize_os(platform.system()), normalize_arch(platform.machine())
