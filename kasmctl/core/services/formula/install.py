"""
Formula install — fetch, verify, extract, place, smoke test.

The flow is linear and all-or-nothing per step::

    select variant → fetch archive → verify checksum
        → extract the binary → copy into bin dir → chmod +x

Nothing is written to the bin directory until the checksum has been
verified and the binary has been found in the archive.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tarfile
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from kasmctl.core.models.formula import Formula, Variant
from kasmctl.core.services.formula.detection import host_platform, normalize_arch, normalize_os
from kasmctl.core.services.formula.download import (
    DEFAULT_FETCH_TIMEOUT,
    fetch_archive,
    verify_checksum,
)
from kasmctl.core.services.formula.errors import (
    FormulaError,
    MissingArtifactError,
    SmokeTestError,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)

DEFAULT_BIN_DIR = Path.home() / ".local" / "bin"
SMOKE_TEST_TIMEOUT = 30


@dataclass
class InstallResult:
    """Outcome of a successful install."""

    name: str
    version: str
    platform: str
    url: str
    sha256: str
    binary_path: Path

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "platform": self.platform,
            "url": self.url,
            "sha256": self.sha256,
            "binary_path": str(self.binary_path),
        }


@dataclass
class SmokeTestResult:
    """Outcome of running the installed binary once."""

    command: list[str] = field(default_factory=list)
    returncode: int = 0
    output: str = ""
    expected: str = ""

    @property
    def passed(self) -> bool:
        return self.returncode == 0 and self.expected in self.output

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "returncode": self.returncode,
            "expected": self.expected,
            "passed": self.passed,
        }


def select_variant(
    formula: Formula,
    os_name: str | None = None,
    arch: str | None = None,
) -> Variant:
    """Pick the variant for an os/arch pair (default: the running host).

    Raises:
        UnsupportedPlatformError: If the formula has no such variant.
    """
    host_os, host_arch = host_platform()
    os_name = normalize_os(os_name) if os_name else host_os
    arch = normalize_arch(arch) if arch else host_arch

    variant = formula.get_variant(os_name, arch)
    if variant is None:
        raise UnsupportedPlatformError(
            f"{formula.name} {formula.version} has no build for {os_name}-{arch} "
            f"(available: {', '.join(formula.platforms()) or 'none'})"
        )
    return variant


def extract_binary(archive: Path, binary_name: str, dest_dir: Path) -> Path:
    """Extract the single file named ``binary_name`` from a tar.gz archive.

    Only the matching regular file is read; nothing else in the archive
    touches the filesystem.

    Raises:
        MissingArtifactError: If the archive has no such file.
    """
    try:
        with tarfile.open(archive, "r:gz") as tar:
            member = next(
                (m for m in tar.getmembers() if m.isfile() and Path(m.name).name == binary_name),
                None,
            )
            if member is None:
                raise MissingArtifactError(f"{binary_name!r} not found in {archive.name}")

            source = tar.extractfile(member)
            if source is None:
                raise MissingArtifactError(f"{binary_name!r} in {archive.name} is not readable")

            dest = dest_dir / binary_name
            with source, open(dest, "wb") as out:
                shutil.copyfileobj(source, out)
    except (tarfile.TarError, EOFError) as e:
        raise MissingArtifactError(f"Cannot read archive {archive.name}: {e}") from e

    logger.debug("Extracted %s from %s", member.name, archive.name)
    return dest


def install_formula(
    formula: Formula,
    bin_dir: Path = DEFAULT_BIN_DIR,
    *,
    os_name: str | None = None,
    arch: str | None = None,
    timeout: int = DEFAULT_FETCH_TIMEOUT,
) -> InstallResult:
    """Install the formula's binary into ``bin_dir``.

    Raises:
        FormulaError: On any failure (unsupported platform, fetch,
            checksum, missing file).  Nothing is retried.
    """
    variant = select_variant(formula, os_name, arch)
    if not variant.sha256.strip():
        raise FormulaError(f"No checksum published for {variant.key}; refusing to install")

    url = formula.url_for(variant)
    binary_name = formula.binary_name
    logger.info("Installing %s %s for %s", formula.name, formula.version, variant.key)

    with tempfile.TemporaryDirectory(prefix="kasmctl-install-") as tmp:
        tmp_dir = Path(tmp)
        archive = fetch_archive(url, tmp_dir / formula.asset_name(variant), timeout=timeout)
        verify_checksum(archive, variant.sha256)

        staged = extract_binary(archive, binary_name, tmp_dir)

        try:
            bin_dir.mkdir(parents=True, exist_ok=True)
            target = bin_dir / binary_name
            shutil.copyfile(staged, target)
            os.chmod(target, 0o755)
        except OSError as e:
            raise FormulaError(f"Cannot install {binary_name} into {bin_dir}: {e}") from e

    logger.info("Installed %s", target)
    return InstallResult(
        name=formula.name,
        version=formula.version,
        platform=variant.key,
        url=url,
        sha256=variant.sha256,
        binary_path=target,
    )


def run_smoke_test(formula: Formula, binary_path: Path) -> SmokeTestResult:
    """Run the installed binary with the formula's test args.

    Raises:
        SmokeTestError: If the binary cannot run, exits non-zero, or its
            output lacks the expected substring.
    """
    command = [str(binary_path), *formula.test.args]
    logger.info("Smoke test: %s", " ".join(command))
    try:
        proc = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=SMOKE_TEST_TIMEOUT,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise SmokeTestError(f"Cannot run {binary_path}: {e}") from e

    result = SmokeTestResult(
        command=command,
        returncode=proc.returncode,
        output=proc.stdout + proc.stderr,
        expected=formula.test.expect,
    )
    if proc.returncode != 0:
        raise SmokeTestError(f"{' '.join(command)} exited with status {proc.returncode}")
    if not result.passed:
        raise SmokeTestError(
            f"Output of {' '.join(command)} does not contain {formula.test.expect!r}"
        )
    return result
