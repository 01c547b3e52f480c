"""
Formula check — validate a manifest before it is published.

Errors make the manifest unusable; warnings flag things a release
still has to fill in (e.g. placeholder checksums).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from kasmctl.core.models.formula import Formula
from kasmctl.core.services.formula.download import file_digest

logger = logging.getLogger(__name__)

_URL_SCHEMES = ("https", "http", "file")


@dataclass
class FormulaCheckResult:
    """Result of formula validation."""

    valid: bool = False
    formula: Formula | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "name": self.formula.name if self.formula else None,
            "version": self.formula.version if self.formula else None,
            "variant_count": len(self.formula.variants) if self.formula else 0,
            "errors": self.errors,
            "warnings": self.warnings,
        }


def _is_well_formed(url: str) -> bool:
    parsed = urlparse(url)
    if parsed.scheme not in _URL_SCHEMES:
        return False
    if parsed.scheme == "file":
        return bool(parsed.path)
    return bool(parsed.netloc) and bool(parsed.path.strip("/"))


def check_formula(formula: Formula) -> FormulaCheckResult:
    """Check every declared variant of a formula.

    - the URL is well-formed and contains the version string
    - the checksum is present (non-empty)
    """
    result = FormulaCheckResult(formula=formula)

    if not formula.variants:
        result.errors.append("No variants declared.")

    seen: set[str] = set()
    for variant in formula.variants:
        key = variant.key
        if key in seen:
            result.errors.append(f"{key}: declared more than once")
        seen.add(key)

        url = formula.url_for(variant)
        if not _is_well_formed(url):
            result.errors.append(f"{key}: URL is not well-formed: {url}")
        if formula.version not in url:
            result.errors.append(f"{key}: URL does not contain version {formula.version}: {url}")

        if not variant.sha256.strip():
            result.errors.append(f"{key}: checksum is empty")
        elif not variant.has_valid_checksum:
            result.warnings.append(f"{key}: checksum {variant.sha256!r} is not a sha256 digest")

    result.valid = not result.errors
    logger.debug(
        "Checked formula %s: %d error(s), %d warning(s)",
        formula.name, len(result.errors), len(result.warnings),
    )
    return result


def update_checksums(formula: Formula, dist_dir: Path) -> tuple[Formula, list[str], list[str]]:
    """Fill in sha256 digests from release archives in ``dist_dir``.

    Archives are matched by their asset file name
    (e.g. ``kasmctl-linux-amd64.tar.gz``).

    Returns:
        ``(updated_formula, updated_keys, missing_keys)``.  The input
        formula is not modified.
    """
    updated = formula.model_copy(deep=True)
    done: list[str] = []
    missing: list[str] = []

    for variant in updated.variants:
        archive = dist_dir / formula.asset_name(variant)
        if not archive.is_file():
            missing.append(variant.key)
            continue
        variant.sha256 = file_digest(archive)
        done.append(variant.key)
        logger.info("%s: sha256 %s", variant.key, variant.sha256)

    return updated, done, missing
