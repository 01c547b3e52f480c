"""
Formula loader — reads the packaging manifest (formula.yml).

The manifest shipped with the package lives in ``kasmctl/core/data``;
release tooling can point at any other copy with ``--manifest``.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from kasmctl.core.models.formula import Formula

logger = logging.getLogger(__name__)

DEFAULT_FORMULA_PATH = Path(__file__).resolve().parent.parent / "data" / "formula.yml"


class FormulaLoadError(Exception):
    """Raised when a formula manifest is missing or invalid."""


def load_formula(path: Path | None = None) -> Formula:
    """Load and validate a formula manifest.

    Args:
        path: Manifest path.  Defaults to the packaged formula.yml.

    Raises:
        FormulaLoadError: If the file is missing or invalid.
    """
    path = path or DEFAULT_FORMULA_PATH
    if not path.is_file():
        raise FormulaLoadError(f"Formula manifest not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise FormulaLoadError(f"Cannot read formula manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise FormulaLoadError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        formula = Formula.model_validate(data)
    except ValidationError as e:
        raise FormulaLoadError(f"Invalid formula manifest {path}: {e}") from e

    logger.debug(
        "Loaded formula %s %s (%s) from %s",
        formula.name, formula.version, ", ".join(formula.platforms()), path,
    )
    return formula


def save_formula(formula: Formula, path: Path) -> None:
    """Write a formula manifest back to YAML."""
    data = formula.model_dump(exclude_none=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), encoding="utf-8")
    logger.info("Wrote formula manifest %s", path)
