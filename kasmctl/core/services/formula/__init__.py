"""
Formula services — install, verify and publish the kasmctl binary.

    detection   host os/arch normalization
    download    archive fetch + checksum verification
    install     variant selection, extraction, placement, smoke test
    check       manifest validation and checksum refresh
    homebrew    Ruby formula rendering
"""

from kasmctl.core.services.formula.check import (
    FormulaCheckResult,
    check_formula,
    update_checksums,
)
from kasmctl.core.services.formula.errors import (
    ChecksumMismatchError,
    FetchError,
    FormulaError,
    MissingArtifactError,
    SmokeTestError,
    UnsupportedPlatformError,
)
from kasmctl.core.services.formula.homebrew import render_homebrew
from kasmctl.core.services.formula.install import (
    DEFAULT_BIN_DIR,
    InstallResult,
    SmokeTestResult,
    install_formula,
    run_smoke_test,
    select_variant,
)

__all__ = [
    "DEFAULT_BIN_DIR",
    "ChecksumMismatchError",
    "FetchError",
    "FormulaCheckResult",
    "FormulaError",
    "InstallResult",
    "MissingArtifactError",
    "SmokeTestError",
    "SmokeTestResult",
    "UnsupportedPlatformError",
    "check_formula",
    "install_formula",
    "render_homebrew",
    "run_smoke_test",
    "select_variant",
    "update_checksums",
]
