"""
Download and checksum verification for release archives.
"""

from __future__ import annotations

import hashlib
import http.client
import logging
import shutil
import urllib.error
import urllib.request
from pathlib import Path

from kasmctl import __version__
from kasmctl.core.services.formula.errors import (
    ChecksumMismatchError,
    FetchError,
    FormulaError,
)

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 60
_CHUNK = 8192


def fetch_archive(url: str, dest: Path, *, timeout: int = DEFAULT_FETCH_TIMEOUT) -> Path:
    """Download ``url`` into ``dest``.

    ``file://`` URLs are accepted, which is how local release builds
    are installed.

    Raises:
        FetchError: On any network or filesystem failure.
    """
    logger.info("Fetching %s", url)
    try:
        req = urllib.request.Request(url, headers={"User-Agent": f"kasmctl/{__version__}"})
        with urllib.request.urlopen(req, timeout=timeout) as resp, open(dest, "wb") as out:
            shutil.copyfileobj(resp, out, _CHUNK)
    except urllib.error.HTTPError as e:
        raise FetchError(f"Failed to fetch {url}: HTTP {e.code}") from e
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    logger.debug("Downloaded %d bytes to %s", dest.stat().st_size, dest)
    return dest


def file_digest(path: Path, algo: str = "sha256") -> str:
    """Hex digest of a file, read in chunks."""
    h = hashlib.new(algo)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            h.update(chunk)
    return h.hexdigest()


def verify_checksum(path: Path, expected: str) -> None:
    """Verify a file checksum.

    ``expected`` is either a bare sha256 hex digest or ``algo:hex``
    (sha256, sha1, md5).

    Raises:
        ChecksumMismatchError: If the digest differs.
    """
    if ":" in expected:
        algo, expected_hash = expected.split(":", 1)
    else:
        algo, expected_hash = "sha256", expected
    expected_hash = expected_hash.strip().lower()

    try:
        actual = file_digest(path, algo)
    except ValueError as e:
        raise FormulaError(f"Unsupported checksum algorithm {algo!r}") from e
    if actual != expected_hash:
        raise ChecksumMismatchError(path.name, expected_hash, actual)
    logger.debug("Checksum OK for %s (%s)", path.name, algo)
