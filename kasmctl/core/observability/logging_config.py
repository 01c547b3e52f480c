"""
Logging configuration for the kasmctl entrypoint.

main.py calls ``setup_logging`` once per invocation.  Modules log through
``logging.getLogger(__name__)`` and inherit whatever is configured here.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  KASMCTL_LOG_LEVEL  >  WARNING

A log file can be added with KASMCTL_LOG_FILE (level from
KASMCTL_LOG_FILE_LEVEL, else the console level).  Console output goes to
stderr; stdout carries only command output.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass

ENV_LEVEL = "KASMCTL_LOG_LEVEL"
ENV_FILE = "KASMCTL_LOG_FILE"
ENV_FILE_LEVEL = "KASMCTL_LOG_FILE_LEVEL"

_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("urllib3", "markdown_it")

# A JSON string value runs to the closing unescaped quote; a bare value to
# the next separator.
_SECRET_RE = re.compile(r'("?api_key(?:_secret)?"?\s*[:=]\s*)(?:(")(?:[^"\\]|\\.)*"|[^\s,}]+)')


def _mask(match: re.Match) -> str:
    return match.group(1) + ('"***"' if match.group(2) else "***")


@dataclass
class LogSettings:
    """Resolved logging levels and destinations."""

    level: int = logging.WARNING
    log_file: str | None = None
    file_level: int | None = None

    @classmethod
    def resolve(
        cls,
        *,
        debug: bool = False,
        verbose: bool = False,
        quiet: bool = False,
        env: Mapping[str, str] | None = None,
    ) -> LogSettings:
        env = os.environ if env is None else env
        if debug:
            level = logging.DEBUG
        elif verbose:
            level = logging.INFO
        elif quiet:
            level = logging.ERROR
        else:
            level = _parse_level(env.get(ENV_LEVEL))

        file_level = env.get(ENV_FILE_LEVEL)
        return cls(
            level=level,
            log_file=env.get(ENV_FILE) or None,
            file_level=_parse_level(file_level) if file_level else None,
        )


class RedactSecretsFilter(logging.Filter):
    """Mask API key values that end up in a log message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "api_key" in message:
            record.msg = _SECRET_RE.sub(_mask, message)
            record.args = None
        return True


def setup_logging(settings: LogSettings) -> None:
    """Install console (and optional file) handlers on the root logger."""
    if settings.level <= logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]
    elif settings.level <= logging.INFO:
        fmt, datefmt = _CONSOLE_FORMATS[logging.INFO]
    else:
        fmt, datefmt = "%(message)s", None
    redact = RedactSecretsFilter()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(settings.level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    console.addFilter(redact)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = settings.level

    if settings.log_file:
        file_level = settings.file_level if settings.file_level is not None else settings.level
        fh = logging.FileHandler(settings.log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        fh.addFilter(redact)
        root.addHandler(fh)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if settings.level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown or empty means WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.strip().upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
