"""
Shared helpers for the API-facing command groups.
"""

from __future__ import annotations

import sys
from typing import NoReturn

import click

from kasmctl.core.services.output import OutputFormat


def fail(message: str) -> NoReturn:
    """Print an error in red on stderr and exit 1."""
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(1)


def output_format(ctx: click.Context) -> OutputFormat:
    return OutputFormat(ctx.obj.get("output", "table"))


def get_client(ctx: click.Context):
    """Build a KasmClient from the global --server / --context / --insecure flags."""
    from kasmctl.core.config.loader import ConfigError, resolve_context
    from kasmctl.core.services.kasm_client import KasmClient

    try:
        context = resolve_context(
            server_override=ctx.obj.get("server"),
            context_override=ctx.obj.get("context"),
            insecure=ctx.obj.get("insecure", False),
        )
    except ConfigError as e:
        fail(str(e))
    return KasmClient(context)


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on stderr.  Defaults to no."""
    return click.confirm(prompt, default=False, err=True)


def session_filter_options(fn):
    """Attach the shared session filter flags to a command."""
    options = [
        click.option("--status", default=None, help="Filter by session status (case-insensitive)."),
        click.option("--image", default=None, help="Filter by image ID (exact match)."),
        click.option("--user", default=None, help="Filter by user ID (exact match)."),
        click.option("--host", default=None, help="Filter by hostname (exact match)."),
        click.option(
            "--created-before", default=None,
            help="Only sessions created before this datetime (YYYY-MM-DD HH:MM:SS).",
        ),
        click.option(
            "--created-after", default=None,
            help="Only sessions created after this datetime (YYYY-MM-DD HH:MM:SS).",
        ),
        click.option(
            "--idle-since", default=None,
            help="Only sessions with keepalive before this datetime (YYYY-MM-DD HH:MM:SS).",
        ),
        click.option(
            "--idle-for", default=None, metavar="DURATION",
            help="Only sessions idle for at least this long (e.g. 30m, 2h, 1d, 1h30m).",
        ),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def build_session_filters(**kwargs):
    """SessionFilters from command kwargs, validated before any API call."""
    from kasmctl.core.services.filters import FilterError, SessionFilters

    filters = SessionFilters(**kwargs)
    try:
        filters.validate()
    except FilterError as e:
        fail(str(e))
    return filters
