"""
kasmctl — CLI entrypoint.

Usage:
    kasmctl --help
    kasmctl get sessions --status running
    kasmctl config set-context prod --server https://kasm.example.com ...
    python -m kasmctl.main formula check
"""

from __future__ import annotations

import click

from kasmctl import __version__
from kasmctl.core.observability.logging_config import LogSettings, setup_logging
from kasmctl.core.services.output import OUTPUT_CHOICES


@click.group()
@click.version_option(version=__version__, prog_name="kasmctl")
@click.option(
    "--output",
    "-o",
    type=click.Choice(OUTPUT_CHOICES, case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format.",
)
@click.option("--context", "context_name", default=None, help="Override the active context.")
@click.option(
    "--server",
    default=None,
    help="Override server URL (requires KASMCTL_API_KEY and KASMCTL_API_SECRET env vars).",
)
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    output: str,
    context_name: str | None,
    server: str | None,
    insecure: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
) -> None:
    """kasmctl — CLI for managing Kasm Workspaces."""
    ctx.ensure_object(dict)
    ctx.obj["output"] = output.lower()
    ctx.obj["context"] = context_name
    ctx.obj["server"] = server
    ctx.obj["insecure"] = insecure
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once per invocation) ─────────────────────
    setup_logging(LogSettings.resolve(debug=debug, verbose=verbose, quiet=quiet))


# ── Register sub-command groups from kasmctl/ui/cli/ ─────────────

from kasmctl.ui.cli.config import config
from kasmctl.ui.cli.create import create
from kasmctl.ui.cli.delete import delete
from kasmctl.ui.cli.formula import formula
from kasmctl.ui.cli.get import get
from kasmctl.ui.cli.lifecycle import pause, resume, stop
from kasmctl.ui.cli.update import update

cli.add_command(get)
cli.add_command(create)
cli.add_command(update)
cli.add_command(delete)
cli.add_command(stop)
cli.add_command(pause)
cli.add_command(resume)
cli.add_command(config)
cli.add_command(formula)


if __name__ == "__main__":
    cli()
