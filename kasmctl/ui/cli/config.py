"""
CLI commands for managing connection contexts.

Thin wrappers over ``kasmctl.core.config.loader``.  These commands never
talk to a Kasm server.
"""

from __future__ import annotations

import click

from kasmctl.ui.cli._common import fail


@click.group("config")
def config() -> None:
    """Manage configuration contexts."""


@config.command("set-context")
@click.argument("name")
@click.option("--server", required=True, help="Kasm server URL.")
@click.option("--api-key", required=True, help="API key.")
@click.option("--api-secret", required=True, help="API key secret.")
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification.")
@click.option("--timeout", "timeout_seconds", type=click.IntRange(min=1), default=None,
              help="Request timeout in seconds (default: 30).")
def set_context(
    name: str,
    server: str,
    api_key: str,
    api_secret: str,
    insecure: bool,
    timeout_seconds: int | None,
) -> None:
    """Create or replace a context.  The first context becomes current."""
    from kasmctl.core.config.loader import ConfigError, load_config, save_config
    from kasmctl.core.models.config import Context

    try:
        cfg = load_config()
        cfg.set_context(
            name,
            Context(
                server=server,
                api_key=api_key,
                api_secret=api_secret,
                insecure_skip_tls_verify=insecure,
                timeout_seconds=timeout_seconds,
            ),
        )
        save_config(cfg)
    except ConfigError as e:
        fail(str(e))
    click.echo(f"Context '{name}' set.")


@config.command("use-context")
@click.argument("name")
def use_context(name: str) -> None:
    """Switch the active context."""
    from kasmctl.core.config.loader import ConfigError, load_config, save_config

    try:
        cfg = load_config()
        if cfg.get_context(name) is None:
            fail(f"context '{name}' not found")
        cfg.current_context = name
        save_config(cfg)
    except ConfigError as e:
        fail(str(e))
    click.echo(f"Switched to context '{name}'.")


@config.command("get-contexts")
def get_contexts() -> None:
    """List configured contexts (current one marked with *)."""
    from kasmctl.core.config.loader import ConfigError, load_config
    from kasmctl.core.services.output import render_contexts

    try:
        cfg = load_config()
    except ConfigError as e:
        fail(str(e))
    click.echo(render_contexts(cfg))


@config.command("path")
def path() -> None:
    """Print the config file location."""
    from kasmctl.core.config.loader import config_path

    click.echo(str(config_path()))
