"""
CLI commands for reading resources.

Thin wrappers over ``kasmctl.core.services.kasm_client``; filtering and
rendering live in ``core.services.filters`` and ``core.services.output``.
"""

from __future__ import annotations

from typing import Callable, Sequence

import click

from kasmctl.ui.cli._common import (
    build_session_filters,
    fail,
    get_client,
    output_format,
    session_filter_options,
)


@click.group("get")
def get() -> None:
    """Get or list resources."""


def _find(items: Sequence, attr: str, wanted: str, noun: str):
    for item in items:
        if getattr(item, attr) == wanted:
            return item
    fail(f"{noun} {wanted!r} not found")


def _fetch(fetch: Callable[[], list], what: str) -> list:
    from kasmctl.core.services.kasm_client import ApiError

    try:
        return fetch()
    except ApiError as e:
        fail(f"failed to list {what}: {e}")


# ── Sessions ────────────────────────────────────────────────────


@click.command("session")
@click.argument("kasm_id")
@click.option("--user", "user_id", default=None, help="User ID that owns the session.")
@click.pass_context
def get_session(ctx: click.Context, kasm_id: str, user_id: str | None) -> None:
    """Get a specific session by ID."""
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    try:
        session = client.get_kasm_status(kasm_id, user_id)
    except ApiError as e:
        fail(f"failed to get session: {e}")
    click.echo(render_one(session, output_format(ctx)))


@click.command("sessions")
@session_filter_options
@click.pass_context
def get_sessions(ctx: click.Context, **filter_args: str | None) -> None:
    """List sessions, optionally filtered."""
    from kasmctl.core.models.session import Session
    from kasmctl.core.services.output import render_list

    filters = build_session_filters(**filter_args)
    client = get_client(ctx)
    sessions = filters.apply(_fetch(client.get_kasms, "sessions"))
    click.echo(render_list(sessions, output_format(ctx), Session))


get.add_command(get_session)
get.add_command(get_session, name="kasm")
get.add_command(get_sessions)
get.add_command(get_sessions, name="kasms")


# ── Images ──────────────────────────────────────────────────────


@get.command("image")
@click.argument("image_id")
@click.pass_context
def get_image(ctx: click.Context, image_id: str) -> None:
    """Get a specific image by ID."""
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    images = _fetch(client.get_images, "images")
    click.echo(render_one(_find(images, "image_id", image_id, "image"), output_format(ctx)))


@get.command("images")
@click.option("--enabled", is_flag=True, help="Only show enabled images.")
@click.option("--disabled", is_flag=True, help="Only show disabled images.")
@click.option("--name", default=None, help="Filter by friendly name (case-insensitive substring).")
@click.option("--image-type", default=None, help="Filter by image type / source.")
@click.pass_context
def get_images(
    ctx: click.Context,
    enabled: bool,
    disabled: bool,
    name: str | None,
    image_type: str | None,
) -> None:
    """List workspace images, optionally filtered."""
    from kasmctl.core.models.image import Image
    from kasmctl.core.services.filters import FilterError, ImageFilters
    from kasmctl.core.services.output import render_list

    filters = ImageFilters(enabled=enabled, disabled=disabled, name=name, image_type=image_type)
    try:
        filters.validate()
    except FilterError as e:
        fail(str(e))

    client = get_client(ctx)
    images = filters.apply(_fetch(client.get_images, "images"))
    click.echo(render_list(images, output_format(ctx), Image))


# ── Servers / agents / zones ────────────────────────────────────


@get.command("server")
@click.argument("server_id")
@click.pass_context
def get_server(ctx: click.Context, server_id: str) -> None:
    """Get a specific server by ID."""
    from kasmctl.core.services.output import render_one

    servers = _fetch(get_client(ctx).get_servers, "servers")
    click.echo(render_one(_find(servers, "server_id", server_id, "server"), output_format(ctx)))


@get.command("servers")
@click.pass_context
def get_servers(ctx: click.Context) -> None:
    """List servers."""
    from kasmctl.core.models.server import Server
    from kasmctl.core.services.output import render_list

    servers = _fetch(get_client(ctx).get_servers, "servers")
    click.echo(render_list(servers, output_format(ctx), Server))


@get.command("agent")
@click.argument("agent_id")
@click.pass_context
def get_agent(ctx: click.Context, agent_id: str) -> None:
    """Get a specific docker agent by ID."""
    from kasmctl.core.services.output import render_one

    agents = _fetch(get_client(ctx).get_agents, "agents")
    click.echo(render_one(_find(agents, "agent_id", agent_id, "agent"), output_format(ctx)))


@get.command("agents")
@click.pass_context
def get_agents(ctx: click.Context) -> None:
    """List docker agents."""
    from kasmctl.core.models.agent import Agent
    from kasmctl.core.services.output import render_list

    agents = _fetch(get_client(ctx).get_agents, "agents")
    click.echo(render_list(agents, output_format(ctx), Agent))


@get.command("zone")
@click.argument("zone_id")
@click.pass_context
def get_zone(ctx: click.Context, zone_id: str) -> None:
    """Get a specific deployment zone by ID."""
    from kasmctl.core.services.output import render_one

    zones = _fetch(get_client(ctx).get_zones, "zones")
    click.echo(render_one(_find(zones, "zone_id", zone_id, "zone"), output_format(ctx)))


@get.command("zones")
@click.pass_context
def get_zones(ctx: click.Context) -> None:
    """List deployment zones."""
    from kasmctl.core.models.zone import Zone
    from kasmctl.core.services.output import render_list

    zones = _fetch(get_client(ctx).get_zones, "zones")
    click.echo(render_list(zones, output_format(ctx), Zone))
