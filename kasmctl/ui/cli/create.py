"""
CLI commands for creating sessions, images and servers.
"""

from __future__ import annotations

import click

from kasmctl.ui.cli._common import fail, get_client, output_format


@click.group("create")
def create() -> None:
    """Create a resource."""


@click.command("session")
@click.option("--image", "image_id", required=True, help="Workspace image ID to launch.")
@click.option("--user", "user_id", default=None, help="User ID (defaults to the API key owner).")
@click.pass_context
def create_session(ctx: click.Context, image_id: str, user_id: str | None) -> None:
    """Create a new session."""
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import OutputFormat, dump_json, dump_yaml

    client = get_client(ctx)
    try:
        resp = client.request_kasm(image_id, user_id)
    except ApiError as e:
        fail(f"failed to create session: {e}")

    fmt = output_format(ctx)
    if fmt is OutputFormat.JSON:
        click.echo(dump_json(resp.to_output()))
        return
    if fmt is OutputFormat.YAML:
        click.echo(dump_yaml(resp.to_output()))
        return

    click.echo(f"Session created: {resp.kasm_id}")
    if resp.kasm_url is not None:
        click.echo(f"URL: {resp.kasm_url}")
    if resp.status is not None:
        click.echo(f"Status: {resp.status}")


create.add_command(create_session)
create.add_command(create_session, name="kasm")


@create.command("image")
@click.option("--name", required=True, help="Docker image name (e.g. kasmweb/terminal:1.18.0).")
@click.option("--friendly-name", required=True, help="Human-readable display name.")
@click.option("--description", default=None, help="Image description.")
@click.option("--cores", type=float, default=None, help="CPU cores to allocate.")
@click.option("--memory", type=int, default=None, help="Memory in bytes to allocate.")
@click.option("--enabled", type=click.BOOL, default=True, show_default=True,
              help="Whether the image is enabled.")
@click.option("--image-src", default="Container", show_default=True, help="Image source type.")
@click.option("--docker-registry", default=None, help="Docker registry URL.")
@click.option("--run-config", default=None, help="Docker run configuration (JSON).")
@click.option("--exec-config", default=None, help="Docker exec configuration (JSON).")
@click.option("--image-type", default=None, help="Image type (e.g. Container, Server).")
@click.pass_context
def create_image(ctx: click.Context, **params) -> None:
    """Create a new workspace image."""
    from kasmctl.core.models.image import CreateImageParams
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    try:
        image = client.create_image(CreateImageParams(**params))
    except ApiError as e:
        fail(f"failed to create image: {e}")
    click.echo(render_one(image, output_format(ctx)))


@create.command("server")
@click.option("--friendly-name", required=True, help="Human-readable name.")
@click.option("--hostname", required=True, help="Server hostname or IP.")
@click.option("--connection-type", required=True, help="Connection type (ssh, rdp, vnc, kasmvnc).")
@click.option("--connection-port", type=int, required=True, help="Connection port.")
@click.option("--zone", "zone_id", required=True, help="Zone ID to assign the server to.")
@click.option("--enabled", type=click.BOOL, default=True, show_default=True,
              help="Whether the server is enabled.")
@click.option("--connection-username", default=None, help="Connection username.")
@click.option("--connection-info", default=None, help="Connection info / credentials.")
@click.option("--max-simultaneous-sessions", type=int, default=None,
              help="Maximum simultaneous sessions.")
@click.option("--max-simultaneous-users", type=int, default=None, help="Maximum simultaneous users.")
@click.option("--pool-id", default=None, help="Pool ID.")
@click.pass_context
def create_server(ctx: click.Context, **params) -> None:
    """Create a new server."""
    from kasmctl.core.models.server import CreateServerParams
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    try:
        server = client.create_server(CreateServerParams(**params))
    except ApiError as e:
        fail(f"failed to create server: {e}")
    click.echo(render_one(server, output_format(ctx)))
