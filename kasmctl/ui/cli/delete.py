"""
CLI commands for deleting sessions, images and servers.
"""

from __future__ import annotations

import click

from kasmctl.ui.cli._common import fail, get_client


@click.group("delete")
def delete() -> None:
    """Delete a resource."""


@click.command("session")
@click.argument("kasm_id")
@click.pass_context
def delete_session(ctx: click.Context, kasm_id: str) -> None:
    """Destroy a session."""
    from kasmctl.core.services.kasm_client import ApiError

    client = get_client(ctx)
    try:
        client.destroy_kasm(kasm_id)
    except ApiError as e:
        fail(f"failed to delete session: {e}")
    click.echo(f"Session {kasm_id} deleted.")


delete.add_command(delete_session)
delete.add_command(delete_session, name="kasm")


@delete.command("image")
@click.argument("image_id")
@click.pass_context
def delete_image(ctx: click.Context, image_id: str) -> None:
    """Delete a workspace image."""
    from kasmctl.core.services.kasm_client import ApiError

    client = get_client(ctx)
    try:
        client.delete_image(image_id)
    except ApiError as e:
        fail(f"failed to delete image: {e}")
    click.echo(f"Image {image_id} deleted.")


@delete.command("server")
@click.argument("server_id")
@click.pass_context
def delete_server(ctx: click.Context, server_id: str) -> None:
    """Delete a server."""
    from kasmctl.core.services.kasm_client import ApiError

    client = get_client(ctx)
    try:
        client.delete_server(server_id)
    except ApiError as e:
        fail(f"failed to delete server: {e}")
    click.echo(f"Server {server_id} deleted.")
