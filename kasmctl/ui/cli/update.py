"""
CLI commands for updating images, docker agents and servers.

Only the flags that are passed end up in the request body.
"""

from __future__ import annotations

import click

from kasmctl.ui.cli._common import fail, get_client, output_format


@click.group("update")
def update() -> None:
    """Update a resource."""


@update.command("image")
@click.argument("image_id")
@click.option("--name", default=None, help="Docker image name.")
@click.option("--friendly-name", default=None, help="Human-readable display name.")
@click.option("--description", default=None, help="Image description.")
@click.option("--cores", type=float, default=None, help="Number of CPU cores.")
@click.option("--memory", type=int, default=None, help="Memory in bytes.")
@click.option("--enabled", type=click.BOOL, default=None, help="Enable or disable the image.")
@click.option("--image-src", default=None, help="Image thumbnail source path.")
@click.option("--docker-registry", default=None, help="Docker registry URL.")
@click.option("--run-config", default=None, help="Docker run config override (JSON).")
@click.option("--exec-config", default=None, help="Docker exec config override (JSON).")
@click.option("--hidden", type=click.BOOL, default=None, help="Hide the image from users.")
@click.pass_context
def update_image(ctx: click.Context, image_id: str, **changes) -> None:
    """Update an existing workspace image."""
    from kasmctl.core.models.image import UpdateImageRequest
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    try:
        image = client.update_image(UpdateImageRequest(image_id=image_id, **changes))
    except ApiError as e:
        fail(f"failed to update image: {e}")
    click.echo(render_one(image, output_format(ctx)))


@click.command("agent")
@click.argument("agent_id")
@click.option("--enabled", type=click.BOOL, default=None, help="Enable or disable the agent.")
@click.option("--cores-override", type=float, default=None, help="Override CPU cores allocation.")
@click.option("--memory-override", type=int, default=None,
              help="Override memory allocation in bytes.")
@click.option("--gpus-override", type=float, default=None, help="Override GPU allocation.")
@click.option("--auto-prune-images", default=None, help="Auto-prune images policy.")
@click.pass_context
def update_agent(ctx: click.Context, agent_id: str, **changes) -> None:
    """Update a docker agent."""
    from kasmctl.core.models.agent import UpdateAgentRequest
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    try:
        agent = client.update_agent(UpdateAgentRequest(agent_id=agent_id, **changes))
    except ApiError as e:
        fail(f"failed to update agent: {e}")
    click.echo(render_one(agent, output_format(ctx)))


update.add_command(update_agent)
update.add_command(update_agent, name="docker-agent")


@update.command("server")
@click.argument("server_id")
@click.option("--friendly-name", default=None, help="Human-readable name.")
@click.option("--hostname", default=None, help="Server hostname or IP.")
@click.option("--enabled", type=click.BOOL, default=None, help="Enable or disable the server.")
@click.option("--connection-type", default=None, help="Connection type.")
@click.option("--connection-port", type=int, default=None, help="Connection port.")
@click.option("--connection-username", default=None, help="Connection username.")
@click.option("--connection-info", default=None, help="Connection info / credentials.")
@click.option("--max-simultaneous-sessions", type=int, default=None,
              help="Maximum simultaneous sessions.")
@click.option("--max-simultaneous-users", type=int, default=None, help="Maximum simultaneous users.")
@click.option("--zone-id", default=None, help="Zone ID.")
@click.option("--pool-id", default=None, help="Pool ID.")
@click.pass_context
def update_server(ctx: click.Context, server_id: str, **changes) -> None:
    """Update an existing server."""
    from kasmctl.core.models.server import UpdateServerRequest
    from kasmctl.core.services.kasm_client import ApiError
    from kasmctl.core.services.output import render_one

    client = get_client(ctx)
    try:
        server = client.update_server(UpdateServerRequest(server_id=server_id, **changes))
    except ApiError as e:
        fail(f"failed to update server: {e}")
    click.echo(render_one(server, output_format(ctx)))
