"""
CLI commands for session lifecycle: stop, pause and resume.

Each verb is a group with a single-session command (``session`` /
``kasm``) and a bulk ``sessions`` command that takes the shared session
filters.  Bulk progress goes to stderr so stdout stays pipeable.
"""

from __future__ import annotations

import click

from kasmctl.ui.cli._common import (
    build_session_filters,
    confirm,
    fail,
    get_client,
    session_filter_options,
)

_PAST = {"stop": "stopped", "pause": "paused", "resume": "resumed"}


def _make_group(action: str) -> click.Group:
    @click.group(action, help=f"{action.capitalize()} sessions.")
    def group() -> None:
        pass

    @click.command("session", help=f"{action.capitalize()} a session.")
    @click.argument("kasm_id")
    @click.pass_context
    def one(ctx: click.Context, kasm_id: str) -> None:
        from kasmctl.core.services.kasm_client import ApiError

        client = get_client(ctx)
        try:
            getattr(client, f"{action}_kasm")(kasm_id)
        except ApiError as e:
            fail(f"failed to {action} session: {e}")
        click.echo(f"Session {kasm_id} {_PAST[action]}.")

    @click.command(
        "sessions",
        help=f"{action.capitalize()} every session matching the filters.",
    )
    @session_filter_options
    @click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
    @click.pass_context
    def many(ctx: click.Context, yes: bool, **filter_args: str | None) -> None:
        from kasmctl.core.services.bulk_ops import run_bulk
        from kasmctl.core.services.kasm_client import ApiError

        filters = build_session_filters(**filter_args)
        client = get_client(ctx)
        try:
            sessions = filters.apply(client.get_kasms())
        except ApiError as e:
            fail(f"failed to list sessions: {e}")

        if not sessions:
            click.echo("No sessions match the given filters.", err=True)
            return

        verb = action.capitalize()
        if filters.is_empty():
            prompt = f"{verb} ALL {len(sessions)} sessions?"
        else:
            prompt = f"{verb} {len(sessions)} matching sessions?"
        if not yes and not confirm(prompt):
            click.echo("Aborted.", err=True)
            return

        progress = None if ctx.obj.get("quiet") else (lambda line: click.echo(line, err=True))
        result = run_bulk(client, action, sessions, on_progress=progress)
        click.echo(result.summary(), err=True)
        if not result.ok:
            fail(result.failure_message())

    group.add_command(one)
    group.add_command(one, name="kasm")
    group.add_command(many)
    return group


stop = _make_group("stop")
pause = _make_group("pause")
resume = _make_group("resume")
