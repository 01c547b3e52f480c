"""
CLI commands for the packaging formula.

Thin wrappers over ``kasmctl.core.services.formula``.  Every command
reads the packaged manifest unless ``--manifest`` points elsewhere.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from kasmctl.ui.cli._common import fail


def _load(ctx: click.Context):
    from kasmctl.core.config.formula_loader import FormulaLoadError, load_formula

    try:
        return load_formula(ctx.obj.get("manifest_path"))
    except FormulaLoadError as e:
        fail(str(e))


@click.group("formula")
@click.option(
    "--manifest",
    "manifest_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Formula manifest (default: the one shipped with kasmctl).",
)
@click.pass_context
def formula(ctx: click.Context, manifest_path: Path | None) -> None:
    """Packaging formula — install, verify and publish the kasmctl binary."""
    ctx.ensure_object(dict)
    ctx.obj["manifest_path"] = manifest_path


# ── Inspect ─────────────────────────────────────────────────────


@formula.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show the formula and its variants."""
    f = _load(ctx)

    if as_json:
        data = f.model_dump(mode="json")
        data["variants"] = [
            {**v.model_dump(mode="json"), "resolved_url": f.url_for(v)} for v in f.variants
        ]
        click.echo(json.dumps(data, indent=2))
        return

    click.secho(f"📦 {f.name} {f.version}", fg="cyan", bold=True)
    if f.desc:
        click.echo(f"   {f.desc}")
    if f.homepage:
        click.echo(f"   🔗 {f.homepage}")
    if f.license:
        click.echo(f"   📜 {f.license}")
    click.echo(f"   Binary: {f.binary_name}")
    click.echo(f"   Test:   {f.binary_name} {' '.join(f.test.args)}  (expects {f.test.expect!r})")
    click.echo()
    click.secho(f"   Variants ({len(f.variants)}):", fg="cyan")
    for v in f.variants:
        marker = "✓" if v.has_valid_checksum else "?"
        click.echo(f"     {marker} {v.key:<14} {f.url_for(v)}")
        click.echo(f"       sha256: {v.sha256 or '(none)'}")


@formula.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--strict", is_flag=True, help="Treat warnings as errors.")
@click.pass_context
def check(ctx: click.Context, as_json: bool, strict: bool) -> None:
    """Validate variant URLs and checksums."""
    from kasmctl.core.services.formula import check_formula

    result = check_formula(_load(ctx))
    failed = not result.valid or (strict and result.warnings)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if failed:
            sys.exit(1)
        return

    for err in result.errors:
        click.secho(f"   ❌ {err}", fg="red")
    for warn in result.warnings:
        click.secho(f"   ⚠️  {warn}", fg="yellow")

    if failed:
        click.secho("❌ Formula check failed", fg="red", bold=True)
        sys.exit(1)
    click.secho("✅ Formula is valid", fg="green", bold=True)


# ── Publish ─────────────────────────────────────────────────────


@formula.command("render")
@click.option(
    "--output-file",
    "-f",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the Ruby formula here instead of stdout.",
)
@click.pass_context
def render(ctx: click.Context, output_file: Path | None) -> None:
    """Render the Homebrew formula (.rb)."""
    from kasmctl.core.services.formula import render_homebrew

    text = render_homebrew(_load(ctx))
    if output_file is None:
        click.echo(text, nl=False)
        return

    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(text, encoding="utf-8")
    except OSError as e:
        fail(f"Cannot write {output_file}: {e}")
    click.secho(f"✅ Wrote {output_file}", fg="green")


@formula.command("update-checksums")
@click.argument("dist_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Print digests without writing the manifest.")
@click.pass_context
def update_checksums_cmd(ctx: click.Context, dist_dir: Path, dry_run: bool) -> None:
    """Fill in sha256 digests from release archives in DIST_DIR."""
    from kasmctl.core.config.formula_loader import DEFAULT_FORMULA_PATH, save_formula
    from kasmctl.core.services.formula import update_checksums

    f = _load(ctx)
    updated, done, missing = update_checksums(f, dist_dir)

    for v in updated.variants:
        if v.key in done:
            click.echo(f"   ✓ {v.key:<14} {v.sha256}")
    for key in missing:
        click.secho(f"   ⚠️  {key}: no archive in {dist_dir}", fg="yellow")

    if not done:
        fail(f"No release archives found in {dist_dir}")
    if dry_run:
        return

    target = ctx.obj.get("manifest_path") or DEFAULT_FORMULA_PATH
    try:
        save_formula(updated, target)
    except OSError as e:
        fail(f"Cannot write {target}: {e}")
    click.secho(f"✅ Updated {len(done)} checksum(s) in {target}", fg="green")


# ── Install ─────────────────────────────────────────────────────


@formula.command("install")
@click.option(
    "--bin-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Install directory (default: ~/.local/bin).",
)
@click.option("--os", "os_name", default=None, help="Override the detected operating system.")
@click.option("--arch", default=None, help="Override the detected CPU architecture.")
@click.option("--skip-test", is_flag=True, help="Do not run the smoke test after installing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    bin_dir: Path | None,
    os_name: str | None,
    arch: str | None,
    skip_test: bool,
    as_json: bool,
) -> None:
    """Download, verify and install the kasmctl binary."""
    from kasmctl.core.services.formula import (
        DEFAULT_BIN_DIR,
        FormulaError,
        install_formula,
        run_smoke_test,
    )

    f = _load(ctx)
    try:
        result = install_formula(f, bin_dir or DEFAULT_BIN_DIR, os_name=os_name, arch=arch)
        smoke = None if skip_test else run_smoke_test(f, result.binary_path)
    except FormulaError as e:
        fail(str(e))

    if as_json:
        data = result.to_dict()
        data["smoke_test"] = smoke.to_dict() if smoke else None
        click.echo(json.dumps(data, indent=2))
        return

    click.secho(f"✅ Installed {result.name} {result.version} ({result.platform})", fg="green", bold=True)
    click.echo(f"   📍 {result.binary_path}")
    if smoke is not None:
        click.echo(f"   🧪 {' '.join(smoke.command)}: passed")


@formula.command("test")
@click.option(
    "--binary",
    "binary_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Binary to test (default: <bin-dir>/kasmctl).",
)
@click.option(
    "--bin-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Install directory (default: ~/.local/bin).",
)
@click.pass_context
def smoke_test(ctx: click.Context, binary_path: Path | None, bin_dir: Path | None) -> None:
    """Run the smoke test against an installed binary."""
    from kasmctl.core.services.formula import DEFAULT_BIN_DIR, SmokeTestError, run_smoke_test

    f = _load(ctx)
    target = binary_path or (bin_dir or DEFAULT_BIN_DIR) / f.binary_name
    try:
        result = run_smoke_test(f, target)
    except SmokeTestError as e:
        fail(str(e))
    click.secho(f"✅ {' '.join(result.command)}: output contains {result.expected!r}", fg="green")
