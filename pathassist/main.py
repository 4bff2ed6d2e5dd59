"""
Path Assistant — CLI entrypoint.

Usage:
    python -m pathassist.main --help
    python -m pathassist.main show
    python -m pathassist.main advance --closed "Closed Won"
    python -m pathassist.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pathassist import __version__
from pathassist.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="pathassist")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to path.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Path Assistant — move a record along its stages."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


def _step_marker(class_text: str) -> tuple[str, str]:
    """Symbol and color for a rendered step's CSS classes."""
    classes = class_text.split()
    if "slds-is-won" in classes:
        return "★", "green"
    if "slds-is-lost" in classes:
        return "✗", "red"
    if "slds-is-current" in classes:
        return "●", "cyan"
    if "slds-is-complete" in classes:
        return "✓", "green"
    return "○", "white"


def _print_path(result, quiet: bool) -> None:
    view = result.view
    if view is None:
        return

    if not quiet:
        label = view.field_label or (result.config.picklist_field if result.config else "")
        click.secho(f"\n📍 {label} — {view.record_id}", fg="cyan", bold=True)

    if view.steps:
        click.echo("   ", nl=False)
        for step in view.steps:
            marker, color = _step_marker(step.class_text)
            active = "slds-is-active" in step.class_text.split()
            click.secho(f"{marker} {step.label}", fg=color, bold=active, underline=active, nl=False)
            click.echo("  ", nl=False)
        click.echo()

    if view.update_button_text and not view.hide_update_button:
        state = " (disabled)" if view.is_update_button_disabled else ""
        click.echo(f"   Action: {view.update_button_text}{state}")

    if view.chooser_open:
        click.echo(f"   {view.modal_header}:")
        for step in view.closed_steps:
            click.echo(f"     • {step.value} ({step.label})")


@cli.command()
@click.option("--select", "-s", "select", default=None, help="Step to select first.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, select: str | None, as_json: bool) -> None:
    """Show the path and the action available on it."""
    from pathassist.core.use_cases.path_actions import show_path

    result = show_path(config_path=ctx.obj.get("config_path"), select=select)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    _print_path(result, quiet=ctx.obj.get("quiet", False))
    click.echo()


@cli.command()
@click.option("--select", "-s", "select", default=None, help="Step to select first.")
@click.option("--closed", "closed", default=None, help="Closed stage to pick if asked.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def advance(
    ctx: click.Context,
    select: str | None,
    closed: str | None,
    as_json: bool,
) -> None:
    """Perform the path's action on the record.

    Examples:

        pathassist advance

        pathassist advance --select Qualification

        pathassist advance --closed "Closed Won"
    """
    from pathassist.core.use_cases.path_actions import advance_path

    result = advance_path(
        config_path=ctx.obj.get("config_path"),
        select=select,
        closed=closed,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        if result.needs_closed:
            _print_path(result, quiet=True)
        sys.exit(1)

    receipt = result.receipt
    if receipt is not None and receipt.ok:
        click.secho(f"✅ {receipt.field_name} → {receipt.new_value}", fg="green", bold=True)

    _print_path(result, quiet=ctx.obj.get("quiet", False))
    click.echo()


@cli.group()
def config() -> None:
    """Path configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate path.yml configuration."""
    from pathassist.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Object: {result.config.object_name}")
        click.echo(f"   Field: {result.config.picklist_field}")
        click.echo(f"   Record: {result.config.record_id}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
