"""
uptime-config — CLI Entry Point

Usage:
    uptime-config serve [--host H] [--port N] [--debug]
    uptime-config show
    uptime-config render [--output FILE]
    uptime-config seed uptime.config.ts [--force]
    uptime-config push --owner OWNER --repo REPO [--token TOKEN]
"""

from __future__ import annotations

# Load .env FIRST, before anything reads environment variables
from pathlib import Path
from dotenv import load_dotenv

_env_file = Path.cwd() / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

import json
import sys

import click

from . import codec
from .errors import ConfigSyncError, NotConfigured
from .logging_config import setup_logging
from .mirror.settings import MirrorCredentials
from .settings import Settings
from .sync.coordinator import MirrorOutcome, SyncCoordinator


def _coordinator(ctx: click.Context) -> SyncCoordinator:
    obj = ctx.obj
    if obj.get("coordinator") is None:
        try:
            obj["coordinator"] = Settings.from_env(root=Path.cwd()).build_coordinator()
        except ValueError as e:
            raise click.UsageError(str(e))
    return obj["coordinator"]


def _fail(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """uptime-config — edit and sync the status page configuration."""
    ctx.ensure_object(dict)
    setup_logging(level=log_level)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", type=int, default=5050, help="Port")
@click.option("--debug", is_flag=True, help="Enable Flask debug mode")
def serve(host: str, port: int, debug: bool) -> None:
    """Run the admin API server."""
    from .admin.server import run_server

    run_server(host=host, port=port, debug=debug)


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """Print the stored configuration as JSON."""
    try:
        doc = _coordinator(ctx).read()
    except NotConfigured:
        _fail("No configuration stored yet (use `seed` or the editor)")
    except ConfigSyncError as e:
        _fail(str(e))
    click.echo(json.dumps(codec.to_api_dict(doc), indent=2, ensure_ascii=False))


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file (default: stdout)")
@click.pass_context
def render(ctx: click.Context, output: str | None) -> None:
    """Render the stored configuration as uptime.config.ts."""
    try:
        source = _coordinator(ctx).render_mirror_source()
    except NotConfigured:
        _fail("No configuration stored yet")
    except ConfigSyncError as e:
        _fail(str(e))

    if output:
        Path(output).write_text(source, encoding="utf-8")
        click.secho(f"✅ Written to {output}", fg="green")
    else:
        click.echo(source)


@cli.command()
@click.argument("source_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing stored config")
@click.pass_context
def seed(ctx: click.Context, source_file: str, force: bool) -> None:
    """Load an existing uptime.config.ts module into the store."""
    coordinator = _coordinator(ctx)

    try:
        doc = codec.from_mirror_source(Path(source_file).read_text(encoding="utf-8"))
    except ConfigSyncError as e:
        _fail(str(e))

    if not force:
        try:
            coordinator.read()
            _fail("A configuration is already stored (use --force to replace it)")
        except NotConfigured:
            pass
        except ConfigSyncError as e:
            _fail(str(e))

    try:
        coordinator.write(doc)
    except ConfigSyncError as e:
        _fail(str(e))
    click.secho(
        f"✓ Stored {len(doc.monitor_ids)} monitors from {source_file}", fg="green"
    )


@cli.command()
@click.option("--owner", required=True, help="Repository owner")
@click.option("--repo", required=True, help="Repository name")
@click.option("--token", envvar="GITHUB_TOKEN", help="GitHub token (default: $GITHUB_TOKEN)")
@click.option("--json", "as_json", is_flag=True, help="Output result as JSON")
@click.pass_context
def push(ctx: click.Context, owner: str, repo: str, token: str | None, as_json: bool) -> None:
    """Mirror the stored configuration to the repository now."""
    if not token:
        raise click.UsageError("A token is required (--token or GITHUB_TOKEN)")

    credentials = MirrorCredentials(token=token, owner=owner, repo=repo)
    try:
        result = _coordinator(ctx).mirror_current(credentials)
    except NotConfigured:
        _fail("No configuration stored yet")
    except ConfigSyncError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif result.mirror_outcome in (MirrorOutcome.SYNCED, MirrorOutcome.CREATED):
        click.secho(
            f"✓ {credentials.repo_slug} {result.mirror_outcome.value} "
            f"(commit: {(result.commit_sha or 'unknown')[:8]})",
            fg="green",
        )
    else:
        for warning in result.warnings:
            click.secho(f"⚠ {warning}", fg="yellow")

    if result.partial:
        sys.exit(1)


if __name__ == "__main__":
    cli()
