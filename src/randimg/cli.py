"""Command line interface for randimg."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
import uvicorn
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from randimg.cache import MissingSnapshotError, SnapshotCorruptError
from randimg.cache.models import MetadataSnapshot, Orientation
from randimg.config import ConfigError, ConfigManager, RandimgConfig, env_names, parse_document
from randimg.devices import classify_user_agent
from randimg.logging_config import configure_logging
from randimg.selection import ImageNotFoundError, Selector
from randimg.server import create_app
from randimg.service import ImageService

console = Console()


def _fail(code: str, message: str, *, json_output: bool, **details: Any) -> NoReturn:
    """Report a failed command as a JSON error document or a click error."""
    if not json_output:
        raise click.ClickException(message)
    error: dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    console.print_json(data={"error": error})
    raise SystemExit(1)


def _load_config(directory: Optional[str] = None, **overrides: Any) -> RandimgConfig:
    """Load configuration with CLI overrides and configure logging.

    Args:
        directory: Optional image directory override.
        overrides: Additional dotted-key overrides; None values are ignored.

    Returns:
        RandimgConfig: Effective configuration.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    cli_overrides = {key.replace("__", "."): value for key, value in overrides.items() if value is not None}
    if directory is not None:
        cli_overrides["images.directory"] = directory

    try:
        config = ConfigManager().load(cli_overrides=cli_overrides or None)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(config.logging)
    return config


def _snapshot_payload(snapshot: MetadataSnapshot, *, reason: Optional[str]) -> dict[str, Any]:
    buckets = Selector.partition(snapshot)
    return {
        "directory": snapshot.directory,
        "created_at": snapshot.created_at.isoformat(),
        "expires_at": snapshot.expires_at.isoformat(),
        "valid": reason is None,
        "stale_reason": reason,
        "counts": {
            "total": len(snapshot.records),
            "portrait": len(buckets[Orientation.PORTRAIT]),
            "landscape": len(buckets[Orientation.LANDSCAPE]),
        },
        "records": [
            record.model_dump(mode="json")
            for bucket in buckets.values()
            for record in bucket
        ],
    }


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands.

    Args:
        command: Command name to include in the summary.
        root: Image directory relevant to the command.
        metrics: Ordered mapping of metric names to values.

    Returns:
        str: Rich-formatted summary string.
    """

    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {root}: {parts}.[/green]"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="randimg")
def cli() -> None:
    """randimg serves a random image that fits the client's screen orientation."""


@cli.command()
@click.option("--host", type=str, help="Interface to bind (defaults to configuration).")
@click.option("--port", type=int, help="Port to listen on (defaults to configuration).")
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=str),
    help="Image directory to serve from.",
)
def serve(host: Optional[str], port: Optional[int], directory: Optional[str]) -> None:
    """Run the HTTP image server."""
    config = _load_config(directory, server__host=host, server__port=port)
    console.print(
        f"[cyan]Serving images from {config.images.directory} on "
        f"http://{config.server.host}:{config.server.port}/[/cyan]"
    )
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )


@cli.command()
@click.option("--device", type=str, help="Device type to pick for (any key of selection.preferences).")
@click.option("--user-agent", type=str, help="Classify the device from a user-agent string.")
@click.option(
    "--strict/--permissive",
    "strict",
    default=None,
    help="Require the preferred orientation (defaults to configuration).",
)
@click.option("--seed", type=int, help="Seed the random choice for reproducible picks.")
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=str),
    help="Image directory to pick from.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the selection as JSON.")
def pick(
    device: Optional[str],
    user_agent: Optional[str],
    strict: Optional[bool],
    seed: Optional[int],
    directory: Optional[str],
    json_output: bool,
) -> None:
    """Print the path of a randomly selected image.

    Args:
        device: Explicit device type; wins over `--user-agent`.
        user_agent: User-agent string used to detect the device type.
        strict: Strict-mode override.
        seed: Optional seed for the random source.
        directory: Optional image directory override.
        json_output: Whether to emit JSON.
    """
    if device and user_agent:
        raise click.UsageError("Use either --device or --user-agent, not both.")

    config = _load_config(directory)
    rng = random.Random(seed) if seed is not None else None
    service = ImageService.from_config(config, rng=rng)
    if device and not service.knows(device):
        raise click.BadParameter(
            f"unknown device type '{device}' (expected one of: {', '.join(service.device_types)})",
            param_hint="--device",
        )
    device_type = device.strip().lower() if device else classify_user_agent(user_agent).value

    try:
        selection = service.pick(device_type, strict_mode=strict)
    except ImageNotFoundError as exc:
        _fail(
            "image_not_found",
            str(exc),
            json_output=json_output,
            device=device_type,
            directory=config.images.directory,
        )

    if json_output:
        console.print_json(data={"path": str(selection.path), **selection.info})
        return
    click.echo(str(selection.path))


@cli.group()
def cache() -> None:
    """Inspect and manage the image metadata cache."""


@cache.command("status")
@click.option("--json", "json_output", is_flag=True, help="Emit cache status as JSON.")
def cache_status(json_output: bool) -> None:
    """Show the persisted snapshot and whether it is still valid."""
    config = _load_config()
    service = ImageService.from_config(config)
    store = service.store

    try:
        snapshot = store.repository.load()
    except MissingSnapshotError:
        _fail("cache_missing", "No image cache has been built yet.", json_output=json_output)
    except SnapshotCorruptError as exc:
        _fail("cache_corrupt", str(exc), json_output=json_output)

    reason = store.check(snapshot)
    payload = _snapshot_payload(snapshot, reason=reason)
    if json_output:
        console.print_json(data=payload)
        return

    table = Table(title=f"Image cache: {snapshot.directory}")
    table.add_column("Path", overflow="fold")
    table.add_column("Size", justify="right")
    table.add_column("Orientation")
    table.add_column("Aspect", justify="right")
    for record in payload["records"]:
        table.add_row(
            Path(record["path"]).name,
            f"{record['width']}x{record['height']}",
            record["orientation"],
            f"{record['aspect_ratio']:.2f}",
        )
    console.print(table)
    console.print(f"Created: {payload['created_at']}  Expires: {payload['expires_at']}")
    if reason is None:
        console.print("[green]Cache is valid.[/green]")
    else:
        console.print(f"[yellow]Cache is stale ({reason}); the next request rebuilds it.[/yellow]")
    console.print(_format_summary_line("Cache", snapshot.directory, payload["counts"]))


@cache.command("rebuild")
@click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=str),
    help="Image directory to scan.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the rebuilt snapshot summary as JSON.")
def cache_rebuild(directory: Optional[str], json_output: bool) -> None:
    """Rescan the image directory and replace the cache."""
    config = _load_config(directory)
    snapshot = ImageService.from_config(config).rebuild()
    payload = _snapshot_payload(snapshot, reason=None)
    if json_output:
        console.print_json(data=payload)
        return
    console.print(_format_summary_line("Rebuild", snapshot.directory, payload["counts"]))


@cache.command("clear")
def cache_clear() -> None:
    """Delete the cache so the next request rebuilds it."""
    config = _load_config()
    removed = ImageService.from_config(config).invalidate()
    if removed:
        console.print("[green]Image cache cleared.[/green]")
    else:
        console.print("[yellow]No image cache to clear.[/yellow]")


@cli.group()
def config() -> None:
    """Manage the randimg configuration file and its overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore RANDIMG__* environment overrides.")
def config_view(no_env: bool) -> None:
    """Print the effective configuration as YAML."""
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print(f"[dim]# {manager.config_path}[/dim]")
    console.print(Syntax(yaml.safe_dump(loaded.model_dump(mode="json"), sort_keys=False), "yaml"))


@config.command("env")
def config_env() -> None:
    """List the environment variable that overrides each setting."""
    try:
        loaded = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    for name, value in env_names(loaded).items():
        click.echo(f"{name}={value}")


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML value for KEY, e.g. 300, true or '[jpg, png]'.")
def config_set(key: str, value: str) -> None:
    """Write a dotted KEY such as cache.ttl_seconds to the configuration file."""
    try:
        before, after = ConfigManager().update(key, yaml.safe_load(value))
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if before == after:
        console.print(f"[yellow]No changes applied; {escape(key)} is already {escape(repr(after))}.[/yellow]")
        return
    console.print(f"[green]Updated {escape(key)}: {escape(repr(before))} -> {escape(repr(after))}[/green]")


@config.command("edit")
def config_edit() -> None:
    """Edit the configuration file in $EDITOR and save it if it validates."""
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")
    if edited is None or edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        manager.save(parse_document(edited))
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Configuration updated: {manager.config_path}[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
