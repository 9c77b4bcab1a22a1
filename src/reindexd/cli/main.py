"""reindexd CLI - serve the daemon or talk to a running one."""

import asyncio
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click
from rich.console import Console

from reindexd.client import send_request
from reindexd.config.loader import load_config
from reindexd.config.models import ReindexdConfig
from reindexd.core.errors import ReindexdError
from reindexd.core.logging import configure_logging

DEFAULT_CLIENT_HOST = "127.0.0.1"
DEFAULT_CLIENT_PORT = 5018


def _package_version() -> str:
    try:
        return version("reindexd")
    except PackageNotFoundError:
        return "unknown"


def _print_banner(config: ReindexdConfig) -> None:
    """Startup banner on stderr, kept apart from structured logs."""
    console = Console(stderr=True)
    banner_width = 64
    rule_line = "─" * banner_width

    console.print(rule_line, style="dim cyan", highlight=False)
    console.print(
        f"reindexd v{_package_version()} · Starting".center(banner_width),
        style="bold cyan",
        highlight=False,
    )
    console.print(rule_line, style="dim cyan", highlight=False)
    console.print(f"  Listen:        {config.server.host}:{config.server.port}", highlight=False)
    console.print(f"  Indexer:       {config.indexer.bin_path}", highlight=False)
    console.print(f"  Sphinx config: {config.indexer.config_path}", highlight=False)
    console.print(f"  searchd log:   {config.searchd.log_path}", style="dim", highlight=False)
    console.print()


@click.group()
@click.version_option(package_name="reindexd", prog_name="reindexd")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """reindexd - rebuild Sphinx indexes on request and wait for searchd to rotate them."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command("serve")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file (default: /etc/reindexd/config.yaml if present)",
)
@click.option("--host", help="Override bind address")
@click.option("--port", "-p", type=int, help="Override listener port")
@click.option("--quiet", is_flag=True, help="Skip the startup banner")
@click.pass_context
def serve_command(
    ctx: click.Context,
    config_path: Path | None,
    host: str | None,
    port: int | None,
    quiet: bool,
) -> None:
    """Run the daemon in the foreground until interrupted."""
    from reindexd.daemon.lifecycle import run_server

    try:
        config = load_config(config_path)
    except ReindexdError as e:
        raise click.ClickException(e.message) from e

    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port
    if ctx.obj.get("verbose"):
        config.logging.level = "DEBUG"

    configure_logging(config=config.logging)
    if not quiet:
        _print_banner(config)

    try:
        asyncio.run(run_server(config))
    except ReindexdError as e:
        raise click.ClickException(e.message) from e


def _client_options(func):  # type: ignore[no-untyped-def]
    func = click.option(
        "--timeout", type=float, default=None, help="Socket timeout in seconds (default: none)"
    )(func)
    func = click.option("--port", "-p", type=int, default=DEFAULT_CLIENT_PORT, show_default=True)(
        func
    )
    func = click.option("--host", default=DEFAULT_CLIENT_HOST, show_default=True)(func)
    return func


def _exchange(host: str, port: int, kind: str, index: str, timeout: float | None) -> None:
    try:
        response = send_request(host, port, kind, index, timeout=timeout)
    except ReindexdError as e:
        raise click.ClickException(e.message) from e
    if not response.ok:
        raise click.ClickException(response.error)
    click.echo(response.message)


@cli.command("ping")
@_client_options
@click.pass_context
def ping_command(ctx: click.Context, host: str, port: int, timeout: float | None) -> None:
    """Check that a daemon is answering."""
    configure_logging(level="DEBUG" if ctx.obj.get("verbose") else "WARNING")
    _exchange(host, port, "ping", "", timeout)


@cli.command("reindex")
@click.argument("index")
@_client_options
@click.pass_context
def reindex_command(
    ctx: click.Context, index: str, host: str, port: int, timeout: float | None
) -> None:
    """Ask the daemon to rebuild INDEX and wait until searchd rotates it."""
    configure_logging(level="DEBUG" if ctx.obj.get("verbose") else "WARNING")
    _exchange(host, port, "reindex", index, timeout)


if __name__ == "__main__":
    cli()
