"""CLI commands for jsonrpcws.

`serve` runs the websocket dispatch server, `call` invokes one remote
procedure, `version` prints the installed version.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from websocket import WebSocketException

from jsonrpcws import __logo__, __version__
from jsonrpcws.cli.shared.logging_utils import ensure_rotating_log_file
from jsonrpcws.cli.shared.network_utils import is_port_in_use
from jsonrpcws.cli.shared.rpc_utils import rpc_call
from jsonrpcws.utils.exceptions import JsonRpcWsError
from jsonrpcws.utils.helpers import load_expose_hook, parse_cli_value

app = typer.Typer(
    name="jsonrpcws",
    help=f"{__logo__} jsonrpcws - JSON-RPC over websockets",
    no_args_is_help=True,
)

console = Console()

DEMO_EXPOSE = "jsonrpcws.demo:expose"


@app.command()
def version():
    """Show the jsonrpcws version."""
    console.print(f"{__logo__} jsonrpcws v{__version__}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Bind host"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Websocket port"),
    path: Optional[str] = typer.Option(None, "--path", help="Websocket route"),
    expose: Optional[str] = typer.Option(None, "--expose", "-e", help="Expose hook, 'package.module:function'"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output (protocol trace)"),
):
    """Start the websocket RPC server."""
    from jsonrpcws.api.server import create_app, run_server
    from jsonrpcws.config.access import get_config

    try:
        config = get_config(config_path=config_path)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if host:
        config.server.host = host
    if port:
        config.server.port = port
    if path:
        config.server.path = path

    target = expose or config.rpc.expose or DEMO_EXPOSE
    try:
        expose_hook = load_expose_hook(target)
    except JsonRpcWsError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    if is_port_in_use(config.server.host, config.server.port):
        console.print(
            f"[red]Port {config.server.port} is already in use.[/red] "
            f"Use [cyan]--port[/cyan] to specify another port (current: {config.server.host}:{config.server.port})."
        )
        raise typer.Exit(1)

    log_path = ensure_rotating_log_file("serve", config.logging, level="DEBUG" if verbose else None)

    console.print(f"{__logo__} Starting jsonrpcws on {config.server.host}:{config.server.port}...")
    console.print(f"[dim]Expose hook: {target}[/dim]")
    console.print(f"[dim]Logs: {log_path}[/dim]")
    console.print(f"[green]✓[/green] RPC: {config.rpc_url} (GET /health)")
    logger.info("Serving {} on {} with hook {}", config.server.path, config.server.port, target)

    run_server(
        create_app(expose_hook, config=config),
        host=config.server.host,
        port=config.server.port,
        log_level="debug" if verbose else "warning",
    )


@app.command()
def call(
    method: str = typer.Argument(..., help="Procedure name, e.g. math.add"),
    params: Optional[list[str]] = typer.Argument(None, help="Positional params (parsed as JSON when possible)"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Websocket URL (default from config)"),
    request_id: Optional[str] = typer.Option(None, "--id", help="Request id (default: generated)"),
    timeout: float = typer.Option(10.0, "--timeout", "-t", help="Seconds to wait for the response"),
):
    """Invoke one remote procedure and print the response envelope."""
    if url is None:
        from jsonrpcws.config.access import get_config

        url = get_config().rpc_url
    values = [parse_cli_value(p) for p in (params or [])]
    try:
        response = rpc_call(url, method, values, request_id=request_id, timeout_s=timeout)
    except JsonRpcWsError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)
    except (OSError, WebSocketException) as e:
        console.print(f"[red]Cannot reach {url}: {e}[/red]")
        raise typer.Exit(1)

    console.print_json(json.dumps(response))
    if response.get("error") is not None:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
