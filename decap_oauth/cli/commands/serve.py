"""Serve command: run the relay with uvicorn."""

from pathlib import Path
from typing import Annotated, Any

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape

from decap_oauth.api.app import create_app
from decap_oauth.config.settings import ConfigurationError, Settings
from decap_oauth.core.logging import get_logger, setup_logging


console = Console(stderr=True)
logger = get_logger(__name__)


def load_settings(config_path: Path | None, **overrides: Any) -> Settings:
    """Load settings or exit with status 1.

    The relay must never start accepting requests without client credentials.
    """
    try:
        return Settings.from_config(config_path, **overrides)
    except ConfigurationError as e:
        console.print(
            f"[bold red]error:[/bold red] {escape(str(e))}", highlight=False
        )
        raise typer.Exit(1) from e


def get_server_startup_message(settings: Settings) -> str:
    """Generate a server startup message."""
    return (
        f"Server listening on {settings.server_url} "
        f"(provider: {settings.oauth.provider})"
    )


def serve(
    ctx: typer.Context,
    host: Annotated[
        str | None,
        typer.Option("--host", help="Interface to bind to (default: 0.0.0.0)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(
            "--port", "-p", min=1, max=65535, help="Port to listen on (default: 3005)"
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL"),
    ] = None,
    json_logs: Annotated[
        bool | None,
        typer.Option("--json-logs/--no-json-logs", help="Render logs as JSON"),
    ] = None,
) -> None:
    """Run the OAuth relay server."""
    server_overrides: dict[str, Any] = {}
    if host is not None:
        server_overrides["host"] = host
    if port is not None:
        server_overrides["port"] = port

    logging_overrides: dict[str, Any] = {}
    if log_level is not None:
        logging_overrides["level"] = log_level
    if json_logs is not None:
        logging_overrides["json_logs"] = json_logs

    config_path = (ctx.obj or {}).get("config_path")
    settings = load_settings(
        config_path, server=server_overrides, logging=logging_overrides
    )

    setup_logging(
        json_logs=settings.logging.json_logs, log_level=settings.logging.level
    )
    app = create_app(settings)

    logger.info(
        "server_start",
        message=get_server_startup_message(settings),
        category="lifecycle",
    )

    uvicorn.run(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,
        access_log=False,
    )
