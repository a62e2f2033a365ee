"""Main entry point for the decap-oauth CLI.

Logs the CLI argv and relevant environment variables (masked) at debug level
so every command emits its context consistently.
"""

import os
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from decap_oauth.core._version import __version__
from decap_oauth.core.logging import get_logger

from .commands.config import app as config_app
from .commands.serve import serve


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        Console().print(f"decap-oauth {__version__}")
        raise typer.Exit()


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=False,
    pretty_exceptions_enable=False,
    invoke_without_command=True,
)

logger = get_logger(__name__)


@app.callback()
def app_main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML configuration file",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
) -> None:
    """Decap OAuth - OAuth popup relay for Decap CMS."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    # If no command is invoked, run the serve command by default
    if ctx.invoked_subcommand is None:
        ctx.invoke(serve, ctx=ctx)


app.add_typer(config_app)
app.command(name="serve")(serve)


def _mask_env_value(key: str, value: str) -> str:
    """Mask sensitive values based on common substrings in the key."""
    lowered = key.lower()
    sensitive_markers = [
        "token",
        "secret",
        "password",
        "key",
        "credential",
    ]
    if any(m in lowered for m in sensitive_markers):
        if not value:
            return value
        return "***MASKED***"
    return value


def _collect_relevant_env() -> dict[str, str]:
    """Collect env vars relevant to settings and mask sensitive ones."""
    prefixes = (
        "OAUTH_",
        "LOGGING__",
        "SERVER__",
        "CONFIG_FILE",
    )
    env = {
        k: _mask_env_value(k, v)
        for k, v in os.environ.items()
        if k.upper().startswith(prefixes)
    }
    return dict(sorted(env.items(), key=lambda kv: kv[0]))


def _log_cli_invocation_context() -> None:
    """Log argv and selected env at debug level for all commands."""
    logger.debug(
        "cli_invocation",
        argv=sys.argv,
        env=_collect_relevant_env(),
        category="cli",
    )


def main() -> None:
    """Entry point for the CLI application."""
    _log_cli_invocation_context()
    app()


if __name__ == "__main__":
    main()
