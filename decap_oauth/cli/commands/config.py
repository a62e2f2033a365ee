"""Configuration inspection commands."""

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .serve import load_settings


app = typer.Typer(name="config", help="Inspect the resolved configuration")

console = Console()


@app.command(name="show")
def show(ctx: typer.Context) -> None:
    """Print the resolved configuration with secrets masked."""
    settings = load_settings((ctx.obj or {}).get("config_path"))

    table = Table(title="decap-oauth configuration", box=box.SIMPLE)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for section, values in settings.model_dump_safe().items():
        for key, value in values.items():
            if isinstance(value, list):
                value = ", ".join(value) or "(any origin)"
            table.add_row(f"{section}.{key}", "" if value is None else str(value))

    console.print(table)
