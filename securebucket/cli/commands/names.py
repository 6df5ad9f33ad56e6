"""``securebucket names`` — preview derived identifiers."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from securebucket.core.errors import SecureBucketError
from securebucket.core.naming import derive_names
from securebucket.core.normalizer import normalize

console = Console()


def names_cmd(
    project_id: str = typer.Option(..., "--project-id", "-p", help="Project identifier."),
    environment: str = typer.Option(None, "--environment", "-e", help="Environment name."),
) -> None:
    """Print every identifier derived for a project and environment."""
    try:
        config = normalize({"project_id": project_id, "environment": environment})
    except SecureBucketError as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {e}")
        raise typer.Exit(code=1)

    names = derive_names(config)
    table = Table(title=f"Names for {config.project_id} ({config.environment})")
    table.add_column("Identifier", style="cyan")
    table.add_column("Value", style="green")
    for field, value in names.model_dump().items():
        table.add_row(field, value)
    console.print(table)
