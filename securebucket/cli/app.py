"""Main Typer application — registers all CLI commands.

Entry point: ``securebucket`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from securebucket.cli.commands.names import names_cmd
from securebucket.cli.commands.synth import synth_cmd

app = typer.Typer(
    name="securebucket",
    help="Securebucket: secure object store, KMS key and GitHub OIDC role construct.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="synth", help="Synthesize the resource graph and named outputs.")(synth_cmd)
app.command(name="names", help="Preview derived resource identifiers.")(names_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
