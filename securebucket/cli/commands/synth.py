"""``securebucket synth`` — build the resource graph and print it.

Options left unset fall back to ``SECUREBUCKET_*`` settings.
"""

from __future__ import annotations

import json
import logging

import typer
from aws_cdk import App, Environment, Stack
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from securebucket.config import ProvisionerSettings
from securebucket.core.construct import SecureBucket, SecureBucketStack
from securebucket.core.errors import SecureBucketError
from securebucket.core.hasher import graph_fingerprint
from securebucket.models.graph import ResourceGraph
from securebucket.models.resources import ResourceKind, ResourceNode, TrustAnchor

console = Console()

STACK_ID = "SecureBucketStack"


def synth_cmd(
    project_id: str = typer.Option(None, "--project-id", "-p", help="Project identifier."),
    environment: str = typer.Option(None, "--environment", "-e", help="Environment name."),
    identity_repo: str = typer.Option(
        None, "--identity-repo", "-r", help="GitHub repository (owner/repo) trusted by the role."
    ),
    additional_identity_repos: list[str] | None = typer.Option(
        None,
        "--additional-identity-repo",
        "-a",
        help="Additional trusted repository. Repeatable.",
    ),
    versioning: bool | None = typer.Option(
        None, "--versioning/--no-versioning", help="Enable store versioning."
    ),
    encryption: bool | None = typer.Option(
        None, "--encryption/--no-encryption", help="Create a KMS key for the store."
    ),
    account: str = typer.Option(None, "--account", help="Target account id."),
    region: str = typer.Option(None, "--region", help="Target region."),
    oidc_provider_arn: str = typer.Option(
        None, "--oidc-provider-arn", help="Existing OIDC provider ARN to trust."
    ),
    stack: bool = typer.Option(
        False, "--stack", help="Apply stack-level defaults (versioning and encryption on)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the graph manifest as JSON."),
    template: bool = typer.Option(
        False, "--template", help="Print the synthesized CloudFormation template."
    ),
    log_level: str = typer.Option(None, "--log-level", help="Logging level."),
) -> None:
    """Synthesize the resource graph and its named outputs."""
    settings = ProvisionerSettings()
    logging.basicConfig(level=(log_level or settings.log_level).upper())

    overrides = {
        "project_id": project_id,
        "environment": environment,
        "identity_repo": identity_repo,
        "additional_identity_repos": additional_identity_repos or None,
        "enable_versioning": versioning,
        "enable_encryption": encryption,
    }
    raw = settings.to_raw_configuration().model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    provider_arn = oidc_provider_arn or settings.oidc_provider_arn
    anchor = TrustAnchor(arn=provider_arn) if provider_arn else None

    app = App()
    env = Environment(
        account=account or settings.account, region=region or settings.region
    )
    try:
        if stack:
            target = SecureBucketStack(
                app, STACK_ID, config=raw, trust_anchor=anchor, env=env
            )
            graph = target.graph
        else:
            target = Stack(app, STACK_ID, env=env)
            graph = SecureBucket(
                target, "SecureBucket", config=raw, trust_anchor=anchor
            ).graph
    except SecureBucketError as e:
        console.print(f"[bold red]Synthesis failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    if template:
        assembly = app.synth()
        typer.echo(
            json.dumps(
                assembly.get_stack_by_name(target.stack_name).template,
                indent=2,
                sort_keys=True,
            )
        )
        return

    if as_json:
        typer.echo(json.dumps(graph.to_manifest(), indent=2, sort_keys=True))
        return

    render_graph(graph)


def render_graph(graph: ResourceGraph) -> None:
    """Print resources, grants and outputs as Rich tables."""
    resources = Table(title="Resources")
    resources.add_column("Logical ID", style="cyan")
    resources.add_column("Kind")
    resources.add_column("Name", style="green")
    resources.add_column("Details")
    for node in graph.nodes:
        resources.add_row(node.logical_id, node.kind.value, node.physical_name, _details(node))
    console.print(resources)

    if graph.role is not None:
        grants = Table(title=f"Grants for {graph.role.name}")
        grants.add_column("Grant", style="cyan")
        grants.add_column("Kind")
        grants.add_column("Target")
        grants.add_column("Broad", justify="center")
        for g in graph.role.grants:
            broad = "[red]Yes[/red]" if g.broad else "[green]No[/green]"
            grants.add_row(g.sid, g.kind.value, g.target, broad)
        console.print(grants)

    outputs = Table(title="Outputs")
    outputs.add_column("Export", style="cyan")
    outputs.add_column("Value", style="green")
    for export_name, value in graph.outputs.as_mapping().items():
        outputs.add_row(export_name, value)
    console.print(outputs)

    console.print(
        Panel(
            f"[bold]Fingerprint:[/bold] {graph_fingerprint(graph)}",
            border_style="green",
        )
    )


def _details(node: ResourceNode) -> str:
    if node.kind is ResourceKind.STORE:
        return f"versioned={node.versioned} encryption={node.encryption.value}"
    if node.kind is ResourceKind.ENCRYPTION_KEY:
        return f"rotation={node.rotation_enabled}"
    patterns = ", ".join(node.subject_patterns)
    return f"trust={patterns} session={node.max_session_duration_seconds}s"
