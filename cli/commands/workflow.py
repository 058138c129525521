# cli/commands/workflow.py
"""Workflow commands: list, validate and render workflow graphs."""

import json
import sys
from pathlib import Path
from typing import Any, List

import click
import yaml

from core.visual.geometry import connection_curves
from core.visual.renderer import render_scene, render_svg
from core.workflow.editing import auto_layout
from core.workflow.errors import IngestionError
from core.workflow.ingestion import IngestionResult, ingest, ingest_many
from core.workflow.models import Workflow
from core.workflow.templates import sample_workflows


def read_payload(path: Path) -> Any:
    """Read a JSON or YAML graph payload, exiting with status 1 when it cannot be parsed."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        click.echo(f"❌ Could not parse {path}: {e}", err=True)
        sys.exit(1)


def ingest_file(path: Path) -> IngestionResult:
    """Ingest a payload file, exiting with status 1 when it is rejected."""
    payload = read_payload(path)
    try:
        return ingest(payload)
    except IngestionError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)


@click.group()
def workflow():
    """Manage workflows - list, validate and render."""
    pass


# ============================================================================
# Workflow Commands
# ============================================================================

@workflow.command('list')
@click.option('--file', '-f', 'workflow_file', type=click.Path(exists=True, path_type=Path),
              help='JSON/YAML file holding one workflow payload or a list of them')
@click.option('--details', is_flag=True, help='Show workflow details')
def list_workflows(workflow_file: Path, details: bool):
    """List the sample workflows, or the workflows in a file."""
    if workflow_file:
        payload = read_payload(workflow_file)
        payloads = payload if isinstance(payload, list) else [payload]
        try:
            workflows: List[Workflow] = [r.workflow for r in ingest_many(payloads)]
        except IngestionError as e:
            click.echo(f"❌ {e}", err=True)
            sys.exit(1)
    else:
        workflows = sample_workflows()

    if not workflows:
        click.echo("📭 No workflows found")
        return

    click.echo("📚 Workflows:")
    for wf in workflows:
        state = "active" if wf.active else "inactive"
        click.echo(f"  • {wf.name} [{wf.id}] - {len(wf.nodes)} nodes, {state}")
        if details:
            if wf.description:
                click.echo(f"      {wf.description}")
            if wf.last_run:
                click.echo(f"      Last run: {wf.last_run}")
            for node in wf.nodes:
                click.echo(f"      - {node.id}: {node.name} ({node.kind})")


@workflow.command()
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
def validate(workflow_file: Path):
    """Validate a generated workflow payload."""
    result = ingest_file(workflow_file)
    wf = result.workflow

    click.echo(f"✅ Workflow '{wf.name}' is valid")
    click.echo(f"   Nodes: {len(wf.nodes)}")
    click.echo(f"   Connections: {len(wf.connections)}")
    for warning in result.warnings:
        click.echo(f"⚠️  {warning.message}")


@workflow.command()
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
@click.option('--format', 'output_format', type=click.Choice(['svg', 'json', 'paths']),
              default='svg', help='Output format')
@click.option('--auto-layout', 'relayout', is_flag=True, help='Re-arrange nodes before rendering')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file')
def render(workflow_file: Path, output_format: str, relayout: bool, output: Path):
    """Render a workflow payload as SVG, a JSON scene, or bezier paths."""
    wf = ingest_file(workflow_file).workflow
    if relayout:
        wf = auto_layout(wf)

    if output_format == 'svg':
        content = render_svg(wf)
    elif output_format == 'json':
        content = json.dumps(render_scene(wf), indent=2)
    else:
        content = "\n".join(
            f"{item.connection_id}: {item.curve.to_svg_path()}"
            for item in connection_curves(wf)
        )

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding='utf-8')
        click.echo(f"✅ Rendered to: {output}")
    else:
        click.echo(content)
