# cli/commands/assistant.py
"""Assistant CLI commands: chat, generate and analyze workflows."""

import asyncio
import functools
import json
import sys
from pathlib import Path

import click

from assistant.client import AssistantClient
from assistant.session import AssistantSession, is_generation_request
from cli.commands.workflow import ingest_file
from core.workflow.errors import IngestionError
from core.workflow.ingestion import ingest


def async_command(f):
    """Decorator to run async functions with Click."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))
    return wrapper


@click.group()
def assistant():
    """AI assistant commands."""
    pass


@assistant.command()
@async_command
async def chat():
    """Chat with the assistant. Ask it to "create a workflow ..." to design one."""
    generated = []

    async with AssistantClient() as client:
        session = AssistantSession(client, on_workflow_generated=generated.append)
        click.echo(f"🤖 {session.messages[0].content}")
        click.echo("   (empty line or Ctrl-D to quit)")

        while True:
            try:
                text = click.prompt("you", default="", show_default=False)
            except (EOFError, click.Abort):
                break
            if not text.strip():
                break

            if is_generation_request(text):
                click.echo("🔨 Generating workflow schema...")
            reply = await session.send(text)
            if reply is not None:
                click.echo(f"🤖 {reply.content}")

    for wf in generated:
        click.echo(f"📋 {wf.name} [{wf.id}] - {len(wf.nodes)} nodes")


@assistant.command()
@click.argument('request', nargs=-1, required=True)
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Write the workflow JSON here')
@async_command
async def generate(request, output):
    """Generate a workflow from a natural language request."""
    request_text = ' '.join(request)
    click.echo(f"🤖 Designing: {request_text}")

    async with AssistantClient() as client:
        raw = await client.generate_workflow(request_text)

    try:
        result = ingest(raw)
    except IngestionError as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    wf = result.workflow
    for warning in result.warnings:
        click.echo(f"⚠️  {warning.message}")

    content = json.dumps(wf.to_dict(), indent=2)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding='utf-8')
        click.echo(f"✅ Workflow '{wf.name}' ({len(wf.nodes)} nodes) saved to: {output}")
    else:
        click.echo(content)


@assistant.command()
@click.argument('workflow_file', type=click.Path(exists=True, path_type=Path))
@async_command
async def analyze(workflow_file):
    """Ask the assistant to review a workflow for improvements and risks."""
    wf = ingest_file(workflow_file).workflow
    click.echo(f"🔍 Analyzing '{wf.name}'...")

    async with AssistantClient() as client:
        analysis = await client.analyze_workflow(wf)

    click.echo(analysis)
