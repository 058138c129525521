# cli/main.py
"""Main CLI entry point for Lumina Workflows."""

import click

from core.monitoring.logging import configure_logging


@click.group()
@click.version_option(version='1.0.0')
@click.option('--log-level', default=None, help='Log level (defaults to LUMINA_LOG_LEVEL)')
@click.option('--log-json', is_flag=True, default=False, help='Emit JSON log lines')
def cli(log_level, log_json):
    """Lumina Workflows CLI - design, validate and render workflow graphs with AI assistance."""
    configure_logging(level=log_level, json_output=log_json or None)


# Import and register command groups
def register_commands():
    """Register all CLI command groups."""
    from cli.commands.workflow import workflow
    cli.add_command(workflow)

    from cli.commands.assistant import assistant
    cli.add_command(assistant)

    from cli.commands.serve import serve
    cli.add_command(serve)


# Register all commands
register_commands()


if __name__ == '__main__':
    cli()
