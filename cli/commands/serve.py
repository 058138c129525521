# cli/commands/serve.py
"""Run the dashboard API server."""

import click

from core.config import get_settings


@click.command()
@click.option('--host', default=None, help='Bind address (defaults to LUMINA_API_HOST)')
@click.option('--port', default=None, type=int, help='Port (defaults to LUMINA_API_PORT)')
def serve(host, port):
    """Serve the workflow API with uvicorn."""
    import uvicorn

    from core.api.rest.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_config=None,
    )
