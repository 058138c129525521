"""Lumina Workflows core: workflow graphs, rendering, configuration and API."""

__version__ = "1.0.0"
