"""Logging setup for Lumina Workflows."""

from core.monitoring.logging import configure_logging

__all__ = ["configure_logging"]
