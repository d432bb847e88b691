"""Command-line interface for keyauth-provider.

Provides commands for initializing configuration, starting the provider
server, and inspecting configuration.
"""

from .main import cli, main

__all__ = ["cli", "main"]
