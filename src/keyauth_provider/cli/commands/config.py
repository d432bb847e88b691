"""Config commands for keyauth-provider CLI."""

import json
import sys

import click

from keyauth_provider.config import AppConfig
from keyauth_provider.utils.config import get_config_path


@click.group()
def config() -> None:
    """Configuration management commands."""


@config.command("show")
def config_show() -> None:
    """Display current configuration."""
    config_path = get_config_path()
    try:
        loaded = AppConfig.load_from_files(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(loaded.model_dump(), indent=2))


@config.command("path")
def config_path_cmd() -> None:
    """Show config file path."""
    click.echo(str(get_config_path()))
