"""Start command for keyauth-provider CLI.

Loads configuration and provider files, then serves the HTTP surface with
uvicorn.
"""

import sys

import click
import uvicorn

from keyauth_provider import __version__
from keyauth_provider.api.server import build_coordinator, create_app
from keyauth_provider.assets import load_assets
from keyauth_provider.config import AppConfig
from keyauth_provider.exceptions import AssetLoadError
from keyauth_provider.telemetry.audit.handshake_logger import create_handshake_logger
from keyauth_provider.telemetry.system.system_logger import configure_system_logger
from keyauth_provider.utils.config import (
    ensure_directories,
    get_audit_log_path,
    get_config_path,
    get_system_log_path,
)


@click.command()
@click.option("--host", help="Override the configured bind interface")
@click.option("--port", type=int, help="Override the configured port")
def start(host: str | None, port: int | None) -> None:
    """Start the provider server.

    Loads configuration from the OS-appropriate location (or
    $KEYAUTH_PROVIDER_CONFIG). Handshake state lives in memory and is lost
    on restart.
    """
    config_path = get_config_path()

    try:
        loaded_config = AppConfig.load_from_files(config_path)
    except FileNotFoundError as e:
        click.echo(f"\nError: {e}", err=True)
        click.echo("Run 'keyauth-provider init' first.", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"\nError: Invalid configuration: {e}", err=True)
        backup_path = config_path.with_suffix(".json.bak")
        if backup_path.exists():
            click.echo("\nA backup file exists from a previous edit.", err=True)
            click.echo(f"To restore: cp '{backup_path}' '{config_path}'", err=True)
        sys.exit(1)

    try:
        ensure_directories(loaded_config)
        system_logger = configure_system_logger(
            loaded_config.logging.log_level,
            get_system_log_path(loaded_config),
        )
        audit_logger = create_handshake_logger(get_audit_log_path(loaded_config))
    except OSError as e:
        click.echo(f"Error: Could not set up logging: {e}", err=True)
        sys.exit(1)

    try:
        assets = load_assets(loaded_config.provider)
    except AssetLoadError as e:
        system_logger.error(
            {
                "event": "asset_load_failed",
                "message": str(e),
                "component": "cli",
                "details": {"asset": e.asset, "path": e.path},
            }
        )
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    coordinator = build_coordinator(loaded_config, assets, audit_logger=audit_logger)
    app = create_app(loaded_config, assets, coordinator=coordinator)

    bind_host = host or loaded_config.server.host
    bind_port = port or loaded_config.server.port

    click.echo(f"keyauth-provider v{__version__}", err=True)
    click.echo(f"Provider: {loaded_config.provider.name}", err=True)
    click.echo("-" * 50, err=True)

    system_logger.info(
        {
            "event": "provider_started",
            "component": "cli",
            "details": {"host": bind_host, "port": bind_port, "version": __version__},
        }
    )
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=loaded_config.logging.log_level.lower())
