"""Init command for keyauth-provider CLI.

Writes the configuration file from flags, prompting for anything required
that was not given (unless --non-interactive).
"""

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from keyauth_provider.config import (
    AppConfig,
    LoggingConfig,
    ProviderConfig,
    ServerConfig,
    TokenConfig,
)
from keyauth_provider.constants import (
    DEFAULT_CALLBACK_PATH,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TOKEN_TTL_SECONDS,
)
from keyauth_provider.utils.config import ensure_directories, get_config_path


def _check_file(label: str, path: str | None) -> str | None:
    """Resolve path and exit if it does not point at a readable file."""
    if path is None:
        return None
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        click.echo(f"Error: {label} not found: {resolved}", err=True)
        sys.exit(1)
    return str(resolved)


@click.command()
@click.option(
    "--non-interactive",
    is_flag=True,
    help="Skip prompts, require all options via flags",
)
@click.option("--name", help="Provider name sent to consumers (e.g., keys.example.com)")
@click.option("--about", default="", help="Provider description served at /about")
@click.option("--private-key", help="Encrypted PEM RSA private key. Its passphrase is the login credential.")
@click.option("--public-key", help="PEM public key served at /key")
@click.option("--avatar", help="Avatar image served at /avatar")
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Interface to bind")
@click.option("--port", type=int, default=DEFAULT_PORT, show_default=True, help="Port to listen on")
@click.option(
    "--callback-path",
    default=DEFAULT_CALLBACK_PATH,
    show_default=True,
    help="Path on the consumer that receives the post-login redirect",
)
@click.option(
    "--token-ttl",
    type=int,
    default=DEFAULT_TOKEN_TTL_SECONDS,
    show_default=True,
    help="Handshake lifetime in seconds (0 keeps handshakes until restart)",
)
@click.option("--log-dir", help="Log directory path (omit to log to stderr only)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING"], case_sensitive=False),
    default="INFO",
    help="Logging verbosity (default: INFO)",
)
@click.option("--force", is_flag=True, help="Overwrite existing config without prompting")
def init(
    non_interactive: bool,
    name: str | None,
    about: str,
    private_key: str | None,
    public_key: str | None,
    avatar: str | None,
    host: str,
    port: int,
    callback_path: str,
    token_ttl: int,
    log_dir: str | None,
    log_level: str,
    force: bool,
) -> None:
    """Initialize provider configuration.

    Creates configuration at the OS-appropriate location, or at
    $KEYAUTH_PROVIDER_CONFIG when set.

    Use --non-interactive with --name and --private-key for scripted setup.
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        if non_interactive:
            click.echo("Error: Config already exists. Use --force to overwrite.", err=True)
            sys.exit(1)
        if not click.confirm("Config already exists. Overwrite?", default=False):
            click.echo("Aborted.")
            sys.exit(0)

    try:
        if not name:
            if non_interactive:
                click.echo("Error: --name is required in non-interactive mode.", err=True)
                sys.exit(1)
            name = click.prompt("Provider name")
        if not private_key:
            if non_interactive:
                click.echo("Error: --private-key is required in non-interactive mode.", err=True)
                sys.exit(1)
            private_key = click.prompt("Private key path")
    except click.Abort:
        click.echo("Aborted.")
        sys.exit(0)

    private_key_path = _check_file("Private key", private_key)
    assert private_key_path is not None

    try:
        config = AppConfig(
            provider=ProviderConfig(
                name=name,
                about=about,
                private_key_path=private_key_path,
                public_key_path=_check_file("Public key", public_key),
                avatar_path=_check_file("Avatar", avatar),
                callback_path=callback_path,
            ),
            server=ServerConfig(host=host, port=port),
            tokens=TokenConfig(ttl_seconds=token_ttl or None),
            logging=LoggingConfig(log_dir=log_dir, log_level=log_level.upper()),
        )
    except ValidationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    try:
        config.save_to_file(config_path)
        ensure_directories(config)
    except OSError as e:
        click.echo(f"Error: Failed to save configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration saved to {config_path}")
    click.echo("Start the provider with: keyauth-provider start")
