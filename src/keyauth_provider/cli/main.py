"""Main CLI entry point for keyauth-provider.

Defines the CLI group and registers all subcommands.

Commands:
    init    - Write provider configuration
    start   - Start the provider server
    config  - Configuration management commands
        show - Display current configuration
        path - Show config file path

Usage:
    keyauth-provider -h, --help      Show help message
    keyauth-provider -v, --version   Show version
    keyauth-provider init            Initialize configuration
    keyauth-provider start           Start provider server
    keyauth-provider config show     Display configuration
    keyauth-provider config path     Show config file path
"""

import sys

import click

from keyauth_provider import __version__

from .commands.config import config
from .commands.init import init
from .commands.start import start


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Quick Start:
  keyauth-provider init --non-interactive \\
    --name keys.example.com \\
    --private-key ~/.ssh/provider.pem \\
    --public-key ~/.ssh/provider.pub.pem
  keyauth-provider start

Handshake:
  Consumer sends the browser to   /auth?client_id=<host[:port]>
  Provider redirects back to      http://<consumer><callback-path>?token=...&provider=...
  Consumer calls                  POST /auth/validate, then POST /auth/session
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """keyauth-provider: delegated login against an RSA key passphrase."""
    if version:
        click.echo(f"keyauth-provider {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(init)
cli.add_command(start)
cli.add_command(config)


def main() -> None:
    """CLI entry point."""
    cli()
