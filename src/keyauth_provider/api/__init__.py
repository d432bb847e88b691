"""HTTP surface of the provider."""

from keyauth_provider.api.server import build_coordinator, create_app

__all__ = ["build_coordinator", "create_app"]
