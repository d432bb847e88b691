"""Exception hierarchy for keyauth-provider.

Handshake failures (unreachable consumer, wrong passphrase, unknown or
consumed token) are returned as result values and never raised to the HTTP
layer. The exceptions below cover internal signalling and startup errors.
"""

__all__ = [
    "AssetLoadError",
    "ConsumerFetchError",
    "KeyAuthError",
]


class KeyAuthError(Exception):
    """Base class for keyauth-provider errors."""


class ConsumerFetchError(KeyAuthError):
    """Consumer profile could not be fetched or parsed.

    Raised inside ConsumerInfoFetcher and converted to an empty profile
    before it reaches callers.
    """


class AssetLoadError(KeyAuthError):
    """A provider asset file (private key, public key, avatar) could not be read."""

    def __init__(self, asset: str, path: str, reason: str) -> None:
        super().__init__(f"Could not load {asset} from {path}: {reason}")
        self.asset = asset
        self.path = path
