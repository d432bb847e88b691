"""Provider asset loading.

Reads the files named in ProviderConfig into memory once at startup:
the encrypted private key (required), the public key and the avatar
(both optional).
"""

from __future__ import annotations

__all__ = [
    "ProviderAssets",
    "load_assets",
]

import mimetypes
from dataclasses import dataclass
from pathlib import Path

from keyauth_provider.config import ProviderConfig
from keyauth_provider.exceptions import AssetLoadError


@dataclass(frozen=True)
class ProviderAssets:
    """In-memory provider files.

    Attributes:
        private_key: Encrypted PEM private key.
        public_key: PEM public key served at /key, if configured.
        avatar: Avatar image served at /avatar, if configured.
        avatar_media_type: Content type guessed from the avatar file name.
    """

    private_key: bytes
    public_key: bytes | None = None
    avatar: bytes | None = None
    avatar_media_type: str = "application/octet-stream"


def _read(asset: str, path: str) -> bytes:
    try:
        return Path(path).expanduser().read_bytes()
    except OSError as e:
        raise AssetLoadError(asset, path, e.strerror or type(e).__name__) from e


def load_assets(provider: ProviderConfig) -> ProviderAssets:
    """Load provider files.

    Args:
        provider: Provider configuration with asset paths.

    Returns:
        ProviderAssets with file contents.

    Raises:
        AssetLoadError: If any configured file cannot be read.
    """
    private_key = _read("private key", provider.private_key_path)
    public_key = _read("public key", provider.public_key_path) if provider.public_key_path else None

    avatar = None
    media_type = "application/octet-stream"
    if provider.avatar_path:
        avatar = _read("avatar", provider.avatar_path)
        guessed, _ = mimetypes.guess_type(provider.avatar_path)
        media_type = guessed or media_type

    return ProviderAssets(
        private_key=private_key,
        public_key=public_key,
        avatar=avatar,
        avatar_media_type=media_type,
    )
