"""Passphrase verification against the provider's private RSA key.

The passphrase is correct if it decrypts the PEM private key. Every failure
(wrong passphrase, malformed input, corrupt or unencrypted key, non-RSA key)
yields False, so callers cannot tell a wrong passphrase from a broken key.
The cause is logged at DEBUG without the passphrase.

Decryption is CPU-bound (PBKDF/scrypt in the PEM envelope); async callers
should run check() in a worker thread.
"""

from __future__ import annotations

__all__ = ["CredentialChecker"]

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from keyauth_provider.telemetry.system.system_logger import get_system_logger

logger = get_system_logger()


class CredentialChecker:
    """Answers "is this passphrase correct for the provider key?".

    Usage:
        checker = CredentialChecker(assets.private_key)
        if checker.check(passphrase):
            ...
    """

    def __init__(self, private_key_pem: bytes | None) -> None:
        """Initialize checker.

        Args:
            private_key_pem: Encrypted PEM private key. None means no key
                could be loaded; every check then fails.
        """
        self._key_pem = private_key_pem

    def check(self, passphrase: str) -> bool:
        """Return True if passphrase decrypts the private key.

        Args:
            passphrase: Passphrase supplied by the user.

        Returns:
            True on success, False on any failure.
        """
        if not self._key_pem or not passphrase:
            self._log_rejection("EmptyInput")
            return False

        try:
            password = passphrase.encode("utf-8")
            key = load_pem_private_key(self._key_pem, password=password)
        except (ValueError, TypeError, UnsupportedAlgorithm, UnicodeEncodeError) as e:
            # TypeError: key is not encrypted, so there is no secret to verify
            self._log_rejection(type(e).__name__)
            return False

        if not isinstance(key, rsa.RSAPrivateKey):
            self._log_rejection("UnsupportedKeyType")
            return False

        return True

    @staticmethod
    def _log_rejection(reason: str) -> None:
        logger.debug(
            {
                "event": "credential_check_failed",
                "component": "credential_checker",
                "details": {"reason": reason},
            }
        )
