"""keyauth-provider: delegated login against an RSA key passphrase."""

__version__ = "0.1.0"
