"""API route modules.

- auth: handshake endpoints (/auth, /auth/validate, /auth/session)
- profile: public provider profile (/about, /avatar, /key)
"""

from . import auth, profile

__all__ = ["auth", "profile"]
