"""Provider-side handshake state machine."""

from keyauth_provider.handshake.coordinator import (
    CallbackRedirect,
    HandshakeCoordinator,
    LoginPrompt,
)

__all__ = [
    "CallbackRedirect",
    "HandshakeCoordinator",
    "LoginPrompt",
]
