"""Telemetry: system logging and handshake audit trail."""
