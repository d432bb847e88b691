"""Shared helpers for config files and paths."""
