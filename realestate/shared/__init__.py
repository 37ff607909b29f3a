"""Shared utilities used across layers (logging setup, id generation)."""
