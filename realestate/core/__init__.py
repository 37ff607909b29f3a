"""Core: configuration, constants, logging and composition root."""
