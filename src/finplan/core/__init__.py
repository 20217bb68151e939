"""Ambient infrastructure: configuration, errors, logging, CLI."""
