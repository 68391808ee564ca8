"""Shared helpers: logging, errors, validation."""
