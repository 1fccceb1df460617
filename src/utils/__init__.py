"""Shared helpers: logging, errors, validation and time."""
