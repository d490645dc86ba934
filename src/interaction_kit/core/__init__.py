"""Shared primitives: errors, structured logging, retry policy."""
