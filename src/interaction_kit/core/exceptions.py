from __future__ import annotations


class KitError(Exception):
    """Base error for interaction-kit."""

    recoverable: bool = False
    severity: str = "error"


class TransientError(KitError):
    """Failure expected to clear on retry (rate limits, network hiccups)."""

    recoverable = True
    severity = "warning"


class PermanentError(KitError):
    """Failure that retrying will not fix."""

    recoverable = False
    severity = "error"
