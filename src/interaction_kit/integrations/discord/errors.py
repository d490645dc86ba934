from __future__ import annotations

from typing import Optional

from ...core.exceptions import KitError, PermanentError, TransientError


class DiscordError(KitError):
    """Base Discord integration error."""

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class DiscordConfigError(DiscordError):
    """Discord integration configuration error."""


class DiscordDecodeError(DiscordError):
    """Wire payload does not match the expected structure.

    ``field`` is the dotted/indexed path of the offending key, e.g.
    ``options[0].choices[1].value``.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.reason = message


class BuilderConsumedError(DiscordError, RuntimeError):
    """A builder handle was used after it was advanced or built."""


class DiscordAPIError(DiscordError):
    """Discord API request error."""

    def __init__(
        self,
        message: str,
        *,
        retry_after: Optional[float] = None,
        status_code: Optional[int] = None,
        user_message: Optional[str] = None,
    ) -> None:
        if user_message is None:
            user_message = "Discord API error."
        super().__init__(message, user_message=user_message)
        self.retry_after = retry_after
        self.status_code = status_code


class DiscordTransientError(DiscordAPIError, TransientError):
    """Retryable Discord API error (rate limits, network issues)."""

    recoverable = TransientError.recoverable
    severity = TransientError.severity


class DiscordPermanentError(DiscordAPIError, PermanentError):
    """Non-retryable Discord API error (auth failures, invalid requests)."""

    recoverable = PermanentError.recoverable
    severity = PermanentError.severity
