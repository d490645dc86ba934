from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import httpx

from ...core.logging_utils import log_event
from ...core.retry import retry_transient
from .commands import Command, decode_command, decode_commands, encode_commands
from .constants import DISCORD_API_BASE_URL, DISCORD_API_TIMEOUT_SECONDS
from .errors import DiscordAPIError, DiscordPermanentError, DiscordTransientError

logger = logging.getLogger(__name__)

_RETRYABLE_NETWORK_ERRORS = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
)


def commands_path(application_id: str, guild_id: Optional[str] = None) -> str:
    if guild_id is None:
        return f"/applications/{application_id}/commands"
    return f"/applications/{application_id}/guilds/{guild_id}/commands"


def command_path(
    application_id: str, command_id: str, guild_id: Optional[str] = None
) -> str:
    return f"{commands_path(application_id, guild_id)}/{command_id}"


def _parse_retry_after(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return 0.0


class DiscordRestClient:
    """Application command endpoints of the Discord HTTP API."""

    def __init__(
        self,
        *,
        bot_token: str,
        timeout_seconds: float = DISCORD_API_TIMEOUT_SECONDS,
        base_url: str = DISCORD_API_BASE_URL,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        retry_max_delay: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds, transport=transport
        )
        self._authorization_header = f"Bot {bot_token}"
        self._request = retry_transient(
            max_attempts=max_retries + 1,
            base_wait=retry_base_delay,
            max_wait=retry_max_delay,
        )(self._request_once)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DiscordRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _request_once(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | list[dict[str, Any]] | None = None,
        expect_json: bool = True,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                json=payload,
                headers={"Authorization": self._authorization_header},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise self._status_error(method, path, exc.response) from exc
        except _RETRYABLE_NETWORK_ERRORS as exc:
            log_event(
                logger,
                logging.WARNING,
                "discord.rest.network_error",
                method=method,
                path=path,
                exc=exc,
            )
            raise DiscordTransientError(
                f"Discord API network error for {method} {path}: {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise DiscordAPIError(
                f"Discord API network error for {method} {path}: {exc}"
            ) from exc

        if not expect_json:
            return None
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise DiscordAPIError(
                f"Discord API returned non-JSON success response for {method} {path}"
            ) from exc

    def _status_error(
        self, method: str, path: str, response: httpx.Response
    ) -> DiscordAPIError:
        status_code = response.status_code
        body_preview = (response.text or "").strip().replace("\n", " ")[:200]
        if status_code == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            if retry_after is None:
                return DiscordAPIError(
                    f"Discord API rate limit exceeded for {method} {path}",
                    status_code=status_code,
                )
            log_event(
                logger,
                logging.INFO,
                "discord.rest.rate_limited",
                method=method,
                path=path,
                retry_after=retry_after,
            )
            return DiscordTransientError(
                f"Discord API rate limited {method} {path}",
                retry_after=retry_after,
                status_code=status_code,
            )
        if 500 <= status_code < 600:
            log_event(
                logger,
                logging.WARNING,
                "discord.rest.server_error",
                method=method,
                path=path,
                status_code=status_code,
            )
            return DiscordTransientError(
                f"Discord API server error for {method} {path}: "
                f"status={status_code} body={body_preview!r}",
                status_code=status_code,
            )
        if status_code in {401, 403}:
            return DiscordPermanentError(
                f"Discord API authentication failure for {method} {path}: "
                f"status={status_code} body={body_preview!r}",
                status_code=status_code,
            )
        return DiscordAPIError(
            f"Discord API request failed for {method} {path}: "
            f"status={status_code} body={body_preview!r}",
            status_code=status_code,
        )

    async def list_application_commands(
        self, *, application_id: str, guild_id: str | None = None
    ) -> list[Command]:
        payload = await self._request("GET", commands_path(application_id, guild_id))
        return decode_commands(payload, "response")

    async def get_application_command(
        self,
        *,
        application_id: str,
        command_id: str,
        guild_id: str | None = None,
    ) -> Command:
        payload = await self._request(
            "GET", command_path(application_id, command_id, guild_id)
        )
        return decode_command(payload, "response")

    async def create_application_command(
        self,
        *,
        application_id: str,
        command: Command,
        guild_id: str | None = None,
    ) -> Command:
        payload = await self._request(
            "POST",
            commands_path(application_id, guild_id),
            payload=command.to_dict(),
        )
        return decode_command(payload, "response")

    async def bulk_overwrite_application_commands(
        self,
        *,
        application_id: str,
        commands: Iterable[Command],
        guild_id: str | None = None,
    ) -> list[Command]:
        payload = await self._request(
            "PUT",
            commands_path(application_id, guild_id),
            payload=encode_commands(commands),
        )
        return decode_commands(payload, "response")

    async def delete_application_command(
        self,
        *,
        application_id: str,
        command_id: str,
        guild_id: str | None = None,
    ) -> None:
        await self._request(
            "DELETE",
            command_path(application_id, command_id, guild_id),
            expect_json=False,
        )
