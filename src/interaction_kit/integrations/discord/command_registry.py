from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ...core.logging_utils import log_event
from .commands import Command

GLOBAL_SCOPE = "global"
GUILD_SCOPE = "guild"
COMMAND_SCOPES = frozenset({GLOBAL_SCOPE, GUILD_SCOPE})


class CommandOverwriter(Protocol):
    async def bulk_overwrite_application_commands(
        self,
        *,
        application_id: str,
        commands: Sequence[Command],
        guild_id: str | None = None,
    ) -> list[Command]: ...


def normalize_guild_ids(guild_ids: Sequence[str]) -> tuple[str, ...]:
    return tuple(sorted({guild_id.strip() for guild_id in guild_ids if guild_id.strip()}))


async def sync_commands(
    rest: CommandOverwriter,
    *,
    application_id: str,
    commands: Sequence[Command],
    scope: str,
    guild_ids: Sequence[str],
    logger: logging.Logger,
) -> dict[str, list[Command]]:
    """Overwrite the registered command set with ``commands``.

    Returns the commands echoed back by the server, keyed by ``"global"`` or
    by guild id.
    """
    normalized_scope = scope.strip().lower()
    if normalized_scope not in COMMAND_SCOPES:
        raise ValueError("scope must be 'global' or 'guild'")

    targets: tuple[str | None, ...]
    if normalized_scope == GLOBAL_SCOPE:
        targets = (None,)
    else:
        targets = normalize_guild_ids(guild_ids)
        if not targets:
            raise ValueError("guild scope requires at least one guild_id")

    command_names = [command.name for command in commands]
    results: dict[str, list[Command]] = {}
    for guild_id in targets:
        updated = await rest.bulk_overwrite_application_commands(
            application_id=application_id,
            commands=commands,
            guild_id=guild_id,
        )
        results[guild_id or GLOBAL_SCOPE] = updated
        log_event(
            logger,
            logging.INFO,
            "discord.commands.sync.overwrite",
            scope=normalized_scope,
            guild_id=guild_id,
            application_id=application_id,
            command_names=command_names,
            updated_count=len(updated),
        )
    return results
