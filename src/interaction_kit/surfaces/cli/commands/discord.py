from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import typer

from ....core.logging_utils import setup_logger
from ....integrations.discord.command_registry import sync_commands
from ....integrations.discord.commands import Command, encode_commands
from ....integrations.discord.config import DiscordKitConfig, load_config
from ....integrations.discord.definitions import load_command_definitions
from ....integrations.discord.errors import DiscordError
from ....integrations.discord.rest import DiscordRestClient

LOGGER_NAME = "interaction_kit.discord"

RestClientFactory = Callable[..., Any]


def _rest_client(
    config: DiscordKitConfig, factory: RestClientFactory
) -> Any:
    bot_token, _ = config.require_credentials()
    return factory(
        bot_token=bot_token,
        timeout_seconds=config.timeout_seconds,
        base_url=config.api_base_url,
        max_retries=config.max_retries,
        retry_base_delay=config.retry_base_delay,
        retry_max_delay=config.retry_max_delay,
    )


async def _register_application_commands(
    config: DiscordKitConfig,
    commands: list[Command],
    *,
    logger: logging.Logger,
    rest_client_factory: RestClientFactory = DiscordRestClient,
    sync_func: Callable[..., Awaitable[dict[str, list[Command]]]] = sync_commands,
) -> dict[str, list[Command]]:
    _, application_id = config.require_credentials()
    async with _rest_client(config, rest_client_factory) as rest:
        return await sync_func(
            rest,
            application_id=application_id,
            commands=commands,
            scope=config.command_registration.scope,
            guild_ids=config.command_registration.guild_ids,
            logger=logger,
        )


async def _fetch_application_command(
    config: DiscordKitConfig,
    command_id: str,
    *,
    guild_id: Optional[str],
    rest_client_factory: RestClientFactory = DiscordRestClient,
) -> Command:
    _, application_id = config.require_credentials()
    async with _rest_client(config, rest_client_factory) as rest:
        return await rest.get_application_command(
            application_id=application_id,
            command_id=command_id,
            guild_id=guild_id,
        )


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


def register_discord_commands(
    app: typer.Typer,
    *,
    raise_exit: Callable,
    rest_client_factory: RestClientFactory = DiscordRestClient,
) -> None:
    @app.command("show-commands")
    def discord_show_commands(
        path: Optional[Path] = typer.Option(None, "--path", help="Project root path"),
    ) -> None:
        """Print the command definitions as Discord JSON payloads."""
        try:
            config = load_config(path or Path.cwd())
            commands = load_command_definitions(config.commands_file)
        except DiscordError as exc:
            raise_exit(str(exc), cause=exc)
        typer.echo(_dump(encode_commands(commands)))

    @app.command("register-commands")
    def discord_register_commands(
        path: Optional[Path] = typer.Option(None, "--path", help="Project root path"),
    ) -> None:
        """Overwrite the registered commands with the definitions file."""
        try:
            config = load_config(path or Path.cwd())
            commands = load_command_definitions(config.commands_file)
            logger = setup_logger(LOGGER_NAME)
            results = asyncio.run(
                _register_application_commands(
                    config,
                    commands,
                    logger=logger,
                    rest_client_factory=rest_client_factory,
                )
            )
        except (DiscordError, ValueError) as exc:
            raise_exit(str(exc), cause=exc)
        for target, updated in results.items():
            typer.echo(f"{target}: {len(updated)} command(s) registered")
        typer.echo("Discord application commands synchronized.")

    @app.command("get-command")
    def discord_get_command(
        command_id: str = typer.Argument(..., help="Application command id"),
        guild: Optional[str] = typer.Option(
            None, "--guild", help="Guild id for a guild command"
        ),
        path: Optional[Path] = typer.Option(None, "--path", help="Project root path"),
    ) -> None:
        """Fetch one registered command and print it re-encoded."""
        try:
            config = load_config(path or Path.cwd())
            command = asyncio.run(
                _fetch_application_command(
                    config,
                    command_id,
                    guild_id=guild,
                    rest_client_factory=rest_client_factory,
                )
            )
        except DiscordError as exc:
            raise_exit(str(exc), cause=exc)
        typer.echo(_dump(command.to_dict()))
