from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from interaction_kit.integrations.discord.commands import Command
from interaction_kit.integrations.discord.enums import CommandType
from interaction_kit.integrations.discord.errors import (
    DiscordAPIError,
    DiscordPermanentError,
    DiscordTransientError,
)
from interaction_kit.integrations.discord.rest import (
    DiscordRestClient,
    command_path,
    commands_path,
)

BASE_URL = "https://discord.test/api/v10"


def _client(
    handler: Callable[[httpx.Request], httpx.Response], *, max_retries: int = 3
) -> DiscordRestClient:
    return DiscordRestClient(
        bot_token="abc123",
        base_url=BASE_URL,
        max_retries=max_retries,
        retry_base_delay=0.0,
        retry_max_delay=0.0,
        transport=httpx.MockTransport(handler),
    )


def _command_json(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": "cmd-1",
        "application_id": "app-1",
        "type": 1,
        "name": "blep",
        "description": "Animals",
        "options": [],
    }
    payload.update(overrides)
    return payload


def test_route_helpers() -> None:
    assert commands_path("app-1") == "/applications/app-1/commands"
    assert (
        commands_path("app-1", "guild-2") == "/applications/app-1/guilds/guild-2/commands"
    )
    assert (
        command_path("app-1", "cmd-3", "guild-2")
        == "/applications/app-1/guilds/guild-2/commands/cmd-3"
    )


@pytest.mark.anyio
async def test_discord_rest_client_sets_authorization_header() -> None:
    observed: dict[str, Any] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        observed["authorization"] = request.headers.get("Authorization")
        observed["path"] = request.url.path
        return httpx.Response(200, json=[_command_json()])

    async with _client(handler) as client:
        commands = await client.list_application_commands(application_id="app-1")

    assert observed["authorization"] == "Bot abc123"
    assert observed["path"] == "/api/v10/applications/app-1/commands"
    assert commands[0].id == "cmd-1"


@pytest.mark.anyio
async def test_command_routes_global_and_guild() -> None:
    observed: list[tuple[str, str]] = []
    bodies: list[Any] = []

    def handler(request: httpx.Request) -> httpx.Response:
        observed.append((request.method, request.url.path))
        if request.content:
            bodies.append(json.loads(request.content))
        if request.method == "PUT":
            return httpx.Response(200, json=[_command_json()])
        if request.method == "DELETE":
            return httpx.Response(204)
        if request.method == "POST":
            return httpx.Response(201, json=_command_json(guild_id="guild-2"))
        if request.url.path.endswith("/cmd-1"):
            return httpx.Response(200, json=_command_json())
        return httpx.Response(200, json=[])

    command = Command(name="blep", description="Animals", kind=CommandType.CHAT_INPUT)
    async with _client(handler) as client:
        await client.list_application_commands(application_id="app-1")
        await client.list_application_commands(
            application_id="app-1", guild_id="guild-2"
        )
        await client.get_application_command(
            application_id="app-1", command_id="cmd-1", guild_id="guild-2"
        )
        created = await client.create_application_command(
            application_id="app-1", command=command, guild_id="guild-2"
        )
        await client.bulk_overwrite_application_commands(
            application_id="app-1", commands=[command]
        )
        await client.delete_application_command(
            application_id="app-1", command_id="cmd-1"
        )

    assert observed == [
        ("GET", "/api/v10/applications/app-1/commands"),
        ("GET", "/api/v10/applications/app-1/guilds/guild-2/commands"),
        ("GET", "/api/v10/applications/app-1/guilds/guild-2/commands/cmd-1"),
        ("POST", "/api/v10/applications/app-1/guilds/guild-2/commands"),
        ("PUT", "/api/v10/applications/app-1/commands"),
        ("DELETE", "/api/v10/applications/app-1/commands/cmd-1"),
    ]
    assert created.guild_id == "guild-2"
    assert bodies[0] == command.to_dict()
    assert bodies[1] == [command.to_dict()]


@pytest.mark.anyio
async def test_get_command_decodes_nested_options() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=_command_json(
                options=[
                    {
                        "type": 3,
                        "name": "animal",
                        "description": "The type of animal",
                        "required": True,
                        "choices": [{"name": "Dog", "value": "animal_dog"}],
                    }
                ]
            ),
        )

    async with _client(handler) as client:
        command = await client.get_application_command(
            application_id="app-1", command_id="cmd-1"
        )

    assert command.options[0].choices[0].value == "animal_dog"


@pytest.mark.anyio
async def test_rate_limit_retry_after_retries_and_succeeds() -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] < 3:
            return httpx.Response(429, headers={"Retry-After": "0.25"}, json={})
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        commands = await client.list_application_commands(application_id="app-1")

    assert commands == []
    assert attempts["count"] == 3


@pytest.mark.anyio
async def test_server_errors_exhaust_retries() -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(503, text="unavailable")

    async with _client(handler, max_retries=2) as client:
        with pytest.raises(DiscordTransientError) as excinfo:
            await client.list_application_commands(application_id="app-1")

    assert attempts["count"] == 3
    assert excinfo.value.status_code == 503


@pytest.mark.anyio
async def test_network_errors_are_retried() -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=[])

    async with _client(handler) as client:
        assert await client.list_application_commands(application_id="app-1") == []

    assert attempts["count"] == 2


@pytest.mark.anyio
async def test_unauthorized_is_permanent_and_not_retried() -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(401, json={"message": "401: Unauthorized"})

    async with _client(handler) as client:
        with pytest.raises(DiscordPermanentError) as excinfo:
            await client.list_application_commands(application_id="app-1")

    assert attempts["count"] == 1
    assert excinfo.value.status_code == 401


@pytest.mark.anyio
async def test_bad_request_raises_api_error() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "Invalid Form Body"})

    async with _client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            await client.create_application_command(
                application_id="app-1",
                command=Command(name="x", description="y", kind=CommandType.USER),
            )

    assert not isinstance(excinfo.value, DiscordTransientError)
    assert "Invalid Form Body" in str(excinfo.value)


@pytest.mark.anyio
async def test_rate_limit_without_retry_after_is_not_retried() -> None:
    attempts = {"count": 0}

    def handler(_request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        return httpx.Response(429, json={})

    async with _client(handler) as client:
        with pytest.raises(DiscordAPIError) as excinfo:
            await client.list_application_commands(application_id="app-1")

    assert attempts["count"] == 1
    assert excinfo.value.status_code == 429
