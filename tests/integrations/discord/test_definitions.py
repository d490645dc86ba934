from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from interaction_kit.integrations.discord.commands import (
    StringChoice,
    StringOption,
    SubCommand,
    SubCommandGroup,
    UserOption,
)
from interaction_kit.integrations.discord.definitions import (
    compile_command_definitions,
    load_command_definitions,
)
from interaction_kit.integrations.discord.enums import CommandType
from interaction_kit.integrations.discord.errors import DiscordConfigError

PERMISSIONS_YAML = """\
commands:
  - name: permissions
    description: Get or edit permissions for a user or a role
    default_permission: true
    options:
      - type: sub_command_group
        name: user
        description: Get or edit permissions for a user
        options:
          - type: sub_command
            name: get
            description: Get permissions for a user
            options:
              - type: user
                name: user
                description: The user to get
                required: true
  - name: blep
    description: Send a random adorable animal photo
    options:
      - type: 3
        name: animal
        description: The type of animal
        required: true
        choices:
          - {name: Dog, value: animal_dog}
          - {name: Cat, value: animal_cat}
"""


def test_load_command_definitions_builds_tree(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "commands.yml"
    path.write_text(PERMISSIONS_YAML, encoding="utf-8")

    with caplog.at_level(
        logging.INFO, logger="interaction_kit.integrations.discord.definitions"
    ):
        commands = load_command_definitions(path)

    permissions, blep = commands
    assert permissions.kind is CommandType.CHAT_INPUT
    assert permissions.default_permission is True
    group = permissions.options[0]
    assert isinstance(group, SubCommandGroup)
    sub = group.options[0]
    assert isinstance(sub, SubCommand)
    assert sub.options == (
        UserOption(name="user", description="The user to get", required=True),
    )
    assert blep.options == (
        StringOption(
            name="animal",
            description="The type of animal",
            required=True,
            choices=(
                StringChoice("Dog", "animal_dog"),
                StringChoice("Cat", "animal_cat"),
            ),
        ),
    )
    event = json.loads(caplog.records[-1].getMessage())
    assert event["event"] == "discord.commands.definitions.loaded"
    assert event["command_names"] == ["permissions", "blep"]


def test_group_with_leaf_child_names_the_node() -> None:
    data = {
        "commands": [
            {
                "name": "permissions",
                "description": "Permissions",
                "options": [
                    {
                        "type": "sub_command_group",
                        "name": "user",
                        "description": "User",
                        "options": [
                            {"type": "user", "name": "user", "description": "Who"}
                        ],
                    }
                ],
            }
        ]
    }
    with pytest.raises(DiscordConfigError) as excinfo:
        compile_command_definitions(data)
    assert "commands[0].options[0].options[0]" in str(excinfo.value)


def test_sub_command_cannot_nest_sub_command() -> None:
    data = {
        "commands": [
            {
                "name": "deep",
                "description": "Deep",
                "options": [
                    {
                        "type": 1,
                        "name": "a",
                        "description": "A",
                        "options": [{"type": 1, "name": "b", "description": "B"}],
                    }
                ],
            }
        ]
    }
    with pytest.raises(DiscordConfigError, match=r"commands\[0\]\.options\[0\]\.options\[0\]"):
        compile_command_definitions(data)


@pytest.mark.parametrize(
    ("option", "message"),
    [
        ({"type": "file", "name": "f", "description": "F"}, "unknown CommandOptionType"),
        ({"type": 11, "name": "f", "description": "F"}, "cannot be built"),
        ({"name": "f", "description": "F"}, "type is required"),
        ({"type": "string", "description": "F"}, "name must be a non-empty string"),
        (
            {"type": "boolean", "name": "f", "description": "F", "choices": []},
            "choices is only valid",
        ),
        (
            {
                "type": "integer",
                "name": "f",
                "description": "F",
                "choices": [{"name": "one", "value": "1"}],
            },
            "integer choice value must be int",
        ),
        (
            {"type": "string", "name": "f", "description": "F", "required": "false"},
            r"options\[0\]\.required must be a boolean",
        ),
        (
            {"type": "user", "name": "f", "description": "F", "required": 1},
            "required must be a boolean",
        ),
        (
            {
                "type": "number",
                "name": "f",
                "description": "F",
                "choices": [{"name": "huge", "value": float("inf")}],
            },
            "must be finite",
        ),
        (
            {"type": "sub_command", "name": "s", "description": "S", "required": True},
            "required is only valid on leaf options",
        ),
        (
            {
                "type": "user",
                "name": "u",
                "description": "U",
                "options": [{"type": "user", "name": "v", "description": "V"}],
            },
            "options is not valid on leaf options",
        ),
    ],
)
def test_invalid_option_nodes(option: dict, message: str) -> None:
    data = {"commands": [{"name": "c", "description": "C", "options": [option]}]}
    with pytest.raises(DiscordConfigError, match=message):
        compile_command_definitions(data)


def test_default_permission_must_be_boolean() -> None:
    data = {
        "commands": [
            {"name": "c", "description": "C", "default_permission": "false"}
        ]
    }
    with pytest.raises(
        DiscordConfigError, match=r"commands\[0\]\.default_permission must be a boolean"
    ):
        compile_command_definitions(data)


def test_yaml_false_keeps_option_optional(tmp_path: Path) -> None:
    path = tmp_path / "commands.yml"
    path.write_text(
        "commands:\n"
        "  - name: c\n"
        "    description: C\n"
        "    default_permission: false\n"
        "    options:\n"
        "      - {type: string, name: q, description: Q, required: false}\n",
        encoding="utf-8",
    )
    (command,) = load_command_definitions(path)
    assert command.default_permission is False
    assert command.options[0].required is False


def test_command_type_by_name() -> None:
    commands = compile_command_definitions(
        {"commands": [{"name": "Report", "description": "Report", "type": "message"}]}
    )
    assert commands[0].kind is CommandType.MESSAGE


def test_duplicate_names_of_same_type_are_rejected() -> None:
    data = {
        "commands": [
            {"name": "ping", "description": "One"},
            {"name": "ping", "description": "Two"},
            {"name": "ping", "description": "Menu", "type": "user"},
        ]
    }
    with pytest.raises(DiscordConfigError, match="duplicate command names"):
        compile_command_definitions(data)


def test_requires_commands_list() -> None:
    with pytest.raises(DiscordConfigError):
        compile_command_definitions({"command": []})


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DiscordConfigError, match="not found"):
        load_command_definitions(tmp_path / "absent.yml")
