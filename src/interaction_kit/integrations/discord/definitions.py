"""Compile a YAML command definitions file into ``Command`` values.

The file looks like::

    commands:
      - name: permissions
        description: Get or edit permissions for a user or a role
        options:
          - type: sub_command_group
            name: user
            description: Get or edit permissions for a user
            options:
              - type: sub_command
                name: get
                description: Get permissions for a user
                options:
                  - {type: user, name: user, description: The user, required: true}

Every node goes through the builders, so a file can only describe trees the
builders accept.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Union

from ...core.logging_utils import log_event
from .builders import (
    BooleanBuilder,
    ChannelBuilder,
    CommandBuilder,
    IntegerBuilder,
    MentionableBuilder,
    NumberBuilder,
    OptionBuilder,
    RoleBuilder,
    StringBuilder,
    SubCommandBuilder,
    SubCommandGroupBuilder,
    UserBuilder,
    _ChoiceBuilder,
    _LeafBuilder,
)
from .commands import Command
from .config import load_yaml_dict
from .enums import CommandOptionType, CommandType
from .errors import BuilderConsumedError, DiscordConfigError

logger = logging.getLogger(__name__)

_OPTION_BUILDERS: dict[CommandOptionType, type] = {
    CommandOptionType.SUB_COMMAND: SubCommandBuilder,
    CommandOptionType.SUB_COMMAND_GROUP: SubCommandGroupBuilder,
    CommandOptionType.STRING: StringBuilder,
    CommandOptionType.INTEGER: IntegerBuilder,
    CommandOptionType.BOOLEAN: BooleanBuilder,
    CommandOptionType.USER: UserBuilder,
    CommandOptionType.CHANNEL: ChannelBuilder,
    CommandOptionType.ROLE: RoleBuilder,
    CommandOptionType.MENTIONABLE: MentionableBuilder,
    CommandOptionType.NUMBER: NumberBuilder,
}


def _parse_code(value: Any, enum_cls: type, *, where: str) -> Any:
    if isinstance(value, str):
        member = enum_cls.__members__.get(value.strip().upper())
        if member is None:
            raise DiscordConfigError(f"{where}: unknown {enum_cls.__name__} {value!r}")
        return member
    if isinstance(value, bool) or not isinstance(value, int):
        raise DiscordConfigError(f"{where}: type must be a name or an integer")
    return enum_cls(value)


def _require_text(node: dict[str, Any], key: str, *, where: str) -> str:
    value = node.get(key)
    if not isinstance(value, str) or not value.strip():
        raise DiscordConfigError(f"{where}.{key} must be a non-empty string")
    return value


def _require_bool(node: dict[str, Any], key: str, *, where: str) -> bool:
    value = node[key]
    if not isinstance(value, bool):
        raise DiscordConfigError(f"{where}.{key} must be a boolean")
    return value


def _require_node(value: Any, *, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise DiscordConfigError(f"{where} must be a mapping")
    return value


def _children(node: dict[str, Any], key: str, *, where: str) -> list[Any]:
    value = node.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DiscordConfigError(f"{where}.{key} must be a list")
    return value


def _parse_choices(node: dict[str, Any], *, where: str) -> list[tuple[Any, Any]]:
    parsed: list[tuple[Any, Any]] = []
    for index, raw in enumerate(_children(node, "choices", where=where)):
        item = _require_node(raw, where=f"{where}.choices[{index}]")
        if "name" not in item or "value" not in item:
            raise DiscordConfigError(
                f"{where}.choices[{index}] requires 'name' and 'value'"
            )
        parsed.append((item["name"], item["value"]))
    return parsed


def _compile_option(raw: Any, *, where: str) -> OptionBuilder:
    node = _require_node(raw, where=where)
    if "type" not in node:
        raise DiscordConfigError(f"{where}.type is required")
    kind = _parse_code(node["type"], CommandOptionType, where=f"{where}.type")
    builder_cls = _OPTION_BUILDERS.get(kind)
    if builder_cls is None:
        raise DiscordConfigError(f"{where}.type {kind.name} cannot be built")

    builder = builder_cls(
        _require_text(node, "name", where=where),
        _require_text(node, "description", where=where),
    )
    if "required" in node:
        if not isinstance(builder, _LeafBuilder):
            raise DiscordConfigError(
                f"{where}.required is only valid on leaf options"
            )
        builder = builder.required(_require_bool(node, "required", where=where))
    if "choices" in node:
        if not isinstance(builder, _ChoiceBuilder):
            raise DiscordConfigError(
                f"{where}.choices is only valid on string, integer and number options"
            )
        try:
            builder = builder.choices(_parse_choices(node, where=where))
        except (TypeError, ValueError) as exc:
            raise DiscordConfigError(f"{where}.choices: {exc}") from exc
    children = _children(node, "options", where=where)
    if children and isinstance(builder, _LeafBuilder):
        raise DiscordConfigError(f"{where}.options is not valid on leaf options")
    for index, child in enumerate(children):
        child_where = f"{where}.options[{index}]"
        child_builder = _compile_option(child, where=child_where)
        try:
            builder = builder.option(child_builder)
        except (TypeError, BuilderConsumedError) as exc:
            raise DiscordConfigError(f"{child_where}: {exc}") from exc
    return builder


def _compile_command(raw: Any, *, where: str) -> Command:
    node = _require_node(raw, where=where)
    kind = _parse_code(
        node.get("type", CommandType.CHAT_INPUT.value),
        CommandType,
        where=f"{where}.type",
    )
    builder = CommandBuilder(
        _require_text(node, "name", where=where),
        _require_text(node, "description", where=where),
        kind,
    )
    if "default_permission" in node:
        builder = builder.default_permission(
            _require_bool(node, "default_permission", where=where)
        )
    for index, child in enumerate(_children(node, "options", where=where)):
        builder = builder.option(
            _compile_option(child, where=f"{where}.options[{index}]")
        )
    return builder.build()


def compile_command_definitions(data: Union[dict[str, Any], Any]) -> list[Command]:
    if not isinstance(data, dict):
        raise DiscordConfigError("command definitions must be a mapping")
    raw_commands = data.get("commands")
    if not isinstance(raw_commands, list):
        raise DiscordConfigError("command definitions require a 'commands' list")
    commands = [
        _compile_command(raw, where=f"commands[{index}]")
        for index, raw in enumerate(raw_commands)
    ]
    # Names only need to be unique per command type.
    keys = [(command.kind, command.name) for command in commands]
    duplicates = sorted({name for kind, name in keys if keys.count((kind, name)) > 1})
    if duplicates:
        raise DiscordConfigError(
            f"duplicate command names in definitions: {', '.join(duplicates)}"
        )
    return commands


def load_command_definitions(path: Path) -> list[Command]:
    if not path.exists():
        raise DiscordConfigError(f"command definitions file not found: {path}")
    commands = compile_command_definitions(load_yaml_dict(path))
    log_event(
        logger,
        logging.INFO,
        "discord.commands.definitions.loaded",
        path=str(path),
        command_names=[command.name for command in commands],
    )
    return commands
