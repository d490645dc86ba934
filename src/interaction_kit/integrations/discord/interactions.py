from __future__ import annotations

from typing import Any, Optional

from .enums import CommandOptionType, InteractionType

_CONTAINER_OPTION_TYPES = (
    CommandOptionType.SUB_COMMAND,
    CommandOptionType.SUB_COMMAND_GROUP,
)


def _as_id(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


def _option_type(item: dict[str, Any]) -> Optional[CommandOptionType]:
    raw = item.get("type")
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    return CommandOptionType(raw)


def extract_interaction_type(
    interaction_payload: dict[str, Any],
) -> Optional[InteractionType]:
    raw = interaction_payload.get("type")
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    return InteractionType(raw)


def extract_command_path_and_options(
    interaction_payload: dict[str, Any],
) -> tuple[tuple[str, ...], dict[str, Any]]:
    """Return the invoked command path and the leaf option values.

    ``/permissions user get user:123`` yields
    ``(("permissions", "user", "get"), {"user": "123"})``.
    """
    data = interaction_payload.get("data")
    if not isinstance(data, dict):
        return (), {}

    root_name = data.get("name")
    if not isinstance(root_name, str) or not root_name:
        return (), {}

    path: list[str] = [root_name]
    options = data.get("options")
    current_options = options if isinstance(options, list) else []

    while current_options:
        first = current_options[0]
        if not isinstance(first, dict):
            break
        if _option_type(first) not in _CONTAINER_OPTION_TYPES:
            break
        name = first.get("name")
        if isinstance(name, str) and name:
            path.append(name)
        nested = first.get("options")
        current_options = nested if isinstance(nested, list) else []

    parsed_options: dict[str, Any] = {}
    for item in current_options:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        if not isinstance(name, str) or not name:
            continue
        parsed_options[name] = item.get("value")

    return tuple(path), parsed_options


def extract_interaction_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("id"))


def extract_interaction_token(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("token"))


def is_component_interaction(interaction_payload: dict[str, Any]) -> bool:
    return (
        extract_interaction_type(interaction_payload)
        is InteractionType.MESSAGE_COMPONENT
    )


def extract_component_custom_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    data = interaction_payload.get("data")
    if not isinstance(data, dict):
        return None
    return _as_id(data.get("custom_id"))
