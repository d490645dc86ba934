from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .encoding import (
    ABSENT,
    FieldPolicy,
    FieldSpec,
    MaybeAbsent,
    RecordSchema,
    decode_bool,
    decode_str,
    decode_tuple,
    field_path,
    require_mapping,
)
from .enums import ButtonStyle, ComponentType
from .errors import DiscordDecodeError


@dataclass(frozen=True)
class UnicodeEmoji:
    name: str

    def to_dict(self) -> dict[str, Any]:
        return UNICODE_EMOJI_SCHEMA.encode(self)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> "UnicodeEmoji":
        return cls(**UNICODE_EMOJI_SCHEMA.decode(payload, path=path))


@dataclass(frozen=True)
class CustomEmoji:
    id: str
    name: MaybeAbsent[str] = ABSENT
    animated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return CUSTOM_EMOJI_SCHEMA.encode(self)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> "CustomEmoji":
        return cls(**CUSTOM_EMOJI_SCHEMA.decode(payload, path=path))


Emoji = Union[UnicodeEmoji, CustomEmoji]


def decode_emoji(payload: object, path: str) -> Emoji:
    mapping = require_mapping(payload, path)
    if mapping.get("id") is not None:
        return CustomEmoji.from_dict(mapping, path=path)
    if "name" in mapping:
        return UnicodeEmoji.from_dict(mapping, path=path)
    raise DiscordDecodeError(path, "emoji requires an 'id' or a 'name'")


UNICODE_EMOJI_SCHEMA = RecordSchema(
    "UnicodeEmoji",
    (FieldSpec("name", decoder=decode_str),),
)

CUSTOM_EMOJI_SCHEMA = RecordSchema(
    "CustomEmoji",
    (
        FieldSpec("animated", default=False, decoder=decode_bool),
        FieldSpec("id", decoder=decode_str),
        FieldSpec("name", FieldPolicy.OPTIONAL, decoder=decode_str),
    ),
)


@dataclass(frozen=True)
class Button:
    """Clickable component rendered on a message.

    ``custom_id`` is required by the platform for every style except
    ``ButtonStyle.LINK``, which requires ``url`` instead. The pairing is left
    to the caller and to server-side validation.
    """

    style: ButtonStyle
    custom_id: MaybeAbsent[str] = ABSENT
    disabled: bool = False
    emoji: MaybeAbsent[Emoji] = ABSENT
    label: MaybeAbsent[str] = ABSENT
    url: MaybeAbsent[str] = ABSENT

    def to_dict(self) -> dict[str, Any]:
        return BUTTON_SCHEMA.encode(self, tag=ComponentType.BUTTON)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> "Button":
        return cls(**BUTTON_SCHEMA.decode(payload, path=path))


BUTTON_SCHEMA = RecordSchema(
    "Button",
    (
        FieldSpec("custom_id", FieldPolicy.OPTIONAL, decoder=decode_str),
        FieldSpec("disabled", default=False, decoder=decode_bool),
        FieldSpec("emoji", FieldPolicy.OPTIONAL, decoder=decode_emoji),
        FieldSpec("label", FieldPolicy.OPTIONAL, decoder=decode_str),
        FieldSpec(
            "style",
            decoder=lambda value, path: ButtonStyle.decode(value, field=path),
        ),
        FieldSpec("type", discriminator=True),
        FieldSpec("url", FieldPolicy.OPTIONAL, decoder=decode_str),
    ),
)


@dataclass(frozen=True)
class UnknownComponent:
    """Component of a type this library does not model; kept verbatim."""

    kind: ComponentType
    raw: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


@dataclass(frozen=True)
class ActionRow:
    components: tuple["Component", ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return ACTION_ROW_SCHEMA.encode(self, tag=ComponentType.ACTION_ROW)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> "ActionRow":
        return cls(**ACTION_ROW_SCHEMA.decode(payload, path=path))


Component = Union[ActionRow, Button, UnknownComponent]


def decode_component(payload: object, path: str = "") -> Component:
    mapping = require_mapping(payload, path or "component")
    type_path = field_path(path, "type")
    if "type" not in mapping:
        raise DiscordDecodeError(type_path, "missing required key")
    kind = ComponentType.decode(mapping["type"], field=type_path)
    if kind is ComponentType.ACTION_ROW:
        return ActionRow.from_dict(mapping, path=path)
    if kind is ComponentType.BUTTON:
        return Button.from_dict(mapping, path=path)
    return UnknownComponent(kind=kind, raw=dict(mapping))


ACTION_ROW_SCHEMA = RecordSchema(
    "ActionRow",
    (
        FieldSpec("type", discriminator=True),
        FieldSpec(
            "components",
            default=(),
            decoder=decode_tuple(decode_component),
        ),
    ),
)


def encode_component(component: Component) -> dict[str, Any]:
    return component.to_dict()
