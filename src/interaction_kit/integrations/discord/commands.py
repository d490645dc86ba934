"""Application command model: the recursive option tree and ``Command``.

The option union can represent any nesting depth so that whatever the
server returns decodes faithfully. The platform only accepts
group -> subcommand -> leaf; the builders in ``builders.py`` are the
construction path that guarantees it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Mapping, Union

from .encoding import (
    ABSENT,
    FieldPolicy,
    FieldSpec,
    MaybeAbsent,
    RecordSchema,
    decode_bool,
    decode_int,
    decode_number,
    decode_str,
    decode_tuple,
    field_path,
    require_mapping,
)
from .enums import CommandOptionType, CommandType
from .errors import DiscordDecodeError


@dataclass(frozen=True)
class IntegerChoice:
    name: str
    value: int

    def to_dict(self) -> dict[str, Any]:
        return INTEGER_CHOICE_SCHEMA.encode(self)


@dataclass(frozen=True)
class NumberChoice:
    name: str
    value: float

    def to_dict(self) -> dict[str, Any]:
        return NUMBER_CHOICE_SCHEMA.encode(self)


@dataclass(frozen=True)
class StringChoice:
    name: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return STRING_CHOICE_SCHEMA.encode(self)


def _choice_schema(name: str, value_decoder: Any) -> RecordSchema:
    return RecordSchema(
        name,
        (
            FieldSpec("name", decoder=decode_str),
            FieldSpec("value", decoder=value_decoder),
        ),
    )


INTEGER_CHOICE_SCHEMA = _choice_schema("IntegerChoice", decode_int)
NUMBER_CHOICE_SCHEMA = _choice_schema("NumberChoice", decode_number)
STRING_CHOICE_SCHEMA = _choice_schema("StringChoice", decode_str)


def _choice_decoder(cls: type, schema: RecordSchema) -> Any:
    def _decode(payload: object, path: str) -> Any:
        return cls(**schema.decode(payload, path=path))

    return _decode


@dataclass(frozen=True)
class _OptionBase:
    name: str
    description: str
    required: bool = False

    option_type: ClassVar[CommandOptionType]

    def to_dict(self) -> dict[str, Any]:
        return _OPTION_SCHEMAS[self.option_type].encode(self, tag=self.option_type)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> Any:
        return cls(**_OPTION_SCHEMAS[cls.option_type].decode(payload, path=path))


@dataclass(frozen=True)
class BooleanOption(_OptionBase):
    option_type: ClassVar[CommandOptionType] = CommandOptionType.BOOLEAN


@dataclass(frozen=True)
class ChannelOption(_OptionBase):
    option_type: ClassVar[CommandOptionType] = CommandOptionType.CHANNEL


@dataclass(frozen=True)
class MentionableOption(_OptionBase):
    option_type: ClassVar[CommandOptionType] = CommandOptionType.MENTIONABLE


@dataclass(frozen=True)
class RoleOption(_OptionBase):
    option_type: ClassVar[CommandOptionType] = CommandOptionType.ROLE


@dataclass(frozen=True)
class UserOption(_OptionBase):
    option_type: ClassVar[CommandOptionType] = CommandOptionType.USER


@dataclass(frozen=True)
class IntegerOption(_OptionBase):
    choices: tuple[IntegerChoice, ...] = ()

    option_type: ClassVar[CommandOptionType] = CommandOptionType.INTEGER


@dataclass(frozen=True)
class NumberOption(_OptionBase):
    choices: tuple[NumberChoice, ...] = ()

    option_type: ClassVar[CommandOptionType] = CommandOptionType.NUMBER


@dataclass(frozen=True)
class StringOption(_OptionBase):
    choices: tuple[StringChoice, ...] = ()

    option_type: ClassVar[CommandOptionType] = CommandOptionType.STRING


@dataclass(frozen=True)
class SubCommand(_OptionBase):
    options: tuple["CommandOption", ...] = ()

    option_type: ClassVar[CommandOptionType] = CommandOptionType.SUB_COMMAND


@dataclass(frozen=True)
class SubCommandGroup(_OptionBase):
    options: tuple["CommandOption", ...] = ()

    option_type: ClassVar[CommandOptionType] = CommandOptionType.SUB_COMMAND_GROUP


@dataclass(frozen=True)
class UnknownCommandOption:
    """Option whose type code is newer than this library; kept verbatim."""

    kind: CommandOptionType
    raw: Mapping[str, Any] = field(default_factory=dict, hash=False)

    @property
    def name(self) -> Any:
        return self.raw.get("name")

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


LeafOption = Union[
    BooleanOption,
    ChannelOption,
    IntegerOption,
    MentionableOption,
    NumberOption,
    RoleOption,
    StringOption,
    UserOption,
]
CommandOption = Union[LeafOption, SubCommand, SubCommandGroup, UnknownCommandOption]

LEAF_OPTION_TYPES: tuple[type, ...] = (
    BooleanOption,
    ChannelOption,
    IntegerOption,
    MentionableOption,
    NumberOption,
    RoleOption,
    StringOption,
    UserOption,
)

_OPTION_CLASSES: dict[CommandOptionType, type[_OptionBase]] = {
    cls.option_type: cls
    for cls in (*LEAF_OPTION_TYPES, SubCommand, SubCommandGroup)
}


def decode_command_option(payload: object, path: str = "") -> CommandOption:
    mapping = require_mapping(payload, path or "option")
    type_path = field_path(path, "type")
    if "type" not in mapping:
        raise DiscordDecodeError(type_path, "missing required key")
    kind = CommandOptionType.decode(mapping["type"], field=type_path)
    option_cls = _OPTION_CLASSES.get(kind)
    if option_cls is None:
        return UnknownCommandOption(kind=kind, raw=dict(mapping))
    return option_cls.from_dict(mapping, path=path)


def _option_schema(name: str, *extra: FieldSpec) -> RecordSchema:
    return RecordSchema(
        name,
        (
            FieldSpec("type", discriminator=True),
            FieldSpec("name", decoder=decode_str),
            FieldSpec("description", decoder=decode_str),
            FieldSpec("required", default=False, decoder=decode_bool),
            *extra,
        ),
    )


_LEAF_SCHEMA = _option_schema("CommandOption")
_CONTAINER_SCHEMA = _option_schema(
    "CommandOption",
    FieldSpec(
        "options",
        FieldPolicy.NON_EMPTY,
        decoder=decode_tuple(decode_command_option),
    ),
)


def _choice_option_schema(choice_cls: type, choice_schema: RecordSchema) -> RecordSchema:
    return _option_schema(
        "CommandOption",
        FieldSpec(
            "choices",
            FieldPolicy.NON_EMPTY,
            decoder=decode_tuple(_choice_decoder(choice_cls, choice_schema)),
        ),
    )


_OPTION_SCHEMAS: dict[CommandOptionType, RecordSchema] = {
    CommandOptionType.BOOLEAN: _LEAF_SCHEMA,
    CommandOptionType.CHANNEL: _LEAF_SCHEMA,
    CommandOptionType.MENTIONABLE: _LEAF_SCHEMA,
    CommandOptionType.ROLE: _LEAF_SCHEMA,
    CommandOptionType.USER: _LEAF_SCHEMA,
    CommandOptionType.INTEGER: _choice_option_schema(
        IntegerChoice, INTEGER_CHOICE_SCHEMA
    ),
    CommandOptionType.NUMBER: _choice_option_schema(NumberChoice, NUMBER_CHOICE_SCHEMA),
    CommandOptionType.STRING: _choice_option_schema(StringChoice, STRING_CHOICE_SCHEMA),
    CommandOptionType.SUB_COMMAND: _CONTAINER_SCHEMA,
    CommandOptionType.SUB_COMMAND_GROUP: _CONTAINER_SCHEMA,
}


@dataclass(frozen=True)
class Command:
    """Application command definition.

    ``application_id``, ``guild_id``, ``default_permission`` and ``id`` stay
    ``ABSENT`` until the platform or the owning integration assigns them.
    """

    name: str
    description: str
    kind: CommandType
    options: tuple[CommandOption, ...] = ()
    application_id: MaybeAbsent[str] = ABSENT
    guild_id: MaybeAbsent[str] = ABSENT
    default_permission: MaybeAbsent[bool] = ABSENT
    id: MaybeAbsent[str] = ABSENT

    def to_dict(self) -> dict[str, Any]:
        return COMMAND_SCHEMA.encode(self)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> "Command":
        return cls(**COMMAND_SCHEMA.decode(payload, path=path))


COMMAND_SCHEMA = RecordSchema(
    "Command",
    (
        FieldSpec("id", FieldPolicy.OPTIONAL, decoder=decode_str),
        FieldSpec("application_id", FieldPolicy.OPTIONAL, decoder=decode_str),
        FieldSpec("guild_id", FieldPolicy.OPTIONAL, decoder=decode_str),
        FieldSpec(
            "type",
            attr="kind",
            default=CommandType.CHAT_INPUT,
            decoder=lambda value, path: CommandType.decode(value, field=path),
        ),
        FieldSpec("name", decoder=decode_str),
        FieldSpec("description", decoder=decode_str),
        FieldSpec(
            "options",
            default=(),
            decoder=decode_tuple(decode_command_option),
        ),
        FieldSpec("default_permission", FieldPolicy.OPTIONAL, decoder=decode_bool),
    ),
)


def encode_command(command: Command) -> dict[str, Any]:
    return command.to_dict()


def encode_commands(commands: Iterable[Command]) -> list[dict[str, Any]]:
    return [command.to_dict() for command in commands]


def decode_command(payload: object, path: str = "") -> Command:
    return Command.from_dict(payload, path=path)


def decode_commands(payload: object, path: str = "commands") -> list[Command]:
    if not isinstance(payload, list):
        raise DiscordDecodeError(path, f"expected array, got {type(payload).__name__}")
    return [
        decode_command(item, f"{path}[{index}]") for index, item in enumerate(payload)
    ]
