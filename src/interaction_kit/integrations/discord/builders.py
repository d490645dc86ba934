"""Fluent builders for application commands.

Every builder handle is single-use: each fluent call returns a fresh builder
and retires the one it was called on, and ``build()`` retires it as well.
Touching a retired handle raises ``BuilderConsumedError``. Chain the calls,
or rebind the name on every step::

    command = (
        CommandBuilder("blep", "Send a random adorable animal photo", CommandType.CHAT_INPUT)
        .option(
            StringBuilder("animal", "The type of animal")
            .required(True)
            .choices([("Dog", "animal_dog"), ("Cat", "animal_cat")])
        )
        .option(BooleanBuilder("only_smol", "Whether to show only baby animals"))
        .build()
    )

Nesting is limited by what each ``option`` method accepts: a
``SubCommandGroupBuilder`` only takes ``SubCommandBuilder`` children and a
``SubCommandBuilder`` only takes leaf options, so group -> subcommand -> leaf
is the deepest tree these builders can produce. Ready-made sub command and
group values handed to ``CommandBuilder.option`` are held to the same shape.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any, Callable, ClassVar, Generic, Iterable, TypeVar, Union

from .commands import (
    LEAF_OPTION_TYPES,
    BooleanOption,
    ChannelOption,
    Command,
    CommandOption,
    IntegerChoice,
    IntegerOption,
    LeafOption,
    MentionableOption,
    NumberChoice,
    NumberOption,
    RoleOption,
    StringChoice,
    StringOption,
    SubCommand,
    SubCommandGroup,
    UnknownCommandOption,
    UserOption,
)
from .enums import CommandType
from .errors import BuilderConsumedError

T = TypeVar("T")
OptT = TypeVar("OptT")
B = TypeVar("B", bound="_Builder[Any]")


class _Builder(Generic[T]):
    def __init__(self, value: T) -> None:
        self._value = value
        self._consumed = False

    @classmethod
    def _wrap(cls: type[B], value: Any) -> B:
        builder = cls.__new__(cls)
        _Builder.__init__(builder, value)
        return builder

    @property
    def consumed(self) -> bool:
        return self._consumed

    def _ensure_usable(self) -> None:
        if self._consumed:
            raise BuilderConsumedError(
                f"{type(self).__name__} was already used; continue from the "
                "builder returned by the previous call"
            )

    def _take(self) -> T:
        self._ensure_usable()
        self._consumed = True
        return self._value

    def _advance(self: B, **changes: Any) -> B:
        return self._wrap(replace(self._take(), **changes))

    def build(self) -> T:
        """Finish the builder and return the immutable value."""
        return self._take()

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "open"
        return f"{type(self).__name__}({self._value!r}, {state})"


class _LeafBuilder(_Builder[OptT]):
    option_cls: ClassVar[type]

    def __init__(self, name: str, description: str) -> None:
        super().__init__(self.option_cls(name=name, description=description))

    def required(self: B, required: bool) -> B:
        """Set whether this option is required. Defaults to false."""
        return self._advance(required=required)


class BooleanBuilder(_LeafBuilder[BooleanOption]):
    option_cls = BooleanOption


class ChannelBuilder(_LeafBuilder[ChannelOption]):
    option_cls = ChannelOption


class MentionableBuilder(_LeafBuilder[MentionableOption]):
    option_cls = MentionableOption


class RoleBuilder(_LeafBuilder[RoleOption]):
    option_cls = RoleOption


class UserBuilder(_LeafBuilder[UserOption]):
    option_cls = UserOption


V = TypeVar("V")
CB = TypeVar("CB", bound="_ChoiceBuilder[Any, Any]")


def _choice_label(label: Any) -> str:
    if not isinstance(label, str):
        raise TypeError(f"choice label must be str, got {type(label).__name__}")
    return label


def _integer_value(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"integer choice value must be int, got {type(value).__name__}"
        )
    return value


def _number_value(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(
            f"number choice value must be float, got {type(value).__name__}"
        )
    # NaN and infinities have no JSON representation.
    if not math.isfinite(value):
        raise ValueError(f"number choice value must be finite, got {value!r}")
    return float(value)


def _string_value(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(
            f"string choice value must be str, got {type(value).__name__}"
        )
    return value


class _ChoiceBuilder(_LeafBuilder[OptT], Generic[OptT, V]):
    choice_cls: ClassVar[type]
    coerce_value: ClassVar[Callable[[Any], Any]]

    def choices(self: CB, choices: Iterable[tuple[str, V]]) -> CB:
        """Replace the option's choices with ``(label, value)`` pairs.

        Each call overwrites the previous list. Defaults to no choices.
        """
        self._ensure_usable()
        coerce = type(self).coerce_value
        built = tuple(
            self.choice_cls(name=_choice_label(label), value=coerce(value))
            for label, value in choices
        )
        return self._advance(choices=built)


class IntegerBuilder(_ChoiceBuilder[IntegerOption, int]):
    option_cls = IntegerOption
    choice_cls = IntegerChoice
    coerce_value = staticmethod(_integer_value)


class NumberBuilder(_ChoiceBuilder[NumberOption, float]):
    option_cls = NumberOption
    choice_cls = NumberChoice
    coerce_value = staticmethod(_number_value)


class StringBuilder(_ChoiceBuilder[StringOption, str]):
    option_cls = StringOption
    choice_cls = StringChoice
    coerce_value = staticmethod(_string_value)


LeafBuilder = Union[
    BooleanBuilder,
    ChannelBuilder,
    IntegerBuilder,
    MentionableBuilder,
    NumberBuilder,
    RoleBuilder,
    StringBuilder,
    UserBuilder,
]


def _leaf_option(option: Union[LeafBuilder, LeafOption]) -> LeafOption:
    if isinstance(option, _LeafBuilder):
        return option.build()
    if isinstance(option, LEAF_OPTION_TYPES):
        return option
    raise TypeError(
        f"a sub command only accepts leaf options, got {type(option).__name__}"
    )


class SubCommandBuilder(_Builder[SubCommand]):
    def __init__(self, name: str, description: str) -> None:
        super().__init__(SubCommand(name=name, description=description))

    def option(
        self, option: Union[LeafBuilder, LeafOption]
    ) -> "SubCommandBuilder":
        """Append a leaf option. Order is kept; duplicates are not checked."""
        self._ensure_usable()
        child = _leaf_option(option)
        value = self._take()
        return self._wrap(replace(value, options=(*value.options, child)))


class SubCommandGroupBuilder(_Builder[SubCommandGroup]):
    def __init__(self, name: str, description: str) -> None:
        super().__init__(SubCommandGroup(name=name, description=description))

    def option(self, option: SubCommandBuilder) -> "SubCommandGroupBuilder":
        """Append a sub command. Groups accept nothing else."""
        self._ensure_usable()
        if not isinstance(option, SubCommandBuilder):
            raise TypeError(
                "a sub command group only accepts SubCommandBuilder, got "
                f"{type(option).__name__}"
            )
        child = option.build()
        value = self._take()
        return self._wrap(replace(value, options=(*value.options, child)))


OptionBuilder = Union[LeafBuilder, SubCommandBuilder, SubCommandGroupBuilder]

_SUB_COMMAND_CHILD_TYPES: tuple[type, ...] = (*LEAF_OPTION_TYPES, UnknownCommandOption)


def _check_sub_command(sub: SubCommand, where: str) -> None:
    for index, child in enumerate(sub.options):
        if not isinstance(child, _SUB_COMMAND_CHILD_TYPES):
            raise TypeError(
                f"{where}.options[{index}]: a sub command only accepts leaf "
                f"options, got {type(child).__name__}"
            )


def _option_value(option: Any) -> CommandOption:
    """Accept a ready-made option only if the builders could have produced it."""
    if isinstance(option, _SUB_COMMAND_CHILD_TYPES):
        return option
    if isinstance(option, SubCommand):
        _check_sub_command(option, option.name)
        return option
    if isinstance(option, SubCommandGroup):
        for index, child in enumerate(option.options):
            where = f"{option.name}.options[{index}]"
            if not isinstance(child, SubCommand):
                raise TypeError(
                    f"{where}: a sub command group only accepts sub commands, "
                    f"got {type(child).__name__}"
                )
            _check_sub_command(child, where)
        return option
    raise TypeError(
        "a command accepts option builders or command options, got "
        f"{type(option).__name__}"
    )


class CommandBuilder(_Builder[Command]):
    def __init__(self, name: str, description: str, kind: CommandType) -> None:
        super().__init__(Command(name=name, description=description, kind=kind))

    def application_id(self, application_id: str) -> "CommandBuilder":
        """Set the application ID of the command. Defaults to ABSENT."""
        return self._advance(application_id=application_id)

    def guild_id(self, guild_id: str) -> "CommandBuilder":
        """Set the guild ID of the command. Defaults to ABSENT."""
        return self._advance(guild_id=guild_id)

    def default_permission(self, default_permission: bool) -> "CommandBuilder":
        """Set the default permission of the command. Defaults to ABSENT."""
        return self._advance(default_permission=default_permission)

    def id(self, command_id: str) -> "CommandBuilder":
        """Set the ID of the command. Defaults to ABSENT."""
        return self._advance(id=command_id)

    def option(self, option: Union[OptionBuilder, CommandOption]) -> "CommandBuilder":
        """Append a top-level option. Defaults to an empty list."""
        self._ensure_usable()
        if isinstance(option, (_LeafBuilder, SubCommandBuilder, SubCommandGroupBuilder)):
            child = option.build()
        else:
            child = _option_value(option)
        value = self._take()
        return self._wrap(replace(value, options=(*value.options, child)))


