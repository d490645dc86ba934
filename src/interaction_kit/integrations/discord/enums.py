"""Integer-coded Discord enumerations that tolerate codes added server-side."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any, TypeVar

from ...core.logging_utils import log_event
from .errors import DiscordDecodeError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound="ExtensibleIntEnum")


class ExtensibleIntEnum(IntEnum):
    """Integer enumeration that never rejects an integer.

    Known codes map to the declared members. Any other integer becomes a
    pseudo-member named ``UNKNOWN_<code>`` whose value is the received code,
    so encoding it again reproduces the wire value exactly. Pseudo-members
    are cached, making ``Style(200) is Style(200)`` hold like it does for
    declared members.
    """

    @classmethod
    def _missing_(cls, value: object) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        pseudo = int.__new__(cls, value)
        pseudo._name_ = f"UNKNOWN_{value}"
        pseudo._value_ = value
        return cls._value2member_map_.setdefault(value, pseudo)

    @property
    def known(self) -> bool:
        return self._name_ in type(self)._member_map_

    @classmethod
    def decode(cls: type[E], value: object, *, field: str = "type") -> E:
        # bool is an int subclass; True would silently alias code 1.
        if isinstance(value, bool) or not isinstance(value, int):
            raise DiscordDecodeError(
                field,
                f"expected integer {cls.__name__} code, got {type(value).__name__}",
            )
        member = cls(value)
        if not member.known:
            log_event(
                logger,
                logging.DEBUG,
                "discord.enum.unknown_value",
                enum=cls.__name__,
                value=value,
            )
        return member

    def encode(self) -> int:
        return int(self._value_)


class ButtonStyle(ExtensibleIntEnum):
    """Visual style of a button.

    PRIMARY, SECONDARY, SUCCESS and DANGER buttons need a ``custom_id``;
    LINK buttons need a ``url``. Neither requirement is checked here.
    """

    PRIMARY = 1
    SECONDARY = 2
    SUCCESS = 3
    DANGER = 4
    LINK = 5


class ComponentType(ExtensibleIntEnum):
    ACTION_ROW = 1
    BUTTON = 2
    SELECT_MENU = 3


class CommandType(ExtensibleIntEnum):
    CHAT_INPUT = 1
    USER = 2
    MESSAGE = 3


class CommandOptionType(ExtensibleIntEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10


class InteractionType(ExtensibleIntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5
