"""Presence-conditional record encoding.

Discord distinguishes a key that is missing from a payload from a key that
is present with ``null``. Records therefore use the ``ABSENT`` sentinel for
"not set" and keep ``None`` for an explicit null. A ``RecordSchema`` lists
every key of a record in wire order together with its emission policy, so
the emitted key order is fixed no matter which optional attributes are set.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Final, Mapping, Optional, TypeVar, Union

from ...core.logging_utils import log_event
from .enums import ExtensibleIntEnum
from .errors import DiscordDecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Absent:
    """Marker for an attribute that is not set at all (not even to null)."""

    _instance: Optional["Absent"] = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = Absent()

MaybeAbsent = Union[T, Absent]

Decoder = Callable[[Any, str], Any]


def is_present(value: object) -> bool:
    return value is not ABSENT


class FieldPolicy(Enum):
    ALWAYS = "always"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    # Sequences emitted only when they hold at least one item.
    NON_EMPTY = "non_empty"


@dataclass(frozen=True)
class FieldSpec:
    """One key of a record schema.

    ``attr`` names the record attribute when it differs from the wire key.
    A discriminator field has no backing attribute; its value comes from the
    caller at encode time. ``default`` lets an ALWAYS field tolerate a
    missing key when decoding.
    """

    key: str
    policy: FieldPolicy = FieldPolicy.ALWAYS
    attr: Optional[str] = None
    encoder: Optional[Callable[[Any], Any]] = None
    decoder: Optional[Decoder] = None
    default: Any = ABSENT
    discriminator: bool = False

    @property
    def attribute(self) -> str:
        return self.attr or self.key


def encode_value(value: Any) -> Any:
    if isinstance(value, ExtensibleIntEnum):
        return value.encode()
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, (list, tuple)):
        return [encode_value(item) for item in value]
    return value


def field_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


@dataclass(frozen=True)
class RecordSchema:
    name: str
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        discriminators = [spec for spec in self.fields if spec.discriminator]
        if len(discriminators) > 1:
            raise ValueError(f"{self.name} declares more than one discriminator")
        keys = [spec.key for spec in self.fields]
        if len(keys) != len(set(keys)):
            raise ValueError(f"{self.name} declares duplicate keys")

    @property
    def discriminator_key(self) -> Optional[str]:
        for spec in self.fields:
            if spec.discriminator:
                return spec.key
        return None

    def field_count(self, record: object) -> int:
        """Exact number of keys ``encode`` will emit for ``record``."""
        always = 0
        present = 0
        for spec in self.fields:
            if spec.discriminator or spec.policy in (
                FieldPolicy.ALWAYS,
                FieldPolicy.NULLABLE,
            ):
                always += 1
            elif _is_emitted(spec, getattr(record, spec.attribute)):
                present += 1
        return always + present

    def encode(self, record: object, *, tag: Any = ABSENT) -> dict[str, Any]:
        if self.discriminator_key is not None and tag is ABSENT:
            raise TypeError(f"{self.name} encoding requires a discriminator value")
        count = self.field_count(record)
        payload: dict[str, Any] = {}
        for spec in self.fields:
            if spec.discriminator:
                payload[spec.key] = encode_value(tag)
                continue
            value = getattr(record, spec.attribute)
            if not _is_emitted(spec, value):
                continue
            if value is None and spec.policy is FieldPolicy.NULLABLE:
                payload[spec.key] = None
                continue
            payload[spec.key] = (
                spec.encoder(value) if spec.encoder is not None else encode_value(value)
            )
        log_event(
            logger,
            logging.DEBUG,
            "discord.record.encoded",
            record=self.name,
            field_count=count,
        )
        return payload

    def decode(self, payload: object, *, path: str = "") -> dict[str, Any]:
        """Decode ``payload`` into constructor keyword arguments.

        The discriminator key is not read; dispatching on it is the caller's
        concern.
        """
        mapping = require_mapping(payload, path or self.name)
        values: dict[str, Any] = {}
        for spec in self.fields:
            if spec.discriminator:
                continue
            location = field_path(path, spec.key)
            if spec.key not in mapping:
                values[spec.attribute] = self._missing(spec, location)
                continue
            raw = mapping[spec.key]
            if raw is None:
                if spec.policy is FieldPolicy.ALWAYS:
                    raise DiscordDecodeError(location, "must not be null")
                values[spec.attribute] = self._missing(spec, location)
                continue
            values[spec.attribute] = (
                spec.decoder(raw, location) if spec.decoder is not None else raw
            )
        return values

    @staticmethod
    def _missing(spec: FieldSpec, location: str) -> Any:
        if spec.policy is FieldPolicy.OPTIONAL:
            return ABSENT
        if spec.policy is FieldPolicy.NULLABLE:
            return None
        if spec.policy is FieldPolicy.NON_EMPTY:
            return ()
        if spec.default is not ABSENT:
            return spec.default
        raise DiscordDecodeError(location, "missing required key")


def _is_emitted(spec: FieldSpec, value: Any) -> bool:
    if spec.policy is FieldPolicy.OPTIONAL:
        return value is not ABSENT
    if spec.policy is FieldPolicy.NON_EMPTY:
        return len(value) > 0
    return True


def require_mapping(value: object, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DiscordDecodeError(field, f"expected object, got {type(value).__name__}")
    return value


def decode_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise DiscordDecodeError(field, f"expected string, got {type(value).__name__}")
    return value


def decode_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise DiscordDecodeError(field, f"expected boolean, got {type(value).__name__}")
    return value


def decode_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DiscordDecodeError(field, f"expected integer, got {type(value).__name__}")
    return value


def decode_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DiscordDecodeError(field, f"expected number, got {type(value).__name__}")
    return float(value)


def decode_tuple(item_decoder: Decoder) -> Decoder:
    def _decode(value: Any, field: str) -> tuple[Any, ...]:
        if not isinstance(value, list):
            raise DiscordDecodeError(
                field, f"expected array, got {type(value).__name__}"
            )
        return tuple(
            item_decoder(item, f"{field}[{index}]") for index, item in enumerate(value)
        )

    return _decode


def dumps_payload(payload: Any) -> str:
    """Serialize an encoded payload to JSON text, preserving key order.

    Non-finite floats raise ``ValueError``; JSON has no spelling for them.
    """
    return json.dumps(
        payload, ensure_ascii=False, separators=(",", ":"), allow_nan=False
    )
