from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .encoding import FieldPolicy, FieldSpec, RecordSchema, decode_str


@dataclass(frozen=True)
class EmbedAuthor:
    """Author block of an embed. Every key is emitted; unset ones as null."""

    icon_url: Optional[str] = None
    name: Optional[str] = None
    proxy_icon_url: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return EMBED_AUTHOR_SCHEMA.encode(self)

    @classmethod
    def from_dict(cls, payload: object, *, path: str = "") -> "EmbedAuthor":
        return cls(**EMBED_AUTHOR_SCHEMA.decode(payload, path=path))


EMBED_AUTHOR_SCHEMA = RecordSchema(
    "EmbedAuthor",
    (
        FieldSpec("icon_url", FieldPolicy.NULLABLE, decoder=decode_str),
        FieldSpec("name", FieldPolicy.NULLABLE, decoder=decode_str),
        FieldSpec("proxy_icon_url", FieldPolicy.NULLABLE, decoder=decode_str),
        FieldSpec("url", FieldPolicy.NULLABLE, decoder=decode_str),
    ),
)
