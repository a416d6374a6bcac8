"""Chat message model.

A message part is exactly one of two variants, told apart by an explicit
``kind`` tag rather than by which optional field happens to be set:

- :class:`TextPart` - plain text (may contain markdown, math, and plot
  directives),
- :class:`MediaPart` - inline binary data such as a camera snapshot or a
  microphone recording.
"""

from __future__ import annotations

import base64
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Sequence, TypeAlias, Union

__all__ = ["Sender", "TextPart", "MediaPart", "MessagePart", "ChatMessage"]


class Sender(str, Enum):
    USER = "user"
    AI = "ai"


@dataclass(frozen=True)
class TextPart:
    text: str
    kind: Literal["text"] = field(default="text", init=False)


@dataclass(frozen=True)
class MediaPart:
    """Inline binary payload with its MIME type."""

    mime_type: str
    data: bytes = field(repr=False)
    kind: Literal["media"] = field(default="media", init=False)

    def __post_init__(self) -> None:
        if not self.mime_type or "/" not in self.mime_type:
            raise ValueError(f"MediaPart needs a MIME type like 'image/png', got {self.mime_type!r}")

    @classmethod
    def from_base64(cls, mime_type: str, encoded: str) -> "MediaPart":
        """Build a part from base64 text, accepting ``data:<mime>;base64,`` URLs."""
        if encoded.startswith("data:") and "," in encoded:
            header, encoded = encoded.split(",", 1)
            mime_type = header[5:].split(";", 1)[0] or mime_type
        return cls(mime_type=mime_type, data=base64.b64decode(encoded, validate=True))

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


MessagePart: TypeAlias = Union[TextPart, MediaPart]


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the conversation."""

    sender: Sender
    parts: tuple[MessagePart, ...]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def from_text(cls, sender: Sender, text: str) -> "ChatMessage":
        return cls(sender=sender, parts=(TextPart(text),))

    @classmethod
    def build(cls, sender: Sender, parts: Sequence[MessagePart]) -> "ChatMessage":
        return cls(sender=sender, parts=tuple(parts))

    def text(self) -> str:
        """Join the text parts with newlines, skipping media."""
        return "\n".join(p.text for p in self.parts if isinstance(p, TextPart))

    @property
    def media(self) -> tuple[MediaPart, ...]:
        return tuple(p for p in self.parts if isinstance(p, MediaPart))
