"""Hosted model client for tutor replies and transcription.

The client takes its :class:`~inlineplot.tutor_config.TutorConfig` through
the constructor and builds the ``google-genai`` client lazily from it. Any
API failure is classified into an :class:`ApiFailureKind` and raised as a
:class:`TutorServiceError` whose message tells the user what to do. There are
no retries.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types

from .message_parts import ChatMessage, MediaPart, Sender, TextPart
from .tutor_config import TutorConfig

__all__ = [
    "ApiFailureKind",
    "DEEP_DIVE_NOTE",
    "FAILURE_MESSAGES",
    "TutorServiceError",
    "TutorClient",
    "classify_api_error",
    "to_content",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe the following math question. Convert spoken math to clear LaTeX. "
    "Return only the transcription."
)

DEEP_DIVE_NOTE = (
    "(System Note: User is currently in DEEP DIVE mode. Focus exclusively on the intuition "
    "of the term mentioned. Do not proceed with the math problem.)"
)


class ApiFailureKind(Enum):
    RATE_LIMITED = "rate_limited"
    UNAUTHENTICATED = "unauthenticated"
    TRANSIENT = "transient"
    EMPTY_RESPONSE = "empty_response"


FAILURE_MESSAGES: dict[ApiFailureKind, str] = {
    ApiFailureKind.RATE_LIMITED: (
        "Quota exceeded. You've reached the request limit for now; "
        "check your API key's quota or wait a moment before trying again."
    ),
    ApiFailureKind.UNAUTHENTICATED: (
        "The model rejected the API key or could not be found. Please select a valid key."
    ),
    ApiFailureKind.TRANSIENT: (
        "The tutor is temporarily unreachable. Please try again in a moment."
    ),
    ApiFailureKind.EMPTY_RESPONSE: (
        "The tutor returned an empty reply. Please check your connection and try again."
    ),
}


class TutorServiceError(RuntimeError):
    """Classified failure of the hosted model."""

    def __init__(self, kind: ApiFailureKind, detail: str = "") -> None:
        self.kind = kind
        self.user_message = FAILURE_MESSAGES[kind]
        self.detail = detail
        super().__init__(self.user_message)


_RATE_LIMIT_MARKERS = ("429", "quota", "resource_exhausted", "rate limit")
_AUTH_MARKERS = ("api key", "api_key", "unauthenticated", "permission_denied", "not found", "invalid")


def classify_api_error(exc: BaseException) -> ApiFailureKind:
    """Map an exception raised by the model API to an :class:`ApiFailureKind`.

    Status codes (``exc.code``) and status names (``exc.status``) decide when
    present; otherwise the message text is inspected.
    """
    code = getattr(exc, "code", None)
    status = str(getattr(exc, "status", "") or "").upper()
    text = str(exc).lower()

    if code == 429 or status == "RESOURCE_EXHAUSTED" or any(m in text for m in _RATE_LIMIT_MARKERS):
        return ApiFailureKind.RATE_LIMITED
    if (
        code in (401, 403, 404)
        or status in ("UNAUTHENTICATED", "PERMISSION_DENIED", "NOT_FOUND")
        or any(m in text for m in _AUTH_MARKERS)
    ):
        return ApiFailureKind.UNAUTHENTICATED
    return ApiFailureKind.TRANSIENT


def _to_part(part: TextPart | MediaPart) -> types.Part:
    if isinstance(part, MediaPart):
        return types.Part(inline_data=types.Blob(mime_type=part.mime_type, data=part.data))
    return types.Part(text=part.text)


def to_content(message: ChatMessage) -> types.Content:
    """Convert a :class:`ChatMessage` to the API's content structure."""
    role = "user" if message.sender == Sender.USER else "model"
    return types.Content(role=role, parts=[_to_part(p) for p in message.parts])


class TutorClient:
    """Thin wrapper over ``google.genai`` for the tutor's two model calls.

    Parameters
    ----------
    config : TutorConfig
        Resolved configuration.
    system_instruction : str, optional
        System prompt sent with every reply request.
    client : object, optional
        Pre-built client exposing ``models.generate_content``; mainly for
        tests. Built from ``config`` on first use when omitted.
    """

    def __init__(self, config: TutorConfig, *, system_instruction: str = "", client: Optional[Any] = None) -> None:
        self.config = config
        self.system_instruction = system_instruction
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    def _generate(self, *, model: str, contents: list[types.Content], config: Optional[types.GenerateContentConfig]) -> str:
        try:
            response = self.client.models.generate_content(model=model, contents=contents, config=config)
        except Exception as exc:
            kind = classify_api_error(exc)
            logger.warning("generate_content(model=%s) failed as %s: %s", model, kind.value, exc)
            raise TutorServiceError(kind, detail=str(exc)) from exc
        return getattr(response, "text", None) or ""

    def reply(self, history: Sequence[ChatMessage], *, deep_dive: bool = False) -> str:
        """Return the model's next tutor turn for ``history``.

        With ``deep_dive`` set, a trailing user-role note tells the model to
        stay on the intuition of the term under discussion.

        Raises
        ------
        TutorServiceError
            On any API failure, or when the model returns no text.
        """
        thinking = (
            types.ThinkingConfig(thinking_budget=self.config.thinking_budget)
            if self.config.thinking_budget is not None
            else None
        )
        gen_config = types.GenerateContentConfig(
            system_instruction=self.system_instruction or None,
            thinking_config=thinking,
        )
        contents = [to_content(m) for m in history]
        if deep_dive:
            contents.append(types.Content(role="user", parts=[types.Part(text=DEEP_DIVE_NOTE)]))
        text = self._generate(
            model=self.config.model,
            contents=contents,
            config=gen_config,
        )
        if not text:
            raise TutorServiceError(ApiFailureKind.EMPTY_RESPONSE)
        return text

    def transcribe(self, audio: bytes, mime_type: str) -> str:
        """Transcribe a recorded question to text with LaTeX math.

        An empty transcription is returned as ``""``.

        Raises
        ------
        TutorServiceError
            On any API failure.
        """
        message = ChatMessage.build(
            Sender.USER,
            [MediaPart(mime_type=mime_type, data=audio), TextPart(TRANSCRIPTION_INSTRUCTION)],
        )
        return self._generate(
            model=self.config.transcription_model,
            contents=[to_content(message)],
            config=None,
        ).strip()
