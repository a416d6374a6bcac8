from __future__ import annotations

from types import SimpleNamespace

import pytest

from inlineplot.message_parts import ChatMessage, MediaPart, Sender, TextPart
from inlineplot.tutor_client import (
    DEEP_DIVE_NOTE,
    FAILURE_MESSAGES,
    ApiFailureKind,
    TutorClient,
    TutorServiceError,
    classify_api_error,
    to_content,
)
from inlineplot.tutor_config import TutorConfig


class FakeApiError(Exception):
    def __init__(self, message: str, code: int | None = None, status: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


class FakeModels:
    def __init__(self, text: str | None = "ok", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def _client(models: FakeModels, **cfg) -> TutorClient:
    return TutorClient(
        TutorConfig(api_key="k", **cfg),
        system_instruction="Be Socratic.",
        client=SimpleNamespace(models=models),
    )


@pytest.mark.parametrize(
    "exc, kind",
    [
        (FakeApiError("boom", code=429), ApiFailureKind.RATE_LIMITED),
        (FakeApiError("boom", status="RESOURCE_EXHAUSTED"), ApiFailureKind.RATE_LIMITED),
        (RuntimeError("You exceeded your current quota"), ApiFailureKind.RATE_LIMITED),
        (FakeApiError("boom", code=403), ApiFailureKind.UNAUTHENTICATED),
        (FakeApiError("boom", status="NOT_FOUND"), ApiFailureKind.UNAUTHENTICATED),
        (RuntimeError("API key not valid"), ApiFailureKind.UNAUTHENTICATED),
        (RuntimeError("Requested entity was not found."), ApiFailureKind.UNAUTHENTICATED),
        (FakeApiError("server error", code=503), ApiFailureKind.TRANSIENT),
        (ConnectionError("connection reset"), ApiFailureKind.TRANSIENT),
    ],
)
def test_classify_api_error(exc: Exception, kind: ApiFailureKind) -> None:
    assert classify_api_error(exc) is kind


def test_every_failure_kind_has_a_distinct_message() -> None:
    assert set(FAILURE_MESSAGES) == set(ApiFailureKind)
    assert len(set(FAILURE_MESSAGES.values())) == len(ApiFailureKind)


def test_to_content_maps_roles_and_parts() -> None:
    user = ChatMessage.build(Sender.USER, [TextPart("solve"), MediaPart("image/png", b"img")])
    content = to_content(user)
    assert content.role == "user"
    assert content.parts[0].text == "solve"
    assert content.parts[1].inline_data.mime_type == "image/png"
    assert content.parts[1].inline_data.data == b"img"
    assert to_content(ChatMessage.from_text(Sender.AI, "hint")).role == "model"


def test_reply_sends_history_and_config() -> None:
    models = FakeModels(text="What do you think happens at x = 0?")
    client = _client(models)
    history = [ChatMessage.from_text(Sender.USER, "Plot 1/x"), ChatMessage.from_text(Sender.AI, "Sure")]

    assert client.reply(history) == "What do you think happens at x = 0?"
    (call,) = models.calls
    assert call["model"] == "gemini-3-pro-preview"
    assert [c.role for c in call["contents"]] == ["user", "model"]
    assert call["config"].system_instruction == "Be Socratic."
    assert call["config"].thinking_config.thinking_budget == 16000


def test_deep_dive_appends_a_trailing_user_note() -> None:
    models = FakeModels()
    client = _client(models)
    history = [ChatMessage.from_text(Sender.USER, "What is a derivative?")]

    client.reply(history)
    last = models.calls[-1]["contents"][-1]
    assert len(models.calls[-1]["contents"]) == 1
    assert last.parts[0].text == "What is a derivative?"

    client.reply(history, deep_dive=True)
    contents = models.calls[-1]["contents"]
    assert len(contents) == 2
    assert contents[-1].role == "user"
    assert contents[-1].parts[0].text == DEEP_DIVE_NOTE
    assert "DEEP DIVE" in DEEP_DIVE_NOTE


def test_reply_without_thinking_budget() -> None:
    models = FakeModels()
    _client(models, thinking_budget=None).reply([ChatMessage.from_text(Sender.USER, "hi")])
    assert models.calls[0]["config"].thinking_config is None


def test_empty_reply_raises() -> None:
    with pytest.raises(TutorServiceError) as info:
        _client(FakeModels(text=None)).reply([ChatMessage.from_text(Sender.USER, "hi")])
    assert info.value.kind is ApiFailureKind.EMPTY_RESPONSE


def test_api_failures_are_classified_and_chained() -> None:
    error = FakeApiError("Resource has been exhausted", code=429)
    with pytest.raises(TutorServiceError) as info:
        _client(FakeModels(error=error)).reply([ChatMessage.from_text(Sender.USER, "hi")])
    assert info.value.kind is ApiFailureKind.RATE_LIMITED
    assert str(info.value) == FAILURE_MESSAGES[ApiFailureKind.RATE_LIMITED]
    assert info.value.__cause__ is error
    assert "exhausted" in info.value.detail


def test_transcribe_uses_transcription_model() -> None:
    models = FakeModels(text="  \\int_0^1 x\\,dx \n")
    text = _client(models).transcribe(b"audio-bytes", "audio/webm")
    assert text == "\\int_0^1 x\\,dx"
    (call,) = models.calls
    assert call["model"] == "gemini-3-flash-preview"
    assert call["config"] is None
    parts = call["contents"][0].parts
    assert parts[0].inline_data.data == b"audio-bytes"
    assert "Transcribe" in parts[1].text


def test_transcribe_failure_raises() -> None:
    with pytest.raises(TutorServiceError) as info:
        _client(FakeModels(error=FakeApiError("denied", code=401))).transcribe(b"a", "audio/webm")
    assert info.value.kind is ApiFailureKind.UNAUTHENTICATED


def test_client_is_built_lazily(monkeypatch: pytest.MonkeyPatch) -> None:
    import inlineplot.tutor_client as tutor_client

    built = []
    monkeypatch.setattr(tutor_client.genai, "Client", lambda **kw: built.append(kw) or SimpleNamespace(models=FakeModels()))
    client = TutorClient(TutorConfig(api_key="k"))
    assert built == []
    client.reply([ChatMessage.from_text(Sender.USER, "hi")])
    assert built == [{"api_key": "k"}]
