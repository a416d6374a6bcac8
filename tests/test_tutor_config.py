from __future__ import annotations

import pytest

from inlineplot.tutor_config import ConfigError, TutorConfig


def test_key_lookup_order_and_defaults() -> None:
    cfg = TutorConfig.from_env({"API_KEY": "late", "VITE_GEMINI_API_KEY": " early "})
    assert cfg.api_key == "early"
    assert cfg.model == "gemini-3-pro-preview"
    assert cfg.transcription_model == "gemini-3-flash-preview"
    assert cfg.thinking_budget == 16000


def test_blank_key_is_skipped() -> None:
    assert TutorConfig.from_env({"VITE_GEMINI_API_KEY": "  ", "GEMINI_API_KEY": "k"}).api_key == "k"


def test_missing_key_raises() -> None:
    with pytest.raises(ConfigError, match="No API key"):
        TutorConfig.from_env({})


def test_overrides() -> None:
    cfg = TutorConfig.from_env(
        {
            "API_KEY": "k",
            "TUTOR_MODEL": "m1",
            "TUTOR_TRANSCRIPTION_MODEL": "m2",
            "TUTOR_THINKING_BUDGET": "2048",
        }
    )
    assert (cfg.model, cfg.transcription_model, cfg.thinking_budget) == ("m1", "m2", 2048)


def test_thinking_budget_can_be_disabled() -> None:
    assert TutorConfig.from_env({"API_KEY": "k", "TUTOR_THINKING_BUDGET": "None"}).thinking_budget is None


@pytest.mark.parametrize("budget", ["lots", "1.5", "-1"])
def test_bad_thinking_budget_raises(budget: str) -> None:
    with pytest.raises(ConfigError):
        TutorConfig.from_env({"API_KEY": "k", "TUTOR_THINKING_BUDGET": budget})


def test_dotenv_file_is_read_and_environment_wins(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("GEMINI_API_KEY=from-file\nTUTOR_MODEL=file-model\n")
    cfg = TutorConfig.from_env({"TUTOR_MODEL": "env-model"}, dotenv_path=env_file)
    assert cfg.api_key == "from-file"
    assert cfg.model == "env-model"


def test_key_is_hidden_from_repr() -> None:
    assert "secret" not in repr(TutorConfig(api_key="secret"))


def test_empty_key_is_rejected() -> None:
    with pytest.raises(ConfigError):
        TutorConfig(api_key="")
