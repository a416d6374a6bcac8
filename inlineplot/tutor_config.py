"""Configuration for the hosted tutor model client.

The configuration is resolved once, at startup, and passed explicitly to
:class:`~inlineplot.tutor_client.TutorClient`. Nothing else in the package
reads it, and the plot renderer never touches the environment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional

from dotenv import dotenv_values

from .InputConvert import InputConvert

__all__ = ["ConfigError", "TutorConfig", "API_KEY_VARIABLES"]

# Checked in order; the first non-blank value wins.
API_KEY_VARIABLES = ("VITE_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY")


class ConfigError(RuntimeError):
    """Raised when the tutor client configuration is incomplete or invalid."""


@dataclass(frozen=True)
class TutorConfig:
    """Immutable settings for talking to the hosted model.

    Parameters
    ----------
    api_key : str
        Model API key. Never shown in ``repr``.
    model : str, optional
        Model used for tutoring replies.
    transcription_model : str, optional
        Model used to transcribe recorded questions.
    thinking_budget : int or None, optional
        Reasoning token budget for replies; ``None`` leaves the model default.
    """

    api_key: str = field(repr=False)
    model: str = "gemini-3-pro-preview"
    transcription_model: str = "gemini-3-flash-preview"
    thinking_budget: Optional[int] = 16000

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("TutorConfig.api_key must not be empty")
        if self.thinking_budget is not None and self.thinking_budget < 0:
            raise ConfigError("thinking_budget must be >= 0")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        dotenv_path: Optional[str | os.PathLike[str]] = None,
    ) -> "TutorConfig":
        """Resolve configuration from environment variables.

        Parameters
        ----------
        environ : mapping, optional
            Variables to read; defaults to ``os.environ``.
        dotenv_path : path-like, optional
            A ``.env`` file read first; ``environ`` wins on conflicts.

        Variables
        ---------
        ``VITE_GEMINI_API_KEY`` / ``GEMINI_API_KEY`` / ``API_KEY``
            API key (first non-blank). Whitespace is stripped.
        ``TUTOR_MODEL``, ``TUTOR_TRANSCRIPTION_MODEL``
            Optional model overrides.
        ``TUTOR_THINKING_BUDGET``
            Optional integer; ``none`` disables the budget.

        Raises
        ------
        ConfigError
            If no API key is set or the thinking budget is not an integer.
        """
        values: dict[str, str] = {}
        if dotenv_path is not None:
            values.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
        values.update(os.environ if environ is None else environ)

        api_key = next(
            ("".join(values[name].split()) for name in API_KEY_VARIABLES if values.get(name, "").strip()),
            "",
        )
        if not api_key:
            raise ConfigError(f"No API key found; set one of {', '.join(API_KEY_VARIABLES)}")

        kwargs: dict[str, object] = {}
        if values.get("TUTOR_MODEL", "").strip():
            kwargs["model"] = values["TUTOR_MODEL"].strip()
        if values.get("TUTOR_TRANSCRIPTION_MODEL", "").strip():
            kwargs["transcription_model"] = values["TUTOR_TRANSCRIPTION_MODEL"].strip()
        budget = values.get("TUTOR_THINKING_BUDGET", "").strip()
        if budget.lower() == "none":
            kwargs["thinking_budget"] = None
        elif budget:
            try:
                kwargs["thinking_budget"] = InputConvert(budget, int, truncate=False)
            except ValueError as exc:
                raise ConfigError(f"TUTOR_THINKING_BUDGET must be an integer, got {budget!r}") from exc
        return cls(api_key=api_key, **kwargs)  # type: ignore[arg-type]
