"""Central OpenAI-compatible client wrapper for multimodal chat calls."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "google/gemini-3-pro-preview"
DEFAULT_GEMINI_MODEL = "gemini-3-pro-preview"
HACKCLUB_BASE_URL = "https://ai.hackclub.com/proxy/v1"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def resolve_base_url(api_key: str | None, base_url: str | None) -> str | None:
    if base_url:
        return base_url
    if api_key and api_key.startswith("sk-hc-"):
        return HACKCLUB_BASE_URL
    return None


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings for a single OpenAI-compatible endpoint."""

    api_key: str | None = None
    base_url: str | None = None
    chat_model: str = DEFAULT_CHAT_MODEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProviderConfig":
        """Read provider settings from process configuration.

        `OPENAI_API_KEY` wins; otherwise a Gemini key (`GEMINI_API_KEY` or
        `API_KEY`) is routed to Google's OpenAI-compatible endpoint. Nothing
        here fails when no key is set: the missing credential surfaces on
        the first call.
        """
        env = os.environ if environ is None else environ

        def _read_env(name: str) -> str | None:
            return _clean(env.get(name))

        model_override = _read_env("OPENAI_DEFAULT_CHAT_MODEL")

        api_key = _read_env("OPENAI_API_KEY")
        if api_key:
            return cls(
                api_key=api_key,
                base_url=resolve_base_url(api_key, _read_env("OPENAI_BASE_URL")),
                chat_model=model_override or DEFAULT_CHAT_MODEL,
            )

        gemini_key = _read_env("GEMINI_API_KEY") or _read_env("API_KEY")
        if gemini_key:
            return cls(
                api_key=gemini_key,
                base_url=_read_env("OPENAI_BASE_URL") or GEMINI_BASE_URL,
                chat_model=model_override or DEFAULT_GEMINI_MODEL,
            )

        return cls(
            api_key=None,
            base_url=_read_env("OPENAI_BASE_URL"),
            chat_model=model_override or DEFAULT_CHAT_MODEL,
        )

    @property
    def provider_name(self) -> str:
        base = (self.base_url or "").lower()
        if (self.api_key and self.api_key.startswith("sk-hc-")) or "hackclub.com" in base:
            return "Hack Club"
        if "generativelanguage.googleapis.com" in base:
            return "Google Gemini"
        if "openai.com" in base or (self.api_key and self.api_key.startswith("sk-")):
            return "OpenAI"
        return "Custom"


class MissingCredentialError(RuntimeError):
    """Raised when a call is attempted without an API key."""


class OpenAIClient:
    """Thin wrapper around an OpenAI-compatible provider."""

    def __init__(self, config: ProviderConfig | None = None):
        self.config = config or ProviderConfig()
        self._client: OpenAI | None = None

    @property
    def api_key(self) -> str | None:
        return self.config.api_key

    @property
    def base_url(self) -> str | None:
        return self.config.base_url

    @property
    def default_chat_model(self) -> str:
        return self.config.chat_model

    def _get_live_client(self) -> OpenAI:
        if not self.config.api_key:
            raise MissingCredentialError(
                "No API key configured. Set OPENAI_API_KEY or GEMINI_API_KEY."
            )
        if self._client is None:
            self._client = OpenAI(api_key=self.config.api_key, base_url=self.config.base_url)
        return self._client

    def chat(self, messages: List[Dict[str, Any]], model: str | None = None, **kwargs) -> Any:
        """Call the provider chat endpoint once; errors propagate to the caller."""
        client = self._get_live_client()
        chosen_model = model or self.config.chat_model
        logger.debug("chat call model=%s provider=%s", chosen_model, self.config.provider_name)
        return client.chat.completions.create(messages=messages, model=chosen_model, **kwargs)
