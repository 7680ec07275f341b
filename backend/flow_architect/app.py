"""Backend application factory.

Returns a small "service container" dictionary of dependencies so the
Streamlit layer (or tests) can wire things up without touching globals.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

from flow_architect.ai.openai_client import OpenAIClient, ProviderConfig
from flow_architect.flow import presets
from flow_architect.flow.client import DEFAULT_TEMPERATURE, FlowPromptClient

logger = logging.getLogger(__name__)

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _read_temperature() -> float:
    value = (os.getenv("FLOW_TEMPERATURE") or "").strip()
    if not value:
        return DEFAULT_TEMPERATURE
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid FLOW_TEMPERATURE=%r", value)
        return DEFAULT_TEMPERATURE


def create_app(config: ProviderConfig | None = None) -> Dict[str, Any]:
    """Create the backend dependency container.

    With no explicit `config`, local `.env` values are loaded (never
    overriding the real environment) and the provider is read from env.
    """
    if config is None:
        load_dotenv(ENV_FILE, override=False)
        config = ProviderConfig.from_env()

    ai_client = OpenAIClient(config)
    flow_client = FlowPromptClient(
        ai_client,
        model=config.chat_model,
        temperature=_read_temperature(),
    )

    return {
        "ai_client": ai_client,
        "flow_client": flow_client,
        "presets": {
            "languages": presets.LANGUAGES,
            "aspect_ratios": presets.ASPECT_RATIOS,
        },
    }
