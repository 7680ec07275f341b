"""Prompt generation client: one multimodal call in, one FlowPlan out."""

from __future__ import annotations

import logging
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from .errors import SchemaViolationError, TransportError, ValidationError
from .models import FlowPlan, FlowReply, InputFrames
from .prompts import build_messages, response_format

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.4


def extract_content(resp: Any) -> str:
    """Handle both dict responses and SDK objects."""

    def _normalize(content: Any) -> str:
        if content is None:
            return ""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts: list[str] = []
            for item in content:
                if isinstance(item, dict):
                    text_value = item.get("text") or item.get("content")
                else:
                    text_value = getattr(item, "text", None) or getattr(item, "content", None)
                if isinstance(text_value, str):
                    parts.append(text_value)
            return "".join(parts)
        return str(content)

    if isinstance(resp, dict):
        try:
            return _normalize(resp["choices"][0]["message"]["content"])
        except (KeyError, IndexError, TypeError) as exc:
            raise SchemaViolationError(f"Unexpected response shape: {exc!r}", cause=exc) from exc

    try:
        message = resp.choices[0].message
    except (AttributeError, IndexError, TypeError) as exc:
        raise SchemaViolationError(f"Unexpected response shape: {exc!r}", cause=exc) from exc
    if isinstance(message, dict):
        return _normalize(message.get("content"))
    return _normalize(getattr(message, "content", None))


def parse_flow_plan(raw_text: str, aspect_ratio: str) -> FlowPlan:
    """Parse the model's JSON reply into a FlowPlan, keeping the text verbatim."""
    try:
        reply = FlowReply.model_validate_json(raw_text)
    except PydanticValidationError as exc:
        raise SchemaViolationError(
            f"Response does not match the flow schema ({exc.error_count()} errors): {exc}",
            cause=exc,
        ) from exc
    except RecursionError as exc:
        raise SchemaViolationError("Response JSON is nested too deeply", cause=exc) from exc

    return FlowPlan(
        main_concept=reply.main_concept,
        aspect_ratio=aspect_ratio,
        scenes=tuple(reply.scenes),
        raw_json=raw_text,
    )


class FlowPromptClient:
    """Builds the multimodal request, calls the model once, and parses the reply.

    Holds no state between calls. `ai_client` only needs a
    `chat(messages=..., model=..., **kwargs)` method.
    """

    def __init__(
        self,
        ai_client: Any,
        model: str | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        require_start: bool = True,
    ):
        self.ai_client = ai_client
        self.model = model
        self.temperature = temperature
        self.require_start = require_start

    def build_request(self, frames: InputFrames, language: str, aspect_ratio: str) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "messages": build_messages(frames, language, aspect_ratio),
            "response_format": response_format(),
            "temperature": self.temperature,
        }
        if self.model:
            request["model"] = self.model
        return request

    def generate(self, frames: InputFrames, language: str, aspect_ratio: str) -> FlowPlan:
        if frames.start is None:
            if self.require_start:
                raise ValidationError("The start frame is required before generating a flow.")
            logger.warning("Generating without a start frame; the request will be degenerate.")

        request = self.build_request(frames, language, aspect_ratio)
        frame_count = sum(1 for _ in frames.present())
        logger.info(
            "Requesting flow plan: frames=%d language=%s aspect_ratio=%s",
            frame_count,
            language,
            aspect_ratio,
        )

        try:
            resp = self.ai_client.chat(**request)
        except Exception as exc:
            logger.error("Flow generation transport failure: %s", exc)
            raise TransportError(f"Model call failed: {exc}", cause=exc) from exc

        try:
            raw_text = extract_content(resp) or "{}"
            plan = parse_flow_plan(raw_text, aspect_ratio)
        except SchemaViolationError as exc:
            logger.error("Flow generation schema violation: %s", exc)
            raise

        logger.info("Flow plan received with %d scenes", len(plan.scenes))
        return plan
