"""Request construction for the flow generation call."""

from __future__ import annotations

import textwrap
from typing import Any, Dict, List

from .encoding import data_url
from .models import FlowReply, FramePayload, FrameSlot, InputFrames

SYSTEM_INSTRUCTION_TEMPLATE = textwrap.dedent(
    """
    You are an elite Video Director and Prompt Engineer specializing in image-to-video generation.

    TASK:
    Analyze the provided keyframes (Start, Middle/Action, End) to create a perfect video generation script.

    CRITICAL REQUIREMENTS:
    1. Sequence Logic:
       - Image 1 is the START (Setup).
       - Image 2, when provided, is the CONTINUATION (Action/Conflict).
       - Image 3, when provided, is the END (Resolution).
    2. Facial Expressions & Moments:
       - You MUST analyze the specific facial micro-expressions and body language in each uploaded image.
       - The generated prompt must describe the evolution of these expressions (e.g. "smile turning into surprise").
    3. Continuity:
       - Explain exactly how to morph/transition from each frame to the next.
    4. Output:
       - Language: {language}
       - Format: JSON only, strictly following the declared response schema.
    """
).strip()

RESPONSE_SCHEMA: Dict[str, Any] = FlowReply.model_json_schema()


def build_system_instruction(language: str) -> str:
    return SYSTEM_INSTRUCTION_TEMPLATE.format(language=language)


def build_frame_instruction(slot: FrameSlot) -> str:
    return f"FRAME {slot.number} ({slot.role}): {slot.instruction}"


def build_trailing_instruction(aspect_ratio: str) -> str:
    return (
        "Generate a seamless video prompt plan connecting these frames. "
        f"Aspect Ratio: {aspect_ratio}. "
        "Focus on preserving the identity and expressions found in the images."
    )


def image_part(payload: FramePayload) -> Dict[str, Any]:
    return {
        "type": "image_url",
        "image_url": {"url": data_url(payload)},
    }


def build_content_parts(frames: InputFrames, aspect_ratio: str) -> List[Dict[str, Any]]:
    """Ordered user content: one instruction + image pair per uploaded frame, then the closing ask."""
    parts: List[Dict[str, Any]] = []
    for slot, payload in frames.present():
        parts.append({"type": "text", "text": build_frame_instruction(slot)})
        parts.append(image_part(payload))
    parts.append({"type": "text", "text": build_trailing_instruction(aspect_ratio)})
    return parts


def build_messages(frames: InputFrames, language: str, aspect_ratio: str) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": build_system_instruction(language)},
        {"role": "user", "content": build_content_parts(frames, aspect_ratio)},
    ]


def response_format() -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {"name": "flow_plan", "schema": RESPONSE_SCHEMA},
    }
