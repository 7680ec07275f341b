"""Typed inputs and results for a single flow generation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator


class FrameSlot(Enum):
    """Keyframe positions in narrative order."""

    START = "start"
    MIDDLE = "middle"
    END = "end"

    @property
    def number(self) -> int:
        return list(FrameSlot).index(self) + 1

    @property
    def role(self) -> str:
        return _SLOT_ROLES[self][0]

    @property
    def instruction(self) -> str:
        return _SLOT_ROLES[self][1]


_SLOT_ROLES = {
    FrameSlot.START: (
        "START SCENE",
        "Analyze the setting, character, and initial expression.",
    ),
    FrameSlot.MIDDLE: (
        "CONTINUATION/ACTION",
        "Analyze the movement, change in expression, and plot progression.",
    ),
    FrameSlot.END: (
        "ENDING",
        "Analyze the final state, resolution expression, and closing composition.",
    ),
}


@dataclass(frozen=True)
class FramePayload:
    """One uploaded keyframe, base64 encoded."""

    data: str
    mime_type: str = "image/jpeg"


@dataclass(frozen=True)
class InputFrames:
    start: Optional[FramePayload] = None
    middle: Optional[FramePayload] = None
    end: Optional[FramePayload] = None

    def get(self, slot: FrameSlot) -> Optional[FramePayload]:
        return getattr(self, slot.value)

    def present(self) -> Iterator[Tuple[FrameSlot, FramePayload]]:
        """Yield uploaded frames in start -> middle -> end order."""
        for slot in FrameSlot:
            payload = self.get(slot)
            if payload is not None:
                yield slot, payload

    def with_frame(self, slot: FrameSlot, payload: Optional[FramePayload]) -> "InputFrames":
        return replace(self, **{slot.value: payload})


@dataclass(frozen=True)
class GenerationOptions:
    language: str
    aspect_ratio: str


class SceneDetail(BaseModel):
    """One step of the generated sequence, as the model returns it."""

    model_config = ConfigDict(frozen=True)

    frame_id: StrictInt = Field(..., description="Position of the scene in narrative order.")
    visual_prompt: str = Field(
        ..., description="Highly descriptive prompt including subject, environment, and lighting."
    )
    facial_expression: str = Field(
        ...,
        description="Detailed description of the character's emotion and face details based on the uploaded image.",
    )
    motion_description: str = Field(
        ..., description="How the subject moves from the previous frame to this one."
    )
    continuity_logic: str = Field(
        ..., description="Logic explaining the bridge between the uploaded keyframes."
    )
    time_code: Optional[str] = Field(default=None, description="Time label, e.g. 00:00-00:03.")
    camera_movement: Optional[str] = Field(default=None, description="e.g. static, slow push-in, handheld")
    technical_notes: Optional[str] = Field(default=None, description="Lens, lighting or render notes.")
    dialogue_suggestion: Optional[str] = Field(default=None, description="Optional spoken line or audio cue.")

    def to_dict(self) -> Dict[str, Any]:
        # Only the keys the reply actually carried, so it re-serializes like the source.
        return self.model_dump(exclude_unset=True)


class FlowReply(BaseModel):
    """Shape the model is constrained to answer with."""

    main_concept: str = Field(..., description="A summary of the narrative arc defined by the keyframes.")
    scenes: List[SceneDetail] = Field(
        ..., min_length=1, description="The sequence bridging the uploaded frames."
    )

    @field_validator("scenes")
    @classmethod
    def _frame_ids_increase(cls, scenes: List[SceneDetail]) -> List[SceneDetail]:
        for previous, current in zip(scenes, scenes[1:]):
            if current.frame_id <= previous.frame_id:
                raise ValueError(
                    f"frame_id values must be unique and increasing "
                    f"({previous.frame_id} followed by {current.frame_id})"
                )
        return scenes


class FlowPlan(BaseModel):
    """Structured result of one generation call.

    `raw_json` is the response text exactly as received; `main_concept` and
    `scenes` are parsed from it, never sourced separately.
    """

    model_config = ConfigDict(frozen=True)

    main_concept: str
    aspect_ratio: str
    scenes: Tuple[SceneDetail, ...] = ()
    raw_json: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "main_concept": self.main_concept,
            "aspect_ratio": self.aspect_ratio,
            "scenes": [scene.to_dict() for scene in self.scenes],
        }
