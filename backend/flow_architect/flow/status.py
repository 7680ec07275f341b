"""Caller-visible generation status as a tagged union."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import GenerationError, USER_MESSAGE, ValidationError
from .models import FlowPlan, GenerationOptions, InputFrames


@dataclass(frozen=True)
class Idle:
    name = "idle"


@dataclass(frozen=True)
class Analyzing:
    name = "analyzing"


@dataclass(frozen=True)
class Success:
    plan: FlowPlan
    name = "success"


@dataclass(frozen=True)
class Failed:
    reason: str = USER_MESSAGE
    kind: str = "generation"
    name = "error"


FlowStatus = Union[Idle, Analyzing, Success, Failed]

IDLE = Idle()
ANALYZING = Analyzing()


def reset() -> FlowStatus:
    """Any edit to the inputs drops back to Idle."""
    return IDLE


def begin(status: FlowStatus, frames: InputFrames) -> FlowStatus:
    if isinstance(status, Analyzing):
        raise RuntimeError("A generation is already in progress.")
    if frames.start is None:
        raise ValidationError("Please upload at least the Start Frame.")
    return ANALYZING


def finish(plan: FlowPlan) -> FlowStatus:
    return Success(plan=plan)


def fail(error: GenerationError) -> FlowStatus:
    # The client has already logged the detail; only the generic message is shown.
    return Failed(reason=USER_MESSAGE, kind=error.kind)


def run_generation(client, status: FlowStatus, frames: InputFrames, options: GenerationOptions) -> FlowStatus:
    """Drive Analyzing to exactly one terminal state.

    Raises only the ValidationError from `begin`, before anything is sent.
    """
    begin(status, frames)
    try:
        plan = client.generate(frames, options.language, options.aspect_ratio)
    except GenerationError as exc:
        return fail(exc)
    return finish(plan)
