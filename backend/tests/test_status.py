"""Generation status transitions."""

import json

import pytest

from flow_architect.flow.client import FlowPromptClient
from flow_architect.flow.errors import USER_MESSAGE, ValidationError
from flow_architect.flow.models import FramePayload, GenerationOptions, InputFrames
from flow_architect.flow.status import (
    ANALYZING,
    IDLE,
    Failed,
    Idle,
    Success,
    begin,
    reset,
    run_generation,
)

IMG = FramePayload(data="aW1n")
OPTIONS = GenerationOptions(language="English", aspect_ratio="16:9")

GOOD_REPLY = json.dumps(
    {
        "main_concept": "A reunion.",
        "scenes": [
            {
                "frame_id": 1,
                "visual_prompt": "v",
                "facial_expression": "f",
                "motion_description": "m",
                "continuity_logic": "c",
            }
        ],
    }
)


class _FakeAIClient:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = 0

    def chat(self, **_kwargs):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return {"choices": [{"message": {"content": self.content}}]}


def test_begin_requires_start_frame():
    with pytest.raises(ValidationError):
        begin(IDLE, InputFrames(middle=IMG))


def test_begin_refuses_second_request_in_flight():
    with pytest.raises(RuntimeError):
        begin(ANALYZING, InputFrames(start=IMG))


def test_success_carries_plan():
    status = run_generation(FlowPromptClient(_FakeAIClient(GOOD_REPLY)), IDLE, InputFrames(start=IMG), OPTIONS)

    assert isinstance(status, Success)
    assert status.plan.main_concept == "A reunion."


def test_transport_and_schema_failures_collapse_to_one_message():
    transport = run_generation(
        FlowPromptClient(_FakeAIClient(error=TimeoutError("slow"))), IDLE, InputFrames(start=IMG), OPTIONS
    )
    schema = run_generation(FlowPromptClient(_FakeAIClient("not json")), IDLE, InputFrames(start=IMG), OPTIONS)

    assert isinstance(transport, Failed) and isinstance(schema, Failed)
    assert transport.reason == schema.reason == USER_MESSAGE
    assert "slow" not in transport.reason
    assert (transport.kind, schema.kind) == ("transport", "schema")


def test_run_generation_validation_happens_before_the_call():
    ai = _FakeAIClient(GOOD_REPLY)

    with pytest.raises(ValidationError):
        run_generation(FlowPromptClient(ai), IDLE, InputFrames(end=IMG), OPTIONS)
    assert ai.calls == 0


def test_new_result_replaces_previous_and_reset_returns_idle():
    first = run_generation(FlowPromptClient(_FakeAIClient(GOOD_REPLY)), IDLE, InputFrames(start=IMG), OPTIONS)
    assert isinstance(first, Success)

    second = run_generation(FlowPromptClient(_FakeAIClient("nope")), first, InputFrames(start=IMG), OPTIONS)

    assert isinstance(second, Failed)
    assert not hasattr(second, "plan")
    assert isinstance(reset(), Idle)
