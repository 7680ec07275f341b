"""Request construction helpers."""

from flow_architect.flow.models import FramePayload, FrameSlot, InputFrames
from flow_architect.flow.prompts import (
    RESPONSE_SCHEMA,
    build_content_parts,
    build_frame_instruction,
    build_messages,
    build_system_instruction,
    response_format,
)


def test_frame_instructions_name_position_and_role():
    assert build_frame_instruction(FrameSlot.START) == (
        "FRAME 1 (START SCENE): Analyze the setting, character, and initial expression."
    )
    assert build_frame_instruction(FrameSlot.MIDDLE).startswith("FRAME 2 (CONTINUATION/ACTION)")
    assert build_frame_instruction(FrameSlot.END).startswith("FRAME 3 (ENDING)")


def test_system_instruction_covers_sequence_expression_continuity_and_language():
    text = build_system_instruction("Bahasa Indonesia")

    assert "Image 1 is the START" in text
    assert "micro-expressions" in text
    assert "morph/transition" in text
    assert "Language: Bahasa Indonesia" in text
    assert "JSON" in text


def test_schema_is_derived_from_reply_model():
    scene_schema = RESPONSE_SCHEMA["$defs"]["SceneDetail"]
    assert RESPONSE_SCHEMA["required"] == ["main_concept", "scenes"]
    assert RESPONSE_SCHEMA["properties"]["scenes"]["items"] == {"$ref": "#/$defs/SceneDetail"}
    assert scene_schema["required"] == [
        "frame_id",
        "visual_prompt",
        "facial_expression",
        "motion_description",
        "continuity_logic",
    ]
    assert scene_schema["properties"]["frame_id"]["type"] == "integer"
    assert "dialogue_suggestion" not in scene_schema["required"]
    assert scene_schema["properties"]["visual_prompt"]["description"]
    assert response_format()["json_schema"]["schema"] is RESPONSE_SCHEMA


def test_image_parts_keep_uploaded_mime_type():
    frames = InputFrames(end=FramePayload(data="QUJD", mime_type="image/webp"))
    parts = build_content_parts(frames, "4:3")

    assert parts[1] == {"type": "image_url", "image_url": {"url": "data:image/webp;base64,QUJD"}}
    assert parts[-1]["text"].startswith("Generate a seamless video prompt plan")


def test_messages_are_system_then_user():
    messages = build_messages(InputFrames(start=FramePayload(data="QUJD")), "Spanish", "1:1")

    assert [message["role"] for message in messages] == ["system", "user"]
    assert isinstance(messages[1]["content"], list)
