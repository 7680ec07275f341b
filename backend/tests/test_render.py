"""Timeline and export helpers for a generated plan."""

import json

from flow_architect.flow.models import FlowPlan, SceneDetail
from flow_architect.flow.render import (
    clamp_scene_index,
    export_json,
    plan_markdown,
    pretty_json,
    scene_markdown,
    timeline_nodes,
    timeline_progress,
)


def _plan(count=3):
    scenes = tuple(
        SceneDetail(
            frame_id=idx + 1,
            time_code="00:0%d" % idx if idx != 1 else "",
            visual_prompt=f"prompt {idx + 1}",
            facial_expression="soft smile",
            motion_description="turns",
            continuity_logic="same outfit",
            camera_movement="pan left" if idx == 0 else "",
            dialogue_suggestion="Hi." if idx == 2 else None,
        )
        for idx in range(count)
    )
    raw = json.dumps({"main_concept": "Arc", "scenes": [scene.to_dict() for scene in scenes]})
    return FlowPlan(main_concept="Arc", aspect_ratio="9:16", scenes=scenes, raw_json=raw)


def test_timeline_states_and_labels():
    nodes = timeline_nodes(_plan(), 1)

    assert [node["state"] for node in nodes] == ["past", "active", "upcoming"]
    assert [node["label"] for node in nodes] == ["00:00", "Frame 2", "00:02"]
    assert [node["number"] for node in nodes] == [1, 2, 3]


def test_timeline_progress():
    plan = _plan()
    assert timeline_progress(plan, 0) == 0.0
    assert timeline_progress(plan, 1) == 50.0
    assert timeline_progress(plan, 2) == 100.0
    assert timeline_progress(_plan(1), 0) == 0.0


def test_navigation_is_clamped():
    plan = _plan()
    assert clamp_scene_index(plan, -1) == 0
    assert clamp_scene_index(plan, 7) == 2


def test_scene_markdown_includes_only_present_optionals():
    plan = _plan()
    first = scene_markdown(plan.scenes[0])
    second = scene_markdown(plan.scenes[1])

    assert "**Camera:** pan left" in first
    assert "Dialogue" not in first
    assert "**Camera:**" not in second
    assert "**Dialogue / audio:** Hi." in scene_markdown(plan.scenes[2])


def test_plan_markdown_and_pretty_json():
    plan = _plan()
    text = plan_markdown(plan)

    assert text.startswith("# Video Flow Plan")
    assert "- Aspect ratio: 9:16" in text
    assert text.count("### Frame") == 3
    assert json.loads(pretty_json(plan)) == json.loads(plan.raw_json)
    assert "\n  " in pretty_json(plan)


def test_export_json_carries_aspect_ratio_and_scenes():
    plan = _plan(2)
    exported = json.loads(export_json(plan))

    assert exported["aspect_ratio"] == "9:16"
    assert exported["main_concept"] == "Arc"
    assert exported["scenes"] == json.loads(plan.raw_json)["scenes"]
