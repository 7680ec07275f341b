"""Presentation helpers for a FlowPlan, kept free of Streamlit so they can be tested."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .models import FlowPlan, SceneDetail


def clamp_scene_index(plan: FlowPlan, index: int) -> int:
    if not plan.scenes:
        return 0
    return max(0, min(index, len(plan.scenes) - 1))


def scene_label(scene: SceneDetail, index: int) -> str:
    return scene.time_code or f"Frame {index + 1}"


def timeline_nodes(plan: FlowPlan, current_index: int) -> List[Dict[str, Any]]:
    current = clamp_scene_index(plan, current_index)
    nodes = []
    for idx, scene in enumerate(plan.scenes):
        if idx == current:
            state = "active"
        elif idx < current:
            state = "past"
        else:
            state = "upcoming"
        nodes.append(
            {
                "index": idx,
                "number": idx + 1,
                "frame_id": scene.frame_id,
                "label": scene_label(scene, idx),
                "state": state,
            }
        )
    return nodes


def timeline_progress(plan: FlowPlan, current_index: int) -> float:
    """Percent of the connecting line that is filled up to the active node."""
    if len(plan.scenes) < 2:
        return 0.0
    current = clamp_scene_index(plan, current_index)
    return current / (len(plan.scenes) - 1) * 100.0


def scene_markdown(scene: SceneDetail) -> str:
    lines = [
        f"### Frame {scene.frame_id}" + (f" · {scene.time_code}" if scene.time_code else ""),
        "",
        "**Visual prompt**",
        "",
        scene.visual_prompt,
        "",
        f"**Facial expression:** {scene.facial_expression}",
        "",
        f"**Continuity logic:** {scene.continuity_logic}",
        "",
        f"**Motion:** {scene.motion_description}",
    ]
    if scene.camera_movement:
        lines += ["", f"**Camera:** {scene.camera_movement}"]
    if scene.technical_notes:
        lines += ["", f"**Technical notes:** {scene.technical_notes}"]
    if scene.dialogue_suggestion:
        lines += ["", f"**Dialogue / audio:** {scene.dialogue_suggestion}"]
    return "\n".join(lines)


def plan_markdown(plan: FlowPlan) -> str:
    sections = [
        "# Video Flow Plan",
        "",
        f"- Aspect ratio: {plan.aspect_ratio}",
        f"- Scenes: {len(plan.scenes)}",
        "",
        "## Main Concept",
        "",
        plan.main_concept,
    ]
    for scene in plan.scenes:
        sections += ["", scene_markdown(scene)]
    return "\n".join(sections) + "\n"


def pretty_json(plan: FlowPlan) -> str:
    """Indented view of the raw response; falls back to the text itself."""
    try:
        return json.dumps(json.loads(plan.raw_json), indent=2, ensure_ascii=False)
    except ValueError:
        return plan.raw_json


def export_json(plan: FlowPlan) -> str:
    """Downloadable JSON: the parsed plan plus the aspect ratio it was generated for."""
    return json.dumps(plan.to_dict(), indent=2, ensure_ascii=False) + "\n"
