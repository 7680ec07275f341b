"""Main Streamlit UI for Flow Architect.

Upload up to three keyframes, pick a language and aspect ratio, and get a
scene-by-scene video flow plan back from the configured model.
"""

from __future__ import annotations

import html
import logging
import os
import sys
from pathlib import Path
from typing import Any

import streamlit as st
from dotenv import load_dotenv

# Ensure backend package is importable when running `streamlit run streamlit_app.py`.
ROOT = Path(__file__).resolve().parent
BACKEND_ROOT = ROOT / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
load_dotenv(ROOT / ".env", override=False)

SECRET_ENV_KEYS = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "OPENAI_DEFAULT_CHAT_MODEL",
    "GEMINI_API_KEY",
    "API_KEY",
    "FLOW_TEMPERATURE",
    "FLOW_LOG_LEVEL",
)


def _hydrate_env_from_streamlit_secrets() -> None:
    """Load provider config from Streamlit Secrets into env when not already set."""
    try:
        secrets = st.secrets.to_dict()  # type: ignore[attr-defined]
    except Exception:
        # No secrets file outside Streamlit Cloud; env and .env still apply.
        return

    openai_block = secrets.get("openai")
    if isinstance(openai_block, dict):
        mapping = {
            "api_key": "OPENAI_API_KEY",
            "base_url": "OPENAI_BASE_URL",
            "default_chat_model": "OPENAI_DEFAULT_CHAT_MODEL",
        }
        for secret_key, env_key in mapping.items():
            value = openai_block.get(secret_key)
            if isinstance(value, str) and value.strip() and not os.getenv(env_key):
                os.environ[env_key] = value.strip()

    for key in SECRET_ENV_KEYS:
        value = secrets.get(key)
        if isinstance(value, str) and value.strip() and not os.getenv(key):
            os.environ[key] = value.strip()


_hydrate_env_from_streamlit_secrets()

from flow_architect.app import create_app  # noqa: E402
from flow_architect.flow.encoding import decode_image, encode_image  # noqa: E402
from flow_architect.flow.errors import ValidationError  # noqa: E402
from flow_architect.flow.models import (  # noqa: E402
    FlowPlan,
    FrameSlot,
    GenerationOptions,
    InputFrames,
)
from flow_architect.flow.presets import (  # noqa: E402
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_LANGUAGE,
    LANGUAGES,
    preset_label,
)
from flow_architect.flow.render import (  # noqa: E402
    clamp_scene_index,
    export_json,
    plan_markdown,
    pretty_json,
    scene_markdown,
    timeline_nodes,
    timeline_progress,
)
from flow_architect.flow.status import (  # noqa: E402
    ANALYZING,
    IDLE,
    Analyzing,
    Failed,
    FlowStatus,
    Success,
    reset,
    run_generation,
)

logger = logging.getLogger(__name__)

UPLOAD_TYPES = ["png", "jpg", "jpeg", "webp", "gif", "bmp"]

FRAME_LABELS = {
    FrameSlot.START: ("Frame 1: Start", "The beginning scene"),
    FrameSlot.MIDDLE: ("Frame 2: Action", "The connection"),
    FrameSlot.END: ("Frame 3: End", "The resolution"),
}


@st.cache_resource
def _get_container() -> dict[str, Any]:
    return create_app()


def _configure_logging() -> None:
    level = os.getenv("FLOW_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")


def _rerun() -> None:
    try:
        st.rerun()
    except AttributeError:
        st.experimental_rerun()


def _init_state() -> None:
    defaults = {
        "vfa_language": DEFAULT_LANGUAGE,
        "vfa_aspect_ratio": DEFAULT_ASPECT_RATIO,
        "vfa_status": IDLE,
        "vfa_scene_index": 0,
        "vfa_view": "Visual Flow",
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def _on_input_change() -> None:
    st.session_state["vfa_status"] = reset()
    st.session_state["vfa_scene_index"] = 0


def _generate_disabled(frames: InputFrames, status: FlowStatus) -> bool:
    return frames.start is None or isinstance(status, Analyzing)


def _status_view(status: FlowStatus) -> tuple[str, str]:
    """Return (headline, detail) for the status panel."""
    if isinstance(status, Analyzing):
        return "Connecting Keyframes...", "Analyzing facial expressions & continuity"
    if isinstance(status, Failed):
        return "Generation failed", status.reason
    if isinstance(status, Success):
        count = len(status.plan.scenes)
        return "Flow ready", f"{count} scene{'s' if count != 1 else ''} generated"
    return "Ready to create", "Upload your keyframes to generate a continuous video prompt."


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        .stApp {
            color: #eef4ff;
            background:
                radial-gradient(ellipse at top, rgba(30, 41, 59, 0.9), transparent 60%),
                linear-gradient(160deg, #020617 0%, #0b1120 55%, #000000 100%);
        }

        .block-container {
            max-width: 1200px;
            padding-top: 1rem;
        }

        .hero-card {
            border-radius: 18px;
            border: 1px solid rgba(99, 102, 241, 0.3);
            background: linear-gradient(145deg, rgba(15, 23, 42, 0.9), rgba(2, 6, 23, 0.95));
            padding: 1rem 1.25rem;
            margin-bottom: 1rem;
        }

        .hero-title {
            margin: 0;
            font-size: 1.5rem;
            color: #f8fafc;
        }

        .hero-title span {
            color: #818cf8;
        }

        .hero-meta {
            margin-top: 0.35rem;
            color: rgba(203, 213, 225, 0.8);
            font-size: 0.85rem;
        }

        .status-card {
            border-radius: 16px;
            border: 1px dashed rgba(100, 116, 139, 0.6);
            padding: 2.5rem 1rem;
            text-align: center;
            color: #94a3b8;
        }

        .status-card.error {
            border: 1px solid rgba(239, 68, 68, 0.5);
            background: rgba(127, 29, 29, 0.2);
            color: #fecaca;
        }

        .timeline {
            position: relative;
            display: flex;
            justify-content: space-between;
            margin: 1rem 0 0.5rem;
        }

        .timeline-track,
        .timeline-fill {
            position: absolute;
            top: 50%;
            left: 0;
            height: 4px;
            border-radius: 999px;
            transform: translateY(-50%);
        }

        .timeline-track {
            width: 100%;
            background: #1e293b;
        }

        .timeline-fill {
            background: #4f46e5;
        }

        .timeline-node {
            position: relative;
            width: 2rem;
            height: 2rem;
            border-radius: 999px;
            display: flex;
            align-items: center;
            justify-content: center;
            font-size: 0.75rem;
            font-weight: 700;
            border: 2px solid #334155;
            background: #0f172a;
            color: #64748b;
        }

        .timeline-node.past {
            background: #312e81;
            border-color: #4338ca;
            color: #a5b4fc;
        }

        .timeline-node.active {
            background: #4f46e5;
            border-color: #818cf8;
            color: #ffffff;
            box-shadow: 0 0 15px rgba(99, 102, 241, 0.5);
            transform: scale(1.2);
        }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _top_section(ai_client: Any) -> None:
    config = ai_client.config
    mode_text = "Live" if config.api_key else "No API key configured"
    st.markdown(
        f"""
        <div class="hero-card">
          <p class="hero-title">VEO <span>Flow Architect</span></p>
          <div class="hero-meta">
            Frame-to-Frame Continuity Engine · {html.escape(config.provider_name)} ·
            {html.escape(config.chat_model)} · {html.escape(mode_text)}
          </div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def _frames_from_uploads() -> InputFrames:
    frames = InputFrames()
    for slot in FrameSlot:
        upload = st.session_state.get(f"vfa_upload_{slot.value}")
        if upload is None:
            continue
        try:
            payload = encode_image(upload.getvalue(), upload.type, upload.name)
        except ValidationError as exc:
            logger.warning("Rejected upload for %s frame: %s", slot.value, exc)
            st.warning(f"{FRAME_LABELS[slot][0]}: {exc}")
            continue
        frames = frames.with_frame(slot, payload)
    return frames


def _uploader(slot: FrameSlot) -> None:
    label, sub_label = FRAME_LABELS[slot]
    st.file_uploader(
        label,
        type=UPLOAD_TYPES,
        key=f"vfa_upload_{slot.value}",
        help=sub_label,
        on_change=_on_input_change,
    )


def _input_section() -> InputFrames:
    st.markdown("#### 1. Upload Keyframes sequence")
    _uploader(FrameSlot.START)
    col_a, col_b = st.columns(2)
    with col_a:
        _uploader(FrameSlot.MIDDLE)
    with col_b:
        _uploader(FrameSlot.END)

    frames = _frames_from_uploads()
    previews = list(frames.present())
    if previews:
        cols = st.columns(len(previews))
        for col, (slot, payload) in zip(cols, previews):
            col.image(decode_image(payload), caption=FRAME_LABELS[slot][0])

    st.markdown("#### 2. Configuration")
    st.selectbox(
        "Language",
        [item["value"] for item in LANGUAGES],
        key="vfa_language",
        format_func=lambda value: preset_label(LANGUAGES, value),
        on_change=_on_input_change,
    )
    st.selectbox(
        "Aspect Ratio",
        [item["value"] for item in ASPECT_RATIOS],
        key="vfa_aspect_ratio",
        format_func=lambda value: preset_label(ASPECT_RATIOS, value),
        on_change=_on_input_change,
    )
    return frames


def _generate(flow_client: Any, frames: InputFrames) -> None:
    options = GenerationOptions(
        language=st.session_state["vfa_language"],
        aspect_ratio=st.session_state["vfa_aspect_ratio"],
    )
    previous = st.session_state["vfa_status"]
    outcome: FlowStatus = IDLE
    st.session_state["vfa_status"] = ANALYZING
    try:
        with st.spinner("Processing keyframes..."):
            outcome = run_generation(flow_client, previous, frames, options)
    except ValidationError as exc:
        st.warning(exc.user_message)
    finally:
        # Never leave the trigger locked in Analyzing.
        st.session_state["vfa_status"] = outcome
    if isinstance(outcome, Success):
        st.session_state["vfa_scene_index"] = 0


def _timeline(plan: FlowPlan, current: int) -> None:
    nodes_html = "".join(
        f'<div class="timeline-node {node["state"]}" title="{html.escape(node["label"])}">{node["number"]}</div>'
        for node in timeline_nodes(plan, current)
    )
    st.markdown(
        f"""
        <div class="timeline">
          <div class="timeline-track"></div>
          <div class="timeline-fill" style="width: {timeline_progress(plan, current):.1f}%"></div>
          {nodes_html}
        </div>
        """,
        unsafe_allow_html=True,
    )

    cols = st.columns(len(plan.scenes))
    for col, node in zip(cols, timeline_nodes(plan, current)):
        if col.button(node["label"], key=f"vfa_node_{node['index']}", use_container_width=True):
            st.session_state["vfa_scene_index"] = node["index"]
            _rerun()


def _visual_flow(plan: FlowPlan) -> None:
    st.markdown("##### Main Concept")
    st.markdown(plan.main_concept)
    st.caption(f"Aspect ratio: {plan.aspect_ratio}")

    current = clamp_scene_index(plan, st.session_state["vfa_scene_index"])
    _timeline(plan, current)

    nav_prev, nav_label, nav_next = st.columns([1, 3, 1])
    if nav_prev.button("Previous", disabled=current == 0, use_container_width=True):
        st.session_state["vfa_scene_index"] = clamp_scene_index(plan, current - 1)
        _rerun()
    nav_label.markdown(f"Scene {current + 1} of {len(plan.scenes)}")
    if nav_next.button("Next", disabled=current >= len(plan.scenes) - 1, use_container_width=True):
        st.session_state["vfa_scene_index"] = clamp_scene_index(plan, current + 1)
        _rerun()

    scene = plan.scenes[current]
    st.markdown(scene_markdown(scene))
    st.caption("Copy the visual prompt:")
    st.code(scene.visual_prompt, language=None)


def _raw_json(plan: FlowPlan) -> None:
    st.code(plan.raw_json, language="json")
    with st.expander("Formatted view"):
        st.code(pretty_json(plan), language="json")
    col_a, col_b = st.columns(2)
    col_a.download_button(
        "Download JSON",
        data=export_json(plan),
        file_name="video_flow.json",
        mime="application/json",
        use_container_width=True,
        key="dl_json",
    )
    col_b.download_button(
        "Download Markdown",
        data=plan_markdown(plan),
        file_name="video_flow.md",
        mime="text/markdown",
        use_container_width=True,
        key="dl_md",
    )


def _result_section(status: FlowStatus) -> None:
    headline, detail = _status_view(status)
    if isinstance(status, Success):
        st.markdown("#### Generated Flow Strategy")
        view = st.radio(
            "View",
            ["Visual Flow", "Raw JSON"],
            key="vfa_view",
            horizontal=True,
            label_visibility="collapsed",
        )
        if view == "Visual Flow":
            _visual_flow(status.plan)
        else:
            _raw_json(status.plan)
        return

    css_class = "status-card error" if isinstance(status, Failed) else "status-card"
    st.markdown(
        f"""
        <div class="{css_class}">
          <p><strong>{html.escape(headline)}</strong></p>
          <p>{html.escape(detail)}</p>
        </div>
        """,
        unsafe_allow_html=True,
    )


def main() -> None:
    st.set_page_config(
        page_title="VEO Flow Architect",
        page_icon="",
        layout="wide",
    )

    _configure_logging()
    _init_state()
    _inject_styles()

    container = _get_container()
    _top_section(container["ai_client"])

    left, right = st.columns([5, 7])
    with left:
        frames = _input_section()
        status = st.session_state["vfa_status"]
        if frames.start is None:
            st.caption("Please upload at least the Start Frame.")
        if st.button(
            "Generate Flow",
            type="primary",
            use_container_width=True,
            disabled=_generate_disabled(frames, status),
        ):
            _generate(container["flow_client"], frames)

    with right:
        _result_section(st.session_state["vfa_status"])


if __name__ == "__main__":
    main()
