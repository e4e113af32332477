from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from maestro.compiler.elements import (
    PLACEHOLDER_TEMPLATE,
    GeneratorResult,
    IdAllocator,
    add_circle,
    add_group,
    add_keyframe,
    add_rect,
    with_parent,
)
from maestro.compiler.intents import Weather
from maestro.compiler.planner import Plan
from maestro.protocol.models import ActionType

logger = logging.getLogger("maestro.composer")

PLACEHOLDER_RE = re.compile(r"\{\{NEW_ID_(\d+)\}\}")

RAIN_DROPS = 16
SNOW_FLAKES = 14
RAIN_FILL = "rgba(148,163,184,0.6)"
SNOW_FILL = "rgba(248,250,252,0.9)"
CAMERA_PROPERTIES = frozenset({"x", "y", "scale"})

STEP_RATIONALES = {
    "Scene": "Compose the base environment and layers.",
    "Character": "Add a rigged character and motion preset.",
    "Path": "Generate path-based shapes and draw effects.",
    "Camera": "Add cinematic camera motion.",
    "Weather": "Overlay atmospheric motion.",
    "Direct Edit": "Apply changes to existing canvas elements.",
    "Photo: Ken Burns": "Apply cinematic pan/zoom to the photo.",
    "Photo: Subject Layers": "Animate background + subject layers.",
    "Safe Scene": "Fallback scene generated after validation.",
}


def rationale_for(title: str) -> str:
    if title in STEP_RATIONALES:
        return STEP_RATIONALES[title]
    return STEP_RATIONALES.get(title.split(":", 1)[0].strip(), "")


def make_step(title: str, actions: list[dict[str, Any]]) -> dict[str, Any]:
    return {"title": title, "rationale": rationale_for(title), "actions": actions}


def highest_placeholder(value: Any) -> int:
    if isinstance(value, str):
        return max((int(match) for match in PLACEHOLDER_RE.findall(value)), default=0)
    if isinstance(value, dict):
        return max((highest_placeholder(item) for item in value.values()), default=0)
    if isinstance(value, (list, tuple)):
        return max((highest_placeholder(item) for item in value), default=0)
    return 0


def renumber(value: Any, offset: int) -> Any:
    """Shift every `{{NEW_ID_<n>}}` inside `value` by `offset`, returning a copy."""
    if offset == 0:
        return value
    if isinstance(value, str):
        return PLACEHOLDER_RE.sub(lambda match: PLACEHOLDER_TEMPLATE % (int(match.group(1)) + offset), value)
    if isinstance(value, dict):
        return {key: renumber(item, offset) for key, item in value.items()}
    if isinstance(value, list):
        return [renumber(item, offset) for item in value]
    return value


@dataclass
class Composition:
    summary: str
    actions: list[dict[str, Any]] = field(default_factory=list)
    steps: list[dict[str, Any]] = field(default_factory=list)
    anchor_id: str | None = None


def build_camera_motion(plan: Plan, anchor_id: str, origin: tuple[float, float] = (0.0, 0.0)) -> list[dict[str, Any]]:
    features = plan.features
    intro = plan.beats.intro.start
    settle = plan.beats.settle.end
    pan_x = -30 if features["left"] else 30 if features["right"] else 20
    pan_y = -20 if features["up"] else 20 if features["down"] else 12
    zoom_end = 1.08 if features["zoom"] else 1.03 if features["pan"] else 1
    origin_x, origin_y = origin
    return [
        add_keyframe(anchor_id, "x", intro, origin_x),
        add_keyframe(anchor_id, "x", settle, origin_x + pan_x, "ease-in-out"),
        add_keyframe(anchor_id, "y", intro, origin_y),
        add_keyframe(anchor_id, "y", settle, origin_y + pan_y, "ease-in-out"),
        add_keyframe(anchor_id, "scale", intro, 1),
        add_keyframe(anchor_id, "scale", settle, zoom_end, "ease-in-out"),
    ]


def build_weather_overlay(
    plan: Plan,
    ids: IdAllocator,
    parent_id: str | None = None,
    origin: tuple[float, float] = (0.0, 0.0),
) -> list[dict[str, Any]]:
    if plan.weather == Weather.NONE:
        return []
    w, h, duration = plan.width, plan.height, plan.duration
    group_id = ids.next_id()
    # offset the group so particles stay in artboard coordinates under a moved parent
    actions = [add_group(group_id, -origin[0], -origin[1], parent_id)]
    if parent_id is None:
        actions = [with_parent(actions[0], None)]

    if plan.weather == Weather.RAIN:
        for index in range(RAIN_DROPS):
            drop_id = ids.next_id()
            x = w * 0.1 + (index % 8) * (w * 0.1)
            y = (index % 2) * (h * 0.2)
            actions += [
                with_parent(add_rect(drop_id, x, y, 2, h * 0.12, RAIN_FILL), group_id),
                add_keyframe(drop_id, "y", 0, y - h * 0.2),
                add_keyframe(drop_id, "y", duration, y + h * 0.8, "linear"),
            ]
    else:
        for index in range(SNOW_FLAKES):
            flake_id = ids.next_id()
            x = w * 0.12 + (index % 7) * (w * 0.12)
            y = (index % 2) * (h * 0.2)
            actions += [
                with_parent(add_circle(flake_id, x, y, 3 + index % 3, SNOW_FILL), group_id),
                add_keyframe(flake_id, "y", 0, y - 20),
                add_keyframe(flake_id, "y", duration, y + h * 0.7, "ease-in-out"),
                add_keyframe(flake_id, "x", 0, x - 10),
                add_keyframe(flake_id, "x", duration, x + 10, "ease-in-out"),
            ]
    return actions


def root_is_animated(result: GeneratorResult) -> bool:
    """True when the root group already carries its own x, y or scale track."""
    for action in result.actions:
        payload = action.get("payload")
        if action.get("type") != ActionType.ADD_KEYFRAME.value or not isinstance(payload, dict):
            continue
        if payload.get("elementId") == result.root_id and payload.get("property") in CAMERA_PROPERTIES:
            return True
    return False


def _reparent(actions: list[dict[str, Any]], element_id: str, parent_id: str) -> list[dict[str, Any]]:
    out = []
    for action in actions:
        payload = action.get("payload")
        props = payload.get("props") if isinstance(payload, dict) else None
        if action.get("type") == ActionType.ADD_ELEMENT.value and isinstance(props, dict) and props.get("id") == element_id:
            action = with_parent(action, parent_id)
        out.append(action)
    return out


def _origin(result: GeneratorResult) -> tuple[float, float]:
    return float(result.parts.get("base_x", 0)), float(result.parts.get("base_y", 0))


def compose(plan: Plan, results: Sequence[GeneratorResult], ids: IdAllocator | None = None) -> Composition:
    """Merge generator output in order, then layer camera motion and weather.

    Each result numbers its placeholders from 1; they are shifted past the
    ids already issued by `ids` so the merged sequence stays unique and
    strictly increasing. When the anchor already animates its own position
    or scale, the camera drives a wrapper group instead so neither track
    overwrites the other.
    """
    ids = ids or IdAllocator()
    actions: list[dict[str, Any]] = []
    rig_actions: list[dict[str, Any]] = []
    anchor_result = next((result for result in results if result.root_id), None)
    rig_id: str | None = None
    if plan.camera_motion and anchor_result is not None and root_is_animated(anchor_result):
        rig_id = ids.next_id()
        rig_actions = [with_parent(add_group(rig_id), None)]
        actions.extend(rig_actions)
    steps: list[dict[str, Any]] = []
    summaries: list[str] = []
    anchor_id: str | None = None
    origin = (0.0, 0.0)

    for result in results:
        offset = ids.issued
        shifted = renumber(result.actions, offset)
        ids.issued = max(ids.issued, offset + highest_placeholder(result.actions))
        if anchor_id is None and result.root_id:
            anchor_id = renumber(result.root_id, offset)
            origin = _origin(result)
            if rig_id is not None:
                shifted = _reparent(shifted, anchor_id, rig_id)
        actions.extend(shifted)
        steps.append(make_step(result.title or "Direct Edit", shifted))
        if result.summary:
            summaries.append(result.summary)

    camera_target, camera_origin = anchor_id, origin
    if rig_id is not None:
        camera_target, camera_origin = rig_id, (0.0, 0.0)

    if plan.camera_motion and camera_target:
        camera = build_camera_motion(plan, camera_target, camera_origin)
        actions.extend(camera)
        steps.append(make_step("Camera: Pan/Zoom", [*rig_actions, *camera]))

    weather = build_weather_overlay(plan, ids, camera_target, camera_origin)
    if weather:
        actions.extend(weather)
        steps.append(make_step(f"Weather: {plan.weather.value}", weather))

    logger.debug("composed %d actions from %d generators (anchor=%s)", len(actions), len(results), anchor_id)
    return Composition(" ".join(summaries), actions, steps, anchor_id)


__all__ = [
    "Composition",
    "build_camera_motion",
    "build_weather_overlay",
    "compose",
    "highest_placeholder",
    "make_step",
    "rationale_for",
    "renumber",
    "root_is_animated",
]
