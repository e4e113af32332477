from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping

from maestro.compiler.elements import (
    GeneratorResult,
    IdAllocator,
    add_circle,
    add_group,
    add_keyframe,
    add_path,
    add_rect,
    with_parent,
)
from maestro.compiler.intents import MotionPreset
from maestro.compiler.palette import pick
from maestro.compiler.paths import blob_path
from maestro.compiler.planner import Beats, Plan

RIG_PALETTE = ("#e2e8f0", "#94a3b8", "#64748b")
EYE_COLOR = "#0f172a"


def rig_variant(plan: Plan) -> str:
    if plan.features["robot"]:
        return "robot"
    if plan.features["blob"]:
        return "blob"
    return "stick"


def build_character_rig(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    """Parent group at (0.5w, 0.65h) with parts laid out in group-local coordinates."""
    ids = ids or IdAllocator()
    palette = plan.palette or RIG_PALETTE
    light = pick(palette, 0, RIG_PALETTE[0])
    mid = pick(palette, 1, RIG_PALETTE[1])
    dark = pick(palette, 2, RIG_PALETTE[2])

    group_id = ids.next_id()
    base_x, base_y = plan.width * 0.5, plan.height * 0.65
    actions = [add_group(group_id, base_x, base_y)]
    parts: dict[str, Any] = {"group": group_id, "base_x": base_x, "base_y": base_y}
    variant = rig_variant(plan)

    if variant == "blob":
        body_id, face_id, eye_l_id, eye_r_id = (ids.next_id() for _ in range(4))
        parts.update(body=body_id, face=face_id, eye_l=eye_l_id, eye_r=eye_r_id)
        actions += [
            with_parent(add_path(body_id, 0, 0, blob_path(70, 7), mid), group_id),
            with_parent(add_circle(face_id, 0, -10, 22, light), group_id),
            with_parent(add_circle(eye_l_id, -8, -12, 4, EYE_COLOR), group_id),
            with_parent(add_circle(eye_r_id, 8, -12, 4, EYE_COLOR), group_id),
        ]
        return GeneratorResult("Built a blob character rig.", actions, group_id, "Character: Rig + Motion", parts)

    head_id, torso_id, arm_l_id, arm_r_id, leg_l_id, leg_r_id = (ids.next_id() for _ in range(6))
    parts.update(head=head_id, torso=torso_id, arm_l=arm_l_id, arm_r=arm_r_id, leg_l=leg_l_id, leg_r=leg_r_id)

    if variant == "robot":
        shapes = [
            add_rect(head_id, -18, -110, 36, 30, light),
            add_rect(torso_id, -20, -80, 40, 55, mid),
            add_rect(arm_l_id, -46, -70, 26, 8, dark),
            add_rect(arm_r_id, 20, -70, 26, 8, dark),
            add_rect(leg_l_id, -18, -25, 12, 34, dark),
            add_rect(leg_r_id, 6, -25, 12, 34, dark),
        ]
        summary = "Built a robot character rig."
    else:
        shapes = [
            add_circle(head_id, 0, -90, 18, light),
            add_rect(torso_id, -8, -70, 16, 42, mid),
            add_rect(arm_l_id, -28, -62, 16, 6, mid),
            add_rect(arm_r_id, 12, -62, 16, 6, mid),
            add_rect(leg_l_id, -10, -30, 8, 32, dark),
            add_rect(leg_r_id, 2, -30, 8, 32, dark),
        ]
        summary = "Built a stick figure character rig."
    actions += [with_parent(shape, group_id) for shape in shapes]
    return GeneratorResult(summary, actions, group_id, "Character: Rig + Motion", parts)


def apply_idle(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    group_id = parts.get("group")
    if not group_id:
        return []
    base_y = parts.get("base_y", 0)
    return [
        add_keyframe(group_id, "y", beats.intro.start, base_y),
        add_keyframe(group_id, "y", beats.action.mid, base_y - 6, "ease-in-out"),
        add_keyframe(group_id, "y", beats.settle.end, base_y),
    ]


def apply_wave(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    """Arm lifts once the intro is over and is lowered by the settle beat."""
    arm_id = parts.get("arm_r")
    if not arm_id:
        return []
    return [
        add_keyframe(arm_id, "rotation", beats.intro.end, 0),
        add_keyframe(arm_id, "rotation", beats.action.mid, -35, "ease-in-out"),
        add_keyframe(arm_id, "rotation", beats.settle.start, 0),
    ]


def _swing(element_id: str, start: float, beats: Beats) -> list[dict[str, Any]]:
    return [
        add_keyframe(element_id, "rotation", beats.intro.start, start),
        add_keyframe(element_id, "rotation", beats.action.mid, -start, "ease-in-out"),
        add_keyframe(element_id, "rotation", beats.settle.end, start),
    ]


def apply_walk(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    """Stride across during intro and action, then stand still through settle."""
    limbs = ("leg_l", "leg_r", "arm_l", "arm_r", "group")
    if not all(parts.get(name) for name in limbs):
        return []
    group_id = parts["group"]
    base_x = parts.get("base_x", 0)
    base_y = parts.get("base_y", 0)
    actions = (
        _swing(parts["leg_l"], -20, beats)
        + _swing(parts["leg_r"], 20, beats)
        + _swing(parts["arm_l"], 15, beats)
        + _swing(parts["arm_r"], -15, beats)
    )
    actions += [
        add_keyframe(group_id, "x", beats.intro.start, base_x - 140),
        add_keyframe(group_id, "x", beats.settle.start, base_x + 140, "ease-in-out"),
        add_keyframe(group_id, "y", beats.intro.start, base_y),
        add_keyframe(group_id, "y", beats.intro.end, base_y - 4, "ease-in-out"),
        add_keyframe(group_id, "y", beats.action.mid, base_y),
        add_keyframe(group_id, "y", beats.settle.start, base_y - 4, "ease-in-out"),
        add_keyframe(group_id, "y", beats.settle.end, base_y),
    ]
    return actions


def apply_bounce(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    """Peak in the action beat, land as the settle beat begins."""
    group_id = parts["group"]
    base_y = parts.get("base_y", 0)
    return [
        add_keyframe(group_id, "y", beats.intro.start, base_y),
        add_keyframe(group_id, "y", beats.intro.end, base_y),
        add_keyframe(group_id, "y", beats.action.mid, base_y - 40, "ease-out"),
        add_keyframe(group_id, "y", beats.settle.start, base_y, "ease-in"),
        add_keyframe(group_id, "y", beats.settle.end, base_y),
    ]


def apply_spin(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    return [
        add_keyframe(parts["group"], "rotation", beats.intro.end, 0),
        add_keyframe(parts["group"], "rotation", beats.settle.start, 360, "ease-in-out"),
    ]


def apply_pulse(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    return [
        add_keyframe(parts["group"], "scale", beats.intro.start, 1),
        add_keyframe(parts["group"], "scale", beats.action.mid, 1.1),
        add_keyframe(parts["group"], "scale", beats.settle.end, 1),
    ]


def apply_wave_and_idle(parts: dict[str, Any], beats: Beats) -> list[dict[str, Any]]:
    return apply_wave(parts, beats) + apply_idle(parts, beats)


MotionApplier = Callable[[dict[str, Any], Beats], list[dict[str, Any]]]

MOTION_APPLIERS: Mapping[MotionPreset, MotionApplier] = MappingProxyType(
    {
        MotionPreset.WALK: apply_walk,
        MotionPreset.WAVE: apply_wave_and_idle,
        MotionPreset.IDLE: apply_idle,
        MotionPreset.BOUNCE: apply_bounce,
        MotionPreset.SPIN: apply_spin,
        MotionPreset.PULSE: apply_pulse,
        MotionPreset.NONE: apply_idle,
    }
)


def build_character(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    rig = build_character_rig(plan, ids)
    applier = MOTION_APPLIERS.get(plan.motion_preset, apply_idle)
    motion = applier(rig.parts, plan.beats)
    # blob rigs have no limbs to swing
    rig.actions.extend(motion or apply_idle(rig.parts, plan.beats))
    return rig


__all__ = [
    "MOTION_APPLIERS",
    "apply_bounce",
    "apply_idle",
    "apply_pulse",
    "apply_spin",
    "apply_walk",
    "apply_wave",
    "build_character",
    "build_character_rig",
    "rig_variant",
]
