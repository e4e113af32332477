from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from maestro.compiler.elements import (
    GeneratorResult,
    IdAllocator,
    add_circle,
    add_keyframe,
    add_rect,
    add_text,
    set_artboard_props,
    update_props,
)
from maestro.compiler.features import COLOR_MAP, FeatureSet, clamp, resolve_position
from maestro.compiler.intents import Layout
from maestro.compiler.planner import Plan
from maestro.protocol.models import ElementDescriptor, ElementKind

MOVE_DELTA = 120
BOUNCE_HEIGHT = 80
SCALE_STEP_UP = 1.2
SCALE_STEP_DOWN = 0.8
MIN_SCALE = 0.1
MAX_SCALE = 10.0
DEFAULT_TEXT = "Vector Maestro"
DEFAULT_FONT_SIZE = 48
CREATE_COLORS: tuple[str, ...] = tuple(COLOR_MAP.values())

# (flag, element kind) for narrowing the canvas before picking.
KIND_FILTERS: tuple[tuple[str, str], ...] = (
    ("circle", ElementKind.CIRCLE.value),
    ("rect", ElementKind.RECT.value),
    ("text", ElementKind.TEXT.value),
    ("path", ElementKind.PATH.value),
    ("photo", ElementKind.IMAGE.value),
)


@dataclass(frozen=True)
class AnimationIntent:
    move: bool = False
    bounce: bool = False
    spin: bool = False
    pulse: bool = False
    fade: bool = False

    @property
    def any(self) -> bool:
        return self.move or self.bounce or self.spin or self.pulse or self.fade


def animation_intent(features: FeatureSet, directions_move: bool = True) -> AnimationIntent:
    """Map motion keywords to keyframe tracks; a bare "animate" becomes a pulse."""
    move = features["move"] or (directions_move and features.has_direction)
    specific = move or features.has("bounce", "spin", "pulse", "fade")
    return AnimationIntent(
        move=move,
        bounce=features["bounce"],
        spin=features["spin"],
        pulse=features["pulse"] or (features["animate"] and not specific),
        fade=features["fade"],
    )


def build_animation_actions(
    element_id: str,
    duration: float,
    intent: AnimationIntent,
    features: FeatureSet,
    base: tuple[float, float],
    move_target: tuple[float, float] | None = None,
) -> list[dict[str, Any]]:
    t_mid, t_end = duration * 0.5, duration
    base_x, base_y = base
    actions: list[dict[str, Any]] = []

    if intent.move:
        if move_target is not None:
            actions += [
                add_keyframe(element_id, "x", 0, base_x),
                add_keyframe(element_id, "x", t_end, move_target[0]),
                add_keyframe(element_id, "y", 0, base_y),
                add_keyframe(element_id, "y", t_end, move_target[1]),
            ]
        else:
            dx = -MOVE_DELTA if features["left"] else MOVE_DELTA
            dy = -MOVE_DELTA if features["up"] else MOVE_DELTA if features["down"] else 0
            actions += [
                add_keyframe(element_id, "x", 0, base_x),
                add_keyframe(element_id, "x", t_end, base_x + dx),
            ]
            if dy:
                actions += [
                    add_keyframe(element_id, "y", 0, base_y),
                    add_keyframe(element_id, "y", t_end, base_y + dy),
                ]

    if intent.bounce:
        actions += [
            add_keyframe(element_id, "y", 0, base_y),
            add_keyframe(element_id, "y", t_mid, base_y - BOUNCE_HEIGHT, "ease-out"),
            add_keyframe(element_id, "y", t_end, base_y, "ease-in"),
        ]
    if intent.spin:
        actions += [
            add_keyframe(element_id, "rotation", 0, 0),
            add_keyframe(element_id, "rotation", t_end, 360),
        ]
    if intent.pulse:
        actions += [
            add_keyframe(element_id, "scale", 0, 1),
            add_keyframe(element_id, "scale", t_mid, 1.15),
            add_keyframe(element_id, "scale", t_end, 1),
        ]
    if intent.fade:
        actions += [
            add_keyframe(element_id, "opacity", 0, 1),
            add_keyframe(element_id, "opacity", t_end, 0),
        ]
    return actions


def estimate_area(element: ElementDescriptor) -> float:
    if element.type in {ElementKind.RECT.value, ElementKind.IMAGE.value}:
        return float(element.width or 0) * float(element.height or 0)
    if element.type == ElementKind.CIRCLE.value:
        return math.pi * float(element.r or 0) ** 2
    return 0.0


def pick_element(elements: Sequence[ElementDescriptor], features: FeatureSet) -> ElementDescriptor | None:
    """Choose the canvas element a prompt without a selection most likely means."""
    if not elements:
        return None
    candidates = list(elements)
    for flag, kind in KIND_FILTERS:
        if features[flag]:
            candidates = [element for element in elements if element.type == kind] or list(elements)
            break

    if features["largest"]:
        return max(candidates, key=estimate_area)
    if features["smallest"]:
        return min(candidates, key=estimate_area)
    if features["leftmost"]:
        return min(candidates, key=lambda element: element.x or 0)
    if features["rightmost"]:
        return max(candidates, key=lambda element: element.x or 0)
    if features["topmost"]:
        return min(candidates, key=lambda element: element.y or 0)
    if features["bottommost"]:
        return max(candidates, key=lambda element: element.y or 0)
    return candidates[0]


def _update_for(element: ElementDescriptor, plan: Plan) -> dict[str, Any]:
    features = plan.features
    props: dict[str, Any] = {}
    if features.color:
        props["stroke" if features["stroke"] else "fill"] = features.color
    if features["stroke"] and features.stroke_width:
        props["strokeWidth"] = features.stroke_width
    if features.opacity is not None:
        props["opacity"] = features.opacity
    current_scale = element.scale if element.scale is not None else 1
    if features["bigger"]:
        props["scale"] = clamp(current_scale * SCALE_STEP_UP, MIN_SCALE, MAX_SCALE)
    elif features["smaller"]:
        props["scale"] = clamp(current_scale * SCALE_STEP_DOWN, MIN_SCALE, MAX_SCALE)

    size = features.explicit_size(element.type, plan.artboard)
    if element.type == ElementKind.CIRCLE.value and "r" in size:
        props["r"] = size["r"]
    if element.type == ElementKind.RECT.value:
        props.update({key: size[key] for key in ("width", "height") if key in size})
    if element.type == ElementKind.TEXT.value and features.text_content:
        props["text"] = features.text_content
    return props


def _current_size(element: ElementDescriptor, plan: Plan) -> dict[str, float]:
    size = dict(plan.features.explicit_size(element.type, plan.artboard))
    if element.type == ElementKind.CIRCLE.value and "r" not in size and element.r is not None:
        size["r"] = element.r
    if element.type == ElementKind.RECT.value:
        if "width" not in size and element.width is not None:
            size["width"] = element.width
        if "height" not in size and element.height is not None:
            size["height"] = element.height
    return size


def _base_position(element: ElementDescriptor, plan: Plan) -> tuple[float, float]:
    x = element.x if element.x is not None else plan.width / 2
    y = element.y if element.y is not None else plan.height / 2
    return x, y


def _update_all(plan: Plan, elements: Iterable[ElementDescriptor]) -> list[dict[str, Any]]:
    intent = animation_intent(plan.features)
    actions: list[dict[str, Any]] = []
    for element in elements:
        props = _update_for(element, plan)
        if props:
            actions.append(update_props(element.id, props))
        if intent.any:
            actions += build_animation_actions(
                element.id, plan.duration, intent, plan.features, _base_position(element, plan)
            )
    return actions


def _modify(plan: Plan, target: ElementDescriptor) -> tuple[list[dict[str, Any]], list[str]]:
    features = plan.features
    props = _update_for(target, plan)
    base = _base_position(target, plan)
    placed = None
    if features.has_direction or features["center"]:
        placed = resolve_position(target.type, plan.artboard, _current_size(target, plan), features, base)
        props["x"], props["y"] = placed

    actions: list[dict[str, Any]] = []
    notes: list[str] = []
    if props:
        actions.append(update_props(target.id, props))
        notes.append("Updated an existing element.")

    intent = animation_intent(features)
    if intent.any:
        animated = build_animation_actions(target.id, plan.duration, intent, features, base, placed)
        actions += animated
        if animated:
            notes.append("Added animation to the selected element.")
    return actions, notes


def shape_kind(features: FeatureSet) -> str:
    """First named kind by priority circle > rect > text; quoted text alone means text."""
    for kind in ("circle", "rect", "text"):
        if features[kind]:
            return kind
    return "text" if features.text_content else "rect"


def layout_positions(count: int, layout: Layout, width: float, height: float) -> list[tuple[float, float]]:
    if count <= 1:
        return [(width / 2, height / 2)]
    if layout == Layout.COLUMN:
        step = (height * 0.6) / (count - 1)
        return [(width / 2, height * 0.2 + step * index) for index in range(count)]
    if layout == Layout.GRID:
        cols = math.ceil(math.sqrt(count))
        rows = math.ceil(count / cols)
        step_x = (width * 0.6) / (cols - 1) if cols > 1 else 0
        step_y = (height * 0.6) / (rows - 1) if rows > 1 else 0
        return [
            (width * 0.2 + step_x * (index % cols), height * 0.2 + step_y * (index // cols)) for index in range(count)
        ]
    step = (width * 0.6) / (count - 1)
    return [(width * 0.2 + step * index, height / 2) for index in range(count)]


def _create(plan: Plan, ids: IdAllocator) -> tuple[list[dict[str, Any]], list[str]]:
    features = plan.features
    to_create = [shape_kind(features)] * features.count

    positions = layout_positions(len(to_create), plan.layout, plan.width, plan.height)
    # directions place a single new shape; only explicit motion words animate it
    intent = animation_intent(features, directions_move=False)
    stroke = (features.color or "#0f172a") if features["stroke"] else "none"
    stroke_width = features.stroke_width or (2 if features["stroke"] else 0)
    extra: dict[str, Any] = {}
    if features.opacity is not None:
        extra["opacity"] = features.opacity

    actions: list[dict[str, Any]] = []
    for index, kind in enumerate(to_create):
        element_id = ids.next_id()
        size = features.size_for(kind, plan.artboard)
        x, y = positions[index]
        fill = features.color or CREATE_COLORS[index % len(CREATE_COLORS)]
        place = len(to_create) == 1 and (features.has_direction or features["center"])

        if kind == "circle":
            if place:
                x, y = resolve_position(kind, plan.artboard, size, features, (x, y))
            actions.append(add_circle(element_id, x, y, size["r"], fill, stroke, stroke_width, **extra))
        elif kind == "rect":
            rect_w, rect_h = size["width"], size["height"]
            if place:
                left, top = resolve_position(kind, plan.artboard, size, features, (x - rect_w / 2, y - rect_h / 2))
                x, y = left + rect_w / 2, top + rect_h / 2
            actions.append(
                add_rect(element_id, x - rect_w / 2, y - rect_h / 2, rect_w, rect_h, fill, stroke, stroke_width, **extra)
            )
        else:
            if place:
                x, y = resolve_position(kind, plan.artboard, {}, features, (x, y))
            font_size = clamp(features.font_size or DEFAULT_FONT_SIZE, 18, 96)
            actions.append(add_text(element_id, x, y, features.text_content or DEFAULT_TEXT, font_size, fill, **extra))

        if intent.any:
            actions += build_animation_actions(element_id, plan.duration, intent, features, (x, y))

    noun = "element" if len(to_create) == 1 else "elements"
    notes = [f"Created {len(to_create)} {noun}."]
    if intent.any:
        notes.append("Added animation based on your prompt.")
    return actions, notes


def build_fallback(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    """Direct manipulation of canvas elements, or creation of simple shapes."""
    ids = ids or IdAllocator()
    features = plan.features
    actions: list[dict[str, Any]] = []
    notes: list[str] = []

    if features["background"] and features.color:
        actions.append(set_artboard_props({"backgroundColor": features.color}))
        notes.append("Updated the artboard background.")

    existing = list(plan.existing_elements)
    if not plan.wants_create:
        if features["all"] and existing:
            updated = _update_all(plan, existing)
            if updated:
                notes.append("Updated all elements on the canvas.")
                return GeneratorResult(" ".join(notes), actions + updated, None, "Direct Edit")

        target = plan.selected_element or pick_element(existing, features)
        if target is not None and target.id:
            modified, modify_notes = _modify(plan, target)
            actions += modified
            notes += modify_notes
            if not actions:
                notes.append("Nothing to change on the selected element.")
            return GeneratorResult(" ".join(notes), actions, None, "Direct Edit")

    created, create_notes = _create(plan, ids)
    return GeneratorResult(" ".join(notes + create_notes), actions + created, None, "Direct Edit")


__all__ = [
    "AnimationIntent",
    "animation_intent",
    "build_animation_actions",
    "build_fallback",
    "estimate_area",
    "layout_positions",
    "pick_element",
    "shape_kind",
]
