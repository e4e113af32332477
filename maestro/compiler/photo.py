"""Photo animation in two tiers.

Tier 1 is a whole-image Ken Burns move with optional parallax orb and
silhouette. Tier 2 separates a background layer from a subject overlay and
adds a pulsing bounding-box outline when the prompt asks for one. Neither
tier draws over an image that is already on the canvas.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from maestro.compiler.elements import (
    GeneratorResult,
    IdAllocator,
    add_circle,
    add_image,
    add_keyframe,
    add_path,
    add_rect,
)
from maestro.compiler.palette import background_fill, pick
from maestro.compiler.paths import blob_path
from maestro.compiler.planner import Plan
from maestro.protocol.models import ElementDescriptor, ElementKind

TIER1_MIN_DURATION_S = 3.0
TIER2_MIN_DURATION_S = 4.0
SILHOUETTE_FILL = "rgba(15,23,42,0.5)"
SUBJECT_OVERLAY_FILL = "rgba(255,255,255,0.08)"


@dataclass(frozen=True)
class PhotoTarget:
    element_id: str | None
    x: float
    y: float
    width: float
    height: float

    @property
    def centre(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


def find_photo_target(plan: Plan) -> ElementDescriptor | None:
    selected = plan.selected_element
    if selected is not None and selected.type == ElementKind.IMAGE.value:
        return selected
    for element in plan.existing_elements:
        if element.type == ElementKind.IMAGE.value:
            return element
    return None


def _resolve_target(plan: Plan, fraction: float) -> PhotoTarget:
    found = find_photo_target(plan)
    width = (found.width if found is not None else None) or plan.width * fraction
    height = (found.height if found is not None else None) or plan.height * fraction
    if found is not None and found.x is not None and found.y is not None:
        return PhotoTarget(found.id, found.x, found.y, width, height)
    x = plan.width * 0.5 - width / 2
    y = plan.height * 0.5 - height / 2
    return PhotoTarget(found.id if found is not None else None, x, y, width, height)


def _place_image(plan: Plan, target: PhotoTarget, ids: IdAllocator, actions: list[dict[str, Any]]) -> str:
    if target.element_id is not None:
        return target.element_id
    image_id = ids.next_id()
    actions.append(add_image(image_id, target.x, target.y, target.width, target.height, plan.image_href))
    return image_id


def build_photo_tier1(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, palette = plan.width, plan.height, plan.palette
    duration = max(TIER1_MIN_DURATION_S, plan.duration)

    actions: list[dict[str, Any]] = []
    target = _resolve_target(plan, 0.7)
    image_id = _place_image(plan, target, ids, actions)

    actions += [
        add_keyframe(image_id, "scale", 0, 1),
        add_keyframe(image_id, "scale", duration, 1.18, "ease-in-out"),
        add_keyframe(image_id, "x", 0, target.x - 20),
        add_keyframe(image_id, "x", duration, target.x + 20, "ease-in-out"),
        add_keyframe(image_id, "y", 0, target.y - 10),
        add_keyframe(image_id, "y", duration, target.y + 10, "ease-in-out"),
    ]

    if plan.features["parallax"]:
        orb_id = ids.next_id()
        actions += [
            add_circle(orb_id, w * 0.2, h * 0.2, plan.min_dim * 0.06, pick(palette, 2, "#f97316")),
            add_keyframe(orb_id, "x", 0, w * 0.18),
            add_keyframe(orb_id, "x", duration, w * 0.24, "ease-in-out"),
        ]

    if plan.features["silhouette"]:
        cx, cy = target.centre
        actions.append(add_path(ids.next_id(), cx, cy + 40, blob_path(plan.min_dim * 0.2, 6), SILHOUETTE_FILL))

    return GeneratorResult(
        "Applied a Ken Burns photo animation with gentle parallax.", actions, None, "Photo: Ken Burns"
    )


def build_photo_tier2(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, palette = plan.width, plan.height, plan.palette
    duration = max(TIER2_MIN_DURATION_S, plan.duration)

    actions: list[dict[str, Any]] = []
    target = _resolve_target(plan, 0.75)
    if target.element_id is None:
        # backdrop layer sits under the synthesized image, never over a real one
        bg_id = ids.next_id()
        actions.append(add_rect(bg_id, 0, 0, w, h, background_fill(plan, palette, f"{bg_id}-grad", 120)))
    image_id = _place_image(plan, target, ids, actions)

    actions += [
        add_keyframe(image_id, "scale", 0, 1.02),
        add_keyframe(image_id, "scale", duration, 1.15, "ease-in-out"),
        add_keyframe(image_id, "x", 0, target.x - 30),
        add_keyframe(image_id, "x", duration, target.x + 30, "ease-in-out"),
    ]

    cx, cy = target.centre
    box_w, box_h = w * 0.45, h * 0.6
    box_x, box_y = cx - box_w / 2, cy - box_h / 2

    overlay_id = ids.next_id()
    actions += [
        add_rect(overlay_id, box_x, box_y, box_w, box_h, SUBJECT_OVERLAY_FILL, pick(palette, 2, "#a855f7"), 2),
        add_keyframe(overlay_id, "scale", 0, 1),
        add_keyframe(overlay_id, "scale", duration, 1.05, "ease-in-out"),
    ]

    if plan.features.has("boundingBox", "subject"):
        bbox_id = ids.next_id()
        actions += [
            add_rect(bbox_id, box_x, box_y, box_w, box_h, "none", pick(palette, 1, "#22d3ee"), 2),
            add_keyframe(bbox_id, "opacity", 0, 0.2),
            add_keyframe(bbox_id, "opacity", duration * 0.5, 1),
            add_keyframe(bbox_id, "opacity", duration, 0.4),
        ]

    return GeneratorResult(
        "Split photo into background and subject layers with separate motion.",
        actions,
        None,
        "Photo: Subject Layers",
    )


def build_photo(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    if plan.wants_photo_tier2:
        return build_photo_tier2(plan, ids)
    return build_photo_tier1(plan, ids)


__all__ = [
    "PhotoTarget",
    "build_photo",
    "build_photo_tier1",
    "build_photo_tier2",
    "find_photo_target",
]
