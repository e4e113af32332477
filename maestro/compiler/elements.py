from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from maestro.protocol.models import ActionType, ElementKind

PLACEHOLDER_TEMPLATE = "{{NEW_ID_%d}}"


@dataclass
class IdAllocator:
    """Hands out `{{NEW_ID_<n>}}` placeholders, starting after `issued`."""

    issued: int = 0

    def next_id(self) -> str:
        self.issued += 1
        return PLACEHOLDER_TEMPLATE % self.issued


@dataclass
class GeneratorResult:
    summary: str
    actions: list[dict[str, Any]] = field(default_factory=list)
    root_id: str | None = None
    title: str = ""
    parts: dict[str, Any] = field(default_factory=dict)


def _add_element(kind: ElementKind, props: dict[str, Any], parent_id: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": kind.value, "props": props}
    if parent_id is not None:
        payload["targetParentId"] = parent_id
    return {"type": ActionType.ADD_ELEMENT.value, "payload": payload}


def add_rect(
    element_id: str,
    x: float,
    y: float,
    width: float,
    height: float,
    fill: Any,
    stroke: str = "none",
    stroke_width: float = 0,
    **extra: Any,
) -> dict[str, Any]:
    props = {
        "id": element_id,
        "x": x,
        "y": y,
        "width": width,
        "height": height,
        "fill": fill,
        "stroke": stroke,
        "strokeWidth": stroke_width,
    }
    props.update(extra)
    return _add_element(ElementKind.RECT, props)


def add_circle(
    element_id: str,
    x: float,
    y: float,
    r: float,
    fill: Any,
    stroke: str = "none",
    stroke_width: float = 0,
    **extra: Any,
) -> dict[str, Any]:
    props = {"id": element_id, "x": x, "y": y, "r": r, "fill": fill, "stroke": stroke, "strokeWidth": stroke_width}
    props.update(extra)
    return _add_element(ElementKind.CIRCLE, props)


def add_text(element_id: str, x: float, y: float, text: str, font_size: float, fill: Any, **extra: Any) -> dict[str, Any]:
    props = {
        "id": element_id,
        "x": x,
        "y": y,
        "text": text,
        "fontSize": font_size,
        "fill": fill,
        "textAnchor": "middle",
    }
    props.update(extra)
    return _add_element(ElementKind.TEXT, props)


def add_path(
    element_id: str,
    x: float,
    y: float,
    d: str,
    fill: Any,
    stroke: str = "none",
    stroke_width: float = 0,
    **extra: Any,
) -> dict[str, Any]:
    props = {"id": element_id, "x": x, "y": y, "d": d, "fill": fill, "stroke": stroke, "strokeWidth": stroke_width}
    props.update({key: value for key, value in extra.items() if value is not None})
    return _add_element(ElementKind.PATH, props)


def add_group(element_id: str, x: float = 0, y: float = 0, parent_id: str | None = None, **extra: Any) -> dict[str, Any]:
    props = {"id": element_id, "x": x, "y": y}
    props.update(extra)
    return _add_element(ElementKind.GROUP, props, parent_id)


def add_image(
    element_id: str,
    x: float,
    y: float,
    width: float,
    height: float,
    href: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    props: dict[str, Any] = {"id": element_id, "x": x, "y": y, "width": width, "height": height}
    if href:
        props["href"] = href
    props.update(extra)
    return _add_element(ElementKind.IMAGE, props)


def add_keyframe(element_id: str, prop: str, time: float, value: Any, easing: str | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"elementId": element_id, "property": prop, "time": time, "value": value}
    if easing:
        payload["easing"] = easing
    return {"type": ActionType.ADD_KEYFRAME.value, "payload": payload}


def update_props(element_id: str, props: dict[str, Any]) -> dict[str, Any]:
    return {"type": ActionType.UPDATE_ELEMENT_PROPS.value, "payload": {"id": element_id, "props": props}}


def set_artboard_props(props: dict[str, Any]) -> dict[str, Any]:
    return {"type": ActionType.SET_ARTBOARD_PROPS.value, "payload": dict(props)}


def with_parent(action: dict[str, Any], parent_id: str | None) -> dict[str, Any]:
    payload = action.get("payload")
    if not isinstance(payload, dict):
        return action
    return {**action, "payload": {**payload, "targetParentId": parent_id}}


def _gradient_stops(gradient_id: str, colors: list[str] | tuple[str, ...]) -> list[dict[str, Any]]:
    last = len(colors) - 1
    return [
        {
            "id": f"{gradient_id}-stop-{index + 1}",
            "offset": 0 if last <= 0 else round(index / last, 4),
            "color": color,
        }
        for index, color in enumerate(colors)
    ]


def linear_gradient(gradient_id: str, colors: list[str] | tuple[str, ...], angle: float = 90) -> dict[str, Any]:
    return {
        "id": gradient_id,
        "type": "linearGradient",
        "angle": angle,
        "stops": _gradient_stops(gradient_id, colors),
    }


def radial_gradient(gradient_id: str, colors: list[str] | tuple[str, ...]) -> dict[str, Any]:
    return {
        "id": gradient_id,
        "type": "radialGradient",
        "cx": "50%",
        "cy": "50%",
        "r": "60%",
        "stops": _gradient_stops(gradient_id, colors),
    }


__all__ = [
    "GeneratorResult",
    "IdAllocator",
    "PLACEHOLDER_TEMPLATE",
    "add_circle",
    "add_group",
    "add_image",
    "add_keyframe",
    "add_path",
    "add_rect",
    "add_text",
    "linear_gradient",
    "radial_gradient",
    "set_artboard_props",
    "update_props",
    "with_parent",
]
