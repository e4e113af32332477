from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from maestro.protocol.models import ActionType, ElementKind

ELEMENT_KINDS = frozenset(kind.value for kind in ElementKind)

ANIMATABLE_PROPERTIES = frozenset(
    {
        "x",
        "y",
        "rotation",
        "scale",
        "skewX",
        "skewY",
        "opacity",
        "fill",
        "stroke",
        "strokeWidth",
        "width",
        "height",
        "rx",
        "ry",
        "r",
        "d",
        "text",
        "fontSize",
        "letterSpacing",
        "lineHeight",
        "motionPath",
        "motionPathStart",
        "motionPathEnd",
        "motionPathOffsetX",
        "motionPathOffsetY",
        "strokeDasharray",
        "strokeDashoffset",
        "drawStartPercent",
        "drawEndPercent",
        "textPath",
        "textPathStartOffset",
        "textDecoration",
    }
)

UNIT_INTERVAL_PROPERTIES = frozenset(
    {"opacity", "drawStartPercent", "drawEndPercent", "motionPathStart", "motionPathEnd", "textPathStartOffset"}
)
LOWER_BOUNDS: Mapping[str, float] = MappingProxyType({"scale": 0.01, "strokeWidth": 0.0, "fontSize": 1.0})


@dataclass
class ValidationResult:
    ok: bool
    actions: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "actions": self.actions, "errors": self.errors}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def clamp_property(prop: str, value: Any) -> Any:
    if not is_number(value):
        return value
    if prop in UNIT_INTERVAL_PROPERTIES:
        if value < 0:
            return 0.0
        if value > 1:
            return 1.0
        return value
    if prop in LOWER_BOUNDS and value < LOWER_BOUNDS[prop]:
        return LOWER_BOUNDS[prop]
    return value


def clamp_props(props: Mapping[str, Any]) -> dict[str, Any]:
    return {key: clamp_property(key, value) for key, value in props.items()}


def _check_add_element(payload: Any) -> Any:
    if not isinstance(payload, dict) or payload.get("type") not in ELEMENT_KINDS:
        return None
    props = payload.get("props")
    if not isinstance(props, dict) or not _non_empty_str(props.get("id")):
        return None
    parent = payload.get("targetParentId")
    if parent is not None and not isinstance(parent, str):
        return None
    return {**payload, "props": clamp_props(props)}


def _check_update_props(payload: Any) -> Any:
    if not isinstance(payload, dict) or not _non_empty_str(payload.get("id")):
        return None
    props = payload.get("props")
    if not isinstance(props, dict):
        return None
    return {**payload, "props": clamp_props(props)}


def _check_artboard_props(payload: Any) -> Any:
    if not isinstance(payload, dict):
        return None
    return dict(payload)


def _check_keyframe(payload: Any) -> Any:
    if not isinstance(payload, dict) or not _non_empty_str(payload.get("elementId")):
        return None
    prop = payload.get("property")
    if prop not in ANIMATABLE_PROPERTIES:
        return None
    time = payload.get("time")
    if not is_number(time) or time < 0:
        return None
    if "value" not in payload:
        return None
    easing = payload.get("easing")
    if easing is not None and not isinstance(easing, str):
        return None
    return {**payload, "value": clamp_property(prop, payload["value"])}


def _check_positive(payload: Any) -> Any:
    if not is_number(payload) or payload <= 0:
        return None
    return payload


def _check_non_negative(payload: Any) -> Any:
    if not is_number(payload) or payload < 0:
        return None
    return payload


def _check_bool(payload: Any) -> Any:
    if not isinstance(payload, bool):
        return None
    return payload


def _check_element_ref(payload: Any) -> Any:
    if not isinstance(payload, dict) or not _non_empty_str(payload.get("elementId")):
        return None
    return dict(payload)


def _check_element_id(payload: Any) -> Any:
    if not _non_empty_str(payload):
        return None
    return payload


_MISSING = object()

PAYLOAD_CHECKS: Mapping[ActionType, Callable[[Any], Any]] = MappingProxyType(
    {
        ActionType.ADD_ELEMENT: _check_add_element,
        ActionType.UPDATE_ELEMENT_PROPS: _check_update_props,
        ActionType.SET_ARTBOARD_PROPS: _check_artboard_props,
        ActionType.ADD_KEYFRAME: _check_keyframe,
        ActionType.UPDATE_ANIMATION_DURATION: _check_positive,
        ActionType.SET_CURRENT_TIME: _check_non_negative,
        ActionType.SET_PLAYBACK_SPEED: _check_positive,
        ActionType.SET_IS_PLAYING: _check_bool,
        ActionType.GROUP_ELEMENT: _check_element_ref,
        ActionType.REPARENT_ELEMENT: _check_element_ref,
        ActionType.BRING_TO_FRONT: _check_element_id,
        ActionType.SEND_TO_BACK: _check_element_id,
        ActionType.BRING_FORWARD: _check_element_id,
        ActionType.SEND_BACKWARD: _check_element_id,
    }
)


def validate_action(action: Any) -> dict[str, Any] | None:
    """Return the sanitized action, or None when it cannot be applied."""
    if not isinstance(action, dict):
        return None
    try:
        kind = ActionType(action.get("type"))
    except (TypeError, ValueError):
        return None
    payload = action.get("payload", _MISSING)
    if payload is _MISSING:
        return None
    checked = PAYLOAD_CHECKS[kind](payload)
    if checked is None:
        return None
    return {**action, "type": kind.value, "payload": checked}


def validate_actions(actions: Any) -> ValidationResult:
    if not isinstance(actions, list):
        return ValidationResult(ok=False, actions=[], errors=["actions_not_array"])
    cleaned: list[dict[str, Any]] = []
    errors: list[str] = []
    for index, action in enumerate(actions):
        checked = validate_action(action)
        if checked is None:
            errors.append(f"invalid_action_{index}")
            continue
        cleaned.append(checked)
    return ValidationResult(ok=not errors, actions=cleaned, errors=errors)


__all__ = [
    "ANIMATABLE_PROPERTIES",
    "PAYLOAD_CHECKS",
    "ValidationResult",
    "clamp_property",
    "clamp_props",
    "is_number",
    "validate_action",
    "validate_actions",
]
