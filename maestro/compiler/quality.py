from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

from maestro.compiler.planner import MIN_DURATION_S
from maestro.compiler.validator import LOWER_BOUNDS, UNIT_INTERVAL_PROPERTIES, is_number
from maestro.protocol.models import ActionType, ElementKind

PLACEHOLDER_NUMBER_RE = re.compile(r"^\{\{NEW_ID_(\d+)\}\}$")
MAX_CASE_SCORE = 3


def _in_range(prop: str, value: Any) -> bool:
    if not is_number(value):
        return True
    if prop in UNIT_INTERVAL_PROPERTIES:
        return 0 <= value <= 1
    if prop in LOWER_BOUNDS:
        return value >= LOWER_BOUNDS[prop]
    return True


def _payload(action: Any) -> dict[str, Any]:
    payload = action.get("payload") if isinstance(action, dict) else None
    return payload if isinstance(payload, dict) else {}


def evaluate_action_sequence(actions: list[dict[str, Any]], existing_ids: Iterable[str] = ()) -> dict[str, Any]:
    failures: list[str] = []
    warnings: list[str] = []
    checks: list[str] = []

    if isinstance(actions, list) and actions:
        checks.append("actions_present")
    else:
        failures.append("no_actions")
        actions = []

    known = set(existing_ids)
    added: list[str] = []
    unresolved: list[str] = []
    out_of_range: list[str] = []
    bad_times = 0
    keyframe_times: list[float] = []

    for action in actions:
        kind = action.get("type") if isinstance(action, dict) else None
        payload = _payload(action)

        if kind == ActionType.ADD_ELEMENT.value:
            props = payload.get("props") if isinstance(payload.get("props"), dict) else {}
            parent = payload.get("targetParentId")
            if parent is not None and parent not in known:
                unresolved.append(str(parent))
            element_id = props.get("id")
            if isinstance(element_id, str):
                added.append(element_id)
                known.add(element_id)
            out_of_range += [key for key, value in props.items() if not _in_range(key, value)]
        elif kind == ActionType.UPDATE_ELEMENT_PROPS.value:
            if payload.get("id") not in known:
                unresolved.append(str(payload.get("id")))
            props = payload.get("props") if isinstance(payload.get("props"), dict) else {}
            out_of_range += [key for key, value in props.items() if not _in_range(key, value)]
        elif kind == ActionType.ADD_KEYFRAME.value:
            if payload.get("elementId") not in known:
                unresolved.append(str(payload.get("elementId")))
            prop = str(payload.get("property", ""))
            if not _in_range(prop, payload.get("value")):
                out_of_range.append(prop)
            time = payload.get("time")
            if is_number(time) and time >= 0:
                keyframe_times.append(float(time))
            else:
                bad_times += 1

    if len(added) == len(set(added)):
        checks.append("element_ids_unique")
    else:
        failures.append("duplicate_element_ids")

    numbers = [int(match.group(1)) for match in map(PLACEHOLDER_NUMBER_RE.match, added) if match]
    if all(later > earlier for earlier, later in zip(numbers, numbers[1:])):
        checks.append("placeholder_ids_monotonic")
    else:
        failures.append("placeholder_ids_not_monotonic")

    if unresolved:
        failures.append("unresolved_references")
    else:
        checks.append("references_resolved")

    if out_of_range:
        failures.append("values_out_of_range")
    else:
        checks.append("values_in_range")

    if bad_times:
        failures.append("keyframe_times_invalid")
    else:
        checks.append("keyframe_times_valid")

    if not keyframe_times:
        warnings.append("no_keyframes")
    elif max(keyframe_times) >= MIN_DURATION_S:
        checks.append("animation_span_meets_floor")
    else:
        warnings.append("animation_span_short")

    return {
        "ok": not failures,
        "checks": checks,
        "warnings": warnings,
        "failures": failures,
    }


def analyze_actions(actions: list[dict[str, Any]], image_ids: Iterable[str] = ()) -> dict[str, Any]:
    """Counts used for regression scoring; keyframes on a context image count as photo output."""
    image_targets = set(image_ids)
    animated_images: set[str] = set()
    summary = {
        "elements": 0,
        "animated_images": 0,
        "keyframes": 0,
        "has_path": False,
        "has_image": False,
        "has_group": False,
        "has_animation": False,
    }
    for action in actions:
        kind = action.get("type") if isinstance(action, dict) else None
        payload = _payload(action)
        if kind == ActionType.ADD_ELEMENT.value:
            summary["elements"] += 1
            element_type = payload.get("type")
            if element_type == ElementKind.PATH.value:
                summary["has_path"] = True
            elif element_type == ElementKind.IMAGE.value:
                summary["has_image"] = True
            elif element_type == ElementKind.GROUP.value:
                summary["has_group"] = True
        elif kind == ActionType.ADD_KEYFRAME.value:
            summary["keyframes"] += 1
            summary["has_animation"] = True
            if payload.get("elementId") in image_targets:
                summary["has_image"] = True
                animated_images.add(payload["elementId"])
    summary["animated_images"] = len(animated_images)
    return summary


def score_composition(
    actions: list[dict[str, Any]],
    expect: Mapping[str, bool],
    image_ids: Iterable[str] = (),
) -> dict[str, Any]:
    analysis = analyze_actions(actions, image_ids)
    # an animated context image is output even though nothing was added
    produced = analysis["elements"] + analysis["animated_images"] > 0
    score = 0
    if produced:
        score += 1
    if analysis["has_animation"]:
        score += 1

    missed: list[str] = []
    for name, satisfied in (
        ("path", analysis["has_path"]),
        ("photo", analysis["has_image"]),
        ("character", analysis["has_group"]),
    ):
        if not expect.get(name):
            continue
        if satisfied:
            score += 1
        else:
            missed.append(name)

    return {
        "score": score,
        "max_score": MAX_CASE_SCORE,
        "passed": produced and analysis["has_animation"] and not missed,
        "missed": missed,
        "analysis": analysis,
    }


__all__ = ["MAX_CASE_SCORE", "analyze_actions", "evaluate_action_sequence", "score_composition"]
