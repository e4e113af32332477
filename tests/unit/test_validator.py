from __future__ import annotations

import math

from maestro.compiler.validator import PAYLOAD_CHECKS, validate_action, validate_actions
from maestro.protocol.models import ActionType


def _add(props: dict, kind: str = "rect", **payload) -> dict:
    return {"type": "ADD_ELEMENT", "payload": {"type": kind, "props": props, **payload}}


def test_valid_sequence_passes_through_unchanged() -> None:
    actions = [
        _add({"id": "{{NEW_ID_1}}", "x": 0, "y": 0, "width": 10, "height": 10, "fill": "#fff"}),
        {"type": "ADD_KEYFRAME", "payload": {"elementId": "{{NEW_ID_1}}", "property": "x", "time": 0, "value": 5}},
        {"type": "SET_IS_PLAYING", "payload": False},
        {"type": "SET_CURRENT_TIME", "payload": 0},
        {"type": "BRING_TO_FRONT", "payload": "{{NEW_ID_1}}"},
    ]
    result = validate_actions(actions)
    assert result.ok is True
    assert result.errors == []
    assert result.actions == actions


def test_validation_is_idempotent() -> None:
    first = validate_actions([_add({"id": "a", "opacity": 3, "scale": 0})])
    second = validate_actions(first.actions)
    assert second.ok is True
    assert second.actions == first.actions


def test_clamps_props_and_keyframe_values() -> None:
    result = validate_actions(
        [
            _add({"id": "a", "opacity": 1.7, "scale": 0, "strokeWidth": -2, "fontSize": 0}, kind="text"),
            {"type": "UPDATE_ELEMENT_PROPS", "payload": {"id": "a", "props": {"opacity": -1, "drawEndPercent": 2}}},
            {"type": "ADD_KEYFRAME", "payload": {"elementId": "a", "property": "opacity", "time": 1, "value": 5}},
        ]
    )
    assert result.ok is True
    assert result.actions[0]["payload"]["props"] == {
        "id": "a",
        "opacity": 1.0,
        "scale": 0.01,
        "strokeWidth": 0.0,
        "fontSize": 1.0,
    }
    assert result.actions[1]["payload"]["props"] == {"opacity": 0.0, "drawEndPercent": 1.0}
    assert result.actions[2]["payload"]["value"] == 1.0


def test_drops_invalid_actions_with_index_tags() -> None:
    result = validate_actions(
        [
            {"type": "NOT_AN_ACTION", "payload": {}},
            _add({"x": 1}),
            _add({"id": "ok"}),
            {"type": "ADD_KEYFRAME", "payload": {"elementId": "ok", "property": "banana", "time": 0, "value": 1}},
            {"type": "ADD_KEYFRAME", "payload": {"elementId": "ok", "property": "x", "time": -1, "value": 1}},
            {"type": "UPDATE_ANIMATION_DURATION", "payload": 0},
            {"type": "SET_PLAYBACK_SPEED", "payload": True},
            {"type": "SET_IS_PLAYING", "payload": "yes"},
            {"type": "ADD_ELEMENT"},
        ]
    )
    assert result.ok is False
    assert len(result.actions) == 1
    assert result.errors == [f"invalid_action_{index}" for index in (0, 1, 3, 4, 5, 6, 7, 8)]


def test_non_list_input() -> None:
    result = validate_actions({"type": "ADD_ELEMENT"})
    assert result.to_dict() == {"ok": False, "actions": [], "errors": ["actions_not_array"]}


def test_element_kind_and_parent_checks() -> None:
    assert validate_action(_add({"id": "a"}, kind="hexagon")) is None
    assert validate_action(_add({"id": "a"}, targetParentId=5)) is None
    assert validate_action(_add({"id": "a"}, targetParentId=None)) is not None


def test_numbers_must_be_finite_and_not_bool() -> None:
    assert validate_action({"type": "SET_CURRENT_TIME", "payload": math.nan}) is None
    assert validate_action({"type": "SET_CURRENT_TIME", "payload": True}) is None
    assert validate_action({"type": "UPDATE_ANIMATION_DURATION", "payload": 2.5}) == {
        "type": "UPDATE_ANIMATION_DURATION",
        "payload": 2.5,
    }


def test_element_reference_actions() -> None:
    assert validate_action({"type": "GROUP_ELEMENT", "payload": {"elementId": "a", "groupId": "g"}}) is not None
    assert validate_action({"type": "REPARENT_ELEMENT", "payload": {"elementId": ""}}) is None
    assert validate_action({"type": "SEND_BACKWARD", "payload": ""}) is None
    assert validate_action("ADD_ELEMENT") is None


def test_every_action_type_has_a_payload_check() -> None:
    assert set(PAYLOAD_CHECKS) == set(ActionType)
