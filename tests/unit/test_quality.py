from __future__ import annotations

from maestro.compiler.engine import generate_actions
from maestro.compiler.quality import analyze_actions, evaluate_action_sequence, score_composition


def _add(element_id: str, kind: str = "rect", parent: str | None = None, **props) -> dict:
    payload = {"type": kind, "props": {"id": element_id, **props}}
    if parent is not None:
        payload["targetParentId"] = parent
    return {"type": "ADD_ELEMENT", "payload": payload}


def _frame(element_id: str, prop: str, time: float, value) -> dict:
    return {"type": "ADD_KEYFRAME", "payload": {"elementId": element_id, "property": prop, "time": time, "value": value}}


def test_quality_passes_generated_scene() -> None:
    result = generate_actions({"userRequest": "A robot waves in a neon room"})
    report = evaluate_action_sequence(result.actions)
    assert report["ok"] is True
    assert "references_resolved" in report["checks"]
    assert "placeholder_ids_monotonic" in report["checks"]
    assert "animation_span_meets_floor" in report["checks"]


def test_quality_flags_common_mistakes() -> None:
    report = evaluate_action_sequence(
        [
            _add("{{NEW_ID_2}}"),
            _add("{{NEW_ID_1}}", parent="{{NEW_ID_9}}"),
            _add("{{NEW_ID_1}}"),
            _frame("ghost", "x", 0, 1),
            _frame("{{NEW_ID_2}}", "opacity", -1, 4),
        ]
    )
    assert report["ok"] is False
    assert set(report["failures"]) == {
        "duplicate_element_ids",
        "placeholder_ids_not_monotonic",
        "unresolved_references",
        "values_out_of_range",
        "keyframe_times_invalid",
    }


def test_quality_existing_ids_resolve_references() -> None:
    actions = [
        {"type": "UPDATE_ELEMENT_PROPS", "payload": {"id": "el-1", "props": {"fill": "#fff"}}},
        _frame("el-1", "x", 0, 1),
        _frame("el-1", "x", 3, 5),
    ]
    assert evaluate_action_sequence(actions, existing_ids=["el-1"])["ok"] is True
    assert "unresolved_references" in evaluate_action_sequence(actions)["failures"]


def test_quality_empty_and_static_sequences() -> None:
    empty = evaluate_action_sequence([])
    assert empty["failures"] == ["no_actions"]
    static = evaluate_action_sequence([_add("a")])
    assert static["ok"] is True
    assert static["warnings"] == ["no_keyframes"]


def test_score_composition_expectations() -> None:
    actions = [_add("g", "group"), _add("p", "path", parent="g"), _frame("p", "x", 0, 0)]
    score = score_composition(actions, {"path": True, "character": True})
    assert score["score"] == 4
    assert score["passed"] is True
    assert score["missed"] == []

    missing = score_composition(actions, {"photo": True})
    assert missing["score"] == 2
    assert missing["passed"] is False
    assert missing["missed"] == ["photo"]


def test_keyframes_on_context_image_count_as_photo() -> None:
    actions = [_add("bg"), _frame("image-1", "scale", 0, 1)]
    assert analyze_actions(actions)["has_image"] is False
    assert analyze_actions(actions, image_ids=["image-1"])["has_image"] is True


def test_animated_context_image_counts_as_output() -> None:
    actions = [_frame("image-1", "scale", 0, 1), _frame("image-1", "scale", 4, 1.18)]
    score = score_composition(actions, {"photo": True}, image_ids=["image-1"])
    assert score["passed"] is True
    assert score["score"] == 3
    assert score["analysis"]["animated_images"] == 1
    assert score_composition(actions, {"photo": True})["passed"] is False
