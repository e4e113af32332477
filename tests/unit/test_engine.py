from __future__ import annotations

import pytest

from maestro.compiler import engine
from maestro.compiler.elements import GeneratorResult
from maestro.compiler.engine import (
    FAILURE_SUMMARY,
    SAFE_SCENE_SUMMARY,
    UNRECOVERABLE_SUMMARY,
    generate_actions,
)
from maestro.compiler.quality import evaluate_action_sequence
from maestro.compiler.validator import validate_actions

IMAGE = {
    "id": "image-1",
    "type": "image",
    "x": 120,
    "y": 80,
    "width": 420,
    "height": 320,
    "href": "https://example.test/photo.png",
}

PROMPTS = [
    "A robot waves in a neon room",
    "Create a blob path with curves",
    "Draw a spiral path",
    "A forest landscape with trees",
    "Space scene with stars and a planet",
    "A character walks across the screen",
    "rain over a cinematic city with a zoom",
    "snow in the mountains, a person walks left",
    "add 4 circles in a grid and make them bounce",
    "draw a blue circle",
    "",
]


def _added(actions: list[dict]) -> list[dict]:
    return [action["payload"] for action in actions if action["type"] == "ADD_ELEMENT"]


def _frames(actions: list[dict]) -> list[dict]:
    return [action["payload"] for action in actions if action["type"] == "ADD_KEYFRAME"]


@pytest.mark.parametrize("prompt", PROMPTS)
def test_generated_sequences_are_valid_and_consistent(prompt: str) -> None:
    result = generate_actions({"userRequest": prompt})
    checked = validate_actions(result.actions)
    assert checked.ok is True
    assert checked.actions == result.actions
    report = evaluate_action_sequence(result.actions)
    assert report["failures"] == [] or report["failures"] == ["no_actions"]
    assert result.summary


def test_draw_blue_circle_is_a_single_static_circle() -> None:
    result = generate_actions({"userRequest": "draw a blue circle"})
    added = _added(result.actions)
    assert len(added) == 1
    assert added[0]["type"] == "circle"
    assert added[0]["props"]["fill"] == "#3b82f6"
    assert _frames(result.actions) == []


def test_scene_and_character_composition() -> None:
    result = generate_actions({"userRequest": "a robot waves in a neon room"})
    added = _added(result.actions)
    groups = [item for item in added if item["type"] == "group"]
    assert len(groups) == 2
    assert any(item["type"] == "rect" and item["props"].get("width") == 800 for item in added)
    assert result.summary == "Set up a neon studio scene with glowing strips. Built a robot character rig."
    titles = [step["title"] for step in result.steps]
    assert titles == ["Scene: Neon Studio", "Character: Rig + Motion"]


def test_photo_tier_selection() -> None:
    tier1 = generate_actions({"userRequest": "Animate photo with Ken Burns", "elementToAnimate": IMAGE})
    assert _added(tier1.actions) == []
    assert {frame["elementId"] for frame in _frames(tier1.actions)} == {"image-1"}
    assert tier1.steps[0]["rationale"] == "Apply cinematic pan/zoom to the photo."

    tier2 = generate_actions({"userRequest": "Animate photo with Ken Burns bounding box", "elementToAnimate": IMAGE})
    rects = [item for item in _added(tier2.actions) if item["type"] == "rect"]
    assert any(rect["props"]["fill"] == "none" and rect["props"]["stroke"] != "none" for rect in rects)
    bbox_id = rects[-1]["props"]["id"]
    assert [frame["property"] for frame in _frames(tier2.actions) if frame["elementId"] == bbox_id] == [
        "opacity",
        "opacity",
        "opacity",
    ]
    assert tier2.steps[0]["rationale"] == "Animate background + subject layers."


def test_draw_a_star_is_only_the_star_path() -> None:
    result = generate_actions({"userRequest": "draw a star"})
    assert [item["type"] for item in _added(result.actions)] == ["path"]


def test_dark_colour_edit_never_builds_a_scene() -> None:
    selected = {"id": "el-7", "type": "circle", "x": 200, "y": 200, "r": 30}
    result = generate_actions({"userRequest": "make it dark blue", "elementToAnimate": selected})
    assert result.actions == [
        {"type": "UPDATE_ELEMENT_PROPS", "payload": {"id": "el-7", "props": {"fill": "#3b82f6"}}}
    ]


def test_camera_pan_does_not_fight_character_motion() -> None:
    result = generate_actions({"userRequest": "a robot walks, camera pan"})
    seen: set[tuple] = set()
    for frame in _frames(result.actions):
        key = (frame["elementId"], frame["property"], frame["time"])
        assert key not in seen
        seen.add(key)
    assert evaluate_action_sequence(result.actions)["ok"] is True


@pytest.mark.parametrize("duration", [None, 0.5, 1, 2, 7])
def test_duration_floor(duration) -> None:
    request = {"userRequest": "a character walks", "animationDuration": duration}
    times = [frame["time"] for frame in _frames(generate_actions(request).actions)]
    assert max(times) >= 2


def test_camera_and_weather_layered_on_scene() -> None:
    result = generate_actions({"userRequest": "rain over a cinematic city with a zoom"})
    titles = [step["title"] for step in result.steps]
    assert titles == ["Scene: City", "Camera: Pan/Zoom", "Weather: rain"]
    root_id = _added(result.actions)[0]["props"]["id"]
    camera = [frame for frame in _frames(result.actions) if frame["elementId"] == root_id]
    assert [frame["property"] for frame in camera] == ["x", "x", "y", "y", "scale", "scale"]


def test_modify_request_keeps_context_ids() -> None:
    selected = {"id": "el-7", "type": "circle", "x": 200, "y": 200, "r": 30}
    result = generate_actions({"userRequest": "make it pink and spin", "elementToAnimate": selected})
    assert result.actions[0] == {"type": "UPDATE_ELEMENT_PROPS", "payload": {"id": "el-7", "props": {"fill": "#ec4899"}}}
    assert {frame["property"] for frame in _frames(result.actions)} == {"rotation"}
    assert evaluate_action_sequence(result.actions, existing_ids=["el-7"])["ok"] is True


def test_safe_fallback_when_primary_output_is_invalid(monkeypatch) -> None:
    def broken_character(plan, ids=None) -> GeneratorResult:
        return GeneratorResult("Broken.", [{"type": "ADD_ELEMENT", "payload": {"type": "blob", "props": {}}}])

    monkeypatch.setattr(engine, "build_character", broken_character)
    result = generate_actions({"userRequest": "A character walks across the screen"})
    assert result.summary == SAFE_SCENE_SUMMARY
    assert result.actions
    assert validate_actions(result.actions).ok is True
    assert _added(result.actions)[0]["type"] == "group"
    assert result.steps[-1]["title"] == "Safe Scene"
    assert result.steps[-1]["rationale"] == "Fallback scene generated after validation."


def test_unrecoverable_when_safe_scene_is_invalid_too(monkeypatch) -> None:
    def broken(plan, ids=None) -> GeneratorResult:
        return GeneratorResult("Broken.", [{"type": "BOGUS", "payload": {}}])

    monkeypatch.setattr(engine, "build_character", broken)
    monkeypatch.setattr(engine, "build_generic_scene", broken)
    result = generate_actions({"userRequest": "A character walks across the screen"})
    assert result.summary == UNRECOVERABLE_SUMMARY
    assert result.actions == []


def test_generator_exception_becomes_failure_result(monkeypatch) -> None:
    def explode(plan, ids=None) -> GeneratorResult:
        raise RuntimeError("boom")

    monkeypatch.setattr(engine, "build_path_shape", explode)
    result = generate_actions({"userRequest": "Draw a spiral path"})
    assert result.summary == FAILURE_SUMMARY
    assert result.actions == []
    assert result.to_response() == {"summary": FAILURE_SUMMARY, "actions": []}


def test_malformed_request_becomes_failure_result() -> None:
    result = generate_actions({"userRequest": "a forest", "artboard": {"width": -5, "height": 10}})
    assert result.summary == FAILURE_SUMMARY


def test_to_response_includes_plan_steps() -> None:
    payload = generate_actions({"userRequest": "Draw a spiral path"}).to_response()
    assert payload["plan"]["summary"] == payload["summary"]
    assert payload["plan"]["steps"][0]["title"] == "Path: Curves/Blob"
    assert payload["plan"]["steps"][0]["rationale"] == "Generate path-based shapes and draw effects."
