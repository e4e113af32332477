from __future__ import annotations

from maestro.compiler.composer import build_camera_motion, compose, highest_placeholder, renumber
from maestro.compiler.elements import GeneratorResult, IdAllocator, add_group, add_keyframe, add_rect, with_parent
from maestro.compiler.planner import build_plan


def _result(summary: str, count: int, root: bool = True) -> GeneratorResult:
    ids = IdAllocator()
    root_id = ids.next_id() if root else None
    actions = [add_group(root_id)] if root_id else []
    for _ in range(count):
        element_id = ids.next_id()
        actions += [
            with_parent(add_rect(element_id, 0, 0, 10, 10, "#fff"), root_id),
            add_keyframe(element_id, "x", 0, 0),
        ]
    return GeneratorResult(summary, actions, root_id, "Scene: Test")


def _added_ids(actions: list[dict]) -> list[str]:
    return [action["payload"]["props"]["id"] for action in actions if action["type"] == "ADD_ELEMENT"]


def test_renumber_shifts_nested_placeholders() -> None:
    value = {"id": "{{NEW_ID_2}}", "fill": {"id": "{{NEW_ID_2}}-grad"}, "list": ["{{NEW_ID_1}}", 3]}
    assert renumber(value, 5) == {"id": "{{NEW_ID_7}}", "fill": {"id": "{{NEW_ID_7}}-grad"}, "list": ["{{NEW_ID_6}}", 3]}
    assert highest_placeholder(value) == 2


def test_compose_keeps_ids_unique_and_increasing() -> None:
    plan = build_plan({"userRequest": "a plain request"})
    composition = compose(plan, [_result("First.", 2), _result("Second.", 1)])
    ids = _added_ids(composition.actions)
    assert ids == [f"{{{{NEW_ID_{n}}}}}" for n in range(1, 6)]
    assert composition.summary == "First. Second."
    assert composition.anchor_id == "{{NEW_ID_1}}"
    second_root = composition.actions[5]["payload"]
    assert second_root["props"]["id"] == "{{NEW_ID_4}}"
    assert composition.actions[6]["payload"]["targetParentId"] == "{{NEW_ID_4}}"
    assert [step["title"] for step in composition.steps] == ["Scene: Test", "Scene: Test"]
    assert composition.steps[0]["rationale"] == "Compose the base environment and layers."


def test_compose_anchor_is_first_non_empty_root() -> None:
    plan = build_plan({"userRequest": "a plain request"})
    composition = compose(plan, [_result("Path.", 1, root=False), _result("Scene.", 1)])
    assert composition.anchor_id == "{{NEW_ID_2}}"


def test_camera_keyframes_follow_beats_and_flags() -> None:
    plan = build_plan({"userRequest": "zoom to the left of the forest", "animationDuration": 10})
    frames = [action["payload"] for action in build_camera_motion(plan, "root")]
    assert [(frame["property"], frame["time"], frame["value"]) for frame in frames] == [
        ("x", 0.0, 0.0),
        ("x", 10.0, -30.0),
        ("y", 0.0, 0.0),
        ("y", 10.0, 12.0),
        ("scale", 0.0, 1),
        ("scale", 10.0, 1.08),
    ]
    assert frames[1]["easing"] == "ease-in-out"


def test_camera_offsets_by_anchor_origin() -> None:
    plan = build_plan({"userRequest": "pan the camera down"})
    frames = [action["payload"] for action in build_camera_motion(plan, "root", (400.0, 390.0))]
    assert frames[0]["value"] == 400.0
    assert frames[3]["value"] == 410.0
    assert frames[5]["value"] == 1.03


def test_compose_adds_camera_only_with_anchor() -> None:
    plan = build_plan({"userRequest": "cinematic camera"})
    with_anchor = compose(plan, [_result("Scene.", 1)])
    assert with_anchor.steps[-1]["title"] == "Camera: Pan/Zoom"
    assert with_anchor.steps[-1]["rationale"] == "Add cinematic camera motion."
    without_anchor = compose(plan, [_result("Path.", 1, root=False)])
    assert all(step["title"] != "Camera: Pan/Zoom" for step in without_anchor.steps)


def test_rain_overlay_parented_to_anchor() -> None:
    plan = build_plan({"userRequest": "rain over the city"})
    composition = compose(plan, [_result("Scene.", 1)])
    weather = composition.steps[-1]
    assert weather["title"] == "Weather: rain"
    added = [action["payload"] for action in weather["actions"] if action["type"] == "ADD_ELEMENT"]
    group = added[0]
    assert group["type"] == "group"
    assert group["targetParentId"] == composition.anchor_id
    drops = added[1:]
    assert len(drops) == 16
    assert all(drop["type"] == "rect" and drop["targetParentId"] == group["props"]["id"] for drop in drops)
    ids = _added_ids(composition.actions)
    assert len(ids) == len(set(ids))


def test_snow_overlay_without_anchor_goes_to_root() -> None:
    plan = build_plan({"userRequest": "snow falling"})
    composition = compose(plan, [_result("Path.", 1, root=False)])
    added = [action["payload"] for action in composition.steps[-1]["actions"] if action["type"] == "ADD_ELEMENT"]
    assert added[0]["targetParentId"] is None
    assert len(added) == 15
    assert all(flake["type"] == "circle" for flake in added[1:])


def test_camera_wraps_anchor_that_animates_itself() -> None:
    plan = build_plan({"userRequest": "a robot walks, camera pan"})
    moving = _result("Character.", 1)
    moving.actions.append(add_keyframe(moving.root_id, "x", 0, 260))
    composition = compose(plan, [moving])

    rig = composition.actions[0]["payload"]
    assert rig["type"] == "group"
    assert rig["targetParentId"] is None
    assert rig["props"]["id"] == "{{NEW_ID_1}}"
    assert composition.anchor_id == "{{NEW_ID_2}}"
    assert composition.actions[1]["payload"]["targetParentId"] == "{{NEW_ID_1}}"

    camera = [action["payload"] for action in composition.steps[-1]["actions"] if action["type"] == "ADD_KEYFRAME"]
    assert {frame["elementId"] for frame in camera} == {"{{NEW_ID_1}}"}
    assert camera[0]["value"] == 0.0


def test_camera_drives_still_anchor_directly() -> None:
    plan = build_plan({"userRequest": "cinematic camera"})
    composition = compose(plan, [_result("Scene.", 1)])
    assert composition.actions[0]["payload"]["props"]["id"] == composition.anchor_id
    camera = [action["payload"] for action in composition.steps[-1]["actions"]]
    assert {frame["elementId"] for frame in camera} == {composition.anchor_id}
