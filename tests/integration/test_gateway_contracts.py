from __future__ import annotations

from fastapi.testclient import TestClient

from maestro.compiler import engine
from maestro.gateway.app.main import app
from maestro.protocol import ACTION_SCHEMA, GENERATE_RESPONSE_SCHEMA, ProtocolValidator


def test_generate_returns_validated_actions_and_plan() -> None:
    c = TestClient(app)
    res = c.post(
        "/api/ai/generate",
        json={
            "userRequest": "A robot waves in a neon room",
            "artboard": {"width": 800, "height": 600},
            "animationDuration": 5,
            "elementToAnimate": None,
            "existingElements": [],
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["summary"]
    assert body["actions"]
    assert [step["title"] for step in body["plan"]["steps"]] == ["Scene: Neon Studio", "Character: Rig + Motion"]

    validator = ProtocolValidator()
    validator.validate(GENERATE_RESPONSE_SCHEMA, body)
    for action in body["actions"]:
        validator.validate(ACTION_SCHEMA, action)


def test_generate_accepts_minimal_body() -> None:
    c = TestClient(app)
    res = c.post("/api/ai/generate", json={"userRequest": "draw a blue circle"})
    assert res.status_code == 200
    actions = res.json()["actions"]
    assert len(actions) == 1
    assert actions[0]["payload"]["props"]["fill"] == "#3b82f6"


def test_generate_rejects_long_prompt(monkeypatch) -> None:
    monkeypatch.setenv("MAESTRO_MAX_PROMPT_CHARS", "32")
    c = TestClient(app)
    res = c.post("/api/ai/generate", json={"userRequest": "a" * 33})
    assert res.status_code == 422
    assert res.json()["detail"] == {"error": "prompt_too_long", "max_chars": 32}


def test_generate_failure_shape(monkeypatch) -> None:
    def explode(plan, ids=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(engine, "build_scene", explode)
    c = TestClient(app)
    res = c.post("/api/ai/generate", json={"userRequest": "a forest"})
    assert res.status_code == 500
    assert res.json() == {"summary": "AI failed to process the request.", "actions": []}


def test_generate_contract_violation_is_internal_error(monkeypatch) -> None:
    from maestro.gateway.app import main as gateway_main

    def reject(payload) -> None:
        raise gateway_main.ProtocolValidationError(schema_path=ACTION_SCHEMA, issues=[{"path": "$", "message": "bad"}])

    monkeypatch.setattr(gateway_main, "_check_contract", reject)
    c = TestClient(app)
    res = c.post("/api/ai/generate", json={"userRequest": "a forest"})
    assert res.status_code == 500
    assert res.json()["actions"] == []


def test_validate_endpoint_drops_and_clamps() -> None:
    c = TestClient(app)
    res = c.post(
        "/api/ai/validate",
        json={
            "actions": [
                {"type": "ADD_ELEMENT", "payload": {"type": "rect", "props": {"id": "a", "opacity": 4}}},
                {"type": "SET_PLAYBACK_SPEED", "payload": 0},
                {"type": "SEND_TO_BACK", "payload": "a"},
            ]
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is False
    assert body["errors"] == ["invalid_action_1"]
    assert body["actions"][0]["payload"]["props"]["opacity"] == 1.0
    assert body["actions"][1] == {"type": "SEND_TO_BACK", "payload": "a"}
