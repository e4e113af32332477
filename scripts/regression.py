#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from maestro.compiler.quality import MAX_CASE_SCORE, evaluate_action_sequence, score_composition  # noqa: E402

ARTBOARD = {"width": 800, "height": 600}
ANIMATION_DURATION_S = 5
PHOTO_ELEMENT = {
    "id": "image-1",
    "type": "image",
    "x": 120,
    "y": 80,
    "width": 420,
    "height": 320,
    "opacity": 1,
    "rotation": 0,
    "scale": 1,
    "href": "https://via.placeholder.com/640x480?text=Photo",
}


@dataclass
class RegressionCase:
    name: str
    prompt: str
    expect: dict[str, bool]
    context: dict[str, Any] = field(default_factory=dict)

    def request(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "userRequest": self.prompt,
            "artboard": ARTBOARD,
            "animationDuration": ANIMATION_DURATION_S,
            "elementToAnimate": None,
            "existingElements": [],
        }
        payload.update(self.context)
        return payload

    def context_ids(self) -> list[str]:
        return [str(element["id"]) for element in self.request()["existingElements"]]


PHOTO_CONTEXT = {"elementToAnimate": PHOTO_ELEMENT, "existingElements": [PHOTO_ELEMENT]}

CASES = [
    RegressionCase("scene-character", "A robot waves in a neon room", {"scene": True, "character": True}),
    RegressionCase("path-blob", "Create a blob path with curves", {"path": True}),
    RegressionCase("path-spiral", "Draw a spiral path", {"path": True}),
    RegressionCase("scene-forest", "A forest landscape with trees", {"scene": True}),
    RegressionCase("scene-space", "Space scene with stars and a planet", {"scene": True}),
    RegressionCase("photo-tier1", "Animate photo with Ken Burns", {"photo": True}, PHOTO_CONTEXT),
    RegressionCase("photo-tier2", "Subject selection photo with bounding box", {"photo": True}, PHOTO_CONTEXT),
    RegressionCase("character-walk", "A character walks across the screen", {"character": True}),
]


def _generate_live(base_url: str, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    response = httpx.post(f"{base_url.rstrip('/')}/api/ai/generate", json=payload, timeout=30)
    body = response.json() if response.content else {}
    return response.status_code, body


def _generate_inprocess(payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    from fastapi.testclient import TestClient

    from maestro.gateway.app.main import app

    client = TestClient(app)
    response = client.post("/api/ai/generate", json=payload)
    return response.status_code, response.json()


def run_regression(base_url: str, inprocess: bool) -> dict[str, Any]:
    rows: list[dict[str, Any]] = []
    total_score = 0
    failures = 0

    for case in CASES:
        payload = case.request()
        if inprocess:
            status_code, body = _generate_inprocess(payload)
        else:
            status_code, body = _generate_live(base_url, payload)
        actions = body.get("actions", []) if isinstance(body, dict) else []
        if not isinstance(actions, list):
            actions = []

        context_ids = case.context_ids()
        score = score_composition(actions, case.expect, image_ids=context_ids)
        quality = evaluate_action_sequence(actions, existing_ids=context_ids)
        passed = status_code == 200 and score["passed"] and quality["ok"]
        total_score += score["score"]
        if not passed:
            failures += 1

        rows.append(
            {
                "name": case.name,
                "prompt": case.prompt,
                "status_code": status_code,
                "summary": body.get("summary") if isinstance(body, dict) else None,
                "elements": score["analysis"]["elements"],
                "keyframes": score["analysis"]["keyframes"],
                "score": score["score"],
                "missed": score["missed"],
                "quality_failures": quality["failures"],
                "outcome": "pass" if passed else "fail",
            }
        )

    max_score = MAX_CASE_SCORE * len(CASES)
    summary = {
        "total_cases": len(rows),
        "failures": failures,
        "score": total_score,
        "max_score": max_score,
        "percent": round(total_score / max_score * 100),
    }
    return {"summary": summary, "cases": rows}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Score the compiler against the fixed regression prompt suite.")
    parser.add_argument("--base-url", default="http://127.0.0.1:8000")
    parser.add_argument("--out", default="", help="Optional path for the full JSON report.")
    parser.add_argument("--inprocess", action="store_true", help="Run the gateway in-process instead of over HTTP.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    try:
        report = run_regression(base_url=args.base_url, inprocess=args.inprocess)
    except httpx.HTTPError as exc:
        print(f"regression failed: {exc}", file=sys.stderr)
        return 2

    for row in report["cases"]:
        print(f"[{row['outcome']}] {row['name']}: {row['summary']}")
        print(f"  elements={row['elements']} keyframes={row['keyframes']} score={row['score']}/{MAX_CASE_SCORE}")
    summary = report["summary"]
    print(f"\nregression score: {summary['score']}/{summary['max_score']} ({summary['percent']}%)")

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"report_written: {out_path}")
    return 0 if summary["failures"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
