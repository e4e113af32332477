from __future__ import annotations

import logging
from datetime import datetime, timezone
from time import perf_counter
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from maestro.compiler import failure_result, generate_actions, validate_actions
from maestro.compiler.engine import FAILURE_SUMMARY, SAFE_SCENE_SUMMARY
from maestro.config.compiler_config import configure_logging, default_policy
from maestro.protocol import (
    ACTION_SCHEMA,
    GENERATE_RESPONSE_SCHEMA,
    GenerateRequest,
    ProtocolValidationError,
    ProtocolValidator,
    ValidateRequest,
)
from maestro.versioning import project_revision, project_version

logger = logging.getLogger("maestro.gateway")
protocol_validator = ProtocolValidator()

REQUEST_COUNTER = Counter(
    "maestro_gateway_http_requests_total",
    "Total gateway HTTP requests",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "maestro_gateway_http_latency_seconds",
    "Gateway request latency",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)
GENERATE_LATENCY = Histogram(
    "maestro_generate_latency_seconds",
    "Prompt compilation latency",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)
GENERATE_OUTCOMES = Counter(
    "maestro_generate_outcomes_total",
    "Prompt compilation outcomes",
    ["outcome"],
)
VALIDATION_DROPS = Counter(
    "maestro_validation_dropped_actions_total",
    "Actions rejected by the /api/ai/validate gate",
)

configure_logging()

app = FastAPI(title="Vector Maestro Gateway", version=project_version())

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def metrics_middleware(request, call_next):  # type: ignore[override]
    started = perf_counter()
    response = await call_next(request)
    duration_s = perf_counter() - started
    REQUEST_COUNTER.labels(method=request.method, path=request.url.path, status=str(response.status_code)).inc()
    REQUEST_LATENCY.labels(method=request.method, path=request.url.path).observe(duration_s)
    return response


def _failure_response() -> JSONResponse:
    GENERATE_OUTCOMES.labels(outcome="failure").inc()
    return JSONResponse(status_code=500, content=failure_result().to_response())


def _check_contract(payload: dict[str, Any]) -> None:
    protocol_validator.validate(GENERATE_RESPONSE_SCHEMA, payload)
    for action in payload.get("actions", []):
        protocol_validator.validate(ACTION_SCHEMA, action)


def _outcome(summary: str, actions: list[dict[str, Any]]) -> str:
    if summary == SAFE_SCENE_SUMMARY:
        return "safe_scene"
    if not actions:
        return "empty"
    return "ok"


@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "service": "gateway",
        "version": project_version(),
        "revision": project_revision(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/metrics")
def metrics() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/api/ai/generate", response_model=None)
def generate(req: GenerateRequest) -> dict[str, Any] | JSONResponse:
    policy = default_policy()
    if len(req.user_request) > policy.max_prompt_chars:
        raise HTTPException(
            status_code=422,
            detail={"error": "prompt_too_long", "max_chars": policy.max_prompt_chars},
        )

    started = perf_counter()
    result = generate_actions(req, policy)
    GENERATE_LATENCY.observe(perf_counter() - started)
    if result.summary == FAILURE_SUMMARY and not result.actions:
        return _failure_response()

    payload = result.to_response()
    try:
        _check_contract(payload)
    except ProtocolValidationError as exc:
        logger.error("outbound contract violation in %s: %s", exc.schema_path, exc.issues)
        return _failure_response()

    GENERATE_OUTCOMES.labels(outcome=_outcome(result.summary, result.actions)).inc()
    return payload


@app.post("/api/ai/validate")
def validate(req: ValidateRequest) -> dict[str, Any]:
    result = validate_actions(req.actions)
    if result.errors:
        VALIDATION_DROPS.inc(len(result.errors))
    return result.to_dict()
