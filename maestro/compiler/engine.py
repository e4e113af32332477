"""Prompt-to-actions compiler entry point.

`generate_actions` never raises: a planner or generator failure is logged
and turned into the fixed failure result, and a run whose output was
rejected wholesale by validation is replaced with a generic starter scene.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from maestro.compiler.character import build_character
from maestro.compiler.composer import compose, make_step
from maestro.compiler.elements import GeneratorResult, IdAllocator
from maestro.compiler.fallback import build_fallback
from maestro.compiler.path_shapes import build_path_shape
from maestro.compiler.photo import build_photo
from maestro.compiler.planner import Plan, build_plan
from maestro.compiler.scenes import build_generic_scene, build_scene
from maestro.compiler.validator import validate_actions
from maestro.config.compiler_config import CompilerPolicy
from maestro.protocol.models import GenerateRequest

logger = logging.getLogger("maestro.engine")

FAILURE_SUMMARY = "AI failed to process the request."
SAFE_SCENE_SUMMARY = "Generated a safe starter scene."
UNRECOVERABLE_SUMMARY = "Unable to generate a valid scene. Please try a simpler prompt."
SAFE_SCENE_TITLE = "Safe Scene"


@dataclass
class CompileResult:
    summary: str
    actions: list[dict[str, Any]] = field(default_factory=list)
    steps: list[dict[str, Any]] = field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"summary": self.summary, "actions": self.actions}
        if self.steps:
            payload["plan"] = {"summary": self.summary, "steps": self.steps}
        return payload


def failure_result() -> CompileResult:
    return CompileResult(FAILURE_SUMMARY, [], [])


def _validated(result: GeneratorResult) -> tuple[GeneratorResult, bool]:
    checked = validate_actions(result.actions)
    if not checked.ok:
        logger.warning("dropped %d invalid actions from %r: %s", len(checked.errors), result.title, checked.errors)
    result.actions = checked.actions
    return result, not checked.ok


def _primary_generators(plan: Plan) -> list[Callable[[Plan], GeneratorResult | None]]:
    # looked up at call time so tests can swap builders on this module
    selected: list[Callable[[Plan], GeneratorResult | None]] = []
    if plan.wants_scene:
        selected.append(build_scene)
    if plan.wants_character:
        selected.append(build_character)
    if plan.wants_path:
        selected.append(build_path_shape)
    return selected


def _safe_scene(plan: Plan, steps: list[dict[str, Any]]) -> CompileResult:
    logger.warning("validation rejected every action; generating safe scene for %r", plan.text)
    checked = validate_actions(build_generic_scene(plan, IdAllocator()).actions)
    if not checked.actions:
        return CompileResult(UNRECOVERABLE_SUMMARY, [], steps)
    return CompileResult(SAFE_SCENE_SUMMARY, checked.actions, [*steps, make_step(SAFE_SCENE_TITLE, checked.actions)])


def _compile_photo(plan: Plan) -> CompileResult:
    result, dropped = _validated(build_photo(plan, IdAllocator()))
    steps = [make_step(result.title, result.actions)]
    if not result.actions and dropped:
        return _safe_scene(plan, steps)
    return CompileResult(result.summary, result.actions, steps)


def compile_plan(plan: Plan) -> CompileResult:
    if plan.wants_photo:
        return _compile_photo(plan)

    results: list[GeneratorResult] = []
    dropped_any = False
    for generator in _primary_generators(plan):
        produced = generator(plan)
        if produced is None:
            continue
        checked, dropped = _validated(produced)
        dropped_any = dropped_any or dropped
        results.append(checked)

    if not results:
        checked, dropped = _validated(build_fallback(plan, IdAllocator()))
        dropped_any = dropped_any or dropped
        results = [checked]

    composition = compose(plan, results, IdAllocator())
    final = validate_actions(composition.actions)
    if not final.ok:
        logger.warning("composed output lost %d actions in validation: %s", len(final.errors), final.errors)
        dropped_any = True
    if not final.actions and dropped_any:
        return _safe_scene(plan, composition.steps)
    return CompileResult(composition.summary, final.actions, composition.steps)


def generate_actions(
    request: GenerateRequest | Mapping[str, Any] | None,
    policy: CompilerPolicy | None = None,
) -> CompileResult:
    try:
        plan = build_plan(request, policy)
        result = compile_plan(plan)
    except Exception:  # noqa: BLE001
        logger.exception("action generation failed")
        return failure_result()
    logger.info("generated %d actions for archetype=%s", len(result.actions), plan.archetype.value)
    return result


__all__ = [
    "CompileResult",
    "FAILURE_SUMMARY",
    "SAFE_SCENE_SUMMARY",
    "UNRECOVERABLE_SUMMARY",
    "compile_plan",
    "failure_result",
    "generate_actions",
]
