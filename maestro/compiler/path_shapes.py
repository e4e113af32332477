from __future__ import annotations

from typing import Callable

from maestro.compiler.elements import GeneratorResult, IdAllocator, add_keyframe, add_path
from maestro.compiler.palette import pick
from maestro.compiler.paths import blob_path, heart_path, spiral_path, star_path, wave_path, zigzag_path
from maestro.compiler.planner import Plan

PATH_PALETTE = ("#38bdf8", "#a855f7", "#f97316")
OUTLINE_STROKE_WIDTH = 4
FILLED_STROKE = "#0f172a"
FILLED_STROKE_WIDTH = 2

# (flag, summary, curve builder) tried in order; a plain blob is the fallback.
SHAPE_RULES: tuple[tuple[str, str, Callable[[Plan], str]], ...] = (
    ("spiral", "Created a spiral path.", lambda plan: spiral_path(3, plan.min_dim * 0.25, 80)),
    ("wavePath", "Created a wave path.", lambda plan: wave_path(plan.width * 0.6, plan.height * 0.08, 3)),
    ("heart", "Created a heart path.", lambda plan: heart_path(plan.min_dim * 0.35)),
    ("starShape", "Created a star path.", lambda plan: star_path(5, plan.min_dim * 0.2, plan.min_dim * 0.08)),
    ("zigzag", "Created a zigzag path.", lambda plan: zigzag_path(plan.width, plan.height, 6)),
    ("polygon", "Created a polygon path.", lambda plan: star_path(6, plan.min_dim * 0.18, plan.min_dim * 0.18)),
    ("blob", "Created an organic blob path.", lambda plan: blob_path(plan.min_dim * 0.22, 8)),
)


def select_curve(plan: Plan) -> tuple[str, str]:
    for flag, summary, builder in SHAPE_RULES:
        if plan.features[flag]:
            return summary, builder(plan)
    return "Created a curved path shape.", blob_path(plan.min_dim * 0.18, 7)


def build_path_shape(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    palette = plan.palette or PATH_PALETTE
    summary, d = select_curve(plan)
    path_id = ids.next_id()

    if plan.features.has("outline", "stroke"):
        fill, stroke, stroke_width = "none", palette[0], OUTLINE_STROKE_WIDTH
    else:
        fill, stroke, stroke_width = pick(palette, 1, palette[0]), FILLED_STROKE, FILLED_STROKE_WIDTH

    actions = [
        add_path(
            path_id,
            plan.width * 0.5,
            plan.height * 0.5,
            d,
            fill,
            stroke,
            stroke_width,
            strokeDasharray="8 6" if plan.features["animate"] else None,
        )
    ]
    if plan.features.has("animate", "draw", "path"):
        actions += [
            add_keyframe(path_id, "drawStartPercent", 0, 0),
            add_keyframe(path_id, "drawEndPercent", 0, 0.05),
            add_keyframe(path_id, "drawEndPercent", plan.duration, 1, "ease-in-out"),
        ]
    return GeneratorResult(summary, actions, None, "Path: Curves/Blob")


__all__ = ["SHAPE_RULES", "build_path_shape", "select_curve"]
