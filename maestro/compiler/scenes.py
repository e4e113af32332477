"""Scene archetype builders.

Every builder lays its shapes out inside a root group so the composer has a
single anchor for camera motion and weather. Fills come from the plan's
palette with the builder's own colors as stand-ins when the palette is short.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping

from maestro.compiler.elements import (
    GeneratorResult,
    IdAllocator,
    add_circle,
    add_group,
    add_keyframe,
    add_path,
    add_rect,
    with_parent,
)
from maestro.compiler.intents import Archetype
from maestro.compiler.palette import accent_fill, background_fill, pick
from maestro.compiler.paths import cloud_path, dune_path, mountain_path
from maestro.compiler.planner import Plan

SceneBuilder = Callable[[Plan, IdAllocator], GeneratorResult]


def _root(ids: IdAllocator) -> tuple[str, list[dict]]:
    scene_id = ids.next_id()
    return scene_id, [add_group(scene_id, 0, 0)]


def build_sunset_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, sun_id, ground_id = ids.next_id(), ids.next_id(), ids.next_id()

    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 120)), scene_id),
        with_parent(
            add_circle(sun_id, w * 0.55, h * 0.6, plan.min_dim * 0.12, accent_fill(plan, palette, f"{sun_id}-grad")),
            scene_id,
        ),
        with_parent(add_rect(ground_id, 0, h * 0.72, w, h * 0.28, palette[-1]), scene_id),
        add_keyframe(sun_id, "y", 0, h * 0.6),
        add_keyframe(sun_id, "y", duration, h * 0.48, "ease-in-out"),
        add_keyframe(ground_id, "opacity", 0, 0),
        add_keyframe(ground_id, "opacity", duration * 0.4, 1),
    ]
    return GeneratorResult("Created a sunset scene with a drifting sun.", actions, scene_id, "Scene: Sunset")


def build_ocean_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, sun_id, ocean_id = ids.next_id(), ids.next_id(), ids.next_id()

    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h * 0.6, background_fill(plan, palette, f"{sky_id}-grad", 180)), scene_id),
        with_parent(
            add_circle(sun_id, w * 0.2, h * 0.25, plan.min_dim * 0.08, accent_fill(plan, palette, f"{sun_id}-grad")),
            scene_id,
        ),
        with_parent(add_rect(ocean_id, 0, h * 0.55, w, h * 0.45, pick(palette, 1, "#0ea5e9")), scene_id),
        add_keyframe(ocean_id, "x", 0, 0),
        add_keyframe(ocean_id, "x", duration, -20, "ease-in-out"),
        add_keyframe(ocean_id, "opacity", 0, 0),
        add_keyframe(ocean_id, "opacity", duration * 0.3, 1),
    ]
    return GeneratorResult("Created an ocean scene with gentle motion.", actions, scene_id, "Scene: Ocean")


def build_city_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, palette = plan.width, plan.height, plan.palette
    scene_id, actions = _root(ids)
    sky_id = ids.next_id()
    actions.append(
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 100)), scene_id)
    )

    building_count = 5
    base_y = h * 0.6
    max_h = h * 0.35
    step = w / building_count
    for index in range(building_count):
        building_id = ids.next_id()
        building_h = max_h * (0.5 + (index % 3) * 0.2)
        actions += [
            with_parent(
                add_rect(
                    building_id,
                    index * step + step * 0.15,
                    base_y - building_h,
                    step * 0.7,
                    building_h,
                    pick(palette, 1, "#1f2937"),
                ),
                scene_id,
            ),
            add_keyframe(building_id, "opacity", 0, 0),
            add_keyframe(building_id, "opacity", min(plan.duration, 1.5 + index * 0.2), 1),
        ]
    return GeneratorResult("Built a simple city skyline scene.", actions, scene_id, "Scene: City")


def build_forest_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, ground_id = ids.next_id(), ids.next_id()
    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 160)), scene_id),
        with_parent(add_rect(ground_id, 0, h * 0.7, w, h * 0.3, pick(palette, 1, "#166534")), scene_id),
    ]

    tree_count = 5
    spacing = w / (tree_count + 1)
    base_y = h * 0.7
    trunk_w, trunk_h = w * 0.035, h * 0.18
    for index in range(tree_count):
        trunk_id, crown_id = ids.next_id(), ids.next_id()
        x = spacing * (index + 1)
        actions += [
            with_parent(add_rect(trunk_id, x - trunk_w / 2, base_y - trunk_h, trunk_w, trunk_h, "#7c2d12"), scene_id),
            with_parent(
                add_circle(crown_id, x, base_y - trunk_h, plan.min_dim * 0.08, pick(palette, 2, "#16a34a")), scene_id
            ),
            add_keyframe(crown_id, "rotation", 0, -2),
            add_keyframe(crown_id, "rotation", duration * 0.5, 2, "ease-in-out"),
            add_keyframe(crown_id, "rotation", duration, -2),
        ]
    return GeneratorResult("Built a forest scene with layered trees.", actions, scene_id, "Scene: Forest")


def build_mountain_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, sun_id, mountain_id = ids.next_id(), ids.next_id(), ids.next_id()
    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 140)), scene_id),
        with_parent(
            add_circle(sun_id, w * 0.18, h * 0.25, plan.min_dim * 0.09, accent_fill(plan, palette, f"{sun_id}-grad")),
            scene_id,
        ),
        with_parent(
            add_path(mountain_id, w * 0.5, h * 0.55, mountain_path(w * 1.2, h * 0.4), pick(palette, 1, "#64748b")),
            scene_id,
        ),
    ]

    for index in range(3):
        cloud_id = ids.next_id()
        cloud_x = w * (0.25 + index * 0.25)
        cloud_y = h * (0.2 + (index % 2) * 0.08)
        actions += [
            with_parent(add_path(cloud_id, cloud_x, cloud_y, cloud_path(140, 50), pick(palette, 3, "#f8fafc")), scene_id),
            add_keyframe(cloud_id, "x", 0, cloud_x - 20),
            add_keyframe(cloud_id, "x", duration, cloud_x + 30, "ease-in-out"),
        ]
    return GeneratorResult("Created a mountain landscape with drifting clouds.", actions, scene_id, "Scene: Mountain")


def build_desert_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, sun_id, dune_id = ids.next_id(), ids.next_id(), ids.next_id()
    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 100)), scene_id),
        with_parent(
            add_circle(sun_id, w * 0.75, h * 0.25, plan.min_dim * 0.08, accent_fill(plan, palette, f"{sun_id}-grad")),
            scene_id,
        ),
        with_parent(
            add_path(dune_id, w * 0.5, h * 0.7, dune_path(w * 1.2, h * 0.25), pick(palette, 1, "#f59e0b")), scene_id
        ),
        add_keyframe(dune_id, "y", 0, h * 0.7),
        add_keyframe(dune_id, "y", duration, h * 0.68, "ease-in-out"),
    ]
    return GeneratorResult("Built a warm desert scene with rolling dunes.", actions, scene_id, "Scene: Desert")


def build_space_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id = ids.next_id()
    actions.append(
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 200)), scene_id)
    )

    for index in range(12):
        star_id = ids.next_id()
        x = w * 0.1 + (index % 6) * (w * 0.14)
        y = h * (0.12 + (index // 6) * 0.18)
        actions += [
            with_parent(add_circle(star_id, x, y, 3 + index % 3, pick(palette, 2, "#38bdf8")), scene_id),
            add_keyframe(star_id, "opacity", 0, 0.3),
            add_keyframe(star_id, "opacity", duration * 0.5, 1),
            add_keyframe(star_id, "opacity", duration, 0.4),
        ]

    planet_id = ids.next_id()
    actions += [
        with_parent(add_circle(planet_id, w * 0.7, h * 0.65, plan.min_dim * 0.14, pick(palette, 3, "#f472b6")), scene_id),
        add_keyframe(planet_id, "y", 0, h * 0.7),
        add_keyframe(planet_id, "y", duration * 0.5, h * 0.62, "ease-in-out"),
        add_keyframe(planet_id, "y", duration, h * 0.7),
    ]
    return GeneratorResult("Generated a space scene with twinkling stars.", actions, scene_id, "Scene: Space")


def build_neon_studio_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    wall_id, floor_id = ids.next_id(), ids.next_id()
    actions += [
        with_parent(add_rect(wall_id, 0, 0, w, h * 0.7, background_fill(plan, palette, f"{wall_id}-grad", 120)), scene_id),
        with_parent(add_rect(floor_id, 0, h * 0.7, w, h * 0.3, "#111827"), scene_id),
    ]

    for index in range(4):
        strip_id = ids.next_id()
        strip_x = w * 0.15 + index * w * 0.2
        strip_y = h * 0.18 + (index % 2) * 40
        actions += [
            with_parent(add_rect(strip_id, strip_x, strip_y, w * 0.12, 6, palette[index % len(palette)]), scene_id),
            add_keyframe(strip_id, "opacity", 0, 0.4),
            add_keyframe(strip_id, "opacity", duration * 0.5, 1),
            add_keyframe(strip_id, "opacity", duration, 0.5),
        ]
    return GeneratorResult("Set up a neon studio scene with glowing strips.", actions, scene_id, "Scene: Neon Studio")


def build_meadow_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, sun_id, field_id = ids.next_id(), ids.next_id(), ids.next_id()
    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 160)), scene_id),
        with_parent(add_circle(sun_id, w * 0.2, h * 0.2, plan.min_dim * 0.08, pick(palette, 3, "#fde047")), scene_id),
        with_parent(add_rect(field_id, 0, h * 0.65, w, h * 0.35, pick(palette, 1, "#16a34a")), scene_id),
        add_keyframe(field_id, "opacity", 0, 0.6),
        add_keyframe(field_id, "opacity", duration * 0.4, 1),
    ]
    return GeneratorResult("Created a bright meadow scene.", actions, scene_id, "Scene: Meadow")


def build_generic_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult:
    ids = ids or IdAllocator()
    w, h, duration, palette = plan.width, plan.height, plan.duration, plan.palette
    scene_id, actions = _root(ids)
    sky_id, ground_id, accent_id = ids.next_id(), ids.next_id(), ids.next_id()
    actions += [
        with_parent(add_rect(sky_id, 0, 0, w, h, background_fill(plan, palette, f"{sky_id}-grad", 110)), scene_id),
        with_parent(add_rect(ground_id, 0, h * 0.7, w, h * 0.3, pick(palette, 2, "#22c55e")), scene_id),
        with_parent(add_circle(accent_id, w * 0.7, h * 0.3, plan.min_dim * 0.08, pick(palette, 3, "#facc15")), scene_id),
        add_keyframe(accent_id, "y", 0, h * 0.32),
        add_keyframe(accent_id, "y", duration, h * 0.26, "ease-in-out"),
    ]
    return GeneratorResult("Generated a simple scene with sky and ground.", actions, scene_id, "Scene: Generic")


SCENE_BUILDERS: Mapping[Archetype, SceneBuilder] = MappingProxyType(
    {
        Archetype.SUNSET: build_sunset_scene,
        Archetype.OCEAN: build_ocean_scene,
        Archetype.CITY: build_city_scene,
        Archetype.FOREST: build_forest_scene,
        Archetype.MOUNTAIN: build_mountain_scene,
        Archetype.DESERT: build_desert_scene,
        Archetype.SPACE: build_space_scene,
        Archetype.NEON_STUDIO: build_neon_studio_scene,
        Archetype.MEADOW: build_meadow_scene,
        Archetype.GENERIC_SCENE: build_generic_scene,
    }
)


def build_scene(plan: Plan, ids: IdAllocator | None = None) -> GeneratorResult | None:
    builder = SCENE_BUILDERS.get(plan.archetype)
    if builder is None:
        return None
    return builder(plan, ids or IdAllocator())


__all__ = [
    "SCENE_BUILDERS",
    "build_city_scene",
    "build_desert_scene",
    "build_forest_scene",
    "build_generic_scene",
    "build_meadow_scene",
    "build_mountain_scene",
    "build_neon_studio_scene",
    "build_ocean_scene",
    "build_scene",
    "build_space_scene",
    "build_sunset_scene",
]
