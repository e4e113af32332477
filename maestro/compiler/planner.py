from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from maestro.compiler.features import FeatureSet, extract_features
from maestro.compiler.intents import Archetype, Layout, MotionPreset, Style, Weather
from maestro.compiler.palette import default_palette, resolve_palette
from maestro.config.compiler_config import CompilerPolicy, default_policy
from maestro.protocol.models import Artboard, ElementDescriptor, ElementKind, GenerateRequest

logger = logging.getLogger("maestro.planner")

MIN_DURATION_S = 2.0

SCENE_FLAGS = (
    "scene",
    "sunset",
    "ocean",
    "city",
    "forest",
    "mountain",
    "desert",
    "space",
    "studio",
    "neon",
    "night",
    "snow",
    "rain",
    "clouds",
    "stars",
    "moon",
    "meadow",
    "lake",
    "river",
)
CHARACTER_FLAGS = ("character", "robot", "animal")
PATH_FLAGS = ("path", "blob", "spiral", "heart", "starShape", "polygon", "zigzag")
CAMERA_FLAGS = ("camera", "pan", "zoom", "kenBurns", "parallax")
CREATE_FLAGS = ("add", "makeA", "new")
TIER2_FLAGS = ("subject", "boundingBox", "foreground", "background")

# Ordered first-match-wins tables: (result, flags that select it).
ARCHETYPE_RULES: tuple[tuple[Archetype, tuple[str, ...]], ...] = (
    (Archetype.SUNSET, ("sunset",)),
    (Archetype.OCEAN, ("ocean",)),
    (Archetype.CITY, ("city",)),
    (Archetype.FOREST, ("forest",)),
    (Archetype.MOUNTAIN, ("mountain",)),
    (Archetype.DESERT, ("desert",)),
    (Archetype.SPACE, ("space",)),
    (Archetype.NEON_STUDIO, ("studio", "neon")),
    (Archetype.MEADOW, ("meadow",)),
)
MOTION_RULES: tuple[tuple[MotionPreset, tuple[str, ...]], ...] = (
    (MotionPreset.WALK, ("walk",)),
    (MotionPreset.WAVE, ("wave",)),
    (MotionPreset.IDLE, ("idle", "float")),
    (MotionPreset.BOUNCE, ("bounce",)),
    (MotionPreset.SPIN, ("spin",)),
    (MotionPreset.PULSE, ("pulse",)),
)
STYLE_RULES: tuple[tuple[Style, tuple[str, ...]], ...] = (
    (Style.NEON, ("neon",)),
    (Style.PASTEL, ("pastel",)),
    (Style.MINIMAL, ("minimal",)),
    (Style.BOLD, ("bold",)),
    (Style.OUTLINE, ("outline",)),
    (Style.FLAT, ("flat",)),
)
LAYOUT_RULES: tuple[tuple[Layout, tuple[str, ...]], ...] = (
    (Layout.GRID, ("grid",)),
    (Layout.COLUMN, ("column",)),
)
WEATHER_RULES: tuple[tuple[Weather, tuple[str, ...]], ...] = (
    (Weather.RAIN, ("rain",)),
    (Weather.SNOW, ("snow",)),
)


def first_match(rules: Iterable[tuple[Any, tuple[str, ...]]], features: FeatureSet, default: Any) -> Any:
    for result, flags in rules:
        if features.has(*flags):
            return result
    return default


@dataclass(frozen=True)
class Beat:
    start: float
    end: float

    @property
    def mid(self) -> float:
        return (self.start + self.end) / 2


@dataclass(frozen=True)
class Beats:
    intro: Beat
    action: Beat
    settle: Beat

    @classmethod
    def for_duration(cls, duration: float) -> "Beats":
        return cls(
            intro=Beat(0.0, duration * 0.25),
            action=Beat(duration * 0.25, duration * 0.8),
            settle=Beat(duration * 0.8, duration),
        )


@dataclass(frozen=True)
class Plan:
    text: str
    features: FeatureSet
    archetype: Archetype
    wants_create: bool
    wants_scene: bool
    wants_character: bool
    wants_path: bool
    wants_photo: bool
    wants_photo_tier2: bool
    motion_preset: MotionPreset
    style: Style
    layout: Layout
    camera_motion: bool
    weather: Weather
    duration: float
    beats: Beats
    palette: tuple[str, ...]
    artboard: Artboard
    selected_element: ElementDescriptor | None = None
    existing_elements: tuple[ElementDescriptor, ...] = ()
    image_href: str | None = None

    @property
    def width(self) -> float:
        return float(self.artboard.width)

    @property
    def height(self) -> float:
        return float(self.artboard.height)

    @property
    def min_dim(self) -> float:
        return min(self.width, self.height)

    def describe(self) -> dict[str, Any]:
        return {
            "archetype": self.archetype.value,
            "wants_scene": self.wants_scene,
            "wants_character": self.wants_character,
            "wants_path": self.wants_path,
            "wants_photo": self.wants_photo,
            "wants_photo_tier2": self.wants_photo_tier2,
            "motion_preset": self.motion_preset.value,
            "style": self.style.value,
            "layout": self.layout.value,
            "camera_motion": self.camera_motion,
            "weather": self.weather.value,
            "duration": self.duration,
            "palette": list(self.palette),
        }


def _coerce_request(request: GenerateRequest | Mapping[str, Any] | None) -> GenerateRequest:
    if isinstance(request, GenerateRequest):
        return request
    return GenerateRequest.model_validate(dict(request or {}))


def build_plan(request: GenerateRequest | Mapping[str, Any] | None, policy: CompilerPolicy | None = None) -> Plan:
    active = policy or default_policy()
    req = _coerce_request(request)
    features = extract_features(req.user_request)
    selected = req.element_to_animate
    existing = tuple(req.existing_elements)

    wants_scene = features.has(*SCENE_FLAGS)
    if features["existing"] and existing:
        wants_scene = False

    wants_character = features.has(*CHARACTER_FLAGS)
    selected_is_image = selected is not None and selected.type == ElementKind.IMAGE.value
    wants_photo = features["photo"] or (selected_is_image and features.has("animate", "kenBurns", "parallax"))
    wants_path = features.has(*PATH_FLAGS) or (features["wavePath"] and not wants_character)

    archetype = first_match(ARCHETYPE_RULES, features, None)
    if archetype is None:
        if wants_scene:
            archetype = Archetype.GENERIC_SCENE
        elif wants_character:
            archetype = Archetype.CHARACTER
        else:
            archetype = Archetype.BASIC

    duration = max(MIN_DURATION_S, float(req.animation_duration or active.default_duration_s))
    artboard = req.artboard or Artboard(width=active.default_artboard_width, height=active.default_artboard_height)

    plan = Plan(
        text=req.user_request,
        features=features,
        archetype=archetype,
        wants_create=features.has(*CREATE_FLAGS),
        wants_scene=wants_scene,
        wants_character=wants_character,
        wants_path=wants_path,
        wants_photo=wants_photo,
        wants_photo_tier2=wants_photo and features.has(*TIER2_FLAGS),
        motion_preset=first_match(MOTION_RULES, features, MotionPreset.NONE),
        style=first_match(STYLE_RULES, features, Style.DEFAULT),
        layout=first_match(LAYOUT_RULES, features, Layout.ROW),
        camera_motion=features.has(*CAMERA_FLAGS),
        weather=first_match(WEATHER_RULES, features, Weather.NONE),
        duration=duration,
        beats=Beats.for_duration(duration),
        palette=resolve_palette(req.user_request, default_palette(archetype)),
        artboard=artboard,
        selected_element=selected,
        existing_elements=existing,
        image_href=selected.href if selected is not None else None,
    )
    logger.debug("plan resolved: %s", plan.describe())
    return plan


__all__ = [
    "ARCHETYPE_RULES",
    "Beat",
    "Beats",
    "LAYOUT_RULES",
    "MOTION_RULES",
    "Plan",
    "STYLE_RULES",
    "WEATHER_RULES",
    "build_plan",
    "first_match",
]
