from __future__ import annotations

from enum import Enum


class Archetype(str, Enum):
    SUNSET = "sunset"
    OCEAN = "ocean"
    CITY = "city"
    FOREST = "forest"
    MOUNTAIN = "mountain"
    DESERT = "desert"
    SPACE = "space"
    NEON_STUDIO = "neon-studio"
    MEADOW = "meadow"
    GENERIC_SCENE = "generic-scene"
    CHARACTER = "character"
    BASIC = "basic"


class MotionPreset(str, Enum):
    WALK = "walk"
    WAVE = "wave"
    IDLE = "idle"
    BOUNCE = "bounce"
    SPIN = "spin"
    PULSE = "pulse"
    NONE = "none"


class Style(str, Enum):
    NEON = "neon"
    PASTEL = "pastel"
    MINIMAL = "minimal"
    BOLD = "bold"
    OUTLINE = "outline"
    FLAT = "flat"
    DEFAULT = "default"


class Layout(str, Enum):
    ROW = "row"
    COLUMN = "column"
    GRID = "grid"


class Weather(str, Enum):
    RAIN = "rain"
    SNOW = "snow"
    NONE = "none"


__all__ = ["Archetype", "Layout", "MotionPreset", "Style", "Weather"]
