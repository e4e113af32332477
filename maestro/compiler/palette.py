from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from maestro.compiler.elements import linear_gradient, radial_gradient
from maestro.compiler.features import extract_hex_colors, extract_named_colors
from maestro.compiler.intents import Archetype, Style

if TYPE_CHECKING:
    from maestro.compiler.planner import Plan

MAX_PALETTE = 6
GENERIC_PALETTE: tuple[str, ...] = ("#3b82f6", "#22c55e", "#f97316")

DEFAULT_PALETTES: Mapping[Archetype, tuple[str, ...]] = MappingProxyType(
    {
        Archetype.SUNSET: ("#f97316", "#fbbf24", "#fb7185", "#0f172a"),
        Archetype.OCEAN: ("#0ea5e9", "#38bdf8", "#0f172a", "#f8fafc"),
        Archetype.CITY: ("#0f172a", "#1f2937", "#38bdf8", "#f8fafc"),
        Archetype.FOREST: ("#065f46", "#16a34a", "#a3e635", "#0f172a"),
        Archetype.MOUNTAIN: ("#334155", "#64748b", "#e2e8f0", "#0f172a"),
        Archetype.DESERT: ("#f59e0b", "#fbbf24", "#f97316", "#1f2937"),
        Archetype.SPACE: ("#0b1020", "#312e81", "#38bdf8", "#f472b6"),
        Archetype.NEON_STUDIO: ("#0b1020", "#22d3ee", "#a855f7", "#f472b6"),
        Archetype.MEADOW: ("#16a34a", "#4ade80", "#fde047", "#1f2937"),
        Archetype.GENERIC_SCENE: ("#0f172a", "#38bdf8", "#facc15", "#22c55e"),
        Archetype.BASIC: GENERIC_PALETTE,
    }
)
GRADIENT_STYLES = (Style.NEON, Style.PASTEL)


def resolve_palette(text: str, fallback: Sequence[str] | None = None) -> tuple[str, ...]:
    """Every color named in `text`, hex codes first, deduplicated, at most six."""
    unique: list[str] = []
    for color in extract_hex_colors(text) + extract_named_colors(text):
        lowered = color.lower()
        if lowered not in unique:
            unique.append(lowered)
    if unique:
        return tuple(unique[:MAX_PALETTE])
    if fallback:
        return tuple(fallback)[:MAX_PALETTE]
    return GENERIC_PALETTE


def default_palette(archetype: Archetype) -> tuple[str, ...]:
    return DEFAULT_PALETTES.get(archetype, GENERIC_PALETTE)


def pick(palette: Sequence[str], index: int, default: str) -> str:
    if 0 <= index < len(palette):
        return palette[index]
    return default


def background_fill(plan: "Plan", palette: Sequence[str], gradient_id: str, angle: float = 90) -> Any:
    if plan.features["gradient"] or plan.style in GRADIENT_STYLES:
        return linear_gradient(gradient_id, list(palette), angle)
    return palette[0]


def accent_fill(plan: "Plan", palette: Sequence[str], gradient_id: str) -> Any:
    if plan.features["gradient"] and len(palette) > 1:
        return radial_gradient(gradient_id, list(reversed(palette)))
    return palette[-1]


__all__ = [
    "DEFAULT_PALETTES",
    "GENERIC_PALETTE",
    "accent_fill",
    "background_fill",
    "default_palette",
    "pick",
    "resolve_palette",
]
