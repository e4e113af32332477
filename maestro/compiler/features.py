from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

POSITION_PADDING = 40
MAX_COUNT = 12


def _words(*alternatives: str) -> re.Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", re.IGNORECASE)


KEYWORD_PATTERNS: Mapping[str, re.Pattern[str]] = MappingProxyType(
    {
        # creation
        "add": _words("add", "create", "draw", "insert", "generate"),
        "makeA": _words(r"make (?:a|an|another|new)"),
        "new": _words("new"),
        "draw": _words("draw", "sketch", "trace"),
        # animation
        "animate": _words("animate", "animation", "loop", "motion"),
        "loop": _words("loop", "repeat", "seamless"),
        "play": _words("play", "start"),
        "pause": _words("pause", "stop"),
        "bounce": _words("bounce", "bouncy", "jump"),
        "dance": _words("dance", "groove"),
        "spin": _words("spin", "rotate", "twirl"),
        "pulse": _words("pulse", "pulsate", "throb"),
        "fade": _words("fade", "fading", "fades"),
        "move": _words("move", "travel", "slide", "across"),
        "walk": _words("walk", "walks", "walking", "stroll"),
        "run": _words("run", "running", "sprint"),
        "wave": _words("wave", "waves", "waving"),
        "idle": _words("idle", "breathing", "still"),
        "float": _words("float", "drift", "hover"),
        # camera
        "pan": _words("pan", "panning"),
        "zoom": _words("zoom", "zooming"),
        "camera": _words("camera", "cinematic", "shot"),
        "kenBurns": _words("ken burns", "pan and zoom", "pan", "zoom"),
        "parallax": _words("parallax", "depth"),
        "glow": _words("glow", "glowing", "neon"),
        # direction and picking
        "left": _words("left"),
        "right": _words("right"),
        "up": _words("up", "top"),
        "down": _words("down", "bottom"),
        "center": _words("center", "centre", "middle"),
        "leftmost": _words("leftmost"),
        "rightmost": _words("rightmost"),
        "topmost": _words("topmost"),
        "bottommost": _words("bottommost"),
        "largest": _words("largest", "biggest"),
        "smallest": _words("smallest", "tiny"),
        "small": _words("small"),
        "large": _words("large"),
        # layering
        "background": _words("background", "bg"),
        "foreground": _words("foreground", "front"),
        "subject": _words("subject", "person", "main"),
        "existing": _words("existing", "current", "selected"),
        "all": _words("all", "everything", "entire"),
        # scenes
        "scene": _words("scene", "landscape", "environment"),
        "sunset": _words("sunset", "sunrise", "dawn", "dusk"),
        "ocean": _words("ocean", "sea", "beach"),
        "city": _words("city", "buildings", "skyline"),
        "forest": _words("forest", "woods", "trees", "pine"),
        "mountain": _words("mountain", "mountains", "hills", "peaks"),
        "desert": _words("desert", "dunes", "cactus"),
        "space": _words("space", "galaxy", "cosmos", "nebula"),
        "studio": _words("studio", "room", "stage", "interior"),
        "neon": _words("neon", "cyberpunk", "synth"),
        "night": _words("night", "midnight", "nighttime"),
        "snow": _words("snow", "winter", "frost"),
        "rain": _words("rain", "storm", "thunder"),
        "clouds": _words("cloud", "clouds"),
        "stars": _words("stars", "starry", "starlit"),
        "moon": _words("moon"),
        "river": _words("river", "stream"),
        "lake": _words("lake"),
        "meadow": _words("meadows?", "fields", "grass(?:land|y)?"),
        # subjects
        "character": _words("character", "person", "human", "rider", "girl", "boy", "man", "woman"),
        "robot": _words("robot", "android", "bot"),
        "animal": _words("animal", "cat", "dog", "bird", "horse", "fox", "owl", "wolf"),
        # shapes
        "circle": _words("circles?", "balls?", "orbs?"),
        "rect": _words("rects?", "rectangles?", "squares?", "box(?:es)?"),
        "text": _words("text", "title", "label"),
        "path": _words("path", "curve", "bezier", "vector"),
        "blob": _words("blob", "goo", "amoeba"),
        "wavePath": _words("wave", "waves", "sine"),
        "spiral": _words("spiral", "swirl", "twist"),
        "heart": _words("heart", "love"),
        "starShape": _words("star", "sparkle"),
        "polygon": _words("polygon", "triangle", "hexagon", "octagon"),
        "zigzag": _words("zigzag", "zig-zag"),
        # styling
        "stroke": _words("stroke", "outline", "border"),
        "fill": _words("fill"),
        "bigger": _words("bigger", "larger", "increase", "grow"),
        "smaller": _words("smaller", "decrease", "shrink"),
        "grid": _words("grid"),
        "column": _words("column", "vertical"),
        "row": _words("row", "horizontal"),
        "gradient": _words("gradient", "ombre"),
        "pastel": _words("pastel", "soft"),
        "bold": _words("bold", "thick", "chunky"),
        "minimal": _words("minimal", "clean", "simple"),
        "flat": _words("flat", "2d"),
        "outline": _words("outline", "lineart", "wireframe"),
        "dark": _words("dark", "night", "moody"),
        "light": _words("light", "bright"),
        # photo
        "photo": _words("photo", "photograph", "image", "picture", "portrait", "selfie"),
        "silhouette": _words("silhouette", "cutout"),
        "boundingBox": _words("bounding box", "bbox", "selection box"),
        "textOnPath": _words("text on path", "text along", "label along", "type on path"),
    }
)

COLOR_MAP: Mapping[str, str] = MappingProxyType(
    {
        "red": "#ef4444",
        "blue": "#3b82f6",
        "green": "#22c55e",
        "yellow": "#facc15",
        "orange": "#f97316",
        "purple": "#a855f7",
        "pink": "#ec4899",
        "teal": "#14b8a6",
        "cyan": "#06b6d4",
        "indigo": "#6366f1",
        "slate": "#64748b",
        "gray": "#9ca3af",
        "brown": "#92400e",
        "beige": "#f5f5dc",
        "cream": "#fff7d6",
        "navy": "#0f172a",
        "magenta": "#d946ef",
        "gold": "#f59e0b",
        "silver": "#cbd5f5",
        "black": "#0f172a",
        "white": "#f8fafc",
    }
)
_COLOR_PATTERNS = tuple((name, _words(name)) for name in COLOR_MAP)

NUMBER_WORDS: Mapping[str, int] = MappingProxyType(
    {
        "one": 1,
        "two": 2,
        "three": 3,
        "four": 4,
        "five": 5,
        "six": 6,
        "seven": 7,
        "eight": 8,
        "nine": 9,
        "ten": 10,
        "couple": 2,
        "pair": 2,
        "few": 3,
    }
)
_NUMBER_WORD_PATTERNS = tuple((word, _words(word)) for word in NUMBER_WORDS)

_NUM = r"(\d+(?:\.\d+)?)"
HEX_RE = re.compile(r"#([0-9a-f]{3,8})\b", re.IGNORECASE)
PERCENT_RE = re.compile(r"(\d{1,3})\s*%")
OPACITY_RE = re.compile(r"opacity\s*([0-9]*\.?[0-9]+)")
STROKE_WIDTH_RE = re.compile(r"\b(?:stroke|outline|border)\s*" + _NUM + r"\b")
COUNT_RE = re.compile(r"(\d+)\s*(?:circles?|rectangles?|squares?|shapes?|objects?|items?)")
FONT_SIZE_RE = re.compile(r"\b(?:font\s*size|size)\s*" + _NUM + r"\b")
DURATION_RE = re.compile(r"\b(?:duration|length)\s*" + _NUM + r"\b")
SECONDS_RE = re.compile(r"\b" + _NUM + r"\s*(?:s|sec|secs|seconds)\b")
SPEED_RE = re.compile(r"\b(?:speed|playback)\s*" + _NUM + r"\b")
MULTIPLIER_RE = re.compile(r"\b" + _NUM + r"x\b")
# single quotes only count at word edges so apostrophes never pair up
QUOTED_RE = re.compile(r"\"([^\"]+)\"|(?<!\w)'([^']+)'(?!\w)")
TEXT_TOKEN_RE = re.compile(r"\b(?:text|title|label)\b\s+(.+)")
TRAILING_CLAUSE_RE = re.compile(r"\b(?:with|in|on|at)\b.*$")
RADIUS_RE = re.compile(r"\b(?:radius|r)\s*" + _NUM + r"\b")
WIDTH_RE = re.compile(r"\bwidth\s*" + _NUM + r"\b")
HEIGHT_RE = re.compile(r"\bheight\s*" + _NUM + r"\b")
SQUARE_RE = re.compile(r"\bsquare\s*" + _NUM + r"\b")

DIRECTION_FLAGS = ("left", "right", "up", "down")


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def normalize_text(text: Any) -> str:
    return str(text or "").lower().strip()


def detect_keywords(text: str) -> Mapping[str, bool]:
    normalized = normalize_text(text)
    return MappingProxyType({name: bool(pattern.search(normalized)) for name, pattern in KEYWORD_PATTERNS.items()})


def extract_hex_colors(text: str) -> list[str]:
    seen: list[str] = []
    for match in HEX_RE.finditer(text or ""):
        value = f"#{match.group(1).lower()}"
        if value not in seen:
            seen.append(value)
    return seen


def extract_named_colors(text: str) -> list[str]:
    hits: list[str] = []
    for name, pattern in _COLOR_PATTERNS:
        value = COLOR_MAP[name]
        if pattern.search(text or "") and value not in hits:
            hits.append(value)
    return hits


def extract_color(text: str) -> str | None:
    match = HEX_RE.search(text or "")
    if match:
        return f"#{match.group(1)}"
    named = extract_named_colors(text)
    return named[0] if named else None


def extract_opacity(text: str) -> float | None:
    normalized = normalize_text(text)
    if re.search(r"\btransparent\b", normalized):
        return 0.2
    percent = PERCENT_RE.search(normalized)
    if percent:
        return clamp(int(percent.group(1)), 0, 100) / 100
    explicit = OPACITY_RE.search(normalized)
    if explicit:
        value = float(explicit.group(1))
        if value > 1:
            value = clamp(value, 0, 100) / 100
        return clamp(value, 0, 1)
    return None


def _first_number(text: str, *patterns: re.Pattern[str]) -> float | None:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return float(match.group(1))
    return None


def extract_stroke_width(text: str) -> float | None:
    return _first_number(normalize_text(text), STROKE_WIDTH_RE)


def extract_count(text: str) -> int:
    normalized = normalize_text(text)
    match = COUNT_RE.search(normalized)
    if match:
        return int(clamp(int(match.group(1)), 1, MAX_COUNT))
    for word, pattern in _NUMBER_WORD_PATTERNS:
        if pattern.search(normalized):
            return int(clamp(NUMBER_WORDS[word], 1, MAX_COUNT))
    return 1


def extract_font_size(text: str) -> float | None:
    return _first_number(normalize_text(text), FONT_SIZE_RE)


def extract_duration(text: str) -> float | None:
    return _first_number(normalize_text(text), DURATION_RE, SECONDS_RE)


def extract_playback_speed(text: str) -> float | None:
    return _first_number(normalize_text(text), SPEED_RE, MULTIPLIER_RE)


def extract_text_content(text: str) -> str | None:
    quoted = QUOTED_RE.search(text or "")
    if quoted:
        content = (quoted.group(1) or quoted.group(2) or "").strip()
        if content:
            return content
    token = TEXT_TOKEN_RE.search(normalize_text(text))
    if token:
        content = TRAILING_CLAUSE_RE.sub("", token.group(1)).strip()
        return content or None
    return None


def _artboard_dims(artboard: Any) -> tuple[float, float]:
    if isinstance(artboard, Mapping):
        return float(artboard.get("width", 800)), float(artboard.get("height", 600))
    return float(getattr(artboard, "width", 800)), float(getattr(artboard, "height", 600))


@dataclass(frozen=True)
class FeatureSet:
    text: str
    raw_text: str
    flags: Mapping[str, bool] = field(default_factory=lambda: MappingProxyType({}))
    color: str | None = None
    opacity: float | None = None
    stroke_width: float | None = None
    count: int = 1
    text_content: str | None = None
    font_size: float | None = None
    duration: float | None = None
    playback_speed: float | None = None

    def has(self, *names: str) -> bool:
        return any(self.flags.get(name, False) for name in names)

    def __getitem__(self, name: str) -> bool:
        return self.flags.get(name, False)

    @property
    def has_direction(self) -> bool:
        return self.has(*DIRECTION_FLAGS)

    def explicit_size(self, kind: str, artboard: Any) -> dict[str, float]:
        """Sizes the request actually asks for; empty when it names none."""
        width, height = _artboard_dims(artboard)
        min_dim = min(width, height)
        if kind == "circle":
            radius = _first_number(self.text, RADIUS_RE)
            if radius is not None:
                return {"r": radius}
            if self["small"]:
                return {"r": min_dim * 0.06}
            if self["large"]:
                return {"r": min_dim * 0.18}
            return {}
        if kind in {"rect", "image"}:
            square = _first_number(self.text, SQUARE_RE)
            if square is not None:
                return {"width": square, "height": square}
            explicit: dict[str, float] = {}
            explicit_width = _first_number(self.text, WIDTH_RE)
            explicit_height = _first_number(self.text, HEIGHT_RE)
            if explicit_width is not None:
                explicit["width"] = explicit_width
            if explicit_height is not None:
                explicit["height"] = explicit_height
            if explicit:
                return explicit
            base = min_dim * 0.18
            if self["small"]:
                return {"width": base, "height": base * 0.7}
            if self["large"]:
                return {"width": base * 2, "height": base * 1.2}
        return {}

    def size_for(self, kind: str, artboard: Any) -> dict[str, float]:
        width, height = _artboard_dims(artboard)
        min_dim = min(width, height)
        size = self.explicit_size(kind, artboard)
        if kind == "circle":
            size.setdefault("r", min_dim * 0.1)
        elif kind in {"rect", "image"}:
            base = min_dim * 0.18
            size.setdefault("width", base * 1.4)
            size.setdefault("height", base)
        return size


def extract_features(text: Any) -> FeatureSet:
    raw = str(text or "")
    return FeatureSet(
        text=normalize_text(raw),
        raw_text=raw,
        flags=detect_keywords(raw),
        color=extract_color(raw),
        opacity=extract_opacity(raw),
        stroke_width=extract_stroke_width(raw),
        count=extract_count(raw),
        text_content=extract_text_content(raw),
        font_size=extract_font_size(raw),
        duration=extract_duration(raw),
        playback_speed=extract_playback_speed(raw),
    )


def resolve_position(
    kind: str,
    artboard: Any,
    size: Mapping[str, float],
    flags: Mapping[str, bool] | FeatureSet,
    current: tuple[float, float] | None = None,
) -> tuple[float, float]:
    """Place an element against the artboard edges.

    Opposing directions resolve first-match: left wins over right and up
    over down. Rects are positioned by their top-left corner, everything
    else by its centre.
    """
    width, height = _artboard_dims(artboard)
    x, y = current if current is not None else (width * 0.5, height * 0.5)
    radius = float(size.get("r", 0) or 0)
    box_w = float(size.get("width", radius * 2) or 0)
    box_h = float(size.get("height", radius * 2) or 0)
    is_rect = kind == "rect"

    def flag(name: str) -> bool:
        return bool(flags[name]) if isinstance(flags, FeatureSet) else bool(flags.get(name, False))

    if flag("center"):
        x = (width - box_w) / 2 if is_rect else width / 2
        y = (height - box_h) / 2 if is_rect else height / 2

    if flag("left"):
        x = POSITION_PADDING if is_rect else POSITION_PADDING + radius
    elif flag("right"):
        x = width - box_w - POSITION_PADDING if is_rect else width - POSITION_PADDING - radius

    if flag("up"):
        y = POSITION_PADDING if is_rect else POSITION_PADDING + radius
    elif flag("down"):
        y = height - box_h - POSITION_PADDING if is_rect else height - POSITION_PADDING - radius

    return x, y


__all__ = [
    "COLOR_MAP",
    "FeatureSet",
    "KEYWORD_PATTERNS",
    "NUMBER_WORDS",
    "clamp",
    "detect_keywords",
    "extract_color",
    "extract_count",
    "extract_duration",
    "extract_features",
    "extract_font_size",
    "extract_hex_colors",
    "extract_named_colors",
    "extract_opacity",
    "extract_playback_speed",
    "extract_stroke_width",
    "extract_text_content",
    "normalize_text",
    "resolve_position",
]
