"""Procedural SVG path data, centred on the local origin."""

from __future__ import annotations

import math


def _num(value: float) -> str:
    text = ("%.2f" % value).rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def _pt(x: float, y: float) -> str:
    return f"{_num(x)},{_num(y)}"


def blob_path(radius: float = 80, lobes: int = 6) -> str:
    points = []
    for index in range(max(0, lobes)):
        angle = math.pi * 2 * index / lobes
        r = radius * (1 + 0.18 * math.sin(angle * 2))
        points.append((math.cos(angle) * r, math.sin(angle) * r))
    if not points:
        return "M0,0"

    parts = [f"M{_pt(*points[0])}"]
    for index, (cx, cy) in enumerate(points):
        nx, ny = points[(index + 1) % len(points)]
        parts.append(f"Q{_pt(cx, cy)} {_pt((cx + nx) / 2, (cy + ny) / 2)}")
    parts.append("Z")
    return " ".join(parts)


def wave_path(width: float = 300, amplitude: float = 30, cycles: int = 2) -> str:
    segments = max(1, cycles) * 2
    segment_width = width / segments
    x = -width / 2
    parts = [f"M{_pt(x, 0)}"]
    for index in range(segments):
        control_y = -amplitude if index % 2 == 0 else amplitude
        end_x = x + segment_width
        parts.append(f"Q{_pt(x + segment_width / 2, control_y)} {_pt(end_x, 0)}")
        x = end_x
    return " ".join(parts)


def spiral_path(turns: float = 3, radius: float = 120, points: int = 60) -> str:
    total = max(12, points)
    parts = ["M0,0"]
    for index in range(total + 1):
        t = index / total
        angle = turns * math.pi * 2 * t
        parts.append(f"L{_pt(math.cos(angle) * radius * t, math.sin(angle) * radius * t)}")
    return " ".join(parts)


def heart_path(size: float = 120) -> str:
    s = size / 2
    return (
        f"M{_pt(0, s * 0.35)} "
        f"C{_pt(s * -0.9, s * -0.6)} {_pt(s * -1.6, s * 0.6)} {_pt(0, s * 1.4)} "
        f"C{_pt(s * 1.6, s * 0.6)} {_pt(s * 0.9, s * -0.6)} {_pt(0, s * 0.35)} Z"
    )


def star_path(points: int = 5, outer_radius: float = 80, inner_radius: float = 35) -> str:
    points = max(2, points)
    step = math.pi / points
    parts = []
    for index in range(points * 2):
        r = outer_radius if index % 2 == 0 else inner_radius
        angle = index * step - math.pi / 2
        parts.append(f"{'M' if index == 0 else 'L'}{_pt(math.cos(angle) * r, math.sin(angle) * r)}")
    parts.append("Z")
    return " ".join(parts)


def zigzag_path(width: float, height: float, peaks: int = 6) -> str:
    """Open polyline spanning half the width, alternating above and below the axis."""
    peaks = max(3, peaks)
    half = width * 0.25
    step = (half * 2) / (peaks - 1)
    parts = [f"M{_pt(-half, 0)}"]
    for index in range(1, peaks - 1):
        y = -height * 0.08 if index % 2 else height * 0.08
        parts.append(f"L{_pt(-half + step * index, y)}")
    parts.append(f"L{_pt(half, 0)}")
    return " ".join(parts)


def mountain_path(width: float = 800, height: float = 200) -> str:
    half = width / 2
    ridge = (
        (-half, height * 0.6),
        (-half * 0.6, height * 0.15),
        (-half * 0.1, height * 0.65),
        (half * 0.1, height * 0.2),
        (half * 0.6, height * 0.7),
        (half, height * 0.4),
        (half, height),
        (-half, height),
    )
    head, *rest = ridge
    return " ".join([f"M{_pt(*head)}"] + [f"L{_pt(*point)}" for point in rest] + ["Z"])


def cloud_path(width: float = 200, height: float = 80) -> str:
    w, h = width, height
    return (
        f"M{_pt(-w * 0.35, h * 0.2)} "
        f"C{_pt(-w * 0.55, h * -0.1)} {_pt(-w * 0.15, h * -0.4)} {_pt(0, h * -0.1)} "
        f"C{_pt(w * 0.05, h * -0.45)} {_pt(w * 0.45, h * -0.35)} {_pt(w * 0.4, h * -0.05)} "
        f"C{_pt(w * 0.6, h * 0.05)} {_pt(w * 0.55, h * 0.4)} {_pt(w * 0.2, h * 0.35)} "
        f"L{_pt(-w * 0.35, h * 0.35)} Z"
    )


def dune_path(width: float = 800, height: float = 120) -> str:
    half = width / 2
    return (
        f"M{_pt(-half, height)} "
        f"Q{_pt(-half * 0.5, height * 0.2)} {_pt(0, height * 0.6)} "
        f"T{_pt(half, height * 0.4)} "
        f"L{_pt(half, height)} Z"
    )


__all__ = [
    "blob_path",
    "cloud_path",
    "dune_path",
    "heart_path",
    "mountain_path",
    "spiral_path",
    "star_path",
    "wave_path",
    "zigzag_path",
]
