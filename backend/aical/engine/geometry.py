"""Leaf-node curve sampling helpers. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

# Samples per curve segment. 24 keeps the largest card glyph (60px at 4K)
# free of visible facets.
_CURVE_SAMPLES = 24

Point = tuple[float, float]


def quadratic_bezier(p0: Point, p1: Point, p2: Point, samples: int = _CURVE_SAMPLES) -> NDArray[np.float64]:
    """Sample a quadratic Bezier into an (N, 2) array, endpoints included."""
    t = np.linspace(0.0, 1.0, samples)[:, None]
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2))
    return (1 - t) ** 2 * a + 2 * (1 - t) * t * b + t**2 * c


def cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point, samples: int = _CURVE_SAMPLES) -> NDArray[np.float64]:
    """Sample a cubic Bezier into an (N, 2) array, endpoints included."""
    t = np.linspace(0.0, 1.0, samples)[:, None]
    a, b, c, d = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    return (1 - t) ** 3 * a + 3 * (1 - t) ** 2 * t * b + 3 * (1 - t) * t**2 * c + t**3 * d


def ellipse_points(
    cx: float,
    cy: float,
    rx: float,
    ry: float,
    rotation: float = 0.0,
    start: float = 0.0,
    end: float = 2 * np.pi,
    samples: int = _CURVE_SAMPLES * 2,
) -> NDArray[np.float64]:
    """Points on a (possibly rotated) ellipse arc, angles in radians."""
    theta = np.linspace(start, end, samples)
    x = rx * np.cos(theta)
    y = ry * np.sin(theta)
    cos_r, sin_r = np.cos(rotation), np.sin(rotation)
    return np.column_stack((cx + x * cos_r - y * sin_r, cy + x * sin_r + y * cos_r))


def join_paths(*segments: NDArray[np.float64]) -> NDArray[np.float64]:
    """Concatenate consecutive segments, dropping each duplicated joint point."""
    parts = [segments[0]] + [seg[1:] for seg in segments[1:]]
    return np.vstack(parts)


def as_xy(points: NDArray[np.float64]) -> list[Point]:
    return [(float(x), float(y)) for x, y in points]
