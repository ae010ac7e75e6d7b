"""Shapes, intervals and the pixel modes used for 2D rendering."""
from __future__ import annotations

import enum
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np

_GRADIENT_STEP = 1e-4
_INVALID_NORMAL_COLOR = (255, 0, 0)


@dataclass(frozen=True)
class Interval:
    """A closed range of values."""

    lower: float
    upper: float

    def __post_init__(self) -> None:
        if self.lower > self.upper:
            raise ValueError(f"invalid interval [{self.lower}, {self.upper}]")


class Shape(ABC):
    """A signed distance field: negative inside, positive outside."""

    @abstractmethod
    def interval(self, x, y, z):
        """Return an Interval bounding the field over the box ``x * y * z``."""

    @abstractmethod
    def values(self, xs, ys, zs):
        """Return the field at each point, as a 1-D float array."""

    def gradient_colors(self, xs, ys, zs):
        """Colour each point by its surface normal, as an ``(n, 3)`` uint8 array.

        Points where the gradient cannot be normalised are coloured red.
        """
        coords = [np.asarray(a, dtype=float) for a in (xs, ys, zs)]
        partials = []
        for axis in range(3):
            hi = list(coords)
            lo = list(coords)
            hi[axis] = coords[axis] + _GRADIENT_STEP
            lo[axis] = coords[axis] - _GRADIENT_STEP
            diff = np.asarray(self.values(*hi), dtype=float) - np.asarray(
                self.values(*lo), dtype=float
            )
            partials.append(diff / (2 * _GRADIENT_STEP))
        grad = np.stack(partials, axis=-1)
        with np.errstate(invalid="ignore"):
            norm = np.linalg.norm(grad, axis=-1)
            valid = np.isfinite(norm) & (norm > 0)
            unit = np.zeros_like(grad)
            np.divide(grad, norm[:, None], out=unit, where=valid[:, None])
        colors = np.clip((unit + 1.0) / 2.0 * 255.0, 0, 255).astype(np.uint8)
        colors[~valid] = _INVALID_NORMAL_COLOR
        return colors


class DebugPixel(enum.Enum):
    """Pixel kinds emitted by the debug renderer."""

    EMPTY_TILE = "empty_tile"
    FILLED_TILE = "filled_tile"
    EMPTY_SUBTILE = "empty_subtile"
    FILLED_SUBTILE = "filled_subtile"
    EMPTY = "empty"
    FILLED = "filled"
    INVALID = "invalid"

    def as_debug_color(self):
        """RGBA colour for this pixel kind."""
        if self is DebugPixel.INVALID:
            raise ValueError("invalid pixel has no color")
        return _DEBUG_COLORS[self]

    def is_filled(self):
        """Whether this pixel lies inside the shape."""
        if self is DebugPixel.INVALID:
            raise ValueError("invalid pixel is neither filled nor empty")
        return self in _FILLED


_DEBUG_COLORS = {
    DebugPixel.EMPTY_TILE: (50, 0, 0, 255),
    DebugPixel.FILLED_TILE: (255, 0, 0, 255),
    DebugPixel.EMPTY_SUBTILE: (0, 50, 0, 255),
    DebugPixel.FILLED_SUBTILE: (0, 255, 0, 255),
    DebugPixel.EMPTY: (0, 0, 0, 255),
    DebugPixel.FILLED: (255, 255, 255, 255),
}

_FILLED = frozenset(
    {DebugPixel.FILLED_TILE, DebugPixel.FILLED_SUBTILE, DebugPixel.FILLED}
)


class RenderMode(ABC):
    """Decides how tiles and pixels are coloured."""

    @abstractmethod
    def interval(self, i, depth):
        """Return a fill value for a whole tile, or None to subdivide it."""

    @abstractmethod
    def pixel(self, f):
        """Return the output value for a single field sample."""

    @abstractmethod
    def empty(self):
        """Return the value of a pixel that was never drawn."""


class DebugRenderMode(RenderMode):
    """Shows which tiles were filled by interval evaluation."""

    def interval(self, i, depth):
        if i.upper < 0.0:
            return DebugPixel.FILLED_SUBTILE if depth > 1 else DebugPixel.FILLED_TILE
        if i.lower > 0.0:
            return DebugPixel.EMPTY_SUBTILE if depth > 1 else DebugPixel.EMPTY_TILE
        return None

    def pixel(self, f):
        return DebugPixel.FILLED if f < 0.0 else DebugPixel.EMPTY

    def empty(self):
        return DebugPixel.INVALID


class BitRenderMode(RenderMode):
    """Emits True inside the shape and False outside."""

    def interval(self, i, depth):
        if i.upper < 0.0:
            return True
        if i.lower > 0.0:
            return False
        return None

    def pixel(self, f):
        return f < 0.0

    def empty(self):
        return False


def _smoothstep(edge0, edge1, x):
    t = min(max((x - edge0) / (edge1 - edge0), 0.0), 1.0)
    return t * t * (3.0 - 2.0 * t)


def _mix(x, y, a):
    return x * (1.0 - a) + y * a


class SdfRenderMode(RenderMode):
    """Banded distance-field colouring, blue-ish outside and orange-ish inside."""

    def interval(self, i, depth):
        return None

    def pixel(self, f):
        a = abs(f)
        dim = 1.0 - math.exp(-4.0 * a)
        bands = 0.8 + 0.2 * math.cos(140.0 * f)
        edge_wide = 1.0 - _smoothstep(0.0, 0.015, a)
        edge_narrow = 1.0 - _smoothstep(0.0, 0.005, a)

        def run(base):
            v = base * dim * bands
            v = _mix(v, 1.0, edge_wide)
            v = _mix(v, 1.0, edge_narrow)
            if math.isnan(v):
                return 0
            return int(min(max(v, 0.0), 1.0) * 255.0)

        return (
            run(1.0 - math.copysign(0.1, f)),
            run(1.0 - math.copysign(0.4, f)),
            run(1.0 - math.copysign(0.7, f)),
        )

    def empty(self):
        return (0, 0, 0)