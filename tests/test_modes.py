import math

import numpy as np
import pytest

from sdfrender.modes import (
    BitRenderMode,
    DebugPixel,
    DebugRenderMode,
    Interval,
    RenderMode,
    SdfRenderMode,
    Shape,
)


class Sphere(Shape):
    def __init__(self, radius=1.0):
        self.radius = radius

    def interval(self, x, y, z):
        corners = [
            math.sqrt(a * a + b * b + c * c)
            for a in (x.lower, x.upper)
            for b in (y.lower, y.upper)
            for c in (z.lower, z.upper)
        ]

        def closest(i):
            return 0.0 if i.lower <= 0.0 <= i.upper else min(abs(i.lower), abs(i.upper))

        near = math.sqrt(closest(x) ** 2 + closest(y) ** 2 + closest(z) ** 2)
        return Interval(near - self.radius, max(corners) - self.radius)

    def values(self, xs, ys, zs):
        xs, ys, zs = (np.asarray(a, dtype=float) for a in (xs, ys, zs))
        return np.sqrt(xs**2 + ys**2 + zs**2) - self.radius


class Flat(Shape):
    def interval(self, x, y, z):
        return Interval(2.0, 2.0)

    def values(self, xs, ys, zs):
        return np.full(np.asarray(xs).shape, 2.0)


def test_interval_rejects_reversed_bounds():
    with pytest.raises(ValueError):
        Interval(1.0, -1.0)


def test_interval_holds_bounds():
    i = Interval(-1.0, 2.0)
    assert (i.lower, i.upper) == (-1.0, 2.0)


def test_shape_is_abstract():
    with pytest.raises(TypeError):
        Shape()


def test_render_mode_is_abstract():
    with pytest.raises(TypeError):
        RenderMode()


def test_sphere_interval_contains_values():
    shape = Sphere()
    box = Interval(0.2, 0.9)
    bound = shape.interval(box, box, Interval(0.0, 0.0))
    samples = np.linspace(0.2, 0.9, 11)
    xs, ys = np.meshgrid(samples, samples)
    vals = shape.values(xs.ravel(), ys.ravel(), np.zeros(xs.size))
    assert bound.lower <= vals.min()
    assert vals.max() <= bound.upper


def test_gradient_colors_zero_gradient_is_red():
    colors = Shape.gradient_colors(Flat(), [0.0, 1.0], [0.0, 1.0], [0.0, 1.0])
    assert colors.tolist() == [[255, 0, 0], [255, 0, 0]]


def test_gradient_colors_follow_normal():
    colors = Shape.gradient_colors(
        Sphere(), [1.0, -1.0, 0.0], [0.0, 0.0, 0.0], [0.0, 0.0, 1.0]
    )
    assert colors.shape == (3, 3)
    assert colors.dtype == np.uint8
    plus_x, minus_x, plus_z = colors.tolist()
    assert plus_x[0] > plus_x[1]
    assert plus_x[1] == plus_x[2]
    assert minus_x[0] < minus_x[1]
    assert plus_z[2] > plus_z[0]
    assert plus_z[0] == plus_z[1]


def test_debug_pixel_colors():
    assert DebugPixel.EMPTY_TILE.as_debug_color() == (50, 0, 0, 255)
    assert DebugPixel.FILLED_TILE.as_debug_color() == (255, 0, 0, 255)
    assert DebugPixel.EMPTY_SUBTILE.as_debug_color() == (0, 50, 0, 255)
    assert DebugPixel.FILLED_SUBTILE.as_debug_color() == (0, 255, 0, 255)
    assert DebugPixel.EMPTY.as_debug_color() == (0, 0, 0, 255)
    assert DebugPixel.FILLED.as_debug_color() == (255, 255, 255, 255)


@pytest.mark.parametrize(
    "pixel, expected",
    [
        (DebugPixel.EMPTY_TILE, False),
        (DebugPixel.FILLED_TILE, True),
        (DebugPixel.EMPTY_SUBTILE, False),
        (DebugPixel.FILLED_SUBTILE, True),
        (DebugPixel.EMPTY, False),
        (DebugPixel.FILLED, True),
    ],
)
def test_debug_pixel_filled(pixel, expected):
    assert DebugPixel.is_filled(pixel) is expected


def test_invalid_debug_pixel_raises():
    with pytest.raises(ValueError):
        DebugPixel.INVALID.as_debug_color()
    with pytest.raises(ValueError):
        DebugPixel.INVALID.is_filled()


@pytest.mark.parametrize(
    "interval, depth, expected",
    [
        (Interval(-2.0, -1.0), 0, DebugPixel.FILLED_TILE),
        (Interval(-2.0, -1.0), 1, DebugPixel.FILLED_TILE),
        (Interval(-2.0, -1.0), 2, DebugPixel.FILLED_SUBTILE),
        (Interval(1.0, 2.0), 1, DebugPixel.EMPTY_TILE),
        (Interval(1.0, 2.0), 3, DebugPixel.EMPTY_SUBTILE),
        (Interval(-1.0, 1.0), 0, None),
    ],
)
def test_debug_mode_interval(interval, depth, expected):
    assert DebugRenderMode().interval(interval, depth) is expected


def test_debug_mode_pixel_and_empty():
    mode = DebugRenderMode()
    assert mode.pixel(-0.5) is DebugPixel.FILLED
    assert mode.pixel(0.5) is DebugPixel.EMPTY
    assert mode.pixel(0.0) is DebugPixel.EMPTY
    assert mode.empty() is DebugPixel.INVALID


@pytest.mark.parametrize(
    "interval, expected",
    [
        (Interval(-2.0, -1.0), True),
        (Interval(1.0, 2.0), False),
        (Interval(-1.0, 1.0), None),
        (Interval(0.0, 1.0), None),
    ],
)
def test_bit_mode_interval(interval, expected):
    assert BitRenderMode().interval(interval, 0) is expected


def test_bit_mode_pixel_and_empty():
    mode = BitRenderMode()
    assert mode.pixel(-1e-6) is True
    assert mode.pixel(0.0) is False
    assert mode.empty() is False


def test_sdf_mode_always_recurses():
    mode = SdfRenderMode()
    assert mode.interval(Interval(-5.0, -4.0), 0) is None
    assert mode.interval(Interval(4.0, 5.0), 2) is None
    assert mode.empty() == (0, 0, 0)


def test_sdf_mode_white_on_surface():
    assert SdfRenderMode().pixel(0.0) == (255, 255, 255)


@pytest.mark.parametrize("f", [0.05, 0.2, 0.7, 1.5, 3.0])
def test_sdf_mode_outside_orders_channels(f):
    r, g, b = SdfRenderMode().pixel(f)
    assert r >= g >= b
    assert all(0 <= c <= 255 for c in (r, g, b))


@pytest.mark.parametrize("f", [-0.05, -0.2, -0.7, -1.5, -3.0])
def test_sdf_mode_inside_orders_channels(f):
    r, g, b = SdfRenderMode().pixel(f)
    assert r <= g <= b
    assert all(0 <= c <= 255 for c in (r, g, b))


def test_sdf_mode_nan_is_black():
    assert SdfRenderMode().pixel(float("nan")) == (0, 0, 0)