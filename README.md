# sdfrender

`sdfrender` rasterizes implicit shapes (functions that are negative inside a
solid and positive outside) into 2D images and 3D depth maps, using NumPy.

Rendering is hierarchical. The image is split into tiles, and each tile is
first evaluated with interval arithmetic over its whole area (or volume). A
tile that is provably inside or outside the shape is filled in one step; only
tiles that straddle the surface are subdivided, down to per-pixel (or
per-voxel) evaluation at the smallest tile size. Tiles are shared out between
worker threads.

## Modules

- `sdfrender.config`: `RenderConfig` (image size, tile sizes, thread count,
  a homogeneous transform matrix `mat`, and `dims`, 2 or 3) and its aligned
  form, `AlignedRenderConfig`, produced by `RenderConfig.align()`. Alignment
  pads the image to a multiple of the largest tile size that fits, and builds
  a transform from pixel coordinates onto the ±1 square or cube followed by
  `mat`. `default_tile_sizes(dims)` gives `(128, 32, 8)` for 2D and
  `(128, 64, 32, 16, 8)` for 3D. `Tile` and the thread-safe `Queue` of tiles
  are also here. Invalid settings raise `ValueError`.
- `sdfrender.modes`: the `Interval` type, the `Shape` base class, and the
  2D render modes:
  - `BitRenderMode`: `True` inside the shape, `False` outside;
  - `SdfRenderMode`: an `(r, g, b)` tuple per pixel, a banded picture of the
    distance field with a bright outline at the surface;
  - `DebugRenderMode`: `DebugPixel` values showing which pixels were filled
    as whole tiles, as subtiles, or one by one (`DebugPixel.as_debug_color()`
    gives an RGBA tuple).
- `sdfrender.render2d`: `render2d(shape, config, mode)` renders a shape at
  Z = 0 and returns a flat list of `image_size * image_size` pixels, top row
  (largest Y) first.
- `sdfrender.render3d`: `render3d(shape, config)` returns `(depth, color)`:
  a flat `uint32` depth array (0 where nothing was hit, larger toward the
  viewer) and an `(n, 3)` `uint8` array coloured by surface normal.
- `sdfrender.tiles3d`: `TileRenderer` and `TileImage`, the per-tile machinery
  under `render3d`.
- `sdfrender.camera`: `TwoDCamera` with pan (`drag`, `release`) and zoom
  (`zoom`) around the mouse position, `ThreeDCamera`, the `TwoDMode` and
  `ThreeDMode` enums, `ViewMode` for switching between them
  (`set_2d_mode`, `set_3d_mode` return whether anything changed), `Rect`,
  and `fit_uv(width, height)` for centring a square image in a window.
- `sdfrender.pipeline`: `render_shape` draws one shape into an RGB pixel
  buffer according to a `ViewMode`; `render_scene(shapes, settings)`
  composites a sequence of `DrawShape` items onto a black image for the given
  `RenderSettings` and returns a timed `RenderResult`. `FileWatcher.poll()`
  returns a file's text when it is new or has changed, and `None` otherwise.

## Writing a shape

Subclass `Shape` and implement two methods:

- `interval(x, y, z)`: given an `Interval` per axis, return an `Interval`
  that bounds the field over that box;
- `values(xs, ys, zs)`: the field at many points at once (arrays in, a 1-D
  array out).

`gradient_colors(xs, ys, zs)` has a default based on finite differences of
`values`; 3D rendering uses it to shade the surface.

```python
import math

import numpy as np

from sdfrender.modes import Interval, Shape


def _square(i):
    lo, hi = i.lower, i.upper
    if lo >= 0:
        return Interval(lo * lo, hi * hi)
    if hi <= 0:
        return Interval(hi * hi, lo * lo)
    return Interval(0.0, max(lo * lo, hi * hi))


class Sphere(Shape):
    def __init__(self, radius):
        self.radius = radius

    def interval(self, x, y, z):
        squares = [_square(a) for a in (x, y, z)]
        lo = math.sqrt(sum(s.lower for s in squares)) - self.radius
        hi = math.sqrt(sum(s.upper for s in squares)) - self.radius
        return Interval(lo, hi)

    def values(self, xs, ys, zs):
        xs, ys, zs = (np.asarray(a, dtype=float) for a in (xs, ys, zs))
        return np.sqrt(xs**2 + ys**2 + zs**2) - self.radius
```

At Z = 0 this sphere is a circle, so the same shape serves both renderers.

## Rendering

```python
from sdfrender.config import RenderConfig
from sdfrender.modes import BitRenderMode
from sdfrender.render2d import render2d

image = render2d(Sphere(0.5), RenderConfig(image_size=256), BitRenderMode())
```

With the identity transform the image covers -1 to +1 on both axes; pass a
3×3 matrix as `mat` to scale, move or rotate the view.

For 3D the configuration must say so:

```python
from sdfrender.config import RenderConfig
from sdfrender.render3d import render3d

depth, color = render3d(Sphere(0.5), RenderConfig(image_size=128, dims=3))
```

Here `mat`, if given, is a 4×4 matrix.

## What it does not do

The package has no window, no command-line program and no scripting
language: shapes are Python objects you write yourself, and the camera and
view-mode classes only hold state for an interactive front end to drive.
`ThreeDCamera` has no pan or zoom handling. `FileWatcher` does not watch in
the background; call `poll()` whenever you want to check the file.

## Running the tests

Install the `test` extra and run `pytest` from the project root.