"""Scene rendering for the viewer: shapes, settings, results and file polling."""
from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .camera import ThreeDCamera, ThreeDMode, TwoDCamera, TwoDMode, ViewMode
from .config import RenderConfig, default_tile_sizes
from .modes import BitRenderMode, DebugRenderMode, SdfRenderMode, Shape
from .render2d import render2d
from .render3d import render3d

_THREADS = 8
_WHITE = (255, 255, 255)


@dataclass(frozen=True)
class DrawShape:
    """A shape to draw, together with its RGB colour."""

    shape: Shape
    color_rgb: tuple[int, int, int] = _WHITE


@dataclass(frozen=True)
class RenderSettings:
    """What the viewer asks to be rendered: image size and view mode."""

    image_size: int
    mode: ViewMode


@dataclass(frozen=True)
class RenderResult:
    """A rendered image with the time it took, in seconds."""

    dt: float
    image: np.ndarray
    image_size: int


def _matrix_2d(camera: TwoDCamera) -> np.ndarray:
    s = camera.scale
    ox, oy = camera.offset
    return np.array([[s, 0.0, ox], [0.0, s, oy], [0.0, 0.0, 1.0]])


def _matrix_3d(camera: ThreeDCamera) -> np.ndarray:
    s = camera.scale
    ox, oy = camera.offset[0], camera.offset[1]
    return np.array(
        [
            [s, 0.0, 0.0, ox],
            [0.0, s, 0.0, oy],
            [0.0, 0.0, s, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def render_shape(view, shape, image_size, color, pixels):
    """Render one shape on top of ``pixels``, an ``(image_size**2, 3)`` uint8 array.

    The array is updated in place.
    """
    if pixels.shape != (image_size * image_size, 3):
        raise ValueError(
            f"pixel buffer has shape {pixels.shape}, expected {(image_size * image_size, 3)}"
        )

    if isinstance(view.camera, TwoDCamera):
        config = RenderConfig(
            image_size=image_size,
            tile_sizes=default_tile_sizes(2),
            threads=_THREADS,
            mat=_matrix_2d(view.camera),
            dims=2,
        )
        if view.mode is TwoDMode.COLOR:
            image = np.array(render2d(shape, config, BitRenderMode()), dtype=bool)
            pixels[image] = color
        elif view.mode is TwoDMode.SDF:
            image = render2d(shape, config, SdfRenderMode())
            pixels[:] = np.array(image, dtype=np.uint8).reshape(-1, 3)
        elif view.mode is TwoDMode.DEBUG:
            image = render2d(shape, config, DebugRenderMode())
            pixels[:] = np.array(
                [p.as_debug_color()[:3] for p in image], dtype=np.uint8
            ).reshape(-1, 3)
        else:
            raise ValueError(f"unknown 2D mode {view.mode!r}")
        return

    config = RenderConfig(
        image_size=image_size,
        tile_sizes=default_tile_sizes(2),
        threads=_THREADS,
        mat=_matrix_3d(view.camera),
        dims=3,
    )
    depth, rgb = render3d(shape, config)
    hit = depth != 0
    if view.mode is ThreeDMode.COLOR:
        pixels[hit] = rgb[hit]
    elif view.mode is ThreeDMode.HEIGHTMAP:
        d = depth.astype(np.int64)
        max_depth = max(int(d.max()) if d.size else 1, 1)
        brightness = (d * 255 // max_depth).astype(np.uint8)
        pixels[hit] = brightness[hit][:, None]
    else:
        raise ValueError(f"unknown 3D mode {view.mode!r}")


def render_scene(shapes, settings):
    """Render every shape in order onto a black image and time the work."""
    size = settings.image_size
    pixels = np.zeros((size * size, 3), dtype=np.uint8)
    start = time.perf_counter()
    for item in shapes:
        render_shape(settings.mode, item.shape, size, item.color_rgb, pixels)
    dt = time.perf_counter() - start
    return RenderResult(dt=dt, image=pixels, image_size=size)


class FileWatcher:
    """Reads a script file and reports its text whenever it changes."""

    def __init__(self, path) -> None:
        self.path = Path(path)
        self._contents: str | None = None

    def poll(self):
        """Return the file's text if it is new or changed, otherwise ``None``."""
        contents = self.path.read_bytes().decode("utf-8")
        if contents == self._contents:
            return None
        self._contents = contents
        return contents