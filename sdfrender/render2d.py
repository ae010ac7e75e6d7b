"""2D rasterization of a signed distance field by recursive interval subdivision."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .config import AlignedRenderConfig, Queue, RenderConfig, Tile
from .modes import Interval, RenderMode, Shape

_ZERO = Interval(0.0, 0.0)


def _check_tile_sizes(config: AlignedRenderConfig) -> None:
    sizes = config.tile_sizes
    if config.image_size % sizes[0]:
        raise ValueError(
            f"image size {config.image_size} is not a multiple of tile size {sizes[0]}"
        )
    for big, small in zip(sizes, sizes[1:]):
        if big % small:
            raise ValueError(f"tile size {big} is not a multiple of {small}")


class _Worker:
    """Renders top-level tiles into tile-sized pixel buffers."""

    def __init__(self, shape: Shape, config: AlignedRenderConfig, mode: RenderMode):
        self.shape = shape
        self.config = config
        self.mode = mode
        self.image: list = []

    def render(self, tile: Tile) -> list:
        size = self.config.tile_sizes[0]
        self.image = [self.mode.empty()] * (size * size)
        self._recurse(tile, 0)
        image, self.image = self.image, []
        return image

    def _recurse(self, tile: Tile, depth: int) -> None:
        cfg = self.config
        tile_size = cfg.tile_sizes[depth]
        cx, cy = tile.corner

        corners = np.array(
            [(cx + dx, cy + dy) for dy in (0, tile_size) for dx in (0, tile_size)],
            dtype=float,
        )
        points = cfg.transform_point(corners)
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        bounds = self.shape.interval(
            Interval(float(lo[0]), float(hi[0])),
            Interval(float(lo[1]), float(hi[1])),
            _ZERO,
        )

        fill = self.mode.interval(bounds, depth)
        if fill is not None:
            row = [fill] * tile_size
            for y in range(tile_size):
                start = cfg.tile_to_offset(tile, 0, y)
                self.image[start:start + tile_size] = row
        elif depth + 1 < len(cfg.tile_sizes):
            next_size = cfg.tile_sizes[depth + 1]
            n = tile_size // next_size
            for j in range(n):
                for i in range(n):
                    sub = cfg.new_tile((cx + i * next_size, cy + j * next_size))
                    self._recurse(sub, depth + 1)
        else:
            self._render_pixels(tile, tile_size)

    def _render_pixels(self, tile: Tile, tile_size: int) -> None:
        cfg = self.config
        cx, cy = tile.corner
        rows, cols = np.meshgrid(
            np.arange(tile_size), np.arange(tile_size), indexing="ij"
        )
        pixels = np.stack(
            [cx + cols.ravel(), cy + rows.ravel()], axis=-1
        ).astype(float)
        model = cfg.transform_point(pixels)
        values = np.asarray(
            self.shape.values(model[:, 0], model[:, 1], np.zeros(len(model))),
            dtype=float,
        ).reshape(tile_size, tile_size)
        for y, row in enumerate(values):
            start = cfg.tile_to_offset(tile, 0, y)
            self.image[start:start + tile_size] = [
                self.mode.pixel(float(v)) for v in row
            ]


def render2d(shape, config, mode):
    """Render ``shape`` at Z = 0 into a flat, row-major list of pixels.

    Rows run from the top of the image (largest Y) to the bottom; each pixel is
    whatever ``mode`` produces for it.
    """
    if not isinstance(config, RenderConfig) or config.dims != 2:
        raise ValueError("render2d needs a 2D RenderConfig")
    aligned = config.align()
    _check_tile_sizes(aligned)

    size = aligned.tile_sizes[0]
    count = aligned.image_size // size
    queue = Queue(
        aligned.new_tile((i * size, j * size))
        for i in range(count)
        for j in range(count)
    )

    def drain() -> list[tuple[Tile, list]]:
        worker = _Worker(shape, aligned, mode)
        return [(tile, worker.render(tile)) for tile in queue]

    if aligned.threads == 1:
        results = drain()
    else:
        with ThreadPoolExecutor(max_workers=aligned.threads) as pool:
            futures = [pool.submit(drain) for _ in range(aligned.threads)]
            results = [item for future in futures for item in future.result()]

    orig = aligned.orig_image_size
    image = [mode.empty()] * (orig * orig)
    for tile, data in results:
        tx, ty = tile.corner
        width = min(size, orig - tx)
        if width <= 0:
            continue
        for j in range(min(size, orig - ty)):
            row = (orig - (ty + j) - 1) * orig + tx
            image[row:row + width] = data[j * size:j * size + width]
    return image