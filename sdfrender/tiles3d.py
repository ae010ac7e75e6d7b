"""Per-tile 3D rendering: interval culling, subdivision and voxel evaluation."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import AlignedRenderConfig, Tile
from .modes import Interval, Shape

_CORNER_STEPS = np.array(
    [((i & 1) != 0, (i & 2) != 0, (i & 4) != 0) for i in range(8)], dtype=float
)


@dataclass
class TileImage:
    """Depth and colour buffers for one top-level tile column (X/Y footprint)."""

    depth: np.ndarray
    color: np.ndarray

    @classmethod
    def blank(cls, size):
        """An empty ``size x size`` tile: zero depth and black colour."""
        return cls(
            depth=np.zeros(size * size, dtype=np.uint32),
            color=np.zeros((size * size, 3), dtype=np.uint8),
        )


class TileRenderer:
    """Renders 3D tiles of a shape into a :class:`TileImage`.

    Tiles are culled when already hidden, filled or skipped when interval
    evaluation proves them full or empty, and otherwise subdivided until the
    smallest tile size, where every voxel is evaluated.
    """

    def __init__(self, shape: Shape, config: AlignedRenderConfig) -> None:
        if config.dims != 3:
            raise ValueError("TileRenderer needs a 3D render configuration")
        self.shape = shape
        self.config = config

    def _region(self, tile: Tile, size: int) -> np.ndarray:
        """Buffer indices of the tile's footprint, indexed as ``[y][x]``."""
        stride = self.config.tile_sizes[0]
        xs = np.arange(size)
        return tile.offset + xs[None, :] + xs[:, None] * stride

    def render_tile(self, tile, image):
        """Render a top-level tile into ``image``, which is updated in place."""
        self._recurse(tile, 0, image)

    def _recurse(self, tile: Tile, level: int, image: TileImage) -> None:
        cfg = self.config
        tile_size = cfg.tile_sizes[level]
        fill_z = tile.corner[2] + tile_size + 1
        region = self._region(tile, tile_size)

        # Nothing in this tile can be seen in front of what is already drawn.
        if np.all(image.depth[region] >= fill_z):
            return

        corners = np.asarray(tile.corner, dtype=float) + _CORNER_STEPS * tile_size
        points = cfg.transform_point(corners)
        lo = points.min(axis=0)
        hi = points.max(axis=0)
        bounds = self.shape.interval(
            Interval(float(lo[0]), float(hi[0])),
            Interval(float(lo[1]), float(hi[1])),
            Interval(float(lo[2]), float(hi[2])),
        )

        if bounds.upper < 0.0:
            image.depth[region] = np.maximum(image.depth[region], fill_z)
            return
        if bounds.lower > 0.0:
            return

        if level + 1 < len(cfg.tile_sizes):
            next_size = cfg.tile_sizes[level + 1]
            n = tile_size // next_size
            cx, cy, cz = tile.corner
            for j in range(n):
                for i in range(n):
                    for k in reversed(range(n)):
                        sub = cfg.new_tile(
                            (cx + i * next_size, cy + j * next_size, cz + k * next_size)
                        )
                        self._recurse(sub, level + 1, image)
        else:
            self.render_pixels(tile, tile_size, image)

    def render_pixels(self, tile, tile_size, image):
        """Evaluate every visible voxel of ``tile`` and record surface hits.

        Each column is searched front to back; the first voxel inside the shape
        sets the pixel's depth, and the pixel is coloured by the surface normal
        sampled one voxel above it.
        """
        cfg = self.config
        cx, cy, cz = tile.corner
        indices = self._region(tile, tile_size).ravel()

        live = np.flatnonzero(image.depth[indices] < cz + tile_size)
        if live.size == 0:
            return
        ii = live % tile_size
        jj = live // tile_size
        ks = np.arange(tile_size - 1, -1, -1)

        voxels = np.empty((live.size, tile_size, 3), dtype=float)
        voxels[..., 0] = (cx + ii)[:, None]
        voxels[..., 1] = (cy + jj)[:, None]
        voxels[..., 2] = (cz + ks)[None, :]
        model = cfg.transform_point(voxels.reshape(-1, 3))
        values = np.asarray(
            self.shape.values(model[:, 0], model[:, 1], model[:, 2]), dtype=float
        ).reshape(live.size, tile_size)

        inside = values < 0.0
        hit = inside.any(axis=1)
        if not hit.any():
            return

        first = inside.argmax(axis=1)[hit]
        k = tile_size - 1 - first
        z = cz + k + 1
        offsets = indices[live[hit]]
        image.depth[offsets] = z

        surface = np.stack([cx + ii[hit], cy + jj[hit], z], axis=-1).astype(float)
        normals_at = cfg.transform_point(surface)
        image.color[offsets] = self.shape.gradient_colors(
            normals_at[:, 0], normals_at[:, 1], normals_at[:, 2]
        )