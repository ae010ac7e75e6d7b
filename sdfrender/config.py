"""Render configuration, tile alignment and shared work queues."""
from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

import numpy as np


def default_tile_sizes(dims):
    """Return the default tile sizes for a 2D or 3D render."""
    if dims == 2:
        return (128, 32, 8)
    return (128, 64, 32, 16, 8)


@dataclass(frozen=True)
class Tile:
    """A square (or cubic) tile of the image, with its offset in a tile buffer."""

    corner: tuple[int, ...]
    offset: int


@dataclass
class RenderConfig:
    """Render settings: square image size, tile sizes, threads and transform.

    By default the render covers a cube spanning ±1 on every axis; ``mat`` is a
    homogeneous ``(dims + 1) x (dims + 1)`` matrix applied to those coordinates.
    """

    image_size: int = 512
    tile_sizes: Sequence[int] | None = None
    threads: int = 8
    mat: np.ndarray | None = None
    dims: int = 2

    def __post_init__(self) -> None:
        if self.dims not in (2, 3):
            raise ValueError(f"dims must be 2 or 3, not {self.dims}")
        if self.image_size <= 0:
            raise ValueError("image_size must be positive")
        if self.threads < 1:
            raise ValueError("threads must be at least 1")
        sizes = default_tile_sizes(self.dims) if self.tile_sizes is None else self.tile_sizes
        self.tile_sizes = tuple(int(t) for t in sizes)
        if any(t <= 0 for t in self.tile_sizes):
            raise ValueError("tile sizes must be positive")
        n = self.dims + 1
        mat = np.identity(n) if self.mat is None else np.array(self.mat, dtype=float)
        if mat.shape != (n, n):
            raise ValueError(f"mat must have shape {(n, n)}, not {mat.shape}")
        self.mat = mat

    def align(self):
        """Pad the image to a multiple of the largest usable tile size.

        The returned transform maps pixel coordinates to the ±1 render volume,
        followed by ``mat``.
        """
        tile_sizes = tuple(
            itertools.dropwhile(lambda t: t > self.image_size, self.tile_sizes)
        ) or (8,)
        first = tile_sizes[0]
        image_size = -(-self.image_size // first) * first

        scale = image_size / self.image_size
        factor = 2.0 / image_size * scale

        n = self.dims
        pixel_to_unit = np.identity(n + 1)
        pixel_to_unit[:n, :n] *= factor
        pixel_to_unit[:n, n] = -1.0

        return AlignedRenderConfig(
            image_size=image_size,
            orig_image_size=self.image_size,
            tile_sizes=tile_sizes,
            threads=self.threads,
            mat=self.mat @ pixel_to_unit,
        )


@dataclass(frozen=True, eq=False)
class AlignedRenderConfig:
    """Render configuration whose image size is a multiple of its first tile."""

    image_size: int
    orig_image_size: int
    tile_sizes: tuple[int, ...]
    threads: int
    mat: np.ndarray

    @property
    def dims(self) -> int:
        return self.mat.shape[0] - 1

    def tile_to_offset(self, tile, x, y):
        """Index of pixel ``(x, y)`` of ``tile`` within a top-level tile buffer."""
        return tile.offset + x + y * self.tile_sizes[0]

    def new_tile(self, corner):
        """Build a tile at ``corner``, locating it within its top-level tile."""
        corner = tuple(int(c) for c in corner)
        size = self.tile_sizes[0]
        x = corner[0] % size
        y = corner[1] % size
        return Tile(corner=corner, offset=x + y * size)

    def transform_point(self, point):
        """Map pixel coordinates (one point or an array of points) to model space."""
        n = self.dims
        p = np.asarray(point, dtype=float)
        if p.shape[-1:] != (n,):
            raise ValueError(f"expected points with {n} coordinates")
        h = p @ self.mat[:, :n].T + self.mat[:, n]
        return h[..., :n] / h[..., n:]


class Queue:
    """Thread-safe queue of tiles, handed out in order."""

    def __init__(self, tiles: Iterable[Tile]) -> None:
        self._tiles = tuple(tiles)
        self._index = 0
        self._lock = threading.Lock()

    def pop(self):
        """Return the next tile, or ``None`` once the queue is exhausted."""
        with self._lock:
            if self._index >= len(self._tiles):
                return None
            tile = self._tiles[self._index]
            self._index += 1
        return tile

    def __len__(self) -> int:
        with self._lock:
            return len(self._tiles) - self._index

    def __iter__(self) -> Iterator[Tile]:
        while (tile := self.pop()) is not None:
            yield tile