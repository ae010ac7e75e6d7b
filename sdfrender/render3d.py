"""3D rendering of a signed distance field into a heightmap and a normal-coloured image."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .config import AlignedRenderConfig, Queue, RenderConfig
from .modes import Shape
from .tiles3d import TileImage, TileRenderer


def _check_tile_sizes(config: AlignedRenderConfig) -> None:
    sizes = config.tile_sizes
    if config.image_size % sizes[0]:
        raise ValueError(
            f"image size {config.image_size} is not a multiple of tile size {sizes[0]}"
        )
    for big, small in zip(sizes, sizes[1:]):
        if big % small:
            raise ValueError(f"tile size {big} is not a multiple of {small}")


def _build_queues(config: AlignedRenderConfig) -> list[Queue]:
    """Split the tiles into per-thread queues, each in front-to-back Z order."""
    size = config.tile_sizes[0]
    count = config.image_size // size
    tiles = [
        config.new_tile((i * size, j * size, k * size))
        for i in range(count)
        for j in range(count)
        for k in reversed(range(count))
    ]
    per_thread = max(len(tiles) // config.threads, 1)
    return [
        Queue(tiles[start:start + per_thread])
        for start in range(0, len(tiles), per_thread)
    ]


def _worker(
    shape: Shape,
    config: AlignedRenderConfig,
    queues: list[Queue],
    start: int,
) -> dict[tuple[int, int], TileImage]:
    """Drain our own queue first, then steal from the others in turn."""
    renderer = TileRenderer(shape, config)
    size = config.tile_sizes[0]
    out: dict[tuple[int, int], TileImage] = {}
    for step in range(len(queues)):
        for tile in queues[(start + step) % len(queues)]:
            key = (tile.corner[0], tile.corner[1])
            image = out.get(key)
            if image is None:
                image = TileImage.blank(size)
            renderer.render_tile(tile, image)
            out[key] = image
    return out


def render3d(shape, config):
    """Render ``shape`` into a heightmap and an RGB image.

    Returns ``(depth, color)``: a flat ``uint32`` array of depths (0 where
    nothing was hit) and an ``(n, 3)`` ``uint8`` array of colours, both in
    row-major order with the top row (largest Y) first.
    """
    if not isinstance(config, RenderConfig) or config.dims != 3:
        raise ValueError("render3d needs a 3D RenderConfig")
    aligned = config.align()
    _check_tile_sizes(aligned)

    queues = _build_queues(aligned)
    if aligned.threads == 1:
        results = [_worker(shape, aligned, queues, 0)]
    else:
        with ThreadPoolExecutor(max_workers=aligned.threads) as pool:
            futures = [
                pool.submit(_worker, shape, aligned, queues, i % len(queues))
                for i in range(aligned.threads)
            ]
            results = [future.result() for future in futures]

    size = aligned.tile_sizes[0]
    orig = aligned.orig_image_size
    depth = np.zeros((orig, orig), dtype=np.uint32)
    color = np.zeros((orig, orig, 3), dtype=np.uint8)
    for patches in results:
        for (tx, ty), patch in patches.items():
            width = min(size, orig - tx)
            height = min(size, orig - ty)
            if width <= 0 or height <= 0:
                continue
            patch_depth = patch.depth.reshape(size, size)[:height, :width][::-1]
            patch_color = patch.color.reshape(size, size, 3)[:height, :width][::-1]
            rows = slice(orig - ty - height, orig - ty)
            cols = slice(tx, tx + width)
            target_depth = depth[rows, cols]
            target_color = color[rows, cols]
            mask = patch_depth >= target_depth
            target_depth[mask] = patch_depth[mask]
            target_color[mask] = patch_color[mask]
    return depth.ravel(), color.reshape(-1, 3)