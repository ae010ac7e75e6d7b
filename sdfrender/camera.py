"""Viewer camera state and render-mode selection."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its minimum and maximum corners."""

    min: tuple[float, float]
    max: tuple[float, float]

    @property
    def width(self) -> float:
        return self.max[0] - self.min[0]

    @property
    def height(self) -> float:
        return self.max[1] - self.min[1]


def _screen_to_model(rect, uv, p, scale):
    """Map a screen point to centred, scaled coordinates with Y pointing up."""
    rx = (p[0] - rect.min[0]) / rect.width
    ry = (p[1] - rect.min[1]) / rect.height
    px = uv.min[0] * (1.0 - rx) + uv.max[0] * rx
    py = uv.min[1] * (1.0 - ry) + uv.max[1] * ry
    return ((px * 2.0 - 1.0) * scale, -(py * 2.0 - 1.0) * scale)


@dataclass
class TwoDCamera:
    """Pan and zoom state for the 2D view."""

    scale: float = 1.0
    offset: tuple[float, float] = (0.0, 0.0)
    drag_start: tuple[float, float] | None = None

    def mouse_to_uv(self, rect, uv, p):
        """Convert a screen position inside ``rect`` to model coordinates."""
        x, y = _screen_to_model(rect, uv, p, self.scale)
        return (x + self.offset[0], y + self.offset[1])

    def drag(self, rect, uv, p):
        """Handle a pointer held at ``p``; return whether the view moved."""
        if self.drag_start is None:
            self.drag_start = self.mouse_to_uv(rect, uv, p)
            return False
        self.offset = (0.0, 0.0)
        x, y = self.mouse_to_uv(rect, uv, p)
        self.offset = (self.drag_start[0] - x, self.drag_start[1] - y)
        return True

    def release(self):
        """End any drag in progress."""
        self.drag_start = None

    def zoom(self, rect, uv, scroll, mouse):
        """Zoom by a scroll amount, keeping the point under ``mouse`` fixed.

        Returns whether the view changed.
        """
        if scroll == 0.0:
            return False
        before = None if mouse is None else self.mouse_to_uv(rect, uv, mouse)
        self.scale /= 2.0 ** (scroll / 100.0)
        if before is not None:
            after = self.mouse_to_uv(rect, uv, mouse)
            self.offset = (
                self.offset[0] + before[0] - after[0],
                self.offset[1] + before[1] - after[1],
            )
        return True


@dataclass
class ThreeDCamera:
    """Camera state for the 3D view."""

    scale: float = 1.0
    offset: tuple[float, float, float] = (0.0, 0.0, 0.0)
    drag_start: tuple[float, float] | None = None

    def mouse_to_uv(self, rect, uv, p):
        """Convert a screen position to model X and Y on the view plane."""
        x, y = _screen_to_model(rect, uv, p, self.scale)
        return (x + self.offset[0], y + self.offset[1])


class TwoDMode(enum.Enum):
    COLOR = "color"
    SDF = "sdf"
    DEBUG = "debug"


class ThreeDMode(enum.Enum):
    COLOR = "color"
    HEIGHTMAP = "heightmap"


@dataclass
class ViewMode:
    """The active camera together with how its image is drawn."""

    camera: TwoDCamera | ThreeDCamera = field(default_factory=TwoDCamera)
    mode: TwoDMode | ThreeDMode = TwoDMode.COLOR

    def __post_init__(self) -> None:
        two_d = isinstance(self.camera, TwoDCamera) and isinstance(self.mode, TwoDMode)
        three_d = isinstance(self.camera, ThreeDCamera) and isinstance(
            self.mode, ThreeDMode
        )
        if not (two_d or three_d):
            raise ValueError("camera and mode must both be 2D or both be 3D")

    @property
    def is_3d(self) -> bool:
        return isinstance(self.camera, ThreeDCamera)

    def set_2d_mode(self, mode):
        """Switch to a 2D mode; return whether anything changed."""
        if self.is_3d:
            self.camera = TwoDCamera()
            self.mode = mode
            return True
        changed = self.mode != mode
        self.mode = mode
        return changed

    def set_3d_mode(self, mode):
        """Switch to a 3D mode; return whether anything changed."""
        if not self.is_3d:
            self.camera = ThreeDCamera()
            self.mode = mode
            return True
        changed = self.mode != mode
        self.mode = mode
        return changed


def fit_uv(width, height):
    """UV rectangle that shows a square image centred in a ``width x height`` area."""
    if width > height:
        r = (1.0 - height / width) / 2.0
        return Rect((0.0, r), (1.0, 1.0 - r))
    r = (1.0 - width / height) / 2.0
    return Rect((r, 0.0), (1.0 - r, 1.0))