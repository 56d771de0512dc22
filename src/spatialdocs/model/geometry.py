"""
Board Geometry
==============
Plain screen-space primitives and the position -> scale mapping.

`scale_for_center_y` is the only place that decides how big a tile is at a
given height. Static layout, dragging and docking all call it, so a tile never
pops when it changes hands between them.
"""
from __future__ import annotations

from dataclasses import dataclass

from spatialdocs.config import ICON_WIDTH, MAX_SCALE, DEFAULT_TILE_WIDTH


@dataclass(frozen=True)
class Point:
    """A point in screen (viewport) pixels, y growing downwards."""
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)

    def __truediv__(self, scalar: float) -> Point:
        return Point(self.x / scalar, self.y / scalar)


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def aspect(self) -> float:
        """Width over height; 1.0 for degenerate sizes."""
        if self.height <= 0.0:
            return 1.0
        return self.width / self.height


@dataclass(frozen=True)
class Rect:
    """Axis aligned rectangle in screen pixels."""
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> Rect:
        return cls(center.x - width / 2.0, center.y - height / 2.0, width, height)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> Point:
        return Point(self.left + self.width / 2.0, self.top + self.height / 2.0)

    def contains(self, point: Point) -> bool:
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    @property
    def center(self) -> Point:
        return Point(self.width / 2.0, self.height / 2.0)

    @property
    def rect(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)


def ease_in_out_cubic(t: float) -> float:
    """
    Ease-in-out cubic curve on [0, 1].

    Slow near both ends, fast in the middle. Applied to the normalized distance
    from the viewport center, it keeps tiles big across the central band and
    shrinks them quickly as they approach an edge.
    """
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - (-2.0 * t + 2.0) ** 3 / 2.0


def icon_scale(base_width: float) -> float:
    """Scale at which a tile of natural width `base_width` is ICON_WIDTH wide."""
    if base_width <= 0.0:
        base_width = DEFAULT_TILE_WIDTH
    return ICON_WIDTH / base_width


def scale_for_center_y(center_y: float, base_width: float, viewport_height: float) -> float:
    """
    Map a tile's vertical center to its display scale.

    Args:
        center_y: Vertical center of the tile in viewport pixels.
        base_width: Natural (unscaled) width of the tile.
        viewport_height: Current viewport height.

    Returns:
        MAX_SCALE at the vertical center of the viewport, the icon scale at
        (and beyond) the top and bottom edges, eased in between.
    """
    half_height = viewport_height / 2.0
    if half_height <= 0.0:
        normalized = 1.0
    else:
        normalized = min(abs(center_y - half_height) / half_height, 1.0)

    eased = ease_in_out_cubic(normalized)
    min_scale = icon_scale(base_width)
    return MAX_SCALE - eased * (MAX_SCALE - min_scale)
