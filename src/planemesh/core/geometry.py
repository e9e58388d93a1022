"""
Planar value types for planemesh.

Provides the 2D point used for node positions and the axis-aligned bounding
box returned by mesh queries.
"""

import math
from dataclasses import dataclass
from typing import Any, Iterator

import numpy as np


@dataclass(frozen=True)
class Point2:
    """
    Immutable point in the plane.

    Coordinates are stored as finite floats. Equality is exact, which is what
    point location relies on when it reports a hit on a node.
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        x = float(self.x)
        y = float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Point coordinates must be finite, got ({x}, {y})")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @classmethod
    def of(cls, value: Any) -> "Point2":
        """
        Coerce a point-like value to a Point2.

        Accepts Point2 instances, sequences or numpy arrays with at least two
        entries and COMPAS points. Any z coordinate is ignored.
        """
        if isinstance(value, Point2):
            return value
        if hasattr(value, "x") and hasattr(value, "y"):
            return cls(value.x, value.y)
        coords = np.asarray(value, dtype=float).ravel()
        if coords.shape[0] < 2:
            raise ValueError(f"Cannot build a 2D point from {value!r}")
        return cls(coords[0], coords[1])

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def as_tuple(self) -> tuple[float, float]:
        """Return the coordinates as a tuple."""
        return (self.x, self.y)


@dataclass
class BoundingBox2:
    """
    Axis-aligned bounding box in the plane.

    A box created with ``inverse()`` is empty (min > max) and becomes valid
    after the first ``expand``.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def inverse(cls) -> "BoundingBox2":
        """Return an empty box that any point expands."""
        return cls(math.inf, math.inf, -math.inf, -math.inf)

    @classmethod
    def from_points(cls, points: Any) -> "BoundingBox2":
        """
        Compute the bounding box of an (N, 2) array-like of points.

        Returns an empty box when there are no points.
        """
        pts = np.asarray(points, dtype=float)
        if pts.size == 0:
            return cls.inverse()
        pts = pts.reshape(-1, pts.shape[-1])[:, :2]
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        return cls(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    def expand(self, point: Any) -> "BoundingBox2":
        """Grow the box in place to contain ``point`` and return it."""
        p = Point2.of(point)
        self.min_x = min(self.min_x, p.x)
        self.min_y = min(self.min_y, p.y)
        self.max_x = max(self.max_x, p.x)
        self.max_y = max(self.max_y, p.y)
        return self

    @property
    def is_empty(self) -> bool:
        return self.min_x > self.max_x or self.min_y > self.max_y

    @property
    def width(self) -> float:
        return 0.0 if self.is_empty else self.max_x - self.min_x

    @property
    def height(self) -> float:
        return 0.0 if self.is_empty else self.max_y - self.min_y

    @property
    def center(self) -> Point2:
        if self.is_empty:
            raise ValueError("Empty bounding box has no center")
        return Point2((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def contains(self, point: Any) -> bool:
        """Whether ``point`` lies inside or on the box."""
        p = Point2.of(point)
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y
