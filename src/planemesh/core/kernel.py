"""
Orientation predicates for planemesh.

The point-location walk takes a different branch for each sign of the
orientation determinant, so the sign must be the same every time the same
three points are tested. ``oriented_side`` evaluates the determinant in
floating point and falls back to exact rational arithmetic whenever the
result is within the rounding error bound (the filter of Shewchuk's
``orient2d``).
"""

from enum import Enum
from fractions import Fraction
from typing import Callable

from planemesh.core.exceptions import ConfigurationError
from planemesh.core.geometry import Point2

_EPSILON = 2.0 ** -53
_CCW_ERRBOUND_A = (3.0 + 16.0 * _EPSILON) * _EPSILON


class OrientedSide(Enum):
    """Side of a directed line a point lies on."""

    NEGATIVE = -1  # right of p1 -> p2
    ON_BOUNDARY = 0
    POSITIVE = 1  # left of p1 -> p2


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _exact_orientation(p1: Point2, p2: Point2, q: Point2) -> int:
    ax, ay = Fraction(p1.x), Fraction(p1.y)
    bx, by = Fraction(p2.x), Fraction(p2.y)
    cx, cy = Fraction(q.x), Fraction(q.y)
    return _sign((ax - cx) * (by - cy) - (ay - cy) * (bx - cx))


def orientation(p1: Point2, p2: Point2, q: Point2) -> int:
    """
    Sign of the orientation determinant of (p1, p2, q).

    Returns 1 when the triangle p1, p2, q is counter-clockwise (q left of the
    directed line p1 -> p2), -1 when clockwise and 0 when collinear. The
    result is exact for all finite float inputs.
    """
    detleft = (p1.x - q.x) * (p2.y - q.y)
    detright = (p1.y - q.y) * (p2.x - q.x)
    det = detleft - detright

    if detleft > 0.0:
        if detright <= 0.0:
            return _sign(det)
        detsum = detleft + detright
    elif detleft < 0.0:
        if detright >= 0.0:
            return _sign(det)
        detsum = -detleft - detright
    else:
        return _sign(det)

    errbound = _CCW_ERRBOUND_A * detsum
    if det >= errbound or -det >= errbound:
        return _sign(det)

    return _exact_orientation(p1, p2, q)


def oriented_side(p1: Point2, p2: Point2, q: Point2) -> OrientedSide:
    """Classify ``q`` against the directed line through ``p1`` and ``p2``."""
    return OrientedSide(orientation(p1, p2, q))


def oriented_side_inexact(p1: Point2, p2: Point2, q: Point2) -> OrientedSide:
    """Floating-point only variant of ``oriented_side``."""
    det = (p1.x - q.x) * (p2.y - q.y) - (p1.y - q.y) * (p2.x - q.x)
    return OrientedSide(_sign(det))


SidePredicate = Callable[[Point2, Point2, Point2], OrientedSide]

_PREDICATES: dict[str, SidePredicate] = {
    "exact": oriented_side,
    "float": oriented_side_inexact,
}


def get_predicate(name: str) -> SidePredicate:
    """
    Look up an oriented-side predicate by name.

    Raises:
        ConfigurationError: If ``name`` is not a known predicate
    """
    try:
        return _PREDICATES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown orientation kernel: {name}",
            details={"available": sorted(_PREDICATES)},
        ) from None
