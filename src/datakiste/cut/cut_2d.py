"""Two-dimensional cuts (rectangle, circle, ellipse, polygon)."""

from dataclasses import dataclass

import numpy as np

from datakiste.cut.base import Cut

__all__ = ["Cut2d", "Cut2dCirc", "Cut2dEllipse", "Cut2dNot", "Cut2dPoly", "Cut2dRect"]


class Cut2d(Cut):
    """Base class for two-dimensional cuts."""

    dim = 2


@dataclass(frozen=True)
class Cut2dRect(Cut2d):
    """
    Rectangle with corners (x0, y0) and (x1, y1).

    Corners are ordered such that x0 <= x1 and y0 <= y1. The boundary is excluded.
    """

    x0: float
    y0: float
    x1: float
    y1: float

    def __post_init__(self):
        x0, x1 = sorted((float(self.x0), float(self.x1)))
        y0, y1 = sorted((float(self.y0), float(self.y1)))
        for name, value in (("x0", x0), ("y0", y0), ("x1", x1), ("y1", y1)):
            object.__setattr__(self, name, value)

    def _contains(self, x, y):
        return (x > self.x0) & (x < self.x1) & (y > self.y0) & (y < self.y1)


@dataclass(frozen=True)
class Cut2dCirc(Cut2d):
    """Circle with center (x0, y0) and radius r (boundary excluded)."""

    x0: float
    y0: float
    r: float

    def _contains(self, x, y):
        return (x - self.x0) ** 2 + (y - self.y0) ** 2 < self.r**2


@dataclass(frozen=True)
class Cut2dEllipse(Cut2d):
    """
    Ellipse with center (x0, y0), semi-axes rx and ry, rotated by theta.

    Parameters
    ----------
    theta: float
        Rotation angle in radians (counter-clockwise).
    """

    x0: float
    y0: float
    rx: float
    ry: float
    theta: float = 0.0

    def _contains(self, x, y):
        cos_t, sin_t = np.cos(self.theta), np.sin(self.theta)
        dx, dy = x - self.x0, y - self.y0
        return ((dx * cos_t + dy * sin_t) / self.rx) ** 2 + (
            (dy * cos_t - dx * sin_t) / self.ry
        ) ** 2 < 1.0


@dataclass(frozen=True)
class Cut2dPoly(Cut2d):
    """
    Polygon given by its ordered vertices (the last vertex connects to the first).

    Containment uses the even-odd rule: a horizontal ray from the test point to
    negative x crosses the edges an odd number of times for points inside. An edge
    counts if the test point's y lies in its half-open y-span (lower end excluded)
    and the edge is strictly left of the point. Horizontal edges never count and each
    vertex is counted once, so the result does not depend on the first vertex or on
    the direction of traversal. Polygons with less than three vertices contain nothing.
    """

    verts: tuple = ()

    def __post_init__(self):
        object.__setattr__(
            self, "verts", tuple((float(x), float(y)) for x, y in self.verts)
        )

    def _contains(self, x, y):
        inside = np.zeros(np.broadcast(x, y).shape, dtype=bool)
        if len(self.verts) < 3:
            return inside
        x1, y1 = self.verts[-1]
        for x2, y2 in self.verts:
            straddles = ((y2 < y) & (y1 >= y)) | ((y1 < y) & (y2 >= y))
            if y1 != y2:
                left_of_point = (x2 + (y - y2) * (x1 - x2) / (y1 - y2)) < x
                inside ^= straddles & left_of_point
            x1, y1 = x2, y2
        return inside


@dataclass(frozen=True)
class Cut2dNot(Cut2d):
    """Negation of a two-dimensional cut."""

    inner: Cut2d

    def __post_init__(self):
        if not isinstance(self.inner, Cut2d):
            raise TypeError(f"Cut2dNot requires a two-dimensional cut, got {self.inner!r}")

    def _contains(self, x, y):
        return np.logical_not(self.inner._contains(x, y))  # pylint: disable=protected-access


Cut2d.not_class = Cut2dNot
