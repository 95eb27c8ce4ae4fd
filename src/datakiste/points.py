"""Point sets (ordered lists of one- to four-dimensional points)."""

import numpy as np

from datakiste.errors import ConstraintViolationError, TypeMismatchError

__all__ = ["PointSet"]


class PointSet:
    """
    Ordered list of points with a fixed dimension.

    Parameters
    ----------
    dim: int
        Point dimension (1 to 4).
    points: iterable, optional
        Initial points (floats for dim 1, tuples of floats otherwise).

    Raises
    ------
    ConstraintViolationError
        If dim is not in [1, 4].
    """

    def __init__(self, dim, points=None):
        """Initialize PointSet."""
        if dim not in (1, 2, 3, 4):
            raise ConstraintViolationError(f"Point sets have dimension 1 to 4 (got {dim})")
        self.dim = dim
        self.points = []
        for point in points or []:
            self.push(point)

    def _as_point(self, point):
        if self.dim == 1 and np.isscalar(point):
            return (float(point),)
        try:
            point = tuple(float(v) for v in point)
        except TypeError as exc:
            raise TypeMismatchError(f"Expected a {self.dim}-D point, got {point!r}") from exc
        if len(point) != self.dim:
            raise TypeMismatchError(f"Expected a {self.dim}-D point, got {point!r}")
        return point

    def push(self, point):
        """Append a point."""
        self.points.append(self._as_point(point))

    def add(self, other):
        """
        Append all points of another point set.

        Raises
        ------
        TypeMismatchError
            If the dimensions differ.
        """
        if not isinstance(other, PointSet) or other.dim != self.dim:
            raise TypeMismatchError(
                f"Cannot add {other!r} to a point set of dimension {self.dim}"
            )
        self.points.extend(other.points)

    def to_array(self):
        """Return points as array of shape (N, dim)."""
        return np.array(self.points, dtype=np.float64).reshape(-1, self.dim)

    def copy(self):
        """Return a deep copy."""
        new = PointSet(self.dim)
        new.points = list(self.points)
        return new

    def __len__(self):
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __eq__(self, other):
        if not isinstance(other, PointSet):
            return NotImplemented
        return self.dim == other.dim and self.points == other.points

    __hash__ = None

    def __repr__(self):
        return f"PointSet(dim={self.dim}, n_points={len(self.points)})"
