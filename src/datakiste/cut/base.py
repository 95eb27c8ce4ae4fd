"""Common behavior of one- and two-dimensional cuts."""

import numpy as np

from datakiste.errors import TypeMismatchError

__all__ = ["Cut"]


class Cut:
    """
    Base class for cuts (region predicates).

    Subclasses implement ``_contains`` on float arrays. ``contains`` accepts scalars
    (returns bool) or arrays (returns boolean arrays), so that histograms can be
    integrated without looping over bins.
    """

    dim = None
    not_class = None

    def contains(self, *coordinates):
        """
        Check if point(s) are inside the cut.

        Parameters
        ----------
        coordinates: float or array_like
            One coordinate per cut dimension (x for 1-D cuts, x and y for 2-D cuts).

        Returns
        -------
        bool or numpy.ndarray
            Containment (bool for scalar input).
        """
        if len(coordinates) != self.dim:
            raise TypeMismatchError(
                f"{type(self).__name__} expects {self.dim} coordinate(s), got {len(coordinates)}"
            )
        arrays = [np.asarray(c, dtype=np.float64) for c in coordinates]
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            result = self._contains(*arrays)
        if all(array.ndim == 0 for array in arrays):
            return bool(result)
        return np.asarray(result, dtype=bool)

    def _contains(self, *coordinates):
        raise NotImplementedError

    def __contains__(self, point):
        if self.dim == 1 and np.isscalar(point):
            return self.contains(point)
        return self.contains(*point)

    def __invert__(self):
        """Return the negated cut (double negation returns the original cut)."""
        if isinstance(self, self.not_class):
            return self.inner
        return self.not_class(self)

    def negate(self):
        """Return the negated cut (same as ``~cut``)."""
        return ~self
