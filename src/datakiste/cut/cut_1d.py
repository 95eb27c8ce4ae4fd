"""One-dimensional cuts (open intervals)."""

from dataclasses import dataclass

import numpy as np

from datakiste.cut.base import Cut

__all__ = ["Cut1d", "Cut1dAbove", "Cut1dBelow", "Cut1dBetween", "Cut1dNot"]


class Cut1d(Cut):
    """Base class for one-dimensional cuts."""

    dim = 1


@dataclass(frozen=True)
class Cut1dAbove(Cut1d):
    """Values strictly above min."""

    min: float

    def _contains(self, x):
        return x > self.min


@dataclass(frozen=True)
class Cut1dBelow(Cut1d):
    """Values strictly below max."""

    max: float

    def _contains(self, x):
        return x < self.max


@dataclass(frozen=True)
class Cut1dBetween(Cut1d):
    """Values strictly between min and max."""

    min: float
    max: float

    def _contains(self, x):
        return np.logical_and(x > self.min, x < self.max)


@dataclass(frozen=True)
class Cut1dNot(Cut1d):
    """Negation of a one-dimensional cut."""

    inner: Cut1d

    def __post_init__(self):
        if not isinstance(self.inner, Cut1d):
            raise TypeError(f"Cut1dNot requires a one-dimensional cut, got {self.inner!r}")

    def _contains(self, x):
        return np.logical_not(self.inner._contains(x))  # pylint: disable=protected-access


Cut1d.not_class = Cut1dNot
