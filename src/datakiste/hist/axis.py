"""Binning definition of a single histogram dimension."""

import math
from dataclasses import dataclass

import numpy as np

from datakiste.errors import ConstraintViolationError

__all__ = ["Axis"]


@dataclass(frozen=True)
class Axis:
    """
    Binning definition of one histogram dimension.

    Values outside of [min, max) are not rejected; they are counted in the first or
    last bin (clamping).

    Parameters
    ----------
    bins: int
        Number of bins (at least one).
    min: float
        Lower edge of the first bin.
    max: float
        Upper edge of the last bin. Reversed bounds are swapped.

    Raises
    ------
    ConstraintViolationError
        If the number of bins is smaller than one.
    """

    bins: int
    min: float
    max: float

    def __post_init__(self):
        """Validate number of bins and order the bounds."""
        if isinstance(self.bins, bool) or int(self.bins) != self.bins or self.bins < 1:
            raise ConstraintViolationError(f"Axis requires at least one bin (got {self.bins})")
        lower, upper = float(self.min), float(self.max)
        if lower > upper:
            lower, upper = upper, lower
        object.__setattr__(self, "bins", int(self.bins))
        object.__setattr__(self, "min", lower)
        object.__setattr__(self, "max", upper)

    @property
    def bin_width(self):
        """Width of a single bin (zero for a degenerate axis)."""
        return (self.max - self.min) / self.bins

    @property
    def is_degenerate(self):
        """True if lower and upper bound are identical."""
        return self.max == self.min

    def bin_at(self, value):
        """
        Return the bin containing value.

        Out-of-range values are clamped to the first or last bin. NaN is mapped
        to the first bin. On a degenerate axis, values above the bound are mapped
        to the last bin and all others to the first bin.

        Parameters
        ----------
        value: float
            Value to locate.

        Returns
        -------
        int
            Bin index in [0, bins - 1].
        """
        value = float(value)
        if math.isnan(value):
            return 0
        if self.is_degenerate:
            return self.bins - 1 if value > self.min else 0
        position = self.bins * (value - self.min) / (self.max - self.min)
        if position <= 0.0:
            return 0
        if position >= self.bins:
            return self.bins - 1
        return min(int(math.floor(position)), self.bins - 1)

    def bins_at(self, values):
        """
        Return the bins containing an array of values (vectorized version of bin_at).

        Parameters
        ----------
        values: array_like
            Values to locate.

        Returns
        -------
        numpy.ndarray
            Bin indices (int64).
        """
        values = np.asarray(values, dtype=np.float64)
        if self.is_degenerate:
            return np.where(values > self.min, self.bins - 1, 0).astype(np.int64)
        with np.errstate(invalid="ignore"):
            position = self.bins * (values - self.min) / (self.max - self.min)
            position = np.nan_to_num(position, nan=0.0, posinf=self.bins, neginf=0.0)
            return np.clip(np.floor(position), 0, self.bins - 1).astype(np.int64)

    def val_at_bin_min(self, bin_index):
        """Return the lower edge of a bin."""
        return bin_index * self.bin_width + self.min

    def val_at_bin_mid(self, bin_index):
        """Return the mid-point of a bin."""
        return (bin_index + 0.5) * self.bin_width + self.min

    def val_at_bin_max(self, bin_index):
        """Return the upper edge of a bin."""
        return (bin_index + 1) * self.bin_width + self.min

    def bin_mids(self):
        """Return the mid-points of all bins."""
        return (np.arange(self.bins, dtype=np.float64) + 0.5) * self.bin_width + self.min

    def bin_edges(self):
        """Return the bins + 1 bin edges."""
        return np.arange(self.bins + 1, dtype=np.float64) * self.bin_width + self.min

    def contains_bin(self, bin_index):
        """Check if bin_index is a valid bin of this axis."""
        return 0 <= bin_index < self.bins
