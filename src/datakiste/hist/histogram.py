"""N-dimensional (one to four) histograms with 64 bit counters."""

import logging
import math

import numpy as np

from datakiste.errors import ConstraintViolationError, TypeMismatchError
from datakiste.hist.axis import Axis

__all__ = ["MAX_COUNT", "MAX_DIMENSIONS", "Histogram"]

MAX_DIMENSIONS = 4
MAX_COUNT = int(np.iinfo(np.uint64).max)
# Maximum number of random values drawn at once when de-quantizing a histogram
_FUZZ_CHUNK_SIZE = 1 << 20


class Histogram:
    """
    Histogram with one to four axes and unsigned 64 bit counts.

    Counts are stored in a flat array in row-major order (first axis varies slowest).
    Counters wrap around silently on overflow (no overflow check is done).

    Parameters
    ----------
    axes: list of Axis
        Axis definitions (one per dimension).
    counts: array_like, optional
        Initial counts (flat, row-major). Zero counts if not given.

    Raises
    ------
    ConstraintViolationError
        If the number of axes is not in [1, 4] or the counts length does not match the axes.
    """

    def __init__(self, axes, counts=None):
        """Initialize Histogram."""
        self._logger = logging.getLogger(__name__)
        self.axes = tuple(axes)
        if not 1 <= len(self.axes) <= MAX_DIMENSIONS:
            raise ConstraintViolationError(
                f"Histograms have 1 to {MAX_DIMENSIONS} axes (got {len(self.axes)})"
            )
        if not all(isinstance(axis, Axis) for axis in self.axes):
            raise TypeMismatchError(f"Histogram axes must be of type Axis: {self.axes}")

        if counts is None:
            self._counts = np.zeros(self.size, dtype=np.uint64)
        else:
            self._counts = self._validated_counts(counts)

    @classmethod
    def new(cls, *axis_parameters):
        """
        Create an empty histogram from flat (bins, min, max) triplets.

        Parameters
        ----------
        axis_parameters: int, float
            Triplets of (bins, min, max) for each axis,
            e.g. ``Histogram.new(100, 0.0, 10.0, 50, -1.0, 1.0)``.

        Returns
        -------
        Histogram
            Empty histogram.
        """
        if len(axis_parameters) == 0 or len(axis_parameters) % 3 != 0:
            raise ConstraintViolationError(
                f"Expected (bins, min, max) triplets, got {len(axis_parameters)} values"
            )
        axes = [
            Axis(int(axis_parameters[i]), axis_parameters[i + 1], axis_parameters[i + 2])
            for i in range(0, len(axis_parameters), 3)
        ]
        return cls(axes)

    def _validated_counts(self, counts):
        """Return counts as flat uint64 array of the size defined by the axes."""
        _counts = np.asarray(counts)
        if _counts.size != self.size:
            raise ConstraintViolationError(
                f"Counts length {_counts.size} does not match the number of bins {self.size}"
            )
        if _counts.size > 0 and np.issubdtype(_counts.dtype, np.signedinteger):
            if _counts.min() < 0:
                raise ConstraintViolationError("Histogram counts must not be negative")
        return np.array(_counts, dtype=np.uint64).reshape(-1)

    @property
    def dim(self):
        """Number of dimensions."""
        return len(self.axes)

    @property
    def shape(self):
        """Number of bins per axis."""
        return tuple(axis.bins for axis in self.axes)

    @property
    def size(self):
        """Total number of bins."""
        return math.prod(self.shape)

    @property
    def counts(self):
        """Flat (row-major) counts array."""
        return self._counts

    @counts.setter
    def counts(self, counts):
        self._counts = self._validated_counts(counts)

    @property
    def counts_nd(self):
        """Counts array reshaped to the histogram shape (view)."""
        return self._counts.reshape(self.shape)

    @property
    def total_count(self):
        """Sum of all counts."""
        return int(self._counts.sum(dtype=np.uint64))

    def _coordinates(self, value):
        """Return value as tuple with one float per dimension."""
        if self.dim == 1 and np.isscalar(value):
            return (float(value),)
        try:
            coordinates = tuple(float(v) for v in value)
        except TypeError as exc:
            raise TypeMismatchError(
                f"Expected {self.dim} coordinate(s) for a {self.dim}-D histogram, got {value!r}"
            ) from exc
        if len(coordinates) != self.dim:
            raise TypeMismatchError(
                f"Expected {self.dim} coordinate(s) for a {self.dim}-D histogram, got {value!r}"
            )
        return coordinates

    def bin_coords_at(self, value):
        """Return the bin coordinates (one bin index per axis) containing value."""
        return tuple(
            axis.bin_at(coordinate)
            for axis, coordinate in zip(self.axes, self._coordinates(value), strict=True)
        )

    def flat_index(self, bin_coords):
        """
        Return the flat (row-major) index of a bin.

        Parameters
        ----------
        bin_coords: int or tuple of int
            Bin index per axis (an int is accepted for 1-D histograms).

        Returns
        -------
        int
            Flat index.

        Raises
        ------
        ConstraintViolationError
            If the bin coordinates are out of range.
        """
        if np.isscalar(bin_coords):
            bin_coords = (bin_coords,)
        if len(bin_coords) != self.dim:
            raise TypeMismatchError(
                f"Expected {self.dim} bin index(es) for a {self.dim}-D histogram, got {bin_coords}"
            )
        try:
            return int(np.ravel_multi_index(tuple(int(b) for b in bin_coords), self.shape))
        except ValueError as exc:
            raise ConstraintViolationError(
                f"Bin {tuple(bin_coords)} out of range for shape {self.shape}"
            ) from exc

    def bin_coords(self, flat_index):
        """Return the bin coordinates for a flat (row-major) index (inverse of flat_index)."""
        if not 0 <= flat_index < self.size:
            raise ConstraintViolationError(
                f"Flat index {flat_index} out of range for {self.size} bins"
            )
        return tuple(int(i) for i in np.unravel_index(int(flat_index), self.shape))

    def _flat_indices_at(self, values):
        """Return flat indices for an (M, dim) array of values."""
        values = np.asarray(values, dtype=np.float64)
        if self.dim == 1 and values.ndim == 1:
            values = values.reshape(-1, 1)
        if values.ndim != 2 or values.shape[1] != self.dim:
            raise TypeMismatchError(
                f"Expected values of shape (M, {self.dim}) for a {self.dim}-D histogram, "
                f"got {values.shape}"
            )
        bins = tuple(axis.bins_at(values[:, i]) for i, axis in enumerate(self.axes))
        return np.ravel_multi_index(bins, self.shape)

    @staticmethod
    def _as_count(counts):
        """Return counts as uint64 (non-negative integers up to 2**64 - 1)."""
        try:
            integral = int(counts)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ConstraintViolationError(f"Counts must be integral (got {counts!r})") from exc
        if integral != counts:
            raise ConstraintViolationError(f"Counts must be integral (got {counts!r})")
        if integral < 0:
            raise ConstraintViolationError(f"Counts must not be negative (got {counts})")
        if integral > MAX_COUNT:
            raise ConstraintViolationError(f"Counts do not fit into 64 bits (got {counts})")
        return np.uint64(integral)

    def fill(self, value, weight=1):
        """
        Increment the bin containing value by weight.

        Parameters
        ----------
        value: float or tuple of float
            Value (a float for 1-D histograms or one coordinate per axis).
        weight: int
            Counts to add.

        Raises
        ------
        ConstraintViolationError
            If weight is negative, not integral, or exceeds 64 bits.
        """
        self.fill_with_counts(value, weight)

    def fill_with_counts(self, value, counts):
        """Increment the bin containing value by counts."""
        index = self.flat_index(self.bin_coords_at(value))
        np.add.at(self._counts, index, self._as_count(counts))

    def fill_at_bin(self, bin_coords, counts=1):
        """Increment a bin given by its coordinates."""
        np.add.at(self._counts, self.flat_index(bin_coords), self._as_count(counts))

    def fill_many(self, values, counts=None):
        """
        Fill an array of values.

        Parameters
        ----------
        values: array_like
            Values of shape (M, dim) (or (M,) for 1-D histograms).
        counts: array_like, optional
            Counts per value (one count per value if not given).
        """
        indices = self._flat_indices_at(values)
        if counts is None:
            counts = np.ones(indices.shape, dtype=np.uint64)
        else:
            counts = np.asarray(counts)
            if counts.size > 0 and np.issubdtype(counts.dtype, np.signedinteger):
                if counts.min() < 0:
                    raise ConstraintViolationError("Counts must not be negative")
            counts = counts.astype(np.uint64)
        np.add.at(self._counts, indices, counts)

    def counts_at_bin(self, bin_coords):
        """Return the counts of a bin given by its coordinates."""
        return int(self._counts[self.flat_index(bin_coords)])

    def counts_at_val(self, value):
        """Return the counts of the bin containing value."""
        return int(self._counts[self.flat_index(self.bin_coords_at(value))])

    def val_at_idx(self, flat_index):
        """
        Return the mid-point of the bin with the given flat index.

        Returns
        -------
        float or tuple of float
            Mid-point (a float for 1-D histograms).
        """
        mids = tuple(
            axis.val_at_bin_mid(b)
            for axis, b in zip(self.axes, self.bin_coords(flat_index), strict=True)
        )
        return mids[0] if self.dim == 1 else mids

    def bin_mid_values(self):
        """
        Return the mid-points of all bins.

        Returns
        -------
        numpy.ndarray
            Array of shape (size, dim) in flat index order.
        """
        grids = np.meshgrid(*(axis.bin_mids() for axis in self.axes), indexing="ij")
        return np.stack([grid.reshape(-1) for grid in grids], axis=-1)

    def iter_bins(self, include_empty=True):
        """
        Iterate over bins.

        Yields
        ------
        tuple
            (bin mid-point coordinates, counts) per bin in flat index order.
        """
        mids = self.bin_mid_values()
        for index, count in enumerate(self._counts):
            if include_empty or count > 0:
                yield tuple(float(v) for v in mids[index]), int(count)

    def clear(self):
        """Set all counts to zero (axes are kept)."""
        self._counts[:] = 0

    def empty_like(self):
        """Return a histogram with the same axes and zero counts."""
        return Histogram(self.axes)

    def copy(self):
        """Return a deep copy."""
        return Histogram(self.axes, self._counts.copy())

    def _check_same_dimension(self, other):
        if not isinstance(other, Histogram):
            raise TypeMismatchError(f"Expected a Histogram, got {type(other).__name__}")
        if other.dim != self.dim:
            raise TypeMismatchError(
                f"Cannot add a {other.dim}-D histogram to a {self.dim}-D histogram"
            )

    def add(self, other):
        """
        Re-histogram the contents of other into this histogram.

        The mid-point of every populated bin of other is filled with its counts.
        The result is exact for identical axes and lossy otherwise.

        Parameters
        ----------
        other: Histogram
            Histogram of the same dimension.

        Raises
        ------
        TypeMismatchError
            If the histograms have different dimensions.
        """
        self._check_same_dimension(other)
        populated = np.nonzero(other.counts)[0]
        if populated.size == 0:
            return
        self.fill_many(other.bin_mid_values()[populated], other.counts[populated])

    def add_fuzz(self, other, rng=None):
        """
        Re-histogram other into this histogram using uniformly distributed values.

        For every count in every bin of other, one value is drawn uniformly in the
        bin's range [bin_min, bin_max) and filled. The total number of counts is
        conserved. Results are only reproducible if a seeded generator is given.

        Parameters
        ----------
        other: Histogram
            Histogram of the same dimension.
        rng: numpy.random.Generator or int, optional
            Random generator or seed (unseeded generator if not given).

        Raises
        ------
        TypeMismatchError
            If the histograms have different dimensions.
        """
        self._check_same_dimension(other)
        rng = np.random.default_rng(rng)
        for flat_indices in self._iter_fuzz_chunks(other):
            bin_coords = np.unravel_index(flat_indices, other.shape)
            values = np.empty((flat_indices.size, other.dim), dtype=np.float64)
            for i, axis in enumerate(other.axes):
                lower = axis.val_at_bin_min(bin_coords[i])
                values[:, i] = lower + axis.bin_width * rng.random(flat_indices.size)
            self.fill_many(values)

    @staticmethod
    def _iter_fuzz_chunks(other):
        """Yield flat bin indices of other, repeated by their counts, in bounded chunks."""
        chunk_bins, chunk_counts, chunk_total = [], [], 0
        for index in np.nonzero(other.counts)[0]:
            remaining = int(other.counts[index])
            while remaining > 0:
                take = min(remaining, _FUZZ_CHUNK_SIZE - chunk_total)
                chunk_bins.append(index)
                chunk_counts.append(take)
                chunk_total += take
                remaining -= take
                if chunk_total == _FUZZ_CHUNK_SIZE:
                    yield np.repeat(chunk_bins, chunk_counts)
                    chunk_bins, chunk_counts, chunk_total = [], [], 0
        if chunk_total > 0:
            yield np.repeat(chunk_bins, chunk_counts)

    def cut_mask(self, cut):
        """
        Return a boolean mask of the bins whose mid-point is inside the cut.

        Parameters
        ----------
        cut: Cut1d or Cut2d
            Cut of the same dimension as the histogram.

        Returns
        -------
        numpy.ndarray
            Boolean array (flat index order).

        Raises
        ------
        TypeMismatchError
            If the cut dimension does not match the histogram dimension.
        """
        cut_dim = getattr(cut, "dim", None)
        if cut_dim != self.dim:
            raise TypeMismatchError(
                f"Cannot apply a {cut_dim}-D cut ({type(cut).__name__}) "
                f"to a {self.dim}-D histogram"
            )
        mids = self.bin_mid_values()
        mask = cut.contains(*(mids[:, i] for i in range(self.dim)))
        return np.broadcast_to(np.asarray(mask, dtype=bool), (self.size,))

    def integrate(self, cut=None):
        """
        Sum the counts of all bins whose mid-point is inside the cut.

        Parameters
        ----------
        cut: Cut1d or Cut2d, optional
            Cut of the same dimension as the histogram (all bins if not given).

        Returns
        -------
        int
            Sum of counts.
        """
        if cut is None:
            return self.total_count
        return int(self._counts[self.cut_mask(cut)].sum(dtype=np.uint64))

    def filter(self, cut):
        """
        Return a histogram with the counts of all bins outside of the cut set to zero.

        Parameters
        ----------
        cut: Cut1d or Cut2d
            Cut of the same dimension as the histogram.

        Returns
        -------
        Histogram
            New histogram with the same axes.
        """
        return Histogram(self.axes, np.where(self.cut_mask(cut), self._counts, np.uint64(0)))

    def __eq__(self, other):
        if not isinstance(other, Histogram):
            return NotImplemented
        return self.axes == other.axes and np.array_equal(self._counts, other._counts)

    __hash__ = None

    def __repr__(self):
        axes = ", ".join(f"({a.bins}, {a.min}, {a.max})" for a in self.axes)
        return f"Histogram({self.dim}-D, axes=[{axes}], total_count={self.total_count})"
