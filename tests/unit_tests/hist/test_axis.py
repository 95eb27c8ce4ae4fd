#!/usr/bin/python3

import math

import numpy as np
import pytest

from datakiste.errors import ConstraintViolationError
from datakiste.hist import Axis


def test_axis_init():
    axis = Axis(10, 0.0, 5.0)
    assert axis.bins == 10
    assert axis.bin_width == pytest.approx(0.5)
    assert not axis.is_degenerate

    # reversed bounds are swapped
    axis = Axis(4, 2.0, -2.0)
    assert (axis.min, axis.max) == (-2.0, 2.0)

    for bins in (0, -1, 2.5, True):
        with pytest.raises(ConstraintViolationError, match="at least one bin"):
            Axis(bins, 0.0, 1.0)


def test_bin_at():
    axis = Axis(3, 0.0, 3.0)
    assert axis.bin_at(0.0) == 0
    assert axis.bin_at(0.999) == 0
    assert axis.bin_at(1.0) == 1
    assert axis.bin_at(2.5) == 2
    # clamping
    assert axis.bin_at(-10.0) == 0
    assert axis.bin_at(3.0) == 2
    assert axis.bin_at(1e300) == 2
    assert axis.bin_at(math.inf) == 2
    assert axis.bin_at(-math.inf) == 0
    assert axis.bin_at(math.nan) == 0


def test_bin_at_degenerate_axis():
    axis = Axis(5, 1.0, 1.0)
    assert axis.is_degenerate
    assert axis.bin_width == 0.0
    assert axis.bin_at(0.0) == 0
    assert axis.bin_at(1.0) == 0
    assert axis.bin_at(1.5) == 4
    np.testing.assert_array_equal(axis.bins_at([0.0, 1.0, 1.5]), [0, 0, 4])


def test_bins_at_matches_bin_at():
    axis = Axis(7, -1.3, 2.9)
    values = [-5.0, -1.3, 0.0, 0.1, 1.7, 2.8999, 2.9, 10.0, math.nan, math.inf, -math.inf]
    np.testing.assert_array_equal(axis.bins_at(values), [axis.bin_at(v) for v in values])


def test_bin_round_trip():
    axis = Axis(1001, -5.0, 5.0)
    for i in range(axis.bins):
        assert axis.bin_at(axis.val_at_bin_mid(i)) == i


def test_bin_values():
    axis = Axis(4, 0.0, 2.0)
    assert axis.val_at_bin_min(1) == pytest.approx(0.5)
    assert axis.val_at_bin_mid(1) == pytest.approx(0.75)
    assert axis.val_at_bin_max(1) == pytest.approx(1.0)
    np.testing.assert_allclose(axis.bin_mids(), [0.25, 0.75, 1.25, 1.75])
    np.testing.assert_allclose(axis.bin_edges(), [0.0, 0.5, 1.0, 1.5, 2.0])
    assert axis.contains_bin(3)
    assert not axis.contains_bin(4)
    assert not axis.contains_bin(-1)


def test_axis_is_immutable():
    axis = Axis(2, 0.0, 1.0)
    with pytest.raises(AttributeError):
        axis.bins = 3
    assert axis == Axis(2, 0, 1)
