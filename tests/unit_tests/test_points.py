#!/usr/bin/python3

import numpy as np
import pytest

from datakiste.errors import ConstraintViolationError, TypeMismatchError
from datakiste.points import PointSet


def test_points_init():
    points = PointSet(1, [1, 2.5])
    assert points.points == [(1.0,), (2.5,)]
    assert len(points) == 2

    for dim in (0, 5):
        with pytest.raises(ConstraintViolationError):
            PointSet(dim)


def test_points_push():
    points = PointSet(2)
    points.push((1, 2))
    assert list(points) == [(1.0, 2.0)]
    with pytest.raises(TypeMismatchError):
        points.push((1.0, 2.0, 3.0))
    with pytest.raises(TypeMismatchError):
        points.push(1.0)


def test_points_add():
    first = PointSet(2, [(0.0, 0.0)])
    second = PointSet(2, [(1.0, 1.0), (2.0, 2.0)])
    first.add(second)
    assert len(first) == 3
    assert len(second) == 2
    with pytest.raises(TypeMismatchError):
        first.add(PointSet(3))


def test_points_to_array_and_copy():
    points = PointSet(3, [(1.0, 2.0, 3.0)])
    np.testing.assert_array_equal(points.to_array(), [[1.0, 2.0, 3.0]])
    assert PointSet(4).to_array().shape == (0, 4)

    copied = points.copy()
    assert copied == points
    copied.push((0.0, 0.0, 0.0))
    assert copied != points
    assert repr(points) == "PointSet(dim=3, n_points=1)"
