#!/usr/bin/python3

import json
import math

import pytest

from datakiste.cut import (
    Cut1dAbove,
    Cut1dBelow,
    Cut1dBetween,
    Cut2dCirc,
    Cut2dEllipse,
    Cut2dPoly,
    Cut2dRect,
    cut_from_dict,
    cut_to_dict,
    get_cut,
    read_cut_file,
    write_cut_file,
)
from datakiste.errors import InvalidFormatError, LookupNotFoundError, TypeMismatchError


def test_cut_to_dict():
    assert cut_to_dict(Cut1dBetween(0.0, 1.0)) == {
        "Cut1d": {"Cut1dBetween": {"min": 0.0, "max": 1.0}}
    }
    assert cut_to_dict(~Cut2dCirc(0.0, 0.0, 1.0)) == {
        "Cut2d": {"Not": {"Cut2dCirc": {"x0": 0.0, "y0": 0.0, "r": 1.0}}}
    }
    ellipse = cut_to_dict(Cut2dEllipse(0.0, 0.0, 2.0, 1.0, theta=math.pi / 2))
    assert ellipse["Cut2d"]["Cut2dEllipse"]["theta"] == pytest.approx(90.0)


@pytest.mark.parametrize(
    "cut",
    [
        Cut1dAbove(1.0),
        Cut1dBelow(-1.0),
        ~Cut1dBetween(0.0, 1.0),
        Cut2dRect(0.0, 0.0, 1.0, 2.0),
        ~Cut2dCirc(1.0, 1.0, 0.5),
        Cut2dPoly([(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]),
    ],
)
def test_cut_dict_round_trip(cut):
    assert cut_from_dict(cut_to_dict(cut)) == cut


def test_cut_from_dict_nested_not():
    inner = {"Cut1dAbove": {"min": 2.0}}
    data = {"Cut1d": {"Not": {"Not": {"Not": inner}}}}
    assert cut_from_dict(data) == ~Cut1dAbove(2.0)
    assert cut_from_dict({"Cut1d": {"Not": {"Not": inner}}}) == Cut1dAbove(2.0)


def test_cut_from_dict_ellipse_degrees():
    cut = cut_from_dict(
        {"Cut2d": {"Cut2dEllipse": {"x0": 0, "y0": 0, "rx": 2, "ry": 1, "theta": 90}}}
    )
    assert cut.theta == pytest.approx(math.pi / 2)


@pytest.mark.parametrize(
    "data",
    [
        None,
        {},
        {"Cut3d": {"Cut1dAbove": {"min": 1.0}}},
        {"Cut1d": {"Cut2dCirc": {"x0": 0, "y0": 0, "r": 1}}},
        {"Cut1d": {"Cut1dAbove": {"max": 1.0}}},
        {"Cut1d": {"Cut1dAbove": {"min": 1.0}, "Cut1dBelow": {"max": 1.0}}},
    ],
)
def test_cut_from_dict_invalid(data):
    with pytest.raises(InvalidFormatError):
        cut_from_dict(data)


def test_cut_file_round_trip(tmp_test_directory):
    cuts = {
        "protons": Cut2dPoly([(0.1, 0.75), (0.5, 0.65), (0.75, 0.5)]),
        "window": Cut1dBetween(1.0, 2.0),
    }
    for suffix in ("json", "yml"):
        file_name = tmp_test_directory / f"cuts.{suffix}"
        write_cut_file(cuts, file_name)
        assert read_cut_file(file_name) == cuts


def test_read_cut_file_invalid(tmp_test_directory):
    file_name = tmp_test_directory / "cuts.json"
    file_name.write_text(json.dumps({"a": {"Cut1d": {"Cut1dAbove": {"min": "x"}}}}))
    with pytest.raises(InvalidFormatError, match="Invalid cut file"):
        read_cut_file(file_name)

    file_name.write_text("{ not json")
    with pytest.raises(InvalidFormatError, match="Invalid cut file"):
        read_cut_file(file_name)


def test_get_cut():
    cuts = {"window": Cut1dBetween(1.0, 2.0)}
    assert get_cut(cuts, "window") == Cut1dBetween(1.0, 2.0)
    assert get_cut(cuts, "window", dim=1) == Cut1dBetween(1.0, 2.0)
    with pytest.raises(LookupNotFoundError, match="Cut 'missing' not found"):
        get_cut(cuts, "missing")
    with pytest.raises(TypeMismatchError):
        get_cut(cuts, "window", dim=2)
