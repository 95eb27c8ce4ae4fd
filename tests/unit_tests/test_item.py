#!/usr/bin/python3

import pytest

from datakiste.cut import Cut1dAbove, Cut2dCirc
from datakiste.errors import InvalidFormatError, TypeMismatchError
from datakiste.event import Run
from datakiste.hist import Histogram
from datakiste.item import Item, ItemType
from datakiste.points import PointSet


def test_item_type_tags():
    assert ItemType.RUN == 0
    assert [ItemType(t).label for t in (1, 2, 3, 4)] == ["Hist1d", "Hist2d", "Hist3d", "Hist4d"]
    assert [ItemType(t).dim for t in (11, 12, 13, 14)] == [1, 2, 3, 4]
    assert ItemType.CUT_1D == 32
    assert ItemType.CUT_2D == 40
    assert ItemType.CUT_2D.label == "Cut2d"
    assert ItemType.RUN.label == "Run"
    assert ItemType.RUN.dim is None


@pytest.mark.parametrize("tag", [5, 10, 15, 31, 33, 39, 41, 1000])
def test_item_type_reserved_tags(tag):
    with pytest.raises(InvalidFormatError, match=f"tag {tag}"):
        ItemType.from_tag(tag)


def test_item_type_of_value(hist_2d):
    assert ItemType.of_value(hist_2d) == ItemType.HIST_2D
    assert ItemType.of_value(PointSet(3)) == ItemType.POINTS_3D
    assert ItemType.of_value(Cut1dAbove(0.0)) == ItemType.CUT_1D
    assert ItemType.of_value(~Cut2dCirc(0.0, 0.0, 1.0)) == ItemType.CUT_2D
    assert ItemType.of_value(Run()) == ItemType.RUN
    with pytest.raises(TypeMismatchError, match="cannot be stored"):
        ItemType.of_value([1, 2, 3])


def test_item_accessors(hist_1d):
    item = Item(hist_1d)
    assert item.item_type == ItemType.HIST_1D
    assert item.is_owned
    assert item.as_hist() is hist_1d
    assert item.as_hist(1) is hist_1d
    with pytest.raises(TypeMismatchError, match="Item is a Hist1d, expected Hist2d"):
        item.as_hist(2)
    with pytest.raises(TypeMismatchError, match="expected Points1d"):
        item.as_points()
    with pytest.raises(TypeMismatchError):
        item.as_cut()
    with pytest.raises(TypeMismatchError, match="expected Run"):
        item.as_run()

    cut_item = Item(Cut2dCirc(0.0, 0.0, 1.0))
    assert cut_item.as_cut(2) == Cut2dCirc(0.0, 0.0, 1.0)
    with pytest.raises(TypeMismatchError):
        cut_item.as_cut(1)


def test_item_copy_on_write(hist_1d):
    borrowed = Item.borrowed(hist_1d)
    assert not borrowed.is_owned
    assert borrowed.value is hist_1d

    value = borrowed.to_mut()
    assert borrowed.is_owned
    assert value is not hist_1d
    value.fill(5.5)
    assert hist_1d.counts_at_val(5.5) == 0
    assert borrowed.value.counts_at_val(5.5) == 1
    # owned items are mutated in place
    assert borrowed.to_mut() is value


def test_item_into_owned(hist_1d):
    owned = Item(hist_1d)
    assert owned.into_owned() is owned

    borrowed = Item.borrowed(hist_1d)
    promoted = borrowed.into_owned()
    assert promoted.is_owned
    assert promoted.value == hist_1d
    assert promoted.value is not hist_1d


def test_item_copy_on_write_cuts_are_shared():
    cut = Cut1dAbove(1.0)
    assert Item.borrowed(cut).to_mut() is cut


def test_item_equality(hist_1d):
    assert Item(hist_1d) == Item.borrowed(hist_1d.copy())
    assert Item(hist_1d) != Item(Histogram.new(10, 0.0, 10.0))
    assert "Hist1d" in repr(Item(hist_1d))
