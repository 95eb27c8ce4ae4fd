"""
Items: the tagged union of all data types stored in a container.

An item wraps exactly one value (run, histogram, point set, or cut) and knows its
type tag. Items either own their value or borrow a value shared with another owner
(copy-on-write): the first mutable access to a borrowed value replaces it with an
owned deep copy, so that mutable state is never shared between two owners.
"""

import enum

from datakiste.cut.cut_1d import Cut1d
from datakiste.cut.cut_2d import Cut2d
from datakiste.errors import InvalidFormatError, TypeMismatchError
from datakiste.event import Run
from datakiste.hist.histogram import Histogram
from datakiste.points import PointSet

__all__ = ["Item", "ItemType"]


class ItemType(enum.IntEnum):
    """
    Item types and their (stable) tags in the binary format.

    Tags 5-10, 15-31, and 33-39 belong to retired item types and are never reused.
    """

    RUN = 0
    HIST_1D = 1
    HIST_2D = 2
    HIST_3D = 3
    HIST_4D = 4
    POINTS_1D = 11
    POINTS_2D = 12
    POINTS_3D = 13
    POINTS_4D = 14
    CUT_1D = 32
    CUT_2D = 40

    @classmethod
    def from_tag(cls, tag):
        """
        Return the item type for a tag.

        Raises
        ------
        InvalidFormatError
            For reserved (retired) or unknown tags.
        """
        try:
            return cls(tag)
        except ValueError as exc:
            raise InvalidFormatError(f"Unknown or retired item type tag {tag}") from exc

    @classmethod
    def of_value(cls, value):
        """
        Return the item type of a value.

        Raises
        ------
        TypeMismatchError
            If the value cannot be stored as item.
        """
        if isinstance(value, Run):
            return cls.RUN
        if isinstance(value, Histogram):
            return cls(value.dim)
        if isinstance(value, PointSet):
            return cls(cls.POINTS_1D + value.dim - 1)
        if isinstance(value, Cut1d):
            return cls.CUT_1D
        if isinstance(value, Cut2d):
            return cls.CUT_2D
        raise TypeMismatchError(f"Values of type {type(value).__name__} cannot be stored as item")

    @property
    def is_hist(self):
        """True for histogram types."""
        return ItemType.HIST_1D <= self <= ItemType.HIST_4D

    @property
    def is_points(self):
        """True for point set types."""
        return ItemType.POINTS_1D <= self <= ItemType.POINTS_4D

    @property
    def is_cut(self):
        """True for cut types."""
        return self in (ItemType.CUT_1D, ItemType.CUT_2D)

    @property
    def dim(self):
        """Dimension of histogram, point set, or cut types (None for runs)."""
        if self.is_hist:
            return int(self)
        if self.is_points:
            return int(self) - ItemType.POINTS_1D + 1
        if self.is_cut:
            return 1 if self == ItemType.CUT_1D else 2
        return None

    @property
    def label(self):
        """Human readable type name (e.g., 'Hist2d')."""
        if self.is_hist:
            return f"Hist{self.dim}d"
        if self.is_points:
            return f"Points{self.dim}d"
        if self.is_cut:
            return f"Cut{self.dim}d"
        return "Run"


def _copy_value(value):
    """Return an independent copy of an item value (cuts are immutable)."""
    if isinstance(value, Cut1d | Cut2d):
        return value
    return value.copy()


class Item:
    """
    Tagged value stored in a container.

    Parameters
    ----------
    value: Run, Histogram, PointSet, Cut1d, or Cut2d
        Item value.
    owned: bool
        False if the value is shared with another owner (copied on first mutation).

    Raises
    ------
    TypeMismatchError
        If the value cannot be stored as item.
    """

    def __init__(self, value, owned=True):
        """Initialize Item."""
        self._item_type = ItemType.of_value(value)
        self._value = value
        self._owned = owned

    @classmethod
    def borrowed(cls, value):
        """Return an item sharing value with its current owner."""
        return cls(value, owned=False)

    @property
    def item_type(self):
        """Item type."""
        return self._item_type

    @property
    def is_owned(self):
        """False if the value is shared with another owner."""
        return self._owned

    @property
    def value(self):
        """Item value (read access; use to_mut() for modifications)."""
        return self._value

    def to_mut(self):
        """
        Return the value for modification.

        A borrowed value is replaced by an owned copy first.
        """
        if not self._owned:
            self._value = _copy_value(self._value)
            self._owned = True
        return self._value

    def into_owned(self):
        """Return an owned item (self if already owned)."""
        if self._owned:
            return self
        return Item(_copy_value(self._value), owned=True)

    def expect(self, *item_types):
        """
        Return the value if the item has one of the given types.

        Raises
        ------
        TypeMismatchError
            If the item type is not one of item_types.
        """
        if self._item_type not in item_types:
            expected = ", ".join(ItemType(t).label for t in item_types)
            raise TypeMismatchError(f"Item is a {self._item_type.label}, expected {expected}")
        return self._value

    def as_hist(self, dim=None):
        """Return the histogram (of the given dimension if dim is set)."""
        types = [ItemType(dim)] if dim else [ItemType(d) for d in range(1, 5)]
        return self.expect(*types)

    def as_points(self, dim=None):
        """Return the point set (of the given dimension if dim is set)."""
        types = (
            [ItemType(ItemType.POINTS_1D + dim - 1)]
            if dim
            else [ItemType(ItemType.POINTS_1D + d) for d in range(4)]
        )
        return self.expect(*types)

    def as_cut(self, dim=None):
        """Return the cut (of the given dimension if dim is set)."""
        if dim == 1:
            return self.expect(ItemType.CUT_1D)
        if dim == 2:
            return self.expect(ItemType.CUT_2D)
        return self.expect(ItemType.CUT_1D, ItemType.CUT_2D)

    def as_run(self):
        """Return the run."""
        return self.expect(ItemType.RUN)

    def __eq__(self, other):
        if not isinstance(other, Item):
            return NotImplemented
        return self._item_type == other._item_type and self._value == other._value

    __hash__ = None

    def __repr__(self):
        ownership = "owned" if self._owned else "borrowed"
        return f"Item({self._item_type.label}, {ownership}, {self._value!r})"
