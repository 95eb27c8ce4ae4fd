"""Container: ordered collection of named items."""

import logging

from datakiste.constants import FORMAT_VERSION
from datakiste.errors import LookupNotFoundError, TypeMismatchError
from datakiste.hist.histogram import Histogram
from datakiste.item import Item
from datakiste.points import PointSet

__all__ = ["Container"]


class Container:
    """
    Ordered collection of named items.

    Item names are unique; inserting an item with an existing name replaces the
    previous item (last writer wins). Iteration follows insertion order.

    Parameters
    ----------
    items: dict, optional
        Initial items or values by name.
    version: tuple of int
        Container format version (major, minor, patch).
    """

    def __init__(self, items=None, version=FORMAT_VERSION):
        """Initialize Container."""
        self._logger = logging.getLogger(__name__)
        self.version = tuple(version)
        self._items = {}
        for name, item in (items or {}).items():
            self.insert(name, item)

    def insert(self, name, item):
        """
        Insert an item (replaces an existing item with the same name).

        Parameters
        ----------
        name: str
            Item name.
        item: Item or value
            Item or value (Run, Histogram, PointSet, Cut1d, or Cut2d) to be owned.
        """
        if not isinstance(name, str):
            raise TypeMismatchError(f"Item names must be strings, got {name!r}")
        if not isinstance(item, Item):
            item = Item(item)
        if name in self._items:
            self._logger.debug(f"Replacing item '{name}'")
        self._items[name] = item

    def get(self, name):
        """
        Return an item by name.

        Raises
        ------
        LookupNotFoundError
            If there is no item with this name.
        """
        try:
            return self._items[name]
        except KeyError as exc:
            raise LookupNotFoundError(f"Item '{name}' not found") from exc

    def get_hist(self, name, dim=None):
        """Return a histogram by name (TypeMismatchError for other item types)."""
        return self.get(name).as_hist(dim)

    def get_points(self, name, dim=None):
        """Return a point set by name (TypeMismatchError for other item types)."""
        return self.get(name).as_points(dim)

    def get_cut(self, name, dim=None):
        """Return a cut by name (TypeMismatchError for other item types)."""
        return self.get(name).as_cut(dim)

    def get_run(self, name):
        """Return a run by name (TypeMismatchError for other item types)."""
        return self.get(name).as_run()

    def remove(self, name):
        """Remove and return an item by name."""
        try:
            return self._items.pop(name)
        except KeyError as exc:
            raise LookupNotFoundError(f"Item '{name}' not found") from exc

    def names(self):
        """Return item names in insertion order."""
        return list(self._items)

    def items(self):
        """Return (name, item) pairs in insertion order."""
        return list(self._items.items())

    def extend(self, other):
        """
        Insert all items of another container (last writer wins).

        The items are shared with the other container until they are modified.

        Parameters
        ----------
        other: Container
            Container to take items from.
        """
        for name, item in other.items():
            self.insert(name, Item.borrowed(item.value))

    def combine(self, other):
        """
        Accumulate histograms and point sets of another container by name.

        Histograms are added to existing histograms of the same name (re-histogrammed
        onto the axes of the existing histogram); point sets are appended. Items not
        yet present are inserted as copies.

        Parameters
        ----------
        other: Container
            Container to take items from.

        Raises
        ------
        TypeMismatchError
            For item types other than histograms and point sets, or if an existing
            item with the same name has a different type. The container is left
            unchanged in this case.
        """
        for name, item in other.items():
            item_type = item.item_type
            if not (item_type.is_hist or item_type.is_points):
                raise TypeMismatchError(
                    f"Cannot combine item '{name}' of type {item_type.label} "
                    "(only histograms and point sets)"
                )
            if name in self._items:
                try:
                    self._items[name].expect(item_type)
                except TypeMismatchError as exc:
                    raise TypeMismatchError(f"Cannot combine item '{name}': {exc}") from exc

        for name, item in other.items():
            item_type = item.item_type
            if name not in self._items:
                value = item.value
                empty = Histogram(value.axes) if item_type.is_hist else PointSet(value.dim)
                self.insert(name, empty)
            self._logger.debug(f"Combining item '{name}' ({item_type.label})")
            self._items[name].to_mut().add(item.value)

    def __len__(self):
        return len(self._items)

    def __contains__(self, name):
        return name in self._items

    def __iter__(self):
        return iter(self._items)

    def __eq__(self, other):
        if not isinstance(other, Container):
            return NotImplemented
        return self.version == other.version and self.items() == other.items()

    __hash__ = None

    def __repr__(self):
        summary = ", ".join(f"{name}: {item.item_type.label}" for name, item in self._items.items())
        return f"Container(version={self.version}, items={{{summary}}})"

