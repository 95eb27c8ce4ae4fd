"""Exceptions raised by datakiste.

File access errors are not wrapped: they surface as the builtin ``OSError`` family.
"""

__all__ = [
    "ConstraintViolationError",
    "DatakisteError",
    "InvalidFormatError",
    "LookupNotFoundError",
    "TypeMismatchError",
    "UnsupportedVersionError",
]


class DatakisteError(Exception):
    """Base class for all datakiste errors."""


class InvalidFormatError(DatakisteError):
    """Exception for malformed input (bad magic number, truncated payload, bad item name)."""


class UnsupportedVersionError(DatakisteError):
    """Exception for a container format version not understood by this build."""


class LookupNotFoundError(DatakisteError, KeyError):
    """Exception for a named item or cut which does not exist."""

    def __str__(self):
        """Return message without the quotes added by KeyError."""
        return str(self.args[0]) if self.args else ""


class TypeMismatchError(DatakisteError, TypeError):
    """Exception for an item or cut of unexpected type or dimensionality."""


class ConstraintViolationError(DatakisteError, ValueError):
    """Exception for invalid values (e.g., axis with zero bins, wrong counts length)."""
