"""Software and container format version settings."""

# this is adapted from https://github.com/cta-observatory/ctapipe/blob/main/ctapipe/version.py
# which is adapted from https://github.com/astropy/astropy/blob/master/astropy/version.py
# see https://github.com/astropy/astropy/pull/10774 for a discussion on why this needed.

from packaging.version import InvalidVersion, Version

from datakiste.constants import FORMAT_VERSION

try:
    try:
        from ._dev_version import version
    except ImportError:
        from ._version import version
except Exception:  # pylint: disable=broad-except
    import warnings

    warnings.warn("Could not determine datakiste version; this indicates a broken installation.")
    del warnings
    version = "0.0.0"  # pylint: disable=invalid-name

__version__ = version


def format_version_string(format_version=FORMAT_VERSION, prefix="v"):
    """
    Return the container format version as string.

    Parameters
    ----------
    format_version: tuple of int
        (major, minor, patch) version triplet.
    prefix: str
        Prefix prepended to the version (e.g., 'v' for 'v0.2.0').

    Returns
    -------
    str
        Version string.
    """
    major, minor, patch = format_version
    return f"{prefix}{major}.{minor}.{patch}"


def parse_format_version(version_string):
    """
    Parse a semantic version string into a (major, minor, patch) triplet.

    Missing minor or patch numbers are set to zero; a leading 'v' is accepted.

    Parameters
    ----------
    version_string: str
        Version string (e.g., "0.2.0" or "v0.2").

    Returns
    -------
    tuple of int
        (major, minor, patch)

    Raises
    ------
    ValueError
        If the string is not a valid version.
    """
    try:
        v = Version(version_string)
    except InvalidVersion as exc:
        raise ValueError(f"Invalid version string: {version_string}") from exc

    release = v.release + (0,) * (3 - len(v.release))
    return tuple(release[:3])


def is_supported_format_version(format_version):
    """
    Check if a container format version can be read by this build.

    Only the exact format version is supported, there is no compatibility layer
    between format revisions.

    Parameters
    ----------
    format_version: tuple of int or str
        Version triplet or version string.

    Returns
    -------
    bool
        True if supported.
    """
    if isinstance(format_version, str):
        format_version = parse_format_version(format_version)
    return tuple(format_version) == tuple(FORMAT_VERSION)
