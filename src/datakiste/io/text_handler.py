"""
Plain text export and import of histograms, point sets, and polygon cuts.

Histograms (.dkht) are written as one line per bin: the bin mid-point
coordinates followed by the bin counts, tab-separated. Point sets (.dkpt) are
written as one point per line.
"""

import logging
from pathlib import Path

import numpy as np

from datakiste.errors import ConstraintViolationError
from datakiste.hist.histogram import MAX_COUNT, MAX_DIMENSIONS, Histogram

__all__ = [
    "hist_to_lines",
    "lines_to_hist",
    "lines_to_points",
    "points_to_lines",
    "poly_to_lines",
    "read_hist_definitions",
    "read_hist_text",
    "read_points_text",
    "write_hist_text",
    "write_points_text",
    "write_poly_text",
]

_logger = logging.getLogger(__name__)


def _format_float(value):
    """Shortest positional representation (e.g., '1', '0.5')."""
    return np.format_float_positional(float(value), trim="-")


def hist_to_lines(hist, include_empty=False):
    """
    Yield the text lines of a histogram.

    For 2-D histograms, an empty line separates rows of equal first coordinate.

    Parameters
    ----------
    hist: Histogram
        Histogram to export.
    include_empty: bool
        Write bins with zero counts.

    Yields
    ------
    str
        Line (without line terminator).
    """
    previous_row = None
    for mids, count in hist.iter_bins(include_empty=include_empty):
        if hist.dim == 2:
            if previous_row is not None and mids[0] != previous_row:
                yield ""
            previous_row = mids[0]
        yield "\t".join([*(_format_float(v) for v in mids), str(count)])


def write_hist_text(hist, file_name, include_empty=False):
    """
    Write a histogram as text file.

    Parameters
    ----------
    hist: Histogram
        Histogram to export.
    file_name: str or Path
        Output file.
    include_empty: bool
        Write bins with zero counts.
    """
    with open(file_name, "w", encoding="utf-8") as file:
        for line in hist_to_lines(hist, include_empty=include_empty):
            file.write(line + "\n")
    _logger.debug(f"Wrote {hist!r} to {file_name}")


def lines_to_hist(hist, lines):
    """
    Accumulate text lines into a histogram.

    Each line holds the bin coordinates (one per axis) followed by the counts.
    Lines with fewer fields are skipped silently; lines with unparsable fields
    are skipped with a warning. Additional fields are ignored.

    Parameters
    ----------
    hist: Histogram
        Histogram to fill.
    lines: iterable of str
        Text lines.

    Returns
    -------
    int
        Number of lines filled into the histogram.
    """
    n_filled = 0
    for line_number, line in enumerate(lines, start=1):
        fields = line.split()
        if len(fields) < hist.dim + 1:
            continue
        try:
            coordinates = tuple(float(v) for v in fields[: hist.dim])
            counts = int(fields[hist.dim])
        except ValueError:
            _logger.warning(f"Skipping line {line_number} (invalid values): {line.strip()}")
            continue
        if counts < 0:
            _logger.warning(f"Skipping line {line_number} (negative counts): {line.strip()}")
            continue
        if counts > MAX_COUNT:
            _logger.warning(f"Skipping line {line_number} (counts out of range): {line.strip()}")
            continue
        hist.fill_with_counts(coordinates[0] if hist.dim == 1 else coordinates, counts)
        n_filled += 1
    return n_filled


def read_hist_text(hist, file_name):
    """
    Read a histogram text file into an existing histogram.

    Parameters
    ----------
    hist: Histogram
        Histogram to fill (defines the binning).
    file_name: str or Path
        Input file.

    Returns
    -------
    Histogram
        The filled histogram.
    """
    with open(file_name, encoding="utf-8") as file:
        n_filled = lines_to_hist(hist, file)
    _logger.debug(f"Read {n_filled} line(s) from {file_name}")
    return hist


def points_to_lines(points):
    """Yield one tab-separated line per point."""
    for point in points:
        yield "\t".join(_format_float(v) for v in point)


def write_points_text(points, file_name):
    """
    Write a point set as text file.

    Parameters
    ----------
    points: PointSet
        Point set to export.
    file_name: str or Path
        Output file.
    """
    Path(file_name).write_text(
        "".join(line + "\n" for line in points_to_lines(points)), encoding="utf-8"
    )
    _logger.debug(f"Wrote {points!r} to {file_name}")


def lines_to_points(points, lines):
    """
    Append points read from text lines to a point set.

    Lines with fewer fields than the point dimension are skipped silently;
    lines with unparsable fields are skipped with a warning.

    Returns
    -------
    int
        Number of points added.
    """
    n_added = 0
    for line_number, line in enumerate(lines, start=1):
        fields = line.split()
        if len(fields) < points.dim:
            continue
        try:
            points.push(tuple(float(v) for v in fields[: points.dim]))
        except ValueError:
            _logger.warning(f"Skipping line {line_number} (invalid values): {line.strip()}")
            continue
        n_added += 1
    return n_added


def read_points_text(points, file_name):
    """
    Read a point set text file into an existing point set.

    Parameters
    ----------
    points: PointSet
        Point set to append to (defines the dimension).
    file_name: str or Path
        Input file.

    Returns
    -------
    PointSet
        The point set.
    """
    with open(file_name, encoding="utf-8") as file:
        n_added = lines_to_points(points, file)
    _logger.debug(f"Read {n_added} point(s) from {file_name}")
    return points


def poly_to_lines(poly):
    """
    Yield the vertices of a polygon cut as closed ring followed by an empty line.

    Parameters
    ----------
    poly: Cut2dPoly
        Polygon cut.
    """
    if not poly.verts:
        return
    for x, y in (*poly.verts, poly.verts[0]):
        yield f"{_format_float(x)}\t{_format_float(y)}"
    yield ""


def write_poly_text(poly, file_name):
    """Write the vertices of a polygon cut as text file (e.g., for plotting)."""
    Path(file_name).write_text(
        "".join(line + "\n" for line in poly_to_lines(poly)), encoding="utf-8"
    )


def read_hist_definitions(file_name):
    """
    Read histogram definitions (binning only) from a text file.

    Each line defines one histogram as 'name bins min max [bins min max ...]'
    with one triplet per axis (one to four axes). Empty lines and lines starting
    with '#' are ignored; invalid lines are skipped with a warning.

    Parameters
    ----------
    file_name: str or Path
        Histogram definition file.

    Returns
    -------
    dict
        Empty histograms by name (in file order).
    """
    hists = {}
    with open(file_name, encoding="utf-8") as file:
        for line in file:
            fields = line.split()
            if not fields or fields[0].startswith("#"):
                continue
            n_axis_fields = len(fields) - 1
            if n_axis_fields % 3 != 0 or not 1 <= n_axis_fields // 3 <= MAX_DIMENSIONS:
                _logger.warning(f"Skipping invalid histogram definition: {line.strip()}")
                continue
            try:
                parameters = [
                    int(v) if i % 3 == 0 else float(v) for i, v in enumerate(fields[1:])
                ]
                hists[fields[0]] = Histogram.new(*parameters)
            except (ValueError, ConstraintViolationError):
                _logger.warning(f"Skipping invalid histogram definition: {line.strip()}")
    _logger.debug(f"Read {len(hists)} histogram definition(s) from {file_name}")
    return hists
