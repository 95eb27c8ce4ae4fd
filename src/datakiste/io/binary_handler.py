"""
Binary container format (little-endian).

Layout::

    magic number         u64
    major, minor, patch  3 x u64
    item count           u64
    items                name (u64 length + UTF-8), type tag (u32), payload

Decoding fails closed: any malformed, truncated, or oversized input raises a
DatakisteError. Length prefixes are checked against the remaining input before
anything of that length is allocated.
"""

import logging
import math
import struct
from pathlib import Path

import numpy as np

from datakiste.constants import ABSENT_DET_ID, ABSENT_VALUE_BIT, FORMAT_VERSION, MAGIC_NUMBER
from datakiste.container import Container
from datakiste.cut.cut_1d import Cut1dAbove, Cut1dBelow, Cut1dBetween, Cut1dNot
from datakiste.cut.cut_2d import Cut2dCirc, Cut2dEllipse, Cut2dNot, Cut2dPoly, Cut2dRect
from datakiste.errors import (
    ConstraintViolationError,
    InvalidFormatError,
    UnsupportedVersionError,
)
from datakiste.event import Event, Hit, Run
from datakiste.calibration import ValUnc
from datakiste.hist.axis import Axis
from datakiste.hist.histogram import Histogram
from datakiste.item import Item, ItemType
from datakiste.points import PointSet
from datakiste.version import format_version_string

__all__ = [
    "decode_container",
    "encode_container",
    "read_container",
    "read_header",
    "write_container",
]

_logger = logging.getLogger(__name__)

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F64 = struct.Struct("<d")
_HEADER = struct.Struct("<QQQQ")
_AXIS = struct.Struct("<Idd")
_HIT_FIXED = struct.Struct("<4H2HHHddd")

# Minimum encoded sizes used to bound length prefixes before allocation
_MIN_ITEM_SIZE = _U64.size + _U32.size
_MIN_EVENT_SIZE = _U64.size
_MIN_HIT_SIZE = _HIT_FIXED.size + _U64.size

# Cut variant tags
_CUT_1D_ABOVE, _CUT_1D_BELOW, _CUT_1D_BETWEEN, _CUT_1D_NOT = range(4)
_CUT_2D_RECT, _CUT_2D_CIRC, _CUT_2D_ELLIPSE, _CUT_2D_POLY, _CUT_2D_NOT = range(5)


class _Reader:
    """Bounds-checked sequential reader over a byte buffer."""

    def __init__(self, data):
        self._data = memoryview(data)
        self.position = 0

    @property
    def remaining(self):
        return len(self._data) - self.position

    def _check(self, n_bytes, what):
        if n_bytes > self.remaining:
            raise InvalidFormatError(
                f"Truncated input reading {what} at offset {self.position} "
                f"(need {n_bytes} bytes, {self.remaining} remaining)"
            )

    def unpack(self, fmt, what):
        self._check(fmt.size, what)
        values = fmt.unpack_from(self._data, self.position)
        self.position += fmt.size
        return values

    def u32(self, what):
        return self.unpack(_U32, what)[0]

    def u64(self, what):
        return self.unpack(_U64, what)[0]

    def f64(self, what):
        return self.unpack(_F64, what)[0]

    def length(self, min_element_size, what):
        """Read a u64 length prefix and check that the elements fit in the remaining input."""
        count = self.u64(f"{what} length")
        self._check(count * min_element_size, what)
        return count

    def array(self, dtype, count, what):
        """Read count values of a little-endian numpy dtype."""
        dtype = np.dtype(dtype)
        n_bytes = count * dtype.itemsize
        self._check(n_bytes, what)
        values = np.frombuffer(self._data, dtype=dtype, count=count, offset=self.position)
        self.position += n_bytes
        return values.copy()

    def raw(self, n_bytes, what):
        self._check(n_bytes, what)
        value = bytes(self._data[self.position : self.position + n_bytes])
        self.position += n_bytes
        return value


def _check_uint(value, bits, what):
    """Return value as int if it fits into an unsigned integer of the given size."""
    if not 0 <= value < (1 << bits):
        raise ConstraintViolationError(f"{what} {value} does not fit into {bits} bits")
    return int(value)


# encoding


def _encode_hist(hist):
    parts = [_AXIS.pack(_check_uint(a.bins, 32, "Bin count"), a.min, a.max) for a in hist.axes]
    parts.append(hist.counts.astype("<u8").tobytes())
    return b"".join(parts)


def _encode_points(points):
    return _U32.pack(_check_uint(len(points), 32, "Number of points")) + points.to_array().astype(
        "<f8"
    ).tobytes()


def _encode_cut_1d(cut):
    parts = []
    while isinstance(cut, Cut1dNot):
        parts.append(_U32.pack(_CUT_1D_NOT))
        cut = cut.inner
    if isinstance(cut, Cut1dAbove):
        parts.append(struct.pack("<Id", _CUT_1D_ABOVE, cut.min))
    elif isinstance(cut, Cut1dBelow):
        parts.append(struct.pack("<Id", _CUT_1D_BELOW, cut.max))
    elif isinstance(cut, Cut1dBetween):
        parts.append(struct.pack("<Idd", _CUT_1D_BETWEEN, cut.min, cut.max))
    else:
        raise ConstraintViolationError(f"Cannot encode cut {cut!r}")
    return b"".join(parts)


def _encode_cut_2d(cut):
    parts = []
    while isinstance(cut, Cut2dNot):
        parts.append(_U32.pack(_CUT_2D_NOT))
        cut = cut.inner
    if isinstance(cut, Cut2dRect):
        parts.append(struct.pack("<Idddd", _CUT_2D_RECT, cut.x0, cut.y0, cut.x1, cut.y1))
    elif isinstance(cut, Cut2dCirc):
        parts.append(struct.pack("<Iddd", _CUT_2D_CIRC, cut.x0, cut.y0, cut.r))
    elif isinstance(cut, Cut2dEllipse):
        parts.append(
            struct.pack(
                "<Iddddd", _CUT_2D_ELLIPSE, cut.x0, cut.y0, cut.rx, cut.ry, cut.theta
            )
        )
    elif isinstance(cut, Cut2dPoly):
        parts.append(struct.pack("<IQ", _CUT_2D_POLY, len(cut.verts)))
        parts.append(np.array(cut.verts, dtype="<f8").reshape(-1, 2).tobytes())
    else:
        raise ConstraintViolationError(f"Cannot encode cut {cut!r}")
    return b"".join(parts)


def _encode_hit(hit):
    daq_id = [_check_uint(v, 16, "DAQ id") for v in hit.daq_id]
    if len(daq_id) != 4:
        raise ConstraintViolationError(f"DAQ ids have 4 values, got {hit.daq_id}")
    if hit.det_id is None:
        det_id = list(ABSENT_DET_ID)
    else:
        det_id = [_check_uint(v, 15, "Detector id") for v in hit.det_id]
        if len(det_id) != 2:
            raise ConstraintViolationError(f"Detector ids have 2 values, got {hit.det_id}")
    value = ABSENT_VALUE_BIT if hit.value is None else _check_uint(hit.value, 15, "Value")
    energy = (math.nan, math.nan) if hit.energy is None else (hit.energy.val, hit.energy.unc)
    trace = np.asarray(hit.trace, dtype=np.int64)
    if trace.size and (trace.min() < 0 or trace.max() > 0xFFFF):
        raise ConstraintViolationError("Trace samples do not fit into 16 bits")
    return b"".join(
        [
            _HIT_FIXED.pack(
                *daq_id,
                *det_id,
                _check_uint(hit.raw_value, 16, "Raw value"),
                value,
                *energy,
                hit.time,
            ),
            _U64.pack(trace.size),
            trace.astype("<u2").tobytes(),
        ]
    )


def _encode_run(run):
    parts = [_U64.pack(len(run.events))]
    for event in run.events:
        parts.append(_U64.pack(len(event.hits)))
        parts.extend(_encode_hit(hit) for hit in event.hits)
    return b"".join(parts)


def _encode_payload(item):
    item_type, value = item.item_type, item.value
    if item_type.is_hist:
        return _encode_hist(value)
    if item_type.is_points:
        return _encode_points(value)
    if item_type == ItemType.CUT_1D:
        return _encode_cut_1d(value)
    if item_type == ItemType.CUT_2D:
        return _encode_cut_2d(value)
    return _encode_run(value)


def encode_container(container):
    """
    Encode a container.

    Parameters
    ----------
    container: Container
        Container to encode.

    Returns
    -------
    bytes
        Encoded container.

    Raises
    ------
    UnsupportedVersionError
        If the container version is not the format version of this build.
    ConstraintViolationError
        If a value does not fit into its binary representation.
    """
    if tuple(container.version) != FORMAT_VERSION:
        raise UnsupportedVersionError(
            f"Cannot write format version {format_version_string(container.version)} "
            f"(supported: {format_version_string()})"
        )
    parts = [_HEADER.pack(MAGIC_NUMBER, *FORMAT_VERSION), _U64.pack(len(container))]
    for name, item in container.items():
        name_bytes = name.encode("utf-8")
        parts.append(_U64.pack(len(name_bytes)))
        parts.append(name_bytes)
        parts.append(_U32.pack(int(item.item_type)))
        parts.append(_encode_payload(item))
    return b"".join(parts)


# decoding


def _decode_hist(reader, dim):
    axes = []
    for i in range(dim):
        bins, lower, upper = reader.unpack(_AXIS, f"axis {i}")
        try:
            axes.append(Axis(bins, lower, upper))
        except ConstraintViolationError as exc:
            raise InvalidFormatError(f"Invalid histogram axis {i}: {exc}") from exc
    n_bins = math.prod(axis.bins for axis in axes)
    counts = reader.array("<u8", n_bins, "histogram counts")
    return Histogram(axes, counts)


def _decode_points(reader, dim):
    count = reader.u32("number of points")
    values = reader.array("<f8", count * dim, "points").reshape(-1, dim)
    points = PointSet(dim)
    points.points = [tuple(float(v) for v in row) for row in values]
    return points


def _decode_cut_1d(reader):
    n_not = 0
    while (variant := reader.u32("cut variant")) == _CUT_1D_NOT:
        n_not += 1
    if variant == _CUT_1D_ABOVE:
        cut = Cut1dAbove(reader.f64("cut"))
    elif variant == _CUT_1D_BELOW:
        cut = Cut1dBelow(reader.f64("cut"))
    elif variant == _CUT_1D_BETWEEN:
        cut = Cut1dBetween(*reader.unpack(struct.Struct("<dd"), "cut"))
    else:
        raise InvalidFormatError(f"Unknown 1-D cut variant {variant}")
    return ~cut if n_not % 2 == 1 else cut


def _decode_cut_2d(reader):
    n_not = 0
    while (variant := reader.u32("cut variant")) == _CUT_2D_NOT:
        n_not += 1
    if variant == _CUT_2D_RECT:
        cut = Cut2dRect(*reader.unpack(struct.Struct("<dddd"), "cut"))
    elif variant == _CUT_2D_CIRC:
        cut = Cut2dCirc(*reader.unpack(struct.Struct("<ddd"), "cut"))
    elif variant == _CUT_2D_ELLIPSE:
        cut = Cut2dEllipse(*reader.unpack(struct.Struct("<ddddd"), "cut"))
    elif variant == _CUT_2D_POLY:
        count = reader.length(16, "polygon vertices")
        verts = reader.array("<f8", 2 * count, "polygon vertices").reshape(-1, 2)
        cut = Cut2dPoly(tuple((float(x), float(y)) for x, y in verts))
    else:
        raise InvalidFormatError(f"Unknown 2-D cut variant {variant}")
    return ~cut if n_not % 2 == 1 else cut


def _decode_hit(reader):
    fields = reader.unpack(_HIT_FIXED, "hit")
    daq_id = tuple(fields[0:4])
    det_id = tuple(fields[4:6])
    raw_value, value, energy_val, energy_unc, time = fields[6:]
    n_samples = reader.length(2, "trace")
    trace = reader.array("<u2", n_samples, "trace")
    energy = ValUnc(energy_val, energy_unc)
    return Hit(
        daq_id=daq_id,
        det_id=None if any(v & ABSENT_VALUE_BIT for v in det_id) else det_id,
        raw_value=raw_value,
        value=None if value & ABSENT_VALUE_BIT else value,
        energy=energy if energy.is_finite() else None,
        time=time,
        trace=[int(v) for v in trace],
    )


def _decode_run(reader):
    n_events = reader.length(_MIN_EVENT_SIZE, "events")
    events = []
    for _ in range(n_events):
        n_hits = reader.length(_MIN_HIT_SIZE, "hits")
        events.append(Event([_decode_hit(reader) for _ in range(n_hits)]))
    return Run(events)


def _decode_payload(reader, item_type):
    if item_type.is_hist:
        return _decode_hist(reader, item_type.dim)
    if item_type.is_points:
        return _decode_points(reader, item_type.dim)
    if item_type == ItemType.CUT_1D:
        return _decode_cut_1d(reader)
    if item_type == ItemType.CUT_2D:
        return _decode_cut_2d(reader)
    return _decode_run(reader)


def _decode_header(reader):
    """Read and validate the magic number; return the version triplet."""
    magic = reader.u64("magic number")
    if magic != MAGIC_NUMBER:
        raise InvalidFormatError(f"Not a datakiste container (magic number {magic:#018x})")
    return tuple(reader.unpack(struct.Struct("<QQQ"), "version"))


def read_header(data):
    """
    Return the format version of an encoded container.

    Only the magic number is validated; the version may be unsupported.

    Parameters
    ----------
    data: bytes
        Encoded container (at least the header).

    Returns
    -------
    tuple of int
        (major, minor, patch)
    """
    return _decode_header(_Reader(data))


def decode_container(data):
    """
    Decode a container.

    Parameters
    ----------
    data: bytes
        Encoded container.

    Returns
    -------
    Container
        Decoded container.

    Raises
    ------
    InvalidFormatError
        For a wrong magic number, malformed or truncated content, or trailing bytes.
    UnsupportedVersionError
        If the format version is not supported by this build.
    """
    reader = _Reader(data)
    version = _decode_header(reader)
    if version != FORMAT_VERSION:
        raise UnsupportedVersionError(
            f"Unsupported format version {format_version_string(version)} "
            f"(supported: {format_version_string()})"
        )

    container = Container(version=version)
    n_items = reader.length(_MIN_ITEM_SIZE, "items")
    for _ in range(n_items):
        name_length = reader.u64("item name length")
        try:
            name = reader.raw(name_length, "item name").decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidFormatError(f"Item name is not valid UTF-8: {exc}") from exc
        item_type = ItemType.from_tag(reader.u32("item type"))
        try:
            container.insert(name, Item(_decode_payload(reader, item_type)))
        except InvalidFormatError as exc:
            raise InvalidFormatError(f"Invalid item '{name}': {exc}") from exc

    if reader.remaining > 0:
        raise InvalidFormatError(f"{reader.remaining} unexpected trailing bytes")
    return container


def write_container(container, file_name):
    """
    Write a container to file.

    Parameters
    ----------
    container: Container
        Container to write.
    file_name: str or Path
        Output file.
    """
    data = encode_container(container)
    Path(file_name).write_bytes(data)
    _logger.debug(f"Wrote {len(container)} item(s) ({len(data)} bytes) to {file_name}")


def read_container(file_name):
    """
    Read a container from file.

    Parameters
    ----------
    file_name: str or Path
        Input file.

    Returns
    -------
    Container
        Decoded container.

    Raises
    ------
    InvalidFormatError, UnsupportedVersionError
        If the file is not a valid container (the message names the file).
    """
    data = Path(file_name).read_bytes()
    try:
        container = decode_container(data)
    except InvalidFormatError as exc:
        raise InvalidFormatError(f"{file_name}: {exc}") from exc
    except UnsupportedVersionError as exc:
        raise UnsupportedVersionError(f"{file_name}: {exc}") from exc
    _logger.debug(f"Read {len(container)} item(s) from {file_name}")
    return container
