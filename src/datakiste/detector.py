"""Detector definitions and the mapping of DAQ channels to detector channels."""

import logging
from dataclasses import dataclass

from datakiste.errors import ConstraintViolationError

__all__ = ["DETECTOR_TYPES", "Detector", "get_id_map", "get_value_correction", "read_detectors"]

_logger = logging.getLogger(__name__)

# Maximum value of 14 bit digitizers; used to invert values of reversed-polarity channels
_MAX_RAW_VALUE = 16383

# Number of channels and polarity inversion per detector type
DETECTOR_TYPES = {
    "BB10_F": (8, True),
    "BB15_B": (4, False),
    "BB15_F": (64, True),
    "HABANERO": (60, False),
    "HAGRID": (9, False),
    "PSIC_E": (1, False),
    "PSIC_XY": (32, False),
    "QQQ3_B": (16, False),
    "QQQ3_F": (16, True),
    "QQQ5_B": (4, False),
    "QQQ5_F": (32, True),
    "YY1_F": (16, True),
}


@dataclass(frozen=True)
class Detector:
    """
    Detector occupying a contiguous range of DAQ channels.

    Parameters
    ----------
    kind: str
        Detector type (key of DETECTOR_TYPES).
    name: str
        Detector name.
    start: tuple of int
        DAQ id (4 values) of the first channel; channels differ in the last value.
    """

    kind: str
    name: str
    start: tuple

    def __post_init__(self):
        if self.kind not in DETECTOR_TYPES:
            raise ConstraintViolationError(f"Unrecognized detector type '{self.kind}'")
        object.__setattr__(self, "start", tuple(int(i) for i in self.start))

    @property
    def num_chans(self):
        """Number of channels."""
        return DETECTOR_TYPES[self.kind][0]

    def val_corr(self, det_ch, value):  # pylint: disable=unused-argument
        """Return the corrected value of a raw value (polarity inversion)."""
        return _MAX_RAW_VALUE - value if DETECTOR_TYPES[self.kind][1] else value

    def contains_daq(self, daq_id):
        """Check if a DAQ id belongs to this detector."""
        return tuple(daq_id[:3]) == self.start[:3] and (
            self.start[3] <= daq_id[3] < self.start[3] + self.num_chans
        )

    def daq_to_det(self, daq_id):
        """Return the detector channel of a DAQ id (None if not part of this detector)."""
        return daq_id[3] - self.start[3] if self.contains_daq(daq_id) else None

    def det_to_daq(self, det_ch):
        """Return the DAQ id of a detector channel (None for invalid channels)."""
        if 0 <= det_ch < self.num_chans:
            return (*self.start[:3], self.start[3] + det_ch)
        return None


def _line_to_detector(line):
    """Parse 'TYPE name d0 d1 d2 d3' into a Detector (None for comments or invalid lines)."""
    fields = line.split()
    if len(fields) == 0 or fields[0].startswith("#"):
        return None
    if len(fields) < 6:
        _logger.warning(f"Skipping invalid detector definition: {line.strip()}")
        return None
    try:
        start = tuple(int(f) for f in fields[2:6])
    except ValueError:
        _logger.warning(f"Skipping invalid detector definition: {line.strip()}")
        return None
    if fields[0] not in DETECTOR_TYPES:
        _logger.warning(f"Unrecognized detector type '{fields[0]}'")
        return None
    return Detector(kind=fields[0], name=fields[1], start=start)


def read_detectors(file_name):
    """
    Read detector definitions from a text file.

    Each line defines one detector as 'TYPE name d0 d1 d2 d3', where d0..d3 is the
    DAQ id of the first channel. Empty lines and lines starting with '#' are ignored.

    Parameters
    ----------
    file_name: str or Path
        Detector configuration file.

    Returns
    -------
    list of Detector
        Detectors (detector number is the list index plus one).
    """
    with open(file_name, encoding="utf-8") as file:
        detectors = [d for d in (_line_to_detector(line) for line in file) if d is not None]
    _logger.debug(f"Read {len(detectors)} detector(s) from {file_name}")
    return detectors


def get_id_map(detectors):
    """
    Return the mapping of DAQ ids to detector ids.

    Detector ids are (detector number, detector channel), with detector numbers
    starting at one.

    Parameters
    ----------
    detectors: list of Detector
        Detectors.

    Returns
    -------
    dict
        Detector id (2-tuple) by DAQ id (4-tuple).
    """
    id_map = {}
    for det_number, detector in enumerate(detectors, start=1):
        for det_ch in range(detector.num_chans):
            daq_id = detector.det_to_daq(det_ch)
            if daq_id in id_map:
                _logger.warning(
                    f"DAQ id {daq_id} already used (old: {id_map[daq_id]}, "
                    f"new: {(det_number, det_ch)})"
                )
            id_map[daq_id] = (det_number, det_ch)
    return id_map


def get_value_correction(detectors):
    """
    Return the value correction function for a list of detectors.

    Parameters
    ----------
    detectors: list of Detector
        Detectors (detector number is the list index plus one).

    Returns
    -------
    callable
        Function (det_id, raw_value) -> corrected value, as used by Hit.apply_det.
    """

    def value_correction(det_id, raw_value):
        det_number, det_ch = det_id
        return detectors[det_number - 1].val_corr(det_ch, raw_value)

    return value_correction
