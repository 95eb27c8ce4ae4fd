"""Raw detector event data: runs of events made of hits."""

import copy
import logging
from dataclasses import dataclass, field

import numpy as np

__all__ = ["Event", "Hit", "Run"]

_logger = logging.getLogger(__name__)


@dataclass
class Hit:
    """
    A single detector channel hit.

    Parameters
    ----------
    daq_id: tuple of int
        DAQ address (4 values).
    det_id: tuple of int or None
        Detector address (detector number, channel) if assigned.
    raw_value: int
        Raw digitizer value.
    value: int or None
        Corrected value (15 bit) if assigned.
    energy: ValUnc or None
        Calibrated energy if assigned.
    time: float
        Time stamp.
    trace: list of int
        Trace samples.
    """

    daq_id: tuple = (0, 0, 0, 0)
    det_id: tuple | None = None
    raw_value: int = 0
    value: int | None = None
    energy: object = None
    time: float = 0.0
    trace: list = field(default_factory=list)

    def __post_init__(self):
        self.daq_id = tuple(self.daq_id)
        if self.det_id is not None:
            self.det_id = tuple(self.det_id)

    def apply_det(self, id_map, value_correction=None):
        """
        Assign detector id and corrected value from the DAQ id; the energy is reset.

        Parameters
        ----------
        id_map: dict
            Detector id by DAQ id (see detector.get_id_map).
        value_correction: callable, optional
            Function (det_id, raw_value) -> corrected value. Identity if not given.
        """
        self.det_id = id_map.get(self.daq_id)
        if self.det_id is None:
            self.value = None
        elif value_correction is None:
            self.value = self.raw_value
        else:
            self.value = value_correction(self.det_id, self.raw_value)
        self.energy = None

    def apply_calib(self, calibrations):
        """
        Calibrate the corrected value (energy is None if value or calibration is missing).

        Parameters
        ----------
        calibrations: dict
            Calibration by DAQ id.
        """
        cal = calibrations.get(self.daq_id)
        self.energy = (
            cal.apply(float(self.value)) if (self.value is not None and cal is not None) else None
        )

    def apply_calib_fuzz(self, calibrations, rng=None):
        """
        Calibrate the corrected value after adding a uniform random number in [0, 1).

        Parameters
        ----------
        calibrations: dict
            Calibration by DAQ id.
        rng: numpy.random.Generator, optional
            Random generator (a new, randomly seeded generator if not given). Pass the
            same generator to all hits; a seed would give each hit the same offset.
        """
        rng = np.random.default_rng() if rng is None else rng
        cal = calibrations.get(self.daq_id)
        self.energy = (
            cal.apply(float(self.value) + rng.random())
            if (self.value is not None and cal is not None)
            else None
        )


@dataclass
class Event:
    """Hits recorded together."""

    hits: list = field(default_factory=list)

    def apply_det(self, id_map, value_correction=None):
        """Assign detector ids to all hits."""
        for hit in self.hits:
            hit.apply_det(id_map, value_correction)

    def apply_calib(self, calibrations):
        """Calibrate all hits."""
        for hit in self.hits:
            hit.apply_calib(calibrations)

    def apply_calib_fuzz(self, calibrations, rng=None):
        """Calibrate all hits with fuzzed values (rng: generator or seed, used for all hits)."""
        rng = np.random.default_rng(rng)
        for hit in self.hits:
            hit.apply_calib_fuzz(calibrations, rng=rng)


@dataclass
class Run:
    """Ordered list of events."""

    events: list = field(default_factory=list)

    def iter_events(self):
        """Iterate over events."""
        return iter(self.events)

    def iter_hits(self):
        """Iterate over the hits of all events."""
        for event in self.events:
            yield from event.hits

    def into_hits(self):
        """Return all hits of all events as flat list."""
        return list(self.iter_hits())

    @property
    def n_hits(self):
        """Total number of hits."""
        return sum(len(event.hits) for event in self.events)

    def apply_det(self, id_map, value_correction=None):
        """Assign detector ids to all hits of all events."""
        for event in self.events:
            event.apply_det(id_map, value_correction)
        _logger.debug(f"Assigned detector ids for {len(self.events)} events")

    def apply_calib(self, calibrations):
        """Calibrate all hits of all events."""
        for event in self.events:
            event.apply_calib(calibrations)
        _logger.debug(f"Calibrated {len(self.events)} events")

    def apply_calib_fuzz(self, calibrations, rng=None):
        """
        Calibrate all hits of all events with fuzzed values.

        Parameters
        ----------
        calibrations: dict
            Calibration by DAQ id.
        rng: numpy.random.Generator or int, optional
            Random generator or seed. One generator is used for all hits.
        """
        rng = np.random.default_rng(rng)
        for event in self.events:
            event.apply_calib_fuzz(calibrations, rng=rng)
        _logger.debug(f"Calibrated {len(self.events)} events (fuzzed)")

    def copy(self):
        """Return a deep copy."""
        return copy.deepcopy(self)
