"""Energy calibration of detector channels."""

import logging
import math
from dataclasses import dataclass

import jsonschema

from datakiste.constants import CALIBRATION_FILE_SCHEMA
from datakiste.data_model import schema
from datakiste.errors import InvalidFormatError
from datakiste.io import ascii_handler

__all__ = ["Calibration", "ValUnc", "read_calibration_map"]

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValUnc:
    """Value with (absolute) uncertainty."""

    val: float
    unc: float = 0.0

    def is_finite(self):
        """True if value and uncertainty are finite."""
        return math.isfinite(self.val) and math.isfinite(self.unc)

    @classmethod
    def from_dict(cls, data):
        """Create from {'val': .., 'unc': ..} or a [val, unc] pair."""
        if isinstance(data, dict):
            return cls(float(data["val"]), float(data.get("unc", 0.0)))
        val, unc = data
        return cls(float(val), float(unc))

    def to_dict(self):
        """Return as {'val': .., 'unc': ..}."""
        return {"val": self.val, "unc": self.unc}


@dataclass(frozen=True)
class Calibration:
    """
    Linear calibration: energy = intercept + slope * value.

    Parameters
    ----------
    slope: ValUnc
        Slope with uncertainty.
    intercept: ValUnc
        Intercept with uncertainty.
    resolution: ValUnc
        Detector resolution (informational).
    """

    slope: ValUnc
    intercept: ValUnc
    resolution: ValUnc = ValUnc(0.0, 0.0)

    def apply(self, x):
        """
        Apply the calibration to a value.

        The uncertainty is the largest deviation from the mean obtained by shifting
        slope and intercept by plus or minus their uncertainties.

        Parameters
        ----------
        x: float
            Uncalibrated value.

        Returns
        -------
        ValUnc
            Calibrated value with uncertainty.
        """
        s, s_unc = self.slope.val, self.slope.unc
        i, i_unc = self.intercept.val, self.intercept.unc
        mean = i + s * x
        max_deviation = max(
            abs(((i - i_unc) + (s - s_unc) * x) - mean),
            abs(((i - i_unc) + (s + s_unc) * x) - mean),
            abs(((i + i_unc) + (s - s_unc) * x) - mean),
            abs(((i + i_unc) + (s + s_unc) * x) - mean),
        )
        return ValUnc(mean, max_deviation)


def read_calibration_map(file_name):
    """
    Read calibrations per DAQ id from a json or yaml file.

    The file contains a list of [daq_id, calibration] pairs, e.g.
    ``[[[0, 1, 2, 3], {"slope": {"val": 1.2, "unc": 0.01}, "intercept": [3.0, 0.5]}]]``.
    Duplicate DAQ ids are reported; the last definition is used.

    Parameters
    ----------
    file_name: str or Path
        Calibration file.

    Returns
    -------
    dict
        Calibration by DAQ id (4-tuple of int).

    Raises
    ------
    InvalidFormatError
        If the file content is not a valid calibration list.
    """
    try:
        data = ascii_handler.collect_data_from_file(file_name=file_name)
    except ValueError as exc:
        raise InvalidFormatError(f"Invalid calibration file {file_name}: {exc}") from exc
    try:
        schema.validate_dict_using_schema(data, schema_file=CALIBRATION_FILE_SCHEMA)
    except jsonschema.exceptions.ValidationError as exc:
        raise InvalidFormatError(f"Invalid calibration file {file_name}: {exc.message}") from exc

    calibrations = {}
    for daq_id, cal in data:
        daq_id = tuple(daq_id)
        if daq_id in calibrations:
            _logger.warning(f"There is already a calibration for DAQ id {daq_id}")
        calibrations[daq_id] = Calibration(
            slope=ValUnc.from_dict(cal["slope"]),
            intercept=ValUnc.from_dict(cal["intercept"]),
            resolution=ValUnc.from_dict(cal.get("resolution", [0.0, 0.0])),
        )
    return calibrations
