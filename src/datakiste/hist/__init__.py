"""Histograms with one to four dimensions."""

from datakiste.hist.axis import Axis
from datakiste.hist.histogram import MAX_DIMENSIONS, Histogram

__all__ = ["MAX_DIMENSIONS", "Axis", "Histogram"]
