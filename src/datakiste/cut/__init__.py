"""
Cuts: region predicates used to gate histogram integration and filtering.

Cuts are converted to and from an externally tagged dictionary form, e.g.

.. code-block:: python

    {"Cut2d": {"Not": {"Cut2dCirc": {"x0": 0.0, "y0": 0.0, "r": 1.0}}}}

This form is used in cut definition files (json or yaml files mapping cut names to cuts).
"""

import logging
import math

import jsonschema

from datakiste.constants import CUT_FILE_SCHEMA
from datakiste.cut.cut_1d import Cut1d, Cut1dAbove, Cut1dBelow, Cut1dBetween, Cut1dNot
from datakiste.cut.cut_2d import Cut2d, Cut2dCirc, Cut2dEllipse, Cut2dNot, Cut2dPoly, Cut2dRect
from datakiste.data_model import schema
from datakiste.errors import InvalidFormatError, LookupNotFoundError, TypeMismatchError
from datakiste.io import ascii_handler

__all__ = [
    "Cut1d",
    "Cut1dAbove",
    "Cut1dBelow",
    "Cut1dBetween",
    "Cut1dNot",
    "Cut2d",
    "Cut2dCirc",
    "Cut2dEllipse",
    "Cut2dNot",
    "Cut2dPoly",
    "Cut2dRect",
    "cut_from_dict",
    "cut_to_dict",
    "get_cut",
    "read_cut_file",
    "write_cut_file",
]

_logger = logging.getLogger(__name__)

_CUT_FAMILIES = {"Cut1d": (Cut1d, Cut1dNot), "Cut2d": (Cut2d, Cut2dNot)}


def _variant_to_dict(cut):
    """Return the fields of a (non-negated) cut variant."""
    if isinstance(cut, Cut1dAbove):
        return {"min": cut.min}
    if isinstance(cut, Cut1dBelow):
        return {"max": cut.max}
    if isinstance(cut, Cut1dBetween):
        return {"min": cut.min, "max": cut.max}
    if isinstance(cut, Cut2dRect):
        return {"x0": cut.x0, "y0": cut.y0, "x1": cut.x1, "y1": cut.y1}
    if isinstance(cut, Cut2dCirc):
        return {"x0": cut.x0, "y0": cut.y0, "r": cut.r}
    if isinstance(cut, Cut2dEllipse):
        return {
            "x0": cut.x0,
            "y0": cut.y0,
            "rx": cut.rx,
            "ry": cut.ry,
            "theta": math.degrees(cut.theta),
        }
    if isinstance(cut, Cut2dPoly):
        return {"verts": [list(vertex) for vertex in cut.verts]}
    raise TypeMismatchError(f"Not a cut: {cut!r}")


def cut_to_dict(cut):
    """
    Convert a cut to its externally tagged dictionary form.

    Ellipse rotation angles are converted to degrees.

    Parameters
    ----------
    cut: Cut1d or Cut2d
        Cut.

    Returns
    -------
    dict
        Dictionary, e.g. ``{"Cut1d": {"Cut1dAbove": {"min": 1.0}}}``.
    """
    family = "Cut1d" if isinstance(cut, Cut1d) else "Cut2d" if isinstance(cut, Cut2d) else None
    if family is None:
        raise TypeMismatchError(f"Not a cut: {cut!r}")
    not_class = _CUT_FAMILIES[family][1]

    n_not = 0
    while isinstance(cut, not_class):
        cut = cut.inner
        n_not += 1

    body = {type(cut).__name__: _variant_to_dict(cut)}
    for _ in range(n_not):
        body = {"Not": body}
    return {family: body}


def _variant_from_dict(family, name, fields):
    """Return a cut variant from its name and fields."""
    try:
        if family == "Cut1d":
            if name == "Cut1dAbove":
                return Cut1dAbove(float(fields["min"]))
            if name == "Cut1dBelow":
                return Cut1dBelow(float(fields["max"]))
            if name == "Cut1dBetween":
                return Cut1dBetween(float(fields["min"]), float(fields["max"]))
        elif family == "Cut2d":
            if name == "Cut2dRect":
                return Cut2dRect(*(float(fields[k]) for k in ("x0", "y0", "x1", "y1")))
            if name == "Cut2dCirc":
                return Cut2dCirc(*(float(fields[k]) for k in ("x0", "y0", "r")))
            if name == "Cut2dEllipse":
                return Cut2dEllipse(
                    *(float(fields[k]) for k in ("x0", "y0", "rx", "ry")),
                    theta=math.radians(float(fields.get("theta", 0.0))),
                )
            if name == "Cut2dPoly":
                return Cut2dPoly(tuple((float(x), float(y)) for x, y in fields["verts"]))
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidFormatError(f"Invalid {name} definition: {fields!r}") from exc
    raise InvalidFormatError(f"Unknown {family} variant: {name}")


def cut_from_dict(data):
    """
    Create a cut from its externally tagged dictionary form.

    Nested negations are folded (an even number of 'Not' cancels out).

    Parameters
    ----------
    data: dict
        Dictionary, e.g. ``{"Cut2d": {"Cut2dCirc": {"x0": 0, "y0": 0, "r": 1}}}``.

    Returns
    -------
    Cut1d or Cut2d
        Cut.

    Raises
    ------
    InvalidFormatError
        If the dictionary does not describe a valid cut.
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise InvalidFormatError(f"Expected a single 'Cut1d' or 'Cut2d' entry: {data!r}")
    family, body = next(iter(data.items()))
    if family not in _CUT_FAMILIES:
        raise InvalidFormatError(f"Unknown cut type: {family}")

    n_not = 0
    while True:
        if not isinstance(body, dict) or len(body) != 1:
            raise InvalidFormatError(f"Expected a single {family} variant: {body!r}")
        name, fields = next(iter(body.items()))
        if name != "Not":
            break
        n_not += 1
        body = fields

    cut = _variant_from_dict(family, name, fields)
    return ~cut if n_not % 2 == 1 else cut


def read_cut_file(file_name):
    """
    Read named cuts from a json or yaml file.

    The file is validated against the cut file schema.

    Parameters
    ----------
    file_name: str or Path
        Cut definition file.

    Returns
    -------
    dict
        Cuts by name.

    Raises
    ------
    InvalidFormatError
        If the file content is not a valid cut definition.
    """
    try:
        data = ascii_handler.collect_data_from_file(file_name=file_name)
    except ValueError as exc:
        raise InvalidFormatError(f"Invalid cut file {file_name}: {exc}") from exc
    try:
        schema.validate_dict_using_schema(data, schema_file=CUT_FILE_SCHEMA)
    except jsonschema.exceptions.ValidationError as exc:
        raise InvalidFormatError(f"Invalid cut file {file_name}: {exc.message}") from exc
    cuts = {name: cut_from_dict(cut) for name, cut in data.items()}
    _logger.debug(f"Read {len(cuts)} cut(s) from {file_name}")
    return cuts


def write_cut_file(cuts, file_name):
    """
    Write named cuts to a json or yaml file.

    Parameters
    ----------
    cuts: dict
        Cuts by name.
    file_name: str or Path
        Output file (suffix defines the format).
    """
    ascii_handler.write_data_to_file(
        {name: cut_to_dict(cut) for name, cut in cuts.items()}, output_file=file_name
    )


def get_cut(cuts, name, dim=None):
    """
    Return a cut by name.

    Parameters
    ----------
    cuts: dict
        Cuts by name.
    name: str
        Cut name.
    dim: int, optional
        Required cut dimension.

    Returns
    -------
    Cut1d or Cut2d
        Cut.

    Raises
    ------
    LookupNotFoundError
        If there is no cut with this name.
    TypeMismatchError
        If the cut has not the required dimension.
    """
    try:
        cut = cuts[name]
    except KeyError as exc:
        raise LookupNotFoundError(f"Cut '{name}' not found") from exc
    if dim is not None and cut.dim != dim:
        raise TypeMismatchError(f"Cut '{name}' is a {cut.dim}-D cut, expected a {dim}-D cut")
    return cut
