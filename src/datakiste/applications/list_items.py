#!/usr/bin/python3

"""
List the items of a container file.

Prints one row per item with the item name, its type, and a type specific
summary: the binning of histograms ('bins min max' per axis), the number of
points of point sets, the number of events of runs, and the cut of cuts.

Command line arguments
----------------------
input_file (str, required)
    Container file.

Example
-------
.. code-block:: console

    datakiste-list --input_file run_042.dk
"""

from astropy.table import Table

from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.io import binary_handler


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__), description="List the items in a container file."
    )
    config.parser.add_argument(
        "--input_file",
        help="Container file",
        type=str,
        required=True,
    )
    return config.initialize(paths=False)


def item_summary(item):
    """
    Return a short summary of an item.

    Parameters
    ----------
    item: Item
        Container item.

    Returns
    -------
    str
        Summary (binning for histograms, number of points or events, or the cut).
    """
    item_type, value = item.item_type, item.value
    if item_type.is_hist:
        return " ".join(f"{axis.bins} {axis.min:g} {axis.max:g}" for axis in value.axes)
    if item_type.is_points:
        return f"{len(value)} points"
    if item_type.is_cut:
        return repr(value)
    return f"{len(value.events)} events, {value.n_hits} hits"


def items_to_table(container):
    """Return an astropy table with one row per container item."""
    columns = ([], [], [])
    for name, item in container.items():
        for column, value in zip(
            columns, (name, item.item_type.label, item_summary(item)), strict=True
        ):
            column.append(value)
    return Table(list(columns), names=("name", "type", "summary"), dtype=(str, str, str))


@handle_errors
def main():
    """List the items in a container file."""
    app_context = startup_application(_parse, setup_io_handler=False)

    container = binary_handler.read_container(app_context.args["input_file"])
    app_context.logger.debug(f"Container format version {container.version}")
    items_to_table(container).pprint_all()


if __name__ == "__main__":
    main()
