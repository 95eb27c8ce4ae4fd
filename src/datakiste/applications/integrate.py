#!/usr/bin/python3

"""
Integrate a histogram.

Prints the total counts of a histogram, or the counts of bins with mid-points
inside of a cut if a cut file and cut name are given.

Command line arguments
----------------------
input_file (str, required)
    Container file with the histogram.
hist_name (str, required)
    Name of the histogram.
cut_file (str, optional)
    Cut definition file (json or yaml).
cut_name (str, optional)
    Name of the cut (required with cut_file).

Example
-------
.. code-block:: console

    datakiste-integrate --input_file run_042.dk --hist_name dE_E \\
        --cut_file cuts.yml --cut_name protons
"""

from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.cut import get_cut, read_cut_file
from datakiste.io import binary_handler


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__), description="Integrate a histogram."
    )
    config.parser.add_argument("--input_file", help="Container file", type=str, required=True)
    config.parser.add_argument("--hist_name", help="Histogram name", type=str, required=True)
    config.parser.add_argument("--cut_file", help="Cut definition file", type=str, default=None)
    config.parser.add_argument("--cut_name", help="Cut name", type=str, default=None)
    args_dict = config.initialize(paths=False)
    if (args_dict["cut_file"] is None) != (args_dict["cut_name"] is None):
        config.parser.error("--cut_file and --cut_name must be given together")
    return args_dict


@handle_errors
def main():
    """Integrate a histogram."""
    app_context = startup_application(_parse, setup_io_handler=False)
    args = app_context.args

    hist = binary_handler.read_container(args["input_file"]).get_hist(args["hist_name"])
    cut = None
    if args["cut_file"] is not None:
        cut = get_cut(read_cut_file(args["cut_file"]), args["cut_name"], dim=hist.dim)
    print(hist.integrate(cut))


if __name__ == "__main__":
    main()
