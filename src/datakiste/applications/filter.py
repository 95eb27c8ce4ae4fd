#!/usr/bin/python3

"""
Apply a cut to a histogram.

Bins with mid-points outside of the cut are set to zero. The output container
holds the filtered histogram under its original name.

Command line arguments
----------------------
input_file (str, required)
    Container file with the histogram.
hist_name (str, required)
    Name of the histogram (1-D or 2-D).
cut_file (str, required)
    Cut definition file (json or yaml).
cut_name (str, required)
    Name of the cut (dimension must match the histogram).
output_file (str, required)
    Output container file.

Example
-------
.. code-block:: console

    datakiste-filter --input_file run_042.dk --hist_name dE_E \\
        --cut_file cuts.yml --cut_name protons --output_file protons.dk
"""

from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.container import Container
from datakiste.cut import get_cut, read_cut_file
from datakiste.io import binary_handler


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__), description="Apply a cut to a histogram."
    )
    config.parser.add_argument("--input_file", help="Container file", type=str, required=True)
    config.parser.add_argument("--hist_name", help="Histogram name", type=str, required=True)
    config.parser.add_argument("--cut_file", help="Cut definition file", type=str, required=True)
    config.parser.add_argument("--cut_name", help="Cut name", type=str, required=True)
    return config.initialize(output=True)


@handle_errors
def main():
    """Apply a cut to a histogram."""
    app_context = startup_application(_parse)
    args = app_context.args

    hist = binary_handler.read_container(args["input_file"]).get_hist(args["hist_name"])
    cut = get_cut(read_cut_file(args["cut_file"]), args["cut_name"], dim=hist.dim)
    filtered = hist.filter(cut)
    app_context.logger.info(
        f"Cut '{args['cut_name']}' keeps {filtered.total_count} of "
        f"{hist.total_count} counts in '{args['hist_name']}'"
    )

    output_file = app_context.io_handler.get_output_file(args["output_file"])
    binary_handler.write_container(Container({args["hist_name"]: filtered}), output_file)


if __name__ == "__main__":
    main()
