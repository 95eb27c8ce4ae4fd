#!/usr/bin/python3

"""
Combine histograms and point sets of several container files.

Histograms with equal names are added (re-histogrammed onto the binning of the
first occurrence), point sets with equal names are concatenated. Input files
with other item types (runs, cuts) are rejected.

Command line arguments
----------------------
input_files (str, required)
    Container files, or a single text file listing one container file per line.
output_file (str, required)
    Output container file.

Example
-------
.. code-block:: console

    datakiste-combine --input_files run_001.dk run_002.dk --output_file sum.dk
"""

from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.constants import CONTAINER_SUFFIX
from datakiste.container import Container
from datakiste.io import binary_handler
from datakiste.utils import general as gen


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__),
        description="Combine histograms and point sets of several container files.",
    )
    config.parser.add_argument(
        "--input_files",
        help="Container files (or a text file with a list of container files)",
        type=str,
        nargs="+",
        required=True,
    )
    return config.initialize(output=True)


@handle_errors
def main():
    """Combine histograms and point sets of several container files."""
    app_context = startup_application(_parse)

    combined = Container()
    for file_name in gen.get_list_of_files_from_command_line(
        app_context.args["input_files"], [CONTAINER_SUFFIX]
    ):
        app_context.logger.info(f"Combining {file_name}")
        combined.combine(binary_handler.read_container(file_name))

    output_file = app_context.io_handler.get_output_file(app_context.args["output_file"])
    binary_handler.write_container(combined, output_file)
    app_context.logger.info(f"Wrote {len(combined)} item(s) to {output_file}")


if __name__ == "__main__":
    main()
