#!/usr/bin/python3

"""
Concatenate the items of several container files into one container.

Items of later files replace items with the same name of earlier files.

Command line arguments
----------------------
input_files (str, required)
    Container files, or a single text file listing one container file per line.
output_file (str, required)
    Output container file.

Example
-------
.. code-block:: console

    datakiste-concat --input_files hists.dk cuts.dk --output_file all.dk
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
        description="Concatenate the items of several container files.",
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
    """Concatenate the items of several container files."""
    app_context = startup_application(_parse)

    concatenated = Container()
    for file_name in gen.get_list_of_files_from_command_line(
        app_context.args["input_files"], [CONTAINER_SUFFIX]
    ):
        app_context.logger.info(f"Adding {file_name}")
        concatenated.extend(binary_handler.read_container(file_name))

    output_file = app_context.io_handler.get_output_file(app_context.args["output_file"])
    binary_handler.write_container(concatenated, output_file)
    app_context.logger.info(f"Wrote {len(concatenated)} item(s) to {output_file}")


if __name__ == "__main__":
    main()
