#!/usr/bin/python3

"""
Convert the histograms and point sets of a container file to text files.

Histograms are written to '<name>.dkht', point sets to '<name>.dkpt' in the
output directory. Other item types are ignored, as are items whose names are
not plain file names (absolute paths, path separators, or "..").
Command line arguments
----------------------
input_file (str, required)
    Container file.
include_empty (bool, optional)
    Write histogram bins with zero counts.
output_path (str, optional)
    Output directory.

Example
-------
.. code-block:: console

    datakiste-bin-to-txt --input_file run_042.dk --output_path txt/
"""

from pathlib import Path

from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.constants import HIST_TEXT_SUFFIX, POINTS_TEXT_SUFFIX
from datakiste.io import binary_handler, text_handler


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__),
        description="Convert histograms and point sets of a container file to text files.",
    )
    config.parser.add_argument("--input_file", help="Container file", type=str, required=True)
    config.parser.add_argument(
        "--include_empty",
        help="write histogram bins with zero counts",
        action="store_true",
        required=False,
    )
    return config.initialize()


def _is_plain_file_name(name):
    """Return True if an item name can be used as a file name in the output directory."""
    return name not in ("", ".", "..") and Path(name).name == name


@handle_errors
def main():
    """Convert histograms and point sets of a container file to text files."""
    app_context = startup_application(_parse)
    args = app_context.args

    container = binary_handler.read_container(args["input_file"])
    for name, item in container.items():
        if not (item.item_type.is_hist or item.item_type.is_points):
            app_context.logger.debug(f"Skipping item '{name}' ({item.item_type.label})")
            continue
        if not _is_plain_file_name(name):
            app_context.logger.warning(f"Skipping item '{name}' (not usable as a file name)")
            continue
        if item.item_type.is_hist:
            output_file = app_context.io_handler.get_output_file(f"{name}{HIST_TEXT_SUFFIX}")
            text_handler.write_hist_text(
                item.value, output_file, include_empty=args["include_empty"]
            )
        else:
            output_file = app_context.io_handler.get_output_file(f"{name}{POINTS_TEXT_SUFFIX}")
            text_handler.write_points_text(item.value, output_file)
        app_context.logger.info(f"Wrote {output_file}")


if __name__ == "__main__":
    main()
