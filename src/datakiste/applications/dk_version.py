#!/usr/bin/python3

"""
Print the format version of a container file (e.g., 'v0.2.0').

Only the file header is read; files with unsupported format versions are
reported as well.

Command line arguments
----------------------
input_file (str, required)
    Container file.
"""

from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.io import binary_handler
from datakiste.version import format_version_string, is_supported_format_version

# Magic number and version triplet
_HEADER_SIZE = 32


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__),
        description="Print the format version of a container file.",
    )
    config.parser.add_argument("--input_file", help="Container file", type=str, required=True)
    return config.initialize(paths=False)


@handle_errors
def main():
    """Print the format version of a container file."""
    app_context = startup_application(_parse, setup_io_handler=False)

    with open(app_context.args["input_file"], "rb") as file:
        format_version = binary_handler.read_header(file.read(_HEADER_SIZE))
    if not is_supported_format_version(format_version):
        app_context.logger.warning(
            f"Format version {format_version_string(format_version)} is not supported"
        )
    print(format_version_string(format_version))


if __name__ == "__main__":
    main()
