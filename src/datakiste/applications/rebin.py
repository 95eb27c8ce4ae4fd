#!/usr/bin/python3

"""
Re-bin histograms onto new binnings.

The new binnings are read from a histogram definition file with one line per
histogram: 'name bins min max [bins min max ...]' (one triplet per axis).
Counts of the input histograms with equal names are transferred bin-wise
(bin mid-points) or, with --fuzz, with uniformly distributed random positions
inside of the source bins. The seed used for fuzzing is logged.

Histograms defined in the definition file but missing in the input are
written empty.

Command line arguments
----------------------
input_file (str, required)
    Container file with histograms.
hist_file (str, required)
    Histogram definition file.
output_file (str, required)
    Output container file.
fuzz (bool, optional)
    Distribute counts randomly inside of the source bins.
seed (int, optional)
    Random seed for fuzzing (or environment variable DATAKISTE_RANDOM_SEED).

Example
-------
.. code-block:: console

    datakiste-rebin --input_file run_042.dk --hist_file binning.txt \\
        --output_file run_042_rebinned.dk --fuzz --seed 12345
"""

from datakiste import settings
from datakiste.application_control import (
    get_application_label,
    handle_errors,
    startup_application,
)
from datakiste.configuration import configurator
from datakiste.container import Container
from datakiste.io import binary_handler, text_handler
from datakiste.utils import random


def _parse():
    """Parse command line configuration."""
    config = configurator.Configurator(
        label=get_application_label(__file__), description="Re-bin histograms."
    )
    config.parser.add_argument("--input_file", help="Container file", type=str, required=True)
    config.parser.add_argument(
        "--hist_file", help="Histogram definition file", type=str, required=True
    )
    config.parser.add_argument(
        "--fuzz",
        help="distribute counts randomly inside of the source bins",
        action="store_true",
        required=False,
    )
    return config.initialize(output=True, random=True)


def rebin(container, definitions, rng=None, logger=None):
    """
    Re-bin the histograms of a container.

    Parameters
    ----------
    container: Container
        Container with source histograms.
    definitions: dict
        Empty histograms with the new binning by name (filled in place).
    rng: numpy.random.Generator, optional
        Random generator; counts are transferred with add_fuzz if given.
    logger: logging.Logger, optional
        Logger for skipped items.

    Returns
    -------
    Container
        Container with the re-binned histograms (in definition order).
    """
    for name, new_hist in definitions.items():
        if name not in container:
            if logger:
                logger.warning(f"Histogram '{name}' not found in input")
            continue
        hist = container.get_hist(name, dim=new_hist.dim)
        if rng is None:
            new_hist.add(hist)
        else:
            new_hist.add_fuzz(hist, rng=rng)
    return Container(definitions)


@handle_errors
def main():
    """Re-bin histograms."""
    app_context = startup_application(_parse)
    args = app_context.args

    definitions = text_handler.read_hist_definitions(args["hist_file"])
    rng = None
    if args["fuzz"]:
        rng, seed = random.get_rng(settings.config.random_seed)
        app_context.logger.info(f"Random seed for fuzzing: {seed}")

    rebinned = rebin(
        binary_handler.read_container(args["input_file"]),
        definitions,
        rng=rng,
        logger=app_context.logger,
    )
    output_file = app_context.io_handler.get_output_file(args["output_file"])
    binary_handler.write_container(rebinned, output_file)
    app_context.logger.info(f"Wrote {len(rebinned)} histogram(s) to {output_file}")


if __name__ == "__main__":
    main()
