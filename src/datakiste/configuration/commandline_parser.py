"""Command line parser for applications."""

import argparse
from pathlib import Path

import datakiste.version

__all__ = [
    "CommandLineParser",
]


class CommandLineParser(argparse.ArgumentParser):
    """
    Argument parser with the argument groups shared by all datakiste applications.

    All arguments are options in snake_case (e.g., --input_file), so that every
    argument can be given in a configuration file or as environment variable.
    """

    def initialize_default_arguments(self, paths=True, output=False, random=False):
        """
        Add the shared argument groups.

        Parameters
        ----------
        paths: bool
            Add --output_path.
        output: bool
            Add --output_file (required).
        random: bool
            Add --seed.
        """
        if paths:
            self.initialize_path_arguments()
        if output:
            self.initialize_output_arguments()
        if random:
            self.initialize_random_arguments()
        self.initialize_config_files()
        self.initialize_application_execution_arguments()

    def initialize_config_files(self):
        """Add configuration file and env file arguments."""
        group = self.add_argument_group("configuration")
        group.add_argument(
            "--config", help="configuration file (yaml or json)", type=str, default=None
        )
        group.add_argument(
            "--env_file",
            help="file with DATAKISTE_* environment variables",
            type=str,
            default=".env",
        )

    def initialize_path_arguments(self):
        """Add the output directory argument."""
        group = self.add_argument_group("paths")
        group.add_argument(
            "--output_path", help="directory for output files", type=Path, default="./"
        )

    def initialize_output_arguments(self):
        """Add the output file argument."""
        group = self.add_argument_group("output")
        group.add_argument(
            "--output_file",
            help="output container file (relative to output_path)",
            type=str,
            required=True,
        )

    def initialize_random_arguments(self):
        """Add the random seed argument."""
        group = self.add_argument_group("random numbers")
        group.add_argument(
            "--seed", help="random seed (drawn and logged if not given)", type=int, default=None
        )

    def initialize_application_execution_arguments(self):
        """Add label, log level, and version arguments."""
        group = self.add_argument_group("execution")
        group.add_argument("--label", help="job label", type=str, default=None)
        group.add_argument(
            "--log_level",
            help="log level (debug, info, warning, error)",
            type=str,
            default="info",
        )
        group.add_argument(
            "--version", action="version", version=f"%(prog)s {datakiste.version.__version__}"
        )
