"""Application configuration."""

import argparse
import logging
import sys

import datakiste.configuration.commandline_parser as argparser
from datakiste import settings
from datakiste.errors import DatakisteError
from datakiste.io import ascii_handler, io_handler
from datakiste.utils import general as gen


class InvalidConfigurationParameterError(DatakisteError):
    """Exception for a parameter defined with different values by two sources."""


class Configurator:
    """
    Collect the configuration of a datakiste application.

    Parameters are collected from (highest priority first)

    - the command line
    - a configuration file given with --config (yaml or json)
    - the dictionary passed at construction
    - environment variables DATAKISTE_<PARAMETER> (or an env file)

    Parameter names are lower case. Two sources defining the same parameter with
    different values are an error, except for environment variables, which only
    fill parameters that are still unset.

    Parameters
    ----------
    config: dict
        Configuration parameters.
    label: str
        Application name (used as program name and default label).
    usage: str
        Usage string of the command line help.
    description: str
        Description shown in the command line help.
    epilog: str
        Text shown after the argument list in the command line help.
    """

    def __init__(self, config=None, label=None, usage=None, description=None, epilog=None):
        """Initialize Configurator."""
        self._logger = logging.getLogger(__name__)
        self.config_class_init = config
        self.label = label
        self.config = {}
        self.parser = argparser.CommandLineParser(
            prog=label,
            usage=usage,
            description=description,
            epilog=epilog,
            formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        )

    def default_config(self, arg_list=None):
        """
        Return the configuration built from the shared arguments only.

        Parameters
        ----------
        arg_list: list
            Command line style arguments.

        Returns
        -------
        dict
            Configuration parameters.
        """
        self.parser.initialize_default_arguments()
        self._fill_config(arg_list)
        return self.config

    def initialize(self, require_command_line=True, paths=True, output=False, random=False):
        """
        Build the application configuration from all sources.

        The process wide settings (datakiste.settings.config) are loaded from the
        result and their output path is passed on to the IOHandler.

        Parameters
        ----------
        require_command_line: bool
            Print the help and exit if no command line arguments are given.
        paths: bool
            Add the output path argument.
        output: bool
            Add the (required) output file argument.
        random: bool
            Add the random seed argument.

        Returns
        -------
        dict
            Configuration parameters.
        """
        self.parser.initialize_default_arguments(paths=paths, output=output, random=random)

        self._fill_from_command_line(require_command_line=require_command_line)
        self._fill_from_config_file(self.config.get("config"))
        self._fill_from_config_dict(self.config_class_init)
        self._fill_from_environmental_variables()
        if self.config.get("label") is None:
            self.config["label"] = self.label

        settings.config.load(self.config)
        self._initialize_io_handler()
        self._logger.debug(f"Configuration of {self.label}: {self.config}")
        return self.config

    def _fill_from_command_line(self, arg_list=None, require_command_line=True):
        """
        Parse command line arguments (sys.argv if arg_list is not given).

        A configuration file may provide required arguments; they are therefore
        optional on the command line if --config is given.
        """
        arg_list = sys.argv[1:] if arg_list is None else list(arg_list)
        if require_command_line and not arg_list:
            self._logger.debug("No command line arguments given")
            arg_list = ["--help"]
        if "--config" in arg_list:
            self._reset_required_arguments()
        self._fill_config(arg_list)

    def _reset_required_arguments(self):
        """Make all parser arguments optional (argparse has no public interface for this)."""
        for action in self.parser._actions:  # pylint: disable=protected-access
            action.required = False
        for group in self.parser._mutually_exclusive_groups:  # pylint: disable=protected-access
            group.required = False

    def _fill_from_config_dict(self, input_dict, overwrite=False):
        """
        Add parameters from a dictionary (keys are converted to lower case).

        Parameters
        ----------
        input_dict: dict
            Configuration parameters; anything else is ignored.
        overwrite: bool
            Replace values defined by other sources without consistency check.
        """
        if not isinstance(input_dict, dict):
            return
        lower_case_dict = {key.lower(): value for key, value in input_dict.items()}
        if not overwrite:
            for key, value in lower_case_dict.items():
                self._check_parameter_configuration_status(key, value)
        self._fill_config(lower_case_dict)

    def _check_parameter_configuration_status(self, key, value):
        """
        Check that a new value does not conflict with an explicitly set value.

        Unset parameters and parameters at their parser default can be changed.

        Raises
        ------
        InvalidConfigurationParameterError
            If the parameter is already set to a different value.
        """
        current = self.config.get(key)
        if current is None or current == self.parser.get_default(key) or current == value:
            return
        self._logger.error(f"Conflicting values for '{key}': {current} and {value}")
        raise InvalidConfigurationParameterError(f"Inconsistent definition of '{key}'")

    def _fill_from_config_file(self, config_file):
        """
        Add parameters from a yaml or json configuration file.

        Values from the file replace values of lower priority sources.

        Raises
        ------
        FileNotFoundError
            If the configuration file does not exist.
        """
        if not config_file:
            return
        self._logger.debug(f"Reading configuration file {config_file}")
        try:
            file_config = ascii_handler.collect_data_from_file(file_name=config_file)
        except FileNotFoundError:
            self._logger.error(f"Configuration file {config_file} does not exist")
            raise
        self._fill_from_config_dict(gen.change_dict_keys_case(file_config), overwrite=True)

    def _fill_from_environmental_variables(self):
        """Set unset parameters from DATAKISTE_<PARAMETER> variables (or the env file)."""
        env_config = gen.load_environment_variables(
            env_file=self.config.get("env_file"), env_list=self.config.keys()
        )
        self._fill_from_config_dict(
            {
                key: env_config[key]
                for key, value in self.config.items()
                if value is None and env_config.get(key) is not None
            }
        )

    def _initialize_io_handler(self):
        """Pass the output path (DATAKISTE_OUTPUT_PATH takes precedence) to the IOHandler."""
        io_handler.IOHandler().set_paths(output_path=settings.config.output_path)

    @staticmethod
    def _arglist_from_config(input_var):
        """
        Return command line style arguments for a dictionary or list.

        Dictionary values are converted to '--key value' (lists to '--key v1 v2 ..',
        True to '--key'); False, None, and empty values are omitted. For lists,
        'None' strings are omitted.

        Parameters
        ----------
        input_var: dict, list, or None
            Configuration parameters or arguments.

        Returns
        -------
        list of str
            Arguments for argparse.
        """
        if not isinstance(input_var, dict):
            try:
                return [str(value) for value in input_var if value != "None"]
            except TypeError:
                return []

        arg_list = []
        for key, value in input_var.items():
            if isinstance(value, bool):
                arg_list.extend([f"--{key}"] if value else [])
            elif isinstance(value, list):
                arg_list.extend([f"--{key}", *(str(v) for v in value)])
            elif value is not None and str(value) != "":
                arg_list.extend([f"--{key}", str(value)])
        return arg_list

    @staticmethod
    def _convert_string_none_to_none(input_dict):
        """Replace 'None' strings (as returned by argparse) by None."""
        return {key: None if value == "None" else value for key, value in input_dict.items()}

    def _fill_config(self, input_container):
        """
        Parse the current configuration plus updates into a new configuration.

        Parameters
        ----------
        input_container: dict or list
            Configuration updates (parameters or arguments).
        """
        arguments = self._arglist_from_config(self.config) + self._arglist_from_config(
            input_container
        )
        self.config = self._convert_string_none_to_none(vars(self.parser.parse_args(arguments)))
