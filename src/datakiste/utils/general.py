"""Helpers for logging, configuration dictionaries, and input file lists."""

import logging
import os
from pathlib import Path

from dotenv import dotenv_values

__all__ = [
    "change_dict_keys_case",
    "get_list_of_files_from_command_line",
    "get_log_level_from_user",
    "load_environment_variables",
]

_logger = logging.getLogger(__name__)

# Prefix of environment variables read into the application configuration
ENV_PREFIX = "DATAKISTE_"

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_log_level_from_user(log_level):
    """
    Return the logging module level for a log level name given by the user.

    Parameters
    ----------
    log_level: str
        One of debug, info, warning, error (case insensitive).

    Returns
    -------
    int
        Level for logging.Logger.setLevel().

    Raises
    ------
    ValueError
        For unknown level names.
    """
    level = _LOG_LEVELS.get(str(log_level).lower())
    if level is None:
        raise ValueError(
            f"'{log_level}' is not a logging level, possible levels are {list(_LOG_LEVELS)}"
        )
    return level


def change_dict_keys_case(data_dict, lower_case=True):
    """
    Change keys of a dictionary (and of nested dictionaries) to lower or upper case.

    Parameters
    ----------
    data_dict: dict
        Dictionary to be converted.
    lower_case: bool
        Change keys to lower (upper) case if True (False).

    Returns
    -------
    dict
        Dictionary with converted keys.

    Raises
    ------
    AttributeError
        If the input is not a dictionary.
    """
    case_func = str.lower if lower_case else str.upper

    def _convert(value):
        if isinstance(value, dict):
            return {case_func(k): _convert(v) for k, v in value.items()}
        if isinstance(value, list):
            return [_convert(item) for item in value]
        return value

    if not isinstance(data_dict, dict):
        _logger.error(f"Input is not a proper dictionary: {data_dict}")
        raise AttributeError(f"Input is not a proper dictionary: {data_dict}")
    return _convert(data_dict)


def _clean_environment_value(value):
    """
    Remove inline comments and enclosing quotes from an environment variable value.

    Docker env files keep comments and quotes (e.g., "'abc' # comment").
    """
    value = value.split("#", 1)[0].strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1]
    return value


def load_environment_variables(env_file=None, env_list=None):
    """
    Return configuration values from environment variables.

    Variables are named DATAKISTE_<PARAMETER> (e.g., DATAKISTE_OUTPUT_PATH). Values
    are taken from the environment, or from an env file for variables not set in the
    environment.

    Parameters
    ----------
    env_file: str or Path, optional
        File with environment variables (ignored if it does not exist).
    env_list: iterable of str, optional
        Parameter names (lower case, without prefix) to return. All if not given.

    Returns
    -------
    dict
        Values by parameter name (lower case, without prefix).
    """
    variables = {}
    if env_file is not None and Path(env_file).is_file():
        _logger.debug(f"Reading environment variables from {env_file}")
        variables.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    variables.update(os.environ)

    env_dict = {}
    for key, value in variables.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parameter = key[len(ENV_PREFIX) :].lower()
        if env_list is None or parameter in env_list:
            env_dict[parameter] = _clean_environment_value(value)
    return env_dict


def get_list_of_files_from_command_line(file_names, suffix_list):
    """
    Get a list of files from the command line.

    Files can be given as a list of file names or as a single text file containing
    one file name per line. The suffix list restricts the file types returned
    directly; a file list must have a different suffix.

    Parameters
    ----------
    file_names: list
        File names given on the command line.
    suffix_list: list
        Accepted suffixes (e.g., ['.dk']).

    Returns
    -------
    list
        File names.
    """
    _files = []
    for one_file in file_names:
        path = Path(one_file)
        if path.suffix in suffix_list or len(file_names) > 1:
            _files.append(one_file)
            continue
        try:
            with open(one_file, encoding="utf-8") as file:
                _files.extend(
                    line.strip() for line in file if line.strip() and not line.startswith("#")
                )
        except FileNotFoundError:
            _logger.error(f"{one_file} is not a file.")
            raise
    return _files
