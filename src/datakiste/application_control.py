"""Startup and error handling shared by the datakiste applications."""

import functools
import logging
import sys
from collections import namedtuple
from pathlib import Path

import datakiste.utils.general as gen
from datakiste.errors import DatakisteError
from datakiste.io import io_handler

ApplicationContext = namedtuple("ApplicationContext", ["args", "logger", "io_handler"])


def startup_application(parse_function, setup_io_handler=True, logger_name=None):
    """
    Parse the application configuration and set up logging.

    Parameters
    ----------
    parse_function : Callable
        The application's _parse() function (returns the configuration dict).
    setup_io_handler : bool, optional
        Return the IOHandler (for applications writing output files).
    logger_name : str, optional
        Logger to configure (root logger if not given).

    Returns
    -------
    ApplicationContext
        Named tuple with fields args (dict), logger (logging.Logger), and
        io_handler (IOHandler or None).

    Example
    -------
    .. code-block:: python

        def main():
            app_context = startup_application(_parse)
            app_context.logger.info("Starting application")
    """
    args_dict = parse_function()

    logger = logging.getLogger(logger_name) if logger_name else logging.getLogger()
    logger.setLevel(gen.get_log_level_from_user(args_dict["log_level"]))

    io_handler_instance = io_handler.IOHandler() if setup_io_handler else None

    return ApplicationContext(args_dict, logger, io_handler_instance)


def get_application_label(file_path):
    """
    Get application label from file path.

    Parameters
    ----------
    file_path : str
        The __file__ variable from the calling application.

    Returns
    -------
    str
        Application label (filename without extension).
    """
    return Path(file_path).stem


def handle_errors(main_function):
    """
    Decorate an application main function to exit with status 1 on errors.

    Library errors (DatakisteError) and I/O errors (OSError) are logged; other
    exceptions propagate.

    Parameters
    ----------
    main_function : Callable
        Application main function.

    Returns
    -------
    Callable
        Wrapped main function.
    """

    @functools.wraps(main_function)
    def wrapper(*args, **kwargs):
        try:
            return main_function(*args, **kwargs)
        except (DatakisteError, OSError) as exc:
            logging.getLogger(main_function.__module__).error(f"{type(exc).__name__}: {exc}")
            sys.exit(1)

    return wrapper
