"""Output locations of application results."""

import logging
from pathlib import Path

__all__ = ["IOHandler", "IOHandlerSingleton"]


class IOHandlerSingleton(type):
    """Metaclass returning one shared instance per class."""

    _instances = {}

    def __call__(cls, *args, **kwargs):
        """Return the shared instance (created on first use)."""
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


class IOHandler(metaclass=IOHandlerSingleton):
    """
    Resolve output files of applications.

    Relative output file names are placed in the output directory configured with
    --output_path (the working directory if not set).
    """

    def __init__(self):
        """Initialize IOHandler."""
        self._logger = logging.getLogger(__name__)
        self.output_path = None

    def set_paths(self, output_path=None):
        """
        Set the output directory.

        Parameters
        ----------
        output_path: str or Path
            Output directory (created on first use).
        """
        self.output_path = output_path
        self._logger.debug(f"Output path: {output_path}")

    def get_output_directory(self, sub_dir=None):
        """
        Return the output directory, optionally extended by sub-directories.

        Missing directories are created.

        Parameters
        ----------
        sub_dir: str or list of str, optional
            Sub-directory (or nested sub-directories).

        Returns
        -------
        Path
            Absolute directory path.
        """
        parts = [] if sub_dir is None else [sub_dir]
        if isinstance(sub_dir, list | tuple):
            parts = list(sub_dir)
        directory = Path(self.output_path or ".", *parts)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Cannot create output directory {directory}") from exc
        return directory.absolute()

    def get_output_file(self, file_name, sub_dir=None):
        """
        Return the path of an output file.

        Parameters
        ----------
        file_name: str or Path
            File name (absolute names are returned unchanged).
        sub_dir: str or list of str, optional
            Sub-directory of the output directory.

        Returns
        -------
        Path
            Absolute file path.
        """
        file_name = Path(file_name)
        if file_name.is_absolute():
            return file_name
        return self.get_output_directory(sub_dir) / file_name
