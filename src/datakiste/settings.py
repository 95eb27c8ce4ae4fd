"""Process wide settings of datakiste applications."""

import os
from pathlib import Path

# Environment variables overriding the corresponding command line arguments
_SEED_VARIABLE = "DATAKISTE_RANDOM_SEED"
_OUTPUT_PATH_VARIABLE = "DATAKISTE_OUTPUT_PATH"


class _Config:
    """Settings taken from the application configuration and the environment."""

    def __init__(self):
        """Initialize empty config."""
        self._random_seed = None
        self._output_path = None

    def load(self, args=None):
        """
        Load settings from the application configuration.

        Environment variables (DATAKISTE_RANDOM_SEED, DATAKISTE_OUTPUT_PATH) take
        precedence over the configuration values 'seed' and 'output_path'.

        Parameters
        ----------
        args : dict, optional
            Application configuration.
        """
        args = args or {}
        self._random_seed = os.environ.get(_SEED_VARIABLE, args.get("seed"))
        self._output_path = os.environ.get(_OUTPUT_PATH_VARIABLE, args.get("output_path"))

    @property
    def random_seed(self):
        """Seed for random number generators (None if not configured)."""
        return None if self._random_seed is None else int(self._random_seed)

    @property
    def output_path(self):
        """Output directory (None if not configured)."""
        return None if self._output_path is None else Path(self._output_path)


config = _Config()
