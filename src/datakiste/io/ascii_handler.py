"""Reading and writing of text data files (json, yaml, and list files)."""

import json
import logging
from pathlib import Path

import numpy as np
import yaml

_logger = logging.getLogger(__name__)

_JSON_SUFFIXES = (".json",)
_YAML_SUFFIXES = (".yml", ".yaml")
_LIST_SUFFIXES = (".list", ".txt")


def collect_data_from_file(file_name, yaml_document=None):
    """
    Read a json, yaml, or list file (format given by the file suffix).

    Parameters
    ----------
    file_name: str or Path
        Input file.
    yaml_document: int, optional
        Document index for yaml files with several documents (all documents if not given).

    Returns
    -------
    dict or list
        File content.

    Raises
    ------
    TypeError
        For unsupported file suffixes.
    ValueError
        If the file cannot be parsed.
    """
    suffix = Path(file_name).suffix.lower()
    try:
        with open(file_name, encoding="utf-8") as file:
            if suffix in _JSON_SUFFIXES:
                return json.load(file)
            if suffix in _YAML_SUFFIXES:
                return _load_yaml(file, yaml_document)
            if suffix in _LIST_SUFFIXES:
                return read_list(file)
            raise TypeError(f"File type {suffix} not supported.")
    except (OSError, TypeError, IndexError) as exc:
        raise type(exc)(f"Failed to read file {file_name}: {exc}") from exc
    # parser errors (json, yaml, encoding) have no single-argument constructors
    except (ValueError, yaml.YAMLError) as exc:
        raise ValueError(f"Failed to read file {file_name}: {exc}") from exc


def _load_yaml(file, yaml_document):
    """Return a single yaml document, or the list of documents of a multi-document file."""
    try:
        return yaml.safe_load(file)
    except yaml.composer.ComposerError:
        file.seek(0)
    documents = list(yaml.safe_load_all(file))
    if yaml_document is None:
        return documents
    if not -len(documents) <= yaml_document < len(documents):
        raise IndexError(f"YAML document index {yaml_document} is out of range")
    return documents[yaml_document]


def read_list(lines):
    """
    Return the entries of a list file.

    Empty lines and lines starting with '#' are ignored.

    Parameters
    ----------
    lines: iterable of str
        Lines (e.g., an open file).

    Returns
    -------
    list of str
        Stripped, non-empty lines.
    """
    entries = (line.strip() for line in lines)
    return [entry for entry in entries if entry and not entry.startswith("#")]


def write_data_to_file(data, output_file, sort_keys=False):
    """
    Write structured data to a json or yaml file.

    Parameters
    ----------
    data: dict or list
        Data to be written.
    output_file: str or Path
        Output file (suffix defines the format).
    sort_keys: bool
        Sort keys of dictionaries.

    Raises
    ------
    TypeError
        If the file type is not supported.
    """
    output_file = Path(output_file)
    suffix = output_file.suffix.lower()
    if suffix not in _JSON_SUFFIXES + _YAML_SUFFIXES:
        raise TypeError(f"File type {suffix} not supported.")
    with open(output_file, "w", encoding="utf-8") as file:
        if suffix in _JSON_SUFFIXES:
            json.dump(data, file, indent=4, sort_keys=sort_keys, cls=JsonNumpyEncoder)
            file.write("\n")
        else:
            yaml.safe_dump(data, file, sort_keys=sort_keys)
    _logger.debug(f"Data written to {output_file}")


class JsonNumpyEncoder(json.JSONEncoder):
    """Convert numpy types to python types for json encoding."""

    def default(self, o):
        """Return python representation of numpy types."""
        if isinstance(o, np.floating):
            return float(o)
        if isinstance(o, np.integer):
            return int(o)
        if isinstance(o, np.ndarray):
            return o.tolist()
        return super().default(o)
