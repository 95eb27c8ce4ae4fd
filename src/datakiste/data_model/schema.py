"""Validation of cut and calibration files with json schemas."""

import logging
from functools import cache

import jsonschema

from datakiste.io import ascii_handler

_logger = logging.getLogger(__name__)


@cache
def load_schema(schema_file):
    """
    Return the schema stored in a yaml or json file.

    Schemas are read once per process.

    Parameters
    ----------
    schema_file: str or Path
        Schema file.

    Returns
    -------
    dict
        Schema.
    """
    _logger.debug(f"Loading schema {schema_file}")
    return ascii_handler.collect_data_from_file(file_name=schema_file)


def validate_dict_using_schema(data, schema_file=None, json_schema=None):
    """
    Validate data against a json schema (draft 2020-12).

    Parameters
    ----------
    data: dict or list
        Data to be validated.
    schema_file: str or Path
        Schema file (used if json_schema is not given).
    json_schema: dict
        Schema.

    Returns
    -------
    dict or list
        The data (unchanged).

    Raises
    ------
    jsonschema.exceptions.ValidationError
        If the data does not follow the schema.
    """
    if json_schema is None:
        if schema_file is None:
            _logger.warning("No schema given, skipping validation")
            return data
        json_schema = load_schema(schema_file)

    try:
        jsonschema.Draft202012Validator(schema=json_schema).validate(instance=data)
    except jsonschema.exceptions.ValidationError as exc:
        _logger.error(f"Invalid data for schema '{json_schema.get('name')}': {exc.message}")
        raise
    _logger.debug(f"Validated data with schema '{json_schema.get('name')}'")
    return data
