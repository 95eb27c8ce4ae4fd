#!/usr/bin/python3

import logging
from pathlib import Path

import pytest

import datakiste.configuration.commandline_parser as parser
from datakiste.version import __version__

logger = logging.getLogger()


def test_initialize_default_arguments():
    _parser = parser.CommandLineParser()
    _parser.initialize_default_arguments()
    args = vars(_parser.parse_args([]))
    assert args == {
        "output_path": Path("./"),
        "config": None,
        "env_file": ".env",
        "label": None,
        "log_level": "info",
    }


def test_initialize_default_arguments_without_paths():
    _parser = parser.CommandLineParser()
    _parser.initialize_default_arguments(paths=False)
    assert "output_path" not in vars(_parser.parse_args([]))


def test_output_arguments():
    _parser = parser.CommandLineParser()
    _parser.initialize_default_arguments(output=True)
    assert _parser.parse_args(["--output_file", "out.dk"]).output_file == "out.dk"
    with pytest.raises(SystemExit):
        _parser.parse_args([])


def test_random_arguments():
    _parser = parser.CommandLineParser()
    _parser.initialize_default_arguments(random=True)
    assert _parser.parse_args([]).seed is None
    assert _parser.parse_args(["--seed", "42"]).seed == 42
    with pytest.raises(SystemExit):
        _parser.parse_args(["--seed", "abc"])


def test_version(capsys):
    _parser = parser.CommandLineParser(prog="datakiste-test")
    _parser.initialize_default_arguments()
    with pytest.raises(SystemExit):
        _parser.parse_args(["--version"])
    assert f"datakiste-test {__version__}" in capsys.readouterr().out
