#!/usr/bin/python3

import logging
import sys
from copy import copy
from pathlib import Path

import pytest
import yaml

from datakiste import settings
from datakiste.configuration.configurator import (
    Configurator,
    InvalidConfigurationParameterError,
)
from datakiste.io import io_handler

logger = logging.getLogger()


@pytest.fixture
def configurator(tmp_test_directory, _mock_settings_env_vars):
    config = Configurator(label="test_app")
    config.default_config(("--output_path", str(tmp_test_directory)))
    return config


@pytest.fixture
def args_dict(tmp_test_directory):
    return {
        "output_path": Path(tmp_test_directory),
        "config": None,
        "env_file": ".env",
        "label": None,
        "log_level": "info",
    }


def test_default_config(configurator, args_dict):
    assert configurator.config == args_dict


def test_fill_from_command_line(configurator, args_dict):
    configurator._fill_from_command_line(arg_list=[], require_command_line=False)
    assert configurator.config == args_dict

    with pytest.raises(SystemExit):
        configurator._fill_from_command_line(arg_list=[], require_command_line=True)

    configurator._fill_from_command_line(arg_list=["--log_level", "debug"])
    _tmp_config = copy(args_dict)
    _tmp_config["log_level"] = "debug"
    assert configurator.config == _tmp_config

    with pytest.raises(SystemExit):
        configurator._fill_from_command_line(arg_list=["--log_levl", "debug"])

    configurator._fill_from_command_line(arg_list=["--config", "abc.yml"])
    assert configurator.config.get("config") == "abc.yml"


def test_fill_from_config_dict(configurator, args_dict):
    configurator._fill_from_config_dict({})
    assert configurator.config == args_dict

    configurator._fill_from_config_dict({"LABEL": "my_label"})
    assert configurator.config["label"] == "my_label"

    # same value is not a conflict
    configurator._fill_from_config_dict({"label": "my_label"})
    with pytest.raises(InvalidConfigurationParameterError, match="label"):
        configurator._fill_from_config_dict({"label": "other_label"})
    configurator._fill_from_config_dict({"label": "other_label"}, overwrite=True)
    assert configurator.config["label"] == "other_label"

    # non-dict inputs are ignored
    configurator._fill_from_config_dict("abc")
    configurator._fill_from_config_dict(None)
    assert configurator.config["label"] == "other_label"


def test_fill_from_config_file(configurator, tmp_test_directory):
    _config_file = tmp_test_directory / "configuration-test.yml"
    with open(_config_file, "w", encoding="utf-8") as output:
        yaml.safe_dump({"LABEL": "from_file", "output_path": "./abc/"}, output, sort_keys=False)

    configurator._fill_from_config_file(_config_file)
    assert configurator.config["label"] == "from_file"
    assert configurator.config["output_path"] == Path("./abc/")

    # no error for missing config file names
    configurator._fill_from_config_file(config_file=None)
    with pytest.raises(FileNotFoundError):
        configurator._fill_from_config_file(config_file="this_file_does_not_exist.yml")


def test_fill_from_environmental_variables(configurator, monkeypatch):
    monkeypatch.setenv("DATAKISTE_LABEL", "env_label")
    monkeypatch.setenv("DATAKISTE_LOG_LEVEL", "debug")
    configurator._fill_from_environmental_variables()
    assert configurator.config["label"] == "env_label"
    # only parameters set to None are taken from the environment
    assert configurator.config["log_level"] == "info"


def test_fill_from_env_file(configurator, tmp_test_directory):
    env_file = tmp_test_directory / "test.env"
    env_file.write_text("DATAKISTE_LABEL='file_label' # comment\n", encoding="utf-8")
    configurator.config["env_file"] = str(env_file)
    configurator._fill_from_environmental_variables()
    assert configurator.config["label"] == "file_label"


def test_initialize(tmp_test_directory, _mock_settings_env_vars, monkeypatch):
    monkeypatch.setattr(
        sys,
        "argv",
        ["test_app", "--output_path", str(tmp_test_directory), "--seed", "5", "--output_file", "a.dk"],
    )
    configurator = Configurator(label="test_app")
    config = configurator.initialize(output=True, random=True)

    assert config["label"] == "test_app"
    assert config["seed"] == 5
    assert config["output_file"] == "a.dk"
    assert settings.config.random_seed == 5
    assert settings.config.output_path == Path(tmp_test_directory)
    assert io_handler.IOHandler().output_path == Path(tmp_test_directory)


def test_initialize_output_path_from_environment(
    tmp_test_directory, _mock_settings_env_vars, monkeypatch
):
    env_output_path = tmp_test_directory / "env_output"
    monkeypatch.setenv("DATAKISTE_OUTPUT_PATH", str(env_output_path))
    monkeypatch.setattr(sys, "argv", ["test_app", "--output_path", str(tmp_test_directory)])
    Configurator(label="test_app").initialize()

    assert settings.config.output_path == env_output_path
    assert io_handler.IOHandler().output_path == env_output_path
    assert io_handler.IOHandler().get_output_file("a.dk") == env_output_path / "a.dk"


def test_initialize_required_arguments(tmp_test_directory, _mock_settings_env_vars, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["test_app", "--output_path", str(tmp_test_directory)])
    with pytest.raises(SystemExit):
        Configurator(label="test_app").initialize(output=True)

    _config_file = tmp_test_directory / "configuration-test.yml"
    _config_file.write_text("output_file: from_config.dk\n", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["test_app", "--config", str(_config_file)])
    config = Configurator(label="test_app").initialize(output=True)
    assert config["output_file"] == "from_config.dk"


def test_initialize_with_class_config(_mock_settings_env_vars, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["test_app"])
    configurator = Configurator(config={"log_level": "debug"}, label="test_app")
    config = configurator.initialize(require_command_line=False)
    assert config["log_level"] == "debug"


def test_arglist_from_config():
    _tmp_dict = {
        "a": [1, 2],
        "b": True,
        "c": False,
        "d": None,
        "e": "",
        "f": 3,
    }
    assert Configurator._arglist_from_config(_tmp_dict) == ["--a", "1", "2", "--b", "--f", "3"]
    assert Configurator._arglist_from_config(["x", "None", 1]) == ["x", "1"]
    assert Configurator._arglist_from_config(None) == []
    assert Configurator._arglist_from_config(5) == []


def test_convert_string_none_to_none():
    assert Configurator._convert_string_none_to_none({"a": "None", "b": "none", "c": 1}) == {
        "a": None,
        "b": "none",
        "c": 1,
    }


def test_check_parameter_configuration_status(configurator, tmp_test_directory):
    configurator._check_parameter_configuration_status("not_configured", 5)
    # default values can be overwritten
    configurator._check_parameter_configuration_status("log_level", "debug")
    configurator._check_parameter_configuration_status("output_path", Path(tmp_test_directory))
    with pytest.raises(InvalidConfigurationParameterError):
        configurator._check_parameter_configuration_status("output_path", Path("/other"))
