#!/usr/bin/python3

import numpy as np
import pytest

from datakiste.io import ascii_handler


def test_collect_data_from_file(tmp_test_directory):
    json_file = tmp_test_directory / "data.json"
    json_file.write_text('{"a": [1, 2]}', encoding="utf-8")
    assert ascii_handler.collect_data_from_file(json_file) == {"a": [1, 2]}

    yaml_file = tmp_test_directory / "data.yml"
    yaml_file.write_text("a: 1\nb: [x, y]\n", encoding="utf-8")
    assert ascii_handler.collect_data_from_file(yaml_file) == {"a": 1, "b": ["x", "y"]}

    list_file = tmp_test_directory / "files.list"
    list_file.write_text("# comment\nfirst.dk\n\n  second.dk \n", encoding="utf-8")
    assert ascii_handler.collect_data_from_file(list_file) == ["first.dk", "second.dk"]


def test_collect_data_from_multi_document_yaml(tmp_test_directory):
    yaml_file = tmp_test_directory / "multi.yaml"
    yaml_file.write_text("a: 1\n---\nb: 2\n", encoding="utf-8")
    assert ascii_handler.collect_data_from_file(yaml_file) == [{"a": 1}, {"b": 2}]
    assert ascii_handler.collect_data_from_file(yaml_file, yaml_document=1) == {"b": 2}
    with pytest.raises(IndexError, match="out of range"):
        ascii_handler.collect_data_from_file(yaml_file, yaml_document=2)


def test_collect_data_from_file_errors(tmp_test_directory):
    with pytest.raises(FileNotFoundError, match="Failed to read file"):
        ascii_handler.collect_data_from_file(tmp_test_directory / "missing.json")

    bad_json = tmp_test_directory / "bad.json"
    bad_json.write_text("{", encoding="utf-8")
    with pytest.raises(ValueError, match="Failed to read file"):
        ascii_handler.collect_data_from_file(bad_json)

    other = tmp_test_directory / "data.csv"
    other.write_text("1,2", encoding="utf-8")
    with pytest.raises(TypeError, match="not supported"):
        ascii_handler.collect_data_from_file(other)


def test_write_data_to_file(tmp_test_directory):
    data = {"b": np.float64(1.5), "a": np.arange(3), "c": (np.int64(1), 2)}
    json_file = tmp_test_directory / "out.json"
    ascii_handler.write_data_to_file(data, json_file, sort_keys=True)
    assert ascii_handler.collect_data_from_file(json_file) == {
        "a": [0, 1, 2],
        "b": 1.5,
        "c": [1, 2],
    }

    yaml_file = tmp_test_directory / "out.yml"
    ascii_handler.write_data_to_file({"x": [1, 2]}, yaml_file)
    assert ascii_handler.collect_data_from_file(yaml_file) == {"x": [1, 2]}

    with pytest.raises(TypeError):
        ascii_handler.write_data_to_file({}, tmp_test_directory / "out.txt")
