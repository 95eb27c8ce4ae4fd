import logging
import os
import sys
from pathlib import Path
from unittest import mock

import pytest

import datakiste.io.io_handler
from datakiste.calibration import ValUnc
from datakiste.container import Container
from datakiste.cut import Cut1dBetween, Cut2dCirc, Cut2dPoly, Cut2dRect, write_cut_file
from datakiste.event import Event, Hit, Run
from datakiste.hist import Histogram
from datakiste.io import binary_handler
from datakiste.points import PointSet

logger = logging.getLogger()


@pytest.fixture
def tmp_test_directory(tmpdir_factory):
    """Sets temporary test directories."""

    tmp_test_dir = tmpdir_factory.mktemp("test-data")
    for sub_dir in ["resources", "output"]:
        (tmp_test_dir / sub_dir).mkdir()
    return Path(tmp_test_dir)


@pytest.fixture(autouse=True)
def io_handler(tmp_test_directory):
    """Define io_handler fixture with output directory."""
    tmp_io_handler = datakiste.io.io_handler.IOHandler()
    tmp_io_handler.set_paths(output_path=str(tmp_test_directory) + "/output")
    return tmp_io_handler


@pytest.fixture
def _mock_settings_env_vars():
    """Removes all environment variable from the test system."""
    with mock.patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def hist_1d():
    hist = Histogram.new(10, 0.0, 10.0)
    for value, counts in [(0.5, 3), (2.5, 1), (9.5, 7)]:
        hist.fill_with_counts(value, counts)
    return hist


@pytest.fixture
def hist_2d():
    hist = Histogram.new(4, 0.0, 4.0, 2, -1.0, 1.0)
    hist.fill((0.5, -0.5))
    hist.fill_with_counts((3.5, 0.5), 5)
    return hist


@pytest.fixture
def hit():
    return Hit(
        daq_id=(0, 1, 2, 3),
        det_id=(1, 3),
        raw_value=1000,
        value=15383,
        energy=ValUnc(1.5, 0.25),
        time=12.5,
        trace=[0, 1, 65535],
    )


@pytest.fixture
def run(hit):
    return Run([Event([hit, Hit(daq_id=(1, 1, 1, 1), raw_value=7)]), Event([])])


@pytest.fixture
def mixed_container(hist_1d, hist_2d, run):
    return Container(
        {
            "run": run,
            "h1": hist_1d,
            "h2": hist_2d,
            "p2": PointSet(2, [(0.0, 1.0), (2.5, -3.0)]),
            "window": Cut1dBetween(1.0, 2.0),
            "blob": ~Cut2dCirc(0.0, 0.0, 1.0),
            "poly": Cut2dPoly(((0.0, 0.0), (1.0, 0.0), (0.0, 1.0))),
        }
    )


@pytest.fixture
def container_file(mixed_container, tmp_test_directory):
    file_name = tmp_test_directory / "resources" / "mixed.dk"
    binary_handler.write_container(mixed_container, file_name)
    return file_name


@pytest.fixture
def run_application(monkeypatch, _mock_settings_env_vars, tmp_test_directory):
    """Run an application main function with command line arguments."""

    def _run(main, *args, paths=True):
        path_args = ["--output_path", str(tmp_test_directory / "output")] if paths else []
        monkeypatch.setattr(sys, "argv", ["datakiste-test", *path_args, *args])
        return main()

    return _run


@pytest.fixture
def output_dir(tmp_test_directory):
    return tmp_test_directory / "output"


@pytest.fixture
def cut_file(tmp_test_directory):
    file_name = tmp_test_directory / "resources" / "cuts.yml"
    write_cut_file(
        {"low": Cut1dBetween(0.0, 3.0), "box": Cut2dRect(0.0, -1.0, 1.0, 0.0)}, file_name
    )
    return file_name


@pytest.fixture
def hist_file(tmp_test_directory, hist_1d):
    file_name = tmp_test_directory / "resources" / "hists.dk"
    binary_handler.write_container(Container({"h1": hist_1d}), file_name)
    return file_name
