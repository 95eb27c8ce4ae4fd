#!/usr/bin/python3

import pytest

from datakiste.applications import filter as filter_app
from datakiste.applications import integrate
from datakiste.io import binary_handler


def test_filter(run_application, hist_file, cut_file, output_dir):
    run_application(
        filter_app.main,
        "--input_file",
        str(hist_file),
        "--hist_name",
        "h1",
        "--cut_file",
        str(cut_file),
        "--cut_name",
        "low",
        "--output_file",
        "low.dk",
    )
    filtered = binary_handler.read_container(output_dir / "low.dk")
    assert filtered.names() == ["h1"]
    assert filtered.get_hist("h1").total_count == 4


@pytest.mark.parametrize(
    ("cut_name", "hist_name"), [("box", "h1"), ("missing", "h1"), ("low", "x")]
)
def test_filter_errors(run_application, hist_file, cut_file, cut_name, hist_name):
    with pytest.raises(SystemExit) as exc:
        run_application(
            filter_app.main,
            "--input_file",
            str(hist_file),
            "--hist_name",
            hist_name,
            "--cut_file",
            str(cut_file),
            "--cut_name",
            cut_name,
            "--output_file",
            "out.dk",
        )
    assert exc.value.code == 1


def test_integrate(run_application, hist_file, cut_file, capsys):
    run_application(
        integrate.main, "--input_file", str(hist_file), "--hist_name", "h1", paths=False
    )
    assert capsys.readouterr().out.strip() == "11"

    run_application(
        integrate.main,
        "--input_file",
        str(hist_file),
        "--hist_name",
        "h1",
        "--cut_file",
        str(cut_file),
        "--cut_name",
        "low",
        paths=False,
    )
    assert capsys.readouterr().out.strip() == "4"


def test_integrate_requires_cut_name(run_application, hist_file, cut_file):
    with pytest.raises(SystemExit) as exc:
        run_application(
            integrate.main,
            "--input_file",
            str(hist_file),
            "--hist_name",
            "h1",
            "--cut_file",
            str(cut_file),
            paths=False,
        )
    assert exc.value.code == 2
