#!/usr/bin/python3

import logging

from datakiste.applications import bin_to_txt
from datakiste.container import Container
from datakiste.io import binary_handler


def test_main(run_application, container_file, output_dir):
    run_application(bin_to_txt.main, "--input_file", str(container_file))
    assert sorted(p.name for p in output_dir.iterdir() if p.suffix != ".dk") == [
        "h1.dkht",
        "h2.dkht",
        "p2.dkpt",
    ]
    assert (output_dir / "h1.dkht").read_text(encoding="utf-8") == "0.5\t3\n2.5\t1\n9.5\t7\n"
    assert (output_dir / "p2.dkpt").read_text(encoding="utf-8") == "0\t1\n2.5\t-3\n"


def test_main_include_empty(run_application, container_file, output_dir):
    run_application(bin_to_txt.main, "--input_file", str(container_file), "--include_empty")
    assert len((output_dir / "h1.dkht").read_text(encoding="utf-8").splitlines()) == 10


def test_main_skips_names_outside_output_path(
    run_application, tmp_test_directory, output_dir, hist_1d, caplog
):
    escaped = tmp_test_directory / "escaped"
    input_file = tmp_test_directory / "resources" / "names.dk"
    binary_handler.write_container(
        Container({str(escaped): hist_1d, "../sibling": hist_1d, "sub/h": hist_1d, "ok": hist_1d}),
        input_file,
    )

    with caplog.at_level(logging.WARNING):
        run_application(bin_to_txt.main, "--input_file", str(input_file))

    assert (output_dir / "ok.dkht").is_file()
    assert not escaped.with_suffix(".dkht").exists()
    assert not (tmp_test_directory / "sibling.dkht").exists()
    assert not (output_dir / "sub").exists()
    assert "Skipping item '../sibling' (not usable as a file name)" in caplog.text
