"""Test class BatchRunner and archive helpers."""
from pathlib import Path
import tarfile
import zipfile

import py7zr
from pydantic import ValidationError
import pytest

from arithmetic_calculator.batch.runner import (
    BatchRunner,
    build_output_path,
    evaluate_request,
    load_requests,
    parse_requests,
)
from arithmetic_calculator.common.errors import OperationsFileError
from arithmetic_calculator.common.models import OperationRequest


@pytest.mark.parametrize("name,expected", [
    ("ops.txt", "ops_txt_results.txt"),
    ("operations_short.7z", "operations_short_7z_results.txt"),
    ("ops.tar.xz", "ops_tar_xz_results.txt"),
])
def test_build_output_path(tmp_path: Path, name: str, expected: str) -> None:
    """The results file sits next to the input with its suffixes folded into the name."""
    assert build_output_path(tmp_path / name) == tmp_path / expected


def test_run_txt(tmp_path: Path) -> None:
    """Every non-empty line is evaluated and written in order."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+1\n\n2 * 3 + 1\n1/0\n  \n1.1.1\n")

    results = BatchRunner(input_file=input_file).run()

    assert [r.ok for r in results] == [True, True, False, False]
    content = (tmp_path / "ops_txt_results.txt").read_text().splitlines()
    assert content[0] == "1+1 = 2"
    assert content[1] == "2 * 3 + 1 = 7"
    assert content[2].startswith("1/0 -> ERROR: Division by zero")
    assert content[3].startswith("1.1.1 -> ERROR: second decimal point")


def test_run_explicit_output(tmp_path: Path) -> None:
    """An explicit output file overrides the derived one."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("4/8\n")
    output_file = tmp_path / "out.txt"

    BatchRunner(input_file=input_file, output_file=output_file).run()

    assert output_file.read_text() == "4/8 = 0.5\n"


def test_read_requests_keeps_line_numbers(tmp_path: Path) -> None:
    """Requests are numbered by their line in the input file."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("\n 1+1 \n\n2+2\n")

    requests = BatchRunner(input_file=input_file).read_requests()

    assert [(r.line_number, r.expression) for r in requests] == [(2, "1+1"), (4, "2+2")]


def test_runner_requires_existing_file(tmp_path: Path) -> None:
    """The input file must exist."""
    with pytest.raises(ValidationError):
        BatchRunner(input_file=tmp_path / "missing.txt")


def test_evaluate_request() -> None:
    """A single request turns into a result or an error result."""
    assert evaluate_request(OperationRequest(expression="7-10")).result == -3.0
    failed = evaluate_request(OperationRequest(expression="* 2", line_number=3))
    assert not failed.ok
    assert "start with operator" in failed.error


def test_run_keeps_going_after_long_line(tmp_path: Path) -> None:
    """A very long expression is evaluated like any other line."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+1\n" + "+".join(["1"] * 1500) + "\n2+2\n")

    results = BatchRunner(input_file=input_file).run()

    assert [r.result for r in results] == [2.0, 1500.0, 4.0]


def test_parse_requests() -> None:
    """Blank lines are skipped and the others keep their line number."""
    requests = parse_requests("1+1\n\n   \n 2*2 \n")
    assert [(r.line_number, r.expression) for r in requests] == [(1, "1+1"), (4, "2*2")]


def test_load_zip(tmp_path: Path) -> None:
    """The first .txt member of a .zip archive is read as requests."""
    zip_path = tmp_path / "ops.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("readme.md", "not expressions")
        zf.writestr("ops.txt", "3+3\n\n4-1\n")

    requests = load_requests(zip_path)

    assert [(r.line_number, r.expression) for r in requests] == [(1, "3+3"), (3, "4-1")]


def test_load_tar_xz(tmp_path: Path) -> None:
    """Check that a .tar.xz archive can be read correctly."""
    txt = tmp_path / "ops.txt"
    txt.write_text("4*4\n")

    tar_path = tmp_path / "ops.tar.xz"
    with tarfile.open(tar_path, "w:xz") as tf:
        tf.add(txt, arcname="ops.txt")

    assert [r.expression for r in load_requests(tar_path)] == ["4*4"]


def test_run_7z(tmp_path: Path) -> None:
    """A .7z archive is extracted and its expressions evaluated."""
    txt = tmp_path / "ops.txt"
    txt.write_text("5-2\n")

    archive_path = tmp_path / "ops.7z"
    with py7zr.SevenZipFile(archive_path, "w") as archive:
        archive.write(txt, arcname="ops.txt")

    results = BatchRunner(input_file=archive_path).run()

    assert [r.result for r in results] == [3.0]
    assert (tmp_path / "ops_7z_results.txt").read_text() == "5-2 = 3\n"


def test_load_archive_no_txt(tmp_path: Path) -> None:
    """Verify that loading fails if no .txt file exists in the archive."""
    zip_path = tmp_path / "empty.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("data.bin", b"\x00\x01")

    with pytest.raises(OperationsFileError, match="No .txt file"):
        load_requests(zip_path)


def test_load_unsupported_format(tmp_path: Path) -> None:
    """Ensure unsupported archive formats raise an OperationsFileError."""
    file_path = tmp_path / "ops.rar"
    file_path.write_text("1+1")

    with pytest.raises(OperationsFileError, match="Unsupported archive format: .rar"):
        load_requests(file_path)


@pytest.mark.parametrize("name", ["ops.zip", "ops.tar.xz", "ops.7z"])
def test_load_corrupt_archive(tmp_path: Path, name: str) -> None:
    """Corrupt archives are reported as OperationsFileError, which is a ValueError."""
    archive_path = tmp_path / name
    archive_path.write_bytes(b"this is not an archive")

    with pytest.raises(OperationsFileError, match="Corrupt"):
        load_requests(archive_path)
    with pytest.raises(ValueError):
        load_requests(archive_path)
