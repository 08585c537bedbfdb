"""Evaluate a file of arithmetic expressions, one per line."""
import lzma
from pathlib import Path
import tarfile
import tempfile
from typing import Callable, Dict, List, Optional
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath

from arithmetic_calculator.common.errors import CalculatorError, OperationsFileError
from arithmetic_calculator.common.logger import logger
from arithmetic_calculator.common.models import OperationRequest, OperationResult
from arithmetic_calculator.common.parser import ExpressionParser


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    # Path.stem only drops the last suffix, so strip them all before rebuilding
    name = input_path.name
    for suffix in input_path.suffixes:
        name = name[: -len(suffix)]
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{name}{suffix_safe}_results.txt")


def parse_requests(content: str) -> List[OperationRequest]:
    """
    Turn the text of an operations file into requests, one per non-blank line.

    :param str content: File content

    :return: Stripped expressions numbered by their line in the file
    :rtype: List[OperationRequest]
    """
    return [
        OperationRequest(expression=line.strip(), line_number=line_number)
        for line_number, line in enumerate(content.splitlines(), start=1)
        if line.strip()
    ]


def _expressions_member(names: List[str], archive_path: Path) -> str:
    """Pick the first .txt member of an archive."""
    for name in names:
        if name.endswith(".txt"):
            return name
    raise OperationsFileError(f"📄❌ No .txt file of expressions in {archive_path.name}")


def _read_zip(archive_path: Path) -> str:
    with zipfile.ZipFile(archive_path, "r") as zf:
        member = _expressions_member(zf.namelist(), archive_path)
        return zf.read(member).decode("utf-8")


def _read_tar_xz(archive_path: Path) -> str:
    with tarfile.open(archive_path, "r:xz") as tf:
        files = [m for m in tf.getmembers() if m.isfile()]
        member = _expressions_member([m.name for m in files], archive_path)
        return tf.extractfile(member).read().decode("utf-8")


def _read_7z(archive_path: Path) -> str:
    # py7zr only extracts to disk
    with tempfile.TemporaryDirectory() as tmpdir, py7zr.SevenZipFile(archive_path, mode="r") as archive:
        member = _expressions_member(archive.getnames(), archive_path)
        archive.extract(path=tmpdir, targets=[member])
        return (Path(tmpdir) / member).read_text(encoding="utf-8")


# Archive suffix -> reader returning the text of its expressions file
ARCHIVE_READERS: Dict[str, Callable[[Path], str]] = {
    ".zip": _read_zip,
    ".tar.xz": _read_tar_xz,
    ".7z": _read_7z,
}

# Errors raised by the archive libraries on corrupt input
ARCHIVE_ERRORS = (zipfile.BadZipFile, tarfile.TarError, lzma.LZMAError, py7zr.Bad7zFile)


def load_requests(input_path: Path) -> List[OperationRequest]:
    """
    Read the expressions of a .txt file, or of the first .txt member of an archive.

    Supported archives: .zip, .tar.xz, .7z

    :param Path input_path: Operations file or archive

    :return: One request per non-blank line
    :rtype: List[OperationRequest]
    :raises OperationsFileError: If the format is unsupported, the archive is corrupt or holds no .txt file
    """
    if input_path.suffix == ".txt":
        return parse_requests(input_path.read_text(encoding="utf-8"))

    archive_format = ".tar.xz" if input_path.suffixes[-2:] == [".tar", ".xz"] else input_path.suffix
    reader = ARCHIVE_READERS.get(archive_format)
    if reader is None:
        raise OperationsFileError(f"📄❌ Unsupported archive format: {archive_format or input_path.name}")

    try:
        content = reader(input_path)
    except ARCHIVE_ERRORS as exc:
        raise OperationsFileError(f"📄❌ Corrupt {archive_format} archive {input_path.name}: {exc}") from exc

    return parse_requests(content)


def evaluate_request(request: OperationRequest) -> OperationResult:
    """
    Evaluate a single expression, turning pipeline errors into an error result.

    :param OperationRequest request: Expression and its line number

    :return: Result or error for the expression
    :rtype: OperationResult
    """
    try:
        result = ExpressionParser.evaluate(request.expression)
    except CalculatorError as exc:
        logger.error(
            f"❌ Line {request.line_number}: {exc}\n"
            f"Invalid arithmetic expression, could not evaluate: {request.expression!r}"
        )
        return OperationResult(expression=request.expression, error=str(exc))

    logger.info(f"✅ Line {request.line_number}: {request.expression} = {result}")
    return OperationResult(expression=request.expression, result=result)


class BatchRunner(BaseModel):
    """
    Evaluate every expression of an input file and write the outcomes to a results file.

    The input is either a plain .txt file or an archive holding one
    (.zip, .tar.xz, .7z). Blank lines are skipped; every other line is
    evaluated on its own, so one bad expression does not stop the run.
    """

    # Make the Pydantic instance immutable (read-only) for safety
    model_config = ConfigDict(frozen=True)

    input_file: FilePath = Field(..., description="Text file or archive containing expressions")
    output_file: Optional[Path] = Field(default=None, description="Where results are written, derived from input_file if omitted")

    @property
    def results_path(self) -> Path:
        return self.output_file or build_output_path(self.input_file)

    def read_requests(self) -> List[OperationRequest]:
        """
        Load the non-empty lines of the input as operation requests.

        :return: Requests numbered by their line in the input
        :rtype: List[OperationRequest]
        :raises OperationsFileError: If the input cannot be read
        """
        return load_requests(self.input_file)

    def run(self) -> List[OperationResult]:
        """
        Evaluate all expressions, writing each result as soon as it is known.

        :return: Results in input order
        :rtype: List[OperationResult]
        """
        requests = self.read_requests()
        logger.info(f"📄 {len(requests)} expressions read from {self.input_file}")

        results: List[OperationResult] = []
        with self.results_path.open("w", encoding="utf-8") as f_out:
            for request in requests:
                outcome = evaluate_request(request)
                results.append(outcome)
                f_out.write(f"{outcome.to_line()}\n")
                f_out.flush()

        logger.info(f"✉️ Results written to {self.results_path}")
        return results
