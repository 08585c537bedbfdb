"""
Command line entrypoint.

This script either:
- Starts the interactive calculator shell (no argument)
- Evaluates an operations file, or an archive holding one, given as argument

Examples
--------
python -m arithmetic_calculator.main
python -m arithmetic_calculator.main resources/operations.7z
"""

import argparse
import sys
from typing import List, Optional

from pydantic import BaseModel, FilePath, ValidationError

from arithmetic_calculator.batch.runner import BatchRunner
from arithmetic_calculator.common.errors import OperationsFileError
from arithmetic_calculator.common.logger import set_verbose
from arithmetic_calculator.shell.repl import Repl


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : Optional[FilePath]
        Path to the file containing arithmetic operations, None for the interactive shell.
    verbose : bool
        Log lifecycle messages to stderr.
    """

    file_path: Optional[FilePath] = None
    verbose: bool = False


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, sys.argv[1:] if None
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        description="Evaluate arithmetic expressions interactively or from a file"
    )

    parser.add_argument(
        "file_path",
        nargs="?",
        default=None,
        help="Path to the file containing arithmetic operations (.txt, .zip, .tar.xz, .7z)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress to stderr",
    )

    args = parser.parse_args(argv)

    try:
        return CliArgs(file_path=args.file_path, verbose=args.verbose)
    except ValidationError as exc:
        parser.error(str(exc))


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the shell or the batch evaluation depending on the arguments.

    :return: Process exit code
    """
    cli_args = parse_args(argv)
    set_verbose(cli_args.verbose)

    if cli_args.file_path is None:
        return Repl().run()

    try:
        results = BatchRunner(input_file=cli_args.file_path).run()
    except (OperationsFileError, UnicodeDecodeError) as exc:
        print(f"Failed to read operations: {exc}", file=sys.stderr)
        return 1

    # Non-zero when at least one expression could not be evaluated
    return 0 if all(result.ok for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
