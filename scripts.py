"""Development task runner for dirwalk.

Usage:
    python scripts.py TASK

Tasks:
    run_tests       Run the unit tests
    run_cli_tests   Run the unit tests plus the subprocess CLI tests
    run_lint        Check style with flake8
    run_typecheck   Type-check the package with mypy
    run_format      Format sources and tests with black
    run_coverage    Run the tests with an XML coverage report for the dirwalk package
    run_checks      Lint, type-check and test, stopping at the first failure
"""

import subprocess
import sys
from typing import Callable, Dict, List


def _run(command: List[str]) -> None:
    subprocess.run(command, check=True)


def run_tests() -> None:
    _run(["pytest"])


def run_cli_tests() -> None:
    _run(["pytest", "--run-cli-tests"])


def run_lint() -> None:
    _run(["flake8", "--max-line-length", "120", "src", "tests"])


def run_typecheck() -> None:
    _run(["mypy", "src"])


def run_format() -> None:
    _run(["black", "src", "tests", "scripts.py"])


def run_coverage() -> None:
    _run(["pytest", "--cov=dirwalk", "--cov-report=xml", "tests/"])


def run_checks() -> None:
    run_lint()
    run_typecheck()
    run_tests()


TASKS: Dict[str, Callable[[], None]] = {
    "run_tests": run_tests,
    "run_cli_tests": run_cli_tests,
    "run_lint": run_lint,
    "run_typecheck": run_typecheck,
    "run_format": run_format,
    "run_coverage": run_coverage,
    "run_checks": run_checks,
}


def main(argv: List[str]) -> int:
    if len(argv) != 1 or argv[0] not in TASKS:
        print(__doc__, file=sys.stderr)
        return 2
    try:
        TASKS[argv[0]]()
    except subprocess.CalledProcessError as e:
        return e.returncode
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
