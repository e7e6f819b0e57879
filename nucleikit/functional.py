"""Compare the number of templates loaded by two scanner binaries for each test case."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from nucleikit.testutils import run_nuclei_binary_and_get_loaded_templates

SUCCESS = "\x1b[32m[✓]\x1b[0m"
FAILED = "\x1b[31m[✘]\x1b[0m"


def run_individual_test_case(main_binary: str, dev_binary: str, testcase: str) -> None:
    """Run one test case line with both binaries; raise when their counts differ."""
    args = testcase.split()[1:]
    try:
        main_output = run_nuclei_binary_and_get_loaded_templates(main_binary, args)
    except (OSError, LookupError, RuntimeError) as err:
        raise RuntimeError(f"could not run nuclei main test: {err}") from err
    except Exception as err:
        raise RuntimeError(f"could not run nuclei main test: {err}") from err
    try:
        dev_output = run_nuclei_binary_and_get_loaded_templates(dev_binary, args)
    except Exception as err:
        raise RuntimeError(f"could not run nuclei dev test: {err}") from err
    if main_output != dev_output:
        raise RuntimeError(f"{main_output} main is not equal to {dev_output} dev")


def run_functional_tests(main_binary: str, dev_binary: str, testcases_path: str) -> bool:
    """Run every non-blank line of the test cases file; return whether all passed."""
    try:
        with open(testcases_path, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
    except OSError as err:
        raise RuntimeError(f"could not open test cases: {err}") from err

    all_passed = True
    for line in lines:
        text = line.strip()
        if not text:
            continue
        try:
            run_individual_test_case(main_binary, dev_binary, text)
        except RuntimeError as err:
            all_passed = False
            print(f'{FAILED} Test "{text}" failed: {err}', file=sys.stderr)
        else:
            print(f'{SUCCESS} Test "{text}" passed!')
    return all_passed


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry point; returns the process exit status."""
    parser = argparse.ArgumentParser(description="Compare template loading of two binaries")
    parser.add_argument("-main", dest="main", default="", help="Main Branch Nuclei Binary")
    parser.add_argument("-dev", dest="dev", default="", help="Dev Branch Nuclei Binary")
    parser.add_argument(
        "-testcases", dest="testcases", default="",
        help="Test cases file for nuclei functional tests",
    )
    args = parser.parse_args(argv)
    try:
        passed = run_functional_tests(args.main, args.dev, args.testcases)
    except RuntimeError as err:
        print(f"Could not run functional tests: {err}", file=sys.stderr)
        return 1
    return 0 if passed else 1


if __name__ == "__main__":
    sys.exit(main())