"""Command line entry point: search a range for Wilson primes or run the self test."""

from __future__ import annotations

import argparse
import logging
import sys
import tempfile
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Sequence

from .results import format_result
from .search import SearchReport, WilsonSearch


@dataclass(frozen=True)
class _SelfTestCase:
    number: int
    pmin: int
    pmax: int
    description: str
    result_count: int
    checksum: int
    last_prime: int
    last_value: int


_SELF_TESTS = (
    _SelfTestCase(1, 1239053554603, 1239053554604, "1239053554603 is a type 0 prime",
                  1, 0x00000240FAB1A752, 1239053554603, -4),
    _SelfTestCase(2, 1108967825921, 1108967825922, "1108967825921 is a type 1 prime",
                  1, 0x0000010233A2220D, 1108967825921, 12),
    _SelfTestCase(3, 5609877309359, 5609877309360, "5609877309359 is a type 2 prime",
                  1, 0x00000A344D7D0F58, 5609877309359, -6),
    _SelfTestCase(4, 16556218163369, 16556218163370, "16556218163369 is a type 1 prime",
                  1, 0x00000F0ECB80A0AB, 16556218163369, 2),
    _SelfTestCase(5, 200, 564, "Testing small iterations with Wilson prime 563",
                  57, 0x00000000000080A3, 563, 0),
    _SelfTestCase(6, 86000000, 87467200, "Testing large iterations with type 2 prime 87467099",
                  1, 0x0000097C61AB0943, 87467099, -2),
    _SelfTestCase(7, 17524177394450, 17524177394618, "17524177394617 is a type 0 prime",
                  1, 0x00005B54B4CBBC47, 17524177394617, 256),
)


def _parse_number(text: str) -> int:
    """Parse a non-negative integer, allowing forms such as 2e13."""
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if not value.is_finite() or value != value.to_integral_value() or value < 0:
        raise argparse.ArgumentTypeError(f"not a non-negative integer: {text!r}")
    return int(value)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wilsonsearch",
        description="Search a range of primes for Wilson and near-Wilson primes.",
    )
    parser.add_argument("-p", "--pmin", type=_parse_number, default=0,
                        help="start of the search range (inclusive)")
    parser.add_argument("-P", "--pmax", type=_parse_number, default=0,
                        help="end of the search range (exclusive)")
    parser.add_argument("-d", "--directory", default=".",
                        help="directory for checkpoint and result files")
    parser.add_argument("-v", "--verify", action="store_true",
                        help="check results against the known good result file")
    parser.add_argument("-s", "--test", action="store_true",
                        help="run the built-in self test")
    parser.add_argument("--case", type=int, action="append",
                        choices=[case.number for case in _SELF_TESTS],
                        help="self test case to run (repeatable, default all)")
    return parser


def _check_case(case: _SelfTestCase, report: SearchReport) -> bool:
    last = report.last_result
    return (
        report.result_count == case.result_count
        and report.checksum == case.checksum
        and last is not None
        and last.p == case.last_prime
        and last.value == case.last_value
    )


def _run_self_test(numbers: Sequence[int] | None) -> int:
    cases = [c for c in _SELF_TESTS if numbers is None or c.number in numbers]
    print(f"Beginning self test of {len(cases)} ranges.\n")
    start = time.monotonic()
    passed = 0
    for case in cases:
        print(case.description)
        with tempfile.TemporaryDirectory() as scratch:
            try:
                report = WilsonSearch(case.pmin, case.pmax, scratch).run()
                ok = _check_case(case, report)
            except (ValueError, ArithmeticError, RuntimeError, OSError) as exc:
                print(f"error: {exc}", file=sys.stderr)
                ok = False
        verdict = "passed" if ok else "failed"
        print(f"test case {case.number} {verdict}.\n")
        print(f"test case {case.number} {verdict}.", file=sys.stderr)
        passed += ok
    if passed == len(cases):
        print("All test cases completed successfully!")
        status = 0
    else:
        print("Self test FAILED!")
        status = 1
    print(f"Elapsed time: {int(time.monotonic() - start)} sec.")
    return status


def _run_search(args: argparse.Namespace) -> int:
    started = time.monotonic()
    search = WilsonSearch(args.pmin, args.pmax, Path(args.directory),
                          result_test=args.verify)
    print(f"Starting search at p: {args.pmin}\nStopping search at P: {args.pmax}")
    report = search.run()
    if report.already_complete:
        print("Workunit complete.")
        return 0
    if report.resumed:
        print("Resumed search from checkpoint.")
    for outcome in report.results:
        print(format_result(outcome.p, outcome.value))
    print(f"Search finished in {int(time.monotonic() - started)} sec.")
    print(f"results {report.result_count}, checksum {report.checksum:016X}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = _build_parser().parse_args(argv)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)
    if args.test:
        return _run_self_test(args.case)
    try:
        return _run_search(args)
    except (ValueError, ArithmeticError, RuntimeError, OSError) as exc:
        print(f"{exc}\nuse -h for help", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())