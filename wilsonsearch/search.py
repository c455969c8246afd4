"""A resumable search for Wilson and near-Wilson primes in a range."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from .checkpoint import CheckpointStore, WorkStatus
from .primes import primes_between
from .results import (
    GOOD_RESULTS_FILENAME,
    RESULT_FILENAME,
    GoodResult,
    ResultFile,
    read_good_results,
)
from .wilson import (
    WilsonOutcome,
    classify_quotient,
    factorial_target,
    prime_type,
    reconstruct_wilson,
)

log = logging.getLogger(__name__)

MAX_RANGE = 10_000_000
RESULT_TEST_MAX_P = 20_000_000_000_000
# |w_p / p| below this must match the known good result file.
WPP_THRESHOLD = 1.0 / 50000.0

_MASK = (1 << 64) - 1


def validate_range(pmin: int, pmax: int, result_test: bool = False) -> None:
    """Raise ValueError unless [pmin, pmax) is a range the search accepts."""
    if pmin == 0 or pmax == 0:
        raise ValueError("-p and -P arguments are required")
    if pmin > pmax:
        raise ValueError("pmin <= pmax is required")
    if pmax > pmin + MAX_RANGE:
        raise ValueError(f"range <= {MAX_RANGE} is required")
    if result_test and pmax > RESULT_TEST_MAX_P:
        raise ValueError("pmax <= 2e13 is required when verifying results.")


def format_eta(seconds: float) -> str:
    """Format a duration as days, hours, minutes and seconds."""
    total = max(int(seconds), 0)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days}d {hours}h {minutes}m {secs}s"


@dataclass
class SearchReport:
    """What a search over [pmin, pmax) found."""

    pmin: int
    pmax: int
    prime_count: int = 0
    type_counts: tuple[int, int, int] = (0, 0, 0)
    results: list[WilsonOutcome] = field(default_factory=list)
    checksum: int = 0
    good_matches: int = 0
    resumed: bool = False
    already_complete: bool = False

    @property
    def result_count(self) -> int:
        return len(self.results)

    @property
    def last_result(self) -> WilsonOutcome | None:
        """The notable prime found last, or None."""
        return self.results[-1] if self.results else None


def _range_product(lo: int, hi: int, modulus: int) -> int:
    """Return lo * (lo+1) * ... * (hi-1) modulo modulus."""
    product = 1
    for k in range(lo, hi):
        product = product * k % modulus
    return product


def _signed_quotient(outcome: WilsonOutcome) -> int:
    if outcome.smallest == outcome.quotient:
        return outcome.quotient
    return -(outcome.p - outcome.quotient)


def _pairs(primes: Sequence[int], residues: Iterable[int]) -> list[tuple[int, int]]:
    return [(r % p, r // p) for p, r in zip(primes, residues)]


class WilsonSearch:
    """Compute the Wilson quotient of every prime in [pmin, pmax).

    Each prime only needs a partial factorial modulo p^2.  These are built up
    together in chunks of the factorial range, with checkpoints written to
    ``directory`` so that an interrupted search can resume.
    """

    checkpoint_interval = 60.0
    chunk_size = 1_000_000

    def __init__(
        self,
        pmin: int,
        pmax: int,
        directory: str | Path = ".",
        result_test: bool = False,
        good_results: Sequence[GoodResult] | None = None,
    ) -> None:
        validate_range(pmin, pmax, result_test)
        self.pmin = pmin
        self.pmax = pmax
        self.directory = Path(directory)
        self.result_test = result_test
        self.good_results = list(good_results) if good_results is not None else None
        self.store = CheckpointStore(self.directory)
        self.result_file = ResultFile(self.directory / RESULT_FILENAME)
        self._last_progress: float | None = None

    def run(self) -> SearchReport:
        """Run (or resume) the search and return its report."""
        log.info("Starting search at p: %d, stopping at P: %d", self.pmin, self.pmax)
        primes = primes_between(self.pmin, self.pmax)
        if not primes:
            raise ValueError("there are no primes to test in this range!")
        types = [prime_type(p) for p in primes]
        targets = [factorial_target(p) for p in primes]
        moduli = [p * p for p in primes]

        report = SearchReport(
            self.pmin,
            self.pmax,
            prime_count=len(primes),
            type_counts=tuple(sum(1 for t in types if t == k) for k in range(3)),
        )
        log.info(
            "Testing %d primes: %d type 0, %d type 1, %d type 2",
            len(primes),
            *report.type_counts,
        )

        status = WorkStatus(self.pmin, self.pmax, currp=2, tpcount=len(primes))
        residues = [1] * len(primes)
        loaded = self.store.read(self.pmin, self.pmax, len(primes))
        if loaded is not None:
            saved, pairs = loaded
            if saved.done:
                log.info("Workunit complete.")
                report.already_complete = True
                return report
            status = saved
            residues = [s1 * p + s0 for p, (s0, s1) in zip(primes, pairs)]
            report.resumed = True
            log.info("Resuming search from checkpoint. Current P: %d", status.currp)
        else:
            self.result_file.clear()
            status.trickle = int(time.time())

        good = self._load_good_results() if self.result_test else []

        max_target = max(targets)
        last_checkpoint = time.monotonic()
        while status.currp <= max_target:
            now = time.monotonic()
            if now - last_checkpoint >= self.checkpoint_interval:
                self._checkpoint(status, primes, residues, now - last_checkpoint, max_target)
                last_checkpoint = now
            stop = min(status.currp + self.chunk_size, max_target + 1)
            for i, (target, modulus) in enumerate(zip(targets, moduli)):
                if target < status.currp:
                    continue
                upper = min(stop, target + 1)
                residues[i] = residues[i] * _range_product(status.currp, upper, modulus) % modulus
            status.totalcount += stop - status.currp
            status.currp = stop

        self._finish(report, primes, types, residues, good)

        self.result_file.finalize(report.result_count, report.checksum)
        status.done = True
        self._checkpoint(status, primes, residues, 0.0, max_target)
        log.info(
            "Search complete. Results: %d, checksum %016X",
            report.result_count,
            report.checksum,
        )
        return report

    def _load_good_results(self) -> list[GoodResult]:
        if self.good_results is not None:
            good = [g for g in self.good_results if self.pmin <= g.p < self.pmax]
        else:
            good = read_good_results(
                self.directory / GOOD_RESULTS_FILENAME, self.pmin, self.pmax
            )
        log.info("Read %d good results |w_p/p| < 1/50000 for search range", len(good))
        return good

    def _finish(
        self,
        report: SearchReport,
        primes: Sequence[int],
        types: Sequence[int],
        residues: Sequence[int],
        good: list[GoodResult],
    ) -> None:
        remaining = list(good)
        checksum = 0
        for p, ptype, partial in zip(primes, types, residues):
            full = reconstruct_wilson(p, partial, ptype)
            quotient, remainder = divmod(full, p)
            if remainder:
                raise ArithmeticError(
                    f"Wilson quotient check failed! p: {p} type: {int(ptype)} rem: {remainder}"
                )
            outcome = classify_quotient(p, quotient)
            if outcome.is_notable:
                self.result_file.append(p, outcome.value)
                report.results.append(outcome)
            checksum = (checksum + outcome.checksum_term) & _MASK
            if self.result_test and outcome.ratio < WPP_THRESHOLD:
                self._match_good(outcome, remaining)
                report.good_matches += 1
        report.checksum = checksum

        if self.result_test:
            if remaining:
                missing = ", ".join(str(g.p) for g in remaining)
                raise RuntimeError(
                    f"result check failed! p: {missing} was not found in results!"
                )
            log.info("All results matched result file!")

    @staticmethod
    def _match_good(outcome: WilsonOutcome, remaining: list[GoodResult]) -> None:
        value = _signed_quotient(outcome)
        for entry in remaining:
            if entry.p != outcome.p:
                continue
            if entry.v != value:
                raise RuntimeError(
                    f"result check failed! p: {outcome.p} {value}, result file is {entry.v}"
                )
            remaining.remove(entry)
            log.info("p: %d has matching result %+d", outcome.p, value)
            return
        raise RuntimeError(
            f"result check failed! p: {outcome.p} is not in result file!"
        )

    def _checkpoint(
        self,
        status: WorkStatus,
        primes: Sequence[int],
        residues: Sequence[int],
        elapsed: float,
        max_target: int,
    ) -> None:
        try:
            self.store.write(status, _pairs(primes, residues))
        except OSError as exc:
            log.warning("Cannot write checkpoint to file. Continuing... (%s)", exc)
        if status.done:
            return
        progress = 100.0 * min(status.currp / max_target, 1.0)
        last = self._last_progress
        if last is not None and elapsed > 0 and progress > last:
            rate = (progress - last) / elapsed
            log.info(
                "Checkpoint, Current P: %d, eta: %s",
                status.currp,
                format_eta((100.0 - progress) / rate),
            )
        else:
            log.info("Checkpoint, Current P: %d", status.currp)
        self._last_progress = progress