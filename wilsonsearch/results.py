"""Result files: Wilson and near-Wilson primes found, and known good results."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

RESULT_FILENAME = "results.txt"
GOOD_RESULTS_FILENAME = "goodresults.txt"

# The 64-bit wrapping sum of every "p v" pair in the known good result file.
GOOD_RESULTS_CHECKSUM = 0x6659912234F44428

_MASK = (1 << 64) - 1


@dataclass(frozen=True)
class GoodResult:
    """A known prime p whose Wilson quotient, taken near 0 mod p, is v."""

    p: int
    v: int


def format_result(p: int, value: int) -> str:
    """Return the result line for a Wilson (value 0) or near-Wilson prime."""
    if value == 0:
        return f"{p} is a Wilson prime"
    return f"{p} is a Near-Wilson prime {value:+d}"


def _parse_line(line: str, path: Path) -> tuple[int, int]:
    fields = line.split()
    try:
        return int(fields[0]), int(fields[1])
    except (IndexError, ValueError):
        raise ValueError(f"Error reading {path.name}: {line.rstrip()!r}") from None


def read_good_results(path: str | Path, pmin: int, pmax: int) -> list[GoodResult]:
    """Read the known good result file and return the entries in [pmin, pmax).

    Every line must hold a prime and a signed value.  The whole file is
    checked against its fixed checksum; a bad line or a wrong checksum
    raises ValueError.
    """
    path = Path(path)
    total = 0
    found: list[GoodResult] = []
    with path.open("r", encoding="ascii") as handle:
        for line in handle:
            p, v = _parse_line(line, path)
            total = (total + p + v) & _MASK
            if pmin <= p < pmax:
                found.append(GoodResult(p, v))
    if total != GOOD_RESULTS_CHECKSUM:
        raise ValueError(f"Checksum error in {path.name}")
    return found


class ResultFile:
    """The text file that collects the results of one search."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def clear(self) -> None:
        """Empty the file, creating it if needed."""
        self.path.write_text("", encoding="ascii")

    def append(self, p: int, value: int) -> None:
        """Add the line for a Wilson or near-Wilson prime."""
        with self.path.open("a", encoding="ascii") as handle:
            handle.write(format_result(p, value) + "\n")

    def line_count(self) -> int:
        """Return the number of lines in the file."""
        with self.path.open("r", encoding="ascii") as handle:
            return sum(1 for _ in handle)

    def finalize(self, result_count: int, checksum: int) -> None:
        """Check that no result is missing, then append the search checksum."""
        if result_count and self.line_count() < result_count:
            raise RuntimeError(f"Missing results in {self.path.name}")
        text = f"{checksum & _MASK:016X}\n"
        if result_count == 0:
            text = "no results\n" + text
        with self.path.open("a", encoding="ascii") as handle:
            handle.write(text)