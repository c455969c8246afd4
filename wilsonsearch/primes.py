"""Prime generation: a bidirectional prime cursor and a range generator.

Primes up to 2**64 - 1 are supported.  Segments whose square root is small
enough are sieved exactly; beyond that a small-prime sieve removes most
composites and a deterministic Miller-Rabin test settles the rest.
"""

from __future__ import annotations

from functools import lru_cache
from itertools import compress
from math import isqrt
from typing import Iterator

MAX_PRIME_LIMIT = 2**64 - 1

# Segments whose square root is at most this value are sieved exactly.
_EXACT_ROOT = 1 << 22
# Above that, composites with factors below this bound are sieved out first.
_PREFILTER = 1 << 16
_MIN_SEGMENT = 1 << 15
_MAX_SEGMENT = 1 << 22
# Smallest batch handed out when a stop hint caps a forward segment.
_MIN_BATCH = 1 << 10
# Deterministic Miller-Rabin bases for every n < 3.3e24.
_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)


def _simple_sieve(limit: int) -> list[int]:
    """Return all primes <= limit with a plain sieve of Eratosthenes."""
    if limit < 2:
        return []
    flags = bytearray([1]) * (limit + 1)
    flags[0] = flags[1] = 0
    for i in range(2, isqrt(limit) + 1):
        if flags[i]:
            first = i * i
            flags[first::i] = bytes((limit - first) // i + 1)
    return list(compress(range(limit + 1), flags))


@lru_cache(maxsize=None)
def _cached_sieve(limit: int) -> tuple[int, ...]:
    return tuple(_simple_sieve(limit))


def _base_primes(limit: int) -> tuple[int, ...]:
    """Return a cached tuple holding at least every prime <= limit."""
    rounded = 1 << max(limit, 1).bit_length()
    return _cached_sieve(rounded)


def _is_prime_mr(n: int) -> bool:
    """Deterministic Miller-Rabin test, valid for all 64-bit integers."""
    if n < 2:
        return False
    for p in _MR_BASES:
        if n % p == 0:
            return n == p
    d = n - 1
    s = (d & -d).bit_length() - 1
    d >>= s
    for a in _MR_BASES:
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def _segment_size(n: int) -> int:
    root = isqrt(max(n, 0))
    if root > _EXACT_ROOT:
        return _MIN_SEGMENT
    return min(max(4 * root, _MIN_SEGMENT), _MAX_SEGMENT)


def _sieve_segment(lo: int, hi: int) -> list[int]:
    """Return the primes in the closed interval [lo, hi] in ascending order."""
    lo = max(lo, 0)
    if hi < 2 or hi < lo:
        return []
    root = isqrt(hi)
    exact = root <= _EXACT_ROOT
    bound = root if exact else _PREFILTER
    flags = bytearray([1]) * (hi - lo + 1)
    for n in range(lo, min(2, hi + 1)):
        flags[n - lo] = 0
    for p in _base_primes(bound):
        if p > bound or p * p > hi:
            break
        first = max(p * p, -(-lo // p) * p)
        if first > hi:
            continue
        flags[first - lo :: p] = bytes((hi - first) // p + 1)
    candidates = compress(range(lo, hi + 1), flags)
    if exact:
        return list(candidates)
    return [n for n in candidates if _is_prime_mr(n)]


def primes_between(start: int, stop: int) -> list[int]:
    """Return every prime p with start <= p < stop, in ascending order."""
    if start < 0:
        raise ValueError(f"start must not be negative: {start}")
    stop = min(stop, MAX_PRIME_LIMIT + 1)
    found: list[int] = []
    lo = start
    while lo < stop:
        hi = min(stop - 1, lo + _segment_size(stop) - 1)
        found.extend(_sieve_segment(lo, hi))
        lo = hi + 1
    return found


class PrimeIterator:
    """A cursor over the primes that can move forwards and backwards.

    After ``jump_to(start)`` the first ``next_prime()`` returns the smallest
    prime >= start and the first ``prev_prime()`` returns the largest prime
    <= start.  ``prev_prime()`` returns 0 once no smaller prime exists.
    ``stop_hint`` only limits how far ahead primes are sieved in one go.
    """

    def __init__(self, start: int = 0, stop_hint: int = MAX_PRIME_LIMIT) -> None:
        self.jump_to(start, stop_hint)

    def jump_to(self, start: int, stop_hint: int = MAX_PRIME_LIMIT) -> None:
        """Reset the cursor so that it continues from start."""
        if not 0 <= start <= MAX_PRIME_LIMIT:
            raise ValueError(f"start out of range [0, 2**64 - 1]: {start}")
        self._start = start
        self._stop_hint = stop_hint
        self._primes: list[int] = []
        self._i = 0

    def next_prime(self) -> int:
        """Advance to and return the next prime."""
        self._i += 1
        if self._i >= len(self._primes):
            try:
                self._fill_next()
            except OverflowError:
                self._i -= 1
                raise
            self._i = 0
        return self._primes[self._i]

    def prev_prime(self) -> int:
        """Step back to and return the previous prime, or 0 below 2."""
        if self._i == 0:
            self._fill_prev()
            self._i = len(self._primes)
        self._i -= 1
        return self._primes[self._i]

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        try:
            return self.next_prime()
        except OverflowError:
            raise StopIteration from None

    def _fill_next(self) -> None:
        lo = self._primes[-1] + 1 if self._primes else self._start
        while True:
            if lo > MAX_PRIME_LIMIT:
                raise OverflowError("no further prime below 2**64")
            hi = lo + _segment_size(lo) - 1
            if self._stop_hint >= lo:
                hi = min(hi, max(self._stop_hint, lo + _MIN_BATCH - 1))
            hi = min(hi, MAX_PRIME_LIMIT)
            segment = _sieve_segment(lo, hi)
            if segment:
                self._primes = segment
                return
            lo = hi + 1

    def _fill_prev(self) -> None:
        hi = self._primes[0] - 1 if self._primes else self._start
        while True:
            if hi < 2:
                self._primes = [0]
                return
            lo = max(0, hi - _segment_size(hi) + 1)
            segment = _sieve_segment(lo, hi)
            if segment:
                self._primes = segment
                return
            hi = lo - 1