"""Mod 30 wheel positioning and prime power tables for factorial products."""

from __future__ import annotations

from math import gcd

# Gaps between consecutive integers coprime to 30, starting at residue 7.
WHEEL = (4, 2, 4, 2, 4, 6, 2, 6)

# Residue mod 30 of the number that each wheel index starts from.
_RESIDUE_INDEX = {7: 0, 11: 1, 13: 2, 17: 3, 19: 4, 23: 5, 29: 6, 1: 7}

_TOP_BIT = 1 << 63
_UINT64_LIMIT = 1 << 64


def find_wheel_offset(start: int) -> tuple[int, int]:
    """Return the first number >= start coprime to 30, and its wheel index.

    Stepping from the returned number by ``WHEEL[index]``, then
    ``WHEEL[index + 1]`` and so on (cyclically) visits every number that is
    coprime to 30 in order.
    """
    if not 0 <= start < _UINT64_LIMIT:
        raise ValueError(f"start out of range [0, 2**64): {start}")
    n = start
    while gcd(n, 30) != 1:
        n += 1
    return n, _RESIDUE_INDEX[n % 30]


def get_power(prime: int, target: int) -> tuple[int, int]:
    """Return the exponent of prime in target! and its exponentiation start bit.

    The start bit is the bit just below the highest set bit of the exponent,
    used for left-to-right binary exponentiation; it is 2**63 when the
    exponent is at most 1.  A prime larger than target gives ``(0, 0)``.
    """
    if prime < 2:
        raise ValueError(f"prime must be at least 2: {prime}")
    if target < 0:
        raise ValueError(f"target must not be negative: {target}")
    if prime > target:
        return 0, 0
    total = 0
    power = prime
    while power <= target:
        total += target // power
        power *= prime
    if total > 1:
        return total, 1 << (total.bit_length() - 2)
    return total, _TOP_BIT