"""Wilson quotients of primes, reconstructed from partial factorials.

Every prime p >= 5 falls into one of three classes.  For each class a
factorial much shorter than (p-1)! is enough, modulo p^2, to recover
(p-1)! + 1 (mod p^2) and with it the Wilson quotient modulo p:

* p = 1 (mod 3):   ((p-1)/6)!, with the forms u^2 + 3v^2 and c^2 + 27d^2 of 4p
* p = 5 (mod 12):  ((p-1)/4)!, with the form a^2 + b^2 of p
* p = 11 (mod 12): ((p-1)/2)!
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .representations import find_a, find_c, find_u

# Quotients this close to 0 (mod p) are reported as near-Wilson primes.
SPECIAL_THRESHOLD = 1000


class PrimeType(IntEnum):
    """The residue class of a prime, which picks the factorial that is used."""

    ONE_MOD_3 = 0
    FIVE_MOD_12 = 1
    ELEVEN_MOD_12 = 2

    @property
    def divisor(self) -> int:
        """The n for which ((p-1)/n)! is the factorial of this class."""
        return (6, 4, 2)[self]


@dataclass(frozen=True)
class WilsonOutcome:
    """The Wilson quotient of p, reduced modulo p."""

    p: int
    quotient: int

    @property
    def smallest(self) -> int:
        """The distance of the quotient from 0 modulo p."""
        return min(self.quotient, self.p - self.quotient)

    @property
    def value(self) -> int | None:
        """0 for a Wilson prime, the signed distance for a near-Wilson prime, else None."""
        if self.quotient == 0:
            return 0
        if self.smallest < SPECIAL_THRESHOLD:
            if self.smallest == self.quotient:
                return self.quotient
            return -(self.p - self.quotient)
        return None

    @property
    def is_wilson(self) -> bool:
        return self.quotient == 0

    @property
    def is_notable(self) -> bool:
        """True for Wilson and near-Wilson primes."""
        return self.value is not None

    @property
    def ratio(self) -> float:
        """|w_p / p| with the quotient taken in (-p/2, p/2]."""
        return self.smallest / self.p

    @property
    def checksum_term(self) -> int:
        """The contribution of this prime to a search checksum."""
        return self.p + self.quotient


def prime_type(p: int) -> PrimeType:
    """Return the class of the prime p >= 5."""
    if p < 5:
        raise ValueError(f"p must be at least 5: {p}")
    if p % 3 == 1:
        return PrimeType.ONE_MOD_3
    if p % 12 == 5:
        return PrimeType.FIVE_MOD_12
    if p % 12 == 11:
        return PrimeType.ELEVEN_MOD_12
    raise ValueError(f"{p} is not 1 mod 3, 5 mod 12 or 11 mod 12")


def factorial_target(p: int) -> int:
    """Return n such that n! is the partial factorial needed for p."""
    return (p - 1) // prime_type(p).divisor


def factorial_mod(n: int, modulus: int) -> int:
    """Return n! modulo modulus."""
    if n < 0:
        raise ValueError(f"n must not be negative: {n}")
    if modulus < 1:
        raise ValueError(f"modulus must be positive: {modulus}")
    result = 1 % modulus
    for k in range(2, n + 1):
        result = result * k % modulus
        if result == 0:
            break
    return result


def _inverse(value: int, modulus: int, what: str, p: int) -> int:
    try:
        return pow(value, -1, modulus)
    except ValueError:
        raise ArithmeticError(
            f"inverse doesn't exist, {what}: {value} testprime: {p}"
        ) from None


def reconstruct_wilson(p: int, partial: int, ptype: PrimeType | int) -> int:
    """Return (p-1)! + 1 mod p^2 from partial = factorial_target(p)! mod p^2."""
    ptype = PrimeType(ptype)
    if prime_type(p) is not ptype:
        raise ValueError(f"{p} is not a prime of type {ptype.name}")
    psq = p * p
    residue = partial % psq

    if ptype is PrimeType.ONE_MOD_3:
        u = find_u(p)
        # The identity needs u = 2 (mod 3) when (p-1)/6 is odd.
        if ((p - 1) // 6) % 2:
            u = -u
        c = find_c(p)
        residue = pow(residue, 6, psq)
        a = pow(2, p, psq) - 1
        a = -(u**3) * a + 3 * p * u
        residue = residue * a
        a = p * _inverse(c, psq, "c", p) - c
        residue = residue * a
        a = (pow(3, p, psq) - 1) * _inverse(2, psq, "val", p)
        residue = residue * a
    elif ptype is PrimeType.FIVE_MOD_12:
        a_rep = find_a(p)
        residue = pow(residue, 4, psq)
        residue = residue * (3 * pow(2, p, psq) - 4)
        residue = residue * (2 * a_rep * a_rep - p)
    else:
        residue = residue * residue
        residue = residue * (1 - pow(2, p, psq))

    return (residue + 1) % psq


def classify_quotient(p: int, quotient: int) -> WilsonOutcome:
    """Wrap a Wilson quotient reduced modulo p."""
    if not 0 <= quotient < p:
        raise ValueError(f"quotient must lie in [0, {p}): {quotient}")
    return WilsonOutcome(p, quotient)


def evaluate_prime(p: int) -> WilsonOutcome:
    """Compute the Wilson quotient of the prime p modulo p."""
    ptype = prime_type(p)
    psq = p * p
    partial = factorial_mod(factorial_target(p), psq)
    residue = reconstruct_wilson(p, partial, ptype)
    quotient, remainder = divmod(residue, p)
    if remainder:
        raise ArithmeticError(
            f"Wilson quotient check failed! p: {p} type: {int(ptype)} rem: {remainder}"
        )
    return classify_quotient(p, quotient)