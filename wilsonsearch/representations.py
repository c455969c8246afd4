"""Representations of primes by the binary quadratic forms the search needs.

* ``find_a``: a with a^2 + b^2 = p and a = 1 (mod 4)
* ``find_c``: c with c^2 + 27 d^2 = 4p and c = 1 (mod 3)
* ``find_u``: u with u^2 + 3 v^2 = 4p and u = 1 (mod 3)
"""

from __future__ import annotations

from math import isqrt

# Largest p for which 4p still fits in an unsigned 64-bit integer.
MAX_P = (2**64 - 1) // 4

_NONRESIDUE_SEARCH_LIMIT = 1 << 16


def _sqrt_mod(n: int, p: int) -> int | None:
    """Return a square root of n modulo the odd prime p, or None."""
    n %= p
    if n == 0:
        return 0
    if pow(n, (p - 1) // 2, p) != 1:
        return None
    if p % 4 == 3:
        r = pow(n, (p + 1) // 4, p)
        return r if r * r % p == n else None
    q, s = p - 1, 0
    while q % 2 == 0:
        q //= 2
        s += 1
    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1
        if z > _NONRESIDUE_SEARCH_LIMIT:
            return None
    m, c, t, r = s, pow(z, q, p), pow(n, q, p), pow(n, (q + 1) // 2, p)
    while t != 1:
        i, t2 = 1, t * t % p
        while t2 != 1:
            t2 = t2 * t2 % p
            i += 1
            if i >= m:
                return None
        b = pow(c, 1 << (m - i - 1), p)
        m, c, t, r = i, b * b % p, t * b * b % p, r * b % p
    return r if r * r % p == n else None


def _cornacchia(d: int, p: int) -> tuple[int, int]:
    """Solve x^2 + d*y^2 = p for a prime p; raise ValueError if impossible."""
    r = _sqrt_mod(-d, p)
    if r is None:
        raise ValueError(f"{p} has no representation x^2 + {d}y^2")
    if 2 * r < p:
        r = p - r
    a, b = p, r
    while b * b > p:
        a, b = b, a % b
    rest = p - b * b
    if rest % d:
        raise ValueError(f"{p} has no representation x^2 + {d}y^2")
    y = isqrt(rest // d)
    if y * y * d != rest:
        raise ValueError(f"{p} has no representation x^2 + {d}y^2")
    return b, y


def _check_prime_argument(p: int, modulus: int, residue: int) -> None:
    if p < 5 or p % 2 == 0:
        raise ValueError(f"p must be an odd prime >= 5: {p}")
    if p % modulus != residue:
        raise ValueError(f"p must be {residue} mod {modulus}: {p}")


def _check_size(p: int) -> None:
    if p > MAX_P:
        raise ValueError(f"P: {p} is too large, the limit is {MAX_P}")


def _normalize_mod3(u: int) -> int:
    return u if u % 3 == 1 else -u


def _forms_of_4p(p: int) -> list[tuple[int, int]]:
    """All representations (u, v), v >= 0, of 4p = u^2 + 3v^2 up to the sign of u."""
    x, y = _cornacchia(3, p)
    candidates = {(2 * x, 2 * y), (x + 3 * y, abs(x - y)), (x - 3 * y, x + y)}
    four_p = 4 * p
    return sorted(
        ((u, v) for u, v in candidates if u * u + 3 * v * v == four_p),
        key=lambda form: form[1],
    )


def find_a(p: int) -> int:
    """Return a with a^2 + b^2 = p and a = 1 (mod 4), for a prime p = 1 (mod 4)."""
    _check_prime_argument(p, 4, 1)
    x, y = _cornacchia(1, p)
    a = x if x % 2 else y
    return a if a % 4 == 1 else -a


def find_c(p: int) -> int:
    """Return c with c^2 + 27d^2 = 4p and c = 1 (mod 3), for a prime p = 1 (mod 3)."""
    _check_size(p)
    _check_prime_argument(p, 3, 1)
    for u, v in _forms_of_4p(p):
        if v % 3 == 0:
            return _normalize_mod3(u)
    raise ValueError(f"no c found for p: {p}")


def find_u(p: int) -> int:
    """Return u with u^2 + 3v^2 = 4p and u = 1 (mod 3), for a prime p = 1 (mod 3)."""
    _check_size(p)
    _check_prime_argument(p, 3, 1)
    forms = _forms_of_4p(p)
    if not forms:
        raise ValueError(f"no u found for p: {p}")
    return _normalize_mod3(forms[0][0])