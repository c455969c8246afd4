from math import isqrt

import pytest

from wilsonsearch.primes import primes_between
from wilsonsearch.representations import MAX_P, find_a, find_c, find_u

_SMALL = primes_between(5, 3000)
_ONE_MOD_FOUR = [p for p in _SMALL if p % 4 == 1]
_ONE_MOD_THREE = [p for p in _SMALL if p % 3 == 1]
_LARGE_ONE_MOD_THREE = 2305843009213693951  # 2^61 - 1


def _is_square(n):
    return n >= 0 and isqrt(n) ** 2 == n


def test_find_a_for_thirteen():
    assert find_a(13) == -3


def test_find_c_for_thirteen():
    assert find_c(13) == -5


@pytest.mark.parametrize("p", _ONE_MOD_FOUR)
def test_find_a_solves_sum_of_two_squares(p):
    a = find_a(p)
    assert a % 4 == 1
    assert _is_square(p - a * a)


@pytest.mark.parametrize("p", _ONE_MOD_THREE)
def test_find_c_solves_form(p):
    c = find_c(p)
    rest = 4 * p - c * c
    assert c % 3 == 1
    assert rest % 27 == 0
    assert _is_square(rest // 27)


@pytest.mark.parametrize("p", _ONE_MOD_THREE)
def test_find_u_solves_form(p):
    u = find_u(p)
    rest = 4 * p - u * u
    assert u % 3 == 1
    assert rest % 3 == 0
    assert _is_square(rest // 3)


def test_large_prime_representations():
    p = _LARGE_ONE_MOD_THREE
    c = find_c(p)
    u = find_u(p)
    assert (4 * p - c * c) % 27 == 0 and _is_square((4 * p - c * c) // 27)
    assert (4 * p - u * u) % 3 == 0 and _is_square((4 * p - u * u) // 3)


def test_find_a_rejects_three_mod_four():
    with pytest.raises(ValueError):
        find_a(7)


def test_find_c_rejects_two_mod_three():
    with pytest.raises(ValueError):
        find_c(11)


def test_find_a_rejects_composite():
    with pytest.raises(ValueError):
        find_a(21)


def test_find_c_rejects_too_large():
    with pytest.raises(ValueError, match="too large"):
        find_c(MAX_P + 1)


def test_find_u_rejects_too_large():
    with pytest.raises(ValueError, match="too large"):
        find_u(MAX_P + 3)