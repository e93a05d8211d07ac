"""Tests for GCD, power_mod, Miller–Rabin and the primality oracle."""

import math
import random

import gmpy2
import pytest
from sympy import isprime, nextprime

from natcrypto import (
    NaturalNumber,
    WITNESS_EXACT_BOUND,
    generate_next_likely_prime,
    is_even,
    is_prime1,
    is_prime2,
    is_witness_to_compositeness,
    power_mod,
    random_likely_prime,
    random_number,
    reduce_to_gcd,
)


# ---- reduce_to_gcd ----

def _gcd(a, b):
    n, m = NaturalNumber(a), NaturalNumber(b)
    reduce_to_gcd(n, m)
    assert m.is_zero()
    return n


def test_gcd_0_0():
    assert _gcd(0, 0) == 0


def test_gcd_30_21():
    assert _gcd(30, 21) == 3


def test_gcd_84_18():
    assert _gcd(84, 18) == 6


def test_gcd_with_zero():
    assert _gcd(0, 12) == 12
    assert _gcd(12, 0) == 12


def test_gcd_large():
    p = (1 << 127) - 1
    assert _gcd(p * 1009 * 6, p * 1013 * 10) == p * 2


def test_gcd_matches_math_gcd():
    rng = random.Random(7)
    for _ in range(200):
        a, b = rng.randrange(0, 10**30), rng.randrange(0, 10**30)
        assert _gcd(a, b) == math.gcd(a, b)


# ---- is_even ----

def test_is_even():
    for v, want in [(0, True), (1, False), (100, True), (10**50 + 1, False)]:
        n = NaturalNumber(v)
        assert is_even(n) is want
        assert n == v


# ---- power_mod ----

def _powmod(b, e, m):
    n, p, mm = NaturalNumber(b), NaturalNumber(e), NaturalNumber(m)
    power_mod(n, p, mm)
    assert p == e and mm == m
    return n


def test_power_mod_0_0_2():
    assert _powmod(0, 0, 2) == 1


def test_power_mod_17_18_19():
    assert _powmod(17, 18, 19) == 1


def test_power_mod_3_3_5():
    assert _powmod(3, 3, 5) == 2


def test_power_mod_modulus_one():
    assert _powmod(5, 0, 1) == 0
    assert _powmod(5, 7, 1) == 0


def test_power_mod_zero_base():
    assert _powmod(0, 9, 13) == 0


def test_power_mod_requires_positive_modulus():
    with pytest.raises(ValueError):
        power_mod(NaturalNumber(2), NaturalNumber(3), NaturalNumber(0))


def test_power_mod_matches_pow():
    rng = random.Random(11)
    for _ in range(100):
        b, e, m = rng.randrange(0, 10**40), rng.randrange(0, 10**20), rng.randrange(1, 10**30)
        assert _powmod(b, e, m) == pow(b, e, m)


# ---- is_witness_to_compositeness ----

def _brute_witness(w, n):
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    if pow(w, d, n) == 1:
        return False
    return all(pow(w, (1 << i) * d, n) != n - 1 for i in range(s))


def test_witness_15_4():
    assert is_witness_to_compositeness(NaturalNumber(4), NaturalNumber(15)) is True


def test_non_witness_7_2():
    assert is_witness_to_compositeness(NaturalNumber(2), NaturalNumber(7)) is False


def test_witness_agrees_with_definition():
    for n in range(5, 302, 2):
        for w in range(2, n - 1):
            res = is_witness_to_compositeness(NaturalNumber(w), NaturalNumber(n))
            assert res == _brute_witness(w, n), (w, n)
            if res:
                assert not isprime(n)


def test_witness_leaves_inputs_alone():
    w, n = NaturalNumber(4), NaturalNumber(15)
    is_witness_to_compositeness(w, n)
    assert w == 4 and n == 15


@pytest.mark.parametrize("w,n", [(2, 8), (2, 1), (1, 15), (14, 15), (0, 15), (2, 3)])
def test_witness_preconditions(w, n):
    with pytest.raises(ValueError):
        is_witness_to_compositeness(NaturalNumber(w), NaturalNumber(n))


# ---- is_prime1 / is_prime2 ----

def test_is_prime2_small_cases():
    for v in (2, 3, 5, 7, 11, 97):
        assert is_prime2(NaturalNumber(v))
    for v in (0, 1, 4, 9, 15, 21):
        assert not is_prime2(NaturalNumber(v))


def test_is_prime2_matches_sympy_0_to_10000():
    for k in range(10001):
        assert is_prime2(NaturalNumber(k)) == isprime(k), k


def test_is_prime2_rejects_strong_pseudoprimes():
    # smallest strong pseudoprimes to the first 1, 4, 9 and 12 prime bases
    for v in (2047, 3215031751, 3825123056546413051, 318665857834031151167461):
        assert not is_prime2(NaturalNumber(v))


def test_is_prime2_fooled_at_exact_bound():
    # smallest strong pseudoprime to every base in WITNESSES
    assert not isprime(WITNESS_EXACT_BOUND)
    assert is_prime2(NaturalNumber(WITNESS_EXACT_BOUND))


def test_is_prime2_large_primes():
    assert is_prime2(NaturalNumber((1 << 127) - 1))
    assert is_prime2(NaturalNumber((1 << 521) - 1))
    assert not is_prime2(NaturalNumber(((1 << 127) - 1) * ((1 << 89) - 1)))


def test_is_prime2_idempotent():
    n = NaturalNumber(1000003)
    assert [is_prime2(n) for _ in range(3)] == [True] * 3
    assert n == 1000003


def test_is_prime1_basics():
    for v in (2, 3, 5, 7, 11):
        assert is_prime1(NaturalNumber(v))
    for v in (0, 1, 4, 9, 15, 21):
        assert not is_prime1(NaturalNumber(v))


def test_is_prime1_never_rejects_a_prime():
    for k in range(1000):
        if isprime(k):
            assert is_prime1(NaturalNumber(k))


# ---- generate_next_likely_prime ----

def _next(v):
    n = NaturalNumber(v)
    generate_next_likely_prime(n)
    return n


def test_next_prime_14():
    n = _next(14)
    assert n >= 14 and is_prime2(n)
    assert n == 17


def test_next_prime_small_inputs():
    assert _next(0) == 2
    assert _next(1) == 2
    assert _next(2) == 2
    assert _next(3) == 3
    assert _next(4) == 5


def test_next_prime_keeps_prime():
    assert _next(97) == 97


def test_next_prime_matches_sympy():
    for start in range(0, 3000, 7):
        want = start if isprime(start) else nextprime(start)
        assert _next(start) == want


def test_next_prime_large():
    start = 10**40
    assert _next(start) == nextprime(start)


# ---- random ----

def test_random_number_in_range():
    state = gmpy2.random_state(1)
    bound = NaturalNumber(10)
    seen = set()
    for _ in range(300):
        r = random_number(bound, state)
        assert 0 <= r <= 10
        seen.add(int(r))
    assert seen == set(range(11))


def test_random_number_reproducible():
    a = random_number(NaturalNumber(10**30), gmpy2.random_state(5))
    b = random_number(NaturalNumber(10**30), gmpy2.random_state(5))
    assert a == b


def test_random_likely_prime_bits():
    for bits in (2, 3, 16, 64, 128):
        p = random_likely_prime(bits, gmpy2.random_state(bits))
        assert p.bit_length() == bits
        assert isprime(int(p))


def test_random_likely_prime_rejects_one_bit():
    with pytest.raises(ValueError):
        random_likely_prime(1)


def test_witness_idempotent():
    cases = [(4, 15, True), (2, 7, False), (2, 2047, False), (3, 2047, True)]
    for w, n, want in cases:
        ww, nn = NaturalNumber(w), NaturalNumber(n)
        assert [is_witness_to_compositeness(ww, nn) for _ in range(3)] == [want] * 3
        assert ww == w and nn == n
