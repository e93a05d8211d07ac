# natcrypto/crypto_utilities.py
# Number-theory core over NaturalNumber values
# - Euclidean GCD reduction
# - square-and-multiply modular exponentiation
# - Miller–Rabin witness test + fixed-base primality oracle
# - next likely prime / random likely prime

from __future__ import annotations
import random

import gmpy2

from .natural import NaturalNumber

# Witness bases: MR with all of these is exact for n < WITNESS_EXACT_BOUND
WITNESSES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41)
WITNESS_EXACT_BOUND = 3317044064679887385961981

# 2*3*5*...*41, used for one-gcd trial division
_WITNESS_PRIMORIAL = 304250263527210


def _reduce_mod(x: NaturalNumber, m: NaturalNumber) -> None:
    # x <- x mod m
    x.transfer_from(x.divide(m))


# ---------- GCD ----------

def reduce_to_gcd(n: NaturalNumber, m: NaturalNumber) -> None:
    """n <- gcd(n, m), m <- 0. gcd(0, 0) is 0."""
    while not m.is_zero():
        r = n.divide(m)
        n.transfer_from(m)
        m.transfer_from(r)


def is_even(n: NaturalNumber) -> bool:
    """True iff n is even; n is not modified."""
    half = n.copy()
    return half.divide(2).is_zero()


# ---------- modular exponentiation ----------

def power_mod(n: NaturalNumber, p: NaturalNumber, m: NaturalNumber) -> None:
    """
    n <- n^p mod m, by square-and-multiply from the low bit of p.
    p and m are left untouched. Requires m >= 1.
    """
    if m < 1:
        raise ValueError("power_mod requires m >= 1")
    exponent = p.copy()
    base = n.copy()
    _reduce_mod(base, m)
    result = NaturalNumber(1)
    _reduce_mod(result, m)
    while not exponent.is_zero():
        bit = exponent.divide(2)
        if not bit.is_zero():
            result.multiply(base)
            _reduce_mod(result, m)
        if not exponent.is_zero():
            square = base.copy()
            base.multiply(square)
            _reduce_mod(base, m)
    n.transfer_from(result)


# ---------- Miller–Rabin ----------

def is_witness_to_compositeness(w: NaturalNumber, n: NaturalNumber) -> bool:
    """
    One strong Miller–Rabin round: True means w proves n composite.
    Requires n odd, n >= 3 and 2 <= w <= n-2. False proves nothing.
    """
    if n < 3 or is_even(n):
        raise ValueError(f"n must be odd and >= 3, got {n}")
    n_minus_1 = n.copy()
    n_minus_1.decrement()
    if w < 2 or w >= n_minus_1:
        raise ValueError(f"witness must be in [2, {n}-2], got {w}")

    # n-1 = 2^s * d, d odd
    d = n_minus_1.copy()
    s = 0
    while is_even(d):
        d.divide(2)
        s += 1

    x = w.copy()
    power_mod(x, d, n)
    if x == 1 or x == n_minus_1:
        return False
    for _ in range(s - 1):
        square = x.copy()
        x.multiply(square)
        _reduce_mod(x, n)
        if x == n_minus_1:
            return False
    return True


# ---------- primality ----------

def is_prime1(n: NaturalNumber) -> bool:
    """Quick guess from two witnesses (2 and n-2); wrong for some pseudoprimes."""
    if n < 2:
        return False
    if n <= 3:
        return True
    if is_even(n):
        return False
    high = n.copy()
    high.subtract(2)
    return not (is_witness_to_compositeness(NaturalNumber(2), n)
                or is_witness_to_compositeness(high, n))


def is_prime2(n: NaturalNumber) -> bool:
    """
    Fixed-base Miller–Rabin over WITNESSES after gcd trial division.
    Deterministic; exact below WITNESS_EXACT_BOUND, probable prime above it.
    """
    if n < 2:
        return False
    for p in WITNESSES:
        if n == p:
            return True
    if is_even(n):
        return False
    g = n.copy()
    reduce_to_gcd(g, NaturalNumber(_WITNESS_PRIMORIAL))
    if g != 1:
        return False
    # n > 41 here, so every base already lies in [2, n-2]
    for p in WITNESSES:
        if is_witness_to_compositeness(NaturalNumber(p), n):
            return False
    return True


def generate_next_likely_prime(n: NaturalNumber) -> None:
    """n <- smallest value >= n accepted by is_prime2."""
    if n <= 2:
        n.set_from_int(2)
        return
    if is_even(n):
        n.increment()
    while not is_prime2(n):
        n.add(2)


# ---------- randomness ----------

def _fresh_state():
    return gmpy2.random_state(random.getrandbits(64))


def random_number(n: NaturalNumber, state=None) -> NaturalNumber:
    """Uniform value in [0, n]. Pass a seeded gmpy2.random_state to reproduce."""
    if state is None:
        state = _fresh_state()
    bound = n.copy()
    bound.increment()
    return NaturalNumber(gmpy2.mpz_random(state, int(bound)))


def random_likely_prime(bits: int, state=None) -> NaturalNumber:
    """A probable prime with exactly `bits` bits."""
    if bits < 2:
        raise ValueError("bits must be >=2")
    if state is None:
        state = _fresh_state()
    while True:
        c = NaturalNumber(gmpy2.mpz_urandomb(state, bits) | (1 << (bits - 1)) | 1)
        generate_next_likely_prime(c)
        if c.bit_length() == bits:
            return c
