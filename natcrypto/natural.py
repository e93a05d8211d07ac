# natcrypto/natural.py
# Mutable arbitrary-precision natural number backed by gmpy2.mpz.
# - in-place arithmetic (every mutator returns None)
# - copy / move-transfer between owned values
# - contract violations raise instead of truncating

from __future__ import annotations
import sys

import gmpy2
from gmpy2 import mpz


def _to_mpz(x) -> mpz:
    if isinstance(x, NaturalNumber):
        return x._value
    if isinstance(x, (bytes, bytearray)):
        x = x.decode()
    if isinstance(x, str):
        s = x.strip()
        if not (s.isascii() and s.isdigit()):
            raise ValueError(f"not a natural number: {x!r}")
        return mpz(s)
    if isinstance(x, bool) or not isinstance(x, (int, mpz)):
        raise TypeError(f"cannot make a NaturalNumber from {type(x).__name__}")
    if x < 0:
        raise ValueError(f"natural numbers are non-negative, got {x}")
    return mpz(x)


class NaturalNumber:
    """Owned, mutable, unbounded non-negative integer.

    Accepts a decimal string, a non-negative int or mpz, or another
    NaturalNumber (copied). Compares with NaturalNumber, plain ints and mpz.
    """

    __slots__ = ('_value',)

    def __init__(self, value=0):
        self._value = _to_mpz(value)

    # ---- queries ----

    def is_zero(self) -> bool:
        return self._value == 0

    def compare_to(self, other) -> int:
        o = _to_mpz(other)
        return (self._value > o) - (self._value < o)

    def bit_length(self) -> int:
        return int(self._value.bit_length())

    def to_int(self) -> int:
        """Machine-range integer; raises OverflowError above sys.maxsize."""
        if self._value > sys.maxsize:
            raise OverflowError(f"{self} does not fit in a machine integer")
        return int(self._value)

    def copy(self) -> NaturalNumber:
        return NaturalNumber(self)

    # ---- mutators ----

    def add(self, other) -> None:
        self._value = self._value + _to_mpz(other)

    def subtract(self, other) -> None:
        o = _to_mpz(other)
        if o > self._value:
            raise ValueError(f"subtract would go negative: {self} - {o}")
        self._value = self._value - o

    def multiply(self, other) -> None:
        self._value = self._value * _to_mpz(other)

    def divide(self, other) -> NaturalNumber:
        """Replace self with the quotient; return the remainder as a new value."""
        o = _to_mpz(other)
        if o == 0:
            raise ZeroDivisionError("divide by zero NaturalNumber")
        q, r = gmpy2.f_divmod(self._value, o)
        self._value = q
        return NaturalNumber(r)

    def increment(self) -> None:
        self._value = self._value + 1

    def decrement(self) -> None:
        if self._value == 0:
            raise ValueError("cannot decrement zero")
        self._value = self._value - 1

    def power(self, k: int) -> None:
        if k < 0:
            raise ValueError(f"exponent must be >= 0, got {k}")
        self._value = self._value ** k

    def copy_from(self, other: NaturalNumber) -> None:
        self._value = other._value

    def transfer_from(self, source: NaturalNumber) -> None:
        """Take source's value; source is left at zero."""
        if source is self:
            return
        self._value = source._value
        source._value = mpz(0)

    def set_from_int(self, i: int) -> None:
        self._value = _to_mpz(i)

    def set_from_string(self, s: str) -> None:
        self._value = _to_mpz(s)

    def clear(self) -> None:
        self._value = mpz(0)

    # ---- python protocol ----

    def __eq__(self, other):
        if isinstance(other, (NaturalNumber, int, mpz)):
            return self._value == _mpz_or_int(other)
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, (NaturalNumber, int, mpz)):
            return self._value < _mpz_or_int(other)
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, (NaturalNumber, int, mpz)):
            return self._value <= _mpz_or_int(other)
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, (NaturalNumber, int, mpz)):
            return self._value > _mpz_or_int(other)
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, (NaturalNumber, int, mpz)):
            return self._value >= _mpz_or_int(other)
        return NotImplemented

    __hash__ = None  # mutable

    def __int__(self):
        return int(self._value)

    def __bool__(self):
        return self._value != 0

    def __str__(self):
        return self._value.digits(10)

    def __repr__(self):
        return f"NaturalNumber({self})"


def _mpz_or_int(x):
    # comparisons against negative ints are legal (always greater)
    return x._value if isinstance(x, NaturalNumber) else x
