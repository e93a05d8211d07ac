# natcrypto/natural_root.py
# Integer r-th root by bracket halving.

from __future__ import annotations

from .natural import NaturalNumber


def root(n: NaturalNumber, r: int) -> None:
    """
    n <- floor(n ** (1/r)), for r >= 2.
    Keeps low_enough^r <= #n < too_high^r until the bracket closes.
    """
    if r < 2:
        raise ValueError(f"root requires r >= 2, got {r}")
    low_enough = NaturalNumber(0)
    too_high = n.copy()
    too_high.increment()

    gap = too_high.copy()
    gap.subtract(low_enough)
    while gap > 1:
        mid = low_enough.copy()
        mid.add(too_high)
        mid.divide(2)

        power = mid.copy()
        power.power(r)
        if power > n:
            too_high.transfer_from(mid)
        else:
            low_enough.transfer_from(mid)

        gap.copy_from(too_high)
        gap.subtract(low_enough)

    n.transfer_from(low_enough)
