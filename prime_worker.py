import time

from natcrypto import NaturalNumber, generate_next_likely_prime, WITNESS_EXACT_BOUND

# ---- Public RQ job -----------------------------------------------------------

def next_prime_job(N):
    """
    Next likely prime search, run on the `primes` queue.
    N may be a decimal string (str/bytes) or a non-negative int.
    Returns: dict with start, prime, bits, gap, exact, ms
    Bad input raises so RQ marks the job failed.
    """
    n = NaturalNumber(N)
    start = int(n)
    t0 = time.perf_counter()
    generate_next_likely_prime(n)
    ms = (time.perf_counter() - t0) * 1000
    return {
        "algo": "next_likely_prime (MR fixed bases)",
        "start": str(start),
        "prime": str(n),
        "bits": n.bit_length(),
        "gap": str(int(n) - start),
        # below the bound the fixed bases are a proof, above it a probable prime
        "exact": n < WITNESS_EXACT_BOUND,
        "ms": round(ms, 3),
    }
