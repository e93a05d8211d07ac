import os, sys, csv, random
from sympy import isprime, nextprime, integer_nthroot, randprime

from natcrypto import (
    NaturalNumber,
    generate_next_likely_prime,
    is_prime2,
    power_mod,
    root,
)

LIMIT = int(os.getenv("ACCURACY_LIMIT", "10000"))

# (n, r, floor(n^(1/r))) reference table
ROOT_CASES = [
    ("0", 2, "0"), ("1", 2, "1"), ("13", 2, "3"), ("1024", 2, "32"), ("189943527", 2, "13782"),
    ("0", 3, "0"), ("1", 3, "1"), ("13", 3, "2"), ("4096", 3, "16"), ("189943527", 3, "574"),
    ("0", 15, "0"), ("1", 15, "1"), ("13", 15, "1"), ("1024", 15, "1"), ("189943527", 15, "3"),
    ("82", 2, "9"), ("82", 3, "4"), ("82", 4, "3"), ("82", 5, "2"), ("82", 15, "1"),
    ("9", 2, "3"), ("27", 3, "3"), ("81", 4, "3"), ("243", 5, "3"), ("143489073", 15, "3"),
    ("2147483647", 2, "46340"), ("2147483648", 2, "46340"),
    ("9223372036854775807", 3, "2097151"), ("9223372036854775808", 3, "2097152"),
    ("618970019642690137449562111", 4, "4987896"),
    ("162259276829213363391578010288127", 5, "2767208"),
    ("170141183460469231731687303715884105727", 6, "2353973"),
]

def row(kind, n, expect, got):
    return {"kind": kind, "n": str(n), "expect": str(expect), "got": str(got), "ok": str(expect) == str(got)}

def check_roots():
    for s, r, want in ROOT_CASES:
        n = NaturalNumber(s)
        root(n, r)
        yield row(f"root/{r}", s, want, n)

def check_primes_small(limit):
    for k in range(limit + 1):
        yield row("is_prime2/range", k, isprime(k), is_prime2(NaturalNumber(k)))

def check_primes_large():
    for digits in [20, 30, 50, 100]:
        lo, hi = 10**(digits-1), 10**digits
        for _ in range(5):
            p = int(randprime(lo, hi))
            yield row(f"is_prime2/prime{digits}", p, True, is_prime2(NaturalNumber(p)))
            c = p * int(randprime(2, 10**6))
            yield row(f"is_prime2/composite{digits}", c, False, is_prime2(NaturalNumber(c)))

def check_next_prime(rng):
    for _ in range(50):
        start = rng.randrange(0, 10**12)
        n = NaturalNumber(start)
        generate_next_likely_prime(n)
        want = start if isprime(start) else nextprime(start)
        yield row("next_prime", start, want, n)

def check_power_mod(rng):
    for _ in range(50):
        b, e, m = rng.randrange(0, 10**40), rng.randrange(0, 10**30), rng.randrange(1, 10**25)
        n = NaturalNumber(b)
        power_mod(n, NaturalNumber(e), NaturalNumber(m))
        yield row("power_mod", f"{b}^{e} mod {m}", pow(b, e, m), n)

def check_root_random(rng):
    for _ in range(50):
        v, r = rng.randrange(0, 10**60), rng.randrange(2, 12)
        n = NaturalNumber(v)
        root(n, r)
        yield row(f"root/{r}", v, integer_nthroot(v, r)[0], n)

def main():
    rng = random.Random(42)
    results = []
    for part in (check_roots(), check_primes_small(LIMIT), check_primes_large(),
                 check_next_prime(rng), check_power_mod(rng), check_root_random(rng)):
        for r in part:
            results.append(r)
            if len(results) % 1000 == 0:
                print(f"[progress] {len(results)} checks", file=sys.stderr, flush=True)

    # Summary
    total = len(results)
    ok = sum(1 for r in results if r["ok"])
    by = {}
    for r in results:
        kind = r["kind"].split("/")[0]
        by.setdefault(kind, [0,0])
        if r["ok"]: by[kind][0]+=1
        else: by[kind][1]+=1

    print("\n=== SUMMARY ===")
    print(f"Total: {total} | PASS: {ok} | FAIL: {total-ok}")
    for k,(p,f) in by.items():
        print(f"  {k:10s}  PASS {p:5d}  FAIL {f:3d}")

    fails = [r for r in results if not r["ok"]]
    if fails:
        fn = "accuracy_failures.csv"
        with open(fn, "w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=list(fails[0].keys()))
            w.writeheader()
            w.writerows(fails)
        print(f"\nWrote details for {len(fails)} failures to {fn}")
        return 1
    print("\nNo failures recorded.")
    return 0

if __name__ == "__main__":
    sys.exit(main())
