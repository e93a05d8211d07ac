import sys, time, json, argparse
from natcrypto import (
    NaturalNumber,
    generate_next_likely_prime,
    is_prime1,
    is_prime2,
    is_witness_to_compositeness,
    power_mod,
    random_likely_prime,
    reduce_to_gcd,
    root,
)

def cmd_gcd(args):
    n, m = NaturalNumber(args.n), NaturalNumber(args.m)
    reduce_to_gcd(n, m)
    print(n)
    return 0

def cmd_powmod(args):
    n = NaturalNumber(args.n)
    power_mod(n, NaturalNumber(args.p), NaturalNumber(args.m))
    print(n)
    return 0

def cmd_witness(args):
    res = is_witness_to_compositeness(NaturalNumber(args.w), NaturalNumber(args.n))
    print(f"{args.n}\t{'composite' if res else 'no-proof'}\t{args.w}")
    return 0

def _isprime_one(n: NaturalNumber):
    p2 = is_prime2(n)
    print(f"{n}\t{'prime' if p2 else 'composite'}\t{'prime' if is_prime1(n) else 'composite'}")

def _nextprime_one(n: NaturalNumber):
    start = str(n)
    t0 = time.perf_counter()
    generate_next_likely_prime(n)
    ms = (time.perf_counter() - t0) * 1000
    print(json.dumps({"start": start, "prime": str(n), "ms": round(ms, 3)}), flush=True)

def _each(values, fn):
    """Apply fn to each N from argv, or to each stdin line when argv is empty."""
    rc = 0
    lines = values if values else sys.stdin
    for line in lines:
        line = line.strip()
        if not line: continue
        try:
            n = NaturalNumber(line)
        except ValueError:
            print(f"# skip: {line}", file=sys.stderr); rc |= 1; continue
        fn(n)
    return rc

def cmd_isprime(args):
    return _each(args.N, _isprime_one)

def cmd_nextprime(args):
    return _each(args.N, _nextprime_one)

def cmd_root(args):
    n = NaturalNumber(args.n)
    root(n, args.r)
    print(n)
    return 0

def cmd_randprime(args):
    print(random_likely_prime(args.bits))
    return 0

def build_parser():
    ap = argparse.ArgumentParser(description="natural-number crypto utilities")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("gcd", help="greatest common divisor")
    p.add_argument("n"); p.add_argument("m")
    p.set_defaults(func=cmd_gcd)

    p = sub.add_parser("powmod", help="n^p mod m")
    p.add_argument("n"); p.add_argument("p"); p.add_argument("m")
    p.set_defaults(func=cmd_powmod)

    p = sub.add_parser("witness", help="does w prove n composite")
    p.add_argument("w"); p.add_argument("n")
    p.set_defaults(func=cmd_witness)

    p = sub.add_parser("isprime", help="N\\tis_prime2\\tis_prime1 per number")
    p.add_argument("N", nargs="*", help="optional list of integers (else stdin)")
    p.set_defaults(func=cmd_isprime)

    p = sub.add_parser("nextprime", help="JSON line per number")
    p.add_argument("N", nargs="*", help="optional list of integers (else stdin)")
    p.set_defaults(func=cmd_nextprime)

    p = sub.add_parser("root", help="floor(n^(1/r))")
    p.add_argument("n"); p.add_argument("r", type=int)
    p.set_defaults(func=cmd_root)

    p = sub.add_parser("randprime", help="random likely prime of given bit length")
    p.add_argument("bits", type=int)
    p.set_defaults(func=cmd_randprime)
    return ap

def main(argv=None):
    args = build_parser().parse_args(argv)
    try:
        rc = args.func(args)
    except (ValueError, ZeroDivisionError) as e:
        print(f"error: {e}", file=sys.stderr)
        rc = 2
    raise SystemExit(rc)

if __name__ == "__main__":
    main()
