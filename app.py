import os, time
from flask import Flask, request, jsonify
from werkzeug.exceptions import BadRequest

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
from prime_api import prime_bp

MAX_DIGITS = int(os.getenv("MAX_DIGITS", "2000"))
MAX_RANDOM_BITS = int(os.getenv("MAX_RANDOM_BITS", "2048"))
MAX_ROOT = int(os.getenv("MAX_ROOT", "64"))

app = Flask(__name__)
app.register_blueprint(prime_bp)

ROUTES = {
    "POST /api/gcd": "n, m -> gcd",
    "POST /api/powmod": "n, p, m -> n^p mod m",
    "POST /api/witness": "w, n -> does w prove n composite",
    "POST /api/is_prime": "n -> is_prime1, is_prime2",
    "POST /api/next_prime": "n -> smallest likely prime >= n",
    "POST /api/root": "n, r -> floor(n^(1/r))",
    "POST /api/random_prime": "bits -> random likely prime",
    "POST /api/next_prime/submit": "N -> queued next_prime job",
    "GET /api/job/<id>": "job status / result",
}

# ------------------ helpers ------------------
def _payload() -> dict:
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        raise BadRequest("expected a JSON object")
    return data

def _natural(data: dict, key: str) -> NaturalNumber:
    raw = str(data.get(key, "")).strip()
    if not raw:
        raise BadRequest(f"missing {key}")
    if len(raw) > MAX_DIGITS:
        raise BadRequest(f"{key} longer than {MAX_DIGITS} digits")
    try:
        return NaturalNumber(raw)
    except ValueError:
        raise BadRequest(f"{key} must be a non-negative integer")

def _small_int(data: dict, key: str) -> int:
    try:
        return int(data.get(key))
    except (TypeError, ValueError):
        raise BadRequest(f"{key} must be integer")

# ------------------ API ------------------
@app.get("/")
def index():
    return jsonify(service="natcrypto", routes=ROUTES)

@app.post("/api/gcd")
def api_gcd():
    data = _payload()
    n, m = _natural(data, "n"), _natural(data, "m")
    a, b = str(n), str(m)
    reduce_to_gcd(n, m)
    return jsonify(gcd=str(n), pretty=f"gcd({a}, {b}) = {n}")

@app.post("/api/powmod")
def api_powmod():
    data = _payload()
    n, p, m = _natural(data, "n"), _natural(data, "p"), _natural(data, "m")
    if m.is_zero():
        raise BadRequest("m must be >= 1")
    base = str(n)
    power_mod(n, p, m)
    return jsonify(result=str(n), pretty=f"{base}^{p} mod {m} = {n}")

@app.post("/api/witness")
def api_witness():
    data = _payload()
    w, n = _natural(data, "w"), _natural(data, "n")
    try:
        res = is_witness_to_compositeness(w, n)
    except ValueError as e:
        raise BadRequest(str(e))
    verdict = "composite (proven)" if res else "no proof"
    return jsonify(witness=res, pretty=f"w={w} on n={n}: {verdict}")

@app.post("/api/is_prime")
def api_is_prime():
    n = _natural(_payload(), "n")
    p1, p2 = is_prime1(n), is_prime2(n)
    return jsonify(n=str(n), bits=n.bit_length(), is_prime1=p1, is_prime2=p2,
                   pretty=f"{n}: {'probable prime' if p2 else 'composite'}")

@app.post("/api/next_prime")
def api_next_prime():
    n = _natural(_payload(), "n")
    start = str(n)
    t0 = time.perf_counter()
    generate_next_likely_prime(n)
    ms = (time.perf_counter() - t0) * 1000
    return jsonify(start=start, prime=str(n), ms=round(ms, 3),
                   pretty=f"next likely prime >= {start}: {n}")

@app.post("/api/root")
def api_root():
    data = _payload()
    n, r = _natural(data, "n"), _small_int(data, "r")
    if r < 2:
        raise BadRequest("r must be >= 2")
    # past bit_length the answer is 0 or 1; MAX_ROOT bounds each mid**r
    limit = min(MAX_ROOT, max(2, n.bit_length()))
    if r > limit:
        raise BadRequest(f"r must be <= {limit} for this n")
    original = str(n)
    root(n, r)
    return jsonify(root=str(n), pretty=f"floor({original}^(1/{r})) = {n}")

@app.post("/api/random_prime")
def api_random_prime():
    bits = _small_int(_payload(), "bits")
    if not 2 <= bits <= MAX_RANDOM_BITS:
        raise BadRequest(f"bits must be in 2..{MAX_RANDOM_BITS}")
    p = random_likely_prime(bits)
    return jsonify(prime=str(p), bits=p.bit_length(), pretty=f"{bits}-bit likely prime: {p}")

@app.errorhandler(BadRequest)
def bad_request(e):
    return jsonify(error=e.description), 400

if __name__ == "__main__":
    app.run(os.getenv("HOST", "127.0.0.1"), int(os.getenv("PORT", "8082")), debug=True)
