import os, time
from datetime import datetime, timezone
from flask import Blueprint, request, jsonify
from redis import Redis
from rq import Queue
from rq.command import send_stop_job_command
from rq.job import Job
from rq.exceptions import NoSuchJobError

from natcrypto import NaturalNumber

prime_bp = Blueprint("prime_bp", __name__)

MAX_JOB_BITS = int(os.getenv("MAX_JOB_BITS", "4096"))
RESULT_FIELDS = ("prime", "gap", "bits", "exact", "ms")

# Redis / RQ
redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
redis_conn = Redis.from_url(redis_url)
primes_q = Queue("primes", connection=redis_conn, default_timeout=60*60*12)  # 12h

# ------------------ helpers ------------------
def _age_secs(dt: datetime | None) -> float | None:
    if not dt:
        return None
    if dt.tzinfo is None:  # rq stores naive UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return max(0.0, time.time() - dt.timestamp())

def _search_view(job: Job) -> dict:
    """Status of one next-prime search; result fields are lifted to the top level."""
    meta = job.meta or {}
    status = job.get_status()
    view = {
        "job_id": job.id,
        "status": status,
        "start": meta.get("start"),
        "start_bits": meta.get("bits"),
        "age_sec": _age_secs(job.enqueued_at),
    }
    if status == "finished":
        res = job.return_value() or {}
        view.update({k: res.get(k) for k in RESULT_FIELDS})
    elif status == "failed":
        lines = (job.exc_info or "").strip().splitlines()
        view["error"] = lines[-1] if lines else None
    return view

def _client_ip() -> str:
    xff = request.headers.get("X-Forwarded-For", "")
    return xff.split(",")[0].strip() if xff else request.remote_addr

def active_search_for(ip: str) -> str | None:
    """Id of the queued or running search owned by ip, if any."""
    ids = list(primes_q.started_job_registry.get_job_ids()) + list(primes_q.get_job_ids())
    for j in Job.fetch_many(ids, connection=redis_conn):
        if j is not None and (j.meta or {}).get("ip") == ip:
            return j.id
    return None

def _parse_start(raw) -> NaturalNumber | None:
    s = str(raw if raw is not None else "").strip()
    # more decimal digits than bits means too many bits
    if not s or len(s) > MAX_JOB_BITS:
        return None
    try:
        return NaturalNumber(s)
    except ValueError:
        return None

# ------------------ API ------------------
@prime_bp.get("/api/health")
def health():
    ok, msg = True, "ok"
    try:
        redis_conn.ping()
    except Exception as e:
        ok, msg = False, f"redis error: {e.__class__.__name__}"
    size = primes_q.count if ok else None
    return jsonify({"ok": ok, "msg": msg, "max_job_bits": MAX_JOB_BITS,
                    "queue": {"name": primes_q.name, "size": size}, "time": int(time.time())})

@prime_bp.get("/api/queue")
def queue_info():
    ids = primes_q.get_job_ids()
    waiting = [j for j in Job.fetch_many(ids[:10], connection=redis_conn) if j is not None]
    return jsonify({"queue": primes_q.name, "size": len(ids),
                    "head": [{"job_id": j.id, "start_bits": (j.meta or {}).get("bits"),
                              "age_sec": _age_secs(j.enqueued_at)} for j in waiting]})

@prime_bp.post("/api/next_prime/submit")
def next_prime_submit():
    data = request.get_json(silent=True) or {}
    n = _parse_start(data.get("N"))
    if n is None:
        return jsonify({"error": f"Provide N as a non-negative integer string of at most {MAX_JOB_BITS} bits."}), 400
    bits = n.bit_length()
    if bits > MAX_JOB_BITS:
        return jsonify({"error": f"Max {MAX_JOB_BITS} bits for queued searches."}), 400

    ip = _client_ip()
    running = active_search_for(ip)
    if running:
        return jsonify({"error": "One active search per IP. Wait or abort it.", "job_id": running}), 429

    start = str(n)
    job = primes_q.enqueue("prime_worker.next_prime_job", start,
                           meta={"start": start, "bits": bits, "ip": ip, "submitted": time.time()})
    ids = primes_q.get_job_ids()
    pos = ids.index(job.id) + 1 if job.id in ids else 1
    note = "Warning: ≥ 2048-bit searches can take minutes." if bits >= 2048 else ""
    return jsonify({"job_id": job.id, "status": job.get_status(), "start_bits": bits,
                    "queue_position": pos, "note": note})

@prime_bp.get("/api/job/<job_id>")
def job_status(job_id):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    return jsonify(_search_view(job))

@prime_bp.post("/api/job/<job_id>/abort")
def job_abort(job_id):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    status = job.get_status()
    if status in ("finished", "failed", "canceled", "stopped"):
        return jsonify({"error": f"search already {status}", "job_id": job_id}), 409
    if status == "started":
        send_stop_job_command(redis_conn, job_id)
    else:
        job.cancel()
    return jsonify({"ok": True, "job_id": job_id, "status": job.get_status(refresh=True)})
