import os
import logging

from flask import Flask, render_template, request, jsonify
from dotenv import load_dotenv
from redis import Redis
from rq import Queue
from rq.job import Job
from rq.exceptions import NoSuchJobError

from yt2obsidian.config import Settings, DEFAULT_LANG, SECONDARY_LANG
from yt2obsidian.errors import InvalidReference, NoteError
from yt2obsidian.jobs import process_and_sync

load_dotenv()
logger = logging.getLogger("yt2obsidian.app")
app = Flask(__name__)

# Redis / RQ
redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
redis_conn = Redis.from_url(redis_url)
queue_name = os.getenv("RQ_QUEUE", "yt2obsidian")
q = Queue(queue_name, connection=redis_conn, default_timeout=int(os.getenv("RQ_JOB_TIMEOUT", "3600")))


def _truthy(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


def _payload():
    """Request options from the query string (GET) or a JSON body (POST).

    Returns (options, error); error is a message for a 400 response.
    """
    if request.method == "GET":
        data = request.args
    else:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return None, "Invalid JSON"
    url, lang = data.get("url"), data.get("lang")
    for key, value in (("url", url), ("lang", lang)):
        if value is not None and not isinstance(value, str):
            return None, f"{key} must be a string"
    url = (url or "").strip()
    if not url:
        return None, "url is required"
    return {
        "url": url,
        "lang": (lang or "").strip() or None,
        "skip_summary": _truthy(data.get("skipSummary")),
    }, None


@app.get("/")
def index():
    settings = Settings.from_env()
    languages = list(dict.fromkeys([settings.language, DEFAULT_LANG, SECONDARY_LANG]))
    return render_template("index.html", languages=languages, default_lang=settings.language)


@app.get("/health")
def health():
    return jsonify({"ok": True})


@app.route("/api/transcript", methods=["GET", "POST"])
def transcript():
    payload, error = _payload()
    if error:
        return jsonify({"error": error}), 400

    try:
        result = process_and_sync(payload["url"], lang=payload["lang"], skip_summary=payload["skip_summary"])
    except InvalidReference as e:
        return jsonify({"error": str(e)}), 400
    except NoteError as e:
        logger.error(f"[transcript] Error: {e}")
        return jsonify({"error": str(e)}), 500
    return jsonify(result)


@app.post("/api/jobs")
def enqueue():
    payload, error = _payload()
    if error:
        return jsonify({"error": error}), 400

    job = q.enqueue(
        process_and_sync,
        args=(payload["url"],),
        kwargs={"lang": payload["lang"], "skip_summary": payload["skip_summary"]},
        description=f"YouTube→Obsidian for {payload['url']}",
        result_ttl=int(os.getenv("RQ_RESULT_TTL", "86400")),
        failure_ttl=int(os.getenv("RQ_FAILURE_TTL", "604800")),
    )
    return jsonify({"jobId": job.get_id()}), 202


@app.get("/api/jobs/<job_id>")
def job_status(job_id):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        return jsonify({"error": "Unknown job ID."}), 404

    status = job.get_status(refresh=True)
    body = {"jobId": job_id, "status": str(getattr(status, "value", status))}
    if job.is_finished:
        body["result"] = job.result
    if job.is_failed:
        body["error"] = str(job.exc_info).splitlines()[-1][:1000] if job.exc_info else "Job failed"
    return jsonify(body)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3456")))
