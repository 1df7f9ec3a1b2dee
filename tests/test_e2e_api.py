import json

import pytest
from fastapi.testclient import TestClient

from fightlab import main
from fightlab.analysis.normalizer import normalize_report
from fightlab.core.config import settings
from fightlab.guardrails.errors import GENERIC_REFUND_REASON, RateLimited
from fightlab.guardrails.rate_limit import SimpleRateLimiter
from fightlab.jobs import worker

JPEG = b"\xff\xd8\xff\xe0" + b"\x00" * 64

CONFIG = {
    "analysisType": "single",
    "fighter1Name": "Alex Rivera",
    "fighter1Corner": "Red",
    "videoDuration": 720,
    "videoRounds": 3,
    "userFightRounds": 3,
    "userRole": "I'm preparing to fight this opponent",
}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(main, "rate_limiter", SimpleRateLimiter(max_requests=1000, window_seconds=60))
    with TestClient(main.app) as c:
        yield c


def _log(item, title: str, request: dict, response):
    """
    Store logs on the test item so conftest can attach to pytest-html report.
    """
    try:
        body = response.json()
    except ValueError:
        body = response.text
    logs = getattr(item, "_api_logs", [])
    logs.append({"title": title, "request": request, "response": {"status_code": response.status_code, "json": body}})
    item._api_logs = logs


def _submit(client: TestClient, item, n_frames: int = 2, config=CONFIG):
    files = [("frames", (f"frame{i}.jpg", JPEG, "image/jpeg")) for i in range(n_frames)]
    raw = config if isinstance(config, str) else json.dumps(config)
    resp = client.post("/analyze", files=files, data={"config": raw})
    _log(item, "POST /analyze", {"frames": n_frames, "config": raw}, resp)
    return resp


@pytest.fixture
def hold_jobs(monkeypatch):
    """Keep submitted jobs in Processing by scheduling a worker that does nothing."""

    async def idle_worker(store, job_id):
        return None

    monkeypatch.setattr(main, "run_analysis_job", idle_worker)


def test_root_and_health(client: TestClient):
    root = client.get("/").json()
    assert root["message"] == "FightLab AI Backend"
    assert root["status"] == "online"
    assert root["version"] == settings.app_version
    assert root["endpoints"]["analyze"] == "POST /analyze"

    resp = client.get("/health")
    assert resp.status_code == 200
    health = resp.json()
    assert set(health) == {"status", "timestamp", "uptimeSeconds", "memoryMB"}
    assert health["timestamp"].endswith("Z")
    assert health["memoryMB"] > 0
    assert resp.headers["x-request-id"]


def test_request_id_echoed(client: TestClient):
    resp = client.get("/", headers={"x-request-id": "req-123"})
    assert resp.headers["x-request-id"] == "req-123"


def test_zero_frames_rejected(client: TestClient, request):
    resp = client.post("/analyze", data={"config": json.dumps(CONFIG)})
    _log(request.node, "POST /analyze (no frames)", {"config": CONFIG}, resp)

    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "No frames provided"
    assert len(main.app.state.job_store) == 0


def test_too_many_frames_rejected(client: TestClient, request, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_frames", 2)
    resp = _submit(client, request.node, n_frames=3)
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "Too many frames"
    assert len(main.app.state.job_store) == 0


def test_oversize_frame_rejected(client: TestClient, monkeypatch):
    monkeypatch.setattr(settings, "max_frame_mb", 1)
    files = [("frames", ("big.jpg", b"\x00" * (1024 * 1024 + 1), "image/jpeg"))]
    resp = client.post("/analyze", files=files, data={"config": "{}"})
    assert resp.status_code == 413
    assert resp.json()["detail"]["error"] == "Frame too large"


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"just a string"'])
def test_bad_config_rejected(client: TestClient, request, raw):
    resp = _submit(client, request.node, config=raw)
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "Invalid config"


def test_submission_returns_processing_job(client: TestClient, request, hold_jobs):
    resp = _submit(client, request.node)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["status"] == "processing"
    assert data["analysisId"] == data["analysisID"]
    job_id = data["analysisId"]

    status = client.get(f"/api/analysis/status/{job_id}")
    _log(request.node, "GET /api/analysis/status/{id}", {"id": job_id}, status)
    assert status.status_code == 200
    assert status.json() == {"status": "Processing", "progress": 0, "message": "Analysis in progress"}

    for path in (f"/analysis/{job_id}", f"/api/analysis/report/{job_id}"):
        pending = client.get(path)
        assert pending.status_code == 202
        assert pending.json() == {"message": "Analysis not yet complete", "status": "Processing", "progress": 0}


def test_missing_config_treated_as_empty(client: TestClient, hold_jobs):
    files = [("frames", ("frame.jpg", JPEG, "image/jpeg"))]
    resp = client.post("/analyze", files=files)
    assert resp.status_code == 200
    job = main.app.state.job_store.get(resp.json()["analysisId"])
    assert job.config == {}


def test_completed_analysis_flow(client: TestClient, request, monkeypatch):
    received = {}

    async def fake_analyze(frames, config, client=None):
        received["frames"] = len(frames)
        received["config"] = config
        return normalize_report({"executiveSummary": {"summary": "Heavy jab, fades late"}}, config)

    monkeypatch.setattr(worker, "analyze_frames", fake_analyze)

    resp = _submit(client, request.node, n_frames=4)
    assert resp.status_code == 200, resp.text
    job_id = resp.json()["analysisId"]
    assert received == {"frames": 4, "config": CONFIG}

    status = client.get(f"/api/analysis/status/{job_id}")
    _log(request.node, "GET /api/analysis/status/{id}", {"id": job_id}, status)
    assert status.json() == {"status": "Completed", "progress": 100, "message": "Analysis complete"}

    report = client.get(f"/analysis/{job_id}")
    _log(request.node, "GET /analysis/{id}", {"id": job_id}, report)
    assert report.status_code == 200
    body = report.json()
    assert body["id"] == job_id
    assert body["status"] == "Completed"
    assert body["createdAt"].endswith("Z") and body["completedAt"].endswith("Z")
    assert body["config"]["userRole"] == CONFIG["userRole"]
    assert body["config"]["videoURL"] is None
    assert body["executiveSummary"]["summary"] == "Heavy jab, fades late"
    assert len(body["roundByRoundMetrics"]["rounds"]) == 3
    assert client.get(f"/api/analysis/report/{job_id}").json() == body


def test_failed_analysis_reports_refund(client: TestClient, request, monkeypatch):
    async def fake_analyze(frames, config, client=None):
        raise RateLimited("Model API rate limit exceeded (429)", status_code=429)

    monkeypatch.setattr(worker, "analyze_frames", fake_analyze)

    job_id = _submit(client, request.node).json()["analysisId"]
    status = client.get(f"/api/analysis/status/{job_id}")
    _log(request.node, "GET /api/analysis/status/{id}", {"id": job_id}, status)

    body = status.json()
    assert body["status"] == "Failed"
    assert body["shouldRefund"] is True
    assert body["refundReason"] == RateLimited.refund_reason
    assert body["error"] == "Model API rate limit exceeded (429)"
    assert body["message"] == body["error"]

    pending = client.get(f"/analysis/{job_id}")
    assert pending.status_code == 202
    assert pending.json()["status"] == "Failed"


def test_unexpected_worker_error_is_refunded(client: TestClient, request, monkeypatch):
    async def fake_analyze(frames, config, client=None):
        raise KeyError("fighter1Analysis")

    monkeypatch.setattr(worker, "analyze_frames", fake_analyze)

    job_id = _submit(client, request.node).json()["analysisId"]
    body = client.get(f"/api/analysis/status/{job_id}").json()
    assert body["status"] == "Failed"
    assert body["shouldRefund"] is True
    assert body["refundReason"] == GENERIC_REFUND_REASON


def test_unknown_analysis_404(client: TestClient):
    for path in ("/api/analysis/status/nope", "/analysis/nope", "/api/analysis/report/nope"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.json()["detail"] == {"error": "Analysis not found", "message": "No analysis found with ID: nope"}


def test_rate_limit_on_analyze(client: TestClient, request, monkeypatch, hold_jobs):
    monkeypatch.setattr(main, "rate_limiter", SimpleRateLimiter(max_requests=1, window_seconds=60))
    assert _submit(client, request.node).status_code == 200

    resp = _submit(client, request.node)
    assert resp.status_code == 429
    assert int(resp.headers["Retry-After"]) >= 1
    assert resp.json()["detail"]["error"] == "Rate limit exceeded"


def test_test_report(client: TestClient):
    resp = client.get("/test-report")
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "test-123"
    assert body["status"] == "Completed"
    assert body["createdAt"] == body["completedAt"] == body["config"]["createdAt"]
    assert len(body["roundByRoundMetrics"]["rounds"]) == body["config"]["videoRounds"]
    assert body["gamePlan"]["thingsToAvoid"][0]["alternative"]
