import json
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import psutil
from fastapi import (
    FastAPI,
    UploadFile,
    File,
    Form,
    HTTPException,
    Request,
    BackgroundTasks,
)
from fastapi.responses import JSONResponse

from fightlab.core.config import settings
from fightlab.models.schemas import (
    AnalyzeResponse,
    AnalysisStatusResponse,
    HealthResponse,
    PendingReportResponse,
    ServiceInfoResponse,
)

from fightlab.fixtures.loader import example_report
from fightlab.guardrails.errors import ClientInputError, as_http_error, as_http_500
from fightlab.guardrails.rate_limit import SimpleRateLimiter
from fightlab.jobs.store import JobRecord, JobStatus, JobStore
from fightlab.jobs.worker import run_analysis_job
from fightlab.observability.middleware import RequestTimingMiddleware, get_request_id
from fightlab.utils.timefmt import to_iso


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ENDPOINTS = {
    "analyze": "POST /analyze",
    "getAnalysis": "GET /analysis/:id",
    "status": "GET /api/analysis/status/:id",
    "report": "GET /api/analysis/report/:id",
    "test": "GET /test-report",
    "health": "GET /health",
}


# -------------------------
# App setup
# -------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Creates the process-scoped job store and logs the startup banner.
    Why available: The store lives exactly as long as the process, and background tasks receive it explicitly instead of reaching for a global."""
    app.state.job_store = JobStore(ttl_seconds=settings.job_ttl_hours * 3600)
    app.state.started_at = time.monotonic()
    logger.info(
        "FightLab AI Backend v%s online (port=%s model=%s max_frames=%s) endpoints: %s",
        settings.app_version,
        settings.port,
        settings.vision_model,
        settings.max_upload_frames,
        ", ".join(ENDPOINTS.values()),
    )
    yield
    logger.info("FightLab AI Backend shutting down (%d jobs in memory)", len(app.state.job_store))


app = FastAPI(title="FightLab AI Backend", version=settings.app_version, lifespan=lifespan)
app.add_middleware(RequestTimingMiddleware)

rate_limiter = SimpleRateLimiter(
    max_requests=settings.rate_limit_requests,
    window_seconds=settings.rate_limit_window_seconds,
)


def _store(request: Request) -> JobStore:
    return request.app.state.job_store


def _get_job(request: Request, analysis_id: str) -> JobRecord:
    """Looks up a job by id or raises 404 with the {error, message} body the app shows.
    Why available: Shared by the status and both report endpoints."""
    job = _store(request).get(analysis_id)
    if job is None:
        raise HTTPException(
            status_code=404,
            detail={"error": "Analysis not found", "message": f"No analysis found with ID: {analysis_id}"},
        )
    return job


def _parse_config(raw: Optional[str]) -> Dict[str, Any]:
    """Parses the multipart `config` field. Missing or blank means an empty config; anything that is not a JSON object is rejected."""
    if raw is None or not raw.strip():
        return {}
    try:
        config = json.loads(raw)
    except json.JSONDecodeError:
        raise ClientInputError("Invalid config", "config must be a JSON object")
    if not isinstance(config, dict):
        raise ClientInputError("Invalid config", "config must be a JSON object")
    return config


async def _read_frames(frames: List[UploadFile]) -> List[bytes]:
    """Reads every uploaded frame into memory, rejecting any single frame over the per-frame limit with 413."""
    out: List[bytes] = []
    for f in frames:
        data = await f.read()
        if len(data) > settings.max_frame_bytes:
            raise ClientInputError(
                "Frame too large",
                f"{f.filename or 'frame'} exceeds the {settings.max_frame_mb} MB per-frame limit",
                status_code=413,
            )
        out.append(data)
    return out


# -------------------------
# Root
# -------------------------

@app.get("/", response_model=ServiceInfoResponse)
def root():
    """Returns the service banner: name, online status, version and endpoint map.
    Why available: Gives the iOS app and load balancers a simple root endpoint to confirm the API is running."""
    return ServiceInfoResponse(
        message="FightLab AI Backend",
        status="online",
        version=settings.app_version,
        endpoints=ENDPOINTS,
    )


@app.get("/health", response_model=HealthResponse)
def health(request: Request):
    """Returns status, current time, process uptime and resident memory in MB.
    Why available: Standard endpoint for uptime checks; memory shows whether frame buffers are being released."""
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    rss = psutil.Process().memory_info().rss
    return HealthResponse(
        status="healthy",
        timestamp=to_iso(datetime.now(timezone.utc)),
        uptimeSeconds=round(time.monotonic() - started_at, 2),
        memoryMB=round(rss / (1024 * 1024), 2),
    )


# -------------------------
# Test report
# -------------------------

@app.get("/test-report")
def test_report():
    """Returns a hardcoded, fully populated AnalysisReport with fresh timestamps.
    Why available: Lets the iOS client verify it can decode the report format without uploading footage."""
    return example_report()


# -------------------------
# Analyze (async job)
# -------------------------

@app.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: Request,
    background_tasks: BackgroundTasks,
    frames: Optional[List[UploadFile]] = File(None),
    config: Optional[str] = Form(None),
):
    """Accepts frames and a JSON config, creates a Processing job and schedules the model run; returns the job id immediately.
    Why available: The model call takes minutes, so the app submits once and then polls /api/analysis/status/{id}."""
    rate_limiter.check(request)

    try:
        uploads = frames or []
        if not uploads:
            raise ClientInputError("No frames provided", "Please upload at least one frame")
        if len(uploads) > settings.max_upload_frames:
            raise ClientInputError(
                "Too many frames",
                f"Upload at most {settings.max_upload_frames} frames per analysis",
            )

        cfg = _parse_config(config)
        data = await _read_frames(uploads)

        job = _store(request).create(cfg, data)
        logger.info(
            "analysis_submitted",
            extra={
                "job_id": job.id,
                "request_id": get_request_id(request),
                "frames": len(data),
                "analysis_type": cfg.get("analysisType", "single"),
            },
        )
        background_tasks.add_task(run_analysis_job, _store(request), job.id)

        return AnalyzeResponse(
            analysisId=job.id,
            analysisID=job.id,
            status="processing",
            message="Analysis started. Poll /api/analysis/status/:id for progress.",
        )

    except HTTPException:
        raise
    except ClientInputError as e:
        raise as_http_error(e)
    except Exception as e:
        raise as_http_500(e)


# -------------------------
# Status / Report
# -------------------------

@app.get(
    "/api/analysis/status/{analysis_id}",
    response_model=AnalysisStatusResponse,
    response_model_exclude_none=True,
)
def analysis_status(analysis_id: str, request: Request):
    """Returns status (Processing / Completed / Failed), progress 0-100 and a message; failed jobs also carry shouldRefund, refundReason and error.
    Why available: The app polls this while the job runs and uses the refund fields to decide whether to return the user's credit."""
    job = _get_job(request, analysis_id)

    if job.status == JobStatus.COMPLETED:
        return AnalysisStatusResponse(status=job.status.value, progress=job.progress, message="Analysis complete")
    if job.status == JobStatus.FAILED:
        return AnalysisStatusResponse(
            status=job.status.value,
            progress=job.progress,
            message=job.error or "Analysis failed",
            shouldRefund=job.should_refund,
            refundReason=job.refund_reason,
            error=job.error,
        )
    return AnalysisStatusResponse(status=job.status.value, progress=job.progress, message="Analysis in progress")


def _report_or_pending(request: Request, analysis_id: str):
    job = _get_job(request, analysis_id)
    if job.status != JobStatus.COMPLETED:
        pending = PendingReportResponse(status=job.status.value, progress=job.progress)
        return JSONResponse(status_code=202, content=pending.model_dump())
    return job.report


@app.get("/analysis/{analysis_id}")
def get_analysis(analysis_id: str, request: Request):
    """Returns the complete AnalysisReport once Completed; otherwise 202 with status and progress.
    Why available: Primary report fetch used by the app after polling reports Completed."""
    return _report_or_pending(request, analysis_id)


@app.get("/api/analysis/report/{analysis_id}")
def get_analysis_report(analysis_id: str, request: Request):
    """Alias of GET /analysis/{id} for app builds that use the /api prefix."""
    return _report_or_pending(request, analysis_id)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("fightlab.main:app", host="0.0.0.0", port=settings.port)
