import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fightlab.analysis.model_client import analyze_frames
from fightlab.analysis.normalizer import normalize_config
from fightlab.guardrails.errors import AnalysisError, refund_for
from fightlab.jobs.store import JobRecord, JobStore
from fightlab.utils.timefmt import to_iso

logger = logging.getLogger(__name__)

PROGRESS_STARTED = 10
PROGRESS_CALLING_MODEL = 30
PROGRESS_MODEL_RETURNED = 90


def build_report(job: JobRecord, analysis: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Assemble the AnalysisReport body: analysis sections plus job id, normalized config and timestamps."""
    now = now or datetime.now(timezone.utc)
    return {
        **analysis,
        "id": job.id,
        "config": normalize_config(job.config, now=now),
        "createdAt": job.created_at_iso,
        "completedAt": to_iso(now),
        "status": "Completed",
    }


async def run_analysis_job(store: JobStore, job_id: str) -> None:
    """Background task: drive one job from Processing to Completed or Failed. Never raises; every failure is recorded on the job with a refund decision.
    Why available: Shared entry point scheduled by POST /analyze after the response has been sent."""
    job = store.get(job_id)
    if job is None:
        logger.warning("job_missing", extra={"job_id": job_id})
        return

    try:
        store.advance(job_id, PROGRESS_STARTED)
        logger.info("analysis_started", extra={"job_id": job_id, "frames": len(job.frames or [])})

        store.advance(job_id, PROGRESS_CALLING_MODEL)
        try:
            analysis = await analyze_frames(job.frames or [], job.config)
        finally:
            store.release_frames(job_id)
        store.advance(job_id, PROGRESS_MODEL_RETURNED)

        store.complete(job_id, build_report(job, analysis))
        logger.info("analysis_completed", extra={"job_id": job_id})
    except Exception as e:
        kind, should_refund, reason = refund_for(e)
        logger.error(
            "analysis_failed",
            exc_info=not isinstance(e, AnalysisError),
            extra={"job_id": job_id, "error_kind": kind, "error": str(e)},
        )
        store.fail(job_id, str(e) or type(e).__name__, kind, should_refund, reason)
