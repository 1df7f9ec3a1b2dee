"""In-memory job store for async analysis: status (Processing / Completed / Failed), progress, report or failure detail."""
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from fightlab.utils.timefmt import ts_to_iso

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"


class JobNotFound(KeyError):
    pass


class InvalidTransition(ValueError):
    """Raised when a job is mutated after reaching Completed or Failed."""


@dataclass
class JobRecord:
    """A single analysis job. `frames` are only held while the model call is pending; `report` and `error` are mutually exclusive and keyed by status.
    Why available: Lets clients poll /api/analysis/status/{id} and fetch /analysis/{id} after POST /analyze returned."""

    id: str
    config: Dict[str, Any]
    created_at: float
    status: JobStatus = JobStatus.PROCESSING
    progress: int = 0
    frames: Optional[List[bytes]] = field(default=None, repr=False)
    report: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    should_refund: Optional[bool] = None
    refund_reason: Optional[str] = None
    completed_at: Optional[float] = None

    @property
    def created_at_iso(self) -> str:
        return ts_to_iso(self.created_at)

    @property
    def is_terminal(self) -> bool:
        return self.status != JobStatus.PROCESSING


class JobStore:
    """Process-scoped job map. Each job has a single writer (its background task); readers are the polling endpoints.
    Terminal jobs older than `ttl_seconds` are reaped; processing jobs are never evicted."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._jobs: Dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def create(self, config: Dict[str, Any], frames: List[bytes]) -> JobRecord:
        self.reap_expired()
        job = JobRecord(id=str(uuid.uuid4()), config=config, created_at=self._clock(), frames=frames)
        with self._lock:
            self._jobs[job.id] = job
        return job

    def get(self, job_id: str) -> Optional[JobRecord]:
        with self._lock:
            return self._jobs.get(job_id)

    def _require(self, job_id: str) -> JobRecord:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound(job_id)
        if job.is_terminal:
            raise InvalidTransition(f"job {job_id} is already {job.status.value}")
        return job

    def advance(self, job_id: str, progress: int) -> None:
        """Raise progress to `progress` (clamped to 0-100); never lowers it."""
        with self._lock:
            job = self._require(job_id)
            job.progress = max(job.progress, min(100, max(0, int(progress))))

    def release_frames(self, job_id: str) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                job.frames = None

    def complete(self, job_id: str, report: Dict[str, Any]) -> None:
        with self._lock:
            job = self._require(job_id)
            job.status = JobStatus.COMPLETED
            job.progress = 100
            job.report = report
            job.error = None
            job.frames = None
            job.completed_at = self._clock()

    def fail(self, job_id: str, error: str, error_kind: str, should_refund: bool, refund_reason: str) -> None:
        with self._lock:
            job = self._require(job_id)
            job.status = JobStatus.FAILED
            job.report = None
            job.error = error
            job.error_kind = error_kind
            job.should_refund = should_refund
            job.refund_reason = refund_reason
            job.frames = None
            job.completed_at = self._clock()

    def reap_expired(self) -> int:
        """Drop terminal jobs that finished more than ttl_seconds ago. Returns the number removed."""
        cutoff = self._clock() - self.ttl_seconds
        with self._lock:
            expired = [
                job_id
                for job_id, job in self._jobs.items()
                if job.is_terminal and job.completed_at is not None and job.completed_at < cutoff
            ]
            for job_id in expired:
                del self._jobs[job_id]
        if expired:
            logger.info("jobs_reaped", extra={"count": len(expired)})
        return len(expired)
