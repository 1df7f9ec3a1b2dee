from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, Optional


class ServiceInfoResponse(BaseModel):
    """Response for GET /: service name, liveness and the endpoint map. Why available: Lets the iOS app and probes confirm which backend build they reached."""

    message: str
    status: str
    version: str
    endpoints: Dict[str, str]


class HealthResponse(BaseModel):
    """Response for GET /health. Why available: Liveness probe with uptime and resident memory so hosting dashboards can spot leaks from retained frames."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    timestamp: str
    uptime_seconds: float = Field(..., alias="uptimeSeconds", ge=0)
    memory_mb: float = Field(..., alias="memoryMB", ge=0)


class AnalyzeResponse(BaseModel):
    """Response for POST /analyze. The job id is sent under both spellings the app versions in the field decode."""

    model_config = ConfigDict(populate_by_name=True)

    analysis_id: str = Field(..., alias="analysisId")
    analysis_id_legacy: str = Field(..., alias="analysisID")
    status: str = "processing"
    message: str


class AnalysisStatusResponse(BaseModel):
    """Response for GET /api/analysis/status/{id}. Refund fields are only present once the job has Failed."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(..., description="Processing | Completed | Failed")
    progress: int = Field(..., ge=0, le=100)
    message: str
    should_refund: Optional[bool] = Field(None, alias="shouldRefund")
    refund_reason: Optional[str] = Field(None, alias="refundReason")
    error: Optional[str] = None


class PendingReportResponse(BaseModel):
    """202 body for report endpoints while the job has not Completed."""

    message: str = "Analysis not yet complete"
    status: str
    progress: int = Field(..., ge=0, le=100)
