import os
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

load_dotenv()


class Settings(BaseModel):
    """Application settings loaded from environment: OpenAI API key and vision model, upload and frame limits, model timeout, job retention and rate limits.
    Why available: Single source of configuration so the HTTP layer, model client and job store agree on limits."""
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    vision_model: str = os.getenv("VISION_MODEL", "gpt-4o")
    model_max_tokens: int = int(os.getenv("MODEL_MAX_TOKENS", "16000"))
    model_timeout_seconds: float = float(os.getenv("MODEL_TIMEOUT_SECONDS", "720"))  # 12 minutes
    max_model_frames: int = int(os.getenv("MAX_MODEL_FRAMES", "20"))
    max_upload_frames: int = int(os.getenv("MAX_UPLOAD_FRAMES", "100"))
    max_frame_mb: int = int(os.getenv("MAX_FRAME_MB", "10"))
    job_ttl_hours: float = float(os.getenv("JOB_TTL_HOURS", "24"))
    rate_limit_requests: int = int(os.getenv("RATE_LIMIT_REQUESTS", "10"))
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    app_version: str = os.getenv("APP_VERSION", "2.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    port: int = int(os.getenv("PORT", "3000"))

    @field_validator(
        "model_max_tokens",
        "model_timeout_seconds",
        "max_model_frames",
        "max_upload_frames",
        "max_frame_mb",
        "job_ttl_hours",
        "rate_limit_requests",
        "rate_limit_window_seconds",
    )
    @classmethod
    def must_be_positive(cls, v):
        """Reject zero or negative limits coming from env."""
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @property
    def max_frame_bytes(self) -> int:
        return self.max_frame_mb * 1024 * 1024


settings = Settings()
