#!/usr/bin/env python3
"""Print upload, model and job limits (from config). Run from repo root: python scripts/print_limits.py"""
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from fightlab.core.config import settings


def main():
    """Print upload limits, model settings, job retention and the /analyze rate limit."""
    print("FightLab limits")
    print("---------------")
    print(f"  MAX_UPLOAD_FRAMES         = {settings.max_upload_frames} (frames accepted per POST /analyze)")
    print(f"  MAX_FRAME_MB              = {settings.max_frame_mb} MB (per uploaded frame)")
    print(f"  MAX_MODEL_FRAMES          = {settings.max_model_frames} (frames sent to the model, evenly sampled)")
    print(f"  VISION_MODEL              = {settings.vision_model}")
    print(f"  MODEL_MAX_TOKENS          = {settings.model_max_tokens}")
    print(f"  MODEL_TIMEOUT_SECONDS     = {settings.model_timeout_seconds:g} s")
    print(f"  JOB_TTL_HOURS             = {settings.job_ttl_hours:g} h (finished jobs kept in memory)")
    print(f"  Rate limit (POST /analyze) = {settings.rate_limit_requests} requests / {settings.rate_limit_window_seconds} s (per client IP)")
    print("")
    print("Env: see .env.example")


if __name__ == "__main__":
    main()
