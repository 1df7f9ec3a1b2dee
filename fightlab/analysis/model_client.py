"""
Model client: one vision round trip per job. Samples frames, sends them with the prompt, classifies
transport failures, pulls a JSON object out of the reply and hands it to the normalizer.
"""
import asyncio
import base64
import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

import openai

from fightlab.core.config import settings
from fightlab.core.openai_client import get_openai_client
from fightlab.guardrails.errors import (
    AnalysisError,
    ApiError,
    BadRequest,
    MalformedResponse,
    ModelTimeout,
    RateLimited,
    ServiceUnavailable,
)
from .normalizer import normalize_report
from .prompt_builder import build_prompt

logger = logging.getLogger(__name__)

FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
FENCE_CLOSE_RE = re.compile(r"\s*```$")


def select_frames(frames: Sequence[bytes], cap: Optional[int] = None) -> List[bytes]:
    """Pick at most `cap` frames at a uniform stride over the whole sequence, keeping temporal order."""
    cap = cap or settings.max_model_frames
    n = len(frames)
    if n <= cap:
        return list(frames)
    return [frames[(i * n) // cap] for i in range(cap)]


def _media_type(data: bytes) -> str:
    if data.startswith(b"\x89PNG"):
        return "image/png"
    if data.startswith(b"GIF8"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _image_part(frame: bytes) -> Dict[str, Any]:
    b64 = base64.b64encode(frame).decode("ascii")
    return {"type": "image_url", "image_url": {"url": f"data:{_media_type(frame)};base64,{b64}"}}


def build_messages(frames: Sequence[bytes], prompt: str) -> List[Dict[str, Any]]:
    content = [_image_part(f) for f in frames]
    content.append({"type": "text", "text": prompt})
    return [{"role": "user", "content": content}]


def classify_error(exc: Exception) -> AnalysisError:
    """Map an OpenAI SDK exception onto the job failure taxonomy."""
    if isinstance(exc, openai.APITimeoutError):
        return ModelTimeout("Model request timed out")
    if isinstance(exc, openai.RateLimitError):
        return RateLimited("Model API rate limit exceeded (429)", status_code=429)
    if isinstance(exc, openai.BadRequestError):
        return BadRequest(f"Model API rejected the request (400): {exc.message}", status_code=400)
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code >= 500:
            return ServiceUnavailable(f"Model API unavailable ({exc.status_code})", status_code=exc.status_code)
        return ApiError(f"Model API error ({exc.status_code}): {exc.message}", status_code=exc.status_code)
    if isinstance(exc, openai.APIConnectionError):
        return ServiceUnavailable("Could not reach the model API")
    return ApiError(f"Model API error: {exc}")


async def request_analysis(
    frames: Sequence[bytes],
    prompt: str,
    client: Any = None,
    timeout: Optional[float] = None,
) -> str:
    """Send frames + prompt and return the raw reply text. The whole round trip is bounded by `timeout`; on expiry the request is cancelled."""
    client = client or get_openai_client()
    timeout = timeout or settings.model_timeout_seconds
    try:
        resp = await asyncio.wait_for(
            client.chat.completions.create(
                model=settings.vision_model,
                max_tokens=settings.model_max_tokens,
                messages=build_messages(frames, prompt),
            ),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        raise ModelTimeout(f"Model request exceeded {timeout:.0f}s and was cancelled") from None
    except openai.OpenAIError as e:
        raise classify_error(e) from e

    if not resp.choices:
        raise MalformedResponse("Model returned no choices")
    return resp.choices[0].message.content or ""


def extract_json(text: str) -> Dict[str, Any]:
    """Parse the model reply as a JSON object. Strips ``` fences, tries a direct parse, then the first '{' to last '}' span.
    Raises MalformedResponse if neither yields an object."""
    cleaned = (text or "").strip()
    cleaned = FENCE_OPEN_RE.sub("", cleaned, count=1)
    cleaned = FENCE_CLOSE_RE.sub("", cleaned, count=1)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.info("direct_json_parse_failed")
        data = None
    if isinstance(data, dict):
        return data

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        try:
            data = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return data

    raise MalformedResponse("Could not extract valid JSON from model response")


async def analyze_frames(
    frames: Sequence[bytes],
    config: Optional[Mapping[str, Any]],
    client: Any = None,
) -> Dict[str, Any]:
    """Run one analysis: sample frames, build the prompt, call the model, extract and normalize the JSON."""
    selected = select_frames(frames)
    prompt = build_prompt(config, frame_count=len(selected))
    logger.info("model_request", extra={"frames_received": len(frames), "frames_sent": len(selected), "model": settings.vision_model})

    text = await request_analysis(selected, prompt, client=client)
    logger.debug("model_reply_preview", extra={"preview": text[:500]})

    data = extract_json(text)
    return normalize_report(data, config)
