"""Round counts shared by the prompt builder and the report normalizer."""
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

MINUTES_PER_ROUND = 4  # minutes of footage counted as one round
DEFAULT_ROUNDS = 3
MAX_USER_ROUNDS = 12
MAX_VIDEO_ROUNDS = 12


@dataclass(frozen=True)
class RoundCounts:
    user_rounds: int  # user's upcoming fight, sizes game-plan arrays
    video_rounds: int  # observed in the video, sizes performance arrays
    max_rounds: int
    can_determine: bool


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except (ValueError, OverflowError):
            return None
    return None


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        out = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(out) or math.isinf(out):
        return None
    return out


def derive_max_rounds(duration_seconds: Any) -> Tuple[int, bool]:
    """Return (max_rounds, can_determine) for a video length in seconds, never above MAX_VIDEO_ROUNDS.
    Missing or non-positive durations cannot be judged and allow a single round."""
    seconds = _to_float(duration_seconds)
    if seconds is None or seconds <= 0:
        return 1, False
    minutes = seconds / 60.0
    return max(1, min(math.ceil(minutes / MINUTES_PER_ROUND), MAX_VIDEO_ROUNDS)), True


def clamp_rounds(claimed: Any, max_rounds: int) -> int:
    """Clamp the caller's claimed round count into 1..max_rounds (and never above MAX_VIDEO_ROUNDS)."""
    n = _to_int(claimed)
    if n is None or n <= 0:
        n = DEFAULT_ROUNDS
    return max(1, min(n, max_rounds, MAX_VIDEO_ROUNDS))


def resolve_user_rounds(config: Mapping[str, Any]) -> int:
    n = _to_int(config.get("userFightRounds"))
    if n is None or n <= 0:
        return DEFAULT_ROUNDS
    return min(n, MAX_USER_ROUNDS)


def resolve_round_counts(config: Optional[Mapping[str, Any]]) -> RoundCounts:
    config = config or {}
    max_rounds, can_determine = derive_max_rounds(config.get("videoDuration"))
    return RoundCounts(
        user_rounds=resolve_user_rounds(config),
        video_rounds=clamp_rounds(config.get("videoRounds"), max_rounds),
        max_rounds=max_rounds,
        can_determine=can_determine,
    )
