"""
Fixture loader: reads static example payloads from fightlab/fixtures/{name}.yaml.
"""
import copy
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from fightlab.utils.timefmt import to_iso

_FIXTURES_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def _load(name: str) -> Dict[str, Any]:
    path = _FIXTURES_DIR / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Fixture file not found: {path}")
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Fixture {name} must be a mapping, got {type(data).__name__}")
    return data


def load_fixture(name: str) -> Dict[str, Any]:
    """Return a fresh deep copy of the named fixture so callers can mutate it freely."""
    return copy.deepcopy(_load(name))


def example_report(now: Optional[datetime] = None) -> Dict[str, Any]:
    """The static example AnalysisReport served by GET /test-report, with all timestamps set to `now`.
    Why available: Lets the iOS client verify it can decode the full report shape without spending a model call."""
    now = now or datetime.now(timezone.utc)
    stamp = to_iso(now)
    report = load_fixture("test_report")
    report["createdAt"] = stamp
    report["completedAt"] = stamp
    report.setdefault("config", {})["createdAt"] = stamp
    return report
