import asyncio
import sys
from pathlib import Path
import json
from types import SimpleNamespace

import pytest

# Ensure repo root is on sys.path so `import fightlab...` works in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def pretty_json(obj) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False, sort_keys=True, default=str)


class FakeCompletions:
    """Stands in for `AsyncOpenAI().chat.completions`: records every create() call and replies with canned text or an exception."""

    def __init__(self, reply: str = "{}", exc: Exception = None, delay: float = 0.0, choices: bool = True):
        self.reply = reply
        self.exc = exc
        self.delay = delay
        self.choices = choices
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        if not self.choices:
            return SimpleNamespace(choices=[])
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.reply))])


class FakeOpenAI:
    def __init__(self, **kwargs):
        self.chat = SimpleNamespace(completions=FakeCompletions(**kwargs))

    @property
    def calls(self):
        return self.chat.completions.calls


@pytest.fixture
def fake_openai():
    """Factory: fake_openai(reply=..., exc=..., delay=...) -> client accepted by the model client functions."""
    return FakeOpenAI


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def single_config():
    return {
        "analysisType": "single",
        "fighter1Name": "Alex Rivera",
        "fighter1Corner": "Red",
        "fighter1Appearance": {"shortsColor": "red", "bodyBuild": "stocky"},
        "videoDuration": 900,
        "videoRounds": 3,
        "userFightRounds": 3,
        "userRole": "I'm preparing to fight this opponent",
    }


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Attach API request/response payloads to the pytest-html report.

    API tests append entries to `item._api_logs`:
      {"title": "POST /analyze", "request": {...}, "response": {"status_code": ..., "json": ...}}
    Nothing is attached when pytest-html is not installed.
    """
    outcome = yield
    rep = outcome.get_result()

    api_logs = getattr(item, "_api_logs", None)
    if rep.when != "call" or not api_logs:
        return

    try:
        from pytest_html import extras as html_extras
    except ImportError:
        return

    extras = getattr(rep, "extras", [])
    for entry in api_logs:
        html = (
            '<div style="font-family: ui-monospace, Menlo, Consolas, monospace;">'
            f'<h4 style="margin:8px 0;">{entry.get("title", "API Call")}</h4>'
            "<details><summary><b>Request</b></summary>"
            f'<pre style="background:#0b1020;color:#cfe3ff;padding:10px;">{pretty_json(entry.get("request", {}))}</pre>'
            "</details>"
            "<details><summary><b>Response</b></summary>"
            f'<pre style="background:#0b1020;color:#cfe3ff;padding:10px;">{pretty_json(entry.get("response", {}))}</pre>'
            "</details></div>"
        )
        extras.append(html_extras.html(html))
    rep.extras = extras
