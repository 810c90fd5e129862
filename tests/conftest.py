"""Shared fixtures for lifeos tests."""

import pytest

from lifeos.config import reset_settings


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Records timers instead of arming them; tests fire them by hand."""

    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire_all(self):
        for timer in self.live:
            timer.cancelled = True
            timer.callback()


class FakeClock:
    """Millisecond clock under test control."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch, tmp_path):
    """Prevent tests from reading real credentials or touching real data."""
    for key in (
        "GOOGLE_AI_API_KEY",
        "ANTHROPIC_API_KEY",
        "GITHUB_PAT",
        "GITHUB_REPO_OWNER",
        "GITHUB_REPO_NAME",
        "AGENT_BRIEFING_URL",
        "AGENT_RESEARCH_URL",
    ):
        monkeypatch.setenv(key, "")
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def clock():
    return FakeClock()
