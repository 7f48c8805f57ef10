"""
Pytest Configuration and Shared Fixtures

Fixtures:
    - pinned_defaults: Forces en-US / USD / UTC defaults regardless of .env (autouse)
    - failing_formatter: Locale backend that raises on every call
    - recording_formatter: Locale backend that records calls and echoes them
    - now: Fixed reference time for relative time tests
"""

import logging
from datetime import datetime

import pytest
import pytz

from display_formatters.config.settings import Settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


class FailingFormatter:
    """LocaleFormatter stand-in that simulates an unavailable backend."""

    def _fail(self, *args, **kwargs):
        raise RuntimeError("locale backend unavailable")

    format_currency = _fail
    format_number = _fail
    format_percent = _fail
    format_relative = _fail
    ordinal_category = _fail


class RecordingFormatter:
    """LocaleFormatter stand-in that records the arguments it receives."""

    def __init__(self):
        self.calls = []

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        return f"{name}:{args[0]}"

    def format_currency(self, *args, **kwargs):
        return self._record("currency", *args, **kwargs)

    def format_number(self, *args, **kwargs):
        return self._record("number", *args, **kwargs)

    def format_percent(self, *args, **kwargs):
        return self._record("percent", *args, **kwargs)

    def format_relative(self, *args, **kwargs):
        return self._record("relative", *args, **kwargs)

    def ordinal_category(self, *args, **kwargs):
        self.calls.append(("ordinal", args, kwargs))
        return "other"


@pytest.fixture(autouse=True)
def pinned_defaults(monkeypatch):
    monkeypatch.setattr(Settings, "DEFAULT_LOCALE", "en-US")
    monkeypatch.setattr(Settings, "DEFAULT_CURRENCY", "USD")
    monkeypatch.setattr(Settings, "SERVER_TZ", pytz.UTC)


@pytest.fixture
def failing_formatter():
    return FailingFormatter()


@pytest.fixture
def recording_formatter():
    return RecordingFormatter()


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 12, 0, 0, tzinfo=pytz.UTC)
