"""
Tests for dashboard widgets: quote of the day, theme preference, summary counts.
"""
import json
from datetime import date, datetime
from unittest.mock import MagicMock, patch

import pytest
import requests

from lifeboard.dashboard import DashboardSummary, summarize
from lifeboard.preferences import Preferences
from lifeboard.quotes import FALLBACK_QUOTE, Quote, QuoteOfDay
from lifeboard.slots import SlotKey


def _quote_response(payload):
    r = MagicMock()
    r.raise_for_status.return_value = None
    r.json.return_value = payload
    return r


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Quote of the day
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestQuoteOfDay:

    def test_fetch_and_cache(self, slots):
        quotes = QuoteOfDay(slots, url="https://quotes.example.com/random")
        payload = {"content": "Stay hungry.", "author": "Someone"}
        with patch("lifeboard.quotes.requests.get", return_value=_quote_response(payload)) as get:
            quote = quotes.get(today=date(2025, 3, 1))

        assert quote == Quote("Stay hungry.", "Someone")
        get.assert_called_once_with("https://quotes.example.com/random", timeout=5.0)
        assert json.loads(slots.get(SlotKey.DAILY_QUOTE)) == payload
        assert slots.get(SlotKey.DAILY_QUOTE_DATE) == "2025-03-01"

    def test_same_day_uses_cache(self, slots):
        slots.set(SlotKey.DAILY_QUOTE, json.dumps({"content": "Cached", "author": "Me"}))
        slots.set(SlotKey.DAILY_QUOTE_DATE, "2025-03-01")
        with patch("lifeboard.quotes.requests.get") as get:
            assert QuoteOfDay(slots).get(today=date(2025, 3, 1)).content == "Cached"
        get.assert_not_called()

    def test_new_day_refetches(self, slots):
        slots.set(SlotKey.DAILY_QUOTE, json.dumps({"content": "Old", "author": "Me"}))
        slots.set(SlotKey.DAILY_QUOTE_DATE, "2025-02-28")
        payload = {"content": "New", "author": "You"}
        with patch("lifeboard.quotes.requests.get", return_value=_quote_response(payload)):
            assert QuoteOfDay(slots).get(today=date(2025, 3, 1)).content == "New"

    def test_failure_returns_fallback_without_caching(self, slots):
        with patch("lifeboard.quotes.requests.get", side_effect=requests.ConnectionError("offline")):
            assert QuoteOfDay(slots).get(today=date(2025, 3, 1)) == FALLBACK_QUOTE
        assert slots.get(SlotKey.DAILY_QUOTE) is None
        assert slots.get(SlotKey.DAILY_QUOTE_DATE) is None

    def test_bad_payload_returns_fallback(self, slots):
        with patch("lifeboard.quotes.requests.get", return_value=_quote_response({"oops": 1})):
            assert QuoteOfDay(slots).get(today=date(2025, 3, 1)) == FALLBACK_QUOTE

    def test_corrupt_cache_refetches(self, slots):
        slots.set(SlotKey.DAILY_QUOTE, "{nope")
        slots.set(SlotKey.DAILY_QUOTE_DATE, "2025-03-01")
        payload = {"content": "Fresh", "author": "A"}
        with patch("lifeboard.quotes.requests.get", return_value=_quote_response(payload)):
            assert QuoteOfDay(slots).get(today=date(2025, 3, 1)).content == "Fresh"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Theme
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestPreferences:

    def test_defaults_to_host_preference(self, slots):
        prefs = Preferences(slots)
        assert prefs.theme() == "light"
        assert prefs.theme(prefers_dark=True) == "dark"

    def test_stored_theme_wins(self, slots):
        prefs = Preferences(slots)
        prefs.set_theme("light")
        assert prefs.theme(prefers_dark=True) == "light"

    def test_invalid_stored_theme_ignored(self, slots):
        slots.set(SlotKey.THEME, "sepia")
        assert Preferences(slots).theme(prefers_dark=True) == "dark"

    def test_set_invalid_theme_raises(self, slots):
        with pytest.raises(ValueError):
            Preferences(slots).set_theme("blue")

    def test_toggle(self, slots):
        prefs = Preferences(slots)
        assert prefs.toggle_theme(prefers_dark=True) == "light"
        assert prefs.toggle_theme() == "dark"
        assert slots.get(SlotKey.THEME) == "dark"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Dashboard
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_summarize_counts(store):
    done = store.tasks.add("done")
    store.tasks.add("open")
    store.tasks.toggle(done.id)
    store.reminders.add("future", "2025-06-01")
    store.reminders.add("past", "2024-01-01")
    finished = store.reminders.add("future but done", "2025-07-01")
    store.reminders.toggle(finished.id)
    store.notes.create("n")
    store.journals.create(content="j")
    store.bookmarks.add("b", "b.com")

    summary = summarize(store, now=datetime(2025, 1, 1))
    assert summary.tasks_total == 2
    assert summary.tasks_completed == 1
    assert summary.tasks_remaining == 1
    assert summary.upcoming_reminders == 1
    assert (summary.notes, summary.journals, summary.bookmarks) == (1, 1, 1)
    assert summary.to_dict()["tasks_label"] == "1 tasks remaining"


def test_summary_labels():
    assert DashboardSummary(tasks_total=2, tasks_completed=2).remaining_label() == "All tasks completed!"
    assert DashboardSummary().remaining_label() == "0 tasks remaining"
    assert DashboardSummary().reminders_label() == "No upcoming reminders"
    assert DashboardSummary(upcoming_reminders=1).reminders_label() == "1 upcoming reminder"
    assert DashboardSummary(upcoming_reminders=4).reminders_label() == "4 upcoming reminders"
