"""
Quote of the day, fetched at most once per calendar day.

The fetched quote is cached in the dailyQuote/dailyQuoteDate slots. When the
quote service is unreachable the fallback quote is shown and nothing is
cached, so the next call tries again.
"""
import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import requests

from .slots import SlotBackend, SlotKey

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_URL = "https://api.quotable.io/random"


@dataclass(frozen=True)
class Quote:
    content: str
    author: str

    def to_dict(self) -> dict:
        return {"content": self.content, "author": self.author}


FALLBACK_QUOTE = Quote(
    content="The only way to do great work is to love what you do.",
    author="Steve Jobs",
)


class QuoteOfDay:

    def __init__(self, slots: SlotBackend, url: str = DEFAULT_QUOTE_URL, timeout: float = 5.0):
        self.slots = slots
        self.url = url
        self.timeout = timeout

    def _cached(self, today: str) -> Optional[Quote]:
        if self.slots.get(SlotKey.DAILY_QUOTE_DATE) != today:
            return None
        raw = self.slots.get(SlotKey.DAILY_QUOTE)
        try:
            data = json.loads(raw) if raw else None
            return Quote(content=data["content"], author=data["author"])
        except (json.JSONDecodeError, TypeError, KeyError) as e:
            logger.warning("Cached quote unreadable, refetching: %s", e)
            return None

    def fetch(self) -> Quote:
        """One request to the quote service. Raises on any failure."""
        r = requests.get(self.url, timeout=self.timeout)
        r.raise_for_status()
        data = r.json()
        if not isinstance(data, dict) or not data.get("content"):
            raise ValueError("quote response missing content")
        return Quote(content=data["content"], author=data.get("author") or "Unknown")

    def get(self, today: Optional[date] = None) -> Quote:
        day = (today or date.today()).isoformat()
        cached = self._cached(day)
        if cached:
            return cached
        try:
            quote = self.fetch()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Quote fetch failed, using fallback: %s", e)
            return FALLBACK_QUOTE
        self.slots.set(SlotKey.DAILY_QUOTE, json.dumps(quote.to_dict()))
        self.slots.set(SlotKey.DAILY_QUOTE_DATE, day)
        return quote
