"""
Record schemas for the five LifeBoard entity kinds.

  Task          title + completion flag, optionally tagged with an Eisenhower quadrant
  Note          free-form title/content with created/updated timestamps
  Bookmark      titled URL with an ordered, de-duplicated tag list
  Reminder      dated (optionally timed) item, kept sorted by when it fires
  JournalEntry  dated entry with an optional mood

Stored JSON uses the camelCase keys the dashboard has always written
(createdAt, updatedAt, journalEntries), so records survive across versions.
"""
import re
import time
import uuid
from dataclasses import dataclass, field
from datetime import date as date_cls, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class ValidationError(Exception):
    """Raised when a record fails its pre-insert validation."""
    pass


class Quadrant(Enum):
    """Eisenhower matrix classification (importance x urgency)."""
    IMPORTANT_URGENT = "important-urgent"
    IMPORTANT_NOT_URGENT = "important-not-urgent"
    NOT_IMPORTANT_URGENT = "not-important-urgent"
    NOT_IMPORTANT_NOT_URGENT = "not-important-not-urgent"

    @classmethod
    def from_str(cls, value: Any) -> Optional["Quadrant"]:
        """Parse a stored quadrant, returning None for missing/unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        return QUADRANT_LABELS[self]


QUADRANT_LABELS = {
    Quadrant.IMPORTANT_URGENT: "Important & Urgent",
    Quadrant.IMPORTANT_NOT_URGENT: "Important & Not Urgent",
    Quadrant.NOT_IMPORTANT_URGENT: "Not Important & Urgent",
    Quadrant.NOT_IMPORTANT_NOT_URGENT: "Not Important & Not Urgent",
}


class Mood(Enum):
    """Closed set of journal moods. Empty string means no mood recorded."""
    NONE = ""
    HAPPY = "happy"
    CALM = "calm"
    PRODUCTIVE = "productive"
    TIRED = "tired"
    SAD = "sad"
    STRESSED = "stressed"
    EXCITED = "excited"

    @classmethod
    def from_str(cls, value: Any) -> "Mood":
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "").lower())
        except (ValueError, AttributeError):
            return cls.NONE


# ── Helpers ──────────────────────────────────────────────────────────────────


def utc_now() -> str:
    """ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def make_id() -> str:
    """Generate a sortable unique record ID (ms-precision timestamp + random hex)."""
    ts = int(time.time() * 1000)
    rand = uuid.uuid4().hex[:8]
    return f"{ts}-{rand}"


def today_iso() -> str:
    return date_cls.today().isoformat()


def format_long_date(day: str) -> str:
    """'2025-03-01' -> 'Saturday, March 1, 2025'. Unparseable input is returned as-is."""
    try:
        d = date_cls.fromisoformat(day[:10])
    except (TypeError, ValueError):
        return day
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Records
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass
class Task:
    """A to-do item. `quadrant` stays None until the user assigns one."""
    id: str
    title: str
    completed: bool = False
    date: str = field(default_factory=utc_now)
    quadrant: Optional[Quadrant] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "date": self.date,
        }
        # Unassigned tasks are stored without the key at all
        if self.quadrant is not None:
            data["quadrant"] = self.quadrant.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data.get("id", "")),
            title=_str(data.get("title")),
            completed=bool(data.get("completed", False)),
            date=_str(data.get("date")),
            quadrant=Quadrant.from_str(data.get("quadrant")),
        )


@dataclass
class Note:
    id: str
    title: str = ""
    content: str = ""
    created_at: str = field(default_factory=utc_now)
    updated_at: str = ""

    def __post_init__(self):
        if not self.updated_at or self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def touch(self) -> None:
        """Refresh updated_at after a content change, never moving it before created_at."""
        self.updated_at = max(utc_now(), self.created_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        return cls(
            id=str(data.get("id", "")),
            title=_str(data.get("title")),
            content=_str(data.get("content")),
            created_at=_str(data.get("createdAt")),
            updated_at=_str(data.get("updatedAt")),
        )


@dataclass
class Bookmark:
    id: str
    title: str
    url: str
    tags: List[str] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now)

    def __post_init__(self):
        self.tags = dedupe_tags(self.tags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "tags": list(self.tags),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        tags = data.get("tags")
        return cls(
            id=str(data.get("id", "")),
            title=_str(data.get("title")),
            url=_str(data.get("url")),
            tags=[t for t in tags if isinstance(t, str)] if isinstance(tags, list) else [],
            created_at=_str(data.get("createdAt")),
        )


@dataclass
class Reminder:
    id: str
    title: str
    date: str
    time: str = ""
    completed: bool = False

    def fires_at(self) -> Optional[datetime]:
        """Combined date+time (missing time = 00:00), or None if unparseable."""
        try:
            when = datetime.fromisoformat(f"{self.date}T{self.time or '00:00'}")
        except ValueError:
            return None
        if when.tzinfo is not None:
            # Offset times compare as local wall-clock time
            when = when.astimezone().replace(tzinfo=None)
        return when

    def sort_key(self) -> tuple:
        # Unparseable reminders sink to the end, keeping their relative order
        when = self.fires_at()
        return (when is None, when or datetime.min)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "time": self.time,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reminder":
        return cls(
            id=str(data.get("id", "")),
            title=_str(data.get("title")),
            date=_str(data.get("date")),
            time=_str(data.get("time")),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class JournalEntry:
    id: str
    title: str = ""
    content: str = ""
    mood: Mood = Mood.NONE
    date: str = field(default_factory=today_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "mood": self.mood.value,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JournalEntry":
        return cls(
            id=str(data.get("id", "")),
            title=_str(data.get("title")),
            content=_str(data.get("content")),
            mood=Mood.from_str(data.get("mood")),
            date=_str(data.get("date")),
        )


def default_journal_title(day: str) -> str:
    return f"Journal Entry — {format_long_date(day)}"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Validation
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

# optional scheme, domain label(s), dot, 2-6 letter TLD, optional path
URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})[/\w .-]*/?$", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Prefix https:// when the input carries no http(s) scheme."""
    url = url.strip()
    if url.lower().startswith("http"):
        return url
    return f"https://{url}"


def dedupe_tags(tags) -> List[str]:
    """Strip tags, drop blanks and keep the first occurrence of each."""
    seen = []
    for tag in tags or []:
        tag = tag.strip() if isinstance(tag, str) else ""
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def _require(value: Optional[str], name: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{name} is required")


def validate_task(task: Task) -> None:
    _require(task.title, "title")


def validate_reminder(reminder: Reminder) -> None:
    _require(reminder.title, "title")
    _require(reminder.date, "date")


def validate_bookmark(bookmark: Bookmark) -> None:
    _require(bookmark.title, "title")
    _require(bookmark.url, "url")
    if not URL_PATTERN.match(bookmark.url.strip()):
        raise ValidationError(f"invalid url: {bookmark.url!r}")
