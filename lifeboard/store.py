"""
Entity store: load/save/mutate the five LifeBoard collections.

Every mutation is a read-modify-write of the whole collection:

    records = load(key)  ->  pure transform  ->  save(key, records)

so a crash between steps leaves the previous collection intact. Two writers
racing on the same slot resolve last-writer-wins; the dashboard has a single
writer per store instance.
"""
import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Generic, Iterable, List, Optional, Type, TypeVar

from .schema import (
    Bookmark,
    JournalEntry,
    Mood,
    Note,
    Quadrant,
    Reminder,
    Task,
    ValidationError,
    _str,
    dedupe_tags,
    default_journal_title,
    make_id,
    normalize_url,
    today_iso,
    utc_now,
    validate_bookmark,
    validate_reminder,
    validate_task,
)
from .slots import SlotBackend, SlotKey

logger = logging.getLogger(__name__)

T = TypeVar("T")

RECORD_TYPES = {
    SlotKey.TASKS: Task,
    SlotKey.NOTES: Note,
    SlotKey.BOOKMARKS: Bookmark,
    SlotKey.REMINDERS: Reminder,
    SlotKey.JOURNAL_ENTRIES: JournalEntry,
}


def _rejected(kind: str, err: ValidationError) -> None:
    logger.debug("Rejected %s: %s", kind, err)


class Collection(Generic[T]):
    """Handle on one persisted collection."""

    def __init__(self, store: "EntityStore", key: SlotKey, record_type: Type[T]):
        self.store = store
        self.key = key
        self.record_type = record_type

    def all(self) -> List[T]:
        return self.store.load(self.key, self.record_type)

    def get(self, record_id: str) -> Optional[T]:
        for record in self.all():
            if record.id == record_id:
                return record
        return None

    def replace(self, records: Iterable[T]) -> None:
        self.store.save(self.key, list(records))

    def add(self, record: T) -> T:
        """Insert at the front (newest first)."""
        self.replace([record] + self.all())
        return record

    def update(self, record_id: str, transform: Callable[[T], T]) -> Optional[T]:
        """Replace the record with `transform(record)`. Unknown ids are a no-op."""
        records = self.all()
        for i, record in enumerate(records):
            if record.id == record_id:
                records[i] = transform(record)
                self.replace(records)
                return records[i]
        return None

    def remove(self, record_id: str) -> bool:
        """Delete by id. Returns False (and writes nothing) when the id is unknown."""
        records = self.all()
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return False
        self.replace(kept)
        return True


class EntityStore:
    """Typed access to the persisted collections of one slot backend."""

    def __init__(self, slots: SlotBackend):
        self.slots = slots
        self.tasks = TaskSlice(self)
        self.notes = NoteSlice(self)
        self.bookmarks = BookmarkSlice(self)
        self.reminders = ReminderSlice(self)
        self.journals = JournalSlice(self)

    def _read_rows(self, key: SlotKey) -> Optional[list]:
        """Raw JSON rows for a slot, or None when absent or malformed."""
        raw = self.slots.get(key)
        if raw is None:
            return None
        try:
            rows = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("Slot %s is not valid JSON, treating as empty: %s", key.value, e)
            return None
        if not isinstance(rows, list):
            logger.warning("Slot %s does not hold a list, treating as empty", key.value)
            return None
        return rows

    def exists(self, key: SlotKey) -> bool:
        return self._read_rows(key) is not None

    def load(self, key: SlotKey, record_type: Optional[Type[T]] = None) -> List[T]:
        """Read a collection. Never raises on bad content; returns [] instead."""
        record_type = record_type or RECORD_TYPES[key]
        records = []
        for row in self._read_rows(key) or []:
            if not isinstance(row, dict):
                logger.warning("Skipping non-object row in %s", key.value)
                continue
            records.append(record_type.from_dict(row))
        return records

    def save(self, key: SlotKey, records: Iterable) -> None:
        """Overwrite the whole collection in one slot write."""
        payload = json.dumps([r.to_dict() for r in records], ensure_ascii=False)
        self.slots.set(key, payload)

    def collection(self, key: SlotKey, record_type: Optional[Type[T]] = None) -> Collection[T]:
        return Collection(self, key, record_type or RECORD_TYPES[key])


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Per-kind slices
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class _Slice:
    key: SlotKey

    def __init__(self, store: EntityStore):
        self.store = store
        self.collection = store.collection(self.key)

    def list(self):
        return self.collection.all()

    def get(self, record_id: str):
        return self.collection.get(record_id)

    def delete(self, record_id: str) -> bool:
        return self.collection.remove(record_id)


class TaskSlice(_Slice):
    key = SlotKey.TASKS

    def add(self, title: str, quadrant=None) -> Optional[Task]:
        """Create a task. A quadrant is stored only when the caller gives one."""
        task = Task(id=make_id(), title=_str(title).strip(), quadrant=Quadrant.from_str(quadrant))
        try:
            validate_task(task)
        except ValidationError as e:
            _rejected("task", e)
            return None
        return self.collection.add(task)

    def toggle(self, task_id: str) -> Optional[Task]:
        return self.collection.update(task_id, lambda t: replace(t, completed=not t.completed))

    def rename(self, task_id: str, title: str) -> Optional[Task]:
        title = _str(title).strip()
        if not title:
            _rejected("task rename", ValidationError("title is required"))
            return None
        return self.collection.update(task_id, lambda t: replace(t, title=title))

    def set_quadrant(self, task_id: str, quadrant) -> Optional[Task]:
        parsed = Quadrant.from_str(quadrant)
        if parsed is None:
            _rejected("quadrant", ValidationError(f"unknown quadrant {quadrant!r}"))
            return None
        return self.collection.update(task_id, lambda t: replace(t, quadrant=parsed))


class NoteSlice(_Slice):
    key = SlotKey.NOTES

    def save(self, note: Note) -> Note:
        """Insert a new note or replace an existing one, refreshing updated_at."""
        note = replace(note)
        note.touch()
        if self.collection.update(note.id, lambda _: note) is None:
            self.collection.add(note)
        return note

    def create(self, title: str = "", content: str = "") -> Note:
        return self.save(Note(id=make_id(), title=_str(title), content=_str(content)))

    def edit(self, note_id: str, title: Optional[str] = None, content: Optional[str] = None) -> Optional[Note]:
        def apply(note: Note) -> Note:
            changed = replace(
                note,
                title=_str(title, note.title),
                content=_str(content, note.content),
            )
            changed.touch()
            return changed
        return self.collection.update(note_id, apply)


class BookmarkSlice(_Slice):
    key = SlotKey.BOOKMARKS

    def add(self, title: str, url: str, tags: Iterable[str] = ()) -> Optional[Bookmark]:
        bookmark = Bookmark(
            id=make_id(),
            title=_str(title).strip(),
            url=normalize_url(url) if _str(url).strip() else "",
            tags=dedupe_tags(tags),
            created_at=utc_now(),
        )
        try:
            validate_bookmark(bookmark)
        except ValidationError as e:
            _rejected("bookmark", e)
            return None
        return self.collection.add(bookmark)

    def add_tag(self, bookmark_id: str, tag: str) -> Optional[Bookmark]:
        return self.collection.update(
            bookmark_id, lambda b: replace(b, tags=dedupe_tags(b.tags + [tag]))
        )

    def remove_tag(self, bookmark_id: str, tag: str) -> Optional[Bookmark]:
        return self.collection.update(
            bookmark_id, lambda b: replace(b, tags=[t for t in b.tags if t != tag])
        )


class ReminderSlice(_Slice):
    key = SlotKey.REMINDERS

    def add(self, title: str, date: str, time: str = "") -> Optional[Reminder]:
        reminder = Reminder(
            id=make_id(),
            title=_str(title).strip(),
            date=_str(date).strip(),
            time=_str(time).strip(),
        )
        try:
            validate_reminder(reminder)
        except ValidationError as e:
            _rejected("reminder", e)
            return None
        records = sorted([reminder] + self.collection.all(), key=Reminder.sort_key)
        self.collection.replace(records)
        return reminder

    def toggle(self, reminder_id: str) -> Optional[Reminder]:
        return self.collection.update(reminder_id, lambda r: replace(r, completed=not r.completed))

    def upcoming(self, now: Optional[datetime] = None) -> List[Reminder]:
        """Open reminders that fire strictly after `now`, in collection order."""
        now = now or datetime.now()
        return [
            r for r in self.collection.all()
            if not r.completed and r.fires_at() is not None and r.fires_at() > now
        ]


class JournalSlice(_Slice):
    key = SlotKey.JOURNAL_ENTRIES

    def save(self, entry: JournalEntry) -> JournalEntry:
        if self.collection.update(entry.id, lambda _: entry) is None:
            self.collection.add(entry)
        return entry

    def create(
        self,
        title: Optional[str] = None,
        content: str = "",
        mood="",
        date: Optional[str] = None,
    ) -> JournalEntry:
        day = _str(date) or today_iso()
        title = _str(title)
        entry = JournalEntry(
            id=make_id(),
            title=title if title.strip() else default_journal_title(day),
            content=_str(content),
            mood=Mood.from_str(mood),
            date=day,
        )
        return self.save(entry)

    def edit(self, entry_id: str, title=None, content=None, mood=None, date=None) -> Optional[JournalEntry]:
        def apply(entry: JournalEntry) -> JournalEntry:
            return replace(
                entry,
                title=_str(title, entry.title),
                content=_str(content, entry.content),
                mood=entry.mood if mood is None else Mood.from_str(mood),
                date=_str(date, entry.date),
            )
        return self.collection.update(entry_id, apply)
