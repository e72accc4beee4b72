"""
Cross-entity search: case-insensitive substring match over all collections.

There is no ranking. Results keep collection order. An empty query means
search is inactive and every section is empty.

    Task / Reminder        title
    Note / JournalEntry    title or content
    Bookmark               title, url or any tag
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from .store import EntityStore

PREVIEW_LIMIT = 3


class SearchKind(str, Enum):
    TASKS = "tasks"
    NOTES = "notes"
    BOOKMARKS = "bookmarks"
    REMINDERS = "reminders"
    JOURNALS = "journals"


def _fields(kind: SearchKind, record) -> List[str]:
    if kind in (SearchKind.TASKS, SearchKind.REMINDERS):
        return [record.title]
    if kind in (SearchKind.NOTES, SearchKind.JOURNALS):
        return [record.title, record.content]
    return [record.title, record.url] + list(record.tags)


def matches(kind: SearchKind, record, query: str) -> bool:
    if not query:
        return False
    needle = query.casefold()
    return any(needle in (value or "").casefold() for value in _fields(SearchKind(kind), record))


@dataclass
class SearchResults:
    query: str = ""
    tasks: list = field(default_factory=list)
    notes: list = field(default_factory=list)
    bookmarks: list = field(default_factory=list)
    reminders: list = field(default_factory=list)
    journals: list = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(self.category(kind)) for kind in SearchKind)

    def category(self, kind) -> list:
        """Every match of one kind (single-category view)."""
        return getattr(self, SearchKind(kind).value)

    def preview(self, kind, limit: int = PREVIEW_LIMIT) -> list:
        """First few matches of one kind (all-categories view)."""
        return self.category(kind)[:limit]

    def to_dict(self, preview: bool = False) -> Dict[str, Any]:
        data = {"query": self.query, "total": self.total}
        for kind in SearchKind:
            records = self.preview(kind) if preview else self.category(kind)
            data[kind.value] = [r.to_dict() for r in records]
            data[f"{kind.value}_count"] = len(self.category(kind))
        return data


class SearchIndex:
    """Runs a query against every collection of a store."""

    def __init__(self, store: EntityStore):
        self.store = store

    def _sources(self):
        return {
            SearchKind.TASKS: self.store.tasks,
            SearchKind.NOTES: self.store.notes,
            SearchKind.BOOKMARKS: self.store.bookmarks,
            SearchKind.REMINDERS: self.store.reminders,
            SearchKind.JOURNALS: self.store.journals,
        }

    def search(self, query: str) -> SearchResults:
        results = SearchResults(query=query or "")
        if not query:
            return results
        for kind, source in self._sources().items():
            setattr(results, kind.value, [r for r in source.list() if matches(kind, r, query)])
        return results
