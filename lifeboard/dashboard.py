"""
Dashboard summary: counts shown on the landing page cards.
"""
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from .store import EntityStore


@dataclass
class DashboardSummary:
    tasks_total: int = 0
    tasks_completed: int = 0
    upcoming_reminders: int = 0
    notes: int = 0
    journals: int = 0
    bookmarks: int = 0

    @property
    def tasks_remaining(self) -> int:
        return self.tasks_total - self.tasks_completed

    def remaining_label(self) -> str:
        if self.tasks_total > 0 and self.tasks_remaining == 0:
            return "All tasks completed!"
        return f"{self.tasks_remaining} tasks remaining"

    def reminders_label(self) -> str:
        if self.upcoming_reminders == 0:
            return "No upcoming reminders"
        if self.upcoming_reminders == 1:
            return "1 upcoming reminder"
        return f"{self.upcoming_reminders} upcoming reminders"

    def to_dict(self) -> dict:
        data = asdict(self)
        data["tasks_remaining"] = self.tasks_remaining
        data["tasks_label"] = self.remaining_label()
        data["reminders_label"] = self.reminders_label()
        return data


def summarize(store: EntityStore, now: Optional[datetime] = None) -> DashboardSummary:
    tasks = store.tasks.list()
    return DashboardSummary(
        tasks_total=len(tasks),
        tasks_completed=sum(1 for t in tasks if t.completed),
        upcoming_reminders=len(store.reminders.upcoming(now)),
        notes=len(store.notes.list()),
        journals=len(store.journals.list()),
        bookmarks=len(store.bookmarks.list()),
    )
