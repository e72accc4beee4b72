"""
Eisenhower matrix view over the task collection.

Tasks without a quadrant are *shown* as important-urgent but stay untagged in
storage until the user moves them. Only move_task_to_quadrant() writes a
quadrant.

When no local task collection exists yet and a signed-in session is
available, the board seeds the local collection once from the remote task
table.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import requests

from .remote import RemoteError, task_from_remote_row
from .schema import Quadrant, Task
from .slots import SlotKey
from .store import EntityStore

logger = logging.getLogger(__name__)

DEFAULT_QUADRANT = Quadrant.IMPORTANT_URGENT

# Panel caption per quadrant; titles come from Quadrant.label
QUADRANT_ACTIONS = {
    Quadrant.IMPORTANT_URGENT: "DO FIRST",
    Quadrant.IMPORTANT_NOT_URGENT: "SCHEDULE",
    Quadrant.NOT_IMPORTANT_URGENT: "DELEGATE",
    Quadrant.NOT_IMPORTANT_NOT_URGENT: "ELIMINATE",
}

Notifier = Callable[[str, str], None]


@dataclass(frozen=True)
class MatrixTask:
    """A task as displayed on the board: quadrant always set."""
    id: str
    title: str
    completed: bool
    date: str
    quadrant: Quadrant

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "completed": self.completed,
            "date": self.date,
            "quadrant": self.quadrant.value,
        }


def normalize(task: Task) -> MatrixTask:
    """Display form of a task. Does not touch the stored record."""
    return MatrixTask(
        id=task.id,
        title=task.title,
        completed=task.completed,
        date=task.date,
        quadrant=task.quadrant or DEFAULT_QUADRANT,
    )


def group_by_quadrant(tasks: List[MatrixTask]) -> Dict[Quadrant, List[MatrixTask]]:
    groups = {q: [] for q in Quadrant}
    for task in tasks:
        groups[task.quadrant].append(task)
    return groups


def _log_notification(title: str, message: str) -> None:
    logger.warning("%s: %s", title, message)


class QuadrantBoard:
    """Loads, groups and re-tags tasks for the priority matrix."""

    def __init__(
        self,
        store: EntityStore,
        identity=None,
        remote=None,
        notify: Optional[Notifier] = None,
    ):
        self.store = store
        self.identity = identity
        self.remote = remote
        self.notify = notify or _log_notification

    def load(self) -> List[MatrixTask]:
        """Normalized tasks. Never raises; remote failures fall back to []."""
        if self.store.exists(SlotKey.TASKS):
            return [normalize(t) for t in self.store.tasks.list()]

        session = self.identity.get_session() if self.identity else None
        if session is None or self.remote is None:
            return []

        try:
            rows = self.remote.fetch_tasks(session)
        except (RemoteError, requests.RequestException) as e:
            logger.warning("Remote task load failed: %s", e)
            self.notify(
                "Error Loading Tasks",
                "Could not load your tasks. Please try again later.",
            )
            return []

        tasks = [task_from_remote_row(row) for row in rows]
        self.store.tasks.collection.replace(tasks)
        logger.info("Seeded %d tasks from remote source", len(tasks))
        return [normalize(t) for t in tasks]

    def grouped(self) -> Dict[Quadrant, List[MatrixTask]]:
        return group_by_quadrant(self.load())

    def move_task_to_quadrant(self, task_id: str, quadrant) -> None:
        """Re-tag one task. Unknown ids are ignored."""
        self.store.tasks.set_quadrant(task_id, quadrant)

    def toggle_task_completion(self, task_id: str) -> None:
        self.store.tasks.toggle(task_id)

    def delete_task(self, task_id: str) -> None:
        self.store.tasks.delete(task_id)
