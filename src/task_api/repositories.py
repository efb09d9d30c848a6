from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import Condition, Lock
from typing import Dict, Iterator, List, Optional

from .models import TaskEntity

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Readers-writer lock built on a single condition variable.

    Any number of readers may hold the lock together; a writer holds it alone.
    Once a writer is waiting, new readers queue behind it so a steady stream
    of reads cannot starve mutations.
    """

    def __init__(self) -> None:
        self._cond = Condition(Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


# PUBLIC_INTERFACE
class TaskStore:
    """
    Thread-safe in-memory task store.

    The store is the only component that assigns ids or touches the task
    mapping. Reads (list_all, get, count) share the lock; mutations (create,
    update, mark_done, delete) hold it exclusively. Every record handed out
    is a copy, so callers can never mutate stored state.

    Ids start at 1 and are never reused, even after a delete.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._items: Dict[int, TaskEntity] = {}
        self._next_id = 1

    def create(self, title: str, completed: bool = False) -> TaskEntity:
        """Store a new task under the next id and return a copy of it."""
        with self._lock.write_locked():
            entity: TaskEntity = {
                "id": self._next_id,
                "title": title,
                "completed": completed,
            }
            self._items[entity["id"]] = entity
            self._next_id += 1
            created = entity.copy()
        logger.debug("Created task id=%s", created["id"])
        return created

    def list_all(self) -> List[TaskEntity]:
        """
        Return a snapshot of all tasks. Order is unspecified; an empty store
        yields an empty list.
        """
        with self._lock.read_locked():
            return [t.copy() for t in self._items.values()]

    def get(self, task_id: int) -> Optional[TaskEntity]:
        """Return a copy of a task by id, or None if not found."""
        with self._lock.read_locked():
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._items)

    def update(self, task_id: int, title: str, completed: bool) -> Optional[TaskEntity]:
        """
        Replace the completion flag of an existing task, and its title when
        `title` is non-empty. An empty title means "leave unchanged".
        Return the updated copy, or None if not found.
        """
        with self._lock.write_locked():
            existing = self._items.get(task_id)
            if existing is None:
                return None

            updated = existing.copy()
            if title != "":
                updated["title"] = title
            updated["completed"] = completed
            self._items[task_id] = updated
            result = updated.copy()
        logger.debug("Updated task id=%s", task_id)
        return result

    def mark_done(self, task_id: int) -> Optional[TaskEntity]:
        """Set completed=True on a task (idempotent). Return the copy, or None if not found."""
        with self._lock.write_locked():
            existing = self._items.get(task_id)
            if existing is None:
                return None

            updated = existing.copy()
            updated["completed"] = True
            self._items[task_id] = updated
            result = updated.copy()
        logger.debug("Marked task id=%s as done", task_id)
        return result

    def delete(self, task_id: int) -> bool:
        """Delete a task by id. Return True if deleted, False if not found."""
        with self._lock.write_locked():
            deleted = self._items.pop(task_id, None) is not None
        if deleted:
            logger.debug("Deleted task id=%s", task_id)
        return deleted
