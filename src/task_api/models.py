from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain record representing a task held by the store.

    Fields:
    - id: Unique integer identifier, assigned by the store and never reused
    - title: Free text, may be empty
    - completed: Boolean completion flag
    """

    id: int
    title: str
    completed: bool
