from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A todo record exactly as it is serialized into the store list.

    Fields:
    - id: creation time in epoch milliseconds, as a string
    - name: who the todo belongs to (trimmed)
    - task: what needs doing (trimmed)
    - done: completion flag
    - createdAt: ISO-8601 UTC creation timestamp, millisecond precision
    """

    id: str
    name: str
    task: str
    done: bool
    createdAt: str
