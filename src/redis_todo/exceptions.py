"""Exceptions raised by the todo store and API layers."""

from __future__ import annotations


class TodoError(Exception):
    """Base exception for redis-todo."""


class StoreError(TodoError):
    """The backing store failed to read or write the todo list."""


class StoreConnectionError(StoreError):
    """The backing store could not be reached."""


class ApiError(TodoError):
    """
    An error that is rendered to the client as ``{"error": message}``.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
