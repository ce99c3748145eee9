from __future__ import annotations

from fastapi import Request

from .service import TodoService


# PUBLIC_INTERFACE
def get_service(request: Request) -> TodoService:
    """Return the TodoService bound to the running application."""
    return request.app.state.todo_service
