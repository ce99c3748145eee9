from __future__ import annotations

from typing import List

import structlog
from fastapi import APIRouter, Depends, status

from ..dependencies import get_service
from ..exceptions import ApiError, StoreError
from ..models import TodoEntity
from ..schemas import ErrorOut, SuccessOut, TodoCreate, TodoOut
from ..service import TodoService

log = structlog.get_logger()

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)

_STORE_FAILURE = {500: {"model": ErrorOut, "description": "Store error"}}


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every todo in store order, newest first.",
    responses=_STORE_FAILURE,
)
def list_todos(service: TodoService = Depends(get_service)) -> List[TodoEntity]:
    try:
        return service.list_todos()
    except StoreError as exc:
        log.error("Error fetching todos", error=str(exc))
        raise ApiError(500, "Failed to fetch todos") from exc


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a todo and prepend it to the list. Resets the list expiry.",
    responses={
        400: {"model": ErrorOut, "description": "Name or task missing or blank"},
        **_STORE_FAILURE,
    },
)
def create_todo(payload: TodoCreate, service: TodoService = Depends(get_service)) -> TodoEntity:
    try:
        return service.create_todo(payload.name, payload.task)
    except StoreError as exc:
        log.error("Error adding todo", error=str(exc))
        raise ApiError(500, "Failed to add todo") from exc


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=SuccessOut,
    summary="Toggle Todo",
    description=(
        "Flip the done flag of the todo with this id. Unknown ids are a no-op "
        "and still succeed."
    ),
    responses=_STORE_FAILURE,
)
def toggle_todo(todo_id: str, service: TodoService = Depends(get_service)) -> SuccessOut:
    try:
        service.toggle_todo(todo_id)
    except StoreError as exc:
        log.error("Error updating todo", todo_id=todo_id, error=str(exc))
        raise ApiError(500, "Failed to update todo") from exc
    return SuccessOut()


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    response_model=SuccessOut,
    summary="Delete Todo",
    description="Remove the todo with this id. Unknown ids are a no-op and still succeed.",
    responses=_STORE_FAILURE,
)
def delete_todo(todo_id: str, service: TodoService = Depends(get_service)) -> SuccessOut:
    try:
        service.delete_todo(todo_id)
    except StoreError as exc:
        log.error("Error deleting todo", todo_id=todo_id, error=str(exc))
        raise ApiError(500, "Failed to delete todo") from exc
    return SuccessOut()
