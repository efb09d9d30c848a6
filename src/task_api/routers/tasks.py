from __future__ import annotations

import json
import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from pydantic import ValidationError

from ..repositories import TaskStore
from ..schemas import TaskIn, TaskOut

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

TASK_NOT_FOUND = "Task not found"
INVALID_TASK_ID = "Invalid task ID"
INVALID_REQUEST_BODY = "Invalid request body"

# Ids are 64-bit signed integers; anything outside that range is a bad id, not a missing task.
TaskId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1, description="Task identifier")]

# The body is decoded as JSON whatever Content-Type the client sends.
_TASK_BODY_OPENAPI = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": TaskIn.model_json_schema()}},
    }
}


def get_store(request: Request) -> TaskStore:
    """
    Dependency returning the store instance the application was built with.
    """
    return request.app.state.store


async def read_task_payload(request: Request) -> Optional[TaskIn]:
    """
    Decode the request body as a TaskIn, ignoring Content-Type.

    A JSON null body reads the same as {}. Returns None when the body is
    absent, not JSON, or does not fit TaskIn; the handler turns that into a
    400 once the path has been validated.
    """
    raw = await request.body()
    try:
        data = json.loads(raw)
        return TaskIn.model_validate({} if data is None else data)
    except (ValueError, ValidationError) as exc:
        logger.warning("Invalid request body for %s %s: %s", request.method, request.url.path, exc)
        return None


def _require_payload(payload: Optional[TaskIn]) -> TaskIn:
    if payload is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_REQUEST_BODY)
    return payload


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="Return every task as a JSON array. Order is unspecified.",
    responses={
        200: {"description": "List retrieved successfully"},
    },
)
def list_tasks(store: TaskStore = Depends(get_store)) -> List[TaskOut]:
    """
    List all tasks; an empty store yields [].
    """
    return [TaskOut(**t) for t in store.list_all()]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task and return the created resource.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Invalid request body"},
    },
    openapi_extra=_TASK_BODY_OPENAPI,
)
def create_task(
    payload: Optional[TaskIn] = Depends(read_task_payload),
    store: TaskStore = Depends(get_store),
) -> TaskOut:
    """
    Create a new task.
    """
    body = _require_payload(payload)
    created = store.create(body.title_value, body.completed_value)
    return TaskOut(**created)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description=(
        "Update an existing task. 'completed' is always replaced; 'title' is replaced "
        "only when non-empty."
    ),
    responses={
        200: {"description": "Task updated"},
        400: {"description": "Invalid task ID or request body"},
        404: {"description": "Task not found"},
    },
    openapi_extra=_TASK_BODY_OPENAPI,
)
def update_task(
    task_id: TaskId,
    payload: Optional[TaskIn] = Depends(read_task_payload),
    store: TaskStore = Depends(get_store),
) -> TaskOut:
    body = _require_payload(payload)
    updated = store.update(task_id, body.title_value, body.completed_value)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return TaskOut(**updated)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}/done",
    response_model=TaskOut,
    summary="Mark Task Done",
    description="Mark a task as completed. Calling it again leaves the task unchanged.",
    responses={
        200: {"description": "Task marked as done"},
        400: {"description": "Invalid task ID"},
        404: {"description": "Task not found"},
    },
)
def mark_task_done(task_id: TaskId, store: TaskStore = Depends(get_store)) -> TaskOut:
    done = store.mark_done(task_id)
    if done is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return TaskOut(**done)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task by ID. The ID is never handed out again.",
    responses={
        204: {"description": "Task deleted"},
        400: {"description": "Invalid task ID"},
        404: {"description": "Task not found"},
    },
)
def delete_task(task_id: TaskId, store: TaskStore = Depends(get_store)) -> None:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    if not store.delete(task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return None


# Must stay last: only paths the routes above do not match land here,
# e.g. an empty id ("/api/tasks/") or extra segments ("/api/tasks/1/2").
@router.api_route("/{task_path:path}", methods=["PUT", "DELETE"], include_in_schema=False)
def reject_task_path(task_path: str) -> None:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_TASK_ID)
