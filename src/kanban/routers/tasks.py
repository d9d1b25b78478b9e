from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ..dependencies import get_board_service
from ..schemas import MoveRequest, MoveResult, TaskCreate, TaskOut, TaskUpdate
from ..service import BoardService

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task at the end of the first column and return it.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"description": "Task title is required"},
        500: {"description": "Board data could not be saved"},
    },
)
def create_task(payload: TaskCreate, service: BoardService = Depends(get_board_service)) -> TaskOut:
    """
    Create a new task.
    """
    created = service.create_task(payload.title, payload.description)
    return TaskOut.model_validate(created)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description=(
        "Update the title and/or description of a task. A blank title keeps the current "
        "title; an empty description clears it."
    ),
    responses={
        200: {"description": "Task updated"},
        404: {"description": "Task not found"},
        500: {"description": "Board data could not be saved"},
    },
)
def update_task(
    task_id: str, payload: TaskUpdate, service: BoardService = Depends(get_board_service)
) -> TaskOut:
    updated = service.update_task(task_id, payload.title, payload.description)
    return TaskOut.model_validate(updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    description="Delete a task and remove it from its column.",
    responses={
        204: {"description": "Task deleted"},
        404: {"description": "Task not found"},
        500: {"description": "Board data could not be saved"},
    },
)
def delete_task(task_id: str, service: BoardService = Depends(get_board_service)) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    service.delete_task(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/move",
    response_model=MoveResult,
    summary="Move Task",
    description=(
        "Move a task to a position within its column or in another column. "
        "Only moves between columns are recorded in history."
    ),
    responses={
        200: {"description": "Task moved"},
        400: {"description": "Invalid column"},
        404: {"description": "Task not found"},
        500: {"description": "Board data could not be saved"},
    },
)
def move_task(
    task_id: str, payload: MoveRequest, service: BoardService = Depends(get_board_service)
) -> MoveResult:
    result = service.move_task(
        task_id,
        payload.source_column_id,
        payload.dest_column_id,
        payload.source_index,
        payload.dest_index,
    )
    return MoveResult(**result)
