from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Dict, List, Optional, TypedDict


# PUBLIC_INTERFACE
class Task(TypedDict, total=False):
    """
    A single work item on the board.

    Fields:
    - id: Opaque unique identifier (UUID4 string, or 'task-1' for the seed task)
    - title: Non-empty title
    - description: Optional free text ('' when not supplied)
    - createdAt: ISO8601 creation timestamp (UTC)
    """

    id: str
    title: str
    description: str
    createdAt: str


# PUBLIC_INTERFACE
class Column(TypedDict):
    """
    A named, ordered list of task references. The order of taskIds is the
    processing order within the column.
    """

    id: str
    title: str
    taskIds: List[str]


# PUBLIC_INTERFACE
class HistoryEntry(TypedDict):
    """A human-readable record of one structural mutation."""

    id: str
    action: str
    timestamp: str


# PUBLIC_INTERFACE
class BoardDocument(TypedDict):
    """
    The complete persisted state of a board.

    Invariants:
    - a task id is referenced by at most one column's taskIds
    - history holds at most 5 entries, newest first
    - columnOrder is a permutation of the keys of columns and never changes
    """

    tasks: Dict[str, Task]
    columns: Dict[str, Column]
    columnOrder: List[str]
    history: List[HistoryEntry]


WELCOME_TASK_ID = "task-1"


def utc_now_iso() -> str:
    """Current time as an ISO8601 string with a UTC offset."""
    return datetime.now(timezone.utc).isoformat()


# PUBLIC_INTERFACE
def initial_board(now: Optional[str] = None) -> BoardDocument:
    """
    Build the seed document written on first run: one welcome task in the
    first column, the other columns empty, and an empty history.
    """
    created = now or utc_now_iso()
    return {
        "tasks": {
            WELCOME_TASK_ID: {
                "id": WELCOME_TASK_ID,
                "title": "Welcome to your Kanban Board!",
                "description": "Drag me to different columns or edit me by clicking!",
                "createdAt": created,
            }
        },
        "columns": {
            "todo": {"id": "todo", "title": "To Do", "taskIds": [WELCOME_TASK_ID]},
            "inprogress": {"id": "inprogress", "title": "In Progress", "taskIds": []},
            "done": {"id": "done", "title": "Done", "taskIds": []},
        },
        "columnOrder": ["todo", "inprogress", "done"],
        "history": [],
    }


def clone_board(board: BoardDocument) -> BoardDocument:
    """Deep copy of a document, so callers can mutate without aliasing."""
    return copy.deepcopy(board)


# PUBLIC_INTERFACE
def visible_task_ids(board: BoardDocument, column_id: str) -> List[str]:
    """
    Return the task ids of a column that resolve to an existing task.

    Dangling ids (present in taskIds but missing from tasks) are skipped
    rather than raising. An unknown column yields an empty list.
    """
    column = board["columns"].get(column_id)
    if column is None:
        return []
    return [tid for tid in column["taskIds"] if tid in board["tasks"]]
