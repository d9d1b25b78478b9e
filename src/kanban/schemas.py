from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Wire format uses the board document's camelCase keys (createdAt, taskIds, ...)
_wire_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class TaskCreate(BaseModel):
    """
    Schema for creating a new task. A blank title is rejected by the board
    service with a 400, not by request validation.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "Semi-skimmed, two litres",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Task title (required, non-blank)")
    description: Optional[str] = Field(default=None, description="Optional detailed description")


# PUBLIC_INTERFACE
class TaskUpdate(BaseModel):
    """
    Schema for updating an existing task.
    A blank or omitted title keeps the current title. An omitted description
    keeps the current one; an empty string clears it.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy oat milk",
                "description": "",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="New title")
    description: Optional[str] = Field(default=None, description="New description")


# PUBLIC_INTERFACE
class MoveRequest(BaseModel):
    """Schema for moving a task within or across columns."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "sourceColumnId": "todo",
                "destColumnId": "inprogress",
                "sourceIndex": 0,
                "destIndex": 0,
            }
        },
    )

    source_column_id: str = Field(..., description="Column the task is leaving")
    dest_column_id: str = Field(..., description="Column the task is entering")
    source_index: int = Field(..., description="Position of the task in the source column")
    dest_index: int = Field(..., description="Target position in the destination column")


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """Schema returned by the API for a task."""

    model_config = _wire_config

    id: str = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(default="", description="Task description")
    created_at: str = Field(..., description="Creation timestamp (ISO8601)")


class ColumnOut(BaseModel):
    model_config = _wire_config

    id: str
    title: str
    task_ids: List[str] = Field(default_factory=list, description="Ordered task ids")


class HistoryEntryOut(BaseModel):
    model_config = _wire_config

    id: str
    action: str = Field(..., description="Human-readable description of the mutation")
    timestamp: str


# PUBLIC_INTERFACE
class BoardOut(BaseModel):
    """The full board document as served to clients."""

    model_config = _wire_config

    tasks: Dict[str, TaskOut]
    columns: Dict[str, ColumnOut]
    column_order: List[str]
    history: List[HistoryEntryOut] = Field(default_factory=list, description="Newest first, at most 5")


class MoveResult(BaseModel):
    success: bool = True
