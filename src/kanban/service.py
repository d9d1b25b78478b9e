"""
Authoritative board store.

Every public operation is one read-document, compute-new-document,
write-whole-document cycle against a DocumentStore. Failures raised before
the write leave the persisted document untouched.

Mutating cycles are serialised by a per-service lock, so concurrent requests
handled by one process cannot lose each other's updates. Separate processes
sharing one document are still last-writer-wins: there is no version check
on write.
"""
from __future__ import annotations

import logging
import uuid
from threading import RLock
from typing import Dict, List, Optional

from . import history as history_log
from .errors import InvalidColumnError, NotFoundError, ValidationError
from .models import BoardDocument, HistoryEntry, Task, utc_now_iso
from .moves import apply_move
from .repositories import DocumentStore

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class BoardService:
    """Owns the board document and applies task mutations to it."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._lock = RLock()

    def _require_task(self, board: BoardDocument, task_id: str) -> Task:
        task = board["tasks"].get(task_id)
        if task is None:
            raise NotFoundError()
        return task

    def get_board(self) -> BoardDocument:
        """Return the full board document."""
        return self._store.read()

    def get_history(self) -> List[HistoryEntry]:
        """Return the bounded history, newest first."""
        return list(self._store.read().get("history") or [])

    def create_task(self, title: Optional[str], description: Optional[str] = None) -> Task:
        """
        Create a task at the end of the first column.

        Raises:
            ValidationError if the title is missing or blank.
        """
        clean_title = (title or "").strip()
        if not clean_title:
            raise ValidationError()

        with self._lock:
            board = self._store.read()
            task: Task = {
                "id": str(uuid.uuid4()),
                "title": clean_title,
                "description": description or "",
                "createdAt": utc_now_iso(),
            }
            first_column_id = board["columnOrder"][0]
            first_column = board["columns"][first_column_id]

            board["tasks"][task["id"]] = task
            board["columns"][first_column_id] = {
                **first_column,
                "taskIds": [*first_column["taskIds"], task["id"]],
            }
            board["history"] = history_log.push_history(
                board.get("history") or [], history_log.created_message(clean_title)
            )
            self._store.write(board)

        logger.info("Created task %s in column %s", task["id"], first_column_id)
        return dict(task)  # type: ignore[return-value]

    def update_task(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Task:
        """
        Update title and/or description of a task.

        A blank or omitted title keeps the current one. ``description=None``
        means "not provided"; an empty string clears it.

        Raises:
            NotFoundError if the task does not exist.
        """
        with self._lock:
            board = self._store.read()
            current = self._require_task(board, task_id)

            old_title = current["title"]
            new_title = (title or "").strip() or old_title
            updated: Task = {**current, "title": new_title}
            if description is not None:
                updated["description"] = description

            board["tasks"][task_id] = updated
            board["history"] = history_log.push_history(
                board.get("history") or [], history_log.updated_message(old_title, new_title)
            )
            self._store.write(board)

        logger.info("Updated task %s", task_id)
        return dict(updated)  # type: ignore[return-value]

    def delete_task(self, task_id: str) -> None:
        """
        Delete a task and strip its id from every column.

        Raises:
            NotFoundError if the task does not exist.
        """
        with self._lock:
            board = self._store.read()
            task = self._require_task(board, task_id)

            columns: Dict[str, dict] = {}
            for column_id, column in board["columns"].items():
                columns[column_id] = {
                    **column,
                    "taskIds": [tid for tid in column["taskIds"] if tid != task_id],
                }
            board["columns"] = columns  # type: ignore[assignment]
            del board["tasks"][task_id]
            board["history"] = history_log.push_history(
                board.get("history") or [], history_log.deleted_message(task["title"])
            )
            self._store.write(board)

        logger.info("Deleted task %s", task_id)

    def move_task(
        self,
        task_id: str,
        source_column_id: str,
        dest_column_id: str,
        source_index: int,
        dest_index: int,
    ) -> Dict[str, bool]:
        """
        Move a task within or across columns.

        Only cross-column moves are recorded in history.

        Raises:
            NotFoundError if the task does not exist.
            InvalidColumnError if either column does not exist.
        """
        with self._lock:
            board = self._store.read()
            task = self._require_task(board, task_id)

            source = board["columns"].get(source_column_id)
            dest = board["columns"].get(dest_column_id)
            if source is None or dest is None:
                raise InvalidColumnError()

            board["columns"] = apply_move(
                board["columns"], task_id, source_column_id, dest_column_id, source_index, dest_index
            )
            if source_column_id != dest_column_id:
                board["history"] = history_log.push_history(
                    board.get("history") or [],
                    history_log.moved_message(task["title"], source["title"], dest["title"]),
                )
            self._store.write(board)

        logger.info(
            "Moved task %s from %s[%d] to %s[%d]",
            task_id,
            source_column_id,
            source_index,
            dest_column_id,
            dest_index,
        )
        return {"success": True}
