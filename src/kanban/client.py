"""
Client-side board cache.

``BoardApiClient`` is a thin async httpx wrapper over the board API.
``BoardCache`` holds a local copy of the board plus transient UI state
(``loading``, ``error``, ``filter``) and mirrors the server operations.

Create, update and delete wait for the server and then re-fetch the whole
board. Move is the one optimistic path: the local columns are replaced before
the request is sent, kept on success, and discarded by a full re-fetch on
failure. Overlapping moves are not queued; their responses settle in arrival
order.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from .errors import BoardError, NetworkError
from .models import BoardDocument, HistoryEntry, Task, visible_task_ids
from .moves import apply_move, is_noop_move
from .settings import get_settings

logger = logging.getLogger(__name__)

FETCH_FALLBACK = "Failed to fetch board data"
CREATE_FALLBACK = "Failed to create task"
UPDATE_FALLBACK = "Failed to update task"
DELETE_FALLBACK = "Failed to delete task"
MOVE_FALLBACK = "Failed to move task"


def error_message(exc: BaseException, fallback: str) -> str:
    """Display string for a failed operation: the error's message, else ``fallback``."""
    if isinstance(exc, BoardError):
        message = exc.message
    else:
        message = str(exc)
    return message or fallback


# PUBLIC_INTERFACE
class BoardApiClient:
    """Async client for the board API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            base_url: API root, e.g. "http://localhost:5000/api". Defaults to
                KANBAN_API_URL from settings.
            transport: Optional httpx transport (tests pass MockTransport or
                ASGITransport).
            timeout: Request timeout in seconds. None disables timeouts.
        """
        self.base_url = (base_url or get_settings().api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            transport=transport,
            timeout=timeout,
        )

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "BoardApiClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            raise NetworkError(str(e)) from e
        if resp.is_error:
            raise NetworkError(f"HTTP error! status: {resp.status_code}", status_code=resp.status_code)
        return resp

    async def get_board(self) -> BoardDocument:
        resp = await self._request("GET", "/board")
        return resp.json()

    async def get_history(self) -> List[HistoryEntry]:
        resp = await self._request("GET", "/history")
        return resp.json()

    async def create_task(self, title: str, description: Optional[str] = None) -> Task:
        resp = await self._request("POST", "/tasks", json={"title": title, "description": description})
        return resp.json()

    async def update_task(self, task_id: str, title: Optional[str], description: Optional[str] = None) -> Task:
        resp = await self._request(
            "PUT", f"/tasks/{task_id}", json={"title": title, "description": description}
        )
        return resp.json()

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")

    async def move_task(
        self,
        task_id: str,
        source_column_id: str,
        dest_column_id: str,
        source_index: int,
        dest_index: int,
    ) -> Dict[str, Any]:
        resp = await self._request(
            "POST",
            f"/tasks/{task_id}/move",
            json={
                "sourceColumnId": source_column_id,
                "destColumnId": dest_column_id,
                "sourceIndex": source_index,
                "destIndex": dest_index,
            },
        )
        return resp.json()


class MoveState(str, Enum):
    """
    Lifecycle of the most recent optimistic move.

    IDLE -> OPTIMISTICALLY_APPLIED -> CONFIRMED
    IDLE -> OPTIMISTICALLY_APPLIED -> REVERTING -> IDLE
    """

    IDLE = "idle"
    OPTIMISTICALLY_APPLIED = "optimistically_applied"
    CONFIRMED = "confirmed"
    REVERTING = "reverting"


# PUBLIC_INTERFACE
class BoardCache:
    """
    Locally held board state. Construct one per application and pass it to
    whatever needs it.
    """

    def __init__(self, api: BoardApiClient) -> None:
        self.api = api
        self.board_data: Optional[BoardDocument] = None
        self.loading: bool = False
        self.error: Optional[str] = None
        self.filter: str = ""
        self.move_state: MoveState = MoveState.IDLE

    # ---- local setters ----

    def set_filter(self, text: str) -> None:
        self.filter = text

    def clear_error(self) -> None:
        self.error = None

    # ---- remote-backed operations ----

    async def fetch_board(self) -> None:
        """
        Replace the local board with the server's. On failure the previous
        board stays in place and ``error`` is set.
        """
        self.loading = True
        self.error = None
        try:
            data = await self.api.get_board()
        except Exception as e:
            logger.error("Error fetching board: %s", e)
            self.error = error_message(e, FETCH_FALLBACK)
        else:
            self.board_data = data
        finally:
            self.loading = False

    async def create_task(self, title: str, description: Optional[str] = None) -> None:
        try:
            await self.api.create_task(title, description)
        except Exception as e:
            logger.error("Error creating task: %s", e)
            self.error = error_message(e, CREATE_FALLBACK)
            return
        await self.fetch_board()

    async def update_task(self, task_id: str, title: Optional[str], description: Optional[str] = None) -> None:
        try:
            await self.api.update_task(task_id, title, description)
        except Exception as e:
            logger.error("Error updating task: %s", e)
            self.error = error_message(e, UPDATE_FALLBACK)
            return
        await self.fetch_board()

    async def delete_task(self, task_id: str) -> None:
        try:
            await self.api.delete_task(task_id)
        except Exception as e:
            logger.error("Error deleting task: %s", e)
            self.error = error_message(e, DELETE_FALLBACK)
            return
        await self.fetch_board()

    async def move_task(
        self,
        task_id: str,
        source_column_id: str,
        dest_column_id: str,
        source_index: int,
        dest_index: int,
    ) -> None:
        """
        Move a task optimistically.

        The local board is updated before the request is issued. The request
        is sent even when no board is cached. On failure the board is
        re-fetched from the server and ``error`` keeps the move failure
        message unless the re-fetch reported its own error.
        """
        if is_noop_move(source_column_id, dest_column_id, source_index, dest_index):
            logger.debug("Ignoring no-op move of %s", task_id)
            return

        if self.board_data is not None:
            self.apply_optimistic_move(task_id, source_column_id, dest_column_id, source_index, dest_index)

        try:
            await self.api.move_task(task_id, source_column_id, dest_column_id, source_index, dest_index)
        except Exception as e:
            logger.error("Error moving task: %s", e)
            message = error_message(e, MOVE_FALLBACK)
            self.error = message
            await self.revert_move()
            if self.error is None:
                self.error = message
            return
        self.confirm_move()

    # ---- move state machine ----

    def apply_optimistic_move(
        self,
        task_id: str,
        source_column_id: str,
        dest_column_id: str,
        source_index: int,
        dest_index: int,
    ) -> None:
        """
        Install a new board whose columns mapping and two affected columns are
        fresh objects. The previous board, its columns mapping and its column
        objects are left untouched.
        """
        current = self.board_data
        if current is None:
            return
        if source_column_id not in current["columns"] or dest_column_id not in current["columns"]:
            # Unknown locally; the server decides and a failure resyncs.
            return
        new_board: BoardDocument = {  # type: ignore[misc]
            **current,
            "columns": apply_move(
                current["columns"], task_id, source_column_id, dest_column_id, source_index, dest_index
            ),
        }
        self.board_data = new_board
        self.move_state = MoveState.OPTIMISTICALLY_APPLIED

    def confirm_move(self) -> None:
        """Server accepted the move; the local state is kept as-is."""
        self.move_state = MoveState.CONFIRMED

    async def revert_move(self) -> None:
        """Discard the optimistic state by reloading the authoritative board."""
        self.move_state = MoveState.REVERTING
        logger.warning("Move failed, resynchronizing board from server")
        await self.fetch_board()
        self.move_state = MoveState.IDLE

    # ---- reads ----

    def visible_tasks(self, column_id: str) -> List[Task]:
        """
        Tasks of a column in order, skipping dangling ids and narrowed by the
        current filter (case-insensitive match on title or description).
        """
        if self.board_data is None:
            return []
        tasks = [self.board_data["tasks"][tid] for tid in visible_task_ids(self.board_data, column_id)]
        needle = self.filter.strip().lower()
        if not needle:
            return tasks
        return [
            t
            for t in tasks
            if needle in t["title"].lower() or needle in (t.get("description") or "").lower()
        ]
