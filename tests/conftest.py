import os

import pytest
from fastapi.testclient import TestClient

# Default to the memory backend so importing the app never touches the filesystem
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from src.kanban.errors import PersistenceReadError, PersistenceWriteError  # noqa: E402
from src.kanban.main import create_app  # noqa: E402
from src.kanban.repositories import InMemoryDocumentStore  # noqa: E402
from src.kanban.service import BoardService  # noqa: E402


def make_board():
    """Three columns, task-1 in column-1 and task-2 in column-2."""
    return {
        "tasks": {
            "task-1": {
                "id": "task-1",
                "title": "Task 1",
                "description": "Description 1",
                "createdAt": "2024-01-01T00:00:00Z",
            },
            "task-2": {
                "id": "task-2",
                "title": "Task 2",
                "createdAt": "2024-01-02T00:00:00Z",
            },
        },
        "columns": {
            "column-1": {"id": "column-1", "title": "To Do", "taskIds": ["task-1"]},
            "column-2": {"id": "column-2", "title": "In Progress", "taskIds": ["task-2"]},
            "column-3": {"id": "column-3", "title": "Done", "taskIds": []},
        },
        "columnOrder": ["column-1", "column-2", "column-3"],
        "history": [],
    }


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that counts writes and can be told to fail."""

    def __init__(self, board=None):
        super().__init__(board)
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False

    def read(self):
        if self.fail_reads:
            raise PersistenceReadError()
        return super().read()

    def write(self, board):
        if self.fail_writes:
            raise PersistenceWriteError()
        self.writes += 1
        super().write(board)


@pytest.fixture
def board_doc():
    return make_board()


@pytest.fixture
def store(board_doc):
    return RecordingStore(board_doc)


@pytest.fixture
def service(store):
    return BoardService(store)


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))
