import random

import pytest

from src.kanban.errors import (
    InvalidColumnError,
    NotFoundError,
    PersistenceReadError,
    PersistenceWriteError,
    ValidationError,
)
from src.kanban.repositories import InMemoryDocumentStore
from src.kanban.service import BoardService

from conftest import RecordingStore, make_board


def assert_membership(board):
    """Every task id is referenced by at most one column, and only once."""
    seen = []
    for column in board["columns"].values():
        seen.extend(column["taskIds"])
    assert len(seen) == len(set(seen))


class TestCreateTask:
    def test_appends_to_first_column_and_logs(self, service):
        task = service.create_task("Write report", "Quarterly numbers")

        board = service.get_board()
        assert board["tasks"][task["id"]]["title"] == "Write report"
        assert board["tasks"][task["id"]]["description"] == "Quarterly numbers"
        assert board["columns"]["column-1"]["taskIds"] == ["task-1", task["id"]]
        assert board["history"][0]["action"] == 'Created task: "Write report"'
        assert "createdAt" in task

    def test_first_column_follows_column_order(self, board_doc):
        board_doc["columnOrder"] = ["column-3", "column-1", "column-2"]
        service = BoardService(InMemoryDocumentStore(board_doc))

        task = service.create_task("Late arrival")

        assert service.get_board()["columns"]["column-3"]["taskIds"] == [task["id"]]

    def test_missing_description_defaults_to_empty(self, service):
        task = service.create_task("No details")
        assert task["description"] == ""

    def test_title_is_trimmed(self, service):
        task = service.create_task("  Padded  ")
        assert task["title"] == "Padded"

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_rejected_without_mutation(self, service, store, title):
        before = service.get_board()

        with pytest.raises(ValidationError):
            service.create_task(title)

        assert service.get_board() == before
        assert store.writes == 0


class TestUpdateTask:
    def test_updates_title_and_description(self, service):
        task = service.update_task("task-1", "Renamed", "New text")

        assert task["title"] == "Renamed"
        assert task["description"] == "New text"
        board = service.get_board()
        assert board["tasks"]["task-1"]["title"] == "Renamed"
        assert board["history"][0]["action"] == 'Updated task: "Task 1" → "Renamed"'

    def test_blank_title_keeps_existing(self, service):
        task = service.update_task("task-1", "  ", "Only description")
        assert task["title"] == "Task 1"
        assert task["description"] == "Only description"
        assert service.get_history()[0]["action"] == 'Updated task: "Task 1" → "Task 1"'

    def test_omitted_description_is_kept(self, service):
        task = service.update_task("task-1", "Renamed")
        assert task["description"] == "Description 1"

    def test_empty_description_clears(self, service):
        task = service.update_task("task-1", None, "")
        assert task["description"] == ""

    def test_unknown_task(self, service, store):
        with pytest.raises(NotFoundError):
            service.update_task("nope", "x")
        assert store.writes == 0


class TestDeleteTask:
    def test_removes_task_and_references(self, service):
        service.delete_task("task-1")

        board = service.get_board()
        assert "task-1" not in board["tasks"]
        assert board["columns"]["column-1"]["taskIds"] == []
        assert board["history"][0]["action"] == 'Deleted task: "Task 1"'

    def test_removes_id_from_every_column(self, board_doc):
        # Malformed document: the id is referenced twice
        board_doc["columns"]["column-3"]["taskIds"] = ["task-1"]
        service = BoardService(InMemoryDocumentStore(board_doc))

        service.delete_task("task-1")

        columns = service.get_board()["columns"]
        assert all("task-1" not in c["taskIds"] for c in columns.values())

    def test_unknown_task(self, service, store):
        with pytest.raises(NotFoundError):
            service.delete_task("nope")
        assert store.writes == 0


class TestMoveTask:
    def test_cross_column_move_is_logged(self, service):
        result = service.move_task("task-1", "column-1", "column-2", 0, 1)

        assert result == {"success": True}
        board = service.get_board()
        assert board["columns"]["column-1"]["taskIds"] == []
        assert board["columns"]["column-2"]["taskIds"] == ["task-2", "task-1"]
        assert len(board["history"]) == 1
        assert board["history"][0]["action"] == 'Moved "Task 1" from To Do to In Progress'

    def test_within_column_move_is_not_logged(self, board_doc):
        board_doc["tasks"]["task-3"] = {"id": "task-3", "title": "Task 3", "createdAt": "2024-01-03T00:00:00Z"}
        board_doc["columns"]["column-1"]["taskIds"] = ["task-1", "task-3"]
        store = RecordingStore(board_doc)
        service = BoardService(store)

        service.move_task("task-1", "column-1", "column-1", 0, 1)

        board = service.get_board()
        assert board["columns"]["column-1"]["taskIds"] == ["task-3", "task-1"]
        assert board["history"] == []
        # The reorder is still persisted
        assert store.writes == 1

    def test_unknown_task(self, service, store):
        with pytest.raises(NotFoundError):
            service.move_task("nope", "column-1", "column-2", 0, 0)
        assert store.writes == 0

    @pytest.mark.parametrize(
        "source, dest",
        [("missing", "column-2"), ("column-1", "missing")],
    )
    def test_unknown_column(self, service, store, source, dest):
        before = service.get_board()
        with pytest.raises(InvalidColumnError):
            service.move_task("task-1", source, dest, 0, 0)
        assert service.get_board() == before
        assert store.writes == 0

    def test_wrong_source_column_does_not_duplicate(self, service):
        service.move_task("task-1", "column-2", "column-3", 0, 0)

        board = service.get_board()
        assert_membership(board)
        assert board["columns"]["column-1"]["taskIds"] == []
        assert board["columns"]["column-2"]["taskIds"] == ["task-2"]
        assert board["columns"]["column-3"]["taskIds"] == ["task-1"]


class TestPersistenceFailures:
    def test_read_failure_surfaces(self, service, store):
        store.fail_reads = True
        with pytest.raises(PersistenceReadError):
            service.get_board()
        with pytest.raises(PersistenceReadError):
            service.get_history()

    def test_write_failure_leaves_document_unchanged(self, service, store):
        before = service.get_board()
        store.fail_writes = True

        with pytest.raises(PersistenceWriteError):
            service.create_task("Never saved")

        store.fail_writes = False
        assert service.get_board() == before


class TestEndToEnd:
    def test_create_then_move(self):
        board = make_board()
        board["tasks"] = {"t1": {"id": "t1", "title": "First", "createdAt": "2024-01-01T00:00:00Z"}}
        board["columns"]["column-1"]["taskIds"] = ["t1"]
        board["columns"]["column-2"]["taskIds"] = []
        service = BoardService(InMemoryDocumentStore(board))

        created = service.create_task("Buy milk")
        state = service.get_board()
        assert state["columns"]["column-1"]["taskIds"] == ["t1", created["id"]]
        assert [h["action"] for h in state["history"]] == ['Created task: "Buy milk"']

        service.move_task(created["id"], "column-1", "column-2", 1, 0)
        state = service.get_board()
        assert state["columns"]["column-1"]["taskIds"] == ["t1"]
        assert state["columns"]["column-2"]["taskIds"] == [created["id"]]
        assert [h["action"] for h in state["history"]] == [
            'Moved "Buy milk" from To Do to In Progress',
            'Created task: "Buy milk"',
        ]


def test_invariants_hold_over_random_operations(service):
    rng = random.Random(20240101)
    column_ids = ["column-1", "column-2", "column-3"]

    for step in range(200):
        board = service.get_board()
        task_ids = list(board["tasks"])
        op = rng.choice(["create", "update", "delete", "move", "move"])

        if op == "create" or not task_ids:
            service.create_task(f"Task {step}")
        elif op == "update":
            service.update_task(rng.choice(task_ids), f"Renamed {step}")
        elif op == "delete":
            service.delete_task(rng.choice(task_ids))
        else:
            task_id = rng.choice(task_ids)
            source = next(cid for cid in column_ids if task_id in board["columns"][cid]["taskIds"])
            dest = rng.choice(column_ids)
            service.move_task(
                task_id,
                source,
                dest,
                board["columns"][source]["taskIds"].index(task_id),
                rng.randint(-2, 8),
            )

        board = service.get_board()
        assert_membership(board)
        assert len(board["history"]) <= 5
        timestamps = [h["timestamp"] for h in board["history"]]
        assert timestamps == sorted(timestamps, reverse=True)
        # Every referenced id resolves to a task and every task is placed
        placed = {tid for c in board["columns"].values() for tid in c["taskIds"]}
        assert placed == set(board["tasks"])
