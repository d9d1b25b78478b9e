from __future__ import annotations

import json
import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator

from .errors import PersistenceReadError, PersistenceWriteError
from .models import BoardDocument, initial_board
from .repositories import DocumentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "board_document"
    id: str = "id"
    body: str = "body"


_COLS = _Cols()
_ROW_ID = 1


class SQLiteDocumentStore(DocumentStore):
    """
    SQLite-backed document store. The whole board lives in a single row as
    serialized JSON and is replaced in full on every write.
    """

    name = "sqlite"

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        try:
            self._init_db()
        except sqlite3.Error as e:
            raise PersistenceWriteError("Failed to initialize board database") from e

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY CHECK ({_COLS.id} = {_ROW_ID}),
                    {_COLS.body} TEXT NOT NULL
                )
                """
            )
            row = conn.execute(
                f"SELECT {_COLS.id} FROM {_COLS.table} WHERE {_COLS.id} = ?", (_ROW_ID,)
            ).fetchone()
            if row is None:
                logger.info("Seeding board document in %s", self._db_path)
                conn.execute(
                    f"INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.body}) VALUES (?, ?)",
                    (_ROW_ID, json.dumps(initial_board(), indent=2, ensure_ascii=False)),
                )

    def read(self) -> BoardDocument:
        try:
            with self._conn() as conn:
                row = conn.execute(
                    f"SELECT {_COLS.body} FROM {_COLS.table} WHERE {_COLS.id} = ?", (_ROW_ID,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error("Error reading board data from %s: %s", self._db_path, e)
            raise PersistenceReadError() from e
        if row is None:
            board = initial_board()
            self.write(board)
            return board
        try:
            return json.loads(row[_COLS.body])
        except json.JSONDecodeError as e:
            raise PersistenceReadError() from e

    def write(self, board: BoardDocument) -> None:
        body = json.dumps(board, indent=2, ensure_ascii=False)
        try:
            with self._conn() as conn:
                conn.execute(
                    f"""
                    INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.body}) VALUES (?, ?)
                    ON CONFLICT({_COLS.id}) DO UPDATE SET {_COLS.body} = excluded.{_COLS.body}
                    """,
                    (_ROW_ID, body),
                )
        except sqlite3.Error as e:
            logger.error("Error writing board data to %s: %s", self._db_path, e)
            raise PersistenceWriteError() from e
