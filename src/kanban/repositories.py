from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from threading import RLock
from typing import Optional

from .errors import PersistenceReadError, PersistenceWriteError
from .models import BoardDocument, clone_board, initial_board
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class DocumentStore(ABC):
    """
    Abstract contract for the durable board document: whole-document read and
    whole-document replace, nothing finer grained.

    Implementations seed the document with ``initial_board()`` the first time
    it is read and none exists yet.
    """

    name: str = "abstract"

    @abstractmethod
    def read(self) -> BoardDocument:
        """Return the full document. Raise PersistenceReadError on failure."""

    @abstractmethod
    def write(self, board: BoardDocument) -> None:
        """Replace the full document. Raise PersistenceWriteError on failure."""


class InMemoryDocumentStore(DocumentStore):
    """
    Thread-safe in-memory store suitable for testing.
    """

    name = "memory"

    def __init__(self, board: Optional[BoardDocument] = None) -> None:
        self._lock = RLock()
        self._board: Optional[BoardDocument] = clone_board(board) if board is not None else None

    def read(self) -> BoardDocument:
        with self._lock:
            if self._board is None:
                self._board = initial_board()
            # Return copies to avoid external mutation
            return clone_board(self._board)

    def write(self, board: BoardDocument) -> None:
        with self._lock:
            self._board = clone_board(board)


class JsonFileDocumentStore(DocumentStore):
    """
    Stores the document as one pretty-printed JSON file, replaced in full on
    every write via a temp file and an atomic rename.
    """

    name = "file"

    def __init__(self, path: str) -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def _ensure_seeded(self) -> None:
        if os.path.exists(self._path):
            return
        logger.info("No board document at %s, writing seed", self._path)
        self.write(initial_board())

    def read(self) -> BoardDocument:
        self._ensure_seeded()
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Error reading board data from %s: %s", self._path, e)
            raise PersistenceReadError() from e

    def write(self, board: BoardDocument) -> None:
        # Readers only ever see a complete file: write a sibling temp file, then rename over.
        tmp_path = None
        try:
            content = json.dumps(board, indent=2, ensure_ascii=False)
            parent = os.path.dirname(self._path) or "."
            os.makedirs(parent, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=parent, prefix=".tmp_", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error("Error writing board data to %s: %s", self._path, e)
            raise PersistenceWriteError() from e


# PUBLIC_INTERFACE
def get_document_store(settings: Optional[Settings] = None) -> DocumentStore:
    """
    Factory to return the configured document store based on settings.
    - file: JsonFileDocumentStore (default)
    - memory: InMemoryDocumentStore
    - sqlite: SQLiteDocumentStore (one row holding the serialized document)
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "memory":
        return InMemoryDocumentStore()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteDocumentStore

        return SQLiteDocumentStore(settings.sqlite_db_path)
    return JsonFileDocumentStore(settings.board_data_file)
