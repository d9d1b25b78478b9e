from __future__ import annotations

import uuid
from typing import List, Optional, Sequence

from .models import HistoryEntry, utc_now_iso

HISTORY_LIMIT = 5


# PUBLIC_INTERFACE
def push_history(
    history: Sequence[HistoryEntry],
    action: str,
    timestamp: Optional[str] = None,
    limit: int = HISTORY_LIMIT,
) -> List[HistoryEntry]:
    """
    Return a new history list with ``action`` prepended (newest first) and
    the oldest entries dropped beyond ``limit``.
    """
    entry: HistoryEntry = {
        "id": str(uuid.uuid4()),
        "action": action,
        "timestamp": timestamp or utc_now_iso(),
    }
    return [entry, *history][:limit]


def created_message(title: str) -> str:
    return f'Created task: "{title}"'


def updated_message(old_title: str, new_title: str) -> str:
    return f'Updated task: "{old_title}" → "{new_title}"'


def deleted_message(title: str) -> str:
    return f'Deleted task: "{title}"'


def moved_message(title: str, source_title: str, dest_title: str) -> str:
    return f'Moved "{title}" from {source_title} to {dest_title}'
