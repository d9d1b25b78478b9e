"""
Move coordinator: computes new column orderings for a single-task move.

Index policy:
- removal uses ``source_index`` when it is in range and points at the moved
  task; otherwise the task's actual position in the source list is used, and
  nothing is removed when the task is not there. Negative indices never wrap.
- insertion clamps ``dest_index`` into ``[0, len(destination)]``, measured
  after removal when source and destination are the same column.
- a stale copy of the task id already sitting in the destination column, or
  in any column other than the named source, is dropped, so a move never
  leaves the task in two columns.

Input lists and column dicts are never mutated.
"""
from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .models import Column


def _removal_position(task_ids: Sequence[str], task_id: str, index: int) -> int:
    if 0 <= index < len(task_ids) and task_ids[index] == task_id:
        return index
    try:
        return list(task_ids).index(task_id)
    except ValueError:
        return -1


def _clamp(index: int, upper: int) -> int:
    return max(0, min(index, upper))


# PUBLIC_INTERFACE
def reorder_task_ids(
    task_id: str,
    source_ids: Sequence[str],
    dest_ids: Sequence[str],
    source_index: int,
    dest_index: int,
    same_column: bool = False,
) -> Tuple[List[str], List[str]]:
    """
    Remove ``task_id`` from the source sequence and insert it into the
    destination sequence.

    Args:
        task_id: Id of the task being moved.
        source_ids: Current taskIds of the source column.
        dest_ids: Current taskIds of the destination column (ignored when
            ``same_column`` is True).
        source_index: Position of the task in the source column.
        dest_index: Target position, interpreted against the destination list
            after the removal.
        same_column: True for a reorder within one column.

    Returns:
        (new_source_ids, new_dest_ids). For a same-column move both elements
        are the same new list object.
    """
    new_source = list(source_ids)
    pos = _removal_position(new_source, task_id, source_index)
    if pos >= 0:
        del new_source[pos]

    if same_column:
        new_source.insert(_clamp(dest_index, len(new_source)), task_id)
        return new_source, new_source

    new_dest = [tid for tid in dest_ids if tid != task_id]
    new_dest.insert(_clamp(dest_index, len(new_dest)), task_id)
    return new_source, new_dest


# PUBLIC_INTERFACE
def apply_move(
    columns: Dict[str, Column],
    task_id: str,
    source_column_id: str,
    dest_column_id: str,
    source_index: int,
    dest_index: int,
) -> Dict[str, Column]:
    """
    Return a new columns mapping with the move applied.

    The two affected columns are replaced by fresh dicts, as is any other
    column still holding the task (it is stripped from there). Remaining
    columns are shared with the input mapping. Raises KeyError for unknown
    column ids, callers validate them first.
    """
    source = columns[source_column_id]
    dest = columns[dest_column_id]
    same = source_column_id == dest_column_id

    new_source_ids, new_dest_ids = reorder_task_ids(
        task_id,
        source["taskIds"],
        dest["taskIds"],
        source_index,
        dest_index,
        same_column=same,
    )

    updated = dict(columns)
    # A stale source column leaves the task elsewhere; it must end up only in dest.
    for column_id, column in columns.items():
        if column_id not in (source_column_id, dest_column_id) and task_id in column["taskIds"]:
            updated[column_id] = {**column, "taskIds": [tid for tid in column["taskIds"] if tid != task_id]}
    updated[source_column_id] = {**source, "taskIds": new_source_ids}
    if not same:
        updated[dest_column_id] = {**dest, "taskIds": new_dest_ids}
    return updated


def is_noop_move(source_column_id: str, dest_column_id: str, source_index: int, dest_index: int) -> bool:
    """True when a move would leave the board untouched (same column, same index)."""
    return source_column_id == dest_column_id and source_index == dest_index
