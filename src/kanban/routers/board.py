from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_board_service
from ..schemas import BoardOut, HistoryEntryOut
from ..service import BoardService

router = APIRouter(
    prefix="/api",
    tags=["board"],
)


# PUBLIC_INTERFACE
@router.get(
    "/board",
    response_model=BoardOut,
    summary="Get Board",
    description="Return the full board document: tasks, columns, column order and recent history.",
    responses={
        200: {"description": "Board retrieved"},
        500: {"description": "Board data could not be read"},
    },
)
def get_board(service: BoardService = Depends(get_board_service)) -> BoardOut:
    """
    Read the whole board.
    """
    return BoardOut.model_validate(service.get_board())


# PUBLIC_INTERFACE
@router.get(
    "/history",
    response_model=List[HistoryEntryOut],
    summary="Get History",
    description="Return the most recent structural changes, newest first (at most 5).",
    responses={
        200: {"description": "History retrieved"},
        500: {"description": "Board data could not be read"},
    },
)
def get_history(service: BoardService = Depends(get_board_service)) -> List[HistoryEntryOut]:
    return [HistoryEntryOut.model_validate(entry) for entry in service.get_history()]
