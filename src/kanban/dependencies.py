from __future__ import annotations

from fastapi import Request

from .service import BoardService


# PUBLIC_INTERFACE
def get_board_service(request: Request) -> BoardService:
    """
    Return the BoardService constructed for this application in create_app().
    """
    return request.app.state.board_service
