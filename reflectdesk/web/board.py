"""
Board routes: the whole Next Actions board and drag-and-drop moves.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..board.reorder import InvalidMoveError, MoveEvent
from ..board.service import get_board_service
from ..database.models import UserDB
from ..models.api_validation import MoveRequest
from .security import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/board", tags=["board"])


@router.get("")
async def get_board(user: UserDB = Depends(require_user)):
    """Groups in order, each with its ordered tasks."""
    try:
        return await get_board_service().get_board(user.id)
    except Exception as e:
        logger.error(f"Error loading board: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load board")


@router.post("/move")
async def move_item(payload: MoveRequest, user: UserDB = Depends(require_user)):
    """
    Apply one drag-and-drop result.

    Stale container references and out-of-range indices are rejected with
    400 before anything is written.
    """
    try:
        move = MoveEvent(**payload.model_dump())
        plan = await get_board_service().apply_move(user.id, move)
        return plan.to_dict()

    except InvalidMoveError as e:
        logger.warning(f"Rejected move for user {user.id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error applying move: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to move item")
