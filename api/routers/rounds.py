"""Round API endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List, Literal, Optional

from analytics.stats import compute_round_summary
from analytics.templates import default_round, reset_round_keep_course
from api.dependencies import get_db
from api.schemas import NewRoundResponse, RoundHistoryItem, SaveRoundResponse
from database.db_manager import DatabaseManager
from database.exceptions import IntegrityError, NotFoundError, RoundFinishedError
from database.repositories import StoredRound
from models import RoundState

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateRoundRequest(BaseModel):
    user_id: str
    course_id: Optional[str] = None
    holes_count: Literal[9, 18] = 18
    round: Optional[RoundState] = None


class SaveRoundRequest(BaseModel):
    round: RoundState
    course_id: Optional[str] = None


def history_item(stored: StoredRound) -> RoundHistoryItem:
    """Project a stored round into a list row with its summary."""
    return RoundHistoryItem(
        round_id=stored.round_id,
        course_id=stored.course_id,
        completed_at=stored.completed_at,
        level=stored.round.level,
        holes_count=stored.round.holes_count,
        summary=compute_round_summary(stored.round),
    )


@router.get("/user/{user_id}", response_model=List[RoundHistoryItem])
async def get_finished_rounds(user_id: str, db: DatabaseManager = Depends(get_db)):
    """Finished rounds, newest first."""
    rounds = await db.rounds.get_finished_rounds(user_id)
    return [history_item(r) for r in reversed(rounds)]


@router.get("/user/{user_id}/latest", response_model=StoredRound)
async def get_latest_round(user_id: str, db: DatabaseManager = Depends(get_db)):
    stored = await db.rounds.get_latest_round(user_id)
    if not stored:
        raise HTTPException(404, "No rounds yet")
    return stored


@router.post("", response_model=NewRoundResponse, status_code=201)
async def create_round(req: CreateRoundRequest, db: DatabaseManager = Depends(get_db)):
    round_state = req.round or default_round(req.holes_count)
    try:
        round_id = await db.rounds.create_round(
            round_state, req.user_id, course_id=req.course_id
        )
    except IntegrityError:
        raise HTTPException(400, "Unknown course")
    return NewRoundResponse(round_id=round_id, course_id=req.course_id, round=round_state)


@router.get("/{round_id}", response_model=StoredRound)
async def get_round(round_id: str, db: DatabaseManager = Depends(get_db)):
    stored = await db.rounds.get_round(round_id)
    if not stored:
        raise HTTPException(404, "Round not found")
    return stored


@router.put("/{round_id}", response_model=SaveRoundResponse)
async def save_round(
    round_id: str,
    req: SaveRoundRequest,
    db: DatabaseManager = Depends(get_db),
):
    """Autosave the round state; returns the freshly computed summary."""
    try:
        await db.rounds.save_round(round_id, req.round, course_id=req.course_id)
    except NotFoundError:
        raise HTTPException(404, "Round not found")
    except RoundFinishedError:
        raise HTTPException(409, "Round is finished")
    except IntegrityError:
        raise HTTPException(400, "Unknown course")
    return SaveRoundResponse(round_id=round_id, summary=compute_round_summary(req.round))


@router.post("/{round_id}/finish", response_model=StoredRound)
async def finish_round(round_id: str, db: DatabaseManager = Depends(get_db)):
    try:
        return await db.rounds.finish_round(round_id)
    except NotFoundError:
        raise HTTPException(404, "Round not found")


@router.post("/{round_id}/new-keep-course", response_model=NewRoundResponse, status_code=201)
async def new_round_keep_course(round_id: str, db: DatabaseManager = Depends(get_db)):
    """Start a fresh round on the same course layout and settings."""
    stored = await db.rounds.get_round(round_id)
    if not stored:
        raise HTTPException(404, "Round not found")

    next_round = reset_round_keep_course(stored.round)
    new_id = await db.rounds.create_round(
        next_round, stored.user_id, course_id=stored.course_id
    )
    logger.info("Round %s restarted as %s", round_id, new_id)
    return NewRoundResponse(round_id=new_id, course_id=stored.course_id, round=next_round)


@router.delete("/{round_id}", status_code=204)
async def delete_round(round_id: str, db: DatabaseManager = Depends(get_db)):
    deleted = await db.rounds.delete_round(round_id)
    if not deleted:
        raise HTTPException(404, "Round not found")
