"""Stateless scoring endpoints: summaries, per-hole targets, round builders."""

from fastapi import APIRouter, HTTPException, Query
from typing import List

from analytics.losses import hole_strokes_lost, par3_equivalent
from analytics.stats import compute_round_summary
from analytics.targets import allowed_shots_to_sd, goal_score, target_after_sd
from analytics.templates import default_round, reset_round_keep_course
from api.schemas import HoleTargetsResponse
from models import RoundState, RoundSummary

router = APIRouter()


@router.post("/summary", response_model=RoundSummary)
def summarize(round_state: RoundState):
    return compute_round_summary(round_state)


@router.post("/targets", response_model=List[HoleTargetsResponse])
def hole_targets(round_state: RoundState):
    return [
        HoleTargetsResponse(
            n=h.n,
            par=h.par,
            stroke_index=h.stroke_index,
            goal=goal_score(round_state.level, h.par, h.stroke_index),
            allowed_shots_to_sd=allowed_shots_to_sd(round_state.level, h),
            target_after_sd=target_after_sd(h),
            strokes_lost=hole_strokes_lost(h, round_state.weights),
            par3_equivalent=par3_equivalent(round_state.level, h),
        )
        for h in round_state.active_holes
    ]


@router.post("/default-round", response_model=RoundState)
def new_default_round(holes_count: int = Query(18)):
    if holes_count not in (9, 18):
        raise HTTPException(400, "holes_count must be 9 or 18")
    return default_round(holes_count)


@router.post("/reset", response_model=RoundState)
def reset_keep_course(round_state: RoundState):
    return reset_round_keep_course(round_state)
