"""Insights (trend) endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from analytics.trends import ROLLING_WINDOWS, format_delta, format_metric, insights
from api.dependencies import get_db
from api.schemas import InsightsResponse, MetricTrendResponse
from database.db_manager import DatabaseManager
from models import Level

router = APIRouter()


@router.get("/{user_id}", response_model=InsightsResponse)
async def get_insights(
    user_id: str,
    level: Optional[Level] = Query(None),
    rolling: int = Query(0),
    db: DatabaseManager = Depends(get_db),
):
    if rolling not in ROLLING_WINDOWS:
        raise HTTPException(400, f"rolling must be one of {list(ROLLING_WINDOWS)}")

    finished = await db.rounds.get_finished_rounds(user_id)
    result = insights(
        [(r.round_id, r.round) for r in finished], level=level, rolling=rolling
    )
    return InsightsResponse(
        rounds_used=result["rounds_used"],
        rolling=result["rolling"],
        metrics=[
            MetricTrendResponse(
                **trend,
                latest_display=format_metric(trend["key"], trend["latest"]),
                average_display=format_metric(trend["key"], trend["average"]),
                delta_display=format_delta(trend["key"], trend["delta"]),
            )
            for trend in result["metrics"]
        ],
    )
