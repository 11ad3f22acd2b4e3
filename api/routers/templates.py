"""Course template endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from typing import List, Literal, Optional

from analytics.templates import (
    apply_template_to_new_round,
    default_round,
    sanitize_name,
    template_from_round,
)
from api.dependencies import get_db
from api.schemas import RoundSettings
from database.db_manager import DatabaseManager
from database.exceptions import DuplicateError
from models import CourseTemplate, RoundState

router = APIRouter()


class CreateTemplateRequest(BaseModel):
    user_id: str
    name: str
    round: RoundState
    visibility: Literal["private", "public"] = "private"


@router.get("", response_model=List[CourseTemplate])
async def list_templates(
    user_id: Optional[str] = Query(None),
    db: DatabaseManager = Depends(get_db),
):
    return await db.courses.get_templates(user_id)


@router.post("", response_model=CourseTemplate, status_code=201)
async def create_template(req: CreateTemplateRequest, db: DatabaseManager = Depends(get_db)):
    """Save the layout of a round under a name."""
    name = sanitize_name(req.name)
    if not name:
        raise HTTPException(400, "Template name is required")
    template = template_from_round(req.round, name)
    try:
        return await db.courses.create_template(
            template, req.user_id, visibility=req.visibility
        )
    except DuplicateError:
        raise HTTPException(409, f"Template '{name}' already exists")


@router.post("/{template_id}/apply", response_model=RoundState)
async def apply_template(
    template_id: str,
    settings: RoundSettings,
    db: DatabaseManager = Depends(get_db),
):
    """Fresh round on the template's layout using the caller's settings."""
    template = await db.courses.get_template(template_id)
    if not template:
        raise HTTPException(404, "Template not found")
    base = default_round(
        template.holes_count,
        level=settings.level,
        scoring_distance=settings.scoring_distance,
        weights=settings.weights,
    )
    return apply_template_to_new_round(template, base)


@router.delete("/{template_id}", status_code=204)
async def delete_template(template_id: str, db: DatabaseManager = Depends(get_db)):
    deleted = await db.courses.delete_template(template_id)
    if not deleted:
        raise HTTPException(404, "Template not found")
