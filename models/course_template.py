from datetime import datetime
from pydantic import Field
from typing import List, Literal

from .base import BaseGolfModel


class TemplateHole(BaseGolfModel):
    """Static layout of one hole on a saved course."""
    n: int = Field(..., ge=1, le=18)
    par: int = Field(..., ge=3, le=5)
    stroke_index: int = Field(..., ge=1, le=18)


class CourseTemplate(BaseGolfModel):
    """Saved course layout (no entry data) used to seed new rounds."""
    id: str
    name: str
    holes_count: Literal[9, 18]
    holes: List[TemplateHole] = Field(default_factory=list)
    created_at: datetime
