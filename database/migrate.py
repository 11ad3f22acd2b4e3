"""Versioned envelopes for locally persisted rounds and templates."""

import logging
from typing import Any, List, Optional

from pydantic import ValidationError

from models import CourseTemplate, RoundState

logger = logging.getLogger(__name__)

ROUND_VERSION = 1
TEMPLATES_VERSION = 1


def dump_round(round_state: RoundState) -> dict:
    return {"version": ROUND_VERSION, "data": round_state.model_dump(mode="json")}


def dump_templates(templates: List[CourseTemplate]) -> dict:
    return {
        "version": TEMPLATES_VERSION,
        "templates": [t.model_dump(mode="json") for t in templates],
    }


def migrate_round(raw: Any) -> Optional[RoundState]:
    """Persisted envelope -> RoundState, or None if it can't be read."""
    if not isinstance(raw, dict):
        return None
    if raw.get("version") != ROUND_VERSION:
        return None
    data = raw.get("data")
    if not data:
        return None
    try:
        return RoundState.model_validate(data)
    except ValidationError as e:
        logger.warning("Discarding unreadable saved round: %s", e.errors()[0]["msg"])
        return None


def migrate_templates(raw: Any) -> List[CourseTemplate]:
    """Persisted envelope -> templates. Invalid entries are skipped."""
    if not isinstance(raw, dict):
        return []
    if raw.get("version") != TEMPLATES_VERSION:
        return []
    items = raw.get("templates")
    if not isinstance(items, list):
        return []

    templates: List[CourseTemplate] = []
    for item in items:
        try:
            templates.append(CourseTemplate.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping unreadable template: %s", e.errors()[0]["msg"])
    return templates
