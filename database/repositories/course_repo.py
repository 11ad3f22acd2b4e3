"""CRUD operations for saved course templates (courses, course_holes)."""

import asyncpg
import logging
from typing import List, Optional
from uuid import UUID

from models import CourseTemplate
from database.converters import template_from_rows, template_hole_to_row
from database.exceptions import DuplicateError, IntegrityError

logger = logging.getLogger(__name__)

VISIBILITIES = ("private", "public")


class CourseRepositoryDB:
    """Async CRUD for course templates and their holes."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def _assemble(self, conn, course_row) -> CourseTemplate:
        hole_rows = await conn.fetch(
            "SELECT * FROM course_holes WHERE course_id = $1 ORDER BY hole_no",
            course_row["id"],
        )
        return template_from_rows(course_row, hole_rows)

    # ================================================================
    # Read
    # ================================================================

    async def get_templates(self, user_id: Optional[str] = None) -> List[CourseTemplate]:
        """Templates visible to a user (their own + public), newest first."""
        async with self._pool.acquire() as conn:
            if user_id:
                rows = await conn.fetch(
                    """SELECT * FROM courses
                       WHERE created_by = $1 OR visibility = 'public'
                       ORDER BY created_at DESC""",
                    UUID(user_id),
                )
            else:
                rows = await conn.fetch(
                    "SELECT * FROM courses WHERE visibility = 'public' ORDER BY created_at DESC"
                )
            if not rows:
                return []

            # Batch-load holes for all courses at once (avoid N+1)
            hole_rows = await conn.fetch(
                """SELECT * FROM course_holes
                   WHERE course_id = ANY($1::uuid[]) ORDER BY course_id, hole_no""",
                [r["id"] for r in rows],
            )
            holes_by_course = {}
            for hr in hole_rows:
                holes_by_course.setdefault(hr["course_id"], []).append(hr)

            return [template_from_rows(r, holes_by_course.get(r["id"], [])) for r in rows]

    async def get_template(self, template_id: str) -> Optional[CourseTemplate]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM courses WHERE id = $1", UUID(template_id)
            )
            if not row:
                return None
            return await self._assemble(conn, row)

    # ================================================================
    # Create / Delete
    # ================================================================

    async def create_template(
        self,
        template: CourseTemplate,
        user_id: str,
        *,
        visibility: str = "private",
    ) -> CourseTemplate:
        """Insert a template and its holes in one transaction.

        The database assigns the id and created_at; the returned template
        carries the stored values.
        """
        if visibility not in VISIBILITIES:
            raise ValueError(f"visibility must be one of {VISIBILITIES}")
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    course_row = await conn.fetchrow(
                        """INSERT INTO courses (name, holes_count, created_by, visibility)
                           VALUES ($1, $2, $3, $4)
                           RETURNING *""",
                        template.name, template.holes_count, UUID(user_id), visibility,
                    )
                    hole_tuples = [
                        template_hole_to_row(h, course_row["id"]) for h in template.holes
                    ]
                    if hole_tuples:
                        await conn.executemany(
                            """INSERT INTO course_holes (course_id, hole_no, par, stroke_index)
                               VALUES ($1, $2, $3, $4)""",
                            hole_tuples,
                        )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(str(e)) from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

        logger.info("Created template %s (%s)", course_row["id"], template.name)
        return CourseTemplate(
            id=str(course_row["id"]),
            name=course_row["name"],
            holes_count=course_row["holes_count"],
            holes=template.holes,
            created_at=course_row["created_at"],
        )

    async def delete_template(self, template_id: str) -> bool:
        """Delete a template and its holes (CASCADE). Returns True if deleted."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM courses WHERE id = $1", UUID(template_id)
            )
            return result == "DELETE 1"
