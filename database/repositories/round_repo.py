"""CRUD operations for rounds, round_holes, and round_summaries."""

import asyncpg
import logging
from datetime import datetime, timezone
from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID

from analytics.stats import compute_round_summary
from models import RoundState
from database.converters import hole_to_row, round_state_from_rows, round_to_row, summary_to_row
from database.exceptions import DuplicateError, IntegrityError, NotFoundError, RoundFinishedError

logger = logging.getLogger(__name__)

_UPSERT_HOLE_SQL = """INSERT INTO round_holes
   (round_id, hole_no, par, stroke_index, strokes, putts, reached_sd,
    oopsies, missed_putts_6ft, tee_shot_result)
   VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
   ON CONFLICT (round_id, hole_no)
   DO UPDATE SET par = EXCLUDED.par,
                 stroke_index = EXCLUDED.stroke_index,
                 strokes = EXCLUDED.strokes,
                 putts = EXCLUDED.putts,
                 reached_sd = EXCLUDED.reached_sd,
                 oopsies = EXCLUDED.oopsies,
                 missed_putts_6ft = EXCLUDED.missed_putts_6ft,
                 tee_shot_result = EXCLUDED.tee_shot_result"""

_SUMMARY_COLUMNS = (
    "user_id", "round_id", "course_id", "holes", "level", "scoring_distance",
    "strokes", "to_par",
    "sd_pct", "sd_made", "sd_eligible",
    "npir_pct", "npir_made", "npir_eligible",
    "p3_pct", "p3_made", "p3_eligible",
    "avg_putts", "putts_lost_total",
    "missed_putts_6ft_total", "missed_putts_6ft_pct",
    "tee_shots_fairway_total", "tee_shots_trouble_total", "tee_shots_fairway_pct",
    "strokes_lost_total", "lost_ball_penalty",
)

_UPSERT_SUMMARY_SQL = (
    f"INSERT INTO round_summaries ({', '.join(_SUMMARY_COLUMNS)}) "
    f"VALUES ({', '.join(f'${i}' for i in range(1, len(_SUMMARY_COLUMNS) + 1))}) "
    "ON CONFLICT (user_id, round_id) DO UPDATE SET "
    + ", ".join(f"{c} = EXCLUDED.{c}" for c in _SUMMARY_COLUMNS[2:])
    + ", updated_at = now()"
)


class StoredRound(BaseModel):
    """A round as persisted: the playable state plus its row metadata."""
    round_id: str
    user_id: Optional[str] = None
    course_id: Optional[str] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    round: RoundState


class RoundRepositoryDB:
    """Async CRUD for rounds and their child tables."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Private helpers
    # ================================================================

    async def _assemble_round(self, conn, round_row) -> StoredRound:
        hole_rows = await conn.fetch(
            "SELECT * FROM round_holes WHERE round_id = $1 ORDER BY hole_no",
            round_row["id"],
        )
        return StoredRound(
            round_id=str(round_row["id"]),
            user_id=str(round_row["created_by"]) if round_row["created_by"] else None,
            course_id=str(round_row["course_id"]) if round_row["course_id"] else None,
            completed=bool(round_row["completed"]),
            completed_at=round_row["completed_at"],
            round=round_state_from_rows(round_row, hole_rows),
        )

    async def _write_holes_and_summary(
        self, conn, round_id: UUID, user_id: UUID,
        course_id: Optional[UUID], round_state: RoundState,
    ) -> None:
        await conn.executemany(
            _UPSERT_HOLE_SQL,
            [hole_to_row(h, round_id) for h in round_state.active_holes],
        )
        summary_row = summary_to_row(
            compute_round_summary(round_state), round_state,
            user_id=user_id, round_id=round_id, course_id=course_id,
        )
        await conn.execute(
            _UPSERT_SUMMARY_SQL, *(summary_row[c] for c in _SUMMARY_COLUMNS)
        )

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[StoredRound]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                "SELECT * FROM rounds WHERE id = $1", UUID(round_id)
            )
            if not row:
                return None
            return await self._assemble_round(conn, row)

    async def get_latest_round(self, user_id: str) -> Optional[StoredRound]:
        """Most recently started round for a user."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """SELECT * FROM rounds WHERE created_by = $1
                   ORDER BY started_at DESC LIMIT 1""",
                UUID(user_id),
            )
            if not row:
                return None
            return await self._assemble_round(conn, row)

    async def get_finished_rounds(self, user_id: str) -> List[StoredRound]:
        """A user's finished rounds, oldest -> newest (trend order)."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM rounds
                   WHERE created_by = $1 AND completed
                   ORDER BY completed_at ASC""",
                UUID(user_id),
            )
            if not rows:
                return []

            hole_rows = await conn.fetch(
                """SELECT * FROM round_holes
                   WHERE round_id = ANY($1::uuid[]) ORDER BY round_id, hole_no""",
                [r["id"] for r in rows],
            )
            holes_by_round = {}
            for hr in hole_rows:
                holes_by_round.setdefault(hr["round_id"], []).append(hr)

            return [
                StoredRound(
                    round_id=str(r["id"]),
                    user_id=str(r["created_by"]),
                    course_id=str(r["course_id"]) if r["course_id"] else None,
                    completed=True,
                    completed_at=r["completed_at"],
                    round=round_state_from_rows(r, holes_by_round.get(r["id"], [])),
                )
                for r in rows
            ]

    # ================================================================
    # Create / Update
    # ================================================================

    async def create_round(
        self,
        round_state: RoundState,
        user_id: str,
        *,
        course_id: Optional[str] = None,
    ) -> str:
        """Create a round with its holes and summary row. Returns the new round ID."""
        row_data = round_to_row(
            round_state, UUID(user_id), UUID(course_id) if course_id else None
        )
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    round_row = await conn.fetchrow(
                        """INSERT INTO rounds
                           (created_by, course_id, holes_count, level,
                            scoring_distance, weights)
                           VALUES ($1, $2, $3, $4, $5, $6)
                           RETURNING id""",
                        row_data["created_by"], row_data["course_id"],
                        row_data["holes_count"], row_data["level"],
                        row_data["scoring_distance"], row_data["weights"],
                    )
                    await self._write_holes_and_summary(
                        conn, round_row["id"], row_data["created_by"],
                        row_data["course_id"], round_state,
                    )
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(str(e)) from e
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

        logger.info("Created round %s for user %s", round_row["id"], user_id)
        return str(round_row["id"])

    async def save_round(
        self,
        round_id: str,
        round_state: RoundState,
        *,
        course_id: Optional[str] = None,
    ) -> None:
        """Autosave: update round metadata, upsert holes and the summary row.

        Last write wins. Finished rounds are frozen.
        """
        rid = UUID(round_id)
        cid = UUID(course_id) if course_id else None
        row_data = round_to_row(round_state, course_id=cid)
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    existing = await conn.fetchrow(
                        "SELECT created_by, completed FROM rounds WHERE id = $1 FOR UPDATE",
                        rid,
                    )
                    if not existing:
                        raise NotFoundError("Round", round_id)
                    if existing["completed"]:
                        raise RoundFinishedError(round_id)

                    await conn.execute(
                        """UPDATE rounds
                           SET course_id = $2, holes_count = $3, level = $4,
                               scoring_distance = $5, weights = $6
                           WHERE id = $1""",
                        rid, cid, row_data["holes_count"], row_data["level"],
                        row_data["scoring_distance"], row_data["weights"],
                    )
                    await self._write_holes_and_summary(
                        conn, rid, existing["created_by"], cid, round_state
                    )
        except asyncpg.ForeignKeyViolationError as e:
            raise IntegrityError(str(e)) from e

    async def finish_round(self, round_id: str) -> StoredRound:
        """Mark a round completed. It then shows up in history and insights."""
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(
                """UPDATE rounds SET completed = TRUE, completed_at = $2
                   WHERE id = $1 RETURNING *""",
                UUID(round_id), datetime.now(timezone.utc),
            )
            if not row:
                raise NotFoundError("Round", round_id)
            logger.info("Finished round %s", round_id)
            return await self._assemble_round(conn, row)

    # ================================================================
    # Delete
    # ================================================================

    async def delete_round(self, round_id: str) -> bool:
        """Delete round, its holes and summary (CASCADE). Returns True if deleted."""
        async with self._pool.acquire() as conn:
            result = await conn.execute(
                "DELETE FROM rounds WHERE id = $1", UUID(round_id)
            )
            return result == "DELETE 1"
