import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from analytics.stats import compute_round_summary
from analytics.templates import default_round, template_from_round
from database.connection import DatabasePool
from database.converters import (
    hole_to_row,
    round_state_from_rows,
    round_to_row,
    summary_from_row,
    summary_to_row,
    template_from_rows,
)
from database.exceptions import NotFoundError, RoundFinishedError
from database.local_store import JsonFileStorage
from database.migrate import (
    ROUND_VERSION,
    dump_round,
    dump_templates,
    migrate_round,
    migrate_templates,
)
from database.repositories.course_repo import CourseRepositoryDB
from database.repositories.round_repo import RoundRepositoryDB
from models import Level, TeeShotResult


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    conn.transaction = MagicMock()
    conn.transaction.return_value.__aenter__.return_value = AsyncMock()
    return pool, conn


def _round_row(round_id=None, *, holes_count=18, level="Bogey Golf", scoring_distance=125,
               weights=None, completed=False, course_id=None):
    """Helper: minimal rounds row dict."""
    return {
        "id": round_id or uuid4(),
        "created_by": uuid4(),
        "course_id": course_id,
        "holes_count": holes_count,
        "level": level,
        "scoring_distance": scoring_distance,
        "weights": weights,
        "completed": completed,
        "started_at": datetime(2026, 3, 1, tzinfo=timezone.utc),
        "completed_at": datetime(2026, 3, 1, 12, tzinfo=timezone.utc) if completed else None,
    }


def _hole_row(round_id, hole_no, *, par=4, stroke_index=None, strokes=None, putts=None,
              reached_sd=None, oopsies=None, missed_putts_6ft=None, tee_shot_result=None):
    """Helper: minimal round_holes row dict."""
    return {
        "round_id": round_id,
        "hole_no": hole_no,
        "par": par,
        "stroke_index": stroke_index or hole_no,
        "strokes": strokes,
        "putts": putts,
        "reached_sd": reached_sd,
        "oopsies": oopsies,
        "missed_putts_6ft": missed_putts_6ft,
        "tee_shot_result": tee_shot_result,
    }


# ================================================================
# converters.py
# ================================================================

def test_round_state_from_rows_maps_holes():
    rid = uuid4()
    row = _round_row(rid, holes_count=9, level="Break 80", scoring_distance=150,
                     weights='{"bunker": 0.5, "duffed": 2}')
    hole_rows = [
        _hole_row(rid, 2, par=3, stroke_index=7, strokes=3, putts=1,
                  oopsies={"lostBall": 1, "bunker": 0, "duffed": 0}),
        _hole_row(rid, 5, strokes=5, reached_sd=True, tee_shot_result="fairway",
                  oopsies='{"lost_ball": 0, "bunker": 2, "duffed": 0}', missed_putts_6ft=1),
        _hole_row(rid, 12, strokes=4),   # outside a 9-hole round
    ]
    r = round_state_from_rows(row, hole_rows)

    assert r.holes_count == 9
    assert len(r.holes) == 9
    assert r.level == Level.BREAK_80
    assert r.scoring_distance == 150
    assert r.weights.bunker == 0.5
    assert r.weights.duffed == 2

    assert r.holes[1].par == 3
    assert r.holes[1].stroke_index == 7
    assert r.holes[1].oopsies.lost_ball == 1
    assert r.holes[4].reached_sd is True
    assert r.holes[4].tee_shot_result == TeeShotResult.FAIRWAY
    assert r.holes[4].oopsies.bunker == 2
    assert r.holes[4].missed_putts_6ft == 1
    # Missing rows keep defaults
    assert r.holes[0].par == 4
    assert r.holes[0].strokes is None


def test_round_state_from_rows_defaults():
    row = _round_row(holes_count=None, level=None, scoring_distance=None, weights=None)
    r = round_state_from_rows(row, [])

    assert r.holes_count == 18
    assert r.level == Level.BOGEY_GOLF
    assert r.scoring_distance == 125
    assert r.weights.bunker == 1
    assert r.holes[17].stroke_index == 18


def test_round_and_hole_to_row():
    r = default_round(9, level=Level.SCRATCH).update_hole(
        0, strokes=4, putts=2, reached_sd=True, oopsies={"bunker": 1},
        tee_shot_result="trouble",
    )
    user_id = uuid4()
    row = round_to_row(r, user_id)
    assert row["created_by"] == user_id
    assert row["level"] == "Scratch"
    assert row["weights"] == {"bunker": 1.0, "duffed": 1.0}

    rid = uuid4()
    hole = hole_to_row(r.holes[0], rid)
    assert len(hole) == 10
    assert hole[0] == rid
    assert hole[1:6] == (1, 4, 1, 4, 2)
    assert hole[6] is True
    assert hole[7] == {"lost_ball": 0, "bunker": 1, "duffed": 0}
    assert hole[9] == "trouble"


def test_summary_row_round_trip():
    r = (
        default_round(9)
        .update_hole(0, strokes=5, putts=3, reached_sd=True, oopsies={"lost_ball": 1})
        .update_hole(1, strokes=6, putts=2, missed_putts_6ft=1)
    )
    summary = compute_round_summary(r)
    row = summary_to_row(summary, r, user_id=uuid4(), round_id=uuid4())

    assert row["holes"] == 9
    assert row["level"] == "Bogey Golf"
    assert row["lost_ball_penalty"] == 2
    assert row["strokes_lost_total"] == summary.strokes_lost_total
    assert summary_from_row(row) == summary


def test_summary_from_row_handles_decimals():
    row = {
        "strokes": 80, "to_par": 8, "sd_pct": 50, "sd_made": 7, "sd_eligible": 14,
        "avg_putts": Decimal("1.9"), "putts_lost_total": Decimal("3.0"),
        "strokes_lost_total": Decimal("6.5"), "p3_pct": None,
    }
    s = summary_from_row(row)
    assert s.avg_putts == 1.9
    assert s.strokes_lost_total == 6.5
    assert s.p3_pct is None
    assert s.npir_made == 0


def test_template_from_rows_sorts_holes():
    cid = uuid4()
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    course_row = {"id": cid, "name": "Home", "holes_count": 9, "created_at": created}
    hole_rows = [
        {"course_id": cid, "hole_no": n, "par": 4, "stroke_index": n} for n in (3, 1, 2)
    ]
    t = template_from_rows(course_row, hole_rows)

    assert t.id == str(cid)
    assert [h.n for h in t.holes] == [1, 2, 3]
    assert t.created_at == created


# ================================================================
# migrate.py / local_store.py
# ================================================================

def test_migrate_round():
    r = default_round(9).update_hole(2, strokes=4)
    assert migrate_round(dump_round(r)) == r

    assert migrate_round(None) is None
    assert migrate_round("nope") is None
    assert migrate_round({"version": ROUND_VERSION + 1, "data": {}}) is None
    assert migrate_round({"version": ROUND_VERSION}) is None
    assert migrate_round({"version": ROUND_VERSION, "data": {"holes_count": 7}}) is None


def test_migrate_templates_skips_bad_entries():
    good = template_from_round(default_round(9), "Home")
    payload = dump_templates([good])
    payload["templates"].append({"id": "broken"})

    assert migrate_templates(payload) == [good]
    assert migrate_templates({"version": 99, "templates": []}) == []
    assert migrate_templates({"version": 1, "templates": "x"}) == []
    assert migrate_templates([]) == []


def test_json_file_storage_round(tmp_path):
    store = JsonFileStorage(tmp_path / "store")
    assert store.load_round() is None

    r = default_round(18).update_hole(0, strokes=5, putts=2)
    store.save_round(r)
    assert store.load_round() == r

    store.clear_round()
    assert store.load_round() is None
    store.clear_round()   # no file: no error


def test_json_file_storage_corrupt_file(tmp_path):
    store = JsonFileStorage(tmp_path)
    (tmp_path / "round.json").write_text("{not json", encoding="utf-8")
    assert store.load_round() is None


def test_json_file_storage_templates(tmp_path):
    store = JsonFileStorage(tmp_path)
    assert store.load_templates() == []

    first = template_from_round(default_round(9), "First")
    second = template_from_round(default_round(18), "Second")
    store.save_template(first)
    store.save_template(second)
    assert [t.name for t in store.load_templates()] == ["Second", "First"]

    store.delete_template(first.id)
    store.delete_template("missing")
    assert [t.id for t in store.load_templates()] == [second.id]


# ================================================================
# RoundRepositoryDB
# ================================================================

@pytest.mark.asyncio
async def test_round_repo_get_round(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    rid = uuid4()
    conn.fetchrow.return_value = _round_row(rid, holes_count=9)
    conn.fetch.return_value = [_hole_row(rid, 1, strokes=4, putts=2)]

    stored = await repo.get_round(str(rid))
    assert stored.round_id == str(rid)
    assert stored.completed is False
    assert stored.round.holes_count == 9
    assert stored.round.holes[0].strokes == 4


@pytest.mark.asyncio
async def test_round_repo_get_round_not_found(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = None

    assert await RoundRepositoryDB(pool).get_round(str(uuid4())) is None


@pytest.mark.asyncio
async def test_round_repo_create_round_writes_holes_and_summary(mock_pool):
    pool, conn = mock_pool
    repo = RoundRepositoryDB(pool)

    rid = uuid4()
    conn.fetchrow.return_value = {"id": rid}

    r = default_round(9).update_hole(0, strokes=5, putts=3)
    new_id = await repo.create_round(r, str(uuid4()))

    assert new_id == str(rid)
    conn.executemany.assert_called_once()
    sql, tuples = conn.executemany.call_args[0]
    assert "round_holes" in sql
    assert len(tuples) == 9
    assert tuples[0][4] == 5

    conn.execute.assert_called_once()
    summary_sql = conn.execute.call_args[0][0]
    assert "round_summaries" in summary_sql
    assert "ON CONFLICT (user_id, round_id)" in summary_sql


@pytest.mark.asyncio
async def test_round_repo_save_round_missing(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = None

    with pytest.raises(NotFoundError):
        await RoundRepositoryDB(pool).save_round(str(uuid4()), default_round(9))


@pytest.mark.asyncio
async def test_round_repo_save_round_finished(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = {"created_by": uuid4(), "completed": True}

    with pytest.raises(RoundFinishedError):
        await RoundRepositoryDB(pool).save_round(str(uuid4()), default_round(9))
    conn.executemany.assert_not_called()


@pytest.mark.asyncio
async def test_round_repo_save_round(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = {"created_by": uuid4(), "completed": False}

    await RoundRepositoryDB(pool).save_round(str(uuid4()), default_round(18))

    # UPDATE rounds + summary upsert
    assert conn.execute.call_count == 2
    assert len(conn.executemany.call_args[0][1]) == 18


@pytest.mark.asyncio
async def test_round_repo_get_finished_rounds(mock_pool):
    pool, conn = mock_pool
    r1, r2 = uuid4(), uuid4()
    conn.fetch.side_effect = [
        [_round_row(r1, holes_count=9, completed=True), _round_row(r2, completed=True)],
        [_hole_row(r1, 1, strokes=5), _hole_row(r2, 3, strokes=3, par=3)],
    ]

    rounds = await RoundRepositoryDB(pool).get_finished_rounds(str(uuid4()))
    assert [r.round_id for r in rounds] == [str(r1), str(r2)]
    assert rounds[0].round.holes[0].strokes == 5
    assert rounds[1].round.holes[2].par == 3
    assert all(r.completed for r in rounds)


@pytest.mark.asyncio
async def test_round_repo_get_finished_rounds_empty(mock_pool):
    pool, conn = mock_pool
    conn.fetch.return_value = []

    assert await RoundRepositoryDB(pool).get_finished_rounds(str(uuid4())) == []
    assert conn.fetch.call_count == 1


@pytest.mark.asyncio
async def test_round_repo_finish_round(mock_pool):
    pool, conn = mock_pool
    rid = uuid4()
    conn.fetchrow.return_value = _round_row(rid, completed=True)
    conn.fetch.return_value = []

    stored = await RoundRepositoryDB(pool).finish_round(str(rid))
    assert stored.completed is True
    assert stored.completed_at is not None

    conn.fetchrow.return_value = None
    with pytest.raises(NotFoundError):
        await RoundRepositoryDB(pool).finish_round(str(rid))


@pytest.mark.asyncio
async def test_round_repo_delete_round(mock_pool):
    pool, conn = mock_pool
    conn.execute.return_value = "DELETE 1"
    assert await RoundRepositoryDB(pool).delete_round(str(uuid4())) is True

    conn.execute.return_value = "DELETE 0"
    assert await RoundRepositoryDB(pool).delete_round(str(uuid4())) is False


# ================================================================
# CourseRepositoryDB
# ================================================================

def _course_row(course_id=None, name="Home", holes_count=9):
    return {
        "id": course_id or uuid4(),
        "name": name,
        "holes_count": holes_count,
        "visibility": "private",
        "created_by": uuid4(),
        "created_at": datetime(2026, 2, 1, tzinfo=timezone.utc),
    }


@pytest.mark.asyncio
async def test_course_repo_get_templates(mock_pool):
    pool, conn = mock_pool
    c1, c2 = uuid4(), uuid4()
    conn.fetch.side_effect = [
        [_course_row(c1, "Newer"), _course_row(c2, "Older")],
        [
            {"course_id": c1, "hole_no": 1, "par": 3, "stroke_index": 9},
            {"course_id": c2, "hole_no": 1, "par": 5, "stroke_index": 1},
        ],
    ]

    templates = await CourseRepositoryDB(pool).get_templates(str(uuid4()))
    assert [t.name for t in templates] == ["Newer", "Older"]
    assert templates[0].holes[0].par == 3
    assert templates[1].holes[0].par == 5


@pytest.mark.asyncio
async def test_course_repo_get_template_not_found(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = None
    assert await CourseRepositoryDB(pool).get_template(str(uuid4())) is None


@pytest.mark.asyncio
async def test_course_repo_create_template(mock_pool):
    pool, conn = mock_pool
    cid = uuid4()
    conn.fetchrow.return_value = _course_row(cid, "Home", 9)

    template = template_from_round(default_round(9), "Home")
    saved = await CourseRepositoryDB(pool).create_template(template, str(uuid4()))

    assert saved.id == str(cid)
    assert saved.name == "Home"
    assert len(saved.holes) == 9
    sql, tuples = conn.executemany.call_args[0]
    assert "course_holes" in sql
    assert tuples[0] == (cid, 1, 4, 1)


@pytest.mark.asyncio
async def test_course_repo_create_template_bad_visibility(mock_pool):
    pool, _ = mock_pool
    template = template_from_round(default_round(9), "Home")
    with pytest.raises(ValueError):
        await CourseRepositoryDB(pool).create_template(template, str(uuid4()), visibility="secret")


# ================================================================
# DatabasePool
# ================================================================

@pytest.mark.asyncio
async def test_pool_health_check_uninitialized():
    pool = DatabasePool()
    assert pool.is_initialized is False
    assert await pool.health_check() is False
    with pytest.raises(RuntimeError):
        pool.pool


@pytest.mark.asyncio
async def test_pool_apply_schema(mock_pool):
    pool, conn = mock_pool
    db_pool = DatabasePool()
    db_pool._pool = pool

    await db_pool.apply_schema()
    sql = conn.execute.call_args[0][0]
    assert "CREATE TABLE IF NOT EXISTS rounds" in sql
    assert "CREATE TABLE IF NOT EXISTS round_summaries" in sql
