import asyncpg

from database.repositories import CourseRepositoryDB, RoundRepositoryDB


class DatabaseManager:
    """Groups the repositories that share one connection pool."""

    def __init__(self, pool: asyncpg.Pool):
        self.rounds = RoundRepositoryDB(pool)
        self.courses = CourseRepositoryDB(pool)
