from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.local_store import JsonFileStorage
from database.repositories import CourseRepositoryDB, RoundRepositoryDB, StoredRound
from database.storage import StorageAdapter
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    NotFoundError,
    RoundFinishedError,
)

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "JsonFileStorage",
    "StorageAdapter",
    "CourseRepositoryDB",
    "RoundRepositoryDB",
    "StoredRound",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "IntegrityError",
    "RoundFinishedError",
]
