from .course_repo import CourseRepositoryDB
from .round_repo import RoundRepositoryDB, StoredRound

__all__ = ["CourseRepositoryDB", "RoundRepositoryDB", "StoredRound"]
