class DatabaseError(Exception):
    """Base for persistence errors raised by the repositories."""


class NotFoundError(DatabaseError):
    """No row for the given id."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class DuplicateError(DatabaseError):
    """Unique constraint violation (e.g. a template name reused by the same user)."""


class IntegrityError(DatabaseError):
    """Foreign key or check constraint violation."""


class RoundFinishedError(DatabaseError):
    """Finished rounds are frozen; saves against them are rejected."""

    def __init__(self, round_id: str):
        super().__init__(f"Round {round_id} is finished")
        self.round_id = round_id
