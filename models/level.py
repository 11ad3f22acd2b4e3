from enum import Enum


class Level(str, Enum):
    """Skill tier chosen per round. Drives scoring-distance and goal targets."""
    BOGEY_GOLF = "Bogey Golf"
    BREAK_80 = "Break 80"
    SCRATCH = "Scratch"
