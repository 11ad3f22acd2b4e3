from pydantic import BaseModel, ConfigDict
from typing import Optional


class RoundSummary(BaseModel):
    """
    Read-only metrics derived from a RoundState.

    Percentages are None whenever their denominator is zero.
    """
    model_config = ConfigDict(frozen=True)

    strokes: Optional[int] = None
    to_par: Optional[int] = None

    sd_pct: Optional[int] = None
    sd_made: int = 0
    sd_eligible: int = 0

    # Not-Puttable-In-Regulation: eligible holes where scoring distance was NOT reached
    npir_pct: Optional[int] = None
    npir_made: int = 0
    npir_eligible: int = 0

    p3_pct: Optional[int] = None
    p3_made: int = 0
    p3_eligible: int = 0

    avg_putts: Optional[float] = None
    putts_lost_total: float = 0.0

    missed_putts_6ft_total: int = 0
    missed_putts_6ft_pct: Optional[int] = None

    tee_shots_fairway_total: int = 0
    tee_shots_trouble_total: int = 0
    tee_shots_fairway_pct: Optional[int] = None

    strokes_lost_total: float = 0.0
