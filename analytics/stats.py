from __future__ import annotations

from typing import Optional

from models.hole import TeeShotResult
from models.round import RoundState
from models.summary import RoundSummary

from .losses import hole_strokes_lost, par3_equivalent, putting_lost
from .rounding import percentage, round1


def compute_round_summary(round_state: RoundState) -> RoundSummary:
    """
    Derive the round summary in a single pass over the active holes.

    Holes without strokes are left out of every strokes-based figure (so
    to_par compares against the par of played holes only), but their putts
    and mishaps still count toward the running loss totals.
    The result depends only on the input, so repeated calls on the same
    state give identical summaries.
    """
    total_strokes = 0
    played_par = 0
    holes_with_strokes = 0

    sd_eligible = sd_made = 0
    npir_eligible = npir_made = 0
    p3_eligible = p3_made = 0

    putts_entered = 0
    putts_total = 0
    putts_lost_total = 0

    missed_putts_6ft_total = 0
    holes_with_putts = 0
    holes_with_missed_putts_6ft = 0

    tee_shots_fairway = 0
    tee_shots_trouble = 0

    strokes_lost_total = 0.0

    for hole in round_state.active_holes:
        strokes_lost_total += hole_strokes_lost(hole, round_state.weights)

        if hole.strokes is not None:
            holes_with_strokes += 1
            total_strokes += hole.strokes
            played_par += hole.par

            # Unchecked reached_sd counts as a miss once strokes exist
            if hole.par != 3:
                sd_eligible += 1
                npir_eligible += 1
                if hole.reached_sd is True:
                    sd_made += 1
                else:
                    npir_made += 1

            p3 = par3_equivalent(round_state.level, hole)
            if p3 is not None:
                p3_eligible += 1
                if p3:
                    p3_made += 1

        if hole.putts is not None:
            putts_entered += 1
            putts_total += hole.putts
            putts_lost_total += putting_lost(hole.putts)
            holes_with_putts += 1

        if hole.missed_putts_6ft:
            missed_putts_6ft_total += hole.missed_putts_6ft
            if hole.putts is not None:
                holes_with_missed_putts_6ft += 1

        if hole.par != 3:
            if hole.tee_shot_result == TeeShotResult.FAIRWAY:
                tee_shots_fairway += 1
            elif hole.tee_shot_result == TeeShotResult.TROUBLE:
                tee_shots_trouble += 1

    strokes: Optional[int] = total_strokes if holes_with_strokes else None
    to_par: Optional[int] = total_strokes - played_par if holes_with_strokes else None
    avg_putts = round1(putts_total / putts_entered) if putts_entered else None

    return RoundSummary(
        strokes=strokes,
        to_par=to_par,
        sd_pct=percentage(sd_made, sd_eligible),
        sd_made=sd_made,
        sd_eligible=sd_eligible,
        npir_pct=percentage(npir_made, npir_eligible),
        npir_made=npir_made,
        npir_eligible=npir_eligible,
        p3_pct=percentage(p3_made, p3_eligible),
        p3_made=p3_made,
        p3_eligible=p3_eligible,
        avg_putts=avg_putts,
        putts_lost_total=round1(putts_lost_total),
        missed_putts_6ft_total=missed_putts_6ft_total,
        missed_putts_6ft_pct=percentage(holes_with_missed_putts_6ft, holes_with_putts),
        tee_shots_fairway_total=tee_shots_fairway,
        tee_shots_trouble_total=tee_shots_trouble,
        tee_shots_fairway_pct=percentage(
            tee_shots_fairway, tee_shots_fairway + tee_shots_trouble
        ),
        strokes_lost_total=round1(strokes_lost_total),
    )
