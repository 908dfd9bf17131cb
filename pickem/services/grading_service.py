"""
Grading - Corrige un pick contra el resultado final de un partido.

Cada pick puede tener dos piernas independientes:
- Spread: el equipo elegido, ajustado por su línea, contra el marcador rival
- Total: over/under contra la suma de ambos marcadores

Grading never raises: missing outcomes, missing lines and unparseable
scores all degrade to "not graded".
"""

import logging
from datetime import datetime
from typing import Optional

from pickem.models.game import GameOutcome
from pickem.models.pick import GradeResult, LegResult, Pick, TotalSelection
from pickem.utils.numbers import is_finite_number

logger = logging.getLogger(__name__)


def _compare(score: float, target: float) -> LegResult:
    if score > target:
        return LegResult.WIN
    if score < target:
        return LegResult.LOSS
    return LegResult.PUSH


def grade_spread(team: Optional[str], outcome: GameOutcome) -> LegResult:
    """
    Grade the spread leg for the picked team.

    The team's own line is applied to its score and compared with the
    opponent's raw score. No line means no grade.
    """
    if not team:
        return LegResult.NONE

    if team == outcome.away_team:
        line = outcome.away_spread
        score, opponent = outcome.away_score, outcome.home_score
    elif team == outcome.home_team:
        line = outcome.home_spread
        score, opponent = outcome.home_score, outcome.away_score
    else:
        logger.debug("Team %r is not part of %s @ %s", team, outcome.away_team, outcome.home_team)
        return LegResult.NONE

    if line is None:
        return LegResult.NONE

    return _compare(score + line, opponent)


def grade_total(selection: Optional[TotalSelection], outcome: GameOutcome) -> LegResult:
    """Grade the over/under leg against the combined score."""
    if selection is None or outcome.over_under is None:
        return LegResult.NONE

    combined = outcome.home_score + outcome.away_score

    if selection is TotalSelection.OVER:
        return _compare(combined, outcome.over_under)

    # Under gana cuando el total queda por debajo de la línea
    return _compare(outcome.over_under, combined)


def grade_pick(pick: Optional[Pick], outcome: Optional[GameOutcome]) -> Optional[GradeResult]:
    """
    Grade both legs of a pick.

    Returns None when there is no outcome or its scores are not finite
    numbers. A pick with neither leg gradable returns a GradeResult with
    both legs set to `none`.
    """
    if outcome is None:
        return None
    if not is_finite_number(outcome.home_score) or not is_finite_number(outcome.away_score):
        return None

    if pick is None:
        return GradeResult()

    return GradeResult(
        spread_result=grade_spread(pick.spread, outcome),
        total_result=grade_total(pick.total, outcome),
    )


def effective_timestamp(pick: Pick, outcome: GameOutcome) -> Optional[datetime]:
    """Pick timestamp, falling back to when the game went final."""
    return pick.timestamp or outcome.finalized_at


def is_pick_correct(pick: Optional[Pick], outcome: Optional[GameOutcome]) -> bool:
    """A pick counts as correct when at least one of its legs won."""
    result = grade_pick(pick, outcome)
    return result is not None and result.has_win
