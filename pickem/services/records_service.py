"""
Records - Hall of Fame de una liga.

Recorre los picks corregidos de cada miembro y se queda con los récords:
mejor porcentaje, más victorias, racha más larga, mejor semana, más puntos
y semanas perfectas.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional

from pickem.models.game import GameOutcome
from pickem.models.league import League
from pickem.models.records import LeagueRecords, PerfectWeek, RecordHolder
from pickem.repositories.game_repository import GameRepository
from pickem.repositories.league_repository import LeagueRepository
from pickem.services.grading_service import effective_timestamp, grade_pick
from pickem.services.stats_service import game_ids_for
from pickem.utils.dates import sort_key
from pickem.utils.numbers import percentage


@dataclass
class _MemberTally:
    user_id: str
    wins: int = 0
    losses: int = 0
    graded: int = 0
    points: int = 0
    longest_streak: int = 0
    # week -> [correct, incorrect, points]
    weeks: dict[int, list[int]] = field(default_factory=dict)


def _tally_member(user_id: str, league: League, outcomes: Mapping[str, GameOutcome]) -> _MemberTally:
    tally = _MemberTally(user_id)

    graded_picks = []
    for game_id, pick in league.picks_for(user_id).items():
        outcome = outcomes.get(game_id)
        if outcome is None or not outcome.is_final:
            continue
        result = grade_pick(pick, outcome)
        if result is None or not result.is_graded:
            continue
        graded_picks.append((effective_timestamp(pick, outcome), pick, outcome, result))

    # Orden cronológico para la racha
    graded_picks.sort(key=lambda item: sort_key(item[0]))

    streak = 0
    for _, pick, outcome, result in graded_picks:
        tally.graded += 1
        week = tally.weeks.setdefault(outcome.week or 1, [0, 0, 0])

        if result.has_win:
            points = pick.confidence or 1
            tally.wins += 1
            tally.points += points
            week[0] += 1
            week[2] += points
            streak += 1
            tally.longest_streak = max(tally.longest_streak, streak)
        elif result.has_loss:
            tally.losses += 1
            week[1] += 1
            streak = 0

    return tally


def _best(
    tallies: list[_MemberTally],
    value,
    extra=None,
) -> Optional[RecordHolder]:
    """First member with the strictly highest positive value."""
    holder = None
    best = 0
    for tally in tallies:
        current = value(tally)
        if current > best:
            best = current
            holder = RecordHolder(user_id=tally.user_id, value=current, **(extra(tally) if extra else {}))
    return holder


def calculate_league_records(
    league: Optional[League],
    outcomes: Optional[Mapping[str, GameOutcome]],
) -> LeagueRecords:
    """Hall of Fame records for the members of a league."""
    if league is None:
        return LeagueRecords(league_code="")

    records = LeagueRecords(league_code=league.code)
    if not outcomes:
        return records

    tallies = [_tally_member(user_id, league, outcomes) for user_id in league.members]

    for tally in tallies:
        for week, (correct, incorrect, points) in sorted(tally.weeks.items()):
            if correct > 0 and incorrect == 0:
                records.perfect_weeks.append(
                    PerfectWeek(user_id=tally.user_id, week=week, points=points)
                )

    def win_pct(tally: _MemberTally) -> float:
        return percentage(tally.wins, tally.wins + tally.losses)

    # Empate en porcentaje: gana quien tenga más picks decididos
    ranked_pct = sorted(
        (t for t in tallies if t.wins + t.losses > 0),
        key=lambda t: (win_pct(t), t.wins + t.losses),
        reverse=True,
    )
    if ranked_pct and win_pct(ranked_pct[0]) > 0:
        top = ranked_pct[0]
        records.highest_win_percentage = RecordHolder(
            user_id=top.user_id,
            value=win_pct(top),
            wins=top.wins,
            total=top.wins + top.losses,
        )

    def best_week(tally: _MemberTally) -> tuple[int, int]:
        # (points, week) de la mejor semana; la primera semana gana empates
        best_points, best_week_number = 0, 0
        for week, (_, _, points) in sorted(tally.weeks.items()):
            if points > best_points:
                best_points, best_week_number = points, week
        return best_points, best_week_number

    records.most_wins = _best(tallies, lambda t: t.wins)
    records.longest_win_streak = _best(tallies, lambda t: t.longest_streak)
    records.most_points_in_week = _best(
        tallies,
        lambda t: best_week(t)[0],
        extra=lambda t: {"week": best_week(t)[1]},
    )
    records.most_points_in_season = _best(tallies, lambda t: t.points)
    records.iron_man = _best(tallies, lambda t: t.graded)

    return records


class RecordsServiceError(Exception):
    """Base exception for records service errors."""
    pass


class RecordsLeagueNotFoundError(RecordsServiceError):
    """Raised when the league does not exist."""
    pass


class RecordsService:
    def __init__(self, leagues: LeagueRepository, games: GameRepository):
        self.leagues = leagues
        self.games = games

    async def get_league_records(self, league_code: str) -> LeagueRecords:
        league = await self.leagues.get_by_code(league_code)
        if not league:
            raise RecordsLeagueNotFoundError(f"League {league_code} not found")

        outcomes = await self.games.get_outcomes(game_ids_for([league]))
        return calculate_league_records(league, outcomes)
