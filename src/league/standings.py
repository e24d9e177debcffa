"""
Group-stage standings: folding match results into team records and ranking them.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from .models import MatchResult, TeamRecord

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1


def create_scoreboard(teams: Iterable[str], logos: Optional[Dict[str, str]] = None) -> Dict[str, TeamRecord]:
    """Create a zeroed record for every team, carrying its logo if one is known."""
    logos = logos or {}
    return {team: TeamRecord(logo=logos.get(team)) for team in teams}


def apply_result(scoreboard: Dict[str, TeamRecord], result: MatchResult):
    """Add one match result to the scoreboard (mutates it in place)."""
    for team in (result.home, result.away):
        if team not in scoreboard:
            scoreboard[team] = TeamRecord()

    home = scoreboard[result.home]
    away = scoreboard[result.away]

    home.played += 1
    away.played += 1
    home.goals_for += result.home_score
    home.goals_against += result.away_score
    away.goals_for += result.away_score
    away.goals_against += result.home_score
    home.goal_difference = home.goals_for - home.goals_against
    away.goal_difference = away.goals_for - away.goals_against

    if result.home_score > result.away_score:
        home.wins += 1
        away.losses += 1
        home.points += POINTS_FOR_WIN
    elif result.home_score < result.away_score:
        away.wins += 1
        home.losses += 1
        away.points += POINTS_FOR_WIN
    else:
        home.draws += 1
        away.draws += 1
        home.points += POINTS_FOR_DRAW
        away.points += POINTS_FOR_DRAW


def compute_standings(results: Iterable[MatchResult], teams: Iterable[str] = (),
                      logos: Optional[Dict[str, str]] = None) -> Dict[str, TeamRecord]:
    """
    Build the scoreboard from scratch.

    The team set is ``teams`` plus every team named in any result, so a team
    that only shows up in results still gets a record.
    """
    scoreboard = create_scoreboard(teams, logos)
    for result in results:
        apply_result(scoreboard, result)
    return scoreboard


def standings_sort_key(team: str, record: TeamRecord) -> Tuple[int, int, int, str]:
    # Points, goal difference, goals for (all descending), then name
    return (-record.points, -record.goal_difference, -record.goals_for, team)


def rank_standings(scoreboard: Dict[str, TeamRecord]) -> List[Tuple[str, TeamRecord]]:
    """Return ``(team, record)`` pairs from first to last place."""
    return sorted(scoreboard.items(), key=lambda item: standings_sort_key(*item))


def standings_table(scoreboard: Dict[str, TeamRecord]) -> List[Dict]:
    """Ranked rows for display: position, team name and the record fields."""
    table = []
    for position, (team, record) in enumerate(rank_standings(scoreboard), start=1):
        row = {'position': position, 'team': team}
        row.update(record.to_dict())
        table.append(row)
    return table
