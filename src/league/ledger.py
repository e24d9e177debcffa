"""
Result ledger for the group stage.

The ledger is the list of recorded results on a tournament. Every change
rebuilds the whole scoreboard from the ledger instead of patching team
records, so stored aggregates can never drift from the results.
"""
from typing import Dict, Optional

from .errors import ValidationError
from .models import MatchResult, TournamentState
from .schedule import iter_fixtures
from .standings import compute_standings


# Longer digit strings are rejected rather than parsed
MAX_SCORE_DIGITS = 9


def validate_score(value) -> int:
    """Parse a score sent by a client. Accepts ints and digit strings."""
    if isinstance(value, bool):
        raise ValidationError('Scores must be non-negative integers.')
    if isinstance(value, int):
        if value < 0:
            raise ValidationError('Scores must be non-negative integers.')
        return value
    if isinstance(value, str):
        digits = value.strip()
        if digits.isdecimal() and len(digits) <= MAX_SCORE_DIGITS:
            return int(digits)
    raise ValidationError('Scores must be non-negative integers.')


def fallback_match_id(home: str, away: str) -> str:
    return f"{home}-{away}"


def scheduled_fixture_id(state: TournamentState, home: str, away: str) -> Optional[str]:
    """Id of the scheduled fixture between ``home`` and ``away``, if there is one."""
    for fixture in iter_fixtures(state.schedule):
        if (fixture.home, fixture.away) == (home, away):
            return fixture.id
    return None


def parse_result(payload: Dict, state: Optional[TournamentState] = None) -> MatchResult:
    """
    Validate a result payload and turn it into a MatchResult.

    Without an explicit id the result takes the id of the scheduled fixture
    between the two teams, and only falls back to ``"{home}-{away}"`` for
    unscheduled matches.
    """
    home = payload.get('home')
    away = payload.get('away')
    if not isinstance(home, str) or not isinstance(away, str):
        raise ValidationError('Invalid teams.')
    home = home.strip()
    away = away.strip()
    if not home or not away or home == away:
        raise ValidationError('Invalid teams.')

    home_score = validate_score(payload.get('homeScore'))
    away_score = validate_score(payload.get('awayScore'))
    match_id = payload.get('id')
    if not match_id and state is not None:
        match_id = scheduled_fixture_id(state, home, away)
    if not match_id:
        match_id = fallback_match_id(home, away)
    return MatchResult(str(match_id), home, away, home_score, away_score)


def recompute_scoreboard(state: TournamentState):
    """Replace the scoreboard with a fresh fold of the ledger, keeping logos."""
    previous = state.scoreboard
    logos = {team: record.logo for team, record in previous.items() if record.logo}
    teams = list(state.teams)
    teams.extend(team for team in previous if team not in teams)
    state.scoreboard = compute_standings(state.results, teams, logos)


def upsert_result(state: TournamentState, payload: Dict) -> TournamentState:
    """
    Record a group-stage result, replacing any earlier result with the same id.

    Callers should pass the fixture id; without one it is resolved from the
    schedule, then falls back to ``"{home}-{away}"``.
    """
    result = parse_result(payload, state)
    state.results = [r for r in state.results if r.id != result.id]
    state.results.append(result)
    recompute_scoreboard(state)
    return state


def remove_result(state: TournamentState, match_id: str) -> TournamentState:
    """Delete the result with ``match_id``. Missing ids are ignored."""
    state.results = [r for r in state.results if r.id != match_id]
    recompute_scoreboard(state)
    return state


def find_result(state: TournamentState, match_id: str) -> Optional[MatchResult]:
    for result in state.results:
        if result.id == match_id:
            return result
    return None


def pending_fixtures(state: TournamentState):
    """Scheduled fixtures without a recorded result."""
    recorded_ids = {result.id for result in state.results}
    recorded_pairs = {(result.home, result.away) for result in state.results}
    return [
        fixture for fixture in iter_fixtures(state.schedule)
        if fixture.id not in recorded_ids
        and (fixture.home, fixture.away) not in recorded_pairs
    ]


def group_stage_complete(state: TournamentState) -> bool:
    return not pending_fixtures(state)
