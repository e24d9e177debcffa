"""
Knockout bracket: two semi-finals seeded from the group standings, then a final.
"""
from enum import Enum
from typing import Dict, Optional

from .errors import NotEligible, NotFound, ValidationError
from .ledger import group_stage_complete, validate_score
from .models import Bracket, KnockoutMatch, TournamentState
from .standings import rank_standings

BRACKET_SIZE = 4
FINAL_ID = 'final'


class BracketState(str, Enum):
    NO_BRACKET = 'no_bracket'
    SEEDED = 'seeded'
    SEMI_FINALS_IN_PROGRESS = 'semi_finals_in_progress'
    FINAL_PENDING = 'final_pending'
    COMPLETE = 'complete'


def bracket_state(bracket: Optional[Bracket]) -> BracketState:
    """Derive the knockout phase from the bracket contents."""
    if bracket is None:
        return BracketState.NO_BRACKET
    if bracket.final.winner:
        return BracketState.COMPLETE
    decided = sum(1 for sf in bracket.semi_finals if sf.winner)
    if decided == len(bracket.semi_finals):
        return BracketState.FINAL_PENDING
    if decided:
        return BracketState.SEMI_FINALS_IN_PROGRESS
    return BracketState.SEEDED


def champion(bracket: Optional[Bracket]) -> Optional[str]:
    if bracket is None:
        return None
    return bracket.final.winner


def seed_bracket(ranked_teams) -> Bracket:
    """
    Seed the semi-finals from the top four ranked team names.

    1st plays 4th and 2nd plays 3rd, so the top two seeds can only meet in
    the final.
    """
    first, second, third, fourth = ranked_teams[:BRACKET_SIZE]
    return Bracket(
        semi_finals=[
            KnockoutMatch('sf1', home=first, away=fourth),
            KnockoutMatch('sf2', home=second, away=third),
        ],
        final=KnockoutMatch(FINAL_ID),
    )


def generate_bracket(state: TournamentState) -> Bracket:
    """
    Create the knockout bracket once every group fixture has a result.

    Calling it again after the bracket exists returns the existing bracket.
    """
    if state.knockout is not None:
        return state.knockout
    if not group_stage_complete(state):
        raise NotEligible('Group stage is not yet complete.')
    if len(state.scoreboard) < BRACKET_SIZE:
        raise NotEligible('At least four teams are required for semi finals.')

    ranked = [team for team, _ in rank_standings(state.scoreboard)]
    state.knockout = seed_bracket(ranked)
    return state.knockout


def _find_match(bracket: Bracket, match_id: str) -> Optional[KnockoutMatch]:
    if match_id == FINAL_ID:
        return bracket.final
    for sf in bracket.semi_finals:
        if sf.id == match_id:
            return sf
    return None


def decide_winner(match: KnockoutMatch) -> str:
    # No extra time or penalties: a draw goes to the home team
    if match.away_score > match.home_score:
        return match.away
    return match.home


def record_knockout_result(state: TournamentState, payload: Dict) -> Bracket:
    """
    Record a semi-final or final score and advance the winner.

    When both semi-finals are decided and the final has no teams yet, the
    sf1 winner becomes the final's home team and the sf2 winner its away team.
    """
    bracket = state.knockout
    if bracket is None:
        raise NotFound('No knockout bracket found.')

    match_id = payload.get('id')
    if not match_id:
        raise ValidationError('Invalid knockout update payload.')
    home_score = validate_score(payload.get('homeScore'))
    away_score = validate_score(payload.get('awayScore'))

    match = _find_match(bracket, str(match_id))
    if match is None:
        raise NotFound('Match not found in knockout bracket.')
    if match.home is None or match.away is None:
        raise NotEligible('Final teams are not decided yet.')

    updated = Bracket.from_dict(bracket.to_dict())
    match = _find_match(updated, match.id)
    match.home_score = home_score
    match.away_score = away_score
    match.winner = decide_winner(match)

    final = updated.final
    if all(sf.winner for sf in updated.semi_finals) and not final.home and not final.away:
        final.home = updated.semi_finals[0].winner
        final.away = updated.semi_finals[1].winner

    state.knockout = updated
    return updated
