"""
Unit tests for the group-stage result ledger.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from conftest import FOUR_TEAM_RESULTS, make_state
from league.errors import InvalidInput, ValidationError
from league.ledger import (
    group_stage_complete,
    pending_fixtures,
    remove_result,
    upsert_result,
    validate_score,
)


def payload(match_id, home, away, home_score, away_score):
    return {'id': match_id, 'home': home, 'away': away, 'homeScore': home_score, 'awayScore': away_score}


class TestValidateScore:
    """Score parsing."""

    @pytest.mark.parametrize('value,expected', [(0, 0), (7, 7), ('3', 3), (' 12 ', 12), ('9' * 9, 999999999)])
    def test_accepted(self, value, expected):
        assert validate_score(value) == expected

    @pytest.mark.parametrize('value', [-1, '-1', 'abc', '', None, 1.5, True, '2.5', [], '1' * 10, '1' * 5000])
    def test_rejected(self, value):
        with pytest.raises(ValidationError, match='non-negative integers'):
            validate_score(value)

    def test_validation_error_is_invalid_input(self):
        with pytest.raises(InvalidInput):
            validate_score(-3)


class TestUpsertResult:
    """Recording and replacing results."""

    def test_appends_result_and_updates_standings(self, new_state):
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 2, 0))
        assert len(new_state.results) == 1
        assert new_state.scoreboard['A'].points == 3
        assert new_state.scoreboard['D'].losses == 1

    def test_resubmission_replaces(self, new_state):
        """Same id twice: ledger length unchanged, latest score wins."""
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 2, 0))
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 0, 3))
        assert len(new_state.results) == 1
        assert new_state.results[0].home_score == 0
        assert new_state.scoreboard['A'].points == 0
        assert new_state.scoreboard['D'].points == 3
        assert new_state.scoreboard['A'].played == 1

    def test_identical_resubmission_is_noop(self, new_state):
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 1, 1))
        before = new_state.to_dict()
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 1, 1))
        assert new_state.to_dict() == before

    def test_missing_id_resolves_to_fixture(self, new_state):
        upsert_result(new_state, {'home': 'A', 'away': 'B', 'homeScore': 1, 'awayScore': 0})
        assert new_state.results[0].id == 'r2-m0'

    def test_fallback_id_for_unscheduled_pairing(self, new_state):
        upsert_result(new_state, {'home': 'B', 'away': 'A', 'homeScore': 1, 'awayScore': 0})
        assert new_state.results[0].id == 'B-A'

    def test_string_scores(self, new_state):
        upsert_result(new_state, payload('r0-m0', 'A', 'D', '4', '1'))
        assert new_state.results[0].home_score == 4
        assert new_state.scoreboard['A'].goal_difference == 3

    def test_unscheduled_team_gets_a_record(self, new_state):
        upsert_result(new_state, payload('friendly', 'A', 'Guests', 0, 0))
        assert new_state.scoreboard['Guests'].draws == 1

    @pytest.mark.parametrize('bad', [
        payload('x', 'A', 'A', 1, 0),
        payload('x', '', 'B', 1, 0),
        payload('x', 'A', '  ', 1, 0),
        {'id': 'x', 'away': 'B', 'homeScore': 1, 'awayScore': 0},
    ])
    def test_invalid_teams(self, new_state, bad):
        with pytest.raises(ValidationError, match='Invalid teams'):
            upsert_result(new_state, bad)
        assert new_state.results == []

    @pytest.mark.parametrize('home_score,away_score', [(-1, 0), (0, -2), ('x', 1), (1, None)])
    def test_invalid_scores_leave_ledger_untouched(self, new_state, home_score, away_score):
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 1, 0))
        with pytest.raises(ValidationError):
            upsert_result(new_state, payload('r0-m0', 'A', 'D', home_score, away_score))
        assert new_state.results[0].home_score == 1
        assert new_state.scoreboard['A'].points == 3

    def test_logos_survive_edits(self):
        state = make_state(['A', 'B', 'C', 'D'], logos={'A': '/uploads/cup/a.png'})
        upsert_result(state, payload('r0-m0', 'A', 'D', 1, 0))
        upsert_result(state, payload('r0-m0', 'A', 'D', 0, 1))
        assert state.scoreboard['A'].logo == '/uploads/cup/a.png'

    def test_recompute_matches_full_fold(self, completed_state):
        for record in completed_state.scoreboard.values():
            assert record.points == 3 * record.wins + record.draws
            assert record.played == record.wins + record.draws + record.losses
        points = {team: r.points for team, r in completed_state.scoreboard.items()}
        assert points == {'A': 9, 'B': 6, 'C': 3, 'D': 0}


class TestRemoveResult:
    """Deleting results."""

    def test_remove_restores_standings(self, new_state):
        upsert_result(new_state, payload('r0-m0', 'A', 'D', 1, 0))
        before = {team: r.to_dict() for team, r in new_state.scoreboard.items()}
        upsert_result(new_state, payload('r0-m1', 'B', 'C', 2, 2))
        remove_result(new_state, 'r0-m1')
        assert {team: r.to_dict() for team, r in new_state.scoreboard.items()} == before
        assert [r.id for r in new_state.results] == ['r0-m0']

    def test_remove_missing_is_ignored(self, new_state):
        remove_result(new_state, 'nope')
        assert new_state.results == []


class TestGroupStageCompletion:
    """Completion detection."""

    def test_new_tournament_incomplete(self, new_state):
        assert not group_stage_complete(new_state)
        assert len(pending_fixtures(new_state)) == 6

    def test_all_but_one(self, new_state):
        for p in FOUR_TEAM_RESULTS[:-1]:
            upsert_result(new_state, p)
        assert not group_stage_complete(new_state)
        assert [f.id for f in pending_fixtures(new_state)] == ['r2-m1']

    def test_complete(self, completed_state):
        assert group_stage_complete(completed_state)

    def test_fallback_ids_count_towards_completion(self, new_state):
        for p in FOUR_TEAM_RESULTS:
            without_id = {k: v for k, v in p.items() if k != 'id'}
            upsert_result(new_state, without_id)
        assert group_stage_complete(new_state)

    def test_hyphenated_names_without_ids(self):
        """Team names containing '-' must not make two fixtures share an id."""
        state = make_state(['A', 'B-C', 'A-B', 'C'])
        for fixture in pending_fixtures(state):
            upsert_result(state, {'home': fixture.home, 'away': fixture.away,
                                  'homeScore': 1, 'awayScore': 0})
        assert len(state.results) == 6
        assert len({result.id for result in state.results}) == 6
        assert group_stage_complete(state)

    def test_extra_results_do_not_complete_group(self, new_state):
        """Unscheduled results never stand in for missing fixtures."""
        for p in FOUR_TEAM_RESULTS[:-1]:
            upsert_result(new_state, p)
        upsert_result(new_state, payload('friendly', 'A', 'B', 0, 0))
        assert len(new_state.results) == 6
        assert not group_stage_complete(new_state)
