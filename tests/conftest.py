"""
Shared pytest fixtures for the tournament manager tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from league.ledger import upsert_result
from league.models import TournamentState
from league.schedule import generate_schedule
from league.standings import create_scoreboard
from storage import TournamentStore
from service import TournamentService

# Scores for the four-team schedule that finish A 9pts, B 6pts, C 3pts, D 0pts.
# generate_schedule(['A', 'B', 'C', 'D']) yields:
#   r0: A-D, B-C   r1: A-C, D-B   r2: A-B, C-D
FOUR_TEAM_RESULTS = [
    {'id': 'r0-m0', 'home': 'A', 'away': 'D', 'homeScore': 1, 'awayScore': 0},
    {'id': 'r0-m1', 'home': 'B', 'away': 'C', 'homeScore': 1, 'awayScore': 0},
    {'id': 'r1-m0', 'home': 'A', 'away': 'C', 'homeScore': 1, 'awayScore': 0},
    {'id': 'r1-m1', 'home': 'D', 'away': 'B', 'homeScore': 0, 'awayScore': 1},
    {'id': 'r2-m0', 'home': 'A', 'away': 'B', 'homeScore': 1, 'awayScore': 0},
    {'id': 'r2-m1', 'home': 'C', 'away': 'D', 'homeScore': 1, 'awayScore': 0},
]


def make_state(teams, tournament_id='cup-test', logos=None):
    """Build a fresh in-memory tournament for ``teams``."""
    return TournamentState(
        id=tournament_id,
        name='Test Cup',
        created_at='2026-01-01T00:00:00',
        teams=list(teams),
        schedule=generate_schedule(teams),
        scoreboard=create_scoreboard(teams, logos),
    )


@pytest.fixture
def four_teams():
    return ['A', 'B', 'C', 'D']


@pytest.fixture
def new_state(four_teams):
    """Four-team tournament with no results yet."""
    return make_state(four_teams)


@pytest.fixture
def completed_state(four_teams):
    """Four-team tournament with every group fixture played."""
    state = make_state(four_teams)
    for payload in FOUR_TEAM_RESULTS:
        upsert_result(state, payload)
    return state


@pytest.fixture
def store(tmp_path):
    return TournamentStore(str(tmp_path / 'data'), lock_timeout=1)


@pytest.fixture
def service(store, tmp_path):
    return TournamentService(store, str(tmp_path / 'uploads'))


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the Flask app at temporary data and uploads directories."""
    import app as app_module

    data_dir = tmp_path / 'data'
    uploads_dir = tmp_path / 'uploads'
    data_dir.mkdir()
    uploads_dir.mkdir()
    monkeypatch.setattr(app_module, 'DATA_DIR', str(data_dir))
    monkeypatch.setattr(app_module, 'UPLOADS_DIR', str(uploads_dir))
    monkeypatch.setattr(app_module, 'LOCK_TIMEOUT', 1)
    return str(data_dir)


@pytest.fixture
def client(temp_data_dir):
    """Flask test client backed by temporary storage."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client
