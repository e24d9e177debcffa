"""
Tournament operations keyed by tournament id.

Each mutating call loads the tournament document, runs the core operation on
it and writes the whole document back, holding the tournament's lock for the
duration. Different tournaments use different locks.
"""
import re
import time
import logging
from datetime import datetime
from filelock import Timeout
from league.errors import InvalidInput, NotFound, StorageFailure
from league.knockout import generate_bracket, record_knockout_result
from league.ledger import remove_result, upsert_result
from league.models import TournamentState
from league.schedule import generate_schedule
from league.standings import create_scoreboard
from uploads import MAX_UPLOAD_SIZE, decode_data_url, logo_extension, save_logo

logger = logging.getLogger(__name__)

_BASE36_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def slugify(name: str) -> str:
    """Convert a tournament name to a URL-safe slug."""
    slug = name.lower().strip()
    slug = re.sub(r'[^a-z0-9]+', '-', slug)
    slug = slug.strip('-')
    return slug or 'tournament'


def to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


def _team_entries(teams):
    """Normalize ``teams`` to ``(name, logo data URL or None)`` pairs, skipping blanks."""
    entries = []
    for team in teams:
        if isinstance(team, dict):
            name, logo = team.get('name'), team.get('logo')
        else:
            name, logo = team, None
        name = str(name).strip() if name is not None else ''
        if name:
            entries.append((name, logo))
    return entries


class TournamentService:
    def __init__(self, store, uploads_dir):
        self.store = store
        self.uploads_dir = uploads_dir

    def generate_tournament_id(self, name: str) -> str:
        slug = slugify(name)
        stamp = int(time.time() * 1000)
        tournament_id = f'{slug}-{to_base36(stamp)}'
        while self.store.exists(tournament_id):
            stamp += 1
            tournament_id = f'{slug}-{to_base36(stamp)}'
        return tournament_id

    def create_tournament(self, name, teams) -> TournamentState:
        """
        Create a tournament with its round-robin schedule and an empty scoreboard.

        ``teams`` holds team names or ``{'name': ..., 'logo': <data URL>}`` dicts.
        Logos that cannot be decoded are skipped.
        """
        name = name.strip() if isinstance(name, str) else ''
        if not name or not isinstance(teams, list) or len(teams) < 2:
            raise InvalidInput('Tournament name and at least two teams are required.')
        entries = _team_entries(teams)
        if len(entries) < 2:
            raise InvalidInput('At least two valid team names are required.')

        team_names = [team for team, _ in entries]
        schedule = generate_schedule(team_names)
        tournament_id = self.generate_tournament_id(name)

        logos = {}
        for team, logo in entries:
            if not logo:
                continue
            decoded = decode_data_url(logo)
            if decoded is None:
                logger.warning(f'Ignoring unreadable logo for {team!r}')
                continue
            data, ext = decoded
            logos[team] = save_logo(self.uploads_dir, tournament_id, team, data, ext)

        state = TournamentState(
            id=tournament_id,
            name=name,
            created_at=datetime.now().isoformat(),
            teams=team_names,
            schedule=schedule,
            scoreboard=create_scoreboard(team_names, logos),
        )
        try:
            with self._lock(tournament_id):
                self.store.save(state)
            self.store.register(state.summary())
        except Timeout as e:
            raise StorageFailure('Tournament is busy, try again.') from e
        logger.info(f'Created tournament {tournament_id} with {len(team_names)} teams')
        return state

    def list_tournaments(self):
        return self.store.load_registry()

    def get_tournament(self, tournament_id) -> TournamentState:
        state = self.store.load(tournament_id)
        if state is None:
            raise NotFound('Tournament not found.')
        return state

    def _lock(self, tournament_id):
        return self.store.lock(tournament_id)

    def _mutate(self, tournament_id, operation):
        """Run ``operation(state)`` under the tournament lock and save the state."""
        if not self.store.exists(tournament_id):
            raise NotFound('Tournament not found.')
        try:
            with self._lock(tournament_id):
                state = self.get_tournament(tournament_id)
                outcome = operation(state)
                self.store.save(state)
                return outcome
        except Timeout as e:
            raise StorageFailure('Tournament is busy, try again.') from e

    def upsert_result(self, tournament_id, payload) -> TournamentState:
        return self._mutate(tournament_id, lambda state: upsert_result(state, payload))

    def remove_result(self, tournament_id, match_id) -> TournamentState:
        if not match_id:
            raise InvalidInput('Missing match id.')
        return self._mutate(tournament_id, lambda state: remove_result(state, str(match_id)))

    def generate_bracket(self, tournament_id):
        return self._mutate(tournament_id, generate_bracket)

    def record_knockout_result(self, tournament_id, payload):
        return self._mutate(tournament_id, lambda state: record_knockout_result(state, payload))

    def attach_logo(self, tournament_id, team, filename, data) -> str:
        """Store an uploaded logo for ``team`` and return its URL."""
        ext = logo_extension(filename)
        if ext is None:
            raise InvalidInput('Invalid file type.')
        if not data or len(data) > MAX_UPLOAD_SIZE:
            raise InvalidInput('Logo file is empty or too large.')

        def attach(state):
            if team not in state.scoreboard:
                raise NotFound('Team not found.')
            url = save_logo(self.uploads_dir, state.id, team, data, ext)
            state.scoreboard[team].logo = url
            return url

        return self._mutate(tournament_id, attach)
