"""
YAML file storage for tournaments.

Layout under the data directory::

    tournaments.yaml                 registry of {id, name, createdAt}
    tournaments/<id>/tournament.yaml full TournamentState document
    tournaments/<id>/.lock           per-tournament FileLock
"""
import os
import re
import logging
import tempfile
import yaml
from filelock import FileLock
from league.errors import StorageFailure
from league.models import TournamentState, TournamentSummary

logger = logging.getLogger(__name__)

TOURNAMENT_FILE = 'tournament.yaml'
REGISTRY_FILE = 'tournaments.yaml'
_VALID_ID = re.compile(r'^[A-Za-z0-9_-]+$')


def is_valid_tournament_id(tournament_id: str) -> bool:
    """Reject ids that could escape the tournaments directory."""
    return bool(tournament_id) and bool(_VALID_ID.match(tournament_id))


def _write_yaml_atomic(path: str, data):
    """Write YAML to a temp file next to ``path`` and move it into place."""
    directory = os.path.dirname(path)
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class TournamentStore:
    """Loads and saves whole tournament documents."""

    def __init__(self, data_dir: str, lock_timeout: float = 10):
        self.data_dir = data_dir
        self.lock_timeout = lock_timeout
        self.tournaments_dir = os.path.join(data_dir, 'tournaments')
        self.registry_file = os.path.join(data_dir, REGISTRY_FILE)

    def tournament_dir(self, tournament_id: str) -> str:
        return os.path.join(self.tournaments_dir, tournament_id)

    def _tournament_file(self, tournament_id: str) -> str:
        return os.path.join(self.tournament_dir(tournament_id), TOURNAMENT_FILE)

    def lock(self, tournament_id: str) -> FileLock:
        """Lock serializing writers of one tournament."""
        directory = self.tournament_dir(tournament_id)
        os.makedirs(directory, exist_ok=True)
        return FileLock(os.path.join(directory, '.lock'), timeout=self.lock_timeout)

    def exists(self, tournament_id: str) -> bool:
        return is_valid_tournament_id(tournament_id) and os.path.exists(self._tournament_file(tournament_id))

    def load(self, tournament_id: str):
        """Return the TournamentState for ``tournament_id``, or None if there is none."""
        if not self.exists(tournament_id):
            return None
        path = self._tournament_file(tournament_id)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f'Failed to read {path}: {e}')
            raise StorageFailure('Failed to load tournament data.') from e
        if not data:
            return None
        try:
            return TournamentState.from_dict(data)
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f'Malformed tournament document {path}: {e}')
            raise StorageFailure('Tournament data is corrupt.') from e

    def save(self, state: TournamentState):
        """Overwrite the tournament document with ``state``."""
        if not is_valid_tournament_id(state.id):
            raise StorageFailure(f'Invalid tournament id: {state.id!r}')
        path = self._tournament_file(state.id)
        try:
            _write_yaml_atomic(path, state.to_dict())
        except (OSError, yaml.YAMLError) as e:
            logger.error(f'Failed to save {path}: {e}')
            raise StorageFailure('Failed to save tournament data.') from e
        logger.debug(f'Saved tournament {state.id}')

    def load_registry(self) -> list:
        """Return the registered tournaments, oldest first."""
        if not os.path.exists(self.registry_file):
            return []
        try:
            with open(self.registry_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f'Failed to parse {self.registry_file}: {e}')
            return []
        if not data:
            return []
        if not isinstance(data, dict) or not isinstance(data.get('tournaments', []), list):
            logger.warning(f'Unexpected layout in {self.registry_file}, ignoring it')
            return []
        return [TournamentSummary.from_dict(entry) for entry in data.get('tournaments', [])]

    def register(self, summary: TournamentSummary):
        """Append a tournament to the registry."""
        os.makedirs(self.data_dir, exist_ok=True)
        with FileLock(self.registry_file + '.lock', timeout=self.lock_timeout):
            entries = [entry.to_dict() for entry in self.load_registry()]
            entries.append(summary.to_dict())
            try:
                _write_yaml_atomic(self.registry_file, {'tournaments': entries})
            except (OSError, yaml.YAMLError) as e:
                logger.error(f'Failed to save {self.registry_file}: {e}')
                raise StorageFailure('Failed to save tournament registry.') from e
