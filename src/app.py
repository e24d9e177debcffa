"""
Flask web application for the league-plus-cup tournament manager.
"""
import os
from flask import Flask, request, jsonify, send_from_directory, abort
from league.errors import TournamentError, InvalidInput, NotFound, NotEligible, StorageFailure
from league.knockout import bracket_state, champion
from league.standings import standings_table
from storage import TournamentStore, is_valid_tournament_id
from service import TournamentService

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
UPLOADS_DIR = os.environ.get('TOURNAMENT_UPLOADS_DIR', os.path.join(DATA_DIR, 'uploads'))
LOCK_TIMEOUT = float(os.environ.get('TOURNAMENT_LOCK_TIMEOUT', '10'))
MAX_REQUEST_SIZE = 50 * 1024 * 1024  # 50 MB, creation payloads carry base64 logos

app.config['MAX_CONTENT_LENGTH'] = MAX_REQUEST_SIZE

ERROR_STATUS = {
    InvalidInput: 400,
    NotEligible: 400,
    NotFound: 404,
    StorageFailure: 500,
}


def get_service() -> TournamentService:
    """Service bound to the configured data and uploads directories."""
    return TournamentService(TournamentStore(DATA_DIR, LOCK_TIMEOUT), UPLOADS_DIR)


def _json_payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput('Invalid JSON payload.')
    return data


def _check_id(tournament_id):
    if not is_valid_tournament_id(tournament_id):
        raise NotFound('Tournament not found.')


def _knockout_response(bracket):
    return {
        'knockout': bracket.to_dict() if bracket else None,
        'state': bracket_state(bracket).value,
        'champion': champion(bracket),
    }


@app.errorhandler(TournamentError)
def handle_tournament_error(error):
    status = 400
    for error_type, code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            status = code
            break
    if status >= 500:
        app.logger.error(f'{request.method} {request.path} failed: {error.message}')
    else:
        app.logger.info(f'{request.method} {request.path} rejected: {error.message}')
    return jsonify({'error': error.message}), status


@app.route('/tournaments', methods=['GET'])
def list_tournaments():
    """List all registered tournaments."""
    summaries = get_service().list_tournaments()
    return jsonify({'tournaments': [s.to_dict() for s in summaries]})


@app.route('/tournaments', methods=['POST'])
def create_tournament():
    """Create a tournament from ``{name, teams: [{name, logo?}, ...]}``."""
    data = _json_payload()
    state = get_service().create_tournament(data.get('name'), data.get('teams'))
    app.logger.info(f'Tournament "{state.name}" created as {state.id}')
    return jsonify({'id': state.id, 'name': state.name}), 201


@app.route('/tournaments/<tournament_id>/schedule', methods=['GET'])
def get_schedule(tournament_id):
    _check_id(tournament_id)
    state = get_service().get_tournament(tournament_id)
    return jsonify({'schedule': state.to_dict()['schedule']})


@app.route('/tournaments/<tournament_id>/scoreboard', methods=['GET'])
def get_scoreboard(tournament_id):
    _check_id(tournament_id)
    state = get_service().get_tournament(tournament_id)
    data = state.to_dict()
    return jsonify({
        'scoreboard': data['scoreboard'],
        'standings': standings_table(state.scoreboard),
        'results': data['results'],
        'knockout': data['knockout'],
        'state': bracket_state(state.knockout).value,
    })


@app.route('/tournaments/<tournament_id>/update-score', methods=['POST'])
def update_score(tournament_id):
    """Record or replace a group-stage result."""
    _check_id(tournament_id)
    payload = _json_payload()
    state = get_service().upsert_result(tournament_id, payload)
    data = state.to_dict()
    app.logger.info(f'Score updated in {tournament_id}: {data["results"][-1]["id"]}')
    return jsonify({'success': True, 'scoreboard': data['scoreboard'], 'results': data['results']})


@app.route('/tournaments/<tournament_id>/clear-score', methods=['POST'])
def clear_score(tournament_id):
    """Delete a group-stage result by match id."""
    _check_id(tournament_id)
    payload = _json_payload()
    state = get_service().remove_result(tournament_id, payload.get('id'))
    data = state.to_dict()
    return jsonify({'success': True, 'scoreboard': data['scoreboard'], 'results': data['results']})


@app.route('/tournaments/<tournament_id>/generate-playoff', methods=['POST'])
def generate_playoff(tournament_id):
    """Seed the knockout bracket from the final group standings."""
    _check_id(tournament_id)
    bracket = get_service().generate_bracket(tournament_id)
    app.logger.info(f'Knockout bracket ready for {tournament_id}')
    return jsonify({'knockout': bracket.to_dict()})


@app.route('/tournaments/<tournament_id>/knockout', methods=['GET'])
def get_knockout(tournament_id):
    _check_id(tournament_id)
    state = get_service().get_tournament(tournament_id)
    if state.knockout is None:
        raise NotFound('No knockout bracket found.')
    return jsonify(_knockout_response(state.knockout))


@app.route('/tournaments/<tournament_id>/update-knockout', methods=['POST'])
def update_knockout(tournament_id):
    """Record a semi-final or final result."""
    _check_id(tournament_id)
    payload = _json_payload()
    bracket = get_service().record_knockout_result(tournament_id, payload)
    app.logger.info(f'Knockout match {payload.get("id")} updated in {tournament_id}')
    return jsonify(_knockout_response(bracket))


@app.route('/tournaments/<tournament_id>/teams/<team>/logo', methods=['POST'])
def upload_team_logo(tournament_id, team):
    """Upload a logo image for one team."""
    _check_id(tournament_id)
    file = request.files.get('logo')
    if not file or not file.filename:
        return jsonify({'success': False, 'error': 'No file provided'}), 400
    url = get_service().attach_logo(tournament_id, team, file.filename, file.read())
    return jsonify({'success': True, 'logo': url})


@app.route('/uploads/<tournament_id>/<filename>')
def serve_upload(tournament_id, filename):
    if not is_valid_tournament_id(tournament_id):
        abort(404)
    return send_from_directory(os.path.join(UPLOADS_DIR, tournament_id), filename)


if __name__ == '__main__':
    app.run(debug=True, port=int(os.environ.get('PORT', 5000)))
