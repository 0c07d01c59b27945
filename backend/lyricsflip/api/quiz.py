from flask import Blueprint, jsonify, request, current_app
from lyricsflip.models import GameMode, LyricOption
from lyricsflip.services.quiz.errors import ConfigurationError, SessionStateError


quiz = Blueprint('quiz', __name__)

CONFIG_FIELDS = (
    'genre', 'difficulty', 'duration', 'odds', 'wager_amount',
    'max_rounds', 'passing_score', 'timer_scope',
)


def _registry():
    return current_app.extensions['lyricsflip']


def _not_found():
    return jsonify({'error': 'Game not found'}), 404


@quiz.route('/create', methods=['POST'])
def create_game():
    """
    Starts a new session and loads its first round.
    """
    data = request.get_json(silent=True) or {}
    mode = data.get('game_mode') or GameMode.QUICK_GAME.value
    try:
        config = _registry().config_for_mode(mode, {k: data.get(k) for k in CONFIG_FIELDS})
    except ConfigurationError as exc:
        return jsonify({'error': str(exc)}), 400

    game = _registry().create_game(config, game_mode=mode)
    return jsonify(_registry().state(game.game_code)), 201


@quiz.route('/<string:game_code>/state', methods=['GET'])
def get_game_state(game_code):
    payload = _registry().state(game_code)
    if payload is None:
        return _not_found()
    return jsonify(payload)


@quiz.route('/<string:game_code>/select', methods=['POST'])
def select_option(game_code):
    """
    Locks in the player's answer for the active round. Only the first
    selection of a round counts; later ones report committed=False.
    """
    data = request.get_json(silent=True) or {}
    title = data.get('title')
    artist = data.get('artist')
    if not all([title, artist]):
        return jsonify({'error': 'Option title and artist are required'}), 400
    index = data.get('index')
    try:
        index = int(index) if index is not None else None
    except (TypeError, ValueError):
        return jsonify({'error': 'index must be an integer'}), 400

    game = _registry().get(game_code)
    if not game:
        return _not_found()
    committed = game.controller.select_option(LyricOption(title, artist), index)
    return jsonify({'committed': committed, 'state': _registry().state(game.game_code)})


@quiz.route('/<string:game_code>/restart', methods=['POST'])
def restart_game(game_code):
    try:
        game = _registry().restart(game_code)
    except (ConfigurationError, SessionStateError) as exc:
        return jsonify({'error': str(exc)}), 400
    if not game:
        return _not_found()
    return jsonify(_registry().state(game.game_code))


@quiz.route('/<string:game_code>/reset', methods=['POST'])
def reset_game(game_code):
    game = _registry().reset(game_code)
    if not game:
        return _not_found()
    return jsonify(_registry().state(game.game_code))


@quiz.route('/<string:game_code>/retry', methods=['POST'])
def retry_round(game_code):
    game = _registry().get(game_code)
    if not game:
        return _not_found()
    if not game.controller.retry():
        return jsonify({'error': 'Nothing to retry'}), 409
    return jsonify(_registry().state(game.game_code))


@quiz.route('/<string:game_code>/leave', methods=['POST'])
def leave_game(game_code):
    """
    Leaves the game view: cancels in-flight fetches, stops the countdown
    and forgets the game.
    """
    game = _registry().close(game_code)
    if not game:
        return _not_found()
    return jsonify({'message': 'You have left the game.'}), 200
