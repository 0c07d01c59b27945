from flask_socketio import join_room, leave_room, emit
from flask import current_app
from lyricsflip import socketio
from lyricsflip.models import LyricOption


def _registry():
    return current_app.extensions['lyricsflip']


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = f"game:{game_code.upper()}"
    join_room(room)
    emit('joined', {'room': room})
    payload = _registry().state(game_code)
    if payload is not None:
        emit('state_update', payload)


def handle_leave_game(data):
    game_code = (data or {}).get('game_code')
    if not game_code:
        emit('error', {'message': 'game_code is required'})
        return
    room = f"game:{game_code.upper()}"
    leave_room(room)
    emit('left', {'room': room})
    # The owner leaving the game view cancels the round and the countdown
    if (data or {}).get('is_session_owner'):
        _registry().close(game_code)


def handle_select_option(data):
    data = data or {}
    game_code = data.get('game_code')
    title = data.get('title')
    artist = data.get('artist')
    if not all([game_code, title, artist]):
        emit('error', {'message': 'game_code, title and artist are required'})
        return
    index = data.get('index')
    try:
        index = int(index) if index is not None else None
    except (TypeError, ValueError):
        emit('error', {'message': 'index must be an integer'})
        return
    game = _registry().get(game_code)
    if not game:
        emit('error', {'message': 'Game not found'})
        return
    committed = game.controller.select_option(LyricOption(title, artist), index)
    emit('selection', {'game_code': game.game_code, 'committed': committed})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    handlers = {
        'connect': handle_connect,
        'join_game': handle_join_game,
        'leave_game': handle_leave_game,
        'select_option': handle_select_option,
        'ping': handle_ping,
    }
    for event, handler in handlers.items():
        socketio.on_event(event, handler, namespace='/ws')
        if testing:
            # Test-only mirror on default namespace
            socketio.on_event(event, handler, namespace='/')
