from flask_login import current_user
from flask_socketio import join_room, leave_room, emit

from scoreboard.models import Game
from scoreboard.services.games.scheduler import room_for
from scoreboard.services.store import get_record


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def _game_id(data):
    raw = (data or {}).get('game_id')
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def handle_join_game(data):
    game_id = _game_id(data)
    if game_id is None:
        emit('error', {'message': 'game_id is required'})
        return
    if not current_user.is_authenticated:
        emit('error', {'message': 'Sign in required'})
        return
    game = get_record(Game, game_id)
    if game is None:
        emit('error', {'message': 'Game not found'})
        return
    if game.user_id is not None and game.user_id != current_user.id:
        emit('error', {'message': 'You do not own this game'})
        return
    room = room_for(game_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_game(data):
    game_id = _game_id(data)
    if game_id is None:
        emit('error', {'message': 'game_id is required'})
        return
    room = room_for(game_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    from scoreboard import socketio

    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_game', handle_join_game, namespace='/ws')
    socketio.on_event('leave_game', handle_leave_game, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_game', handle_join_game, namespace='/')
        socketio.on_event('leave_game', handle_leave_game, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
