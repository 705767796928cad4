from flask import current_app, request
from flask_socketio import disconnect, emit, join_room
from redlight import socketio
from redlight.broadcast import TV_ROOM, player_room
from redlight.services.game import GameError, UnknownTarget
from typing import Any, Dict, Optional


# Per-connection context: whether the socket is a display and which player it controls
_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _controller():
    return current_app.extensions['redlight']


def _namespace() -> str:
    return current_app.config.get('SOCKETIO_NAMESPACE', '/ws')


def _player_id() -> Optional[str]:
    ctx = _sid_to_ctx.get(_get_sid())
    return ctx.get('player_id') if ctx else None


def _is_display() -> bool:
    ctx = _sid_to_ctx.get(_get_sid())
    return bool(ctx and ctx.get('is_display'))


def _payload_value(data, key: str):
    """Clients send either a bare value or an object carrying it."""
    if isinstance(data, dict):
        return data.get(key)
    return data


def handle_connect():
    _sid_to_ctx[_get_sid()] = {'player_id': None, 'is_display': False}
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx or not ctx.get('player_id'):
        return
    _controller().disconnect(ctx['player_id'])


def handle_join_tv(data=None):
    join_room(TV_ROOM)
    _sid_to_ctx.setdefault(_get_sid(), {})['is_display'] = True
    emit('game_state', _controller().display_view(), to=TV_ROOM)


def handle_join_game(data=None):
    controller = _controller()
    # Check-and-claim under the match lock so two quick joins from one socket register once
    with controller.lock:
        ctx = _sid_to_ctx.setdefault(_get_sid(), {})
        if ctx.get('player_id'):
            emit('join_error', {'code': 'already_joined', 'message': 'You have already joined!'})
            return
        try:
            player = controller.join_player(_payload_value(data, 'name'))
        except GameError as exc:
            emit('join_error', exc.to_dict())
            return
        ctx['player_id'] = player.id
    join_room(player_room(player.id))
    emit('joined', player.summary())
    emit('player_state', controller.player_view(player.id))


def handle_hold_start(data=None):
    player_id = _player_id()
    if player_id:
        _controller().begin_hold(player_id)


def handle_hold_end(data=None):
    player_id = _player_id()
    if player_id:
        _controller().end_hold(player_id)


def handle_start_game(data=None):
    if not _is_display():
        return
    _controller().start_match()


def handle_reset_game(data=None):
    if not _is_display():
        return
    _controller().reset_match()


def handle_kick_player(data=None):
    if not _is_display():
        return
    player_id = _payload_value(data, 'player_id')
    try:
        _controller().remove_player(player_id)
    except UnknownTarget:
        return
    # Drop the kicked session; its disconnect handler then finds no player
    for sid, ctx in list(_sid_to_ctx.items()):
        if ctx.get('player_id') == player_id:
            ctx['player_id'] = None
            disconnect(sid=sid, namespace=_namespace())


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_tv', handle_join_tv, namespace=namespace)
    socketio.on_event('join_game', handle_join_game, namespace=namespace)
    socketio.on_event('hold_start', handle_hold_start, namespace=namespace)
    socketio.on_event('hold_end', handle_hold_end, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('reset_game', handle_reset_game, namespace=namespace)
    socketio.on_event('kick_player', handle_kick_player, namespace=namespace)
    socketio.on_event('ping', handle_ping, namespace=namespace)
