from flask import current_app, request
from flask_socketio import join_room, leave_room, emit
from undercover import socketio
from undercover.models import Room
from undercover.services.games import state_machine
from undercover.services.games.registry import RoomRegistry
from undercover.services.games.sessions import SessionRegistry
from undercover.services.games.state_machine import ActionResult
from typing import Any, Callable, Dict, List, Optional, Tuple

NAMESPACE = '/'

Snapshot = Tuple[Dict[str, Any], str]


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _registry() -> RoomRegistry:
    return current_app.extensions['undercover.registry']


def _sessions() -> SessionRegistry:
    return current_app.extensions['undercover.sessions']


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _room_id(data) -> Optional[str]:
    # start_game may send the bare room id
    room_id = data if isinstance(data, str) else _payload(data).get('roomId')
    if isinstance(room_id, str) and room_id:
        return room_id
    return None


# ---- Broadcast ----

def _snapshots(room: Room) -> List[Snapshot]:
    """Serialize the room for its members. Call with the room lock held."""
    if current_app.config.get('REDACT_SECRETS'):
        return [(room.to_dict(viewer_id=p.id), p.id) for p in room.players]
    return [(room.to_dict(), room.id)]


def _broadcast(snapshots: List[Snapshot]) -> None:
    for payload, to in snapshots:
        socketio.emit('update_game', payload, to=to, namespace=NAMESPACE)


def _reject(action: str, result: ActionResult, room_id: Optional[str] = None) -> ActionResult:
    current_app.logger.debug(f"[rejected] action={action} room={room_id} sid={_get_sid()} reason={result.value}")
    if current_app.config.get('REPORT_REJECTED_ACTIONS'):
        emit('action_rejected', {'action': action, 'roomId': room_id, 'reason': result.value})
    return result


def _ack(result: ActionResult) -> Dict[str, str]:
    return {'status': result.value}


def _apply(action: str, data, transition: Callable[[Room, str, Dict[str, Any]], ActionResult]) -> Dict[str, str]:
    """Run ``transition`` for the calling member under the room lock.

    The resulting state is broadcast only when the transition accepts.
    """
    sid = _get_sid()
    room_id = _room_id(data)
    if room_id is None:
        return _ack(_reject(action, ActionResult.INVALID_PAYLOAD))
    registry = _registry()
    if registry.get(room_id) is None:
        return _ack(_reject(action, ActionResult.ROOM_NOT_FOUND, room_id))
    if not _sessions().is_member(sid, room_id):
        return _ack(_reject(action, ActionResult.NOT_IN_ROOM, room_id))

    with registry.lock(room_id):
        room = registry.get(room_id)
        if room is None:
            result = ActionResult.ROOM_NOT_FOUND
        elif room.find_player(sid) is None:
            result = ActionResult.NOT_IN_ROOM
        else:
            result = transition(room, sid, _payload(data))
        snapshots = _snapshots(room) if result.accepted else []

    if not result.accepted:
        return _ack(_reject(action, result, room_id))
    _broadcast(snapshots)
    return _ack(result)


def _remove_from_room(sid: str, room_id: str) -> ActionResult:
    registry = _registry()
    room = registry.get(room_id)
    if room is None:
        return ActionResult.ROOM_NOT_FOUND
    with registry.lock(room_id):
        result = state_machine.leave(room, sid)
        if result.accepted and not room.players:
            registry.schedule_deletion(room_id)
        snapshots = _snapshots(room) if result.accepted else []
    _broadcast(snapshots)
    return result


# ---- Connection lifecycle ----

def handle_connect():
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    binding = _sessions().unbind(sid)
    if binding:
        current_app.logger.info(f"[left-on-disconnect] room={binding.room_id} player={binding.player_name!r}")
        _remove_from_room(sid, binding.room_id)


def handle_join_room(data):
    payload = _payload(data)
    room_id = _room_id(payload)
    if room_id is None:
        return _ack(_reject('join_room', ActionResult.INVALID_PAYLOAD))
    name = payload.get('playerName')
    if not isinstance(name, str):
        name = ''
    sid = _get_sid()

    previous = _sessions().bind(sid, room_id, name)
    if previous and previous.room_id != room_id:
        leave_room(previous.room_id)
        _remove_from_room(sid, previous.room_id)
    join_room(room_id)

    with _registry().locked_room(room_id) as room:
        result = state_machine.join(room, sid, name)
        snapshots = _snapshots(room)
    _broadcast(snapshots)
    return _ack(result)


def handle_leave_room(data):
    sid = _get_sid()
    room_id = _room_id(data)
    if room_id is None:
        return _ack(_reject('leave_room', ActionResult.INVALID_PAYLOAD))
    if not _sessions().is_member(sid, room_id):
        return _ack(_reject('leave_room', ActionResult.NOT_IN_ROOM, room_id))
    _sessions().unbind(sid)
    leave_room(room_id)
    return _ack(_remove_from_room(sid, room_id))


# ---- Game actions ----

def handle_change_settings(data):
    return _apply('change_settings', data, lambda room, sid, p: state_machine.change_settings(
        room, p.get('setting'), p.get('delta', p.get('change'))))


def handle_start_game(data):
    rng = current_app.extensions['undercover.random']
    min_players = current_app.config.get('MIN_PLAYERS', state_machine.MIN_PLAYERS)
    return _apply('start_game', data, lambda room, sid, p: state_machine.start_game(
        room, rng=rng, min_players=min_players))


def handle_send_description(data):
    return _apply('send_description', data, lambda room, sid, p: state_machine.submit_description(
        room, sid, p.get('text')))


def handle_vote_player(data):
    return _apply('vote_player', data, lambda room, sid, p: state_machine.cast_vote(
        room, p.get('targetId')))


def handle_mr_white_guess(data):
    return _apply('mr_white_guess', data, lambda room, sid, p: state_machine.mr_white_guess(
        room, p.get('guess')))


def register_socketio_handlers(namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('leave_room', handle_leave_room, namespace=namespace)
    socketio.on_event('change_settings', handle_change_settings, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('send_description', handle_send_description, namespace=namespace)
    socketio.on_event('vote_player', handle_vote_player, namespace=namespace)
    socketio.on_event('mr_white_guess', handle_mr_white_guess, namespace=namespace)
