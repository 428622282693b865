from flask import Blueprint, jsonify, request, current_app

rooms = Blueprint('rooms', __name__)


def _registry():
    return current_app.extensions['undercover.registry']


@rooms.route('/', methods=['GET'])
def list_rooms():
    """
    Returns a short summary of every live room.
    """
    registry = _registry()
    summaries = []
    for room_id in registry.room_ids():
        room = registry.get(room_id)
        if room is None:
            continue
        with registry.lock(room_id):
            summaries.append({
                'id': room.id,
                'phase': room.phase.value,
                'players': len(room.players),
            })
    return jsonify(summaries), 200


@rooms.route('/<string:room_id>/state', methods=['GET'])
def get_room_state(room_id):
    """
    Returns the same snapshot the room's members receive over Socket.IO.
    When secrets are redacted, pass ?player_id=<sid> to see that player's view.
    """
    registry = _registry()
    room = registry.get(room_id)
    if room is None:
        return jsonify({'error': 'Room not found'}), 404
    with registry.lock(room_id):
        if current_app.config.get('REDACT_SECRETS'):
            payload = room.to_dict(viewer_id=request.args.get('player_id', ''))
        else:
            payload = room.to_dict()
    return jsonify(payload), 200
