import threading
from typing import Dict, Optional


class SessionBinding:
    def __init__(self, room_id: str, player_name: str):
        self.room_id = room_id
        self.player_name = player_name

    def __repr__(self):
        return f"<SessionBinding room={self.room_id} name={self.player_name!r}>"


class SessionRegistry:
    """Maps a Socket.IO sid to the single room it currently plays in.

    The sid doubles as the player id, so a binding only remembers which room
    to look in.
    """

    def __init__(self):
        self._bindings: Dict[str, SessionBinding] = {}
        self._mutex = threading.Lock()

    def bind(self, sid: str, room_id: str, player_name: str) -> Optional[SessionBinding]:
        """Bind ``sid`` to ``room_id`` and return the binding it replaced."""
        with self._mutex:
            previous = self._bindings.get(sid)
            self._bindings[sid] = SessionBinding(room_id, player_name)
            return previous

    def get(self, sid: str) -> Optional[SessionBinding]:
        with self._mutex:
            return self._bindings.get(sid)

    def unbind(self, sid: str) -> Optional[SessionBinding]:
        with self._mutex:
            return self._bindings.pop(sid, None)

    def is_member(self, sid: str, room_id: str) -> bool:
        binding = self.get(sid)
        return binding is not None and binding.room_id == room_id

    def __len__(self):
        with self._mutex:
            return len(self._bindings)
