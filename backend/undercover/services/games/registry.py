import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from undercover.models import Room, RoomSettings

logger = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD_SEC = 5 * 60


class PendingDeletion:
    """Handle for a scheduled room removal. Compared by identity."""

    def __init__(self, deadline: float):
        self.deadline = deadline

    def __repr__(self):
        return f"<PendingDeletion deadline={self.deadline:.1f}>"


def _spawn_thread(target, *args):
    worker = threading.Thread(target=target, args=args, daemon=True)
    worker.start()
    return worker


class RoomRegistry:
    """Owns every live room and its lock.

    Rooms are created by the first join and removed only after sitting empty
    for ``grace_period`` seconds. ``spawn`` and ``sleep`` run the removal
    timer; the app wires them to Socket.IO's background task helpers.
    """

    def __init__(
        self,
        grace_period: float = DEFAULT_GRACE_PERIOD_SEC,
        default_mr_white_count: int = 1,
        default_undercover_count: int = 1,
        spawn: Optional[Callable] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ):
        self.grace_period = grace_period
        self.default_mr_white_count = default_mr_white_count
        self.default_undercover_count = default_undercover_count
        self._spawn = spawn or _spawn_thread
        self._sleep = sleep
        self._clock = clock
        self._rooms: Dict[str, Room] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._mutex = threading.RLock()

    def __contains__(self, room_id) -> bool:
        with self._mutex:
            return room_id in self._rooms

    def __len__(self) -> int:
        with self._mutex:
            return len(self._rooms)

    def room_ids(self) -> List[str]:
        with self._mutex:
            return list(self._rooms)

    def lock(self, room_id: str) -> threading.RLock:
        """Return the per-room lock, created lazily."""
        with self._mutex:
            if room_id not in self._locks:
                self._locks[room_id] = threading.RLock()
            return self._locks[room_id]

    def get(self, room_id: str) -> Optional[Room]:
        with self._mutex:
            return self._rooms.get(room_id)

    def get_or_create(self, room_id: str) -> Room:
        with self._mutex:
            room = self._rooms.get(room_id)
            if room is None:
                settings = RoomSettings(self.default_mr_white_count, self.default_undercover_count)
                room = self._rooms[room_id] = Room(room_id, settings)
                logger.info(f"[room-created] room={room_id}")
            self.cancel_deletion(room_id)
            return room

    def remove(self, room_id: str) -> Optional[Room]:
        with self._mutex:
            self._locks.pop(room_id, None)
            room = self._rooms.pop(room_id, None)
            if room is not None:
                room.pending_deletion = None
            return room

    def cancel_deletion(self, room_id: str) -> bool:
        with self._mutex:
            room = self._rooms.get(room_id)
            if room is None or room.pending_deletion is None:
                return False
            room.pending_deletion = None
            logger.info(f"[deletion-cancelled] room={room_id}")
            return True

    def schedule_deletion(self, room_id: str, delay: Optional[float] = None) -> Optional[PendingDeletion]:
        """Remove the room after ``delay`` seconds unless a join cancels it first."""
        delay = self.grace_period if delay is None else delay
        with self._mutex:
            room = self._rooms.get(room_id)
            if room is None:
                return None
            pending = room.pending_deletion = PendingDeletion(self._clock() + delay)
        logger.info(f"[deletion-scheduled] room={room_id} delay={delay}s")
        self._spawn(self._expire, room_id, pending, delay)
        return pending

    @contextmanager
    def locked_room(self, room_id: str) -> Iterator[Room]:
        """Get or create ``room_id`` and hold its lock for the caller.

        Any pending removal is cancelled while that lock is held.
        """
        while True:
            lock = self.lock(room_id)
            with lock:
                # Removed while we waited: the room has a fresh lock now
                if self.lock(room_id) is not lock:
                    continue
                yield self.get_or_create(room_id)
                return

    def _expire(self, room_id: str, pending: PendingDeletion, delay: float) -> None:
        if delay > 0:
            self._sleep(delay)
        with self._mutex:
            room = self._rooms.get(room_id)
            if room is None or room.pending_deletion is not pending:
                return
            lock = self.lock(room_id)
        with lock, self._mutex:
            # A join in the meantime replaced or cleared the handle
            if self._rooms.get(room_id) is not room or room.pending_deletion is not pending or room.players:
                return
            self.remove(room_id)
        logger.info(f"[room-expired] room={room_id}")
