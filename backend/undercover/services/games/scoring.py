import logging
from typing import Optional

from undercover.models import Phase, Role, Room, Winner

logger = logging.getLogger(__name__)

CIVILIAN_WIN_POINTS = 2
MR_WHITE_GUESS_POINTS = 6
IMPOSTOR_WIN_POINTS = 10


def check_win_condition(room: Room) -> Optional[Winner]:
    """Return the winning side for the room's living players, if any.

    No living impostor means the civilians won; impostors win once they are
    at least as many as the living civilians.
    """
    civilians_alive = sum(1 for p in room.players if p.is_alive and p.role is Role.CIVILIAN)
    impostors_alive = sum(1 for p in room.players if p.is_alive and p.role is not None and p.role.is_impostor)
    if impostors_alive == 0:
        return Winner.CIVILIANS_WIN
    if impostors_alive >= civilians_alive:
        return Winner.IMPOSTORS_WIN
    return None


def end_game(room: Room, result: Winner) -> None:
    """Close the round and apply the score deltas for ``result``.

    +2 to each civilian on a civilian win; +6 to each mr_white when one of
    them guessed the word; +10 to every undercover and mr_white on an
    impostor win. Scores are never reset.
    """
    room.phase = Phase.GAME_OVER
    room.winner = result
    for p in room.players:
        if result is Winner.CIVILIANS_WIN and p.role is Role.CIVILIAN:
            p.score += CIVILIAN_WIN_POINTS
        elif result is Winner.MR_WHITE_WINS and p.role is Role.MR_WHITE:
            p.score += MR_WHITE_GUESS_POINTS
        elif result is Winner.IMPOSTORS_WIN and p.role in (Role.UNDERCOVER, Role.MR_WHITE):
            p.score += IMPOSTOR_WIN_POINTS
    logger.info(f"[game-over] room={room.id} winner={result.value}")


def resolve_win_condition(room: Room) -> Optional[Winner]:
    result = check_win_condition(room)
    if result is not None:
        end_game(room, result)
    return result
