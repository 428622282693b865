"""Room state machine.

Every inbound action is a function over a ``Room`` that either applies the
whole transition and returns ``ActionResult.ACCEPTED`` or leaves the room
untouched and returns the reason it was dropped. Callers are expected to hold
the room's lock; nothing here blocks or performs I/O.
"""
import logging
import random
from enum import Enum
from typing import Optional, Sequence, Tuple

from undercover.models import Phase, Player, Role, Room, RoomSettings, Winner
from undercover.words import WORD_PAIRS, WordPair
from .scoring import end_game, resolve_win_condition

logger = logging.getLogger(__name__)

MIN_PLAYERS = 3


class ActionResult(str, Enum):
    ACCEPTED = 'accepted'
    WRONG_PHASE = 'wrong_phase'
    NOT_YOUR_TURN = 'not_your_turn'
    NOT_ENOUGH_PLAYERS = 'not_enough_players'
    PLAYER_NOT_FOUND = 'player_not_found'
    TARGET_NOT_FOUND = 'target_not_found'
    UNKNOWN_SETTING = 'unknown_setting'
    INVALID_PAYLOAD = 'invalid_payload'
    ROOM_NOT_FOUND = 'room_not_found'
    NOT_IN_ROOM = 'not_in_room'

    @property
    def accepted(self) -> bool:
        return self is ActionResult.ACCEPTED


def join(room: Room, player_id: str, name: str) -> ActionResult:
    """Add the connection to the room, or do nothing if it is already in."""
    if room.find_player(player_id) is None:
        room.players.append(Player(player_id, name))
        logger.info(f"[join] room={room.id} player={player_id} players={len(room.players)}")
    return ActionResult.ACCEPTED


def leave(room: Room, player_id: str) -> ActionResult:
    """Drop the player. Turn pointer and vote tallies stay as they are."""
    player = room.find_player(player_id)
    if player is None:
        return ActionResult.PLAYER_NOT_FOUND
    room.players.remove(player)
    logger.info(f"[leave] room={room.id} player={player_id} remaining={len(room.players)}")
    return ActionResult.ACCEPTED


def change_settings(room: Room, setting: str, delta) -> ActionResult:
    if room.phase != Phase.LOBBY:
        return ActionResult.WRONG_PHASE
    attr = RoomSettings.FIELDS.get(setting)
    if attr is None:
        return ActionResult.UNKNOWN_SETTING
    if isinstance(delta, bool) or not isinstance(delta, int):
        return ActionResult.INVALID_PAYLOAD
    setattr(room.settings, attr, max(0, getattr(room.settings, attr) + delta))
    return ActionResult.ACCEPTED


def resolve_role_counts(total_players: int, settings: RoomSettings) -> Tuple[int, int]:
    """Return ``(mr_white, undercover)`` counts for a round.

    Requests that would leave no civilian fall back to one mr_white and
    ``(total - 2) // 2`` undercovers.
    """
    mr_white = settings.mr_white_count
    undercover = settings.undercover_count
    if mr_white + undercover >= total_players:
        mr_white = 1
        undercover = max(0, (total_players - 2) // 2)
    return mr_white, undercover


def pick_word_pair(room: Room, rng=random, catalog: Sequence[WordPair] = WORD_PAIRS) -> WordPair:
    available = [i for i in range(len(catalog)) if i not in room.used_word_indices]
    if not available:
        room.used_word_indices.clear()
        available = list(range(len(catalog)))
    index = rng.choice(available)
    room.used_word_indices.add(index)
    return catalog[index]


def _word_for(role: Role, pair: WordPair) -> Optional[str]:
    if role is Role.CIVILIAN:
        return pair.civilian
    if role is Role.UNDERCOVER:
        return pair.undercover
    return None


def start_game(room: Room, rng=random, catalog: Sequence[WordPair] = WORD_PAIRS,
               min_players: int = MIN_PLAYERS) -> ActionResult:
    """Deal roles and words and open the first description round.

    Accepted from the lobby and, as a rematch, from a finished game.
    """
    if room.phase not in (Phase.LOBBY, Phase.GAME_OVER):
        return ActionResult.WRONG_PHASE
    total = len(room.players)
    if total < min_players:
        return ActionResult.NOT_ENOUGH_PLAYERS

    mr_white, undercover = resolve_role_counts(total, room.settings)
    roles = [Role.MR_WHITE] * mr_white + [Role.UNDERCOVER] * undercover
    roles += [Role.CIVILIAN] * (total - len(roles))
    rng.shuffle(roles)

    room.word_pair = pick_word_pair(room, rng=rng, catalog=catalog)
    for player, role in zip(room.players, roles):
        player.role = role
        player.word = _word_for(role, room.word_pair)
        player.is_alive = True
        player.votes = 0
        player.description = ''

    rng.shuffle(room.players)
    # mr_white never opens the round
    if any(p.role is not Role.MR_WHITE for p in room.players):
        while room.players[0].role is Role.MR_WHITE:
            room.players.append(room.players.pop(0))

    room.phase = Phase.DESCRIPTION
    room.turn_index = 0
    room.winner = None
    logger.info(
        f"[start] room={room.id} players={total} mr_white={mr_white} undercover={undercover}"
    )
    return ActionResult.ACCEPTED


def submit_description(room: Room, player_id: str, text) -> ActionResult:
    if room.phase != Phase.DESCRIPTION:
        return ActionResult.WRONG_PHASE
    current = room.current_player
    if current is None or current.id != player_id:
        return ActionResult.NOT_YOUR_TURN
    if not isinstance(text, str):
        return ActionResult.INVALID_PAYLOAD

    current.description = text
    next_index = room.turn_index + 1
    while next_index < len(room.players) and not room.players[next_index].is_alive:
        next_index += 1
    if next_index >= len(room.players):
        room.phase = Phase.VOTING
    else:
        room.turn_index = next_index
    return ActionResult.ACCEPTED


def _most_voted(room: Room) -> Player:
    # Strict maximum: on a tie the earliest player in the list stays
    top = room.players[0]
    for p in room.players[1:]:
        if p.votes > top.votes:
            top = p
    return top


def cast_vote(room: Room, target_id: str) -> ActionResult:
    """Count one vote and eliminate once every living player could have voted.

    Voters are not tracked: casting twice or voting for oneself both count.
    """
    if room.phase != Phase.VOTING:
        return ActionResult.WRONG_PHASE
    target = room.find_player(target_id)
    if target is None:
        return ActionResult.TARGET_NOT_FOUND
    target.votes += 1

    total_votes = sum(p.votes for p in room.players)
    if total_votes < len(room.alive_players):
        return ActionResult.ACCEPTED

    eliminated = _most_voted(room)
    eliminated.is_alive = False
    logger.info(
        f"[eliminated] room={room.id} player={eliminated.id} role={getattr(eliminated.role, 'value', None)} votes={eliminated.votes}"
    )
    if eliminated.role is Role.MR_WHITE:
        room.phase = Phase.MR_WHITE_GUESS
        return ActionResult.ACCEPTED

    if resolve_win_condition(room) is None:
        for p in room.players:
            p.votes = 0
            p.description = ''
        room.phase = Phase.DESCRIPTION
        room.turn_index = next((i for i, p in enumerate(room.players) if p.is_alive), 0)
    return ActionResult.ACCEPTED


def normalize_word(word: str) -> str:
    return word.strip().casefold()


def mr_white_guess(room: Room, guess) -> ActionResult:
    """Let the eliminated mr_white name the civilian word.

    A wrong guess falls through to the regular win check; when that finds no
    winner the room stays in MR_WHITE_GUESS.
    """
    if room.phase != Phase.MR_WHITE_GUESS:
        return ActionResult.WRONG_PHASE
    if not isinstance(guess, str) or room.word_pair is None:
        return ActionResult.INVALID_PAYLOAD

    if normalize_word(guess) == normalize_word(room.word_pair.civilian):
        end_game(room, Winner.MR_WHITE_WINS)
    else:
        resolve_win_condition(room)
    return ActionResult.ACCEPTED
