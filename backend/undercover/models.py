from enum import Enum
from typing import Dict, List, Optional, Set

from undercover.words import WordPair


class Phase(str, Enum):
    LOBBY = 'LOBBY'
    DESCRIPTION = 'DESCRIPTION'
    VOTING = 'VOTING'
    MR_WHITE_GUESS = 'MR_WHITE_GUESS'
    GAME_OVER = 'GAME_OVER'


class Role(str, Enum):
    CIVILIAN = 'civilian'
    UNDERCOVER = 'undercover'
    MR_WHITE = 'mr_white'

    @property
    def is_impostor(self) -> bool:
        return self is not Role.CIVILIAN


class Winner(str, Enum):
    CIVILIANS_WIN = 'CIVILIANS_WIN'
    IMPOSTORS_WIN = 'IMPOSTORS_WIN'
    MR_WHITE_WINS = 'MR_WHITE_WINS'


class RoomSettings:
    # Wire name -> attribute name
    FIELDS = {
        'mr_white_count': 'mr_white_count',
        'mrWhiteCount': 'mr_white_count',
        'undercover_count': 'undercover_count',
        'undercoverCount': 'undercover_count',
    }

    def __init__(self, mr_white_count: int = 1, undercover_count: int = 1):
        self.mr_white_count = mr_white_count
        self.undercover_count = undercover_count

    def to_dict(self):
        return {
            'mrWhiteCount': self.mr_white_count,
            'undercoverCount': self.undercover_count,
        }


class Player:
    def __init__(self, player_id: str, name: str):
        self.id = player_id
        self.name = name
        self.role: Optional[Role] = None
        self.word: Optional[str] = None
        self.is_alive = True
        self.votes = 0
        self.score = 0
        self.description = ''

    def __repr__(self):
        return f"<Player id={self.id} name={self.name!r} role={self.role}>"

    def to_dict(self, hide_secrets: bool = False):
        return {
            'id': self.id,
            'name': self.name,
            'role': None if hide_secrets or self.role is None else self.role.value,
            'word': None if hide_secrets else self.word,
            'isAlive': self.is_alive,
            'votes': self.votes,
            'score': self.score,
            'description': self.description,
        }


class Room:
    def __init__(self, room_id: str, settings: Optional[RoomSettings] = None):
        self.id = room_id
        self.players: List[Player] = []
        self.phase = Phase.LOBBY
        self.word_pair: Optional[WordPair] = None
        self.turn_index = 0
        self.winner: Optional[Winner] = None
        self.settings = settings or RoomSettings()
        self.used_word_indices: Set[int] = set()
        self.pending_deletion: Optional[object] = None

    def __repr__(self):
        return f"<Room id={self.id} phase={self.phase.value} players={len(self.players)}>"

    def find_player(self, player_id: str) -> Optional[Player]:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    @property
    def alive_players(self) -> List[Player]:
        return [p for p in self.players if p.is_alive]

    @property
    def current_player(self) -> Optional[Player]:
        if 0 <= self.turn_index < len(self.players):
            return self.players[self.turn_index]
        return None

    def to_dict(self, viewer_id: Optional[str] = None) -> Dict:
        """Serialize the room for clients.

        Without a viewer the snapshot carries every secret. With one, other
        living players' roles and words, the word pair and the played catalog
        indices stay hidden until the game is over.
        """
        revealed = viewer_id is None or self.phase == Phase.GAME_OVER
        players = []
        for p in self.players:
            hide = not revealed and p.id != viewer_id and p.is_alive
            players.append(p.to_dict(hide_secrets=hide))
        word_pair = self.word_pair.to_dict() if self.word_pair and revealed else None
        return {
            'id': self.id,
            'phase': self.phase.value,
            'players': players,
            'wordPair': word_pair,
            'turnIndex': self.turn_index,
            'winner': self.winner.value if self.winner else None,
            'settings': self.settings.to_dict(),
            'usedIndices': sorted(self.used_word_indices) if revealed else None,
        }
