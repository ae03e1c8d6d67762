"""Room registry and per-room game sessions"""

import copy
import logging
import random
import threading
from typing import Dict, List, Optional

from .constants import PHASE_GAME_END, PHASE_PLAYING, PHASE_WAITING
from .effects import play_card
from .errors import (
    GAME_ALREADY_STARTED, NOT_ENOUGH_PLAYERS, PLAYER_ALREADY_IN_ROOM,
    ROOM_CODES_EXHAUSTED, ROOM_FULL, ROOM_NOT_FOUND, raise_error
)
from .models import GameState, PlayAction, Player, RoomInfo
from .rules import RuleConfig, default_rules
from .shuffle import deal_round

logger = logging.getLogger(__name__)


class GameSession:
    """
    One room's game, guarded by its own lock.

    Every mutation works on a copy of the state and swaps it in only when
    the whole operation succeeded, so callers either see the complete
    change or none of it.
    """

    def __init__(self, room_code: str, host_id: str, host_name: str,
                 rules: RuleConfig = default_rules):
        self.rules = rules
        self.lock = threading.Lock()
        self.state = GameState(room_code=room_code, host_id=host_id)
        self.state.players.append(Player(id=host_id, name=host_name))
        self.state.add_log_entry(f"{host_name} created the room.")

    @property
    def room_code(self) -> str:
        return self.state.room_code

    def snapshot(self) -> GameState:
        with self.lock:
            return copy.deepcopy(self.state)

    def room_info(self) -> RoomInfo:
        with self.lock:
            return RoomInfo(
                room_code=self.state.room_code,
                host_id=self.state.host_id,
                player_count=len(self.state.players),
                max_players=self.rules.max_players,
                is_game_started=self.state.phase != PHASE_WAITING,
            )

    def _commit(self, new_state: GameState) -> GameState:
        self.state = new_state
        return copy.deepcopy(new_state)

    def join(self, player_id: str, player_name: str) -> GameState:
        with self.lock:
            if self.state.phase != PHASE_WAITING:
                raise_error(GAME_ALREADY_STARTED, "Game already started")
            if len(self.state.players) >= self.rules.max_players:
                raise_error(ROOM_FULL, "Room is full")
            if self.state.get_player(player_id):
                raise_error(PLAYER_ALREADY_IN_ROOM, "Player is already in this room")

            new_state = copy.deepcopy(self.state)
            new_state.players.append(Player(id=player_id, name=player_name))
            new_state.add_log_entry(f"{player_name} joined the room.")
            new_state.increment_version()
            logger.info(f"Player {player_name} joined room {self.room_code}")
            return self._commit(new_state)

    def start(self, seed: Optional[int] = None) -> GameState:
        with self.lock:
            if len(self.state.players) < self.rules.min_players:
                raise_error(NOT_ENOUGH_PLAYERS, f"Need at least {self.rules.min_players} players")
            if self.state.phase == PHASE_PLAYING:
                raise_error(GAME_ALREADY_STARTED, "A round is already in progress")

            new_state = copy.deepcopy(self.state)
            if new_state.phase == PHASE_GAME_END:
                for player in new_state.players:
                    player.tokens = 0
                new_state.round_number = 0
                new_state.winner_id = None
                new_state.add_log_entry("A new game begins!")
            deal_round(new_state, seed)
            new_state.increment_version()
            logger.info(f"Room {self.room_code}: round {new_state.round_number} started")
            return self._commit(new_state)

    def play(self, action: PlayAction) -> GameState:
        with self.lock:
            return self._commit(play_card(self.state, action, self.rules))


class LetterEngine:
    """Registry mapping room codes to their game sessions."""

    def __init__(self, rules: RuleConfig = default_rules, rng: Optional[random.Random] = None):
        self.rules = rules
        self.rng = rng or random.Random()
        self.rooms: Dict[str, GameSession] = {}
        self.registry_lock = threading.Lock()

    def _generate_room_code(self) -> str:
        # Caller holds registry_lock
        space = self.rules.room_code_space()
        if len(self.rooms) >= space:
            raise_error(ROOM_CODES_EXHAUSTED, "No room codes left")
        while True:
            code = str(self.rng.randrange(space)).zfill(self.rules.room_code_digits)
            if code not in self.rooms:
                return code

    def _session(self, room_code: str) -> GameSession:
        with self.registry_lock:
            session = self.rooms.get(room_code)
        if session is None:
            raise_error(ROOM_NOT_FOUND, f"Room {room_code} not found")
        return session

    def create_room(self, host_id: str, host_name: str) -> RoomInfo:
        with self.registry_lock:
            code = self._generate_room_code()
            session = GameSession(code, host_id, host_name, self.rules)
            self.rooms[code] = session
        logger.info(f"Room created: {code} by {host_name}")
        return session.room_info()

    def join_room(self, room_code: str, player_id: str, player_name: str) -> GameState:
        return self._session(room_code).join(player_id, player_name)

    def start_game(self, room_code: str, seed: Optional[int] = None) -> GameState:
        return self._session(room_code).start(seed)

    def play_card(self, room_code: str, action: PlayAction) -> GameState:
        return self._session(room_code).play(action)

    def get_game(self, room_code: str) -> Optional[GameState]:
        with self.registry_lock:
            session = self.rooms.get(room_code)
        return session.snapshot() if session else None

    def get_room(self, room_code: str) -> Optional[RoomInfo]:
        with self.registry_lock:
            session = self.rooms.get(room_code)
        return session.room_info() if session else None

    def list_rooms(self) -> List[RoomInfo]:
        with self.registry_lock:
            sessions = list(self.rooms.values())
        return [s.room_info() for s in sessions]

    def remove_room(self, room_code: str) -> bool:
        with self.registry_lock:
            removed = self.rooms.pop(room_code, None)
        if removed:
            logger.info(f"Room removed: {room_code}")
        return removed is not None
