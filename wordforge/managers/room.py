from __future__ import annotations
import logging
import random
import string
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set

from ..errors import InvalidInput, InvalidState, RoomNotFound, Unauthorized
from ..game_logic import Coord, Grid, generate_grid, in_bounds, score_word, validate_word, word_from_path
from ..schemas import (
    PlayerSnapshot,
    RoomSettings,
    RoomSnapshot,
    SpectatorSnapshot,
    SubmissionSnapshot,
)
from .timer import RoundTimer

logger = logging.getLogger(__name__)

MIN_ROUND_DURATION_MS = 15000
MAX_ROUND_DURATION_MS = 180000
MIN_BOARD_SIZE = 4
MAX_BOARD_SIZE = 8

ROOM_ID_LENGTH = 6


def now_ms() -> int:
    return int(time.time() * 1000)


def clamp(value: float, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


@dataclass
class Player:
    sid: str
    player_key: str
    name: str
    score: int = 0
    connected: bool = True

    def snapshot(self, host_key: str) -> PlayerSnapshot:
        return PlayerSnapshot(
            id=self.sid,
            playerKey=self.player_key,
            name=self.name,
            score=self.score,
            connected=self.connected,
            isHost=bool(host_key) and self.player_key == host_key,
        )


@dataclass
class Spectator:
    sid: str
    name: str
    connected: bool = True

    def snapshot(self) -> SpectatorSnapshot:
        return SpectatorSnapshot(id=self.sid, name=self.name, connected=self.connected)


@dataclass
class Submission:
    player_key: str
    player_id: str
    word: str
    score: int
    submitted_at: int

    def snapshot(self) -> SubmissionSnapshot:
        return SubmissionSnapshot(
            playerId=self.player_id,
            playerKey=self.player_key,
            word=self.word,
            score=self.score,
            submittedAt=self.submitted_at,
        )


@dataclass
class Room:
    id: str
    round_duration_ms: int
    board_size: int
    host_key: str = ''
    players: List[Player] = field(default_factory=list)
    spectators: List[Spectator] = field(default_factory=list)
    grid: Grid = field(default_factory=list)
    start_at: Optional[int] = None
    # fixed when the round starts; later duration changes only affect the next round
    ends_at: Optional[int] = None
    submissions: List[Submission] = field(default_factory=list)
    used_words: Dict[str, Set[str]] = field(default_factory=dict)
    # start_at of the last round whose end was announced
    round_end_announced_for: Optional[int] = None

    # Membership

    def player_by_sid(self, sid: str) -> Optional[Player]:
        return next((p for p in self.players if p.sid == sid), None)

    def player_by_key(self, player_key: str) -> Optional[Player]:
        return next((p for p in self.players if p.player_key == player_key), None)

    def spectator_by_sid(self, sid: str) -> Optional[Spectator]:
        return next((s for s in self.spectators if s.sid == sid), None)

    def upsert_player(self, sid: str, player_key: str, name: str) -> Player:
        # a connection speaks for one identity at a time
        for other in self.players:
            if other.sid == sid and other.player_key != player_key:
                other.connected = False
        player = self.player_by_key(player_key)
        if player:
            player.sid = sid
            player.name = name
            player.connected = True
        else:
            player = Player(sid=sid, player_key=player_key, name=name)
            self.players.append(player)
        self.refresh_host()
        return player

    def upsert_spectator(self, sid: str, name: str) -> Spectator:
        spectator = self.spectator_by_sid(sid)
        if spectator:
            spectator.name = name
            spectator.connected = True
        else:
            spectator = Spectator(sid=sid, name=name)
            self.spectators.append(spectator)
        return spectator

    def remove_player(self, sid: str) -> Optional[Player]:
        player = self.player_by_sid(sid)
        if player:
            self.players.remove(player)
            self.refresh_host()
        return player

    def remove_spectator(self, sid: str) -> Optional[Spectator]:
        spectator = self.spectator_by_sid(sid)
        if spectator:
            self.spectators.remove(spectator)
        return spectator

    def mark_disconnected(self, sid: str) -> bool:
        found = False
        for p in self.players:
            if p.sid == sid and p.connected:
                p.connected = False
                found = True
        for s in self.spectators:
            if s.sid == sid and s.connected:
                s.connected = False
                found = True
        if found:
            self.refresh_host()
        return found

    def has_member(self, sid: str) -> bool:
        return self.player_by_sid(sid) is not None or self.spectator_by_sid(sid) is not None

    def refresh_host(self) -> None:
        """Keep host_key pointing at a connected player, else the first connected one in join order."""
        host = self.player_by_key(self.host_key) if self.host_key else None
        if host and host.connected:
            return
        previous = self.host_key
        self.host_key = next((p.player_key for p in self.players if p.connected), '')
        if previous != self.host_key:
            logger.info("Room %s host changed %r -> %r", self.id, previous, self.host_key)

    def is_host(self, sid: str) -> bool:
        player = self.player_by_sid(sid)
        return bool(self.host_key) and player is not None and player.connected and player.player_key == self.host_key

    # Round timing

    def time_remaining(self, now: int) -> int:
        if self.ends_at is None:
            return 0
        return max(0, self.ends_at - now)

    def is_round_active(self, now: int) -> bool:
        return self.ends_at is not None and now < self.ends_at

    # Snapshots

    def player_states(self) -> List[dict]:
        return [p.snapshot(self.host_key).model_dump() for p in self.players]

    def spectator_states(self) -> List[dict]:
        return [s.snapshot().model_dump() for s in self.spectators]

    def submission_states(self) -> List[dict]:
        return [s.snapshot().model_dump() for s in self.submissions]

    def membership(self) -> dict:
        return {
            'roomId': self.id,
            'players': self.player_states(),
            'spectators': self.spectator_states(),
            'hostKey': self.host_key,
        }

    def settings(self) -> RoomSettings:
        return RoomSettings(roomId=self.id, roundDurationMs=self.round_duration_ms, boardSize=self.board_size)

    def to_state(self, now: int) -> RoomSnapshot:
        return RoomSnapshot(
            roomId=self.id,
            grid=[list(row) for row in self.grid],
            players=[p.snapshot(self.host_key) for p in self.players],
            spectators=[s.snapshot() for s in self.spectators],
            submissions=[s.snapshot() for s in self.submissions],
            timeRemaining=self.time_remaining(now),
            roundDurationMs=self.round_duration_ms,
            boardSize=self.board_size,
            startAt=self.start_at,
            hostKey=self.host_key,
            roundActive=self.is_round_active(now),
        )


class RoomManager:
    """Room registry and the event handlers that mutate rooms.

    Every handler does all of its reads and writes before its first await, so
    events for a room are applied one at a time on the event loop.
    """

    def __init__(
        self,
        sio,
        dictionary,
        namespace: Optional[str] = None,
        default_round_duration_ms: int = 60000,
        default_board_size: int = 4,
        round_end_grace_ms: int = 50,
        clock: Callable[[], int] = now_ms,
        grid_factory: Callable[[int], Grid] = generate_grid,
    ):
        self.sio = sio
        self.dictionary = dictionary
        self.namespace = namespace
        self.default_round_duration_ms = clamp(default_round_duration_ms, MIN_ROUND_DURATION_MS, MAX_ROUND_DURATION_MS)
        self.default_board_size = clamp(default_board_size, MIN_BOARD_SIZE, MAX_BOARD_SIZE)
        self.round_end_grace_ms = round_end_grace_ms
        self.clock = clock
        self.grid_factory = grid_factory
        self.timer = RoundTimer()
        self.rooms: Dict[str, Room] = {}

    # Registry

    def get_or_create(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            room = Room(
                id=room_id,
                round_duration_ms=self.default_round_duration_ms,
                board_size=self.default_board_size,
            )
            self.rooms[room_id] = room
            logger.info("Room %s created", room_id)
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self.rooms.get(room_id)

    def require(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            raise RoomNotFound('Room not found')
        return room

    def generate_room_id(self) -> str:
        while True:
            code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=ROOM_ID_LENGTH))
            if code not in self.rooms:
                return code

    # Transport helpers

    async def _emit(self, event: str, data, to: str):
        await self.sio.emit(event, data, to=to, namespace=self.namespace)

    async def _enter(self, sid: str, room: Room):
        await self.sio.enter_room(sid, room.id, namespace=self.namespace)

    async def _broadcast_membership(self, room: Room):
        await self._emit('player_state', room.membership(), to=room.id)

    # Events

    async def create_room(
        self,
        sid: str,
        name: str,
        player_key: str,
        room_id: Optional[str] = None,
        round_duration_ms: Optional[float] = None,
    ) -> Room:
        if not player_key:
            raise InvalidInput('playerKey is required')
        room = self.get_or_create(room_id or self.generate_room_id())
        if round_duration_ms is not None:
            if room.is_round_active(self.clock()):
                logger.info("Room %s: round active, requested duration %s ignored", room.id, round_duration_ms)
            else:
                room.round_duration_ms = clamp(round_duration_ms, MIN_ROUND_DURATION_MS, MAX_ROUND_DURATION_MS)
        room.remove_spectator(sid)
        player = room.upsert_player(sid, player_key, name)

        await self._enter(sid, room)
        await self._emit('room_created', {
            **room.membership(),
            'playerId': player.sid,
            'playerKey': player.player_key,
            'isHost': room.host_key == player.player_key,
            **room.settings().model_dump(),
        }, to=sid)
        await self._broadcast_membership(room)
        return room

    async def join_room(
        self,
        sid: str,
        room_id: str,
        name: str,
        player_key: Optional[str] = None,
        role: str = 'player',
    ) -> Room:
        if role == 'player' and not player_key:
            raise InvalidInput('playerKey is required to join as a player')
        room = self.get_or_create(room_id)

        if role == 'spectator':
            room.remove_player(sid)
            room.upsert_spectator(sid, name)
            joined = {'playerId': sid, 'playerKey': None, 'isHost': False}
        else:
            room.remove_spectator(sid)
            player = room.upsert_player(sid, player_key, name)
            joined = {
                'playerId': player.sid,
                'playerKey': player.player_key,
                'isHost': room.host_key == player.player_key,
            }
        logger.info("%s joined room %s as %s", sid, room.id, role)
        state = room.to_state(self.clock()).model_dump()

        await self._enter(sid, room)
        await self._emit('joined_room', {**room.membership(), **joined, 'role': role}, to=sid)
        await self._broadcast_membership(room)
        await self._emit('sync_state', state, to=sid)
        return room

    async def start_round(self, sid: str, room_id: str) -> Room:
        room = self.require(room_id)
        if not room.is_host(sid):
            raise Unauthorized('Only the host can start a round')
        now = self.clock()
        if room.is_round_active(now):
            raise InvalidState('Round already active')

        room.grid = self.grid_factory(room.board_size)
        room.start_at = now
        room.ends_at = now + room.round_duration_ms
        room.submissions = []
        room.used_words = {}
        for p in room.players:
            p.score = 0

        start_at = room.start_at
        self.timer.schedule(
            room.id,
            room.round_duration_ms + self.round_end_grace_ms,
            lambda: self._on_round_timer(room, start_at),
        )
        logger.info("Round started in room %s (%sx%s, %sms)", room.id, room.board_size, room.board_size, room.round_duration_ms)

        await self._emit('round_start', {
            **room.membership(),
            'grid': [list(row) for row in room.grid],
            'startAt': room.start_at,
            'roundDurationMs': room.round_duration_ms,
            'boardSize': room.board_size,
            'timeRemaining': room.time_remaining(now),
        }, to=room.id)
        return room

    async def _on_round_timer(self, room: Room, expected_start_at: int) -> Optional[float]:
        if room.start_at != expected_start_at or room.round_end_announced_for == expected_start_at:
            logger.debug("Stale round timer for room %s ignored", room.id)
            return None
        remaining = room.time_remaining(self.clock())
        if remaining > 0:
            return remaining + self.round_end_grace_ms
        room.round_end_announced_for = expected_start_at
        logger.info("Round ended in room %s with %s submissions", room.id, len(room.submissions))
        await self._emit('round_end', {
            **room.membership(),
            'submissions': room.submission_states(),
            'startAt': expected_start_at,
        }, to=room.id)
        return None

    async def submit_word(self, sid: str, room_id: str, submission_id: str, path: Sequence[Coord]) -> bool:
        """Apply a word submission. Returns True when the word was accepted and scored."""
        room = self.require(room_id)
        now = self.clock()
        if not room.is_round_active(now):
            raise InvalidState('Round not active')
        player = room.player_by_sid(sid)
        if player is None:
            if room.spectator_by_sid(sid):
                raise Unauthorized('Spectators cannot submit words')
            raise Unauthorized('Player not in room')
        if not player.connected:
            raise Unauthorized('Player is not connected to this room')
        if not path:
            raise InvalidInput('Invalid path')

        path = [(int(r), int(c)) for r, c in path]
        word = word_from_path(room.grid, path)
        rejected = {
            'roomId': room.id,
            'submissionId': submission_id,
            'path': [{'row': r, 'col': c} for r, c in path],
        }
        # a path leaving the board spells nothing the player traced
        if all(in_bounds(room.grid, coord) for coord in path):
            rejected['word'] = word
        if not validate_word(room.grid, path, self.dictionary):
            logger.debug("Rejected %r from %s in room %s: invalid", word, player.player_key, room.id)
            await self._emit('word_rejected', {**rejected, 'reason': 'invalid'}, to=sid)
            return False

        used = room.used_words.setdefault(player.player_key, set())
        if word in used:
            logger.debug("Rejected %r from %s in room %s: duplicate", word, player.player_key, room.id)
            await self._emit('word_rejected', {**rejected, 'reason': 'duplicate'}, to=sid)
            return False
        used.add(word)

        delta = score_word(word)
        player.score += delta
        room.submissions.append(Submission(
            player_key=player.player_key,
            player_id=player.sid,
            word=word,
            score=delta,
            submitted_at=now,
        ))
        logger.debug("Accepted %r (+%s) from %s in room %s", word, delta, player.player_key, room.id)

        await self._emit('score_update', {
            **room.membership(),
            'submissionId': submission_id,
            'playerId': player.sid,
            'playerKey': player.player_key,
            'word': word,
            'scoreDelta': delta,
            'totalScore': player.score,
            'submissions': room.submission_states(),
        }, to=room.id)
        return True

    async def sync_state(self, sid: str, room_id: str) -> Room:
        room = self.require(room_id)
        state = room.to_state(self.clock()).model_dump()
        await self._enter(sid, room)
        await self._emit('sync_state', state, to=sid)
        return room

    async def leave_room(self, sid: str, room_id: str) -> Room:
        room = self.require(room_id)
        if not room.has_member(sid):
            raise InvalidInput('Not a member of this room')
        room.mark_disconnected(sid)
        logger.info("%s left room %s", sid, room.id)
        await self._broadcast_membership(room)
        await self.sio.leave_room(sid, room.id, namespace=self.namespace)
        return room

    async def update_settings(
        self,
        sid: str,
        room_id: str,
        round_duration_ms: Optional[float] = None,
        board_size: Optional[int] = None,
    ) -> Room:
        room = self.require(room_id)
        if not room.is_host(sid):
            raise Unauthorized('Only the host can change settings')
        now = self.clock()
        if room.is_round_active(now):
            raise InvalidState('Cannot change settings while a round is active')

        if round_duration_ms is not None:
            room.round_duration_ms = clamp(round_duration_ms, MIN_ROUND_DURATION_MS, MAX_ROUND_DURATION_MS)
        if board_size is not None:
            size = clamp(board_size, MIN_BOARD_SIZE, MAX_BOARD_SIZE)
            if size != room.board_size:
                room.board_size = size
                room.grid = []
        logger.info("Room %s settings: %sms, %sx%s", room.id, room.round_duration_ms, room.board_size, room.board_size)
        state = room.to_state(now).model_dump()

        await self._emit('room_settings', room.settings().model_dump(), to=room.id)
        await self._emit('sync_state', state, to=room.id)
        return room

    async def disconnect(self, sid: str) -> List[Room]:
        affected = [room for room in self.rooms.values() if room.mark_disconnected(sid)]
        for room in affected:
            await self._broadcast_membership(room)
        return affected

    async def shutdown(self):
        await self.timer.shutdown()
