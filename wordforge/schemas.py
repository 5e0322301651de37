from __future__ import annotations
from pydantic import BaseModel, Field
from typing import List, Literal, Optional

Role = Literal['player', 'spectator']

# Inbound payloads. Unknown fields are ignored.

class Position(BaseModel):
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)

class CreateRoom(BaseModel):
    roomId: Optional[str] = Field(None, min_length=1, max_length=20, pattern=r'^[A-Za-z0-9]+$')
    name: str = Field(..., min_length=1, max_length=32)
    playerKey: str = Field(..., min_length=1, max_length=64)
    roundDurationMs: Optional[float] = Field(None, ge=15000, le=180000)

class JoinRoom(BaseModel):
    roomId: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=32)
    playerKey: Optional[str] = Field(None, max_length=64)
    role: Role = 'player'

class RoomAction(BaseModel):
    # start_round, sync_state, leave_room
    roomId: str = Field(..., min_length=1, max_length=20)

class SubmitWord(BaseModel):
    roomId: str = Field(..., min_length=1, max_length=20)
    submissionId: str = Field(..., min_length=1, max_length=64)
    path: List[Position] = Field(..., min_length=1)

class UpdateSettings(BaseModel):
    roomId: str = Field(..., min_length=1, max_length=20)
    roundDurationMs: Optional[float] = Field(None, ge=15000, le=180000)
    boardSize: Optional[int] = Field(None, ge=4, le=8)

# Outbound snapshots

class PlayerSnapshot(BaseModel):
    id: str
    playerKey: str
    name: str
    score: int = 0
    connected: bool = True
    isHost: bool = False
    role: Literal['player'] = 'player'

class SpectatorSnapshot(BaseModel):
    id: str
    name: str
    connected: bool = True
    isHost: bool = False
    role: Literal['spectator'] = 'spectator'

class SubmissionSnapshot(BaseModel):
    playerId: str
    playerKey: str
    word: str
    score: int
    submittedAt: int

class RoomSettings(BaseModel):
    roomId: str
    roundDurationMs: int
    boardSize: int

class RoomSnapshot(BaseModel):
    roomId: str
    grid: List[List[str]]
    players: List[PlayerSnapshot]
    spectators: List[SpectatorSnapshot]
    submissions: List[SubmissionSnapshot]
    timeRemaining: int
    roundDurationMs: int
    boardSize: int
    startAt: Optional[int] = None
    hostKey: str = ''
    roundActive: bool = False
