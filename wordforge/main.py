from __future__ import annotations
import functools
import logging
from contextlib import asynccontextmanager
from typing import Dict

import socketio
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from .config import Config
from .dictionary import DictionaryService
from .errors import RoomError
from .managers.room import RoomManager
from .schemas import CreateRoom, JoinRoom, RoomAction, SubmitWord, UpdateSettings

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

NAMESPACE = '/rooms'

dictionary = DictionaryService.from_path(Config.WORDLIST_PATH, Config.WORD_MIN_LENGTH, Config.WORD_MAX_LENGTH)

# Socket.IO server (ASGI)
sio = socketio.AsyncServer(async_mode='asgi', cors_allowed_origins=Config.CORS_ORIGINS)

rooms = RoomManager(
    sio,
    dictionary,
    namespace=NAMESPACE,
    default_round_duration_ms=Config.DEFAULT_ROUND_DURATION_MS,
    default_board_size=Config.DEFAULT_BOARD_SIZE,
    round_end_grace_ms=Config.ROUND_END_GRACE_MS,
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Dictionary ready with %s words", len(dictionary))
    yield
    await rooms.shutdown()


app = FastAPI(title="WordForge Server", version="0.1.0", lifespan=lifespan)

# Mount Socket.IO ASGI application
asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)

# CORS for REST
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

# REST Endpoints
@app.get('/health')
async def health() -> Dict[str, object]:
    return { 'status': 'ok', 'rooms': len(rooms.rooms), 'words': len(dictionary) }

@app.get('/dict/validate')
async def validate_word(word: str):
    return { 'word': word.lower(), 'valid': dictionary.is_valid(word) }

@app.get('/rooms/{room_id}')
async def room_state(room_id: str):
    room = rooms.get(room_id)
    if not room:
        raise HTTPException(status_code=404, detail='Room not found')
    return room.to_state(rooms.clock()).model_dump()


def handles(event: str, schema: type[BaseModel]):
    """Register a Socket.IO handler that receives a validated payload.

    Domain errors and invalid payloads are reported to the requesting
    connection as `error` and never reach the rest of the room.
    """
    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(sid, payload=None):
            try:
                data = schema.model_validate(payload or {})
            except ValidationError as exc:
                logger.warning("Invalid %s payload from %s: %s", event, sid, exc.errors(include_url=False))
                await sio.emit('error', { 'message': f'Invalid {event} payload', 'code': 'invalid_payload' }, to=sid, namespace=NAMESPACE)
                return None
            try:
                return await fn(sid, data)
            except RoomError as exc:
                logger.warning("%s from %s rejected: %s", event, sid, exc.message)
                await sio.emit('error', exc.to_payload(), to=sid, namespace=NAMESPACE)
                return None
        sio.on(event, namespace=NAMESPACE)(wrapper)
        return wrapper
    return decorator


# Socket.IO Events
@sio.on('connect', namespace=NAMESPACE)
async def connect(sid, environ, auth=None):
    logger.info("Client connected: %s", sid)

@sio.on('disconnect', namespace=NAMESPACE)
async def disconnect(sid, *args):
    logger.info("Client disconnected: %s", sid)
    await rooms.disconnect(sid)

@handles('create_room', CreateRoom)
async def create_room(sid, data: CreateRoom):
    room = await rooms.create_room(
        sid,
        name=data.name,
        player_key=data.playerKey,
        room_id=data.roomId,
        round_duration_ms=data.roundDurationMs,
    )
    return { 'roomId': room.id }

@handles('join_room', JoinRoom)
async def join_room(sid, data: JoinRoom):
    room = await rooms.join_room(sid, data.roomId, data.name, player_key=data.playerKey, role=data.role)
    return { 'roomId': room.id }

@handles('start_round', RoomAction)
async def start_round(sid, data: RoomAction):
    await rooms.start_round(sid, data.roomId)

@handles('submit_word', SubmitWord)
async def submit_word(sid, data: SubmitWord):
    path = [(p.row, p.col) for p in data.path]
    accepted = await rooms.submit_word(sid, data.roomId, data.submissionId, path)
    return { 'submissionId': data.submissionId, 'accepted': accepted }

@handles('sync_state', RoomAction)
async def sync_state(sid, data: RoomAction):
    await rooms.sync_state(sid, data.roomId)

@handles('leave_room', RoomAction)
async def leave_room(sid, data: RoomAction):
    await rooms.leave_room(sid, data.roomId)

@handles('update_settings', UpdateSettings)
async def update_settings(sid, data: UpdateSettings):
    await rooms.update_settings(sid, data.roomId, round_duration_ms=data.roundDurationMs, board_size=data.boardSize)

# Export ASGI app for uvicorn
application = asgi_app


def run():
    import uvicorn
    uvicorn.run('wordforge.main:application', host=Config.HOST, port=Config.PORT)

# For local running: uvicorn wordforge.main:application --reload --host 0.0.0.0 --port 8000
