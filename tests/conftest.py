from collections import defaultdict
from typing import List, NamedTuple, Optional

import pytest

from wordforge.dictionary import DictionaryService
from wordforge.managers.room import RoomManager

# Deterministic board used by most room tests
GRID = [
    ['C', 'A', 'T', 'S'],
    ['D', 'O', 'G', 'H'],
    ['B', 'I', 'R', 'D'],
    ['L', 'I', 'O', 'N'],
]

WORDS = ['cat', 'cats', 'dog', 'bird', 'lion', 'tat']

CAT_PATH = [(0, 0), (0, 1), (0, 2)]
DOG_PATH = [(1, 0), (1, 1), (1, 2)]


class Emitted(NamedTuple):
    event: str
    data: object
    to: Optional[str]
    recipients: frozenset


class FakeSio:
    """Records emits and room membership like socketio.AsyncServer."""

    def __init__(self):
        self.emitted: List[Emitted] = []
        self.groups = defaultdict(set)

    async def emit(self, event, data=None, to=None, room=None, namespace=None, **kwargs):
        target = to or room
        recipients = frozenset(self.groups[target]) if target in self.groups else frozenset([target])
        self.emitted.append(Emitted(event, data, target, recipients))

    async def enter_room(self, sid, room, namespace=None):
        self.groups[room].add(sid)

    async def leave_room(self, sid, room, namespace=None):
        self.groups[room].discard(sid)

    def received(self, sid, event=None):
        return [e.data for e in self.emitted if sid in e.recipients and (event is None or e.event == event)]

    def events(self, event):
        return [e for e in self.emitted if e.event == event]

    def clear(self):
        self.emitted.clear()


class Clock:
    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def sio():
    return FakeSio()


@pytest.fixture()
def clock():
    return Clock()


@pytest.fixture()
def dictionary():
    return DictionaryService(WORDS)


@pytest.fixture()
async def manager(sio, dictionary, clock):
    m = RoomManager(
        sio,
        dictionary,
        namespace='/rooms',
        clock=clock,
        grid_factory=lambda size: [list(row) for row in GRID],
    )
    yield m
    await m.shutdown()


@pytest.fixture()
async def room_with_round(manager, sio):
    """Room R1 with host alice (s1), player bob (s2) and a round in progress."""
    await manager.create_room('s1', name='Alice', player_key='alice', room_id='R1')
    await manager.join_room('s2', 'R1', 'Bob', player_key='bob')
    await manager.start_round('s1', 'R1')
    sio.clear()
    return manager.get('R1')
