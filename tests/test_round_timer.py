import asyncio

import pytest

from wordforge.managers.room import RoomManager, now_ms
from wordforge.managers.timer import RoundTimer

from conftest import GRID


@pytest.fixture()
async def live_manager(sio, dictionary):
    """Manager on the wall clock so the round timer really expires."""
    m = RoomManager(
        sio,
        dictionary,
        round_end_grace_ms=10,
        clock=now_ms,
        grid_factory=lambda size: [list(row) for row in GRID],
    )
    yield m
    await m.shutdown()


async def finish_round(manager, room_id='R1'):
    """Wait for the pending round timer of the room to run to completion."""
    task = manager.timer.pending(room_id)
    assert task is not None
    await asyncio.wait_for(task, timeout=5)


async def start_short_round(manager, duration_ms=40):
    await manager.create_room('s1', name='Alice', player_key='alice', room_id='R1')
    room = manager.get('R1')
    # below the settings clamp, tests only
    room.round_duration_ms = duration_ms
    await manager.start_round('s1', 'R1')
    return room


async def test_round_end_fires_exactly_once(live_manager, sio):
    room = await start_short_round(live_manager)
    await finish_round(live_manager)

    [end] = sio.events('round_end')
    assert end.to == 'R1'
    assert end.data['startAt'] == room.start_at
    assert end.data['players'][0]['playerKey'] == 'alice'
    assert room.time_remaining(now_ms()) == 0
    assert live_manager.timer.pending('R1') is None


async def test_round_end_lists_submissions(live_manager, sio):
    await start_short_round(live_manager, duration_ms=150)
    assert await live_manager.submit_word('s1', 'R1', 'a', [(0, 0), (0, 1), (0, 2)])
    await finish_round(live_manager)

    [end] = sio.events('round_end')
    assert [s['word'] for s in end.data['submissions']] == ['cat']


async def test_stale_timer_is_silent(live_manager, sio):
    room = await start_short_round(live_manager)
    # a later round replaced this one before the timer fired
    room.start_at = room.start_at + 10_000
    await finish_round(live_manager)

    assert sio.events('round_end') == []


async def test_each_round_gets_its_own_end(live_manager, sio):
    room = await start_short_round(live_manager)
    await finish_round(live_manager)
    await live_manager.start_round('s1', 'R1')
    await finish_round(live_manager)

    ends = sio.events('round_end')
    assert len(ends) == 2
    assert ends[1].data['startAt'] == room.start_at


async def test_timer_waits_again_when_woken_early():
    calls = []

    async def callback():
        calls.append(len(calls))
        return 10 if len(calls) < 3 else None

    timer = RoundTimer()
    task = timer.schedule('R1', 5, callback)
    await asyncio.wait_for(task, timeout=1)

    assert calls == [0, 1, 2]
    assert timer.pending('R1') is None


async def test_shutdown_cancels_pending_timers():
    fired = []

    async def callback():
        fired.append(True)
        return None

    timer = RoundTimer()
    task = timer.schedule('R1', 10_000, callback)
    assert timer.pending('R1') is task

    await timer.shutdown()

    assert task.done()
    assert fired == []
