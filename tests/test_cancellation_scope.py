import asyncio

import pytest
from conftest import FakeClock, FakeSound

from portfolio_terminal.terminal.scope import CancellationScope, LoopClock


def test_timer_fires_and_leaves_scope() -> None:
    clock = FakeClock()
    scope = CancellationScope(clock)
    fired: list[str] = []

    scope.call_later(0.1, lambda: fired.append("a"))
    assert scope.pending_timers == 1

    clock.advance(0.1)
    assert fired == ["a"]
    assert scope.pending_timers == 0


def test_stop_all_cancels_timers_and_stops_voices() -> None:
    clock = FakeClock()
    scope = CancellationScope(clock)
    fired: list[str] = []
    voice = FakeSound()

    scope.call_later(0.1, lambda: fired.append("a"))
    scope.call_later(0.5, lambda: fired.append("b"))
    scope.add_voice(voice)

    scope.stop_all()
    clock.advance(1.0)

    assert fired == []
    assert voice.stopped
    assert scope.pending == 0
    assert clock.pending == 0


def test_stop_all_is_safe_when_idle_and_scope_stays_usable() -> None:
    clock = FakeClock()
    scope = CancellationScope(clock)
    scope.stop_all()
    scope.stop_all()

    fired: list[int] = []
    scope.call_later(0.0, lambda: fired.append(1))
    clock.advance(0.0)
    assert fired == [1]


def test_child_scopes_are_closed_by_parent() -> None:
    clock = FakeClock()
    parent = CancellationScope(clock)
    child = parent.child()
    fired: list[str] = []

    child.call_later(0.2, lambda: fired.append("child"))
    assert parent.pending_timers == 1

    parent.stop_all()
    clock.advance(1.0)

    assert fired == []
    assert child.closed
    assert parent.pending == 0


def test_closed_scope_refuses_new_work() -> None:
    clock = FakeClock()
    scope = CancellationScope(clock)
    scope.close()
    scope.close()

    fired: list[str] = []
    scope.call_later(0.0, lambda: fired.append("late"))
    voice = FakeSound()
    scope.add_voice(voice)
    clock.advance(1.0)

    assert fired == []
    assert voice.stopped
    assert scope.pending == 0
    assert scope.child().closed


def test_cancelled_call_never_runs() -> None:
    clock = FakeClock()
    scope = CancellationScope(clock)
    fired: list[str] = []

    call = scope.call_later(0.1, lambda: fired.append("x"))
    call.cancel()
    call.cancel()
    clock.advance(1.0)

    assert fired == []
    assert scope.pending_timers == 0


def test_closing_child_detaches_it_from_parent() -> None:
    clock = FakeClock()
    parent = CancellationScope(clock)
    child = parent.child()
    child.add_voice(FakeSound())
    assert parent.active_voices == 1

    child.close()
    assert parent.active_voices == 0


@pytest.mark.asyncio
async def test_tracked_task_is_cancelled_by_stop_all() -> None:
    scope = CancellationScope(LoopClock())
    task = asyncio.create_task(asyncio.sleep(10))
    scope.track(task)
    assert scope.pending_timers == 1

    scope.stop_all()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert scope.pending == 0


@pytest.mark.asyncio
async def test_finished_task_drops_out_of_scope() -> None:
    scope = CancellationScope(LoopClock())

    async def work() -> int:
        return 1

    task = scope.track(asyncio.create_task(work()))
    assert await task == 1
    await asyncio.sleep(0)
    assert scope.pending_timers == 0


@pytest.mark.asyncio
async def test_loop_clock_runs_callbacks_on_the_event_loop() -> None:
    scope = CancellationScope(LoopClock())
    done = asyncio.Event()
    scope.call_later(0.01, done.set)
    await asyncio.wait_for(done.wait(), timeout=1.0)
    assert scope.pending_timers == 0


def test_released_scope_closes_once_drained() -> None:
    clock = FakeClock()
    parent = CancellationScope(clock)
    child = parent.child()
    fired: list[str] = []
    voice = FakeSound()

    child.call_later(0.1, lambda: fired.append("late"))
    child.add_voice(voice)
    child.release()
    assert not child.closed

    clock.advance(0.2)
    assert fired == ["late"]
    assert not voice.stopped
    assert not child.closed

    child.release_voice(voice)
    assert child.closed
    assert parent.pending == 0


def test_release_of_idle_scope_closes_immediately() -> None:
    clock = FakeClock()
    scope = CancellationScope(clock).child()
    scope.release()
    assert scope.closed
