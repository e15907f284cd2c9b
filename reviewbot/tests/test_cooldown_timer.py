import pytest

from reviewbot.app.cooldown import CooldownTimer
from reviewbot.app.models import CooldownState
from reviewbot.tests._fakes import ManualScheduler


def _timer():
    scheduler = ManualScheduler()
    ticks = []
    expiries = []
    timer = CooldownTimer(scheduler, on_tick=ticks.append, on_expire=lambda: expiries.append(scheduler.now))
    return timer, scheduler, ticks, expiries


def test_start_activates_with_full_duration():
    timer, scheduler, _, _ = _timer()
    timer.start(60)
    assert timer.state == CooldownState(active=True, remaining_seconds=60)
    assert len(scheduler.pending) == 1


def test_each_second_decrements_by_exactly_one():
    timer, scheduler, ticks, _ = _timer()
    timer.start(5)
    previous = timer.remaining_seconds
    for _ in range(5):
        scheduler.advance(1)
        assert timer.remaining_seconds == max(0, previous - 1)
        previous = timer.remaining_seconds
    assert [t.remaining_seconds for t in ticks] == [4, 3, 2, 1, 0]


def test_expires_exactly_when_reaching_zero():
    timer, scheduler, _, expiries = _timer()
    timer.start(3)
    scheduler.advance(2)
    assert timer.active
    assert expiries == []
    scheduler.advance(1)
    assert not timer.active
    assert timer.state == CooldownState.idle()
    assert expiries == [3.0]
    assert scheduler.pending == []


def test_tick_when_inactive_has_no_effect():
    timer, _, ticks, expiries = _timer()
    timer.tick()
    assert timer.state == CooldownState.idle()
    assert ticks == []
    assert expiries == []


def test_manual_tick_from_one_expires():
    timer, scheduler, _, expiries = _timer()
    timer.start(1)
    timer.tick()
    assert not timer.active
    assert len(expiries) == 1
    # the scheduled tick was cancelled along with the countdown
    assert scheduler.pending == []


def test_restart_replaces_running_countdown():
    timer, scheduler, ticks, _ = _timer()
    timer.start(10)
    scheduler.advance(3)
    timer.start(5)
    assert timer.remaining_seconds == 5
    assert len(scheduler.pending) == 1
    scheduler.advance(1)
    assert timer.remaining_seconds == 4
    assert ticks[-1].remaining_seconds == 4


def test_cancel_stops_ticking_without_expiry():
    timer, scheduler, ticks, expiries = _timer()
    timer.start(4)
    timer.cancel()
    scheduler.advance(10)
    assert timer.state == CooldownState.idle()
    assert ticks == []
    assert expiries == []


@pytest.mark.parametrize("duration", [0, -1, 1.5, True, "60"])
def test_start_rejects_non_positive_or_non_integer(duration):
    timer, _, _, _ = _timer()
    with pytest.raises(ValueError):
        timer.start(duration)


def test_cooldown_state_invariant_enforced():
    with pytest.raises(ValueError):
        CooldownState(active=True, remaining_seconds=0)
    with pytest.raises(ValueError):
        CooldownState(active=False, remaining_seconds=-1)
    assert CooldownState.counting(0) == CooldownState.idle()


def test_late_callbacks_do_not_stretch_the_countdown():
    scheduler = ManualScheduler(lag=0.25)
    timer = CooldownTimer(scheduler)
    timer.start(60)

    scheduler.advance(10.25)
    assert timer.remaining_seconds == 50

    scheduler.advance(50)
    assert not timer.active
    assert scheduler.now == 60.25
