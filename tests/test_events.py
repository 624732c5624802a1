import pytest

from kaffeepause.events import Scheduler, Signal, Timer


def test_signal_calls_slots_in_order_with_arguments():
    signal = Signal()
    calls = []
    signal.connect(lambda *a: calls.append(("first", a)))
    signal.connect(lambda *a: calls.append(("second", a)))
    signal.emit(1, "x")
    assert calls == [("first", (1, "x")), ("second", (1, "x"))]


def test_signal_disconnect_stops_calls():
    signal = Signal()
    calls = []
    slot = calls.append
    signal.connect(slot)
    signal.emit("a")
    signal.disconnect(slot)
    signal.emit("b")
    assert calls == ["a"]
    assert len(signal) == 0


def test_signal_disconnect_unknown_slot_raises():
    signal = Signal()
    with pytest.raises(ValueError):
        signal.disconnect(print)


def test_call_later_runs_only_when_due():
    scheduler = Scheduler()
    calls = []
    scheduler.call_later(500, lambda: calls.append(scheduler.now))
    scheduler.advance(499)
    assert calls == []
    scheduler.advance(1)
    assert calls == [500]


def test_callbacks_run_in_time_order():
    scheduler = Scheduler()
    order = []
    scheduler.call_later(1000, lambda: order.append("late"))
    scheduler.call_later(500, lambda: order.append("early"))
    scheduler.advance(2000)
    assert order == ["early", "late"]
    assert scheduler.now == 2000


def test_negative_delay_and_advance_rejected():
    scheduler = Scheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-5)


def test_cancelled_call_does_not_run():
    scheduler = Scheduler()
    calls = []
    handle = scheduler.call_later(100, lambda: calls.append(1))
    handle.cancel()
    scheduler.advance(200)
    assert calls == []
    assert scheduler.pending == 0


def test_run_until_returns_true_when_predicate_met():
    scheduler = Scheduler()
    flag = []
    scheduler.call_later(300, lambda: flag.append(True))
    assert scheduler.run_until(lambda: bool(flag), 1000) is True
    assert scheduler.now == 300


def test_run_until_times_out():
    scheduler = Scheduler()
    scheduler.call_later(5000, lambda: None)
    assert scheduler.run_until(lambda: False, 1000) is False
    assert scheduler.now == 1000
    assert scheduler.pending == 1


def test_timer_repeats_until_stopped():
    scheduler = Scheduler()
    fired = []
    timer = Timer(scheduler, lambda: fired.append(scheduler.now))
    timer.start(1000)
    scheduler.advance(3500)
    assert fired == [1000, 2000, 3000]
    timer.stop()
    scheduler.advance(5000)
    assert fired == [1000, 2000, 3000]
    assert not timer.active


def test_timer_can_stop_itself_from_slot():
    scheduler = Scheduler()
    fired = []
    timer = Timer(scheduler)

    def slot():
        fired.append(scheduler.now)
        timer.stop()

    timer.timeout.connect(slot)
    timer.start(500)
    assert timer.active
    scheduler.advance(5000)
    assert fired == [500]
    assert not timer.active
    assert scheduler.now == 5000


def test_timer_restart_reuses_interval_and_resets_phase():
    scheduler = Scheduler()
    fired = []
    timer = Timer(scheduler, lambda: fired.append(scheduler.now))
    timer.start(1000)
    scheduler.advance(600)
    timer.start()
    scheduler.advance(1000)
    assert fired == [1600]
    assert timer.interval_ms == 1000


def test_timer_rejects_bad_interval():
    timer = Timer(Scheduler())
    with pytest.raises(ValueError):
        timer.start()
    with pytest.raises(ValueError):
        timer.start(0)