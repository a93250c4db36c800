from sketchguess.game.timers import ManualScheduler, Timer


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(2, lambda t: fired.append("b"))
    scheduler.call_later(1, lambda t: fired.append("a"))
    scheduler.advance(1.5)
    assert fired == ["a"]
    assert scheduler.now() == 1.5
    scheduler.advance(1)
    assert fired == ["a", "b"]


def test_callbacks_can_schedule_follow_ups_within_one_advance():
    scheduler = ManualScheduler()
    ticks = []

    def tick(timer):
        ticks.append(scheduler.now())
        if len(ticks) < 3:
            scheduler.call_later(1, tick)

    scheduler.call_later(1, tick)
    scheduler.advance(10)
    assert ticks == [1, 2, 3]


def test_cancelled_timer_never_fires():
    scheduler = ManualScheduler()
    fired = []
    timer = scheduler.call_later(1, lambda t: fired.append(t))
    assert timer.cancel() is True
    scheduler.advance(5)
    assert fired == []
    assert scheduler.pending() == []


def test_cancel_after_fire_is_a_noop():
    scheduler = ManualScheduler()
    fired = []
    timer = scheduler.call_later(1, lambda t: fired.append(t))
    scheduler.advance(1)
    assert fired == [timer]
    assert timer.cancel() is False
    assert timer.cancel() is False
    assert timer.fired and not timer.cancelled


def test_timer_fires_once():
    timer = Timer(0)
    assert timer.fire() is True
    assert timer.fire() is False
    assert not timer.active
