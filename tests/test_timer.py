import pytest

from edgekit.timer import MAX_TIMERS, Timer, TimerHandle


class FakeClock:
    def __init__(self, now=1000):
        self.now = now

    def __call__(self):
        return self.now


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timer(clock):
    return Timer(clock, MAX_TIMERS)


def test_interval_fires_each_period(timer, clock):
    counter = Counter()
    handle = timer.set_interval(100, counter)
    assert handle.is_valid()
    timer.run()
    assert counter.calls == 0
    for period in range(1, 5):
        clock.now += 100
        timer.run()
        assert counter.calls == period
    assert timer.num_timers() == 1


def test_timeout_fires_once_and_frees_slot(timer, clock):
    counter = Counter()
    timer.set_timeout(50, counter)
    assert timer.num_timers() == 1
    clock.now += 50
    timer.run()
    clock.now += 50
    timer.run()
    assert counter.calls == 1
    assert timer.num_timers() == 0
    assert timer.num_available_timers() == MAX_TIMERS


def test_set_timer_limits_runs(timer, clock):
    counter = Counter()
    runs = 3
    timer.set_timer(10, counter, runs)
    for _ in range(runs + 4):
        clock.now += 10
        timer.run()
    assert counter.calls == runs
    assert timer.num_timers() == 0


def test_late_run_skips_missed_periods(timer, clock):
    counter = Counter()
    handle = timer.set_interval(100, counter)
    clock.now += 350
    timer.run()
    assert counter.calls == 1
    assert handle.remaining_time() == 50
    clock.now += 50
    timer.run()
    assert counter.calls == 2


def test_zero_delay_fires_every_run(timer):
    counter = Counter()
    timer.set_interval(0, counter)
    for _ in range(5):
        timer.run()
    assert counter.calls == 5


def test_slots_are_assigned_in_order(timer):
    first = timer.set_interval(10, Counter())
    second = timer.set_interval(10, Counter())
    assert int(first) == 0
    assert int(second) == 1
    first.delete_timer()
    third = timer.set_interval(10, Counter())
    assert int(third) == 0


def test_table_full_gives_invalid_handle(clock):
    timer = Timer(clock, 4)
    handles = [timer.set_interval(10, Counter()) for _ in range(4)]
    assert all(handles)
    assert timer.num_available_timers() == 0
    extra = timer.set_interval(10, Counter())
    assert not extra
    assert int(extra) == -1
    assert timer.num_timers() == 4


def test_none_callback_gives_invalid_handle(timer):
    handle = timer.set_interval(10, None)
    assert not handle.is_valid()
    assert timer.num_timers() == 0


def test_disable_and_toggle(timer, clock):
    counter = Counter()
    handle = timer.set_interval(10, counter)
    handle.disable()
    assert not handle.is_enabled()
    clock.now += 10
    timer.run()
    assert counter.calls == 0
    handle.toggle()
    assert handle.is_enabled()
    clock.now += 10
    timer.run()
    assert counter.calls == 1


def test_disabled_timer_has_no_remaining_time(timer):
    handle = timer.set_interval(10, Counter())
    handle.disable()
    assert handle.remaining_time() is None
    assert timer.remaining_time(int(handle)) is None


def test_enable_all_only_touches_forever_timers(timer):
    forever = timer.set_interval(10, Counter())
    limited = timer.set_timer(10, Counter(), 5)
    timer.disable_all()
    assert not forever.is_enabled()
    assert limited.is_enabled()
    limited.disable()
    timer.enable_all()
    assert forever.is_enabled()
    assert not limited.is_enabled()


def test_remaining_time_counts_down(timer, clock):
    handle = timer.set_interval(100, Counter())
    assert handle.remaining_time() == 100
    clock.now += 30
    assert handle.remaining_time() == 70


def test_execute_now_runs_on_next_run(timer):
    counter = Counter()
    handle = timer.set_interval(1000, counter)
    handle()
    timer.run()
    assert counter.calls == 1


def test_restart_timer_postpones(timer, clock):
    counter = Counter()
    handle = timer.set_interval(100, counter)
    clock.now += 90
    handle.restart_timer()
    clock.now += 20
    timer.run()
    assert counter.calls == 0
    assert handle.remaining_time() == 80


def test_change_interval(timer, clock):
    counter = Counter()
    handle = timer.set_interval(100, counter)
    clock.now += 50
    handle.change_interval(20)
    assert handle.remaining_time() == 20
    clock.now += 20
    timer.run()
    assert counter.calls == 1


def test_change_function(timer, clock):
    old, new = Counter(), Counter()
    handle = timer.set_interval(10, old)
    assert handle.change_function(new)
    clock.now += 10
    timer.run()
    assert (old.calls, new.calls) == (0, 1)


def test_change_function_rejects_none(timer):
    handle = timer.set_interval(10, Counter())
    with pytest.raises(ValueError):
        timer.change_function(int(handle), None)


def test_out_of_range_ids(timer):
    assert timer.change_interval(MAX_TIMERS, 10) is False
    assert timer.change_interval(-1, 10) is False
    assert timer.change_function(MAX_TIMERS, Counter()) is False
    assert timer.is_enabled(MAX_TIMERS) is False
    assert timer.remaining_time(MAX_TIMERS) is None


def test_unused_slot_operations_fail(timer):
    assert timer.change_interval(0, 10) is False
    assert timer.change_function(0, Counter()) is False
    assert timer.is_enabled(0) is False


def test_deleted_handle_is_inert(timer):
    handle = timer.set_interval(10, Counter())
    handle.delete_timer()
    assert not handle
    assert int(handle) == -1
    assert handle.remaining_time() is None
    assert handle.change_function(Counter()) is False
    assert handle.is_enabled() is False
    assert timer.num_timers() == 0


def test_default_handle_is_invalid():
    handle = TimerHandle()
    assert not handle.is_valid()
    assert handle.remaining_time() is None


def test_callback_deleting_due_timer_prevents_its_call(timer, clock):
    victim = Counter()
    holder = {}

    def killer():
        timer.delete_timer(int(holder["victim"]))

    timer.set_interval(10, killer)
    holder["victim"] = timer.set_interval(10, victim)
    clock.now += 10
    timer.run()
    assert victim.calls == 0
    assert timer.num_timers() == 1


def test_delete_twice_keeps_count(timer):
    keep = timer.set_interval(10, Counter())
    gone = timer.set_interval(10, Counter())
    timer.delete_timer(int(gone))
    timer.delete_timer(int(gone))
    assert timer.num_timers() == 1
    assert keep.is_enabled()


def test_negative_runs_rejected(timer):
    with pytest.raises(ValueError):
        timer.set_timer(10, Counter(), -1)


def test_invalid_table_size():
    with pytest.raises(ValueError):
        Timer(FakeClock(), 0)