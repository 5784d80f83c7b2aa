"""Tests for the adaptive width search, using synthetic width -> size tasks."""
import random

import pytest

from pixel_post.core_types import SearchTrial, Verdict
from pixel_post.pipeline import classify
from pixel_post.search import SearchState, _halve_ceil, advance, run_search, search_width

from conftest import FakeClock


def make_task(size_of, budget, log=None):
    """Task whose output length is size_of(width); every call is appended to `log`."""

    def task(width):
        size = size_of(width)
        trial = SearchTrial(width, f"w={width}", size, classify(size, budget))
        if log is not None:
            log.append(trial)
        return trial

    return task


def test_quadratic_from_64_reaches_exact_32(fake_clock):
    calls = []
    task = make_task(lambda w: w * w * 2, 2048, calls)
    trial = search_width(64, task, timeout=5.0, clock=fake_clock)
    assert trial is not None
    assert trial.width == 32
    assert trial.verdict is Verdict.CORRECT
    assert [t.width for t in calls] == [64, 48, 40, 36, 34, 33, 32]


def test_exact_match_short_circuits_remaining_time():
    clock = FakeClock(tick=0.0)
    calls = []
    task = make_task(lambda w: 100, 100, calls)
    trial = search_width(10, task, timeout=1e9, clock=clock)
    assert trial.verdict is Verdict.CORRECT
    assert len(calls) == 1


def test_always_too_high_returns_none(fake_clock):
    task = make_task(lambda w: 10**9, 1000)
    assert search_width(50, task, timeout=5.0, clock=fake_clock) is None


def test_budget_1024_never_reached_returns_none(fake_clock):
    calls = []
    task = make_task(lambda w: 5000 + w, 1024, calls)
    assert search_width(40, task, timeout=5.0, clock=fake_clock) is None
    assert all(t.verdict is Verdict.TOO_HIGH for t in calls)
    # widths strictly decrease until the search runs out of room
    widths = [t.width for t in calls]
    assert widths == sorted(widths, reverse=True)
    assert min(widths) >= 1


def test_undershoot_doubles_until_first_overshoot(fake_clock):
    calls = []
    task = make_task(lambda w: w * 10, 700, calls)
    search_width(5, task, timeout=5.0, clock=fake_clock)
    assert [t.width for t in calls][:5] == [5, 10, 20, 40, 80]
    assert calls[4].verdict is Verdict.TOO_HIGH


def test_latest_under_budget_trial_wins(fake_clock):
    # size 10*w, budget 995: 160 overshoots, then 120, 100 over, 90 under,
    # and the next candidate (100) was already tried
    calls = []
    task = make_task(lambda w: w * 10, 995, calls)
    trial = search_width(5, task, timeout=5.0, clock=fake_clock)
    under = [t for t in calls if t.verdict is Verdict.TOO_LOW]
    assert trial is under[-1]
    assert trial.size <= 995
    assert trial.width == 90


def test_timeout_returns_best_so_far():
    clock = FakeClock(tick=1.0)
    calls = []
    task = make_task(lambda w: w, 10**6, calls)
    trial = search_width(1, task, timeout=3.5, clock=clock)
    # start=0, then checks at 1, 2, 3 run trials; 4 stops
    assert [t.width for t in calls] == [1, 2, 4]
    assert trial.width == 4


def test_timeout_before_any_trial_returns_none():
    clock = FakeClock(tick=10.0)
    task = make_task(lambda w: w, 100)
    assert search_width(8, task, timeout=1.0, clock=clock) is None


def test_repeated_width_stops_search(fake_clock):
    # non-monotonic task that bounces between two widths
    calls = []

    def task(width):
        verdict = Verdict.TOO_HIGH if width >= 8 else Verdict.TOO_LOW
        trial = SearchTrial(width, "", 0, verdict)
        calls.append(trial)
        return trial

    trial = search_width(8, task, timeout=5.0, clock=fake_clock)
    assert [t.width for t in calls] == [8, 6, 8, 7]
    assert trial.width == 7
    assert trial.verdict is Verdict.TOO_LOW


def test_start_width_is_rounded_and_validated(fake_clock):
    calls = []
    task = make_task(lambda w: w, 10**6, calls)
    search_width(2.6, task, timeout=0.0, clock=fake_clock)
    assert calls == []
    with pytest.raises(ValueError):
        search_width(0, task, timeout=1.0, clock=fake_clock)
    with pytest.raises(ValueError):
        search_width(-3, task, timeout=1.0, clock=fake_clock)


def test_advance_step_rules():
    state = SearchState(width=64, started=0.0)
    advance(state, SearchTrial(64, "", 10, Verdict.TOO_HIGH))
    assert (state.width, state.step) == (48, 16)
    advance(state, SearchTrial(48, "", 1, Verdict.TOO_LOW))
    assert (state.width, state.step) == (64, 8)
    advance(state, SearchTrial(64, "", 10, Verdict.TOO_HIGH))
    assert (state.width, state.step) == (60, 4)
    advance(state, SearchTrial(60, "", 10, Verdict.TOO_HIGH))
    assert (state.width, state.step) == (58, 2)
    advance(state, SearchTrial(58, "", 10, Verdict.TOO_HIGH))
    advance(state, SearchTrial(57, "", 10, Verdict.TOO_HIGH))
    assert state.step == 1
    assert state.best.width == 48


@pytest.mark.parametrize("seed", range(25))
def test_monotonic_tasks_never_exceed_budget(seed):
    rng = random.Random(seed)
    a = rng.uniform(0.5, 40.0)
    b = rng.randint(0, 400)
    power = rng.choice([1, 1.5, 2])
    budget = rng.randint(500, 50_000)
    start = rng.randint(1, 300)

    def size_of(w):
        return int(a * w**power) + b

    calls = []
    trial = search_width(
        start, make_task(size_of, budget, calls), timeout=5.0, clock=FakeClock()
    )

    # overshoot corrections move to smaller widths with no larger output
    for prev, nxt in zip(calls, calls[1:]):
        if prev.verdict is Verdict.TOO_HIGH:
            assert nxt.width < prev.width
            assert nxt.size <= prev.size

    if size_of(1) > budget:
        assert trial is None
    else:
        assert trial is not None
        assert trial.size <= budget
        fits = [t for t in calls if t.size <= budget]
        assert trial.width == fits[-1].width


def test_run_search_state_counts_every_trial(fake_clock):
    calls = []
    task = make_task(lambda w: w * w * 2, 2048, calls)
    state = run_search(64, task, timeout=5.0, clock=fake_clock)
    assert state.trials == len(calls) == 7
    assert state.exact is not None and state.exact.width == 32
    assert state.result is state.exact


def test_run_search_result_falls_back_to_best(fake_clock):
    calls = []
    task = make_task(lambda w: w * 10, 95, calls)
    state = run_search(8, task, timeout=5.0, clock=fake_clock)
    assert state.exact is None
    assert state.result is state.best
    assert state.trials == len(calls)


@pytest.mark.parametrize("n, halved", [(1, 1), (2, 1), (3, 2), (7, 4), (16, 8)])
def test_halve_ceil(n, halved):
    assert _halve_ceil(n) == halved
