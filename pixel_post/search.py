# pixel_post/search.py
from __future__ import annotations

"""
Adaptive width search against a byte budget.

The task maps a candidate width to a SearchTrial (markup + verdict). Output
size grows with width but cannot be predicted in advance, so the search:

  - doubles the width while everything fits and nothing has overshot yet,
  - on the first overshoot backs off by ceil(width / 4),
  - then moves by a step that halves (rounding up) after every correction.

It stops on an exact hit, when the soft wall-clock timeout has passed, when
a width repeats once a step exists, or when the width drops below 1. The
most recent under-budget trial wins.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Optional, Set

from .core_types import Clock, SearchTask, SearchTrial, Verdict, round_half_up
from .utils import debug_log, format_duration, key_value_pairs_to_string


@dataclass
class SearchState:
    """Mutable record owned by a single search loop."""

    width: int
    started: float
    step: Optional[int] = None
    seen: Set[int] = field(default_factory=set)
    best: Optional[SearchTrial] = None
    exact: Optional[SearchTrial] = None
    trials: int = 0

    @property
    def result(self) -> Optional[SearchTrial]:
        """The exact hit if there was one, else the latest under-budget trial."""
        return self.exact if self.exact is not None else self.best


def _halve_ceil(n: int) -> int:
    return int(math.ceil(n / 2))


def advance(state: SearchState, trial: SearchTrial) -> None:
    """Apply one non-exact trial to the state: pick the next width and step."""
    if trial.verdict is Verdict.TOO_HIGH:
        if state.step is None:
            state.step = int(math.ceil(state.width / 4))
        else:
            state.step = _halve_ceil(state.step)
        state.width -= state.step
    elif trial.verdict is Verdict.TOO_LOW:
        state.best = trial
        if state.step is None:
            state.width *= 2
        else:
            state.width += state.step
            state.step = _halve_ceil(state.step)
    else:
        raise ValueError(f"advance() does not handle verdict {trial.verdict}")


def run_search(
    start_width: float,
    task: SearchTask,
    timeout: float,
    *,
    clock: Clock = time.perf_counter,
    debug: bool = False,
) -> SearchState:
    """Run the search and return its final state (see SearchState.result)."""
    width = round_half_up(start_width)
    if width < 1:
        raise ValueError(f"start width must be >= 1, got {start_width}")

    state = SearchState(width=width, started=clock())

    while clock() - state.started < timeout:
        if state.step is not None and state.width in state.seen:
            if debug:
                debug_log(f"search: width {state.width} already tried, stopping")
            break
        if state.width < 1:
            if debug:
                debug_log("search: width fell below 1, stopping")
            break

        trial = task(state.width)
        state.trials += 1
        if state.step is not None:
            state.seen.add(state.width)

        if debug:
            debug_log(
                "search: "
                + key_value_pairs_to_string(
                    [
                        ("Trial", state.trials),
                        ("Width", trial.width),
                        ("Bytes", trial.size),
                        ("Verdict", trial.verdict.value),
                        ("Step", state.step if state.step is not None else "-"),
                        ("Elapsed", format_duration(clock() - state.started)),
                    ]
                )
            )

        if trial.verdict is Verdict.CORRECT:
            state.exact = trial
            return state
        advance(state, trial)
    else:
        if debug:
            debug_log(f"search: timeout after {state.trials} trial(s)")

    return state


def search_width(
    start_width: float,
    task: SearchTask,
    timeout: float,
    *,
    clock: Clock = time.perf_counter,
    debug: bool = False,
) -> Optional[SearchTrial]:
    """Run the search and return the exact or best under-budget trial, or None."""
    return run_search(start_width, task, timeout, clock=clock, debug=debug).result


__all__ = ["SearchState", "advance", "run_search", "search_width"]
