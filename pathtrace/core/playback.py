# pathtrace/core/playback.py
#!/usr/bin/env python3
"""
Playback of a computed path (and its branches), one cell per step.

States:
    Idle -> Computed -> Playing <-> Paused -> Finished

The result is computed lazily on the first play()/step() after a reset.
Time comes from an injected clock returning milliseconds: MonotonicClock
for a real window, ManualClock for tests. tick() commits only whole
steps; the leftover fraction is a rendering hint for interpolation.

The controller never watches the model. Whoever edits the grid or graph
must call reset() before the next play()/step().
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from loguru import logger

from pathtrace.core.types import GridResult

IDLE = "Idle"
COMPUTED = "Computed"
PLAYING = "Playing"
PAUSED = "Paused"
FINISHED = "Finished"

DEFAULT_STEP_MS = 120.0
STEP_EPSILON = 1e-9

ComputeFn = Callable[[bool], Union[GridResult, List[Any]]]
Clock = Callable[[], float]


class MonotonicClock:
    def __call__(self) -> float:
        return time.perf_counter() * 1000.0


class ManualClock:
    """Deterministic clock; time moves only when advance() is called."""

    def __init__(self, start_ms: float = 0.0):
        self.now = float(start_ms)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


@dataclass(frozen=True)
class PlaybackConfig:
    step_duration_ms: float = DEFAULT_STEP_MS
    show_branches: bool = False

    def __post_init__(self):
        if self.step_duration_ms <= 0:
            raise ValueError(f"step_duration_ms must be positive, got {self.step_duration_ms}")


@dataclass(frozen=True)
class PlaybackSnapshot:
    state: str
    path_index: int
    branch_indices: Tuple[int, ...]
    fraction: float
    path: Tuple[Any, ...] = ()
    branches: Tuple[Tuple[Any, ...], ...] = ()
    metrics: dict = field(default_factory=dict)

    @property
    def computed(self) -> bool:
        return self.state != IDLE

    @property
    def has_route(self) -> bool:
        return bool(self.path)

    def current(self) -> Optional[Any]:
        return self.path[self.path_index] if self.path else None

    def position(self, locate: Optional[Callable[[Any], Sequence[float]]] = None
                 ) -> Optional[Tuple[float, ...]]:
        """Interpolated point between the current and next path item.

        `locate` maps a path item to coordinates; grid cells are used as-is.
        """
        if not self.path:
            return None
        locate = locate or (lambda item: item)
        a = locate(self.path[self.path_index])
        if self.fraction <= 0 or self.path_index >= len(self.path) - 1:
            return tuple(float(x) for x in a)
        b = locate(self.path[self.path_index + 1])
        t = self.fraction
        return tuple(float(x) + (float(y) - float(x)) * t for x, y in zip(a, b))


class PlaybackController:
    def __init__(self, compute: ComputeFn, config: Optional[PlaybackConfig] = None,
                 clock: Optional[Clock] = None,
                 on_change: Optional[Callable[["PlaybackController"], None]] = None):
        self._compute = compute
        self.config = config or PlaybackConfig()
        self._clock = clock or MonotonicClock()
        self._on_change = on_change
        self._clear()

    def _clear(self) -> None:
        self.state = IDLE
        self.path: List[Any] = []
        self.branches: List[List[Any]] = []
        self.metrics: dict = {}
        self.path_index = 0
        self.branch_indices: List[int] = []
        self.fraction = 0.0
        self._anchor_ms = 0.0
        self._committed = 0     # whole steps taken since _anchor_ms

    def _set_state(self, state: str) -> None:
        if state != self.state:
            logger.debug("Playback {} -> {}", self.state, state)
            self.state = state

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    # -------------------- computation --------------------

    def _ensure_computed(self) -> None:
        if self.state != IDLE:
            return
        res = self._compute(self.config.show_branches)
        if isinstance(res, GridResult):
            self.path = list(res.path)
            self.branches = [list(b) for b in res.branches] if self.config.show_branches else []
            self.metrics = dict(res.metrics)
        else:
            self.path = list(res or [])
            self.branches = []
            self.metrics = {"path_len": len(self.path)}
        self.path_index = 0
        self.branch_indices = [0] * len(self.branches)
        self.fraction = 0.0
        self._set_state(COMPUTED)
        if not self.path:
            logger.info("No route between the current endpoints")

    @property
    def last_index(self) -> int:
        return max(0, len(self.path) - 1)

    def _at_end(self) -> bool:
        return self.path_index >= self.last_index

    def _advance(self, n: int) -> int:
        moved = min(n, self.last_index - self.path_index)
        if moved > 0:
            self.path_index += moved
            # same count for every branch; each stops at its own end
            self.branch_indices = [min(i + moved, len(b) - 1)
                                   for i, b in zip(self.branch_indices, self.branches)]
        if self._at_end():
            self.fraction = 0.0
            self._set_state(FINISHED)
        return moved

    # -------------------- controls --------------------

    def play(self) -> None:
        if self.state in (PLAYING, FINISHED):
            return
        self._ensure_computed()
        if self._at_end():
            self._set_state(FINISHED)
        else:
            self._reanchor(self.config.step_duration_ms)
            self._set_state(PLAYING)
        self._notify()

    def pause(self) -> None:
        """Freeze the clock; the partial step resumes on the next play()."""
        if self.state != PLAYING:
            return
        self.tick()
        if self.state != PLAYING:
            return
        self._set_state(PAUSED)
        self._notify()

    def toggle(self) -> None:
        if self.state == PLAYING:
            self.pause()
        else:
            self.play()

    def step(self) -> None:
        if self.state == FINISHED:
            return
        self._ensure_computed()
        if self.state == PLAYING:
            self.pause()
        self.fraction = 0.0
        self._advance(1)
        if self.state != FINISHED:
            self._set_state(PAUSED)
        self._notify()

    def reset(self) -> None:
        was = self.state
        self._clear()
        if was != IDLE:
            logger.debug("Playback {} -> {}", was, IDLE)
        self._notify()

    def tick(self) -> int:
        """Advance by however many whole steps the clock says are due."""
        if self.state != PLAYING:
            return 0
        steps = (self._clock() - self._anchor_ms) / self.config.step_duration_ms
        # tolerance so n clock advances of one step count as n steps
        total = int(steps + STEP_EPSILON)
        due = total - self._committed
        moved = 0
        if due > 0:
            self._committed = total
            moved = self._advance(due)
        if self.state == PLAYING:
            self.fraction = min(max(steps - total, 0.0), 1.0 - 1e-9)
        if moved or self.state == PLAYING:
            self._notify()
        return moved

    # -------------------- configuration --------------------

    def set_step_duration(self, ms: float) -> None:
        """Change speed in place, keeping the current fraction."""
        self.config = replace(self.config, step_duration_ms=ms)
        if self.state == PLAYING:
            self._reanchor(ms)

    def _reanchor(self, ms: float) -> None:
        self._anchor_ms = self._clock() - self.fraction * ms
        self._committed = 0

    def set_show_branches(self, show: bool) -> None:
        if show == self.config.show_branches:
            return
        self.config = replace(self.config, show_branches=show)
        self.reset()

    def set_compute(self, compute: ComputeFn) -> None:
        self._compute = compute
        self.reset()

    # -------------------- read side --------------------

    def snapshot(self) -> PlaybackSnapshot:
        return PlaybackSnapshot(
            state=self.state,
            path_index=self.path_index,
            branch_indices=tuple(self.branch_indices),
            fraction=self.fraction,
            path=tuple(self.path),
            branches=tuple(tuple(b) for b in self.branches),
            metrics=dict(self.metrics),
        )
