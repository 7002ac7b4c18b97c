"""Gradual changes of a bulb group's state, stepped over time."""

from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from milighthub.bulb_id import BulbId
from milighthub.group_state_field import GroupStateField

TransitionFn = Callable[[BulbId, GroupStateField, int], None]

# Transition commands are given in seconds; internally everything is milliseconds.
DURATION_UNIT_MULTIPLIER = 1000
# If the period goes lower than this, other parameters are throttled up to match.
MIN_PERIOD = 150
DEFAULT_DURATION = 10000


def _round(x: float) -> int:
    magnitude = int(math.floor(abs(x) + 0.5))
    return -magnitude if x < 0 else magnitude


def calculate_period(distance: int, step_size: int, duration: int) -> int:
    """Return the period that covers ``distance`` in ``duration`` ms with steps of ``step_size``."""
    if distance == 0:
        return 0
    return _round(duration / (distance / step_size))


def step_value(current: int, end: int, step_size: int) -> int:
    """Move ``current`` one step towards ``end`` without overshooting it."""
    delta = end - current
    if abs(delta) < abs(step_size):
        return current + delta
    return current + step_size


class TransitionBuilder(ABC):
    """Collects duration and period of a transition and fills in defaults."""

    def __init__(
        self,
        transition_id: int,
        default_period: int,
        bulb_id: BulbId,
        callback: TransitionFn,
        max_steps: int,
    ) -> None:
        self.id = transition_id
        self.default_period = default_period
        self.bulb_id = bulb_id
        self.callback = callback
        self._duration = 0
        self._period = 0
        self._num_periods = 0
        self._max_steps = max_steps

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def period(self) -> int:
        return self._period

    @property
    def num_periods(self) -> int:
        return self._num_periods

    @property
    def max_steps(self) -> int:
        return self._max_steps

    def set_duration(self, duration: float) -> "TransitionBuilder":
        """Set the duration in seconds."""
        self._duration = int(duration * DURATION_UNIT_MULTIPLIER)
        return self

    def set_duration_raw(self, duration: int) -> "TransitionBuilder":
        """Set the duration in milliseconds."""
        self._duration = int(duration)
        return self

    def set_period(self, period: int) -> "TransitionBuilder":
        """Set the time between steps in milliseconds."""
        self._period = int(period)
        return self

    def set_duration_aware_period(self, period: int, duration: int, max_steps: int) -> "TransitionBuilder":
        """Use ``period``, lengthened if needed so ``max_steps`` steps span ``duration``."""
        if max_steps > 0 and period * max_steps < duration:
            self.set_period(math.ceil(duration / max_steps))
        else:
            self.set_period(period)
        return self

    def is_set_duration(self) -> bool:
        return self._duration > 0

    def is_set_period(self) -> bool:
        return self._period > 0

    def is_set_num_periods(self) -> bool:
        return self._num_periods > 0

    def _num_set_params(self) -> int:
        return sum((self.is_set_duration(), self.is_set_period(), self.is_set_num_periods()))

    def get_or_compute_period(self) -> int:
        if self._period > 0:
            return self._period
        if self._duration > 0 and self._num_periods > 0:
            return max(MIN_PERIOD, math.floor(self._duration / self._num_periods))
        return 0

    def get_or_compute_duration(self) -> int:
        if self._duration > 0:
            return self._duration
        if self._period > 0 and self._num_periods > 0:
            return self._period * self._num_periods
        return 0

    def get_or_compute_num_periods(self) -> int:
        if self._num_periods > 0:
            return self._num_periods
        if self._period > 0 and self._duration > 0:
            return max(1, math.ceil(self._duration / self._period))
        return 0

    def build(self) -> "Transition":
        """Fill in defaults for underspecified parameters and build the transition."""
        num_set = self._num_set_params()
        if num_set == 0:
            self.set_duration(DEFAULT_DURATION)
            self.set_duration_aware_period(self.default_period, self._duration, self._max_steps)
        elif num_set == 1:
            if not self.is_set_duration():
                self.set_duration_raw(DEFAULT_DURATION)
            else:
                self.set_duration_aware_period(self.default_period, self._duration, self._max_steps)
        return self._build()

    @abstractmethod
    def _build(self) -> "Transition":
        """Construct the transition from the completed parameters."""


class Transition(ABC):
    """A change to a bulb group that is applied one step per period."""

    def __init__(self, transition_id: int, bulb_id: BulbId, period: int, callback: TransitionFn) -> None:
        self.id = transition_id
        self.bulb_id = bulb_id
        self.callback = callback
        self.period = period
        self.last_sent = 0

    def tick(self, now: Optional[int] = None) -> None:
        """Take a step if the period has passed; ``now`` is in milliseconds."""
        if now is None:
            now = int(time.monotonic() * 1000)
        # Always send at least once, even if already finished.
        if self.last_sent + self.period <= now and (not self.is_finished() or self.last_sent == 0):
            self.step()
            self.last_sent = now

    @abstractmethod
    def is_finished(self) -> bool:
        """Tell whether the transition has reached its end."""

    @abstractmethod
    def step(self) -> None:
        """Apply one step of the transition."""

    @abstractmethod
    def child_serialize(self) -> dict[str, Any]:
        """Return the fields specific to this kind of transition."""

    def serialize(self) -> dict[str, Any]:
        """Return a JSON-ready description of the transition."""
        result: dict[str, Any] = {
            "id": self.id,
            "period": self.period,
            "last_sent": self.last_sent,
            "bulb": self.bulb_id.to_dict(),
        }
        result.update(self.child_serialize())
        return result