"""Transitions that fade a bulb group between two RGB colours."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Protocol

from milighthub.bulb_id import BulbId
from milighthub.group_state_field import GroupStateField
from milighthub.parsed_color import parsed_color_from_rgb
from milighthub.transition import Transition, TransitionBuilder, TransitionFn, step_value


class _HasRgb(Protocol):
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class RgbColor:
    """A plain RGB triple; components may be signed when used as step sizes."""

    r: int = 0
    g: int = 0
    b: int = 0

    @classmethod
    def from_color(cls, color: _HasRgb) -> "RgbColor":
        return cls(color.r, color.g, color.b)

    def as_list(self) -> list[int]:
        return [self.r, self.g, self.b]


def calculate_max_distance(start: _HasRgb, end: _HasRgb) -> int:
    """Return the component difference with the largest magnitude, with its sign."""
    deltas = (end.r - start.r, end.g - start.g, end.b - start.b)
    largest = max(deltas)
    smallest = min(deltas)
    return smallest if abs(smallest) > abs(largest) else largest


def calculate_step_size_part(distance: int, duration: int, period: int) -> int:
    """Return the per-period step for one component, rounded away from zero."""
    step = (distance / duration) * period
    rounded = math.ceil(abs(step))
    return -rounded if distance < 0 else rounded


class ColorTransitionBuilder(TransitionBuilder):
    """Builds a colour transition from ``start`` to ``end``."""

    def __init__(
        self,
        transition_id: int,
        default_period: int,
        bulb_id: BulbId,
        callback: TransitionFn,
        start: _HasRgb,
        end: _HasRgb,
    ) -> None:
        super().__init__(
            transition_id, default_period, bulb_id, callback, abs(calculate_max_distance(start, end))
        )
        self.start = start
        self.end = end

    def _build(self) -> "ColorTransition":
        duration = self.get_or_compute_duration()
        period = self.get_or_compute_period()
        step_sizes = RgbColor(
            calculate_step_size_part(self.end.r - self.start.r, duration, period),
            calculate_step_size_part(self.end.g - self.start.g, duration, period),
            calculate_step_size_part(self.end.b - self.start.b, duration, period),
        )
        return ColorTransition(
            self.id, self.bulb_id, self.start, self.end, step_sizes, period, self.callback
        )


class ColorTransition(Transition):
    """Sends hue and saturation as the colour moves towards its end."""

    def __init__(
        self,
        transition_id: int,
        bulb_id: BulbId,
        start_color: _HasRgb,
        end_color: _HasRgb,
        step_sizes: RgbColor,
        period: int,
        callback: TransitionFn,
    ) -> None:
        super().__init__(transition_id, bulb_id, period, callback)
        self.end_color = RgbColor.from_color(end_color)
        self.current_color = RgbColor.from_color(start_color)
        self.step_sizes = step_sizes
        # Impossible values, so the first step always sends.
        self._last_hue = 400
        self._last_saturation = 200
        self._finished = False

    def step(self) -> None:
        current = self.current_color
        parsed = parsed_color_from_rgb(current.r, current.g, current.b)

        if parsed.hue != self._last_hue:
            self.callback(self.bulb_id, GroupStateField.HUE, parsed.hue)
            self._last_hue = parsed.hue
        if parsed.saturation != self._last_saturation:
            self.callback(self.bulb_id, GroupStateField.SATURATION, parsed.saturation)
            self._last_saturation = parsed.saturation

        if current == self.end_color:
            self._finished = True
        else:
            end, steps = self.end_color, self.step_sizes
            self.current_color = RgbColor(
                step_value(current.r, end.r, steps.r),
                step_value(current.g, end.g, steps.g),
                step_value(current.b, end.b, steps.b),
            )

    def is_finished(self) -> bool:
        return self._finished

    def child_serialize(self) -> dict[str, Any]:
        return {
            "type": "color",
            "current_color": self.current_color.as_list(),
            "end_color": self.end_color.as_list(),
            "step_sizes": self.step_sizes.as_list(),
        }