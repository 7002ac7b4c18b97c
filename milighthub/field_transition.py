"""Transitions that move one numeric field towards a target value."""

from __future__ import annotations

import math
from typing import Any

from milighthub.bulb_id import BulbId
from milighthub.group_state_field import GroupStateField, get_field_name
from milighthub.transition import Transition, TransitionBuilder, TransitionFn, step_value


class FieldTransitionBuilder(TransitionBuilder):
    """Builds a transition of one field from ``start`` to ``end``."""

    def __init__(
        self,
        transition_id: int,
        default_period: int,
        bulb_id: BulbId,
        callback: TransitionFn,
        field: GroupStateField,
        start: int,
        end: int,
    ) -> None:
        super().__init__(transition_id, default_period, bulb_id, callback, max(1, abs(end - start)))
        self.field = field
        self.start = start
        self.end = end

    def _build(self) -> "FieldTransition":
        num_periods = self.get_or_compute_num_periods()
        period = self.get_or_compute_period()

        distance = self.end - self.start
        step_size = math.ceil(abs(distance / num_periods))
        if self.end < self.start:
            step_size = -step_size
        if step_size == 0:
            step_size = 1 if self.end > self.start else -1

        return FieldTransition(
            self.id, self.bulb_id, self.field, self.start, self.end, step_size, period, self.callback
        )


class FieldTransition(Transition):
    """Sends the current value of a field each step until it reaches its end."""

    def __init__(
        self,
        transition_id: int,
        bulb_id: BulbId,
        field: GroupStateField,
        start_value: int,
        end_value: int,
        step_size: int,
        period: int,
        callback: TransitionFn,
    ) -> None:
        super().__init__(transition_id, bulb_id, period, callback)
        self.field = field
        self.current_value = start_value
        self.end_value = end_value
        self.step_size = step_size
        self._finished = False

    def step(self) -> None:
        self.callback(self.bulb_id, self.field, self.current_value)
        if self.current_value != self.end_value:
            self.current_value = step_value(self.current_value, self.end_value, self.step_size)
        else:
            self._finished = True

    def is_finished(self) -> bool:
        return self._finished

    def child_serialize(self) -> dict[str, Any]:
        return {
            "type": "field",
            "field": get_field_name(self.field),
            "current_value": self.current_value,
            "end_value": self.end_value,
            "step_size": self.step_size,
        }