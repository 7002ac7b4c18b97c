"""A transition that sets a field once another transition has finished."""

from __future__ import annotations

from typing import Any

from milighthub.group_state_field import GroupStateField, get_field_name
from milighthub.transition import Transition, TransitionBuilder


class ChangeFieldOnFinishTransitionBuilder(TransitionBuilder):
    """Wraps another builder; the built transition takes the delegate's id."""

    def __init__(
        self,
        transition_id: int,
        field: GroupStateField,
        arg: int,
        delegate: TransitionBuilder,
    ) -> None:
        super().__init__(
            delegate.id,
            delegate.default_period,
            delegate.bulb_id,
            delegate.callback,
            delegate.max_steps,
        )
        self.delegate = delegate
        self.field = field
        self.arg = arg

    def _build(self) -> "ChangeFieldOnFinishTransition":
        self.delegate.set_duration_raw(self.get_or_compute_duration())
        self.delegate.set_period(self.get_or_compute_period())
        return ChangeFieldOnFinishTransition(
            self.delegate.build(), self.field, self.arg, self.delegate.period
        )


class ChangeFieldOnFinishTransition(Transition):
    """Runs a delegate transition, then sends one final field change."""

    def __init__(self, delegate: Transition, field: GroupStateField, arg: int, period: int) -> None:
        super().__init__(delegate.id, delegate.bulb_id, period, delegate.callback)
        self.delegate = delegate
        self.field = field
        self.arg = arg
        self._change_sent = False

    def is_finished(self) -> bool:
        return self.delegate.is_finished() and self._change_sent

    def step(self) -> None:
        if not self.delegate.is_finished():
            self.delegate.step()
        else:
            self.callback(self.bulb_id, self.field, self.arg)
            self._change_sent = True

    def child_serialize(self) -> dict[str, Any]:
        return {
            "type": "change_on_finish",
            "field": get_field_name(self.field),
            "value": self.arg,
            "child": self.delegate.child_serialize(),
        }