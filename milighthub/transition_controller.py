"""Keeps the active transitions and steps them from the main loop."""

from __future__ import annotations

from typing import Any, Optional

from milighthub.bulb_id import BulbId
from milighthub.change_field_transition import ChangeFieldOnFinishTransitionBuilder
from milighthub.color_transition import ColorTransitionBuilder
from milighthub.field_transition import FieldTransitionBuilder
from milighthub.group_state_field import GroupStateField
from milighthub.status import MiLightStatus
from milighthub.transition import Transition, TransitionBuilder, TransitionFn

DEFAULT_PERIOD = 500


class TransitionController:
    """Creates transitions, runs them and passes their changes to listeners."""

    def __init__(self) -> None:
        self._active: list[Transition] = []
        self._observers: list[TransitionFn] = []
        self._current_id = 0
        self.default_period = DEFAULT_PERIOD

    def _next_id(self) -> int:
        transition_id = self._current_id
        self._current_id += 1
        return transition_id

    def _dispatch(self, bulb_id: BulbId, field: GroupStateField, value: int) -> None:
        for observer in list(self._observers):
            observer(bulb_id, field, value)

    def set_default_period(self, period: int) -> None:
        """Set the period used by transitions that do not give one."""
        self.default_period = period

    def clear_listeners(self) -> None:
        """Remove every listener."""
        self._observers.clear()

    def add_listener(self, fn: TransitionFn) -> None:
        """Call ``fn(bulb_id, field, value)`` for every change a transition makes."""
        self._observers.append(fn)

    def build_color_transition(self, bulb_id: BulbId, start: Any, end: Any) -> TransitionBuilder:
        """Return a builder for a fade between two colours."""
        return ColorTransitionBuilder(
            self._next_id(), self.default_period, bulb_id, self._dispatch, start, end
        )

    def build_field_transition(
        self, bulb_id: BulbId, field: GroupStateField, start: int, end: int
    ) -> TransitionBuilder:
        """Return a builder that moves one field from ``start`` to ``end``."""
        return FieldTransitionBuilder(
            self._next_id(), self.default_period, bulb_id, self._dispatch, field, start, end
        )

    def build_status_transition(
        self, bulb_id: BulbId, status: MiLightStatus, start_level: int
    ) -> TransitionBuilder:
        """Return a builder that fades a group on or off.

        Fading on switches the group on at once and raises the level to 100.
        Fading off lowers the level to 0 and then switches the group off.
        """
        if status == MiLightStatus.ON:
            # Make sure the bulb is on before changing its brightness.
            self._dispatch(bulb_id, GroupStateField.STATUS, MiLightStatus.ON)
            return self.build_field_transition(bulb_id, GroupStateField.LEVEL, start_level, 100)

        wrapper_id = self._next_id()
        delegate = self.build_field_transition(bulb_id, GroupStateField.LEVEL, start_level, 0)
        return ChangeFieldOnFinishTransitionBuilder(
            wrapper_id, GroupStateField.STATUS, MiLightStatus.OFF, delegate
        )

    def add_transition(self, transition: Transition) -> None:
        """Start running a transition."""
        self._active.append(transition)

    def clear(self) -> None:
        """Drop every active transition."""
        self._active.clear()

    def loop(self, now: Optional[int] = None) -> None:
        """Tick every transition and drop those that have finished."""
        for transition in list(self._active):
            transition.tick(now)
            if transition.is_finished():
                self._active.remove(transition)

    def transitions(self) -> list[Transition]:
        """Return the active transitions in the order they were added."""
        return list(self._active)

    def get_transition(self, transition_id: int) -> Optional[Transition]:
        """Return the active transition with this id, or None."""
        return next((t for t in self._active if t.id == transition_id), None)

    def delete_transition(self, transition_id: int) -> bool:
        """Stop the transition with this id; tell whether one was found."""
        transition = self.get_transition(transition_id)
        if transition is None:
            return False
        self._active.remove(transition)
        return True