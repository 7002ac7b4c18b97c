"""On/off status and the names of special bulb commands."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any


class MiLightStatus(IntEnum):
    """Power status of a bulb group."""

    ON = 0
    OFF = 1


class CommandName(str, Enum):
    """Names of commands that can be sent in a request's ``command`` key."""

    UNPAIR = "unpair"
    PAIR = "pair"
    SET_WHITE = "set_white"
    NIGHT_MODE = "night_mode"
    LEVEL_UP = "level_up"
    LEVEL_DOWN = "level_down"
    TEMPERATURE_UP = "temperature_up"
    TEMPERATURE_DOWN = "temperature_down"
    NEXT_MODE = "next_mode"
    PREVIOUS_MODE = "previous_mode"
    MODE_SPEED_DOWN = "mode_speed_down"
    MODE_SPEED_UP = "mode_speed_up"
    TOGGLE = "toggle"
    TRANSITION = "transition"


def parse_status(value: Any) -> MiLightStatus:
    """Interpret a JSON value as a status.

    Booleans map to on/off, small non-negative integers are taken as raw status
    values, and strings are on when they read "on" or "true" in any case.
    Anything else is off. Raises ValueError for an integer that is no status.
    """
    if isinstance(value, bool):
        return MiLightStatus.ON if value else MiLightStatus.OFF
    if isinstance(value, int) and 0 <= value <= 0xFFFF:
        return MiLightStatus(value)
    if isinstance(value, str) and value.lower() in ("on", "true"):
        return MiLightStatus.ON
    return MiLightStatus.OFF