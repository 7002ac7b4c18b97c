"""Radio channel and power level settings."""

from __future__ import annotations

import logging
from enum import IntEnum

_log = logging.getLogger(__name__)


class RF24Channel(IntEnum):
    """Which of the three 2.4 GHz channels a remote uses."""

    RF24_LOW = 0
    RF24_MID = 1
    RF24_HIGH = 2


class RF24PowerLevel(IntEnum):
    """Transmit power level of the radio."""

    RF24_MIN = 0
    RF24_LOW = 1
    RF24_HIGH = 2
    RF24_MAX = 3


_CHANNEL_NAMES = ("LOW", "MID", "HIGH")
_POWER_LEVEL_NAMES = ("MIN", "LOW", "HIGH", "MAX")


def default_channel() -> RF24Channel:
    """Return the channel used when none is given."""
    return RF24Channel.RF24_HIGH


def channel_name(value: RF24Channel) -> str:
    """Return the settings name of a channel."""
    index = int(value)
    if not 0 <= index < len(_CHANNEL_NAMES):
        _log.error("unknown RF24 channel label: %s", value)
        return channel_name(default_channel())
    return _CHANNEL_NAMES[index]


def channel_from_name(name: str) -> RF24Channel:
    """Look up a channel by name; unknown names give the default."""
    if name in _CHANNEL_NAMES:
        return RF24Channel(_CHANNEL_NAMES.index(name))
    _log.warning("tried to fetch unknown RF24 channel: %s, using default", name)
    return default_channel()


def all_channels() -> list[RF24Channel]:
    """Return every channel in order."""
    return [channel_from_name(name) for name in _CHANNEL_NAMES]


def default_power_level() -> RF24PowerLevel:
    """Return the power level used when none is given."""
    return RF24PowerLevel.RF24_MAX


def power_level_name(value: RF24PowerLevel) -> str:
    """Return the settings name of a power level."""
    index = int(value)
    if not 0 <= index < len(_POWER_LEVEL_NAMES):
        _log.error("unknown RF24 power level label: %s", value)
        return power_level_name(default_power_level())
    return _POWER_LEVEL_NAMES[index]


def power_level_from_name(name: str) -> RF24PowerLevel:
    """Look up a power level by name; unknown names give the default."""
    if name in _POWER_LEVEL_NAMES:
        return RF24PowerLevel(_POWER_LEVEL_NAMES.index(name))
    _log.warning("tried to fetch unknown RF24 power level: %s, using default", name)
    return default_power_level()


def power_level_rf24_value(value: RF24PowerLevel) -> int:
    """Return the raw radio register value for a power level."""
    return int(value)