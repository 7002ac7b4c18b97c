"""Names of the fields that make up a bulb group's state."""

from __future__ import annotations

from enum import Enum


class GroupStateField(Enum):
    """A field of group state; the value is its JSON name."""

    UNKNOWN = "unknown"
    STATE = "state"
    STATUS = "status"
    BRIGHTNESS = "brightness"
    LEVEL = "level"
    HUE = "hue"
    SATURATION = "saturation"
    COLOR = "color"
    MODE = "mode"
    KELVIN = "kelvin"
    COLOR_TEMP = "color_temp"
    BULB_MODE = "bulb_mode"
    COMPUTED_COLOR = "computed_color"
    EFFECT = "effect"
    DEVICE_ID = "device_id"
    GROUP_ID = "group_id"
    DEVICE_TYPE = "device_type"
    OH_COLOR = "oh_color"
    HEX_COLOR = "hex_color"


def get_field_by_name(name: str) -> GroupStateField:
    """Return the field with the given name, or ``UNKNOWN``."""
    try:
        return GroupStateField(name)
    except ValueError:
        return GroupStateField.UNKNOWN


def get_field_name(field: GroupStateField) -> str:
    """Return the JSON name of a field."""
    if isinstance(field, GroupStateField):
        return field.value
    return GroupStateField.UNKNOWN.value


def is_brightness_field(field: GroupStateField) -> bool:
    """Tell whether the field carries a brightness value."""
    return field in (GroupStateField.BRIGHTNESS, GroupStateField.LEVEL)