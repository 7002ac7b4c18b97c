"""UDP server for the version 5 (and earlier) gateway protocol."""

from __future__ import annotations

import logging
import math
from enum import IntEnum
from typing import Optional

from milighthub.remote_type import RemoteType
from milighthub.status import MiLightStatus
from milighthub.udp_server import MiLightUdpServer

_log = logging.getLogger(__name__)


class V5Command(IntEnum):
    """Command bytes of the version 5 protocol."""

    CCT_ALL_ON = 0x35
    CCT_ALL_OFF = 0x39
    CCT_GROUP_1_ON = 0x38
    CCT_GROUP_1_OFF = 0x3B
    CCT_GROUP_2_ON = 0x3D
    CCT_GROUP_2_OFF = 0x33
    CCT_GROUP_3_ON = 0x37
    CCT_GROUP_3_OFF = 0x3A
    CCT_GROUP_4_ON = 0x32
    CCT_GROUP_4_OFF = 0x36
    CCT_TEMPERATURE_DOWN = 0x3F
    CCT_TEMPERATURE_UP = 0x3E
    CCT_BRIGHTNESS_DOWN = 0x34
    CCT_BRIGHTNESS_UP = 0x3C
    CCT_NIGHT_MODE = 0xB9

    RGBW_ALL_OFF = 0x41
    RGBW_ALL_ON = 0x42
    RGBW_SPEED_UP = 0x43
    RGBW_SPEED_DOWN = 0x44
    RGBW_GROUP_1_ON = 0x45
    RGBW_GROUP_1_OFF = 0x46
    RGBW_GROUP_2_ON = 0x47
    RGBW_GROUP_2_OFF = 0x48
    RGBW_GROUP_3_ON = 0x49
    RGBW_GROUP_3_OFF = 0x4A
    RGBW_GROUP_4_ON = 0x4B
    RGBW_GROUP_4_OFF = 0x4C
    RGBW_DISCO_MODE = 0x4D
    RGBW_GROUP_ALL_WHITE = 0xC2
    RGBW_GROUP_1_WHITE = 0xC5
    RGBW_GROUP_2_WHITE = 0xC7
    RGBW_GROUP_3_WHITE = 0xC9
    RGBW_GROUP_4_WHITE = 0xCB
    RGBW_GROUP_ALL_NIGHT = 0xC1
    RGBW_GROUP_1_NIGHT = 0xC6
    RGBW_GROUP_2_NIGHT = 0xC8
    RGBW_GROUP_3_NIGHT = 0xCA
    RGBW_GROUP_4_NIGHT = 0xCC
    RGBW_BRIGHTNESS = 0x4E
    RGBW_COLOR = 0x40


_CCT_GROUPS = {
    V5Command.CCT_ALL_ON: 0,
    V5Command.CCT_ALL_OFF: 0,
    V5Command.CCT_GROUP_1_ON: 1,
    V5Command.CCT_GROUP_1_OFF: 1,
    V5Command.CCT_GROUP_2_ON: 2,
    V5Command.CCT_GROUP_2_OFF: 2,
    V5Command.CCT_GROUP_3_ON: 3,
    V5Command.CCT_GROUP_3_OFF: 3,
    V5Command.CCT_GROUP_4_ON: 4,
    V5Command.CCT_GROUP_4_OFF: 4,
}

_CCT_ON_COMMANDS = frozenset({
    V5Command.CCT_ALL_ON,
    V5Command.CCT_GROUP_1_ON,
    V5Command.CCT_GROUP_2_ON,
    V5Command.CCT_GROUP_3_ON,
    V5Command.CCT_GROUP_4_ON,
})

_RGBW_WHITE = frozenset({
    V5Command.RGBW_GROUP_ALL_WHITE,
    V5Command.RGBW_GROUP_1_WHITE,
    V5Command.RGBW_GROUP_2_WHITE,
    V5Command.RGBW_GROUP_3_WHITE,
    V5Command.RGBW_GROUP_4_WHITE,
})

_RGBW_NIGHT = frozenset({
    V5Command.RGBW_GROUP_ALL_NIGHT,
    V5Command.RGBW_GROUP_1_NIGHT,
    V5Command.RGBW_GROUP_2_NIGHT,
    V5Command.RGBW_GROUP_3_NIGHT,
    V5Command.RGBW_GROUP_4_NIGHT,
})


def _round(x: float) -> int:
    magnitude = int(math.floor(abs(x) + 0.5))
    return -magnitude if x < 0 else magnitude


def cct_command_to_group(command: int) -> Optional[int]:
    """Return the group a CCT on/off command addresses, or None.

    The top bit (set on night mode commands) is ignored.
    """
    return _CCT_GROUPS.get(command & 0x7F)


def _cct_command_to_status(command: int) -> MiLightStatus:
    return MiLightStatus.ON if (command & 0x7F) in _CCT_ON_COMMANDS else MiLightStatus.OFF


class V5MiLightUdpServer(MiLightUdpServer):
    """Handles the two- or three-byte commands of the version 5 protocol."""

    def handle_packet(self, packet: bytes) -> None:
        if len(packet) in (2, 3):
            self.handle_command(packet[0], packet[1])
        else:
            _log.warning("unexpected packet length; should always be 2-3, was: %d", len(packet))

    def handle_command(self, command: int, arg: int) -> None:
        """Carry out one command byte with its argument byte."""
        client = self.client

        if V5Command.RGBW_GROUP_1_ON <= command <= V5Command.RGBW_GROUP_4_OFF:
            status = MiLightStatus.ON if command % 2 == 1 else MiLightStatus.OFF
            group = (command - V5Command.RGBW_GROUP_1_ON + 2) // 2
            client.prepare(RemoteType.RGBW, self.device_id, group)
            client.update_status(status)
            self.last_group = group
            return

        if command in _RGBW_WHITE:
            group = (command - V5Command.RGBW_GROUP_ALL_WHITE) // 2
            client.prepare(RemoteType.RGBW, self.device_id, group)
            client.update_color_white()
            self.last_group = group
            return

        if command in _RGBW_NIGHT:
            if command == V5Command.RGBW_GROUP_ALL_NIGHT:
                group = 0
            else:
                group = (command - V5Command.RGBW_GROUP_1_NIGHT + 2) // 2
            client.prepare(RemoteType.RGBW, self.device_id, group)
            client.enable_night_mode()
            self.last_group = group
            return

        client.prepare(RemoteType.RGBW, self.device_id, self.last_group)
        if self._handle_rgbw(command, arg):
            return

        on_off_group = cct_command_to_group(command)
        if on_off_group is not None:
            client.prepare(RemoteType.CCT, self.device_id, on_off_group)
            # Night mode commands are the off commands with the top bit set.
            if command & 0x80:
                client.enable_night_mode()
            else:
                client.update_status(_cct_command_to_status(command))
            return

        client.prepare(RemoteType.CCT, self.device_id, self.last_group)
        self._handle_cct(command)

    def _handle_rgbw(self, command: int, arg: int) -> bool:
        client = self.client
        match command:
            case V5Command.RGBW_ALL_ON:
                client.update_status(MiLightStatus.ON, 0)
            case V5Command.RGBW_ALL_OFF:
                client.update_status(MiLightStatus.OFF, 0)
            case V5Command.RGBW_COLOR:
                # The UDP colour is shifted from the radio colour and its
                # spectrum runs the other way round.
                client.update_color_raw((0xFF - (arg + 0x35)) & 0xFF)
            case V5Command.RGBW_DISCO_MODE:
                client.next_mode()
            case V5Command.RGBW_SPEED_DOWN:
                client.mode_speed_down()
            case V5Command.RGBW_SPEED_UP:
                client.mode_speed_up()
            case V5Command.RGBW_BRIGHTNESS:
                # Map [2, 27] onto [0, 100].
                client.update_brightness(_round(((arg - 2) / 25.0) * 100))
            case _:
                return False
        return True

    def _handle_cct(self, command: int) -> None:
        client = self.client
        match command:
            case V5Command.CCT_BRIGHTNESS_DOWN:
                client.decrease_brightness()
            case V5Command.CCT_BRIGHTNESS_UP:
                client.increase_brightness()
            case V5Command.CCT_TEMPERATURE_DOWN:
                client.decrease_temperature()
            case V5Command.CCT_TEMPERATURE_UP:
                client.increase_temperature()
            case V5Command.CCT_NIGHT_MODE:
                client.enable_night_mode()
            case _:
                _log.warning("unhandled command: %d", command)