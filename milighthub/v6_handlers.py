"""Command handlers for the version 6 gateway protocol, one per remote type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Iterable, Optional

from milighthub.remote_type import RemoteType
from milighthub.status import MiLightStatus


class V6CommandType(IntEnum):
    """The kind of a version 6 command packet."""

    PAIR = 0x3D
    UNPAIR = 0x3E
    PRESET = 0x3F
    COMMAND = 0x31


def _split(command: int, command_arg: int) -> tuple[int, int]:
    """Return the command byte without its hold bit and the argument's top byte."""
    return command & 0x7F, (command_arg >> 24) & 0xFF


class V6CommandHandler(ABC):
    """Handles the commands of one remote type.

    ``client`` is the object that sends commands to bulbs; handlers call
    methods such as ``prepare``, ``update_status`` and ``set_held`` on it.
    """

    def __init__(self, command_id: int, remote_type: RemoteType) -> None:
        self.command_id = command_id
        self.remote_type = remote_type

    def handle(
        self,
        client: Any,
        device_id: int,
        group: int,
        command_type: int,
        command: int,
        command_arg: int,
    ) -> bool:
        """Address the group and carry out the command; tell whether it was handled."""
        client.prepare(self.remote_type, device_id, group)

        if command_type == V6CommandType.PAIR:
            client.pair()
        elif command_type == V6CommandType.UNPAIR:
            client.unpair()
        elif command_type == V6CommandType.PRESET:
            return self.handle_preset(client, command & 0xFF, command_arg)
        elif command_type == V6CommandType.COMMAND:
            return self.handle_command(client, command, command_arg)
        else:
            return False
        return True

    @abstractmethod
    def handle_command(self, client: Any, command: int, command_arg: int) -> bool:
        """Carry out a plain command; tell whether it was understood."""

    @abstractmethod
    def handle_preset(self, client: Any, command_lsb: int, command_arg: int) -> bool:
        """Carry out a preset command; tell whether it was understood."""


class V6CctCommandHandler(V6CommandHandler):
    """Commands for CCT (white temperature) bulbs."""

    COMMAND_PREFIX = 0x01
    BRIGHTNESS_UP = 0x01
    BRIGHTNESS_DOWN = 0x02
    TEMPERATURE_UP = 0x03
    TEMPERATURE_DOWN = 0x04
    NIGHT_LIGHT = 0x06
    ON = 0x07
    OFF = 0x08

    def __init__(self) -> None:
        super().__init__(0x0100, RemoteType.CCT)

    def handle_preset(self, client: Any, command_lsb: int, command_arg: int) -> bool:
        return False

    def handle_command(self, client: Any, command: int, command_arg: int) -> bool:
        cmd, arg = _split(command, command_arg)
        client.set_held((command & 0x80) == 0x80)

        if cmd != self.COMMAND_PREFIX:
            return False

        match arg:
            case self.ON:
                client.update_status(MiLightStatus.ON)
            case self.OFF:
                client.update_status(MiLightStatus.OFF)
            case self.BRIGHTNESS_DOWN:
                client.decrease_brightness()
            case self.BRIGHTNESS_UP:
                client.increase_brightness()
            case self.TEMPERATURE_DOWN:
                client.decrease_temperature()
            case self.TEMPERATURE_UP:
                client.increase_temperature()
            case self.NIGHT_LIGHT:
                client.enable_night_mode()
            case _:
                return False
        return True


class V6RgbCctCommandHandler(V6CommandHandler):
    """Commands for RGB+CCT bulbs."""

    COLOR = 0x01
    SATURATION = 0x02
    BRIGHTNESS = 0x03
    STATUS = 0x04
    KELVIN = 0x05
    MODE = 0x06

    STATUS_ON = 0x01
    STATUS_OFF = 0x02
    SPEED_UP = 0x03
    SPEED_DOWN = 0x04
    NIGHT_MODE = 0x05

    def __init__(self) -> None:
        super().__init__(0x0800, RemoteType.RGB_CCT)

    def handle_preset(self, client: Any, command_lsb: int, command_arg: int) -> bool:
        if command_lsb == 0:
            saturation = (command_arg >> 24) & 0xFF
            color = (command_arg >> 16) & 0xFF
            brightness = (command_arg >> 8) & 0xFF
            client.update_brightness(brightness)
            client.update_color_raw(color)
            client.update_saturation(saturation)
        elif command_lsb == 1:
            brightness = (command_arg >> 16) & 0xFF
            kelvin = (command_arg >> 8) & 0xFF
            client.update_brightness(brightness)
            client.update_temperature((0x64 - kelvin) & 0xFF)
        else:
            return False
        return True

    def handle_command(self, client: Any, command: int, command_arg: int) -> bool:
        cmd, arg = _split(command, command_arg)
        client.set_held((command & 0x80) == 0x80)

        if cmd == self.STATUS:
            match arg:
                case self.STATUS_ON:
                    client.update_status(MiLightStatus.ON)
                case self.STATUS_OFF:
                    client.update_status(MiLightStatus.OFF)
                case self.NIGHT_MODE:
                    client.enable_night_mode()
                case self.SPEED_DOWN:
                    client.mode_speed_down()
                case self.SPEED_UP:
                    client.mode_speed_up()
                case _:
                    return False
            return True

        match cmd:
            case self.COLOR:
                self.handle_update_color(client, command_arg)
            case self.KELVIN:
                client.update_temperature((100 - arg) & 0xFF)
            case self.BRIGHTNESS:
                client.update_brightness(arg)
            case self.SATURATION:
                client.update_saturation((100 - arg) & 0xFF)
            case self.MODE:
                client.update_mode((arg - 1) & 0xFF)
            case _:
                return False
        return True

    def handle_update_color(self, client: Any, color: int) -> None:
        """Send each byte of a 32-bit colour argument, most significant first.

        The app packs several colours into one argument when it moves through
        colours quickly.
        """
        for shift in (24, 16, 8, 0):
            value = (color >> shift) & 0xFF
            client.update_color_raw((value + 0xF6) & 0xFF)


class V6RgbCommandHandler(V6CommandHandler):
    """Commands for RGB bulbs."""

    COMMAND_PREFIX = 0x02
    COLOR_PREFIX = 0x01
    BRIGHTNESS_DOWN = 0x01
    BRIGHTNESS_UP = 0x02
    SPEED_DOWN = 0x03
    SPEED_UP = 0x04
    MODE_DOWN = 0x05
    MODE_UP = 0x06
    ON = 0x09
    OFF = 0x0A

    def __init__(self) -> None:
        super().__init__(0x0500, RemoteType.RGB)

    def handle_preset(self, client: Any, command_lsb: int, command_arg: int) -> bool:
        return True

    def handle_command(self, client: Any, command: int, command_arg: int) -> bool:
        cmd, arg = _split(command, command_arg)
        client.set_held((command & 0x80) == 0x80)

        if cmd == self.COMMAND_PREFIX:
            match arg:
                case self.ON:
                    client.update_status(MiLightStatus.ON)
                case self.OFF:
                    client.update_status(MiLightStatus.OFF)
                case self.BRIGHTNESS_DOWN:
                    client.decrease_brightness()
                case self.BRIGHTNESS_UP:
                    client.increase_brightness()
                case self.MODE_DOWN:
                    client.previous_mode()
                case self.MODE_UP:
                    client.next_mode()
                case self.SPEED_DOWN:
                    client.mode_speed_down()
                case self.SPEED_UP:
                    client.mode_speed_up()
                case _:
                    return False
            return True
        if cmd == self.COLOR_PREFIX:
            client.update_color_raw(arg)
            return True
        return False


class V6RgbwCommandHandler(V6CommandHandler):
    """Commands for RGBW bulbs."""

    COLOR_PREFIX = 0x01
    BRIGHTNESS_PREFIX = 0x02
    COMMAND_PREFIX = 0x03
    MODE_PREFIX = 0x04

    ON = 0x01
    OFF = 0x02
    SPEED_DOWN = 0x03
    SPEED_UP = 0x04
    WHITE_ON = 0x05
    NIGHT_LIGHT = 0x06

    def __init__(self) -> None:
        super().__init__(0x0700, RemoteType.RGBW)

    def handle_preset(self, client: Any, command_lsb: int, command_arg: int) -> bool:
        if command_lsb == 0:
            client.update_color_raw((command_arg >> 24) & 0xFF)
            client.update_brightness((command_arg >> 16) & 0xFF)
        elif command_lsb == 1:
            client.update_color_white()
            client.update_brightness((command_arg >> 16) & 0xFF)
        else:
            return False
        return True

    def handle_command(self, client: Any, command: int, command_arg: int) -> bool:
        cmd, arg = _split(command, command_arg)
        client.set_held((command & 0x80) == 0x80)

        if cmd == self.COMMAND_PREFIX:
            match arg:
                case self.ON:
                    client.update_status(MiLightStatus.ON)
                case self.OFF:
                    client.update_status(MiLightStatus.OFF)
                case self.WHITE_ON:
                    client.update_color_white()
                case self.NIGHT_LIGHT:
                    client.enable_night_mode()
                case self.SPEED_DOWN:
                    client.mode_speed_down()
                case self.SPEED_UP:
                    client.mode_speed_up()
                case _:
                    return False
            return True
        if cmd == self.COLOR_PREFIX:
            client.update_color_raw(arg)
            return True
        if cmd == self.BRIGHTNESS_PREFIX:
            client.update_brightness(arg)
            return True
        if cmd == self.MODE_PREFIX:
            client.update_mode(arg)
            return True
        return False


def default_handlers() -> list[V6CommandHandler]:
    """Return one handler for each supported remote type, in matching order."""
    return [
        V6RgbCctCommandHandler(),
        V6RgbwCommandHandler(),
        V6RgbCommandHandler(),
        V6CctCommandHandler(),
    ]


class V6CommandDemuxer(V6CommandHandler):
    """Passes a command to the first handler whose id matches and accepts it."""

    def __init__(self, handlers: Optional[Iterable[V6CommandHandler]] = None) -> None:
        super().__init__(0, RemoteType.RGBW)
        self.handlers = list(handlers) if handlers is not None else default_handlers()

    def handle(
        self,
        client: Any,
        device_id: int,
        group: int,
        command_type: int,
        command: int,
        command_arg: int,
    ) -> bool:
        return any(
            (handler.command_id & command) == handler.command_id
            and handler.handle(client, device_id, group, command_type, command, command_arg)
            for handler in self.handlers
        )

    def handle_command(self, client: Any, command: int, command_arg: int) -> bool:
        return False

    def handle_preset(self, client: Any, command_lsb: int, command_arg: int) -> bool:
        return False