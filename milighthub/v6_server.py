"""UDP server for the version 6 gateway protocol, with client sessions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from milighthub.udp_server import MiLightUdpServer
from milighthub.v6_handlers import V6CommandDemuxer

_log = logging.getLogger(__name__)

V6_COMMAND_LEN = 8
V6_MAX_SESSIONS = 10
_COMMAND_PACKET_LEN = 22

START_SESSION_COMMAND = bytes([
    0x20, 0x00, 0x00, 0x00, 0x16, 0x02, 0x62, 0x3A, 0xD5, 0xED, 0xA3, 0x01, 0xAE,
    0x08, 0x2D, 0x46, 0x61, 0x41, 0xA7, 0xF6, 0xDC, 0xAF,
])

START_SESSION_RESPONSE = bytes([
    0x28, 0x00, 0x00, 0x00, 0x11, 0x00, 0x02,
    0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF,  # replaced with the hardware address
    0x69, 0xF0, 0x3C, 0x23, 0x00, 0x01,
    0xFF, 0xFF,  # replaced with the session id
    0x00,
])

COMMAND_HEADER = bytes([0x80, 0x00, 0x00, 0x00])

HEARTBEAT_HEADER = bytes([0xD0, 0x00, 0x00, 0x00, 0x02])
HEARTBEAT_HEADER2 = bytes([0x30, 0x00, 0x00, 0x00, 0x03])
HEARTBEAT_RESPONSE_HEADER = bytes([0xD8, 0x00, 0x00, 0x00, 0x07])

COMMAND_RESPONSE = bytes([0x88, 0x00, 0x00, 0x00, 0x03, 0x00, 0xFF, 0x00])

SEARCH_COMMAND = bytes([0x10, 0x00, 0x00, 0x00])

SEARCH_RESPONSE = bytes([
    0x18, 0x00, 0x00, 0x00, 0x40, 0x02,
    0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF,  # hardware address
    0x00, 0x20, 0x39, 0x38, 0x35, 0x62,
    0x31, 0x35, 0x37, 0x62, 0x66, 0x36,
    0x66, 0x63, 0x34, 0x33, 0x33, 0x36,
    0x38, 0x61, 0x36, 0x33, 0x34, 0x36,
    0x37, 0x65, 0x61, 0x33, 0x62, 0x31,
    0x39, 0x64, 0x30, 0x64, 0x01, 0x00,
    0x01,
    # 5987; a different value makes clients connect on another port for some commands.
    0x17, 0x63,
    0x00, 0x00, 0x05, 0x00, 0x09, 0x78,
    0x6C, 0x69, 0x6E, 0x6B, 0x5F, 0x64,
    0x65, 0x76, 0x07, 0x5B, 0xCD, 0x15,
])

OPEN_COMMAND_RESPONSE = bytes([
    0x80, 0x00, 0x00, 0x00, 0x15,
    0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF,  # hardware address
    0x05, 0x02, 0x00, 0x34, 0x00, 0x00,
    0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    0x00, 0x00, 0x34,
])


def read_int(data: bytes, size: int) -> int:
    """Read a big-endian unsigned integer from the first ``size`` bytes."""
    if len(data) < size:
        raise ValueError(f"need {size} bytes, got {len(data)}")
    return int.from_bytes(bytes(data[:size]), "big")


def write_int(value: int, size: int) -> bytes:
    """Encode the low ``size`` bytes of ``value`` big-endian."""
    return (value & ((1 << (8 * size)) - 1)).to_bytes(size, "big")


def _with_mac(template: bytes, offset: int, mac: bytes) -> bytearray:
    response = bytearray(template)
    response[offset:offset + len(mac)] = mac
    return response


@dataclass(frozen=True)
class V6Session:
    """A client session: where replies go and the id it was given."""

    address: tuple[str, int]
    session_id: int


class V6MiLightUdpServer(MiLightUdpServer):
    """Handles sessions, searches, heartbeats and commands of the version 6 protocol."""

    def __init__(
        self,
        client: Any,
        port: int,
        device_id: int,
        demuxer: Optional[V6CommandDemuxer] = None,
    ) -> None:
        super().__init__(client, port, device_id)
        self.demuxer = demuxer if demuxer is not None else V6CommandDemuxer()
        self._next_session_id = 0
        self._sessions: list[V6Session] = []

    @property
    def sessions(self) -> tuple[V6Session, ...]:
        """Open sessions, most recent first."""
        return tuple(self._sessions)

    def mac_address(self) -> bytes:
        """Return the hardware address reported to clients, made from the device id."""
        return bytes(4) + write_int(self.device_id, 2)

    def begin_session(self, address: tuple[str, int]) -> int:
        """Open a session for ``address`` and return its id.

        Only the most recent sessions are kept; the oldest is dropped.
        """
        session_id = self._next_session_id
        self._next_session_id = (self._next_session_id + 1) & 0xFFFF
        self._sessions.insert(0, V6Session(address, session_id))
        del self._sessions[V6_MAX_SESSIONS:]
        return session_id

    def _transmit(self, data: bytes, address: tuple[str, int]) -> None:
        if self._socket is not None:
            self.send(data, address)

    def _send_response(self, session_id: int, data: bytes, sent: list[bytes]) -> bool:
        session = next((s for s in self._sessions if s.session_id == session_id), None)
        if session is None:
            _log.warning("received request with untracked session ID: %d", session_id)
            return False
        self._transmit(data, session.address)
        sent.append(data)
        return True

    def _sender(self) -> tuple[str, int]:
        if self.remote_address is None:
            raise RuntimeError("no sender address to reply to")
        return self.remote_address

    def handle_packet(self, packet: bytes) -> list[bytes]:
        """Act on one packet and return the replies that were sent."""
        packet = bytes(packet)
        sent: list[bytes] = []

        if packet.startswith(START_SESSION_COMMAND):
            self._handle_start_session(sent)
        elif packet.startswith(HEARTBEAT_HEADER) or packet.startswith(HEARTBEAT_HEADER2):
            self._handle_heartbeat(read_int(packet[5:], 2), sent)
        elif packet.startswith(SEARCH_COMMAND):
            self._handle_search(sent)
        elif len(packet) == _COMMAND_PACKET_LEN and packet.startswith(COMMAND_HEADER):
            self._handle_command(
                session_id=read_int(packet[5:], 2),
                sequence_num=packet[8],
                cmd=packet[10:10 + V6_COMMAND_LEN + 1],
                group=packet[19],
                sent=sent,
            )
        else:
            _log.warning("unhandled V6 packet")
        return sent

    def _handle_start_session(self, sent: list[bytes]) -> None:
        session_id = self.begin_session(self._sender())
        response = _with_mac(START_SESSION_RESPONSE, 7, self.mac_address())
        response[19:21] = write_int(session_id, 2)
        self._send_response(session_id, bytes(response), sent)

    def _handle_heartbeat(self, session_id: int, sent: list[bytes]) -> None:
        response = HEARTBEAT_RESPONSE_HEADER + self.mac_address() + b"\x00"
        self._send_response(session_id, response, sent)

    def _handle_search(self, sent: list[bytes]) -> None:
        response = bytes(_with_mac(SEARCH_RESPONSE, 6, self.mac_address()))
        self._transmit(response, self._sender())
        sent.append(response)

    def _handle_open_command(self, session_id: int, sent: list[bytes]) -> bool:
        response = bytes(_with_mac(OPEN_COMMAND_RESPONSE, 5, self.mac_address()))
        return self._send_response(session_id, response, sent)

    def _handle_command(
        self, session_id: int, sequence_num: int, cmd: bytes, group: int, sent: list[bytes]
    ) -> None:
        cmd_type = cmd[0]
        cmd_header = read_int(cmd[1:], 4)
        cmd_arg = read_int(cmd[5:], 4)

        if cmd_header == 0:
            handled = self._handle_open_command(session_id, sent)
        else:
            handled = self.demuxer.handle(
                self.client, self.device_id, group, cmd_type, cmd_header, cmd_arg
            )

        if handled:
            response = bytearray(COMMAND_RESPONSE)
            response[6] = sequence_num
            self._send_response(session_id, bytes(response), sent)
        else:
            _log.debug("unhandled command: %s", cmd.hex(" ").upper())