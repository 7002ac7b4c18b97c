"""Base of the UDP servers that accept commands in the gateway protocols."""

from __future__ import annotations

import socket
from abc import ABC, abstractmethod
from typing import Any, Optional

_RECEIVE_SIZE = 1024


class MiLightUdpServer(ABC):
    """Receives UDP packets on a port and turns them into client commands.

    ``client`` is the object that sends commands to bulbs; subclasses call
    methods such as ``prepare``, ``update_status`` and ``update_brightness``
    on it.
    """

    def __init__(self, client: Any, port: int, device_id: int) -> None:
        self.client = client
        self.port = port
        self.device_id = device_id
        self.last_group = 0
        self.remote_address: Optional[tuple[str, int]] = None
        self._socket: Optional[socket.socket] = None

    def begin(self) -> None:
        """Open the socket and start listening on the port."""
        self.stop()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(("", self.port))
        sock.setblocking(False)
        self._socket = sock

    def stop(self) -> None:
        """Close the socket if it is open."""
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    @property
    def address(self) -> tuple[str, int]:
        """The address the socket is bound to."""
        if self._socket is None:
            raise RuntimeError("server is not running")
        return self._socket.getsockname()

    def send(self, data: bytes, address: Optional[tuple[str, int]] = None) -> None:
        """Send a packet, by default to the sender of the last packet."""
        target = address or self.remote_address
        if self._socket is None or target is None:
            raise RuntimeError("no socket or destination to send to")
        self._socket.sendto(data, target)

    def handle_client(self) -> bool:
        """Handle one waiting packet, if any; tell whether one was read."""
        if self._socket is None:
            return False
        try:
            data, address = self._socket.recvfrom(_RECEIVE_SIZE)
        except (BlockingIOError, ConnectionResetError):
            return False
        if not data:
            return False
        self.remote_address = address
        self.handle_packet(data)
        return True

    @abstractmethod
    def handle_packet(self, packet: bytes) -> None:
        """Act on one received packet."""

    def __enter__(self) -> "MiLightUdpServer":
        self.begin()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()