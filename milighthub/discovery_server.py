"""Answers gateway discovery broadcasts from phone apps."""

from __future__ import annotations

import ipaddress
import logging
import socket
from dataclasses import dataclass
from typing import Iterable, Optional

_log = logging.getLogger(__name__)

V3_SEARCH_STRING = b"Link_Wi-Fi"
V6_SEARCH_STRING = b"HF-A11ASSISTHREAD"

_SEARCH_VERSIONS = {V3_SEARCH_STRING: 5, V6_SEARCH_STRING: 6}
_RECEIVE_SIZE = 1024


@dataclass(frozen=True)
class GatewayConfig:
    """One emulated gateway: its device id, UDP port and protocol version."""

    device_id: int
    port: int
    protocol_version: int


def discovery_responses(
    gateway_configs: Iterable[GatewayConfig], version: int, local_ip: str
) -> list[str]:
    """Return the discovery replies for every gateway of the given version."""
    ip = str(ipaddress.IPv4Address(local_ip))
    responses = []
    for config in gateway_configs:
        if config.protocol_version != version:
            continue
        high = (config.device_id >> 8) & 0xFF
        low = config.device_id & 0xFF
        response = f"{ip},00000000{high:02X}{low:02X}"
        if config.protocol_version != 5:
            response += ",HF-LPB100"
        responses.append(response)
    return responses


def _local_ip_towards(remote_host: str) -> str:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        try:
            probe.connect((remote_host, 9))
            return probe.getsockname()[0]
        except OSError:
            return "127.0.0.1"


class MiLightDiscoveryServer:
    """Listens for search strings and answers with the configured gateways."""

    def __init__(
        self,
        port: int,
        gateway_configs: Iterable[GatewayConfig],
        local_ip: Optional[str] = None,
    ) -> None:
        self.port = port
        self.gateway_configs = list(gateway_configs)
        self.local_ip = local_ip
        self._socket: Optional[socket.socket] = None

    def begin(self) -> None:
        """Open the socket and start listening."""
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

    def _responses(self, data: bytes, local_ip: str) -> list[str]:
        message = data.split(b"\0", 1)[0]
        version = _SEARCH_VERSIONS.get(message)
        if version is None:
            return []
        return discovery_responses(self.gateway_configs, version, local_ip)

    def handle_message(self, data: bytes) -> list[str]:
        """Return the replies to one received message; empty if it is no search."""
        local_ip = self.local_ip or _local_ip_towards("10.255.255.255")
        return self._responses(data, local_ip)

    def handle_client(self) -> bool:
        """Answer one waiting message, if any; tell whether one was read."""
        if self._socket is None:
            return False
        try:
            data, remote = self._socket.recvfrom(_RECEIVE_SIZE)
        except (BlockingIOError, ConnectionResetError):
            return False
        if not data:
            return False
        local_ip = self.local_ip or _local_ip_towards(remote[0])
        for response in self._responses(data, local_ip):
            _log.debug("sending discovery response: %s", response)
            self._socket.sendto(response.encode("ascii"), remote)
        return True

    def __enter__(self) -> "MiLightDiscoveryServer":
        self.begin()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()