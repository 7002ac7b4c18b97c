"""Creation of the UDP server for a gateway protocol version."""

from __future__ import annotations

from typing import Any

from milighthub.udp_server import MiLightUdpServer
from milighthub.v5_server import V5MiLightUdpServer
from milighthub.v6_server import V6MiLightUdpServer


def udp_server_from_version(version: int, client: Any, port: int, device_id: int) -> MiLightUdpServer:
    """Return a server for protocol version 0 or 5 (legacy) or 6.

    Raises ValueError for any other version.
    """
    if version in (0, 5):
        return V5MiLightUdpServer(client, port, device_id)
    if version == 6:
        return V6MiLightUdpServer(client, port, device_id)
    raise ValueError(f"unsupported UDP protocol version: {version}")