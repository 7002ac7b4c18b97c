import socket
import time

import pytest

from milighthub.discovery_server import (
    V3_SEARCH_STRING,
    V6_SEARCH_STRING,
    GatewayConfig,
    MiLightDiscoveryServer,
    discovery_responses,
)

CONFIGS = [
    GatewayConfig(device_id=0x1234, port=8899, protocol_version=5),
    GatewayConfig(device_id=0xABCD, port=5987, protocol_version=6),
    GatewayConfig(device_id=0x0042, port=8898, protocol_version=5),
]
LOCAL_IP = "192.168.0.10"


def test_v5_response_format():
    assert discovery_responses(CONFIGS[:1], 5, LOCAL_IP) == ["192.168.0.10,000000001234"]


def test_v6_response_has_module_suffix():
    assert discovery_responses(CONFIGS[1:2], 6, LOCAL_IP) == ["192.168.0.10,00000000ABCD,HF-LPB100"]


def test_only_matching_versions_answer():
    v5 = discovery_responses(CONFIGS, 5, LOCAL_IP)
    v6 = discovery_responses(CONFIGS, 6, LOCAL_IP)
    assert len(v5) == 2
    assert len(v6) == 1
    assert all(not r.endswith("HF-LPB100") for r in v5)
    assert discovery_responses(CONFIGS, 4, LOCAL_IP) == []


def test_invalid_ip_raises():
    with pytest.raises(ValueError):
        discovery_responses(CONFIGS, 5, "not an address")


def test_handle_message_matches_search_strings():
    server = MiLightDiscoveryServer(0, CONFIGS, local_ip=LOCAL_IP)
    assert server.handle_message(V3_SEARCH_STRING) == discovery_responses(CONFIGS, 5, LOCAL_IP)
    assert server.handle_message(V6_SEARCH_STRING) == discovery_responses(CONFIGS, 6, LOCAL_IP)


def test_handle_message_stops_at_nul():
    server = MiLightDiscoveryServer(0, CONFIGS, local_ip=LOCAL_IP)
    assert server.handle_message(V3_SEARCH_STRING + b"\0junk") == server.handle_message(V3_SEARCH_STRING)


def test_handle_message_ignores_other_messages():
    server = MiLightDiscoveryServer(0, CONFIGS, local_ip=LOCAL_IP)
    assert server.handle_message(b"hello") == []
    assert server.handle_message(V3_SEARCH_STRING + b"x") == []


def test_handle_client_without_socket():
    assert MiLightDiscoveryServer(0, CONFIGS).handle_client() is False


def test_answers_over_udp():
    client = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    client.bind(("127.0.0.1", 0))
    client.settimeout(2.0)
    try:
        with MiLightDiscoveryServer(0, CONFIGS, local_ip=LOCAL_IP) as server:
            client.sendto(V6_SEARCH_STRING, ("127.0.0.1", server.address[1]))
            deadline = time.monotonic() + 2.0
            handled = False
            while not handled and time.monotonic() < deadline:
                handled = server.handle_client()
                time.sleep(0.005)
            assert handled
            data, _ = client.recvfrom(128)
    finally:
        client.close()
    assert data.decode("ascii") == discovery_responses(CONFIGS, 6, LOCAL_IP)[0]