import socket
import time

import pytest

from milighthub.remote_type import RemoteType
from milighthub.status import MiLightStatus
from milighthub.v6_server import (
    HEARTBEAT_HEADER,
    SEARCH_COMMAND,
    START_SESSION_COMMAND,
    V6MiLightUdpServer,
    V6_MAX_SESSIONS,
    read_int,
    write_int,
)

SENDER = ("127.0.0.1", 40000)


class RecordingClient:
    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def record(*args):
            self.calls.append((name, args))

        return record


def make_server(device_id=0x1234):
    client = RecordingClient()
    server = V6MiLightUdpServer(client, 0, device_id)
    server.remote_address = SENDER
    return server, client


def command_packet(session_id, seq, cmd_type, header, arg, group):
    packet = bytearray(22)
    packet[0:4] = b"\x80\x00\x00\x00"
    packet[4] = 0x11
    packet[5:7] = write_int(session_id, 2)
    packet[8] = seq
    packet[10] = cmd_type
    packet[11:15] = write_int(header, 4)
    packet[15:19] = write_int(arg, 4)
    packet[19] = group
    return bytes(packet)


def start_session(server):
    server.handle_packet(START_SESSION_COMMAND)
    return server.sessions[0].session_id


def test_read_write_int_round_trip():
    assert write_int(0x1234, 2) == b"\x12\x34"
    assert read_int(b"\x12\x34\x56", 2) == 0x1234
    assert read_int(write_int(0xDEADBEEF, 4), 4) == 0xDEADBEEF


def test_write_int_truncates_to_size():
    assert write_int(0x12345, 2) == write_int(0x2345, 2)


def test_read_int_short_data_raises():
    with pytest.raises(ValueError):
        read_int(b"\x01", 2)


def test_mac_address_from_device_id():
    server, _ = make_server(0x1234)
    assert server.mac_address() == b"\x00\x00\x00\x00\x12\x34"


def test_start_session_response():
    server, _ = make_server()
    replies = server.handle_packet(START_SESSION_COMMAND)
    assert len(replies) == 1
    reply = replies[0]
    assert len(reply) == 22
    assert reply[:7] == bytes([0x28, 0x00, 0x00, 0x00, 0x11, 0x00, 0x02])
    assert reply[7:13] == server.mac_address()
    assert read_int(reply[19:], 2) == server.sessions[0].session_id
    assert server.sessions[0].address == SENDER


def test_sessions_get_increasing_ids():
    server, _ = make_server()
    first = server.begin_session(SENDER)
    second = server.begin_session(SENDER)
    assert second == first + 1
    assert [s.session_id for s in server.sessions] == [second, first]


def test_oldest_session_is_dropped():
    server, _ = make_server()
    ids = [server.begin_session(SENDER) for _ in range(V6_MAX_SESSIONS + 1)]
    assert len(server.sessions) == V6_MAX_SESSIONS
    kept = {s.session_id for s in server.sessions}
    assert ids[0] not in kept
    assert server.sessions[0].session_id == ids[-1]


def test_start_session_without_sender_raises():
    server, _ = make_server()
    server.remote_address = None
    with pytest.raises(RuntimeError):
        server.handle_packet(START_SESSION_COMMAND)


def test_heartbeat_reply():
    server, _ = make_server()
    session_id = start_session(server)
    replies = server.handle_packet(HEARTBEAT_HEADER + write_int(session_id, 2))
    assert replies == [bytes([0xD8, 0x00, 0x00, 0x00, 0x07]) + server.mac_address() + b"\x00"]


def test_heartbeat_unknown_session_sends_nothing():
    server, _ = make_server()
    assert server.handle_packet(HEARTBEAT_HEADER + write_int(77, 2)) == []


def test_search_reply():
    server, _ = make_server()
    replies = server.handle_packet(SEARCH_COMMAND + b"\x24\x02")
    assert len(replies) == 1
    assert replies[0][:6] == bytes([0x18, 0x00, 0x00, 0x00, 0x40, 0x02])
    assert replies[0][6:12] == server.mac_address()
    assert replies[0][-4:] == bytes([0x07, 0x5B, 0xCD, 0x15])


def test_command_dispatched_and_acknowledged():
    server, client = make_server()
    session_id = start_session(server)
    packet = command_packet(session_id, 9, 0x31, 0x00000804, 0x01000000, 2)
    replies = server.handle_packet(packet)
    assert ("prepare", (RemoteType.RGB_CCT, 0x1234, 2)) in client.calls
    assert ("update_status", (MiLightStatus.ON,)) in client.calls
    assert replies == [bytes([0x88, 0x00, 0x00, 0x00, 0x03, 0x00, 9, 0x00])]


def test_command_for_unknown_session_runs_but_is_not_acknowledged():
    server, client = make_server()
    packet = command_packet(42, 1, 0x31, 0x00000804, 0x01000000, 1)
    assert server.handle_packet(packet) == []
    assert ("update_status", (MiLightStatus.ON,)) in client.calls


def test_unhandled_command_not_acknowledged():
    server, _ = make_server()
    session_id = start_session(server)
    packet = command_packet(session_id, 1, 0x31, 0x0000087F, 0, 1)
    assert server.handle_packet(packet) == []


def test_open_command_replies_twice():
    server, client = make_server()
    session_id = start_session(server)
    replies = server.handle_packet(command_packet(session_id, 5, 0x31, 0, 0, 0))
    assert len(replies) == 2
    assert replies[0][:5] == bytes([0x80, 0x00, 0x00, 0x00, 0x15])
    assert replies[0][5:11] == server.mac_address()
    assert replies[1][6] == 5
    assert client.calls == []


def test_command_header_with_wrong_length_ignored():
    server, client = make_server()
    session_id = start_session(server)
    packet = command_packet(session_id, 1, 0x31, 0x00000804, 0x01000000, 1) + b"\x00"
    assert server.handle_packet(packet) == []
    assert client.calls == []


def test_unknown_packet_ignored():
    server, _ = make_server()
    assert server.handle_packet(b"\x01\x02\x03") == []


def test_search_over_socket():
    server, _ = make_server()
    server.port = 0
    with server:
        port = server.address[1]
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as app:
            app.settimeout(2)
            app.sendto(SEARCH_COMMAND, ("127.0.0.1", port))
            handled = False
            for _ in range(200):
                if server.handle_client():
                    handled = True
                    break
                time.sleep(0.01)
            assert handled
            data, _ = app.recvfrom(1024)
    assert data[6:12] == server.mac_address()