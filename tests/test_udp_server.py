import socket
import time

import pytest

from milighthub.udp_server import MiLightUdpServer


class _Recorder(MiLightUdpServer):
    def __init__(self):
        super().__init__(client=None, port=0, device_id=0x1234)
        self.packets = []

    def handle_packet(self, packet):
        self.packets.append(packet)


def _pump(server, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if MiLightUdpServer.handle_client(server):
            return True
        time.sleep(0.005)
    return False


@pytest.fixture
def sender():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    yield sock
    sock.close()


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        MiLightUdpServer(None, 0, 0)


def test_handle_client_before_begin_reads_nothing():
    server = _Recorder()
    assert MiLightUdpServer.handle_client(server) is False
    assert server.packets == []


def test_address_requires_running_server():
    server = _Recorder()
    assert MiLightUdpServer.handle_client(server) is False
    with pytest.raises(RuntimeError):
        server.address


def test_received_packet_is_handled(sender):
    with _Recorder() as server:
        port = server.address[1]
        sender.sendto(b"\x45\x00\x55", ("127.0.0.1", port))
        assert _pump(server)
        assert server.packets == [b"\x45\x00\x55"]
        assert server.remote_address == sender.getsockname()
        assert MiLightUdpServer.handle_client(server) is False


def test_nothing_waiting_returns_false():
    with _Recorder() as server:
        assert MiLightUdpServer.handle_client(server) is False
        assert server.packets == []


def test_stop_closes_socket(sender):
    server = _Recorder()
    MiLightUdpServer.begin(server)
    MiLightUdpServer.stop(server)
    assert MiLightUdpServer.handle_client(server) is False
    with pytest.raises(RuntimeError):
        server.address


def test_send_reaches_destination(sender):
    sender.settimeout(2.0)
    with _Recorder() as server:
        MiLightUdpServer.send(server, b"reply", sender.getsockname())
        data, _ = sender.recvfrom(64)
    assert data == b"reply"


def test_send_without_destination_raises():
    with _Recorder() as server:
        with pytest.raises(RuntimeError):
            MiLightUdpServer.send(server, b"reply")