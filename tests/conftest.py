import os
import socket
import threading
import time

import pytest

from replance.config import Settings
from replance.transport import BaseTransport

@pytest.hookimpl(tryfirst=True)
def pytest_configure(config):
    # Default to 'test' if not already set
    os.environ.setdefault("REPLANCE_ENV", "test")


def wait_for(predicate, timeout=5.0):
    """Poll predicate until it is truthy or timeout expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


class LoopbackServer:
    """Accepts a single client and records everything it sends."""

    def __init__(self):
        self.sock = socket.create_server(("127.0.0.1", 0))
        self.host, self.port = self.sock.getsockname()[:2]
        self.conn = None
        self.received = bytearray()
        self._accepted = threading.Event()
        self._client_closed = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self):
        self.conn, _ = self.sock.accept()
        self._accepted.set()
        while True:
            try:
                data = self.conn.recv(4096)
            except OSError:
                break
            if not data:
                break
            self.received += data
        self._client_closed.set()

    def send(self, data: bytes):
        assert self._accepted.wait(5), "client never connected"
        self.conn.sendall(data)

    def finish_sending(self):
        """Half-close: the client sees EOF but can keep writing."""
        assert self._accepted.wait(5), "client never connected"
        self.conn.shutdown(socket.SHUT_WR)

    def wait_client_closed(self, timeout=5.0) -> bool:
        return self._client_closed.wait(timeout)

    def stop(self):
        if self.conn is not None:
            self.conn.close()
        self.sock.close()


@pytest.fixture
def server():
    srv = LoopbackServer()
    yield srv
    srv.stop()


@pytest.fixture
def closed_port():
    """A loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def settings(tmp_path):
    return Settings(cache_dir=tmp_path / "cache", history_size=100, buffer_size=4096)


class FakeTransport(BaseTransport):
    """In-memory transport: serves queued chunks, records writes."""

    def __init__(self, chunks=(), recv_error=None, shutdown_error=None, send_error=None):
        self.chunks = list(chunks)
        self.recv_error = recv_error
        self.shutdown_error = shutdown_error
        self.send_error = send_error
        self.sent = bytearray()
        self.shutdowns = 0
        self.closed = False

    def connect(self):
        pass

    def recv(self):
        if self.chunks:
            return self.chunks.pop(0)
        if self.recv_error is not None:
            raise self.recv_error
        return b""

    def send(self, data):
        if self.send_error is not None:
            raise self.send_error
        self.sent += data

    def shutdown(self):
        self.shutdowns += 1
        if self.shutdown_error is not None:
            raise self.shutdown_error

    def close(self):
        self.closed = True
