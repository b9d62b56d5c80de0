"""
Plain TCP transport, the `nc` half of replance.

The reader thread only calls recv() and the prompt only calls send(), so the
two directions of the socket are used concurrently without a lock.
"""

import logging
import socket
from typing import Optional

from .base import BaseTransport, ConnectionFailed

log = logging.getLogger(__name__)


class TCPTransport(BaseTransport):
    def __init__(self, host: str, port: int, buffer_size: int = 4096):
        self.host = host
        self.port = port
        self.buffer_size = buffer_size
        self._sock: Optional[socket.socket] = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        try:
            self._sock = socket.create_connection((self.host, self.port))
        except OSError as e:
            raise ConnectionFailed(f"Couldn't connect to {self.host}:{self.port}: {e}") from e
        log.debug("Connected to %s", self._sock.getpeername())

    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise ConnectionError("Transport is not connected")
        return self._sock

    def recv(self) -> bytes:
        return self._socket().recv(self.buffer_size)

    def send(self, data: bytes) -> None:
        self._socket().sendall(data)

    def shutdown(self) -> None:
        log.debug("Shutting down connection to %s:%s", self.host, self.port)
        self._socket().shutdown(socket.SHUT_RDWR)

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
