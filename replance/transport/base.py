from abc import ABC, abstractmethod


class ConnectionFailed(ConnectionError):
    """The remote endpoint could not be reached."""


class BaseTransport(ABC):
    @abstractmethod
    def connect(self) -> None:
        """Open the connection. Raises ConnectionFailed when unreachable."""
        pass

    @abstractmethod
    def recv(self) -> bytes:
        """Block for the next chunk of inbound bytes; b"" once the remote closed."""
        pass

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Write all of data, blocking until done."""
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Shut down both directions, unblocking any pending recv()."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release resources opened in connect()."""
        pass
