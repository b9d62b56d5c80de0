"""Inbound printers: drain the transport's read side onto the console."""
from __future__ import annotations

import json
import logging
import sys
from abc import ABC, abstractmethod
from typing import BinaryIO, Optional

from .jsonstream import JSONStream, Parsed
from .transport import BaseTransport

log = logging.getLogger(__name__)


class InboundPrinter(ABC):
    """Reads until the remote closes or the socket errors, then returns."""

    def __init__(self, transport: BaseTransport, out: Optional[BinaryIO] = None):
        self.transport = transport
        self.out = out if out is not None else sys.stdout.buffer

    def run(self) -> None:
        while True:
            try:
                data = self.transport.recv()
            except OSError as e:
                log.debug("Inbound read ended: %s", e)
                break
            if not data:
                log.debug("Remote closed the connection")
                break
            self.feed(data)
        self.finish()

    @abstractmethod
    def feed(self, data: bytes) -> None:
        pass

    def finish(self) -> None:
        """Called once after the last read."""
        pass

    def _write(self, data: bytes) -> None:
        self.out.write(data)
        self.out.flush()


class RawPrinter(InboundPrinter):
    """Copies inbound bytes to the console unchanged."""

    def feed(self, data: bytes) -> None:
        self._write(data)


class JSONPrinter(InboundPrinter):
    """Pretty-prints each JSON value in the inbound stream.

    A malformed value prints its parse error and the stream carries on with
    whatever follows it.
    """

    def __init__(self, transport: BaseTransport, out: Optional[BinaryIO] = None, indent: int = 2):
        super().__init__(transport, out)
        self.indent = indent
        self.stream = JSONStream()

    def feed(self, data: bytes) -> None:
        for parsed in self.stream.feed(data):
            self._print(parsed)

    def finish(self) -> None:
        for parsed in self.stream.close():
            self._print(parsed)

    def format(self, parsed: Parsed) -> str:
        if not parsed.ok:
            return str(parsed.error)
        return json.dumps(parsed.value, indent=self.indent, ensure_ascii=False)

    def _print(self, parsed: Parsed) -> None:
        if not parsed.ok:
            log.debug("Malformed JSON from remote: %s", parsed.error)
        self._write((self.format(parsed) + "\n").encode("utf-8"))


def get_printer(transport: BaseTransport, json_mode: bool, out: Optional[BinaryIO] = None) -> InboundPrinter:
    factory = JSONPrinter if json_mode else RawPrinter
    return factory(transport, out)
