"""Incremental decoding of concatenated JSON values.

Usage:
    stream = JSONStream()
    for parsed in stream.feed(b'{"a": 1}{"b"'):
        print(parsed.value)      # {'a': 1}
    for parsed in stream.feed(b': 2}'):
        print(parsed.value)      # {'b': 2}
    list(stream.close())         # flush whatever is left at EOF
"""
from __future__ import annotations

import codecs
import json
import re
from dataclasses import dataclass
from typing import Any, Iterator, Optional

_WHITESPACE = re.compile(r"[ \t\n\r]*")

# Characters that may still extend a number sitting at the end of the buffer.
_NUMBER_TAIL = re.compile(r"[0-9.eE+\-]*")

_LITERALS = ("true", "false", "null", "NaN", "Infinity", "-Infinity")


@dataclass
class Parsed:
    """One unit read from the stream: either a value or the error that replaced it."""
    value: Any = None
    error: Optional[json.JSONDecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _incomplete(err: json.JSONDecodeError, text: str) -> bool:
    """True when err only means the value has not fully arrived yet."""
    if err.pos >= len(text):
        return True
    if err.msg.startswith("Unterminated string"):
        return True
    if err.msg.startswith("Invalid \\uXXXX escape"):
        return len(text) - err.pos <= 6
    if err.msg == "Expecting value":
        tail = text[err.pos:]
        return any(len(tail) < len(lit) and lit.startswith(tail) for lit in _LITERALS)
    return False


def _resync(text: str) -> int:
    """Index where parsing resumes after a malformed value starting at text[0].

    Brackets inside the bad value (and inside its strings) are skipped: the
    scan stops once nesting returns to zero, at the next top-level { or [,
    or at the next newline whatever the depth.
    """
    depth = 0
    in_string = escaped = False
    for i, ch in enumerate(text):
        if ch == "\n":
            return i
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "{[":
            if depth == 0 and i > 0:
                return i
            depth += 1
        elif ch in "}]" and depth > 0:
            depth -= 1
            if depth == 0:
                return i + 1
    return len(text)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class JSONStream:
    """Splits a byte stream into JSON values, reporting and skipping bad ones."""

    def __init__(self, decoder: Optional[json.JSONDecoder] = None):
        self._decoder = decoder or json.JSONDecoder()
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet parsed."""
        return self._buffer

    def feed(self, data: bytes) -> Iterator[Parsed]:
        self._buffer += self._utf8.decode(data)
        return self._drain(final=False)

    def close(self) -> Iterator[Parsed]:
        self._buffer += self._utf8.decode(b"", final=True)
        return self._drain(final=True)

    def _drain(self, final: bool) -> Iterator[Parsed]:
        while True:
            start = _WHITESPACE.match(self._buffer).end()
            self._buffer = self._buffer[start:]
            if not self._buffer:
                return

            try:
                value, end = self._decoder.raw_decode(self._buffer)
            except json.JSONDecodeError as err:
                if not final and _incomplete(err, self._buffer):
                    return
                yield Parsed(error=err)
                self._buffer = self._buffer[_resync(self._buffer):]
                continue

            if not final and _is_number(value) and _NUMBER_TAIL.fullmatch(self._buffer, end):
                # "12" may be the start of "1234"; wait for a delimiter.
                return

            self._buffer = self._buffer[end:]
            yield Parsed(value=value)
