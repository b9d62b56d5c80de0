"""
Interactive prompt: read lines from the user and forward them to the transport.

Line editing and recall come from the standard readline module when the
platform has it; otherwise plain input() is used.
"""
from __future__ import annotations

import logging
import sys
from typing import Callable, Optional, TextIO

try:
    import readline
except ImportError:  # Windows without pyreadline
    readline = None

from .history import HistoryStore
from .transport import BaseTransport

log = logging.getLogger(__name__)


class EditorInitError(RuntimeError):
    """The line-editing front end could not be created."""


class LineEditor:
    """Reads one line at a time, keeping the history store and readline in step."""

    def __init__(self, history: Optional[HistoryStore] = None,
                 input_func: Optional[Callable[[str], str]] = None,
                 stdin: Optional[TextIO] = None):
        self.history = history if history is not None else HistoryStore()

        if input_func is not None:
            self._input = input_func
            self._readline = None
            return

        stdin = sys.stdin if stdin is None else stdin
        if stdin is None or stdin.closed:
            raise EditorInitError("standard input is not available")

        self._input = input
        self._readline = readline
        if self._readline is not None:
            self._readline.set_auto_history(False)
            self._readline.clear_history()
            for entry in self.history.entries:
                self._readline.add_history(entry)

    def readline(self, prompt: str = "") -> str:
        return self._input(prompt)

    def add_history_entry(self, line: str) -> bool:
        added = self.history.add(line)
        if added and self._readline is not None:
            self._readline.add_history(line)
        return added


class InteractivePrompt:
    """Foreground loop of a session.

    Each submitted line goes out as its UTF-8 bytes plus one newline. End of
    input or Ctrl-C shuts the transport down, which also ends the inbound
    printer's blocking read.
    """

    def __init__(self, editor: LineEditor, transport: BaseTransport, prompt: str = ""):
        self.editor = editor
        self.transport = transport
        self.prompt = prompt

    def run(self) -> None:
        while True:
            try:
                line = self.editor.readline(self.prompt)
            except (EOFError, KeyboardInterrupt):
                log.debug("Input closed by user")
                try:
                    self.transport.shutdown()
                except OSError as e:
                    log.debug("Shutdown failed: %s", e)
                break
            except (OSError, ValueError) as e:
                print(f"Error reading line: {e}")
                self.transport.shutdown()
                break

            _ = self.editor.add_history_entry(line)
            self.send_line(line)

    def send_line(self, line: str) -> None:
        self.transport.send(line.encode("utf-8") + b"\n")
