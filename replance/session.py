"""One connection's lifetime: connect, print inbound, prompt, tear down."""
from __future__ import annotations

import logging
import threading
from typing import BinaryIO, Callable, Optional

from .config import SessionConfig, Settings
from .history import open_history
from .printer import get_printer
from .prompt import InteractivePrompt, LineEditor
from .transport import BaseTransport, TCPTransport

log = logging.getLogger(__name__)


def start(config: SessionConfig, settings: Settings,
          transport: Optional[BaseTransport] = None,
          input_func: Optional[Callable[[str], str]] = None,
          out: Optional[BinaryIO] = None) -> None:
    """Run a session until the user exits.

    Raises ConnectionFailed if the endpoint is unreachable and EditorInitError
    if no line editor can be created; write failures propagate as OSError.
    """
    if transport is None:
        transport = TCPTransport(config.host, config.port, settings.buffer_size)
    transport.connect()

    try:
        history = open_history(
            config.host, config.port,
            enabled=settings.history,
            cache_dir=settings.cache_dir,
            max_size=settings.history_size,
        )
        editor = LineEditor(history, input_func=input_func)

        printer = get_printer(transport, config.json_mode, out)
        reader = threading.Thread(target=printer.run, name="replance-inbound", daemon=True)
        reader.start()

        InteractivePrompt(editor, transport, settings.prompt).run()

        _ = history.save()
        reader.join()
    finally:
        transport.close()
    log.debug("Session with %s finished", config.endpoint)
