"""Per-endpoint line history, persisted under the user's cache directory.

Every failure here degrades to "no persisted history" rather than stopping
the session.
"""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import APP_NAME

log = logging.getLogger(__name__)


def platform_cache_dir() -> Optional[Path]:
    """Return the platform's per-user cache directory, or None if unknown."""
    try:
        if sys.platform == "win32":
            local = os.getenv("LOCALAPPDATA")
            return Path(local) if local else None
        if sys.platform == "darwin":
            return Path.home() / "Library" / "Caches"
        xdg = os.getenv("XDG_CACHE_HOME")
        if xdg and Path(xdg).is_absolute():
            return Path(xdg)
        return Path.home() / ".cache"
    except RuntimeError:
        # Path.home() could not resolve a home directory
        return None


def history_file(host: str, port: int, cache_dir: Optional[Path] = None) -> Optional[Path]:
    """<cache>/replance/<host>:<port>, creating the directory on the way.

    Returns None when there is no usable cache directory.
    """
    root = cache_dir if cache_dir is not None else platform_cache_dir()
    if root is None:
        log.debug("No cache directory; history will not be saved")
        return None

    history_dir = Path(root) / APP_NAME
    try:
        history_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        log.debug("Cannot create %s: %s", history_dir, e)
        return None
    return history_dir / f"{host}:{port}"


class HistoryStore:
    """Ordered list of submitted lines, optionally backed by a file."""

    def __init__(self, path: Optional[Path] = None, max_size: int = 100):
        self.path = path
        self.max_size = max_size
        self.entries: List[str] = []

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def persistent(self) -> bool:
        return self.path is not None

    def add(self, line: str) -> bool:
        """Record line; returns False if it was skipped (empty or a repeat)."""
        if not line or self.max_size == 0:
            return False
        if self.entries and self.entries[-1] == line:
            return False
        self.entries.append(line)
        self._trim()
        return True

    def load(self) -> bool:
        if self.path is None:
            return False
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.debug("History not loaded from %s: %s", self.path, e)
            return False

        self.entries = [line for line in text.splitlines() if line]
        self._trim()
        log.debug("Loaded %d history entries from %s", len(self.entries), self.path)
        return True

    def save(self) -> bool:
        if self.path is None:
            return False
        text = "".join(f"{line}\n" for line in self.entries)
        try:
            self.path.write_text(text, encoding="utf-8")
        except OSError as e:
            log.debug("History not saved to %s: %s", self.path, e)
            return False
        return True

    def _trim(self) -> None:
        if len(self.entries) > self.max_size:
            del self.entries[:len(self.entries) - self.max_size]


def open_history(host: str, port: int, enabled: bool = True,
                 cache_dir: Optional[Path] = None, max_size: int = 100) -> HistoryStore:
    """Build the store for an endpoint and load whatever was saved before."""
    path = history_file(host, port, cache_dir) if enabled else None
    store = HistoryStore(path, max_size=max_size)
    _ = store.load()
    return store
