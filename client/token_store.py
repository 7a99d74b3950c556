"""
client/token_store.py -- Where the client keeps its bearer token between requests.

A TokenStore has three operations: load() -> str | None, save(token), clear().
SessionManager owns the only reference to its store; nothing else reads or
writes the token.

  FileTokenStore   -- one file, created with mode 0600, parent directory
                      created on first save. The CLI uses this so a login
                      survives across invocations.
  MemoryTokenStore -- process-local. For tests and short-lived scripts.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger("empdir.client.token_store")


class MemoryTokenStore:
    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Persist the token in a single owner-readable file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> str | None:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # O_CREAT with 0o600 so the token is never briefly world-readable.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # The mode argument only applies on creation; tighten an existing file too.
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(token)
        logger.debug("Token saved to %s", self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
