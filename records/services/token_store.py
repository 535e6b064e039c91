"""
Token persistence for :class:`records.services.api_client.ApiClient`.

The browser keeps the bearer token in ``localStorage``; command-line
callers use a small JSON file instead so the token survives between
invocations.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class MemoryTokenStore:
    """Keeps the token for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token or None

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Stores ``{"token": ...}`` in a file readable only by the owner.

    A missing or unreadable file means no token.
    """

    def __init__(self, path):
        self.path = Path(path).expanduser()

    def get(self) -> Optional[str]:
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("ignoring unreadable token file %s: %s", self.path, exc)
            return None
        token = data.get('token') if isinstance(data, dict) else None
        return token or None

    def set(self, token: str) -> None:
        if not token:
            self.clear()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({'token': token}), encoding='utf-8')
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
