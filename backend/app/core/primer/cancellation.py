# File: backend/app/core/primer/cancellation.py
# Version: v0.1.0
"""
Cooperative cancellation for primer searches.

Search loops poll `token.cancelled` at the head of every outer iteration and
return early; nothing is raised. `SearchSession` keeps a single "latest request"
slot: starting a search cancels whatever was running before.
"""

from __future__ import annotations

import threading
from typing import Optional


class CancellationToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class SearchSession:
    """At most one active search: a new request supersedes the previous one."""

    def __init__(self) -> None:
        self._current: Optional[CancellationToken] = None

    def start(self) -> CancellationToken:
        previous = self._current
        if previous is not None:
            previous.cancel()
        self._current = CancellationToken()
        return self._current

    def finish(self, token: CancellationToken) -> None:
        """Release the slot if `token` still owns it."""
        if self._current is token:
            self._current = None

    @property
    def current(self) -> Optional[CancellationToken]:
        return self._current
