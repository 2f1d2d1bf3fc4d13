from __future__ import annotations

import threading


class RequestSequencer:
    """Hands out increasing tickets; only the newest ticket may apply its result.

    A list view takes a ticket before fetching and checks it when the rows come
    back, so a slow response to an older filter never overwrites a newer one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._latest = 0

    def next_ticket(self) -> int:
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._latest

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest
