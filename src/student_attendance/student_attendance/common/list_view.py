from __future__ import annotations

import logging
from typing import Callable, Generic, Optional, Sequence, TypeVar

from ..core.constants import GENERIC_LOAD_ERROR
from ..core.exceptions import DomainError
from .sequencing import RequestSequencer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SequencedListView(Generic[T]):
    """State of a list screen whose fetches may complete out of order.

    Every fetch takes a ticket from a RequestSequencer; rows (or a failure)
    are applied only when the ticket is still the newest one issued.

    The guard only spans the lifetime of one instance. The Flask controllers
    build a fresh view per request, so there `sync` always loads and no older
    fetch can be pending; stale responses across requests are dropped by the
    client, using the `seq` that the JSON endpoints echo back.
    """

    load_error_message = GENERIC_LOAD_ERROR
    delete_error_message = "Error al eliminar"

    def __init__(self):
        self._seq = RequestSequencer()
        self._seen_refresh: Optional[int] = None
        self.rows: list[T] = []
        self.loading = False
        self.error: Optional[str] = None

    def _fetch(self) -> Sequence[T]:
        raise NotImplementedError

    def begin_load(self) -> int:
        self.loading = True
        return self._seq.next_ticket()

    def finish_load(self, ticket: int, rows: Sequence[T]) -> bool:
        if not self._seq.is_current(ticket):
            logger.debug("dropping stale result for ticket %s (latest=%s)", ticket, self._seq.latest)
            return False
        self.rows = list(rows)
        self.loading = False
        self.error = None
        self._after_load()
        return True

    def fail_load(self, ticket: int, message: str) -> bool:
        if not self._seq.is_current(ticket):
            return False
        self.loading = False
        self.error = message
        return True

    def _after_load(self) -> None:
        pass

    def load(self) -> bool:
        ticket = self.begin_load()
        try:
            rows = self._fetch()
        except DomainError:
            logger.exception("%s: load failed", type(self).__name__)
            self.fail_load(ticket, self.load_error_message)
            return False
        return self.finish_load(ticket, rows)

    def sync(self, refresh_counter: int) -> bool:
        """Re-fetch when the external refresh counter moved (or on first use).

        A new instance has seen no counter yet, so its first call always loads.
        """
        if self._seen_refresh == refresh_counter:
            return False
        self._seen_refresh = refresh_counter
        return self.load()

    def _delete(self, row_id: int) -> None:
        raise NotImplementedError

    def delete(self, row_id: int, *, reload: bool = True) -> bool:
        """Delete, then re-fetch. On failure rows stay as they were."""
        try:
            self._delete(row_id)
        except DomainError:
            logger.exception("%s: delete of id=%s failed", type(self).__name__, row_id)
            self.error = self.delete_error_message
            return False
        if reload:
            self.load()
        return True
