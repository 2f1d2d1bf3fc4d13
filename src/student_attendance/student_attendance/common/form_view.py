from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional

from ..core.exceptions import DomainError, StoreError, ValidationError

logger = logging.getLogger(__name__)


class FormView:
    """Create/edit form state: validate, then persist, one submission at a time."""

    generic_error_message = "Error al guardar"

    def __init__(self, initial: Mapping[str, Any]):
        self.data: dict[str, Any] = dict(initial)
        self.errors: dict[str, str] = {}
        self.notice: Optional[str] = None
        self.submitting = False
        self.saved_id: Optional[int] = None
        self._lock = threading.Lock()

    @property
    def is_edit(self) -> bool:
        raise NotImplementedError

    def _persist(self, data: Mapping[str, Any]) -> Optional[int]:
        raise NotImplementedError

    def store_error_message(self, error: StoreError) -> Optional[str]:
        """Field message for a store-side rejection, or None for a generic notice."""
        return None

    def change(self, field: str, value: Any) -> None:
        self.data[field] = value
        self.errors.pop(field, None)

    def submit(self, raw: Optional[Mapping[str, Any]] = None) -> bool:
        """Returns True when the record was saved.

        A submit while another one is still in flight is refused.
        """

        with self._lock:
            if self.submitting:
                return False
            self.submitting = True

        try:
            if raw is not None:
                self.data.update(raw)
            self.errors = {}
            self.notice = None

            try:
                self.saved_id = self._persist(self.data)
            except ValidationError as e:
                self.errors = e.errors
                return False
            except StoreError as e:
                logger.warning("%s: store rejected submission: %s", type(self).__name__, e)
                message = self.store_error_message(e)
                if message and e.field:
                    self.errors = {str(e.field): message}
                else:
                    self.notice = self.generic_error_message
                return False
            except DomainError:
                logger.exception("%s: submission failed", type(self).__name__)
                self.notice = self.generic_error_message
                return False

            return True
        finally:
            with self._lock:
                self.submitting = False
