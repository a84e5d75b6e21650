from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, List, Optional

from ..core.enums import StoreStatus
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)

Listener = Callable[[], None]

# Failures a store records instead of raising: gateway/auth errors plus
# malformed rows or payloads (bad enum value, bad time, missing column).
STORE_ERRORS = (DomainError, ValueError, KeyError, TypeError)


class Observable:
    """Change notification shared by every store."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class Store(Observable):
    """`{data, loading, error}` state holder shared by the CRUD stores.

    Views read attributes directly and may `subscribe` to be told about every
    state change. Operations go through `_run`, which clears `error` before
    the attempt, records a failure message instead of raising, and always
    clears `loading` at the end.
    """

    def __init__(self) -> None:
        super().__init__()
        self.loading: bool = False
        self.error: Optional[str] = None

    @property
    def status(self) -> StoreStatus:
        if self.loading:
            return StoreStatus.LOADING
        if self.error is not None:
            return StoreStatus.ERROR
        return StoreStatus.IDLE

    def _set(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self, name, value)
        self._notify()

    async def _run(self, operation: Callable[[], Awaitable[None]]) -> None:
        self._set(loading=True, error=None)
        try:
            await operation()
        except STORE_ERRORS as e:
            logger.warning("%s operation failed: %s", type(self).__name__, e)
            self._set(error=str(e) or type(e).__name__)
        finally:
            self._set(loading=False)
