from __future__ import annotations

import asyncio
import logging
import threading
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class AsyncRunner:
    """Owns the single event loop every store coroutine runs on.

    The loop lives in a daemon thread; synchronous callers (Flask views)
    submit coroutines with `run` and block until they finish. There is no
    timeout: a hung gateway call blocks the caller.
    """

    def __init__(self) -> None:
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "AsyncRunner":
        if self.running:
            return self

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._serve, name="attendance-tracker-loop", daemon=True)
        self._thread.start()
        logger.debug("Event loop thread started")
        return self

    def _serve(self) -> None:
        if self._loop is None:
            raise RuntimeError("AsyncRunner has no event loop")
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    def run(self, coro: Awaitable[T]) -> T:
        if self._loop is None or not self.running:
            raise RuntimeError("AsyncRunner is not started")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)  # type: ignore[arg-type]
        return future.result()

    def stop(self) -> None:
        if self._loop is None or self._thread is None:
            return

        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        self._loop.close()
        self._loop = None
        self._thread = None
        logger.debug("Event loop thread stopped")
