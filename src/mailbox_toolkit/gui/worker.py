"""
Background execution of store and auth coroutines.

Every backend call runs on its own QThread with a fresh event loop
(``asyncio.run``) and reports back through Qt signals, so slots always run
on the GUI thread. httpx clients are created per request, so no client is
shared between loops.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from PySide6.QtCore import QObject, Qt, QThread, Signal

logger = logging.getLogger(__name__)

CoroutineFactory = Callable[[], Awaitable[Any]]


class AsyncWorker(QThread):
    """Run one coroutine off the GUI thread."""

    succeeded = Signal(object)
    failed = Signal(object)

    def __init__(self, factory: CoroutineFactory, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._factory = factory

    def run(self):
        try:
            result = asyncio.run(self._factory())
        except Exception as e:
            # Reported to the GUI thread; the slot decides what to show
            logger.debug("Background task failed", exc_info=True)
            self.failed.emit(e)
        else:
            self.succeeded.emit(result)


def run_async(
    parent: QObject,
    factory: CoroutineFactory,
    on_success: Callable[[Any], None],
    on_failure: Callable[[BaseException], None],
) -> AsyncWorker:
    """
    Start ``factory()`` on a worker thread owned by ``parent``.

    Callbacks are queued to the thread the worker object lives in (the
    GUI thread), so plain functions and lambdas are safe to pass. The
    worker deletes itself once finished; ``parent`` keeps it alive until
    then.
    """
    worker = AsyncWorker(factory, parent)
    worker.succeeded.connect(on_success, Qt.ConnectionType.QueuedConnection)
    worker.failed.connect(on_failure, Qt.ConnectionType.QueuedConnection)
    worker.finished.connect(worker.deleteLater)
    worker.start()
    return worker


def wait_for_workers(parent: QObject, timeout_ms: int = 3000) -> None:
    """Block until ``parent``'s running workers finish (used on close)."""
    for worker in parent.findChildren(AsyncWorker):
        if worker.isRunning() and not worker.wait(timeout_ms):
            logger.warning("Background task still running at shutdown")
