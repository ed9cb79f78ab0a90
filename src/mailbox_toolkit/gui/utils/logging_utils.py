"""
Logging utilities for redirecting logs to a queue for GUI display.
"""
from __future__ import annotations

import logging
from queue import Empty, Queue
from typing import Callable, Optional


class QueueLogHandler(logging.Handler):
    """
    A logging handler that sends log records to a queue.

    Records are emitted from worker threads; the main window drains the
    queue on a timer so the console is only touched from the GUI thread.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            level = record.levelname
            # Map DEBUG to INFO for GUI display
            if level == "DEBUG":
                level = "INFO"
            self.log_queue.put((message, level))
        except Exception:
            self.handleError(record)


def attach_queue_handler(log_queue: Queue, logger_name: Optional[str] = None) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to the specified logger (or root logger if None).

    Returns:
        The attached handler (for later removal).
    """
    logger = logging.getLogger(logger_name)
    handler = QueueLogHandler(log_queue)
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > logging.INFO:
        logger.setLevel(logging.INFO)
    return handler


def detach_queue_handler(handler: QueueLogHandler, logger_name: Optional[str] = None) -> None:
    """Remove a QueueLogHandler from the specified logger."""
    logger = logging.getLogger(logger_name)
    logger.removeHandler(handler)


def drain_queue(log_queue: Queue, sink: Callable[[str, str], None], limit: int = 200) -> int:
    """
    Pass up to ``limit`` queued records to ``sink(level, message)``.

    Returns:
        Number of records delivered
    """
    delivered = 0
    while delivered < limit:
        try:
            message, level = log_queue.get_nowait()
        except Empty:
            break
        sink(level, message)
        delivered += 1
    return delivered
