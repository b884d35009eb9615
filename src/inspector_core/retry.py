from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryableError(Exception):
    """Raised by an attempt that may be repeated after `retry_after_seconds`."""

    def __init__(self, message: str, *, retry_after_seconds: float | None = None) -> None:
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds


@dataclass(slots=True)
class RetryPolicy:
    """Retry an operation while it raises RetryableError.

    `max_attempts=None` retries forever, waiting the delay the server asked for
    (or `default_delay_seconds` when it gave none) between attempts.
    """

    max_attempts: int | None = None
    default_delay_seconds: float = 60.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1 or None")
        if self.default_delay_seconds < 0:
            raise ValueError("default_delay_seconds must be >= 0")

    def call(
        self,
        operation: Callable[[], T],
        *,
        on_retry: Callable[[RetryableError, float], None] | None = None,
    ) -> T:
        attempt = 0
        while True:
            attempt += 1
            try:
                return operation()
            except RetryableError as exc:
                if self.max_attempts is not None and attempt >= self.max_attempts:
                    raise
                delay = self.delay_for(exc)
                if on_retry is not None:
                    on_retry(exc, delay)
                logger.debug("retry attempt=%d delay_seconds=%s", attempt, delay)
                self.sleep(delay)

    def delay_for(self, error: RetryableError) -> float:
        if error.retry_after_seconds is None:
            return self.default_delay_seconds
        return max(0.0, error.retry_after_seconds)
