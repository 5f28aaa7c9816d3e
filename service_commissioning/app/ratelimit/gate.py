"""
Rate gate for the commissioning service.

One gate guards every call to the remote API. Callers pass through a single
exclusive section that waits out the remainder of the request interval,
checks the quota, runs the caller's network call and records it. The wait
happens while holding the section, so submissions are fully serialized and no
two calls are dispatched less than one interval apart, whatever the limit.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Optional

from shared.errors import ConfigurationError, RateLimitError, WaitInterruptedError
from shared.logging import get_logger


class TimeUnit(str, Enum):
    """Granularity of the request interval."""

    NANOSECONDS = "NANOSECONDS"
    MICROSECONDS = "MICROSECONDS"
    MILLISECONDS = "MILLISECONDS"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"

    def to_millis(self, amount: int = 1) -> int:
        """Whole milliseconds in ``amount`` units, truncated toward zero."""
        return amount * _NANOS_PER_UNIT[self] // 1_000_000


_NANOS_PER_UNIT = {
    TimeUnit.NANOSECONDS: 1,
    TimeUnit.MICROSECONDS: 1_000,
    TimeUnit.MILLISECONDS: 1_000_000,
    TimeUnit.SECONDS: 1_000_000_000,
    TimeUnit.MINUTES: 60 * 1_000_000_000,
    TimeUnit.HOURS: 3_600 * 1_000_000_000,
    TimeUnit.DAYS: 86_400 * 1_000_000_000,
}


class RateGate:
    """Serializing request gate with a per-window quota."""

    def __init__(
        self,
        time_unit: TimeUnit,
        request_limit: int,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if request_limit < 1:
            raise ConfigurationError(
                "Request limit cannot be less than one",
                details={"request_limit": request_limit},
            )

        try:
            time_unit = TimeUnit(time_unit)
        except ValueError:
            raise ConfigurationError(
                "Unknown time unit",
                details={"time_unit": time_unit},
            ) from None
        interval_ms = time_unit.to_millis(1)
        if interval_ms < 1:
            raise ConfigurationError(
                "Time unit must resolve to at least one millisecond",
                details={"time_unit": time_unit.value},
            )

        self.logger = get_logger("commissioning.rate_gate")
        self._request_limit = request_limit
        self._request_interval_ms = interval_ms
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()

        self._request_count = 0
        self._last_request_time: Optional[float] = None

    @property
    def request_limit(self) -> int:
        return self._request_limit

    @property
    def request_interval_ms(self) -> int:
        return self._request_interval_ms

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[None]:
        """Hold the gate for one counted attempt.

        The body of the ``async with`` block is the network call. Once the
        body is entered, the attempt is recorded when the block exits, whether
        it returned or raised. Raises ``RateLimitError`` when the window's quota
        is used up and ``WaitInterruptedError`` when the wait is cancelled;
        neither of these counts against the quota. Any cancellation during the
        wait, including one issued by a timeout wrapper such as
        ``asyncio.wait_for``, surfaces as ``WaitInterruptedError`` rather than
        ``CancelledError`` or ``TimeoutError``.
        """
        async with self._lock:
            await self._wait_for_interval()

            if self._request_count >= self._request_limit:
                self.logger.warning(
                    "Request quota exceeded",
                    request_count=self._request_count,
                    request_limit=self._request_limit,
                )
                raise RateLimitError(
                    details={
                        "request_limit": self._request_limit,
                        "request_interval_ms": self._request_interval_ms,
                    }
                )

            try:
                yield
            finally:
                self._last_request_time = self._clock()
                self._request_count += 1

    async def _wait_for_interval(self) -> None:
        if self._last_request_time is None:
            return

        interval = self._request_interval_ms / 1000.0
        elapsed = self._clock() - self._last_request_time

        if elapsed >= interval:
            # Idle for a full interval: the previous window is over. The reset
            # is only checked on entry, so a caller that waits out the interval
            # inside the section is still refused once the quota is used up.
            self._request_count = 0
            return

        delay = interval - elapsed
        self.logger.info("Waiting for request interval", delay_ms=round(delay * 1000, 2))
        try:
            await self._sleep(delay)
        except asyncio.CancelledError as exc:
            self.logger.warning("Interrupted while waiting for request interval")
            raise WaitInterruptedError(details={"remaining_ms": round(delay * 1000, 2)}) from exc
