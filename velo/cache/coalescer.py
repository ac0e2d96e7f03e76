"""
Request coalescing to prevent duplicate upstream calls.

When several coroutines ask for the same missing data at once, only one
fetch runs and every caller awaits its result.
"""
import asyncio
import time
import logging
from typing import Dict, Callable, Any, Awaitable
from dataclasses import dataclass, field

logger = logging.getLogger("cache.coalescer")


@dataclass
class InFlightRequest:
    """Tracks an in-progress upstream request."""
    future: asyncio.Future
    started_at: float = field(default_factory=time.time)
    waiter_count: int = 0


class RequestCoalescer:
    """
    Ensures concurrent requests for the same cache key share one fetch.

    Pattern:
    - First request for a key initiates the fetch
    - Subsequent requests for the same key await the pending future
    - When the fetch completes, all waiters receive the same result
    - Bound to the event loop that runs the callers; no thread safety

    Usage:
        coalescer = RequestCoalescer()
        result = await coalescer.get_or_fetch(
            cache_key="nutrition:plan:active",
            fetch_fn=source.active_nutrition_plan,
        )
    """

    def __init__(self, timeout: float = 30.0):
        """
        Initialize the coalescer.

        Args:
            timeout: Max seconds a waiter waits for an in-flight request
        """
        self._in_flight: Dict[str, InFlightRequest] = {}
        self._timeout = timeout
        self._coalesced_total = 0

    async def get_or_fetch(
        self,
        cache_key: str,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Either join an existing in-flight request or initiate a new one.

        Args:
            cache_key: Unique key for this request
            fetch_fn: Coroutine function to call if we need to fetch

        Returns:
            The fetched data (shared among all concurrent callers)

        Raises:
            asyncio.TimeoutError: If waiting for an in-flight request times out
            Exception: Any error from fetch_fn is propagated to every caller
        """
        in_flight = self._in_flight.get(cache_key)
        if in_flight is not None:
            in_flight.waiter_count += 1
            self._coalesced_total += 1
            logger.debug(
                f"Coalescing request for {cache_key} "
                f"(waiters: {in_flight.waiter_count})"
            )
            try:
                return await asyncio.wait_for(
                    asyncio.shield(in_flight.future), timeout=self._timeout
                )
            except asyncio.TimeoutError:
                logger.error(f"Timeout waiting for coalesced request: {cache_key}")
                raise

        in_flight = InFlightRequest(future=asyncio.get_running_loop().create_future())
        self._in_flight[cache_key] = in_flight
        logger.debug(f"Initiating fetch for {cache_key}")

        try:
            result = await fetch_fn()
        except asyncio.CancelledError:
            in_flight.future.cancel()
            raise
        except Exception as e:
            logger.warning(f"Fetch failed for {cache_key}: {e}")
            in_flight.future.set_exception(e)
            # Mark the exception retrieved so a waiter-less failure stays quiet
            in_flight.future.exception()
            raise
        else:
            in_flight.future.set_result(result)
            return result
        finally:
            if self._in_flight.get(cache_key) is in_flight:
                del self._in_flight[cache_key]

    @property
    def active_requests(self) -> int:
        """Number of currently in-flight requests."""
        return len(self._in_flight)

    def get_stats(self) -> Dict[str, Any]:
        """Get coalescer statistics."""
        return {
            "active_requests": len(self._in_flight),
            "active_keys": list(self._in_flight.keys()),
            "coalesced_total": self._coalesced_total,
        }
