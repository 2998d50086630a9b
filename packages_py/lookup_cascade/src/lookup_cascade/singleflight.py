"""
Request coalescing (Singleflight) for term lookups.

When several callers resolve the same term concurrently, only one lookup
actually runs; the others wait and receive the same result.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Set, TypeVar

from .types import (
    SingleflightEvent,
    SingleflightEventListener,
    SingleflightEventType,
    SingleflightResult,
)

logger = logging.getLogger("lookup_cascade.singleflight")

T = TypeVar("T")


@dataclass
class InFlightCall:
    """A lookup currently running for a key."""

    task: "asyncio.Future[Any]"
    subscribers: int
    started_at: float


class Singleflight:
    """
    Singleflight - coalescing for concurrent identical lookups.

    The work runs in its own task and every caller awaits it through
    asyncio.shield, so a cancelled caller leaves the shared lookup and the
    other waiters untouched.

    Example:
        sf = Singleflight()

        # These 50 concurrent calls result in only 1 actual fetch
        results = await asyncio.gather(
            *[sf.do("猫", lambda: provider.lookup("猫")) for _ in range(50)]
        )

        print(results[0].shared)  # False (the leader)
        print(results[1].shared)  # True (joined existing)
    """

    def __init__(self) -> None:
        self._in_flight: Dict[str, InFlightCall] = {}
        self._listeners: Set[SingleflightEventListener] = set()

    async def do(
        self,
        key: str,
        fn: Callable[[], Awaitable[T]],
    ) -> SingleflightResult[T]:
        """
        Execute fn with coalescing on key.

        If a call for key is already in flight, wait for it and share its
        result or exception.
        """
        existing = self._in_flight.get(key)
        if existing is not None:
            existing.subscribers += 1
            self._emit(
                SingleflightEventType.SINGLEFLIGHT_JOIN,
                key,
                {"subscribers": existing.subscribers},
            )
            value = await asyncio.shield(existing.task)
            return SingleflightResult(
                value=value,
                shared=True,
                subscribers=existing.subscribers,
            )

        task = asyncio.ensure_future(fn())
        call = InFlightCall(task=task, subscribers=1, started_at=time.monotonic())
        self._in_flight[key] = call
        task.add_done_callback(lambda done: self._finish(key, call, done))

        self._emit(SingleflightEventType.SINGLEFLIGHT_LEAD, key)

        value = await asyncio.shield(task)
        return SingleflightResult(
            value=value,
            shared=False,
            subscribers=call.subscribers,
        )

    def _finish(self, key: str, call: InFlightCall, task: "asyncio.Future[Any]") -> None:
        """Drop the finished call and report how it ended."""
        if self._in_flight.get(key) is call:
            del self._in_flight[key]

        if task.cancelled():
            self._emit(SingleflightEventType.SINGLEFLIGHT_ERROR, key, {"error": "cancelled"})
            return

        error = task.exception()
        if error is not None:
            self._emit(SingleflightEventType.SINGLEFLIGHT_ERROR, key, {"error": str(error)})
            return

        self._emit(
            SingleflightEventType.SINGLEFLIGHT_COMPLETE,
            key,
            {
                "subscribers": call.subscribers,
                "duration_seconds": time.monotonic() - call.started_at,
            },
        )

    def is_in_flight(self, key: str) -> bool:
        """Check if a call for key is currently running."""
        return key in self._in_flight

    def get_subscribers(self, key: str) -> int:
        """Get the number of callers waiting on key."""
        existing = self._in_flight.get(key)
        return existing.subscribers if existing else 0

    def get_stats(self) -> dict:
        """Get statistics about in-flight calls."""
        return {"in_flight": len(self._in_flight)}

    def on(self, listener: SingleflightEventListener) -> Callable[[], None]:
        """Add event listener."""
        self._listeners.add(listener)
        return lambda: self._listeners.discard(listener)

    def off(self, listener: SingleflightEventListener) -> None:
        """Remove event listener."""
        self._listeners.discard(listener)

    def _emit(
        self,
        event_type: SingleflightEventType,
        key: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Emit an event to all listeners."""
        event = SingleflightEvent(type=event_type, key=key, timestamp=time.time(), metadata=metadata)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Singleflight listener failed for {event_type.value}")

    def close(self) -> None:
        """Cancel in-flight calls and release listeners."""
        for call in list(self._in_flight.values()):
            call.task.cancel()
        self._in_flight.clear()
        self._listeners.clear()


def create_singleflight() -> Singleflight:
    """Create a singleflight instance."""
    return Singleflight()
