import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class _Flight:
    def __init__(self, task: asyncio.Task):
        self.task = task
        self.waiters = 0


class SingleFlight:
    """Collapses concurrent calls for the same key into one running task.

    Every caller awaits the shared task. Cancelling one caller does not
    disturb the others; cancelling the last one cancels the task. A key is
    released as soon as its task finishes, so failed or cancelled attempts
    are never reused.
    """

    def __init__(self):
        self._flights: dict[str, _Flight] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._flights

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        flight = self._flights.get(key)
        if flight is None:
            task = asyncio.ensure_future(fn())
            flight = _Flight(task)
            self._flights[key] = flight
            task.add_done_callback(lambda _: self._release(key, flight))
        else:
            logger.debug(f"Joining in-flight computation for {key}")

        flight.waiters += 1
        try:
            return await asyncio.shield(flight.task)
        except asyncio.CancelledError:
            if flight.waiters == 1 and not flight.task.done():
                logger.debug(f"Last caller for {key} cancelled, aborting computation")
                self._forget(key, flight)
                flight.task.cancel()
            raise
        finally:
            flight.waiters -= 1

    def _release(self, key: str, flight: _Flight) -> None:
        self._forget(key, flight)
        if not flight.task.cancelled():
            flight.task.exception()

    def _forget(self, key: str, flight: _Flight) -> None:
        if self._flights.get(key) is flight:
            del self._flights[key]
