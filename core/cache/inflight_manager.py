from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging


__all__: list[str] = ["InFlightAbandonedError", "InFlightManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class InFlightAbandonedError(Exception):
    """The producer of an in-flight request went away without a result."""


class InFlightManager:
    """Coalesces concurrent cache misses for the same key into a single request.

    The first caller to ``claim`` a key becomes its producer and must finish with ``resolve``, ``reject`` or
    ``abandon``. Later callers receive the shared future and ``wait`` on it. Bookkeeping is synchronous, so a
    claim and the cache lookup preceding it happen within the same event-loop turn.
    """

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Future[str]] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    def __contains__(self, key: object) -> bool:
        return key in self._inflight

    def claim(self, key: str) -> asyncio.Future[str] | None:
        """Register the caller as producer for the key, or return the producer's future.

        Args:
            key (str): Cache key of the request.

        Returns:
            asyncio.Future[str] | None: None if the caller is now the producer, otherwise the future to wait on.
        """
        fut: asyncio.Future[str] | None = self._inflight.get(key)
        if fut is not None and not fut.done():
            logger.debug("In-flight translation detected for key: %s", key[:48])
            return fut

        fut = asyncio.get_running_loop().create_future()
        # Mark any stored exception as retrieved so an unwaited future does not log at garbage collection.
        fut.add_done_callback(lambda f: f.cancelled() or f.exception())
        self._inflight[key] = fut
        logger.debug("Marked in-flight start for key: %s", key[:48])
        return None

    async def wait(self, fut: asyncio.Future[str]) -> str:
        """Wait for a producer's result without letting a waiter's cancellation cancel the shared future.

        Args:
            fut (asyncio.Future[str]): Future returned by ``claim``.

        Returns:
            str: The producer's result.

        Raises:
            InFlightAbandonedError: If the producer was cancelled.
            Exception: Whatever the producer failed with.
        """
        return await asyncio.shield(fut)

    def resolve(self, key: str, value: str) -> None:
        """Publish the producer's result to every waiter."""
        fut: asyncio.Future[str] | None = self._inflight.pop(key, None)
        if fut is not None and not fut.done():
            fut.set_result(value)
            logger.debug("Set in-flight translation result for key: %s", key[:48])
        else:
            logger.warning("No in-flight future found or already done for key: %s when storing result", key[:48])

    def reject(self, key: str, exc: Exception) -> None:
        """Publish the producer's failure to every waiter."""
        fut: asyncio.Future[str] | None = self._inflight.pop(key, None)
        if fut is not None and not fut.done():
            fut.set_exception(exc)
            logger.debug("Set in-flight translation exception for key: %s", key[:48])
        else:
            logger.warning("No in-flight future found or already done for key: %s when storing exception", key[:48])

    def abandon(self, key: str) -> None:
        """Release the key after the producer was cancelled; waiters are told to retry on their own."""
        msg: str = f"In-flight translation abandoned for key: {key[:48]}"
        self.reject(key, InFlightAbandonedError(msg))

    def clear(self) -> None:
        """Abandon every pending request."""
        for key in list(self._inflight):
            self.abandon(key)
        logger.info("In-flight state cleared")
