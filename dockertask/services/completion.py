"""One-shot completion latch for an invocation."""

import asyncio
from typing import Any, Optional

import structlog

logger = structlog.get_logger(__name__)


class CompletionGuard:
    """Resolves an invocation exactly once.

    The first call to ``succeed`` or ``fail`` decides the outcome; later
    calls are refused and return False.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = loop.create_future()

    @property
    def fired(self) -> bool:
        return self._future.done()

    def succeed(self, outcome: Any = None) -> bool:
        """Complete successfully with ``outcome``."""
        if self._future.done():
            logger.debug("Completion already fired; ignoring success")
            return False
        self._future.set_result(outcome)
        return True

    def fail(self, error: BaseException) -> bool:
        """Complete with ``error``."""
        if self._future.done():
            logger.debug("Completion already fired; ignoring failure", error=str(error))
            return False
        self._future.set_exception(error)
        return True

    async def wait(self) -> Any:
        """Wait for completion; raises the failure if one was recorded."""
        return await asyncio.shield(self._future)
