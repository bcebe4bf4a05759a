"""Consumption of streamed daemon responses (pull, push, build).

The daemon can report a failure inside a response whose HTTP status was a
success, so every record of the stream is checked for an ``error`` field
before the operation is declared successful.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional

import structlog

from ..models.errors import DaemonReportedError
from ..models.invocation import Command, Outcome
from ..utils.output import Reporter
from ..utils.streams import close_stream, iterate_records
from .completion import CompletionGuard
from .progress import ProgressIndicator

logger = structlog.get_logger(__name__)


def error_message(record: Dict[str, Any]) -> Optional[str]:
    """Return the error reported by a stream record, if any."""
    error = record.get("error")
    if error is None:
        return None
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(error)


@dataclass
class StreamSession:
    """State owned by the handler while one stream is consumed."""

    stream: Iterable[Any]
    label: str
    indicator: ProgressIndicator
    guard: CompletionGuard
    records: int = 0


class StreamResponseHandler:
    """Drives a progress indicator over a daemon stream and resolves the guard."""

    def __init__(
        self,
        reporter: Reporter,
        indicator_factory: Optional[Callable[[Reporter], ProgressIndicator]] = None,
    ):
        self._reporter = reporter
        self._indicator_factory = indicator_factory or ProgressIndicator

    async def handle(
        self,
        stream: Iterable[Any],
        label: str,
        guard: CompletionGuard,
        command: Command,
    ) -> None:
        """Consume ``stream`` and fire ``guard`` once.

        Args:
            stream: Blocking iterable of decoded records or raw JSON chunks
            label: Task description shown next to the spinner
            guard: Completion latch of the invocation
            command: Command the stream belongs to
        """
        session = StreamSession(
            stream=stream,
            label=label,
            indicator=self._indicator_factory(self._reporter),
            guard=guard,
        )
        reported = None

        session.indicator.start(label)
        try:
            async for record in iterate_records(session.stream):
                session.records += 1
                reported = error_message(record)
                if reported is not None:
                    break
        finally:
            session.indicator.stop()
            self._reporter.reset_cursor()
            close_stream(session.stream)

        if reported is not None:
            logger.warning(
                "Daemon reported an error in stream",
                command=command.value,
                task=label,
                error=reported,
            )
            guard.fail(
                DaemonReportedError(reported, label=label, command=command.value)
            )
            return

        if guard.fired:
            return
        logger.info(
            "Stream completed", command=command.value, task=label, records=session.records
        )
        message = f"{label}: success!"
        self._reporter.ok(message)
        guard.succeed(Outcome(command=command, message=message))
