"""Command dispatch.

Usage:
    dispatcher = CommandDispatcher()
    outcome = await dispatcher.dispatch("pull", InvocationContext(target="alpine:3.20"))
"""

import sys
from typing import Any, Mapping, Optional, TextIO

import structlog
from docker.errors import DockerException, StreamParseError
from requests.exceptions import RequestException

from ..models.errors import DaemonCallError, DockerTaskException, ErrorType
from ..models.invocation import Command, InvocationContext, Outcome, parse_command
from ..utils.output import Reporter
from .commands import COMMAND_HANDLERS
from .completion import CompletionGuard
from .daemon import DockerClientFactory
from .runtime import CommandRuntime, Handler
from .stream import StreamResponseHandler

logger = structlog.get_logger(__name__)

DAEMON_ERRORS = (DockerException, StreamParseError, RequestException, OSError)


class CommandDispatcher:
    """Validates a command and runs its handler against the daemon.

    The dispatcher holds only collaborators; each ``dispatch`` call owns its
    client, completion guard and stream session.
    """

    def __init__(
        self,
        client_factory: Optional[DockerClientFactory] = None,
        reporter: Optional[Reporter] = None,
        handlers: Optional[Mapping[Command, Handler]] = None,
        stdin: Optional[Any] = None,
        stdout: Optional[TextIO] = None,
    ):
        self._client_factory = client_factory or DockerClientFactory()
        self._reporter = reporter or Reporter()
        self._handlers = dict(COMMAND_HANDLERS if handlers is None else handlers)
        self._stdin = stdin
        self._stdout = stdout

        missing = [command.value for command in Command if command not in self._handlers]
        if missing:
            raise RuntimeError(f"No handler bound for commands: {', '.join(missing)}")

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    async def run(self, context: InvocationContext) -> Outcome:
        """Dispatch the command named by the context itself."""
        return await self.dispatch(context.command, context)

    async def dispatch(self, command: Any, context: InvocationContext) -> Outcome:
        """Run one invocation to completion.

        Raises:
            InvalidInvocation: no command, or a required field is missing
            UnsupportedCommand: the command is outside the vocabulary
            DaemonCallError: a daemon call failed
            DaemonReportedError: the daemon reported an error inside a stream
        """
        cmd = parse_command(command)
        log = logger.bind(command=cmd.value, target=context.target)
        guard = CompletionGuard()
        client = None

        try:
            try:
                client = self._client_factory.create(context.daemon_options)
                runtime = CommandRuntime(
                    command=cmd,
                    client=client,
                    reporter=self._reporter,
                    streams=StreamResponseHandler(self._reporter),
                    stdin=self._stdin if self._stdin is not None else sys.stdin,
                    stdout=self._stdout if self._stdout is not None else sys.stdout,
                )
                log.debug("Dispatching command")
                await self._handlers[cmd](runtime, context, guard)
            except DockerTaskException as e:
                guard.fail(e)
            except DAEMON_ERRORS as e:
                guard.fail(DaemonCallError(str(e), command=cmd.value))

            try:
                outcome = await guard.wait()
            except DockerTaskException as e:
                if e.command is None:
                    e.command = cmd.value
                self._report_failure(e, log)
                raise
        finally:
            if client is not None:
                client.close()

        log.info("Command completed", performed=outcome.performed)
        return outcome

    def _report_failure(self, error: DockerTaskException, log) -> None:
        if error.error_type in (ErrorType.DAEMON_CALL, ErrorType.DAEMON_REPORTED):
            self._reporter.error(error.message)
            log.error("Command failed", **error.to_log())
        else:
            log.warning("Invalid invocation", **error.to_log())
