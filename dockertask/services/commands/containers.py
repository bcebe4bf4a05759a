"""Handlers for commands that act on an existing container.

Every routed command first resolves the container identity from the
invocation, then branches on the action.
"""

import json
import socket
import threading
from typing import Any, Awaitable, Callable, Dict

import structlog
from docker.utils.socket import frames_iter

from ...models.invocation import Command, InvocationContext, Outcome
from ...utils.output import render_mapping
from ...utils.streams import (
    close_stream,
    iterate_blocking,
    iterate_records,
    run_in_executor,
    write_chunk,
)
from ..completion import CompletionGuard
from ..runtime import CommandRuntime, Handler
from .common import call_options, require

logger = structlog.get_logger(__name__)

Action = Callable[[CommandRuntime, InvocationContext, CompletionGuard, str], Awaitable[None]]

LIFECYCLE_ACTIONS = {
    Command.STOP: "stop",
    Command.START: "start",
    Command.KILL: "kill",
    Command.RESTART: "restart",
}

# Seconds to wait for the stdin pump once exec output has ended
STDIN_JOIN_TIMEOUT = 1.0


def resolve_container_id(ctx: InvocationContext, command: Command) -> str:
    """Return the container identity of the invocation."""
    return require(ctx.target, "id", command.value)


def _pump_stdin(source: Any, sock: Any, stop: threading.Event) -> None:
    """Copy ``source`` into the exec socket until end of input or ``stop``."""
    raw = getattr(sock, "_sock", sock)
    reader = getattr(source, "buffer", source)
    read1 = getattr(reader, "read1", None)
    try:
        while not stop.is_set():
            data = read1(4096) if read1 is not None else reader.readline()
            if not data or stop.is_set():
                break
            if isinstance(data, str):
                data = data.encode("utf-8")
            raw.sendall(data)
    except (OSError, ValueError) as e:
        logger.debug("Exec stdin closed", error=str(e))
    finally:
        try:
            raw.shutdown(socket.SHUT_WR)
        except OSError:
            pass


class ContainerActionRouter:
    """Routes container commands through one identity-resolution step."""

    def __init__(self):
        self._actions: Dict[Command, Action] = {
            Command.STOP: self._lifecycle,
            Command.START: self._lifecycle,
            Command.KILL: self._lifecycle,
            Command.RESTART: self._lifecycle,
            Command.INSPECT: self._inspect,
            Command.EXEC: self._exec,
            Command.LOGS: self._logs,
            Command.STATS: self._stats,
        }

    def handlers(self) -> Dict[Command, Handler]:
        """Flat handler table entries for every routed command."""
        return {command: self.route for command in self._actions}

    async def route(
        self, rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard
    ) -> None:
        action = self._actions[rt.command]
        container_id = resolve_container_id(ctx, rt.command)
        logger.debug("Routing container action", command=rt.command.value, container=container_id)
        await action(rt, ctx, guard, container_id)

    async def _lifecycle(
        self, rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard, container_id: str
    ) -> None:
        method = getattr(rt.client, LIFECYCLE_ACTIONS[rt.command])
        result = await run_in_executor(
            method, **call_options(ctx.options, container=container_id)
        )

        output = result.get("output") if isinstance(result, dict) else None
        message = output or "Success!"
        rt.reporter.ok(message)
        guard.succeed(Outcome(command=rt.command, message=message, result=result))

    async def _inspect(
        self, rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard, container_id: str
    ) -> None:
        """Print the container details; options become query parameters (e.g. ``size``)."""
        client = rt.client
        if ctx.options:
            # inspect_container() takes no query parameters
            response = await run_in_executor(
                client._get,
                client._url("/containers/{0}/json", container_id),
                params=dict(ctx.options),
            )
            result = client._result(response, True)
        else:
            result = await run_in_executor(client.inspect_container, container_id)
        rt.reporter.writeln(json.dumps(result, indent=2, default=str))
        guard.succeed(Outcome(command=rt.command, result=result))

    async def _exec(
        self, rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard, container_id: str
    ) -> None:
        """Run a command in the container, passing stdin and output through.

        Options are ``exec_create`` keyword arguments; ``stdin``, ``stdout``
        and ``stderr`` also select what is attached locally.
        """
        options = dict(ctx.options)
        cmd = require(ctx.param("cmd") or options.pop("cmd", None), "cmd", rt.command.value)
        options.pop("cmd", None)
        attach_stdin = bool(options.get("stdin", False))
        attach_output = bool(options.get("stdout", True) or options.get("stderr", True))
        tty = bool(options.get("tty", False))

        created = await run_in_executor(
            rt.client.exec_create, **call_options(options, container=container_id, cmd=cmd)
        )
        exec_id = created["Id"]

        pump = None
        stop = threading.Event()
        if attach_stdin:
            sock = await run_in_executor(rt.client.exec_start, exec_id, tty=tty, socket=True)
            pump = threading.Thread(
                target=_pump_stdin, args=(rt.stdin, sock, stop), name="exec-stdin", daemon=True
            )
            pump.start()
            output = (data for _, data in frames_iter(sock, tty))
        else:
            sock = None
            output = await run_in_executor(rt.client.exec_start, exec_id, tty=tty, stream=True)

        try:
            async for chunk in iterate_blocking(output):
                if attach_output:
                    write_chunk(rt.stdout, chunk)
        finally:
            stop.set()
            if sock is not None:
                close_stream(sock)
            if pump is not None:
                await run_in_executor(pump.join, STDIN_JOIN_TIMEOUT)
                if pump.is_alive():
                    logger.debug("Exec stdin pump still waiting for input", exec_id=exec_id)

        guard.succeed(Outcome(command=rt.command, result={"Id": exec_id}))

    async def _logs(
        self, rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard, container_id: str
    ) -> None:
        output = await run_in_executor(
            rt.client.logs, **call_options(ctx.options, container=container_id, stream=True)
        )
        async for chunk in iterate_blocking(output):
            write_chunk(rt.stdout, chunk)
        guard.succeed(Outcome(command=rt.command))

    async def _stats(
        self, rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard, container_id: str
    ) -> None:
        """Repaint a stats table for every record the daemon sends.

        There is no terminal condition: completion is never fired, so the
        invocation lasts until the caller stops waiting for it.
        """
        stream = await run_in_executor(
            rt.client.stats,
            **call_options(ctx.options, container=container_id, stream=True, decode=True),
        )
        printed = 0
        async for record in iterate_records(stream):
            printed = rt.reporter.repaint_block(render_mapping(record), printed)
        logger.info("Stats stream closed by daemon", container=container_id)
