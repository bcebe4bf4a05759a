"""Collaborators shared by command handlers during one invocation."""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TextIO

import docker

from ..models.invocation import Command, InvocationContext
from ..utils.output import Reporter
from .completion import CompletionGuard
from .stream import StreamResponseHandler


@dataclass
class CommandRuntime:
    """Daemon client and I/O endpoints handed to every handler."""

    command: Command
    client: docker.APIClient
    reporter: Reporter
    streams: StreamResponseHandler
    stdin: Any
    stdout: TextIO


Handler = Callable[[CommandRuntime, InvocationContext, CompletionGuard], Awaitable[None]]
