"""Invocation models: the command vocabulary, context and outcome."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, TextIO, Tuple

from .errors import InvalidInvocation, UnsupportedCommand


class Command(str, Enum):
    """Supported Docker commands."""

    RUN = "run"
    PULL = "pull"
    PUSH = "push"
    BUILD = "build"
    STOP = "stop"
    START = "start"
    KILL = "kill"
    PS = "ps"
    RM = "rm"
    INSPECT = "inspect"
    EXEC = "exec"
    RESTART = "restart"
    LOGS = "logs"
    STATS = "stats"
    TAG = "tag"
    CREATE_CONTAINER = "create-container"


SUPPORTED_COMMANDS = frozenset(command.value for command in Command)


def is_docker_command(value: Optional[str]) -> bool:
    """Return True if ``value`` names a supported command."""
    return value in SUPPORTED_COMMANDS


def parse_command(value: Any) -> Command:
    """Validate a command name and return its ``Command`` member.

    Raises:
        InvalidInvocation: no command was supplied
        UnsupportedCommand: the command is outside the vocabulary
    """
    if isinstance(value, Command):
        return value
    if value is None or value == "":
        raise InvalidInvocation()
    if not isinstance(value, str) or not is_docker_command(value):
        raise UnsupportedCommand(str(value))
    return Command(value)


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class InvocationContext:
    """Everything one invocation needs, fixed before dispatch begins.

    ``options`` are passed to the daemon call, ``daemon_options`` configure
    the client, and ``params`` carry the task-level fields a handler reads
    (``cmd``, ``cols``, ``col_opts``, ``auth``, ``context``, ...).
    """

    command: Optional[str] = None
    target: Optional[str] = None
    options: Mapping[str, Any] = field(default_factory=dict)
    daemon_options: Mapping[str, Any] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    files: Tuple[str, ...] = ()
    stream: Optional[TextIO] = None

    def __post_init__(self):
        object.__setattr__(self, "options", _freeze(self.options))
        object.__setattr__(self, "daemon_options", _freeze(self.daemon_options))
        object.__setattr__(self, "params", _freeze(self.params))
        object.__setattr__(self, "files", tuple(self.files))

    def param(self, name: str, default: Any = None) -> Any:
        """Return a task-level field, or ``default`` when it is unset."""
        value = self.params.get(name)
        return default if value is None else value


@dataclass(frozen=True)
class Outcome:
    """Result of a completed invocation."""

    command: Command
    message: Optional[str] = None
    result: Any = None
    performed: bool = True
