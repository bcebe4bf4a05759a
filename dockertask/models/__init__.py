"""Data models for dockertask."""

from .errors import (
    ErrorType,
    DockerTaskException,
    InvalidInvocation,
    UnsupportedCommand,
    DaemonCallError,
    DaemonReportedError,
)
from .invocation import (
    Command,
    SUPPORTED_COMMANDS,
    InvocationContext,
    Outcome,
    is_docker_command,
    parse_command,
)
from .tasks import TaskDefinition, TaskFile

__all__ = [
    # Errors
    "ErrorType",
    "DockerTaskException",
    "InvalidInvocation",
    "UnsupportedCommand",
    "DaemonCallError",
    "DaemonReportedError",
    # Invocation models
    "Command",
    "SUPPORTED_COMMANDS",
    "InvocationContext",
    "Outcome",
    "is_docker_command",
    "parse_command",
    # Task file models
    "TaskDefinition",
    "TaskFile",
]
