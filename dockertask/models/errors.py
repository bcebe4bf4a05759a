"""Error models and exception classes for dockertask."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorType(str, Enum):
    """Error type enumeration."""

    VALIDATION = "validation"
    UNSUPPORTED_COMMAND = "unsupported_command"
    DAEMON_CALL = "daemon_call"
    DAEMON_REPORTED = "daemon_reported"


# Custom Exception Classes


class DockerTaskException(Exception):
    """Base exception for dockertask."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.DAEMON_CALL,
        exit_code: int = 1,
        command: Optional[str] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.exit_code = exit_code
        self.command = command
        super().__init__(message)

    def to_log(self) -> Dict[str, Any]:
        """Structured fields describing this error for log events."""
        return {
            "error": self.message,
            "error_type": self.error_type.value,
            "command": self.command,
        }


class InvalidInvocation(DockerTaskException):
    """The invocation is missing a command or a required field."""

    def __init__(self, message: str = "No Docker command supplied!", **kwargs):
        super().__init__(
            message=message, error_type=ErrorType.VALIDATION, exit_code=2, **kwargs
        )


class UnsupportedCommand(DockerTaskException):
    """The command is not part of the supported vocabulary."""

    def __init__(self, command: str, message: Optional[str] = None):
        super().__init__(
            message=message or f"{command} is not a valid Docker command",
            error_type=ErrorType.UNSUPPORTED_COMMAND,
            exit_code=2,
            command=command,
        )


class DaemonCallError(DockerTaskException):
    """The daemon call itself failed (network, auth or daemon-side error)."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_type=ErrorType.DAEMON_CALL, **kwargs)


class DaemonReportedError(DockerTaskException):
    """The daemon accepted the call but reported an error inside the stream."""

    def __init__(self, message: str, label: Optional[str] = None, **kwargs):
        self.label = label
        super().__init__(
            message=message, error_type=ErrorType.DAEMON_REPORTED, **kwargs
        )
