"""Helpers shared by command handlers."""

from typing import Any, Dict, Mapping

import structlog

from ...models.errors import InvalidInvocation

logger = structlog.get_logger(__name__)


def require(value: Any, field: str, command: str) -> Any:
    """Return ``value`` or raise when a required field is missing."""
    if value is None or value == "":
        raise InvalidInvocation(f"'{command}' requires '{field}'", command=command)
    return value


def call_options(options: Mapping[str, Any], **fixed: Any) -> Dict[str, Any]:
    """Merge invocation options with the arguments a handler fixes itself.

    Fixed arguments win over options of the same name, so a task carrying
    e.g. ``stream`` or ``decode`` cannot collide with the handler's call.
    """
    overridden = sorted(
        name for name in fixed if name in options and options[name] != fixed[name]
    )
    if overridden:
        logger.debug("Ignoring options fixed by the command", options=overridden)
    merged = dict(options)
    merged.update(fixed)
    return merged
