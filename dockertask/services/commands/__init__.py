"""Command handlers.

``COMMAND_HANDLERS`` is the flat table the dispatcher routes through: one
async handler per command, all sharing the ``(runtime, context, guard)``
signature.
"""

from typing import Dict

import structlog

from ...models.invocation import Command, InvocationContext, Outcome
from ..completion import CompletionGuard
from ..runtime import CommandRuntime, Handler
from . import images, listing
from .containers import ContainerActionRouter

logger = structlog.get_logger(__name__)


async def remove(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    """Accept ``rm`` without performing any daemon action."""
    logger.warning("rm is accepted but performs no action", target=ctx.target)
    guard.succeed(Outcome(command=rt.command, performed=False))


def build_handler_table() -> Dict[Command, Handler]:
    """Return a fresh command-to-handler mapping."""
    table: Dict[Command, Handler] = {
        Command.RUN: images.run,
        Command.PULL: images.pull,
        Command.PUSH: images.push,
        Command.BUILD: images.build,
        Command.TAG: images.tag,
        Command.CREATE_CONTAINER: images.create_container,
        Command.PS: listing.ps,
        Command.RM: remove,
    }
    table.update(ContainerActionRouter().handlers())
    return table


COMMAND_HANDLERS = build_handler_table()

__all__ = ["COMMAND_HANDLERS", "build_handler_table", "ContainerActionRouter", "remove"]
