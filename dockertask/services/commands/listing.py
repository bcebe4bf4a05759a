"""Handler for listing containers."""

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ...models.invocation import InvocationContext, Outcome
from ...utils.output import render_table
from ...utils.streams import run_in_executor
from ..completion import CompletionGuard
from ..runtime import CommandRuntime

ColumnSpec = Mapping[str, Union[Callable[[Any], Any], Any]]


def project_columns(
    containers: Iterable[Mapping[str, Any]], cols: Optional[ColumnSpec]
) -> List[Dict[str, Any]]:
    """Keep only the requested columns, applying any column transforms.

    A column mapped to a callable receives the source field and its result
    becomes the column value; any other mapping passes the field through.
    Without ``cols`` records are returned unchanged.
    """
    if not cols:
        return [dict(container) for container in containers]

    projected = []
    for container in containers:
        row = {}
        for column, transform in cols.items():
            value = container.get(column)
            row[column] = transform(value) if callable(transform) else value
        projected.append(row)
    return projected


async def ps(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    containers = await run_in_executor(rt.client.containers, **ctx.options)
    rows = project_columns(containers, ctx.param("cols"))
    rt.reporter.writeln(
        render_table(rows, ctx.param("col_opts", {}))
    )
    guard.succeed(Outcome(command=rt.command, result=rows))
