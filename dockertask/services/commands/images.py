"""Handlers for image commands and for running new containers."""

from typing import Any, Dict

import structlog

from ...models.errors import DaemonCallError
from ...models.invocation import InvocationContext, Outcome
from ...utils.files import make_build_context
from ...utils.streams import iterate_blocking, run_in_executor, write_chunk
from ..completion import CompletionGuard
from ..runtime import CommandRuntime
from .common import call_options, require

logger = structlog.get_logger(__name__)


async def run(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    """Create a container, stream its output and wait for it to exit."""
    client = rt.client
    image = require(ctx.target or ctx.param("image"), "image", rt.command.value)
    cmd = require(ctx.param("cmd"), "cmd", rt.command.value)
    stream = ctx.stream or rt.stdout

    create_options: Dict[str, Any] = dict(ctx.param("create_options", {}))
    start_options = ctx.param("start_options", {})
    if start_options:
        create_options["host_config"] = client.create_host_config(**start_options)

    container = await run_in_executor(
        client.create_container, **call_options(create_options, image=image, command=cmd)
    )
    container_id = container["Id"]
    logger.info("Created container", container_id=container_id[:12], image=image)

    output = await run_in_executor(
        client.attach, container_id, stream=True, logs=True, stdout=True, stderr=True
    )
    await run_in_executor(client.start, container_id)
    async for chunk in iterate_blocking(output):
        write_chunk(stream, chunk)

    result = await run_in_executor(client.wait, container_id)
    logger.info(
        "Container exited",
        container_id=container_id[:12],
        status_code=result.get("StatusCode") if isinstance(result, dict) else None,
    )
    guard.succeed(Outcome(command=rt.command, result=result))


async def pull(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    repo_tag = require(ctx.target, "repo_tag", rt.command.value)
    label = f"Pulling {repo_tag}"
    stream = await run_in_executor(
        rt.client.pull,
        **call_options(ctx.options, repository=repo_tag, stream=True, decode=True),
    )
    await rt.streams.handle(stream, label, guard, rt.command)


async def push(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    name = require(ctx.target, "name", rt.command.value)
    label = f"Pushing {name}"
    options = call_options(ctx.options, repository=name, stream=True, decode=True)
    if ctx.param("auth") is not None:
        options["auth_config"] = ctx.param("auth")
    stream = await run_in_executor(rt.client.push, **options)
    await rt.streams.handle(stream, label, guard, rt.command)


async def tag(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    name = require(ctx.target, "name", rt.command.value)
    options = dict(ctx.options)
    repo = require(options.pop("repo", None), "opts.repo", rt.command.value)
    tag_name = options.pop("tag", None)

    created = await run_in_executor(
        rt.client.tag, **call_options(options, image=name, repository=repo, tag=tag_name)
    )
    if not created:
        raise DaemonCallError(
            f"Tagging {repo}:{tag_name} was not acknowledged by the daemon",
            command=rt.command.value,
        )

    message = f"Tagging {repo}:{tag_name}: success!"
    rt.reporter.ok(message)
    guard.succeed(Outcome(command=rt.command, message=message))


async def build(rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard) -> None:
    """Build an image from the context directory or from the resolved file list."""
    context_dir = require(ctx.param("context"), "context", rt.command.value)
    options = dict(ctx.options)
    if "t" in options:
        options.setdefault("tag", options.pop("t"))
    label = f"Building {options.get('tag') or 'docker image'}"

    if ctx.files:
        fileobj = make_build_context(context_dir, ctx.files)
        options = call_options(options, fileobj=fileobj, custom_context=True, decode=True)
    else:
        options = call_options(options, path=str(context_dir), decode=True)
    stream = await run_in_executor(rt.client.build, **options)
    await rt.streams.handle(stream, label, guard, rt.command)


async def create_container(
    rt: CommandRuntime, ctx: InvocationContext, guard: CompletionGuard
) -> None:
    """Create a container from the command options and start it."""
    options = dict(ctx.options)
    if ctx.target and "image" not in options:
        options["image"] = ctx.target
    require(options.get("image"), "opts.image", rt.command.value)

    container = await run_in_executor(rt.client.create_container, **options)
    container_id = container["Id"]
    await run_in_executor(rt.client.start, container_id)

    message = f"Created container {container_id[:12]}"
    rt.reporter.ok(message)
    guard.succeed(Outcome(command=rt.command, message=message, result=container))
