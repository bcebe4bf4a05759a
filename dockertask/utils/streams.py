"""Helpers for consuming blocking daemon streams from asyncio code.

The Docker SDK is synchronous: calls block and streamed responses are plain
generators. These helpers move each blocking step onto the default executor
so the event loop stays free for the progress indicator.
"""

import asyncio
import itertools
import json
from functools import partial
from typing import Any, AsyncIterator, Dict, Iterable, Iterator, Union

import structlog
from docker.utils.json_stream import json_splitter, split_buffer

logger = structlog.get_logger(__name__)

_END = object()


async def run_in_executor(func, *args, **kwargs):
    """
    Run a blocking function in the default thread pool executor.

    Args:
        func: Blocking function to run
        *args: Positional arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        Result of the function
    """
    loop = asyncio.get_running_loop()
    if kwargs:
        func = partial(func, **kwargs)
    return await loop.run_in_executor(None, func, *args)


async def iterate_blocking(iterable: Iterable[Any]) -> AsyncIterator[Any]:
    """Yield items of a blocking iterable, reading each one in the executor."""
    iterator = iter(iterable)
    while True:
        item = await run_in_executor(next, iterator, _END)
        if item is _END:
            return
        yield item


def _decode_tail(buffered: str) -> Any:
    buffered = buffered.strip()
    return json.loads(buffered) if buffered else None


def json_records(stream: Iterable[Any]) -> Iterator[Dict[str, Any]]:
    """Yield the JSON records of a blocking daemon stream.

    Streams opened with ``decode=True`` already yield mappings. Raw streams
    yield bytes or text whose chunk boundaries fall anywhere, so they are
    buffered across chunks by the SDK's JSON splitter. Trailing data that
    never forms a document raises ``StreamParseError``.
    """
    iterator = iter(stream)
    first = next(iterator, _END)
    if first is _END:
        return
    chunks = itertools.chain([first], iterator)
    if isinstance(first, dict):
        records = chunks
    else:
        records = split_buffer(chunks, json_splitter, _decode_tail)
    for record in records:
        if isinstance(record, dict):
            yield record
        elif record is not None:
            logger.debug("Skipping non-object stream record", record=repr(record)[:200])


async def iterate_records(stream: Iterable[Any]) -> AsyncIterator[Dict[str, Any]]:
    """Yield decoded JSON records from a blocking daemon stream."""
    async for record in iterate_blocking(json_records(stream)):
        yield record


def close_stream(stream: Any) -> None:
    """Close a daemon stream if it supports closing."""
    close = getattr(stream, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception as e:
        logger.debug("Failed to close stream", error=str(e))


def write_chunk(sink, data: Union[bytes, str]) -> None:
    """Write a stream chunk to a text or binary sink and flush it.

    Text sinks that expose a binary ``buffer`` receive the raw bytes.
    """
    if isinstance(data, bytes):
        buffer = getattr(sink, "buffer", None)
        if buffer is not None:
            buffer.write(data)
            buffer.flush()
            return
        data = data.decode("utf-8", errors="replace")
    sink.write(data)
    sink.flush()
