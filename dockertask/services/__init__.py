"""Dispatch services.

- dispatcher.py: command validation and routing
- commands/: the handler table
- stream.py: streamed response consumption
- progress.py: busy animation
- completion.py: one-shot completion latch
- daemon.py: Docker client factory
- tasks.py: task files
"""

from .completion import CompletionGuard
from .daemon import DockerClientFactory
from .dispatcher import CommandDispatcher
from .progress import ProgressIndicator
from .stream import StreamResponseHandler

__all__ = [
    "CommandDispatcher",
    "CompletionGuard",
    "DockerClientFactory",
    "ProgressIndicator",
    "StreamResponseHandler",
]
