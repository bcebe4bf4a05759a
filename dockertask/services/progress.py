"""Busy animation shown while a daemon stream is being consumed."""

import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence

import structlog
from rich.spinner import Spinner

from ..config import settings
from ..utils.output import Reporter

logger = structlog.get_logger(__name__)


@dataclass
class ProgressIndicatorState:
    """Animation position and timing of one indicator."""

    interval: float
    frame_index: int = 0
    running: bool = False


def spinner_frames(name: Optional[str] = None) -> List[str]:
    """Animation frames of a named rich spinner."""
    return list(Spinner(name or settings.display.spinner_name).frames)


class ProgressIndicator:
    """Repaints ``<label>.. <frame>`` on the current line at a fixed interval.

    The repaint runs as an asyncio task on the caller's loop. An indicator
    cannot be started twice; ``stop`` is idempotent and no frame is painted
    once it returns.
    """

    def __init__(
        self,
        reporter: Reporter,
        frames: Optional[Sequence[str]] = None,
        interval: Optional[float] = None,
    ):
        self._reporter = reporter
        self._frames = list(frames) if frames else spinner_frames()
        if interval is None:
            interval = settings.display.spinner_interval
        self.state = ProgressIndicatorState(interval=interval)
        self._label = ""
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def frame_index(self) -> int:
        return self.state.frame_index

    def advance(self) -> str:
        """Return the current frame and move to the next, wrapping at the end."""
        frame = self._frames[self.state.frame_index]
        self.state.frame_index = (self.state.frame_index + 1) % len(self._frames)
        return frame

    def start(self, label: str) -> None:
        if self.state.running:
            raise RuntimeError("Progress indicator is already running")
        self._label = label
        self.state.running = True
        self._task = asyncio.get_running_loop().create_task(self._spin())

    def stop(self) -> None:
        if not self.state.running:
            return
        self.state.running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _spin(self) -> None:
        while self.state.running:
            self._reporter.overwrite_line(f"{self._label}.. {self.advance()}")
            await asyncio.sleep(self.state.interval)
