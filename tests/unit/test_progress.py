"""Unit tests for the progress indicator."""

import asyncio

import pytest

from dockertask.services.progress import ProgressIndicator, spinner_frames


class TestIndicatorFrames:
    """Test frame sequencing."""

    def test_default_frames_available(self):
        """The configured rich spinner provides frames."""
        assert len(spinner_frames()) > 1
        assert spinner_frames("bouncingBall") == spinner_frames()

    def test_advance_wraps(self, reporter):
        """Frames cycle back to the first after the last."""
        indicator = ProgressIndicator(reporter, frames=["a", "b", "c"], interval=0.01)
        assert [indicator.advance() for _ in range(7)] == ["a", "b", "c", "a", "b", "c", "a"]
        assert indicator.frame_index == 1


class TestIndicatorLifecycle:
    """Test start and stop behaviour."""

    def test_stop_without_start(self, reporter, output):
        """Stopping an indicator that never ran does nothing."""
        indicator = ProgressIndicator(reporter, frames=["a"], interval=0.01)
        indicator.stop()
        indicator.stop()
        assert indicator.running is False
        assert output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_repaints_label(self, reporter, output):
        """A running indicator paints the label followed by frames."""
        indicator = ProgressIndicator(reporter, frames=["-", "+"], interval=0.01)
        indicator.start("Pulling alpine")
        await asyncio.sleep(0.05)
        indicator.stop()
        text = output.getvalue()
        assert "Pulling alpine.. -" in text
        assert "Pulling alpine.. +" in text

    @pytest.mark.asyncio
    async def test_no_repaint_after_stop(self, reporter, output):
        """Nothing is written once stop has returned."""
        indicator = ProgressIndicator(reporter, frames=["-"], interval=0.01)
        indicator.start("Building")
        await asyncio.sleep(0.03)
        indicator.stop()
        painted = output.getvalue()
        await asyncio.sleep(0.05)
        assert output.getvalue() == painted

    @pytest.mark.asyncio
    async def test_double_stop(self, reporter):
        """A second stop is a no-op."""
        indicator = ProgressIndicator(reporter, frames=["-"], interval=0.01)
        indicator.start("Pushing")
        indicator.stop()
        indicator.stop()
        assert indicator.running is False

    @pytest.mark.asyncio
    async def test_start_while_running(self, reporter):
        """An indicator cannot run twice at once."""
        indicator = ProgressIndicator(reporter, frames=["-"], interval=0.01)
        indicator.start("Pulling")
        try:
            with pytest.raises(RuntimeError):
                indicator.start("Pulling again")
        finally:
            indicator.stop()

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, reporter):
        """A stopped indicator can be started again."""
        indicator = ProgressIndicator(reporter, frames=["-"], interval=0.01)
        indicator.start("first")
        indicator.stop()
        indicator.start("second")
        assert indicator.running is True
        indicator.stop()
