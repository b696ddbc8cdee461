"""
Base class for frame sources that signal when playback starts.
"""
import asyncio
from abc import ABC, abstractmethod

import numpy as np


class FrameSource(ABC):
    """A playable source of BGR frames.

    The adapter waits on ``wait_until_playing`` before starting its loop and
    pulls the current frame with ``read_frame`` on every tick.
    """

    def __init__(self):
        self._playing = asyncio.Event()

    @property
    def is_playing(self) -> bool:
        return self._playing.is_set()

    async def play(self) -> None:
        """Start playback and release anyone waiting in ``wait_until_playing``."""
        self._playing.set()

    def pause(self) -> None:
        self._playing.clear()

    async def wait_until_playing(self) -> None:
        await self._playing.wait()

    @abstractmethod
    async def read_frame(self) -> np.ndarray:
        """Return the current frame, shape (H, W, 3), dtype uint8."""
        pass

    async def close(self) -> None:
        self.pause()
