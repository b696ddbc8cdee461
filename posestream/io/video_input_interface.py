import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from posestream.errors import StreamEnded
from posestream.io.frame_source import FrameSource

logger = logging.getLogger(__name__)


class VideoSource(FrameSource):
    """OpenCV ``VideoCapture`` frame source over a file path, stream URL or camera index."""

    def __init__(self, source: Union[str, int], loop: bool = False):
        super().__init__()
        self.source = source
        self.loop = loop

        self.capture: Optional[cv2.VideoCapture] = None
        self.fps: float = 0.0
        self.width: int = 0
        self.height: int = 0
        self.frame_count: int = 0
        self._last_frame: Optional[np.ndarray] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="video_source")

    async def initialize(self) -> bool:
        """Open the capture device. Returns False when it cannot be opened."""
        if self.capture is not None:
            return True

        loop = asyncio.get_running_loop()
        try:
            capture = await loop.run_in_executor(self._executor, cv2.VideoCapture, self.source)
        except Exception as e:
            logger.error(f"Failed to open video source {self.source}: {e}")
            return False

        if not capture.isOpened():
            logger.error(f"Video source {self.source} could not be opened")
            capture.release()
            return False

        self.capture = capture
        self.fps = float(capture.get(cv2.CAP_PROP_FPS) or 0.0)
        self.width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        self.height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        logger.info(f"Opened video source {self.source}: {self.width}x{self.height} @ {self.fps}fps")
        return True

    async def play(self) -> None:
        if not await self.initialize():
            raise RuntimeError(f"Cannot open video source {self.source}")
        await super().play()

    async def read_frame(self) -> np.ndarray:
        """Read the next frame; a paused source keeps returning its current frame."""
        if not self.is_playing:
            if self._last_frame is not None:
                return self._last_frame
            await self.wait_until_playing()

        loop = asyncio.get_running_loop()
        ret, frame = await loop.run_in_executor(self._executor, self._read)
        if not ret or frame is None:
            logger.info(f"Video source {self.source} ended after {self.frame_count} frames")
            self.pause()
            raise StreamEnded(f"No more frames in {self.source}")

        self.frame_count += 1
        self._last_frame = frame
        return frame

    def _read(self) -> Tuple[bool, Optional[np.ndarray]]:
        ret, frame = self.capture.read()
        if not ret and self.loop:
            self.capture.set(cv2.CAP_PROP_POS_FRAMES, 0)
            ret, frame = self.capture.read()
        return ret, frame

    async def close(self) -> None:
        await super().close()
        if self.capture is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(self._executor, self.capture.release)
            self.capture = None
        self._executor.shutdown(wait=False)
        logger.info(f"Video source {self.source} closed")
