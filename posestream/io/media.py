"""
Input normalization: raw frames, frame sources and wrapped media objects.

A raw handle is a frame (``numpy.ndarray``) or a ``FrameSource``. A wrapped
handle is any object whose ``elt`` attribute is a raw handle, such as
``MediaElement``.
"""
import logging
from typing import Any, Optional, Union

import cv2
import numpy as np

from posestream.errors import NoInputError
from posestream.io.frame_source import FrameSource

logger = logging.getLogger(__name__)

MediaHandle = Union[np.ndarray, FrameSource]


class MediaElement:
    """Thin wrapper exposing a frame or frame source through ``elt``."""

    def __init__(self, elt: MediaHandle):
        self.elt = elt

    def __repr__(self) -> str:
        return f"MediaElement({type(self.elt).__name__})"


def is_image(value: Any) -> bool:
    return isinstance(value, np.ndarray) and value.ndim in (2, 3) and value.size > 0


def is_media_handle(value: Any) -> bool:
    return is_image(value) or isinstance(value, FrameSource)


def unwrap_media(value: Any) -> Optional[MediaHandle]:
    """Return ``value`` if it is a raw handle, its ``elt`` if that is one, else None."""
    if is_media_handle(value):
        return value
    elt = getattr(value, 'elt', None)
    if is_media_handle(elt):
        return elt
    return None


def unwrap_source(value: Any) -> Optional[FrameSource]:
    """Like ``unwrap_media`` but only accepts frame sources."""
    if isinstance(value, FrameSource):
        return value
    elt = getattr(value, 'elt', None)
    if isinstance(elt, FrameSource):
        return elt
    return None


def resolve_input(maybe_input: Any = None, video: Optional[FrameSource] = None) -> MediaHandle:
    """
    Pick the input to estimate on.

    Precedence: raw handle > wrapped handle > bound video source.

    Raises:
        NoInputError: nothing usable was given and no source is bound.
    """
    handle = unwrap_media(maybe_input)
    if handle is not None:
        return handle

    if maybe_input is not None:
        logger.warning(f"Ignoring unsupported input of type {type(maybe_input).__name__}")

    if video is not None:
        return video

    raise NoInputError("No image or video input given and no video source is bound")


async def read_media(handle: MediaHandle) -> np.ndarray:
    """Return the current frame of a resolved handle."""
    if isinstance(handle, FrameSource):
        return await handle.read_frame()
    return handle


def load_image(path: str) -> np.ndarray:
    """Load a BGR image from disk."""
    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        logger.error(f"Failed to read image: {path}")
        raise FileNotFoundError(f"Cannot read image: {path}")
    return image
