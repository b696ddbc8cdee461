"""
``pose_net`` entry point: builds a PoseNet from loosely shaped arguments.

First argument: a frame source, an object whose ``elt`` is a frame source,
an options mapping, or a callback. Second argument: an options mapping, a
callback, or a detection type string (``"single"`` / ``"multiple"``).
"""
import asyncio
from collections.abc import Mapping
from typing import Any, Callable, Optional, Union

from posestream.config import PoseNetOptions
from posestream.io import unwrap_source
from posestream.pose_net import PoseNet


def _is_options(value: Any) -> bool:
    return isinstance(value, (Mapping, PoseNetOptions))


def pose_net(video_or_options_or_callback: Any = None,
             options_or_callback: Any = None,
             callback: Optional[Callable[[], Any]] = None,
             **kwargs: Any) -> Union[PoseNet, "asyncio.Task[PoseNet]"]:
    """
    Create a PoseNet adapter.

    Returns the instance when a callback was supplied (the model keeps loading
    in the background), otherwise the ``ready`` task resolving to the instance.
    Extra keyword arguments are passed to ``PoseNet``.
    """
    video = None
    options = None
    detection_type = None

    first = video_or_options_or_callback
    source = unwrap_source(first) if first is not None else None
    if source is not None:
        video = source
    elif _is_options(first):
        options = first
    elif callable(first):
        callback = first
    elif first is not None:
        raise TypeError(f"Unsupported first argument: {type(first).__name__}")

    second = options_or_callback
    if _is_options(second):
        options = second
    elif isinstance(second, str):
        detection_type = second
    elif callable(second):
        callback = second
    elif second is not None:
        raise TypeError(f"Unsupported second argument: {type(second).__name__}")

    instance = PoseNet(video, options, detection_type, callback, **kwargs)
    return instance if callback is not None else instance.ready
