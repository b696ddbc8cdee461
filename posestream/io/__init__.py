from .frame_source import FrameSource
from .media import (
    MediaElement, MediaHandle,
    is_image, is_media_handle, unwrap_media, unwrap_source,
    resolve_input, read_media, load_image
)
from .video_input_interface import VideoSource

__all__ = [
    # Sources
    'FrameSource',
    'VideoSource',
    # Media handling
    'MediaElement',
    'MediaHandle',
    'is_image',
    'is_media_handle',
    'unwrap_media',
    'unwrap_source',
    'resolve_input',
    'read_media',
    'load_image',
]
