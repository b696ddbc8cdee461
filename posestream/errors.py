"""
Exceptions raised by the pose-stream adapter.
"""


class PoseStreamError(Exception):
    """Base class for all posestream errors."""


class ModelLoadError(PoseStreamError):
    """The pose model could not be loaded."""


class EstimationError(PoseStreamError):
    """A single frame failed during pose estimation."""


class NoInputError(PoseStreamError, ValueError):
    """No frame, wrapped frame or bound source was available to estimate on."""


class StreamEnded(PoseStreamError):
    """The frame source has no more frames."""
