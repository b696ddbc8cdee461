# Configuration
from .config import DEFAULTS, MULTIPLE, SINGLE, PoseNetOptions

# Errors
from .errors import EstimationError, ModelLoadError, NoInputError, PoseStreamError, StreamEnded

# Keypoints and skeletons
from .keypoints import (
    CONNECTED_PART_NAMES, PART_NAMES,
    Keypoint, Pose, PoseResult, Position, get_adjacent_keypoints
)

# Sources
from .io import FrameSource, MediaElement, VideoSource, load_image

# Models
from .models import PoseModel, RTMPoseModel, load

# Adapter
from .events import EventChannel
from .pose_net import PoseNet
from .factory import pose_net

# Utilities
from .utils import encode_pose_message, setup_logging
from .visualizer import draw_results

__version__ = "1.0.0"

__all__ = [
    # Core classes
    'PoseNet',
    'pose_net',
    'EventChannel',
    # Configuration
    'PoseNetOptions', 'DEFAULTS', 'SINGLE', 'MULTIPLE',
    # Errors
    'PoseStreamError', 'ModelLoadError', 'EstimationError', 'NoInputError', 'StreamEnded',
    # Keypoints
    'PART_NAMES', 'CONNECTED_PART_NAMES',
    'Position', 'Keypoint', 'Pose', 'PoseResult', 'get_adjacent_keypoints',
    # Sources
    'FrameSource', 'VideoSource', 'MediaElement', 'load_image',
    # Models
    'PoseModel', 'RTMPoseModel', 'load',
    # Utilities
    'encode_pose_message', 'setup_logging', 'draw_results',
]
