from .serializers import (
    keypoint_to_dict, pose_to_dict, result_to_dict,
    encode_pose_message, serialize_pose_message, deserialize_pose_message
)
from .setup_logging import setup_logging

__all__ = [
    'setup_logging',
    # Serialization utilities
    'keypoint_to_dict', 'pose_to_dict', 'result_to_dict',
    'encode_pose_message', 'serialize_pose_message', 'deserialize_pose_message'
]
