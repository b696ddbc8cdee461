"""
Serialization utilities for pose results.

Produces the PoseNet JSON shape:
``{"pose": {"score", "keypoints": [{"part", "position": {"x", "y"}, "score"}]},
"skeleton": [[keypoint, keypoint], ...]}``
"""
import json
import logging
from typing import Dict, List, Optional, Sequence

from posestream.keypoints import Keypoint, Pose, PoseResult

logger = logging.getLogger(__name__)


def keypoint_to_dict(keypoint: Keypoint) -> Dict:
    return {
        "part": keypoint.part,
        "position": {"x": keypoint.position.x, "y": keypoint.position.y},
        "score": keypoint.score,
    }


def pose_to_dict(pose: Pose) -> Dict:
    return {
        "score": pose.score,
        "keypoints": [keypoint_to_dict(kp) for kp in pose.keypoints],
    }


def result_to_dict(result: PoseResult) -> Dict:
    return {
        "pose": pose_to_dict(result.pose),
        "skeleton": [[keypoint_to_dict(a), keypoint_to_dict(b)] for a, b in result.skeleton],
    }


def encode_pose_message(results: Sequence[PoseResult],
                        frame_id: Optional[int] = None,
                        timestamp: Optional[str] = None) -> Dict:
    """
    Encode one emitted batch as a plain dictionary.

    Args:
        results: Batch from the ``pose`` event
        frame_id: Optional frame sequence number
        timestamp: Optional ISO timestamp

    Returns:
        Encoded message
    """
    try:
        poses: List[Dict] = [result_to_dict(result) for result in results]
        return {
            "frame_id": frame_id,
            "timestamp": timestamp,
            "pose_count": len(poses),
            "poses": poses,
        }

    except Exception as e:
        logger.error(f"Error encoding pose message: {e}")
        raise


def serialize_pose_message(message: Dict) -> bytes:
    """Serialize message to bytes."""
    return json.dumps(message).encode('utf-8')


def deserialize_pose_message(data: bytes) -> Dict:
    """Deserialize message from bytes."""
    return json.loads(data.decode('utf-8'))
