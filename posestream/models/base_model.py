"""
Base pose model interface for standardized model implementations.
"""
import math
from abc import ABC, abstractmethod
from typing import List, Sequence

import numpy as np

from posestream.keypoints import Pose


class PoseModel(ABC):
    """Abstract base class for pose models driven by the adapter."""

    def __init__(self, multiplier: float = 0.75):
        self.multiplier = multiplier
        self.model_name = self.__class__.__name__

    @abstractmethod
    def estimate_single_pose(self,
                             image: np.ndarray,
                             image_scale_factor: float = 0.5,
                             flip_horizontal: bool = False,
                             output_stride: int = 16) -> Pose:
        """
        Estimate exactly one pose in the frame.

        Args:
            image: BGR frame, shape (H, W, 3), dtype uint8.
            image_scale_factor: Resize factor applied before inference (0, 1].
            flip_horizontal: Mirror output keypoints around the vertical axis.
            output_stride: Model output stride (8, 16 or 32).

        Returns:
            Pose with keypoints in input frame coordinates.
        """
        pass

    @abstractmethod
    def estimate_multiple_poses(self,
                                image: np.ndarray,
                                image_scale_factor: float = 0.5,
                                flip_horizontal: bool = False,
                                output_stride: int = 16,
                                max_pose_detections: int = 5,
                                score_threshold: float = 0.5,
                                nms_radius: float = 20) -> List[Pose]:
        """
        Estimate every pose in the frame.

        Returns:
            Poses ordered by descending score, possibly empty.
        """
        pass

    def close(self) -> None:
        """Release model resources."""
        pass


def filter_poses(poses: Sequence[Pose],
                 max_pose_detections: int = 5,
                 score_threshold: float = 0.5,
                 nms_radius: float = 20) -> List[Pose]:
    """
    Keep the best non-overlapping poses.

    A pose is suppressed when its highest-scoring keypoint lies within
    ``nms_radius`` pixels of the same part of an already kept pose.
    """
    kept: List[Pose] = []
    for pose in sorted(poses, key=lambda p: p.score, reverse=True):
        if len(kept) >= max_pose_detections:
            break
        if pose.score < score_threshold or not pose.keypoints:
            continue
        if any(_within_radius(pose, other, nms_radius) for other in kept):
            continue
        kept.append(pose)
    return kept


def _within_radius(pose: Pose, other: Pose, radius: float) -> bool:
    root = max(pose.keypoints, key=lambda kp: kp.score)
    match = other.get(root.part)
    if match is None:
        return False
    dx = root.position.x - match.position.x
    dy = root.position.y - match.position.y
    return math.hypot(dx, dy) <= radius
