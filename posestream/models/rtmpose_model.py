"""
RTMPose model implementation for pose estimation.

Wraps an rtmlib ``Body`` solution (YOLOX person detector + RTMPose keypoint
model on onnxruntime) behind the ``PoseModel`` interface.
"""
import logging
from typing import List, Optional, Tuple

import cv2
import numpy as np
from rtmlib import Body

from posestream.config import VALID_OUTPUT_STRIDES
from posestream.keypoints import Pose, pose_from_arrays
from posestream.models.base_model import PoseModel, filter_poses

logger = logging.getLogger(__name__)

# rtmlib solution mode for each PoseNet multiplier
MULTIPLIER_MODES = {
    0.5: 'lightweight',
    0.75: 'balanced',
    1.0: 'performance',
    1.01: 'performance',
}


class RTMPoseModel(PoseModel):
    """RTMPose model for human pose estimation."""

    def __init__(self,
                 multiplier: float = 0.75,
                 device: str = 'cpu',
                 backend: str = 'onnxruntime',
                 body: Optional[Body] = None):
        super().__init__(multiplier)
        self.device = device
        self.backend = backend
        self.mode = MULTIPLIER_MODES.get(multiplier, 'balanced')

        if body is None:
            try:
                body = Body(mode=self.mode, to_openpose=False, backend=backend, device=device)
            except Exception as e:
                logger.error(f"Failed to load RTMPose model: {e}")
                raise
            logger.info(f"RTMPose model loaded in '{self.mode}' mode with {backend} backend on {device}")
        self.body = body

    def estimate_single_pose(self,
                             image: np.ndarray,
                             image_scale_factor: float = 0.5,
                             flip_horizontal: bool = False,
                             output_stride: int = 16) -> Pose:
        scaled, scales = self._preprocess(image, image_scale_factor, output_stride)
        # an empty bbox list makes RTMPose run on the whole frame
        keypoints, scores = self.body.pose_model(scaled, bboxes=[])
        poses = self._postprocess(keypoints, scores, scales, image.shape[1], flip_horizontal)
        if not poses:
            return Pose(score=0.0)
        return poses[0]

    def estimate_multiple_poses(self,
                                image: np.ndarray,
                                image_scale_factor: float = 0.5,
                                flip_horizontal: bool = False,
                                output_stride: int = 16,
                                max_pose_detections: int = 5,
                                score_threshold: float = 0.5,
                                nms_radius: float = 20) -> List[Pose]:
        scaled, scales = self._preprocess(image, image_scale_factor, output_stride)
        bboxes = self.body.det_model(scaled)
        if bboxes is None or len(bboxes) == 0:
            return []

        bboxes = [list(bbox[:4]) for bbox in np.asarray(bboxes).tolist()]
        keypoints, scores = self.body.pose_model(scaled, bboxes=bboxes)
        poses = self._postprocess(keypoints, scores, scales, image.shape[1], flip_horizontal)
        return filter_poses(poses, max_pose_detections, score_threshold, nms_radius)

    def _preprocess(self, image: np.ndarray, image_scale_factor: float,
                    output_stride: int) -> Tuple[np.ndarray, Tuple[float, float]]:
        if not isinstance(image, np.ndarray) or image.ndim not in (2, 3):
            raise ValueError(f"Expected an image array, got {type(image).__name__}")
        if output_stride not in VALID_OUTPUT_STRIDES:
            raise ValueError(f"Unsupported output stride: {output_stride}")
        if not 0.0 < image_scale_factor <= 1.0:
            raise ValueError(f"image_scale_factor must be in (0, 1], got {image_scale_factor}")

        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)

        if image_scale_factor == 1.0:
            return image, (1.0, 1.0)

        height, width = image.shape[:2]
        new_width = max(1, int(round(width * image_scale_factor)))
        new_height = max(1, int(round(height * image_scale_factor)))
        resized = cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_LINEAR)
        logger.debug(f"Resized frame from {width}x{height} to {new_width}x{new_height}")
        return resized, (new_width / width, new_height / height)

    @staticmethod
    def _postprocess(keypoints: np.ndarray, scores: np.ndarray, scales: Tuple[float, float],
                     width: int, flip_horizontal: bool) -> List[Pose]:
        if keypoints is None or len(keypoints) == 0:
            return []

        keypoints = np.asarray(keypoints, dtype=np.float32).reshape(len(keypoints), -1, 2)
        # x and y were rounded separately when resizing
        keypoints = keypoints / np.asarray(scales, dtype=np.float32)
        scores = np.asarray(scores, dtype=np.float32).reshape(len(keypoints), -1)
        if flip_horizontal:
            keypoints[..., 0] = (width - 1) - keypoints[..., 0]

        return [pose_from_arrays(kpts, score) for kpts, score in zip(keypoints, scores)]
