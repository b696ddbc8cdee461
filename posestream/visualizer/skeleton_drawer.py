from typing import Dict, Sequence, Tuple

import cv2
import numpy as np

from posestream.keypoints import PoseResult

PART_COLORS: Dict[str, Tuple[int, int, int]] = {
    'left': (255, 0, 0),  # Blue
    'right': (0, 0, 255),  # Red
    'center': (0, 255, 0),  # Green
}


def _side(part: str) -> str:
    if part.startswith('left'):
        return 'left'
    if part.startswith('right'):
        return 'right'
    return 'center'


def draw_results(
        frame: np.ndarray,
        results: Sequence[PoseResult],
        min_confidence: float = 0.5,
        joint_color: Tuple[int, int, int] = (0, 255, 255),
        joint_radius: int = 3,
        line_thickness: int = 2
) -> np.ndarray:
    """
    Draw keypoints and skeleton edges for every pose in an emitted batch.

    Args:
        frame (np.ndarray): The BGR frame to draw on, modified in place.
        results (Sequence[PoseResult]): Batch from the ``pose`` event.
        min_confidence (float): Keypoints scoring below this are not drawn.
        joint_color (tuple): Color for the joints.
        joint_radius (int): Radius of the joints.
        line_thickness (int): Thickness of skeleton lines.

    Returns:
        np.ndarray: The frame with drawn skeletons.
    """
    if not isinstance(frame, np.ndarray):
        raise ValueError("Frame must be a numpy array")

    for result in results:
        for a, b in result.skeleton:
            # edges between two left (or two right) parts take that side's color
            color = PART_COLORS[_side(a.part)] if _side(a.part) == _side(b.part) else PART_COLORS['center']
            pt1 = (int(a.position.x), int(a.position.y))
            pt2 = (int(b.position.x), int(b.position.y))
            cv2.line(frame, pt1, pt2, color, thickness=line_thickness, lineType=cv2.LINE_AA)

        for keypoint in result.pose.keypoints:
            if keypoint.score < min_confidence:
                continue
            center = (int(keypoint.position.x), int(keypoint.position.y))
            cv2.circle(frame, center, joint_radius, joint_color, thickness=-1, lineType=cv2.LINE_AA)

    return frame
