"""
Keypoint, pose and skeleton types in the PoseNet 17-part layout.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

PART_NAMES: Tuple[str, ...] = (
    "nose",
    "leftEye",
    "rightEye",
    "leftEar",
    "rightEar",
    "leftShoulder",
    "rightShoulder",
    "leftElbow",
    "rightElbow",
    "leftWrist",
    "rightWrist",
    "leftHip",
    "rightHip",
    "leftKnee",
    "rightKnee",
    "leftAnkle",
    "rightAnkle",
)

NUM_KEYPOINTS = len(PART_NAMES)

CONNECTED_PART_NAMES: Tuple[Tuple[str, str], ...] = (
    ("leftHip", "leftShoulder"),
    ("leftElbow", "leftShoulder"),
    ("leftElbow", "leftWrist"),
    ("leftHip", "leftKnee"),
    ("leftKnee", "leftAnkle"),
    ("rightHip", "rightShoulder"),
    ("rightElbow", "rightShoulder"),
    ("rightElbow", "rightWrist"),
    ("rightHip", "rightKnee"),
    ("rightKnee", "rightAnkle"),
    ("leftShoulder", "rightShoulder"),
    ("leftHip", "rightHip"),
)

@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Keypoint:
    """A single 2D keypoint in pixel coordinates of the input frame."""

    part: str
    position: Position
    score: float


@dataclass(frozen=True)
class Pose:
    """
    One detected body.

    ``score`` is the mean keypoint score; ``keypoints`` follow ``PART_NAMES`` order.
    """

    score: float
    keypoints: Tuple[Keypoint, ...] = field(default_factory=tuple)

    def get(self, part: str) -> Optional[Keypoint]:
        for keypoint in self.keypoints:
            if keypoint.part == part:
                return keypoint
        return None


SkeletonEdge = Tuple[Keypoint, Keypoint]


@dataclass(frozen=True)
class PoseResult:
    """A pose and its skeleton edges, as emitted on the ``pose`` event."""

    pose: Pose
    skeleton: List[SkeletonEdge]


def pose_from_arrays(keypoints: np.ndarray, scores: np.ndarray,
                     part_names: Sequence[str] = PART_NAMES) -> Pose:
    """
    Build a Pose from model output arrays.

    Args:
        keypoints: (K, 2) array of x, y pixel coordinates.
        scores: (K,) array of keypoint confidences.
        part_names: Names for the first K keypoints.

    Returns:
        Pose with one Keypoint per named part.
    """
    keypoints = np.asarray(keypoints, dtype=np.float32).reshape(-1, 2)
    scores = np.asarray(scores, dtype=np.float32).reshape(-1)
    count = min(len(part_names), len(keypoints), len(scores))

    kpts = tuple(
        Keypoint(
            part=part_names[i],
            position=Position(float(keypoints[i][0]), float(keypoints[i][1])),
            score=float(scores[i]),
        )
        for i in range(count)
    )
    score = float(np.mean(scores[:count])) if count else 0.0
    return Pose(score=score, keypoints=kpts)


def get_adjacent_keypoints(keypoints: Iterable[Keypoint], min_confidence: float) -> List[SkeletonEdge]:
    """
    Pair anatomically adjacent keypoints whose scores both reach ``min_confidence``.

    Keypoints are matched by part name, so partial or reordered lists are accepted.
    """
    by_part = {kp.part: kp for kp in keypoints}
    edges: List[SkeletonEdge] = []
    for part_a, part_b in CONNECTED_PART_NAMES:
        a = by_part.get(part_a)
        b = by_part.get(part_b)
        if a is None or b is None:
            continue
        if a.score < min_confidence or b.score < min_confidence:
            continue
        edges.append((a, b))
    return edges
