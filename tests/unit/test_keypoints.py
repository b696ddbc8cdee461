import numpy as np

from posestream.keypoints import (
    CONNECTED_PART_NAMES, PART_NAMES, Keypoint, Position, get_adjacent_keypoints, pose_from_arrays
)

from fakes import make_pose


def _kp(part, score):
    return Keypoint(part=part, position=Position(0.0, 0.0), score=score)


def test_low_confidence_endpoint_excludes_edge():
    keypoints = [_kp("nose", 0.9), _kp("leftEye", 0.3)]
    edges = get_adjacent_keypoints(keypoints, 0.5)
    assert all("leftEye" not in (a.part, b.part) for a, b in edges)
    assert edges == []


def test_all_confident_keypoints_give_every_edge():
    pose = make_pose(score=0.9)
    edges = get_adjacent_keypoints(pose.keypoints, 0.5)
    assert [(a.part, b.part) for a, b in edges] == list(CONNECTED_PART_NAMES)


def test_edges_require_both_endpoints():
    pose = make_pose(score=0.9)
    keypoints = [
        _kp(kp.part, 0.1) if kp.part == "leftKnee" else kp
        for kp in pose.keypoints
    ]
    parts = [(a.part, b.part) for a, b in get_adjacent_keypoints(keypoints, 0.5)]
    assert ("leftHip", "leftKnee") not in parts
    assert ("leftKnee", "leftAnkle") not in parts
    assert len(parts) == len(CONNECTED_PART_NAMES) - 2


def test_threshold_is_inclusive():
    keypoints = [_kp("leftShoulder", 0.5), _kp("rightShoulder", 0.5)]
    assert len(get_adjacent_keypoints(keypoints, 0.5)) == 1


def test_pose_from_arrays():
    keypoints = np.arange(len(PART_NAMES) * 2, dtype=np.float32).reshape(-1, 2)
    scores = np.linspace(0.0, 1.0, len(PART_NAMES))
    pose = pose_from_arrays(keypoints, scores)

    assert [kp.part for kp in pose.keypoints] == list(PART_NAMES)
    assert pose.keypoints[1].position == Position(2.0, 3.0)
    assert abs(pose.score - float(np.mean(scores))) < 1e-6
    assert pose.get("nose").score == 0.0
    assert pose.get("tail") is None
