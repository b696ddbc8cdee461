import numpy as np
import pytest

from posestream.keypoints import NUM_KEYPOINTS
from posestream.models import MULTIPLIER_MODES, RTMPoseModel, filter_poses

from fakes import make_pose


class FakeDetector:
    def __init__(self, boxes):
        self.boxes = boxes
        self.images = []

    def __call__(self, image):
        self.images.append(image)
        return self.boxes


class FakeKeypointModel:
    def __init__(self, keypoints, scores):
        self.keypoints = keypoints
        self.scores = scores
        self.calls = []

    def __call__(self, image, bboxes=[]):
        self.calls.append((image, bboxes))
        return self.keypoints, self.scores


class FakeBody:
    def __init__(self, boxes, keypoints, scores):
        self.det_model = FakeDetector(boxes)
        self.pose_model = FakeKeypointModel(keypoints, scores)


def _outputs(positions, scores):
    keypoints = np.array([[pos] * NUM_KEYPOINTS for pos in positions], dtype=np.float32)
    scores = np.array([[s] * NUM_KEYPOINTS for s in scores], dtype=np.float32)
    return keypoints, scores


@pytest.fixture
def image():
    return np.zeros((100, 200, 3), dtype=np.uint8)


def test_multiplier_modes():
    assert MULTIPLIER_MODES[0.5] == 'lightweight'
    assert MULTIPLIER_MODES[0.75] == 'balanced'
    assert MULTIPLIER_MODES[1.0] == 'performance'


def test_single_pose_runs_on_whole_scaled_frame(image):
    keypoints, scores = _outputs([(10.0, 20.0)], [0.7])
    body = FakeBody(None, keypoints, scores)
    model = RTMPoseModel(0.75, body=body)

    pose = model.estimate_single_pose(image, 0.5, False, 16)

    scaled, bboxes = body.pose_model.calls[0]
    assert scaled.shape == (50, 100, 3)
    assert bboxes == []
    assert body.det_model.images == []
    assert pose.keypoints[0].position.x == pytest.approx(20.0)
    assert pose.keypoints[0].position.y == pytest.approx(40.0)
    assert pose.score == pytest.approx(0.7)
    assert pose.keypoints[0].part == "nose"


def test_single_pose_flip_horizontal(image):
    keypoints, scores = _outputs([(10.0, 20.0)], [0.7])
    model = RTMPoseModel(body=FakeBody(None, keypoints, scores))

    pose = model.estimate_single_pose(image, 0.5, True, 16)

    assert pose.keypoints[0].position.x == pytest.approx(199.0 - 20.0)
    assert pose.keypoints[0].position.y == pytest.approx(40.0)


def test_full_scale_frame_is_not_resized(image):
    keypoints, scores = _outputs([(10.0, 20.0)], [0.7])
    body = FakeBody(None, keypoints, scores)
    model = RTMPoseModel(body=body)

    model.estimate_single_pose(image, 1.0, False, 8)

    assert body.pose_model.calls[0][0] is image


def test_multiple_poses_no_detections(image):
    keypoints, scores = _outputs([(10.0, 20.0)], [0.7])
    body = FakeBody(np.zeros((0, 4), dtype=np.float32), keypoints, scores)
    model = RTMPoseModel(body=body)

    assert model.estimate_multiple_poses(image, 0.5) == []
    assert body.pose_model.calls == []


def test_multiple_poses_uses_detections(image):
    boxes = np.array([[0, 0, 40, 40], [60, 0, 100, 40]], dtype=np.float32)
    keypoints, scores = _outputs([(10.0, 10.0), (80.0, 10.0)], [0.6, 0.9])
    body = FakeBody(boxes, keypoints, scores)
    model = RTMPoseModel(body=body)

    poses = model.estimate_multiple_poses(image, 0.5, score_threshold=0.5, nms_radius=20)

    _, bboxes = body.pose_model.calls[0]
    assert bboxes == [[0.0, 0.0, 40.0, 40.0], [60.0, 0.0, 100.0, 40.0]]
    assert [round(p.score, 2) for p in poses] == [0.9, 0.6]
    assert poses[0].keypoints[0].position.x == pytest.approx(160.0)


def test_multiple_poses_respects_max_detections(image):
    boxes = np.array([[0, 0, 40, 40], [60, 0, 100, 40]], dtype=np.float32)
    keypoints, scores = _outputs([(10.0, 10.0), (80.0, 10.0)], [0.6, 0.9])
    model = RTMPoseModel(body=FakeBody(boxes, keypoints, scores))

    poses = model.estimate_multiple_poses(image, 0.5, max_pose_detections=1)

    assert len(poses) == 1
    assert poses[0].score == pytest.approx(0.9)


@pytest.mark.parametrize("kwargs", [
    {'image_scale_factor': 0.0},
    {'output_stride': 12},
])
def test_invalid_parameters(image, kwargs):
    keypoints, scores = _outputs([(10.0, 20.0)], [0.7])
    model = RTMPoseModel(body=FakeBody(None, keypoints, scores))
    with pytest.raises(ValueError):
        model.estimate_single_pose(image, **kwargs)


def test_rejects_non_image():
    model = RTMPoseModel(body=FakeBody(None, None, None))
    with pytest.raises(ValueError):
        model.estimate_single_pose("frame.jpg")


def test_filter_poses_threshold_and_order():
    poses = [make_pose(0.4, x=0), make_pose(0.6, x=100), make_pose(0.9, x=300)]
    kept = filter_poses(poses, max_pose_detections=5, score_threshold=0.5, nms_radius=20)
    assert [round(p.score, 2) for p in kept] == [0.9, 0.6]


def test_filter_poses_suppresses_overlapping():
    poses = [make_pose(0.9, x=0), make_pose(0.8, x=5), make_pose(0.7, x=100)]
    kept = filter_poses(poses, max_pose_detections=5, score_threshold=0.5, nms_radius=20)
    assert [round(p.score, 2) for p in kept] == [0.9, 0.7]


def test_filter_poses_max_detections():
    poses = [make_pose(0.9, x=0), make_pose(0.8, x=100), make_pose(0.7, x=300)]
    assert len(filter_poses(poses, max_pose_detections=2, score_threshold=0.0, nms_radius=20)) == 2


def test_odd_frame_size_rescales_each_axis():
    image = np.zeros((101, 200, 3), dtype=np.uint8)
    keypoints, scores = _outputs([(30.0, 30.0)], [0.7])
    body = FakeBody(None, keypoints, scores)
    model = RTMPoseModel(body=body)

    pose = model.estimate_single_pose(image, 0.3, False, 16)

    scaled, _ = body.pose_model.calls[0]
    assert scaled.shape == (30, 60, 3)
    assert pose.keypoints[0].position.x == pytest.approx(100.0)
    assert pose.keypoints[0].position.y == pytest.approx(101.0)
