"""Shared Prometheus metric definitions for the pose-stream adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from prometheus_client import Counter, Histogram

LABEL_NAMES = ("adapter", "detection_type")
DEFAULT_DETECTION_TYPE = "multiple"


posestream_frames_processed_total = Counter(
    "posestream_frames_processed_total",
    "Total number of frames estimated and emitted by the adapter.",
    LABEL_NAMES,
)

posestream_frames_errors_total = Counter(
    "posestream_frames_errors_total",
    "Total number of frames that failed during pose estimation.",
    LABEL_NAMES,
)

posestream_frame_processing_seconds = Histogram(
    "posestream_frame_processing_seconds",
    "Latency in seconds for estimating a single frame.",
    LABEL_NAMES,
    buckets=(
        0.005,
        0.01,
        0.02,
        0.05,
        0.1,
        0.25,
        0.5,
        1,
        2,
        5,
    ),
)

posestream_poses_detected = Histogram(
    "posestream_poses_detected",
    "Number of poses emitted per frame.",
    LABEL_NAMES,
    buckets=(0, 1, 2, 3, 5, 10, 20),
)

posestream_batches_dropped_total = Counter(
    "posestream_batches_dropped_total",
    "Total number of result batches dropped by bounded stream consumers.",
    LABEL_NAMES,
)


@dataclass
class MetricsLabelContext:
    """Helper for reusing Prometheus labels across detection types."""

    adapter: str
    initial_detection_type: Optional[str] = None

    def __post_init__(self) -> None:
        self._label_cache: Dict[str, Dict[str, str]] = {}
        self.labels_for(self.initial_detection_type)

    def labels_for(self, detection_type: Optional[str]) -> Dict[str, str]:
        """Return labels for the provided detection type and cache the result."""

        normalized = detection_type or DEFAULT_DETECTION_TYPE
        if normalized not in self._label_cache:
            self._label_cache[normalized] = {
                "adapter": self.adapter or "unknown",
                "detection_type": normalized,
            }
        return self._label_cache[normalized]

    def with_metric(self, metric, detection_type: Optional[str] = None):
        """Return a labelled child for the provided metric."""

        return metric.labels(**self.labels_for(detection_type))
