"""Prometheus metric helpers for the pose-stream adapter."""

from .prometheus import *  # noqa: F401,F403

__all__ = [
    'MetricsLabelContext',
    'posestream_frames_processed_total',
    'posestream_frames_errors_total',
    'posestream_frame_processing_seconds',
    'posestream_poses_detected',
    'posestream_batches_dropped_total',
]
