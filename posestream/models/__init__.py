import asyncio
import functools
import logging

from .base_model import PoseModel, filter_poses
from .rtmpose_model import MULTIPLIER_MODES, RTMPoseModel

logger = logging.getLogger(__name__)


async def load(multiplier: float = 0.75, *, device: str = 'cpu', backend: str = 'onnxruntime') -> PoseModel:
    """Load the pose model for ``multiplier`` without blocking the event loop."""
    loop = asyncio.get_running_loop()
    logger.info(f"Loading pose model (multiplier={multiplier}, device={device}, backend={backend})")
    return await loop.run_in_executor(
        None,
        functools.partial(RTMPoseModel, multiplier, device=device, backend=backend),
    )


__all__ = [
    'PoseModel',
    'RTMPoseModel',
    'MULTIPLIER_MODES',
    'filter_poses',
    'load',
]
