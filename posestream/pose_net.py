"""
PoseNet adapter: drives a pose model over a frame source and publishes results.

Results are published on the ``pose`` event as a list of ``PoseResult`` (one
per detected body). The ``close`` event fires once when the polling loop ends,
with the exception that ended it or ``None``.
"""
import asyncio
import functools
import inspect
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, AsyncIterator, Awaitable, Callable, Iterable, List, Mapping, Optional, Union

from posestream.config import MULTIPLE, SINGLE, PoseNetOptions
from posestream.errors import EstimationError, ModelLoadError, StreamEnded
from posestream.events import EventChannel
from posestream.io import FrameSource, read_media, resolve_input, unwrap_source
from posestream.keypoints import Keypoint, PoseResult, SkeletonEdge, get_adjacent_keypoints
from posestream.metrics.prometheus import (
    MetricsLabelContext,
    posestream_batches_dropped_total,
    posestream_frame_processing_seconds,
    posestream_frames_errors_total,
    posestream_frames_processed_total,
    posestream_poses_detected,
)
from posestream.models import PoseModel, load

logger = logging.getLogger(__name__)

ModelLoader = Callable[..., Awaitable[PoseModel]]
OptionsLike = Union[PoseNetOptions, Mapping[str, Any], None]


class _StreamClosed:
    def __init__(self, error: Optional[BaseException]):
        self.error = error


class PoseNet(EventChannel):
    """Pose-stream adapter around a single pose model.

    Must be created inside a running event loop. ``ready`` resolves to the
    instance once the model is loaded and, when a video source is bound, once
    the source has started playing and the estimation loop is running.
    """

    def __init__(self,
                 video: Any = None,
                 options: OptionsLike = None,
                 detection_type: Optional[str] = None,
                 callback: Optional[Callable[[], Any]] = None,
                 *,
                 loader: ModelLoader = load,
                 device: str = 'cpu',
                 backend: str = 'onnxruntime',
                 frame_interval: float = 0.0,
                 close_source: bool = False,
                 name: str = 'posenet'):
        super().__init__()
        self.video: Optional[FrameSource] = None
        if video is not None:
            self.video = unwrap_source(video)
            if self.video is None:
                raise TypeError(f"Unsupported video source: {type(video).__name__}")

        options = PoseNetOptions.from_mapping(options)
        if detection_type is not None:
            options = options.merged(detection_type=detection_type)
        self.options = options
        self.detection_type = options.detection_type
        self.callback = callback
        self.frame_interval = frame_interval
        self.close_source = close_source

        self.net: Optional[PoseModel] = None
        self._loader = loader
        self._device = device
        self._backend = backend
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._task: Optional[asyncio.Task] = None
        self._error: Optional[BaseException] = None
        self._ended = False
        self._closed = False
        self._metrics_context = MetricsLabelContext(adapter=name, initial_detection_type=self.detection_type)

        self.ready: asyncio.Task = asyncio.get_running_loop().create_task(self._initialize())
        self.ready.add_done_callback(self._ready_done)

    @classmethod
    def from_source(cls, video: Any, options: OptionsLike = None, detection_type: Optional[str] = None,
                    callback: Optional[Callable[[], Any]] = None, **kwargs: Any) -> "PoseNet":
        return cls(video, options, detection_type, callback, **kwargs)

    @classmethod
    def from_options(cls, options: OptionsLike = None, callback: Optional[Callable[[], Any]] = None,
                     **kwargs: Any) -> "PoseNet":
        return cls(None, options, None, callback, **kwargs)

    @classmethod
    def from_callback(cls, callback: Optional[Callable[[], Any]] = None, **kwargs: Any) -> "PoseNet":
        return cls(None, None, None, callback, **kwargs)

    @property
    def error(self) -> Optional[BaseException]:
        """The exception that terminated the last loop, if any."""
        return self._error

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _initialize(self) -> "PoseNet":
        await self.load()
        if self.callback is not None:
            result = self.callback()
            if inspect.isawaitable(result):
                await result
        return self

    def _ready_done(self, task: asyncio.Future) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"PoseNet failed to initialize: {exc}")

    async def load(self) -> "PoseNet":
        """Load the model, then wait for the bound source to play and start the loop."""
        try:
            self.net = await self._loader(self.options.multiplier, device=self._device, backend=self._backend)
        except Exception as e:
            logger.error(f"Failed to load pose model: {e}")
            raise ModelLoadError(f"Failed to load pose model: {e}") from e
        logger.info(f"PoseNet model loaded (multiplier={self.options.multiplier})")

        if self.video is not None:
            logger.info("Waiting for video source to start playing")
            await self.video.wait_until_playing()
            if self.detection_type == SINGLE:
                await self.estimate_one()
            else:
                await self.estimate_all()
        return self

    def skeleton(self, keypoints: Iterable[Keypoint], confidence: Optional[float] = None) -> List[SkeletonEdge]:
        if confidence is None:
            confidence = self.options.min_confidence
        return get_adjacent_keypoints(keypoints, confidence)

    async def estimate_one(self, maybe_input: Any = None) -> List[PoseResult]:
        """Estimate a single pose, emit it, then keep estimating on every frame tick."""
        results = await self._estimate_frame(SINGLE, maybe_input)
        self._schedule(SINGLE, maybe_input)
        return results

    async def estimate_all(self, maybe_input: Any = None) -> List[PoseResult]:
        """Estimate all poses, emit them, then keep estimating on every frame tick."""
        results = await self._estimate_frame(MULTIPLE, maybe_input)
        self._schedule(MULTIPLE, maybe_input)
        return results

    async def _estimate_frame(self, mode: str, maybe_input: Any) -> List[PoseResult]:
        if self.net is None:
            raise RuntimeError("Pose model is not loaded yet; await `ready` first")

        handle = resolve_input(maybe_input, self.video)
        frame = await read_media(handle)

        options = self.options
        if mode == SINGLE:
            predict = functools.partial(
                self.net.estimate_single_pose,
                frame,
                options.image_scale_factor,
                options.flip_horizontal,
                options.output_stride,
            )
        else:
            predict = functools.partial(
                self.net.estimate_multiple_poses,
                frame,
                options.image_scale_factor,
                options.flip_horizontal,
                options.output_stride,
                max_pose_detections=options.max_pose_detections,
                score_threshold=options.score_threshold,
                nms_radius=options.nms_radius,
            )

        loop = asyncio.get_running_loop()
        metrics = self._metrics_context
        start_time = time.perf_counter()
        try:
            output = await loop.run_in_executor(self._executor, predict)
        except Exception as e:
            duration = time.perf_counter() - start_time
            metrics.with_metric(posestream_frame_processing_seconds, mode).observe(duration)
            metrics.with_metric(posestream_frames_errors_total, mode).inc()
            logger.error(f"PoseNet {mode} pose estimation failed: {e}")
            raise EstimationError(f"{mode} pose estimation failed: {e}") from e

        duration = time.perf_counter() - start_time
        metrics.with_metric(posestream_frame_processing_seconds, mode).observe(duration)
        metrics.with_metric(posestream_frames_processed_total, mode).inc()

        poses = [output] if mode == SINGLE else list(output)
        metrics.with_metric(posestream_poses_detected, mode).observe(len(poses))

        results = [PoseResult(pose=pose, skeleton=self.skeleton(pose.keypoints)) for pose in poses]
        self.emit('pose', results)
        return results

    def _schedule(self, mode: str, maybe_input: Any) -> None:
        if self._closed:
            return
        previous = self._task
        self._error = None
        self._ended = False
        self._task = asyncio.create_task(self._poll(mode, maybe_input))
        self._task.add_done_callback(self._poll_done)
        if previous is not None and not previous.done():
            previous.cancel()
            logger.info(f"PoseNet loop switched to {mode} pose estimation")
        else:
            logger.info(f"PoseNet loop started ({mode} pose estimation)")

    async def _next_frame(self) -> None:
        await asyncio.sleep(self.frame_interval)

    async def _poll(self, mode: str, maybe_input: Any) -> None:
        while True:
            await self._next_frame()
            await self._estimate_frame(mode, maybe_input)

    def _poll_done(self, task: asyncio.Task) -> None:
        # a replaced loop ends silently
        if task is not self._task:
            return
        self._ended = True
        if task.cancelled():
            logger.info("PoseNet loop stopped")
            self.emit('close', None)
            return

        exc = task.exception()
        if isinstance(exc, StreamEnded):
            logger.info(f"PoseNet loop finished: {exc}")
            self.emit('close', None)
            return

        self._error = exc
        logger.error(f"PoseNet loop terminated: {exc}")
        self.emit('close', exc)

    async def join(self) -> None:
        """Wait for the polling loop to end; re-raise the error that ended it."""
        while self._task is not None:
            task = self._task
            await asyncio.wait([task])
            if task is self._task:
                break
        if self._error is not None:
            raise self._error

    async def stop(self) -> None:
        """Cancel the polling loop."""
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.wait([task])

    async def close(self) -> None:
        """Stop the loop and release the model.

        The bound source is left open unless the adapter was created with
        ``close_source=True``; otherwise the caller owns it.
        """
        if self._closed:
            return
        self._closed = True
        if not self.ready.done():
            self.ready.cancel()
            await asyncio.wait([self.ready])
        await self.stop()
        if self.net is not None:
            self.net.close()
        if self.close_source and self.video is not None:
            await self.video.close()
        self._executor.shutdown(wait=False)
        logger.info("PoseNet closed")

    async def stream(self, maxsize: Optional[int] = 1) -> AsyncIterator[List[PoseResult]]:
        """
        Iterate over emitted result batches until the loop ends.

        At most ``maxsize`` batches are buffered for a slow consumer; when the
        buffer is full the oldest pending batch is dropped. The default keeps
        only the latest batch. Pass ``maxsize=None`` for an unbounded buffer.
        """
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be a positive integer or None, got {maxsize}")

        if not self.is_running and (self._ended or self._closed):
            if self._error is not None:
                raise self._error
            return

        queue: asyncio.Queue = asyncio.Queue()
        labels = self._metrics_context.labels_for(self.detection_type)
        closing: List[_StreamClosed] = []

        def on_pose(results: List[PoseResult]) -> None:
            if closing:
                return
            if maxsize is not None and queue.qsize() >= maxsize:
                queue.get_nowait()
                posestream_batches_dropped_total.labels(**labels).inc()
            queue.put_nowait(results)

        def on_close(error: Optional[BaseException]) -> None:
            closing.append(_StreamClosed(error))
            queue.put_nowait(closing[0])

        self.on('pose', on_pose)
        self.on('close', on_close)
        try:
            while True:
                item = await queue.get()
                if isinstance(item, _StreamClosed):
                    if item.error is not None:
                        raise item.error
                    return
                yield item
        finally:
            self.off('pose', on_pose)
            self.off('close', on_close)

    async def __aenter__(self) -> "PoseNet":
        await self.ready
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
