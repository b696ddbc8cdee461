import cv2
import numpy as np
import pytest

from posestream.errors import NoInputError
from posestream.io import (
    MediaElement, is_media_handle, load_image, read_media, resolve_input, unwrap_source
)

from fakes import FakeSource


def test_raw_frame_wins_over_bound_source(frame, source):
    assert resolve_input(frame, source) is frame


def test_raw_source_wins_over_bound_source(frame, source):
    other = FakeSource(frame)
    assert resolve_input(other, source) is other


def test_wrapped_handle_wins_over_bound_source(frame, source):
    assert resolve_input(MediaElement(frame), source) is frame


def test_any_object_with_elt_is_unwrapped(frame):
    class Wrapper:
        def __init__(self, elt):
            self.elt = elt

    assert resolve_input(Wrapper(frame)) is frame


def test_absent_input_falls_back_to_bound_source(source):
    assert resolve_input(None, source) is source


def test_unsupported_input_falls_back_to_bound_source(source):
    assert resolve_input("not a frame", source) is source


def test_no_input_and_no_source_raises():
    with pytest.raises(NoInputError):
        resolve_input(None, None)
    with pytest.raises(ValueError):
        resolve_input(MediaElement("nope"), None)


def test_empty_array_is_not_a_frame():
    assert not is_media_handle(np.zeros((0, 0, 3), dtype=np.uint8))


def test_unwrap_source_only_accepts_sources(frame, source):
    assert unwrap_source(source) is source
    assert unwrap_source(MediaElement(source)) is source
    assert unwrap_source(frame) is None
    assert unwrap_source({'elt': source}) is None


@pytest.mark.asyncio
async def test_read_media(frame, source):
    assert await read_media(frame) is frame
    assert await read_media(source) is frame
    assert source.reads == 1


def test_load_image(tmp_path):
    path = tmp_path / "frame.png"
    image = np.full((10, 12, 3), 7, dtype=np.uint8)
    assert cv2.imwrite(str(path), image)
    loaded = load_image(str(path))
    assert loaded.shape == (10, 12, 3)
    assert np.array_equal(loaded, image)


def test_load_image_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(str(tmp_path / "missing.png"))
