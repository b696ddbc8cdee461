import numpy as np
import pytest

from fakes import FakeModel, FakeSource, RecordingLoader


@pytest.fixture
def frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def other_frame():
    return np.full((48, 64, 3), 255, dtype=np.uint8)


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def loader(fake_model):
    return RecordingLoader(fake_model)


@pytest.fixture
def source(frame):
    return FakeSource(frame)
