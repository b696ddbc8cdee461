import logging

import pytest

from posestream.utils import setup_logging


def test_setup_logging_sets_level():
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    setup_logging(logging.WARNING)
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging("loud")
