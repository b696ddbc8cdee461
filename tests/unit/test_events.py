import asyncio

import pytest

from posestream.events import EventChannel


def test_emit_calls_handlers_in_order():
    channel = EventChannel()
    calls = []
    channel.on('pose', lambda value: calls.append(('a', value)))
    channel.on('pose', lambda value: calls.append(('b', value)))

    assert channel.emit('pose', 1) is True
    assert calls == [('a', 1), ('b', 1)]
    assert channel.emit('other', 1) is False


def test_off_and_once():
    channel = EventChannel()
    calls = []
    handler = channel.on('pose', calls.append)
    channel.once('pose', lambda value: calls.append(('once', value)))

    channel.emit('pose', 1)
    channel.off('pose', handler)
    channel.emit('pose', 2)

    assert calls == [1, ('once', 1)]
    assert channel.listener_count('pose') == 0


def test_handler_errors_propagate():
    channel = EventChannel()

    def broken(_):
        raise KeyError("handler")

    channel.on('pose', broken)
    with pytest.raises(KeyError):
        channel.emit('pose', None)


@pytest.mark.asyncio
async def test_async_handlers_are_scheduled():
    channel = EventChannel()
    done = asyncio.Event()

    async def handler(value):
        assert value == 'x'
        done.set()

    channel.on('pose', handler)
    channel.emit('pose', 'x')
    await asyncio.wait_for(done.wait(), 1)
