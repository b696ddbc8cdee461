"""
Minimal observer registry used by the adapter to publish results.
"""
import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Optional

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class EventChannel:
    """Named-event subscriber registry.

    Handlers run synchronously in registration order. A handler that returns
    an awaitable has it scheduled as a task. Handler exceptions propagate to
    the caller of ``emit``.
    """

    def __init__(self):
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)
        self._pending: set = set()

    def on(self, event: str, handler: Handler) -> Handler:
        """Register ``handler`` for ``event``. Returns the handler so it can be used as a decorator."""
        self._handlers[event].append(handler)
        return handler

    def once(self, event: str, handler: Handler) -> Handler:
        def _once(*args: Any) -> Any:
            self.off(event, _once)
            return handler(*args)

        self.on(event, _once)
        return _once

    def off(self, event: str, handler: Optional[Handler] = None) -> None:
        """Remove ``handler``, or every handler for ``event`` when none is given."""
        if handler is None:
            self._handlers.pop(event, None)
            return
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """Call every handler of ``event``. Returns True if there was at least one."""
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            result = handler(*args)
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._handler_done)
        return bool(handlers)

    def _handler_done(self, task: asyncio.Future) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Async event handler failed: {exc}")
