"""
In-process domain events.

Services publish after a write (e.g. "exam.created"); other apps subscribe
without importing the publisher. Payloads carry ids as strings. Handlers run
synchronously inside the publisher's transaction, so a failing handler
aborts the write.
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

_registry: Dict[str, List[Handler]] = defaultdict(list)


def _key(fn: Handler) -> tuple:
    return fn.__module__, fn.__qualname__


def subscribe(event_name: str):
    def _decorator(fn: Handler) -> Handler:
        # one handler per module-level name; a reloaded module replaces its old function
        key = _key(fn)
        _registry[event_name] = [h for h in _registry[event_name] if _key(h) != key] + [fn]
        return fn

    return _decorator


def publish(event_name: str, payload: Dict[str, Any]) -> int:
    """Call every handler for event_name. Returns how many ran."""
    handlers = list(_registry.get(event_name, ()))
    for handler in handlers:
        handler(payload)
    logger.debug("event %s delivered to %d handler(s)", event_name, len(handlers))
    return len(handlers)
