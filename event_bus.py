"""
event_bus.py
============
The Notification Channel: a synchronous, named-event publish/subscribe
registry scoped to one running session.

The engine publishes the events below; clients (cli.py, app.py) subscribe to
show toasts and refresh views. Handlers run in subscription order on the
caller's stack before publish() returns. Publishing an event nobody listens
to does nothing.

Event names and payload keys:
    clue:collected        {"clue": Clue}
    clue:unlocked         {"clue": Clue}
    clue:markedImportant  {"clue_id": str, "is_important": bool}
    question:unlocked     {"suspect_id": str, "question": Question}
    deduction:submitted   {"correct": bool, "explanation": str}
    case:completed        {}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

logger = logging.getLogger("detective.event_bus")

Handler = Callable[[Mapping[str, Any]], None]


# ---------------------------------------------------------------------------
# Event names
# ---------------------------------------------------------------------------

CLUE_COLLECTED        = "clue:collected"
CLUE_UNLOCKED         = "clue:unlocked"
CLUE_MARKED_IMPORTANT = "clue:markedImportant"
QUESTION_UNLOCKED     = "question:unlocked"
DEDUCTION_SUBMITTED   = "deduction:submitted"
CASE_COMPLETED        = "case:completed"


class EventBus:
    """Ordered handler lists keyed by event name."""

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, event: str, handler: Handler) -> Handler:
        """
        Register ``handler`` for ``event``.

        Returns the handler so it can be kept for a later unsubscribe().
        Subscribing the same handler twice delivers the event twice.
        """
        self._handlers.setdefault(event, []).append(handler)
        logger.debug("Subscribed %r to %s", handler, event)
        return handler

    def unsubscribe(self, event: str, handler: Handler) -> bool:
        """
        Remove the first registration of ``handler`` for ``event``.

        Returns:
            False if the handler was not subscribed.
        """
        handlers = self._handlers.get(event)
        if not handlers or handler not in handlers:
            return False
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event]
        return True

    def publish(self, event: str, payload: Optional[Mapping[str, Any]] = None) -> None:
        """
        Deliver ``payload`` to every handler of ``event`` in subscription order.

        A handler that raises propagates to the publisher; handlers after it
        are not called.
        """
        handlers = self._handlers.get(event)
        if not handlers:
            logger.debug("Published %s with no subscribers", event)
            return
        data = payload if payload is not None else {}
        # Copy so handlers may unsubscribe themselves mid-delivery.
        for handler in list(handlers):
            handler(data)

    def subscriber_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def clear(self) -> None:
        """Drop every subscription. Called when a session is torn down."""
        self._handlers.clear()
        logger.debug("All event subscriptions cleared")
