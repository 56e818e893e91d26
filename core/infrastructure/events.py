"""
Synchronous event bus kept in process memory.

Handlers run in subscription order, inside the call that publishes
the event.
"""

import logging
from collections import defaultdict
from typing import DefaultDict, List, Type

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    Event bus owned by one LicenseManager.

    A handler failure propagates to the publisher; the remaining
    handlers for that event are not called.
    """

    def __init__(self):
        self._subscriptions: DefaultDict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._subscriptions[event_type].append(handler)
        logger.debug("Subscribed %s to %s", type(handler).__name__, event_type.__name__)

    def publish(self, event: DomainEvent) -> None:
        handlers = self._subscriptions.get(type(event))
        if not handlers:
            logger.debug("No subscribers for %s", event.event_type)
            return

        for handler in handlers:
            try:
                handler.handle(event)
            except Exception:
                logger.error(
                    "%s failed while handling %s for %s",
                    type(handler).__name__,
                    event.event_type,
                    event.aggregate_id,
                    exc_info=True,
                )
                raise
