"""
Domain event primitives.

Lifecycle steps (issue, renew, verify, reject) are announced as events
so side effects such as audit logging stay out of the license manager.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Type
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Immutable record of a lifecycle step.

    ``aggregate_id`` is the ID of the license the event is about.
    """

    aggregate_id: str
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), kw_only=True
    )

    @property
    def event_type(self) -> str:
        """Event type name, taken from the concrete class."""
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        """Flat, JSON-friendly view of the event for log records."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "occurred_at": self.occurred_at.isoformat(),
        }


class EventHandler(ABC):
    """Receives events from an EventBus."""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """
        React to ``event``.

        Exceptions propagate to whoever published the event.
        """
        pass


class EventBus(ABC):
    """Routes published events to the handlers subscribed to their type."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Deliver ``event`` to every handler subscribed to its type.

        Args:
            event: Event to deliver
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Register ``handler`` for events of exactly ``event_type``.

        Args:
            event_type: DomainEvent subclass
            handler: Handler to call on publish
        """
        pass
