"""
Event handlers for domain events.

These handlers process domain events for side effects
such as audit logging.
"""

import logging

from core.domain.events import DomainEvent, EventBus, EventHandler
from licenses.domain.events import (
    LicenseIssued,
    LicenseRejected,
    LicenseRenewed,
    LicenseVerified,
)

logger = logging.getLogger("licenses.audit")


class AuditLogEventHandler(EventHandler):
    """Writes every license lifecycle event to the audit logger."""

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra=event.to_dict(),
        )


def register_event_handlers(event_bus: EventBus) -> None:
    """
    Subscribe the audit handler to all license events on ``event_bus``.

    Args:
        event_bus: Bus the license manager publishes to
    """
    audit_handler = AuditLogEventHandler()
    for event_type in (LicenseIssued, LicenseRenewed, LicenseVerified, LicenseRejected):
        event_bus.subscribe(event_type, audit_handler)
