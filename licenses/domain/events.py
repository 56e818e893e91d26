"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from core.domain.events import DomainEvent


@dataclass(frozen=True)
class LicenseIssued(DomainEvent):
    """Event raised when a license is generated and signed."""

    user_name: str
    device_id: str
    level: str
    expires_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            user_name=self.user_name,
            device_id=self.device_id,
            license_level=self.level,
            expires_at=self.expires_at.isoformat(),
        )
        return data


@dataclass(frozen=True)
class LicenseRenewed(DomainEvent):
    """Event raised when a license is renewed and re-signed."""

    previous_expiration: datetime
    new_expiration: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            previous_expiration=self.previous_expiration.isoformat(),
            new_expiration=self.new_expiration.isoformat(),
        )
        return data


@dataclass(frozen=True)
class LicenseVerified(DomainEvent):
    """Event raised when a license passes verification."""

    device_id: str

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["device_id"] = self.device_id
        return data


@dataclass(frozen=True)
class LicenseRejected(DomainEvent):
    """Event raised when a license fails verification."""

    device_id: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(device_id=self.device_id, reason=self.reason)
        return data
